"""Logging for the checkout orchestrator."""

import structlog

logger = structlog.get_logger("checkout")
