"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; nothing is shared across users.
"""

from dataclasses import dataclass


@dataclass
class CheckoutState:
    """Tracks one simulated checkout attempt."""

    country: str = "CO"
    checkout_session: str | None = None
    merchant_order_id: str | None = None
    amount: int = 0
    payment_status: str | None = None
