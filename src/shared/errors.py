"""Error taxonomy shared by the payments backend and the checkout orchestrator.

- ValidationError: malformed client input, rejected before any network call
- GatewayError: non-success response from the payment provider
- NetworkError: transport failure reaching the provider
- StateError: operation not allowed in the current checkout state
- ConfigurationError: process cannot start (missing or invalid settings)
"""

from typing import Any


class CheckoutError(Exception):
    """Base class for every error raised by the storefront."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(CheckoutError):
    """Client input failed validation.

    ``messages`` maps a field name to the list of problems found with it,
    e.g. ``{"amount": ["Amount must be a positive number"]}``.
    """

    def __init__(self, messages: dict[str, list[str]], title: str = "Invalid request") -> None:
        self.messages = messages
        self.title = title
        summary = "; ".join(msg for msgs in messages.values() for msg in msgs)
        super().__init__(summary or title)


class GatewayError(CheckoutError):
    """The payment provider answered with a non-success response."""

    def __init__(self, message: str, status_code: int | None = None, payload: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class NetworkError(CheckoutError):
    """The payment provider could not be reached."""


class StateError(CheckoutError):
    """The checkout attempt is not in a state that allows the operation."""


class ConfigurationError(CheckoutError):
    """Startup configuration is missing or invalid."""
