"""Events posted by the payment widget onto the orchestrator's channel.

The widget never drives the state machine directly. Its callbacks only
enqueue one of these events; ``CheckoutOrchestrator.process_events()``
applies them in order.
"""

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class TokenCreated:
    """The widget produced a one-time payment token."""

    token: str


@dataclass(frozen=True)
class WidgetFailed:
    reason: str


@dataclass(frozen=True)
class WidgetRendered:
    pass


WidgetEvent = TokenCreated | WidgetFailed | WidgetRendered


@dataclass(frozen=True)
class WidgetCallbacks:
    """The three hooks a widget must honour after ``start_checkout``."""

    on_token_created: Callable[[str], None]
    on_error: Callable[[str], None]
    on_rendered: Callable[[], None]

    @classmethod
    def posting_to(cls, post: Callable[[WidgetEvent], None]) -> "WidgetCallbacks":
        """Callbacks that turn each widget hook into an event on ``post``."""
        return cls(
            on_token_created=lambda token: post(TokenCreated(token)),
            on_error=lambda reason: post(WidgetFailed(reason)),
            on_rendered=lambda: post(WidgetRendered()),
        )
