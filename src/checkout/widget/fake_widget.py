"""In-memory payment widget for development and testing.

Records every call made by the orchestrator and lets the test play the
widget's side of the conversation: render, emit a token, or fail.
"""

from uuid import uuid4

from checkout.events import WidgetCallbacks
from checkout.widget.port import PaymentWidget


class FakeWidget(PaymentWidget):
    """Configurable fake payment widget."""

    def __init__(self, loaded: bool = True, auto_render: bool = True, auto_token: bool = False) -> None:
        self.loaded = loaded
        self.auto_render = auto_render
        self.auto_token = auto_token
        self.callbacks: WidgetCallbacks | None = None
        self.checkout_session: str | None = None
        self.country: str | None = None
        self.render_target: str | None = None
        self.mounted_method: str | None = None
        self.calls: list[str] = []
        self.continuation_count = 0

    def is_loaded(self) -> bool:
        return self.loaded

    def start_checkout(self, checkout_session, render_target, country, callbacks) -> None:
        self.calls.append("start_checkout")
        self.checkout_session = checkout_session
        self.render_target = render_target
        self.country = country
        self.callbacks = callbacks

    def mount(self, payment_method_type: str) -> None:
        self.calls.append("mount")
        self.mounted_method = payment_method_type
        if self.auto_render:
            self.render()

    def start_payment(self) -> None:
        self.calls.append("start_payment")
        if self.auto_token:
            self.emit_token()

    def continue_payment(self) -> None:
        self.calls.append("continue_payment")
        self.continuation_count += 1

    def unmount(self) -> None:
        self.calls.append("unmount")
        self.mounted_method = None

    # -------------------------------------------------------------------
    # Widget-side actions, driven by tests
    # -------------------------------------------------------------------
    def render(self) -> None:
        self._require_callbacks().on_rendered()

    def emit_token(self, token: str | None = None) -> str:
        token = token or f"ott_{uuid4().hex}"
        self._require_callbacks().on_token_created(token)
        return token

    def fail(self, reason: str = "Card form could not be loaded") -> None:
        self._require_callbacks().on_error(reason)

    def _require_callbacks(self) -> WidgetCallbacks:
        if self.callbacks is None:
            raise RuntimeError("start_checkout has not been called on this widget")
        return self.callbacks
