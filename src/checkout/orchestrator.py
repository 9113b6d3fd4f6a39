"""Checkout orchestrator: the state machine for one purchase attempt.

State Machine:
    UNINITIALIZED → SESSION_CREATING → SESSION_READY → WIDGET_MOUNTING
        → WIDGET_READY → PAYMENT_SUBMITTING
        → SUCCEEDED / PENDING / FAILED / CONTINUATION_REQUIRED

The widget talks back only through ``WidgetCallbacks``, which post events onto
the orchestrator's channel. ``process_events()`` drains the channel and applies
each event as a transition, so the whole flow can be driven step by step
without a browser.

An attempt is single-use. After a terminal state the UI closes the checkout
and calls ``restart()``, which starts over with a new session and a new
merchant order id. Nothing is retried automatically.
"""

from collections import deque
from enum import Enum
from uuid import uuid4

from checkout.backend import CheckoutBackend
from checkout.cart import CartItem, cart_total
from checkout.events import TokenCreated, WidgetCallbacks, WidgetEvent, WidgetFailed, WidgetRendered
from checkout.utils.logging import logger
from checkout.widget.port import PaymentWidget
from payments.gateway.port import CheckoutSession, PaymentOutcome, PaymentResult
from shared.errors import CheckoutError, GatewayError, NetworkError, StateError, ValidationError

DEFAULT_RENDER_TARGET = "#yuno-payment-container"
DEFAULT_PAYMENT_METHOD = "CARD"

SUCCESS_MESSAGE = "Payment successful! Thank you for your purchase."
PROCESSING_MESSAGE = "Payment is being processed. Please wait..."
CONTINUATION_MESSAGE = "Additional verification required. Follow the instructions in the payment form."
DECLINED_MESSAGE = "Payment failed. Please try again."
NOT_READY_MESSAGE = "Payment form is not ready. Please wait a moment."
MOUNT_FAILED_MESSAGE = "Failed to initialize payment form. Please try again."


class CheckoutState(Enum):
    UNINITIALIZED = "Uninitialized"
    SESSION_CREATING = "SessionCreating"
    SESSION_READY = "SessionReady"
    WIDGET_MOUNTING = "WidgetMounting"
    WIDGET_READY = "WidgetReady"
    PAYMENT_SUBMITTING = "PaymentSubmitting"
    SUCCEEDED = "Succeeded"
    PENDING = "Pending"
    FAILED = "Failed"
    CONTINUATION_REQUIRED = "ContinuationRequired"


# State machine transition map
_VALID_TRANSITIONS = {
    CheckoutState.UNINITIALIZED: {CheckoutState.SESSION_CREATING},
    CheckoutState.SESSION_CREATING: {CheckoutState.SESSION_READY, CheckoutState.FAILED},
    CheckoutState.SESSION_READY: {CheckoutState.WIDGET_MOUNTING},
    CheckoutState.WIDGET_MOUNTING: {CheckoutState.WIDGET_READY, CheckoutState.FAILED},
    CheckoutState.WIDGET_READY: {CheckoutState.PAYMENT_SUBMITTING, CheckoutState.FAILED},
    CheckoutState.PAYMENT_SUBMITTING: {
        CheckoutState.SUCCEEDED,
        CheckoutState.PENDING,
        CheckoutState.FAILED,
        CheckoutState.CONTINUATION_REQUIRED,
    },
    CheckoutState.SUCCEEDED: set(),  # Terminal
    CheckoutState.PENDING: set(),  # Terminal, never polled
    CheckoutState.FAILED: set(),  # Terminal for the attempt
    CheckoutState.CONTINUATION_REQUIRED: set(),  # Terminal, the widget owns the continuation
}

TERMINAL_STATES = frozenset(
    {
        CheckoutState.SUCCEEDED,
        CheckoutState.PENDING,
        CheckoutState.FAILED,
        CheckoutState.CONTINUATION_REQUIRED,
    }
)

_ATTEMPT_ERRORS = (GatewayError, NetworkError, ValidationError)

_OUTCOME_STATES = {
    PaymentOutcome.APPROVED: (CheckoutState.SUCCEEDED, SUCCESS_MESSAGE),
    PaymentOutcome.PROCESSING: (CheckoutState.PENDING, PROCESSING_MESSAGE),
    PaymentOutcome.CONTINUATION: (CheckoutState.CONTINUATION_REQUIRED, CONTINUATION_MESSAGE),
    PaymentOutcome.DECLINED: (CheckoutState.FAILED, DECLINED_MESSAGE),
}


class CheckoutOrchestrator:
    """Drives one checkout attempt against the storefront backend and a payment widget."""

    def __init__(
        self,
        backend: CheckoutBackend,
        widget: PaymentWidget,
        items: list[CartItem],
        country: str = "CO",
        render_target: str = DEFAULT_RENDER_TARGET,
        payment_method: str = DEFAULT_PAYMENT_METHOD,
    ) -> None:
        self.backend = backend
        self.widget = widget
        self.items = list(items)
        self.country = country
        self.render_target = render_target
        self.payment_method = payment_method

        self.attempt_id = uuid4().hex
        self.state = CheckoutState.UNINITIALIZED
        self.message: str | None = None
        self.session: CheckoutSession | None = None
        self.result: PaymentResult | None = None
        self.history: list[tuple[CheckoutState, CheckoutState]] = []

        self._events: deque[WidgetEvent] = deque()
        self._begun = False
        self._token_submitted = False
        self._continuation_requested = False
        self._mounted = False

    @property
    def amount(self) -> int:
        return cart_total(self.items)

    @property
    def is_finished(self) -> bool:
        return self.state in TERMINAL_STATES

    # -------------------------------------------------------------------
    # User-driven operations
    # -------------------------------------------------------------------
    def begin(self) -> None:
        """Create the checkout session and mount the widget.

        Safe to call repeatedly: only the first call of an attempt does anything.
        """
        if self._begun:
            logger.debug("checkout_begin_ignored", attempt_id=self.attempt_id, state=self.state.value)
            return
        if not self.items:
            raise StateError("Cannot start checkout with an empty cart")
        if not self.widget.is_loaded():
            raise StateError("Payment widget is not loaded yet")
        self._begun = True

        self._transition(CheckoutState.SESSION_CREATING)
        try:
            session = self.backend.create_session(
                self.country,
                self.amount,
                [item.to_payload() for item in self.items],
            )
        except _ATTEMPT_ERRORS as exc:
            self._fail(f"Failed to initialize payment: {exc.message}", exc)
            return

        self.session = session
        self._transition(CheckoutState.SESSION_READY)
        self._mount_widget(session)
        self.process_events()

    def pay(self) -> None:
        """The user pressed "Pay": ask the widget to tokenize the payment method."""
        if self.state != CheckoutState.WIDGET_READY:
            raise StateError(NOT_READY_MESSAGE)
        self._transition(CheckoutState.PAYMENT_SUBMITTING)
        self.widget.start_payment()
        self.process_events()

    def close(self) -> None:
        """Unmount the widget and abandon the attempt.

        The provider is not told; an abandoned session simply expires.
        """
        if self._mounted:
            self.widget.unmount()
            self._mounted = False
        self._events.clear()
        logger.info("checkout_closed", attempt_id=self.attempt_id, state=self.state.value)

    def restart(self) -> "CheckoutOrchestrator":
        """Close this attempt and return a fresh, unstarted one for the same cart."""
        self.close()
        return CheckoutOrchestrator(
            self.backend,
            self.widget,
            self.items,
            country=self.country,
            render_target=self.render_target,
            payment_method=self.payment_method,
        )

    # -------------------------------------------------------------------
    # Event channel
    # -------------------------------------------------------------------
    def post(self, event: WidgetEvent) -> None:
        self._events.append(event)

    def process_events(self) -> None:
        """Apply every queued widget event in arrival order."""
        while self._events:
            self.dispatch(self._events.popleft())

    def dispatch(self, event: WidgetEvent) -> None:
        if isinstance(event, TokenCreated):
            self._on_token_created(event.token)
        elif isinstance(event, WidgetRendered):
            self._on_rendered()
        elif isinstance(event, WidgetFailed):
            self._on_widget_failed(event.reason)
        else:
            raise TypeError(f"Unknown widget event: {event!r}")

    # -------------------------------------------------------------------
    # Event handlers
    # -------------------------------------------------------------------
    def _on_rendered(self) -> None:
        if self.state != CheckoutState.WIDGET_MOUNTING:
            logger.debug("widget_rendered_ignored", attempt_id=self.attempt_id, state=self.state.value)
            return
        self._transition(CheckoutState.WIDGET_READY)

    def _on_widget_failed(self, reason: str) -> None:
        if CheckoutState.FAILED not in _VALID_TRANSITIONS[self.state]:
            logger.warning("widget_error_ignored", attempt_id=self.attempt_id, state=self.state.value, reason=reason)
            return
        self._fail(DECLINED_MESSAGE, reason=reason)

    def _on_token_created(self, token: str) -> None:
        if self.session is None:
            self.message = NOT_READY_MESSAGE
            raise StateError("No active checkout session to pay against")
        if self._token_submitted:
            logger.warning("duplicate_token_ignored", attempt_id=self.attempt_id)
            return
        # The widget's own pay button can produce a token without pay()
        if self.state == CheckoutState.WIDGET_READY:
            self._transition(CheckoutState.PAYMENT_SUBMITTING)
        if self.state != CheckoutState.PAYMENT_SUBMITTING:
            self.message = NOT_READY_MESSAGE
            raise StateError(f"Cannot submit a payment while {self.state.value}")

        self._token_submitted = True
        try:
            result = self.backend.submit_payment(self.country, self.session.checkout_session, token, self.amount)
        except _ATTEMPT_ERRORS as exc:
            self._fail(f"Payment failed: {exc.message}", exc)
            return

        self.result = result
        self._apply_result(result)

    def _apply_result(self, result: PaymentResult) -> None:
        outcome = result.outcome()
        target, message = _OUTCOME_STATES[outcome]
        self.message = message
        self._transition(target)
        logger.info(
            "payment_result_applied",
            attempt_id=self.attempt_id,
            outcome=outcome.value,
            payment_id=result.payment_id,
        )
        if target == CheckoutState.CONTINUATION_REQUIRED and not self._continuation_requested:
            self._continuation_requested = True
            self.widget.continue_payment()

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _mount_widget(self, session: CheckoutSession) -> None:
        self._transition(CheckoutState.WIDGET_MOUNTING)
        try:
            self.widget.start_checkout(
                session.checkout_session,
                self.render_target,
                self.country,
                WidgetCallbacks.posting_to(self.post),
            )
            self._mounted = True
            self.widget.mount(self.payment_method)
        except Exception as exc:
            # Any widget failure while mounting ends the attempt
            logger.exception("widget_mount_failed", attempt_id=self.attempt_id)
            self._fail(MOUNT_FAILED_MESSAGE, reason=str(exc))

    def _fail(self, message: str, error: CheckoutError | None = None, reason: str | None = None) -> None:
        self.message = message
        self._transition(CheckoutState.FAILED)
        logger.warning(
            "checkout_failed",
            attempt_id=self.attempt_id,
            error_type=type(error).__name__ if error else None,
            error=error.message if error else reason,
        )

    def _transition(self, target: CheckoutState) -> None:
        current = self.state
        if target not in _VALID_TRANSITIONS.get(current, set()):
            raise StateError(f"Cannot transition from {current.value} to {target.value}")
        self.state = target
        self.history.append((current, target))
        logger.info("checkout_transition", attempt_id=self.attempt_id, from_state=current.value, to_state=target.value)
