"""Payment widget port.

The capability set the orchestrator needs from the provider's embedded
payment widget. The browser SDK implements it in production; ``FakeWidget``
implements it in memory for development and tests.
"""

from abc import ABC, abstractmethod

from checkout.events import WidgetCallbacks


class PaymentWidget(ABC):
    @abstractmethod
    def is_loaded(self) -> bool:
        """Whether the widget library has finished loading."""
        ...

    @abstractmethod
    def start_checkout(
        self,
        checkout_session: str,
        render_target: str,
        country: str,
        callbacks: WidgetCallbacks,
    ) -> None:
        """Initialise the widget for one checkout session."""
        ...

    @abstractmethod
    def mount(self, payment_method_type: str) -> None:
        ...

    @abstractmethod
    def start_payment(self) -> None:
        """Ask the widget to tokenize the payment method.

        The token arrives later through ``callbacks.on_token_created``.
        """
        ...

    @abstractmethod
    def continue_payment(self) -> None:
        """Hand control back to the widget for a continuation step (e.g. 3DS)."""
        ...

    @abstractmethod
    def unmount(self) -> None:
        ...
