"""Payment gateway port (abstract interface).

Defines the contract that every payment provider adapter must implement, plus
the value types that cross it. This enables swapping between FakeGateway
(dev/test) and YunoGateway (hosted payments provider) without changing the
request handlers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from payments.customer import CustomerProfile

DEFAULT_DESCRIPTION = "E-commerce Purchase"


class PaymentStatus(Enum):
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    PENDING = "PENDING"
    DECLINED = "DECLINED"
    REJECTED = "REJECTED"
    CANCELED = "CANCELED"
    ERROR = "ERROR"


class PaymentSubStatus(Enum):
    APPROVED = "APPROVED"
    PENDING = "PENDING"


class PaymentOutcome(Enum):
    """How the storefront should react to a provider result."""

    APPROVED = "Approved"
    PROCESSING = "Processing"
    CONTINUATION = "Continuation"
    DECLINED = "Declined"


@dataclass(frozen=True)
class LineItem:
    id: str
    name: str
    quantity: int
    unit_amount: int
    category: str = "general"


@dataclass(frozen=True)
class CheckoutOrder:
    """Everything needed to open a checkout session with the provider."""

    merchant_order_id: str
    country: str
    currency: str
    amount: int
    description: str
    customer_id: str
    items: tuple[LineItem, ...] | None = None


@dataclass(frozen=True)
class CheckoutSession:
    """A provider-side checkout session scoping one purchase attempt."""

    checkout_session: str
    merchant_order_id: str
    country: str
    currency: str
    amount: int
    payment_description: str
    customer_id: str

    def to_dict(self) -> dict:
        return {
            "checkout_session": self.checkout_session,
            "merchant_order_id": self.merchant_order_id,
            "country": self.country,
            "payment_description": self.payment_description,
            "customer_id": self.customer_id,
            "amount": self.amount,
            "currency": self.currency,
        }


@dataclass(frozen=True)
class PaymentAttempt:
    """A single payment submission: one session, one one-time token."""

    checkout_session: str
    one_time_token: str
    amount: int
    currency: str
    merchant_order_id: str
    idempotency_key: str


@dataclass(frozen=True)
class PaymentResult:
    """Provider's answer to a payment submission.

    ``raw`` keeps the provider payload untouched; the backend returns it to
    the browser as-is.
    """

    status: str | None
    sub_status: str | None = None
    payment_id: str | None = None
    requires_action: bool = False
    raw: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "PaymentResult":
        return cls(
            status=payload.get("status"),
            sub_status=payload.get("sub_status"),
            payment_id=payload.get("id"),
            requires_action=bool(payload.get("requiresAction", False)),
            raw=payload,
        )

    def outcome(self) -> PaymentOutcome:
        if self.status == PaymentStatus.SUCCEEDED.value:
            if self.sub_status == PaymentSubStatus.APPROVED.value:
                return PaymentOutcome.APPROVED
            if self.sub_status == PaymentSubStatus.PENDING.value:
                return PaymentOutcome.PROCESSING
        if self.requires_action:
            return PaymentOutcome.CONTINUATION
        return PaymentOutcome.DECLINED


@dataclass(frozen=True)
class CustomerSession:
    customer_session: str
    raw: dict[str, Any] = field(default_factory=dict, compare=False)


class PaymentGateway(ABC):
    """Abstract payment provider interface."""

    @abstractmethod
    def create_checkout_session(self, order: CheckoutOrder) -> CheckoutSession:
        """Open a checkout session for ``order``."""
        ...

    @abstractmethod
    def submit_payment(self, attempt: PaymentAttempt, customer_id: str, country: str) -> PaymentResult:
        """Exchange a one-time token for a charge attempt."""
        ...

    @abstractmethod
    def create_customer_session(self, country: str) -> CustomerSession:
        """Open a customer session (used by enrollment flows)."""
        ...

    @abstractmethod
    def create_customer(self, profile: CustomerProfile) -> str:
        """Create a customer record and return the provider's customer id."""
        ...
