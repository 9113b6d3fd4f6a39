"""Payment submission: command and handler.

Exchanges the widget's one-time token for a charge attempt. Each call gets a
fresh idempotency key, so a caller that retries creates a new attempt at the
provider; deduplicating retries is the caller's responsibility.
"""

from dataclasses import dataclass
from uuid import uuid4

import structlog

from payments.context import StoreContext
from payments.gateway.port import PaymentAttempt, PaymentResult
from payments.payment.session import DEFAULT_AMOUNT, new_merchant_order_id
from shared.countries import resolve

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SubmitPayment:
    """Charge the one-time token against an existing checkout session."""

    country: str
    checkout_session: str
    one_time_token: str
    amount: int | None = None


def submit_payment(command: SubmitPayment, context: StoreContext) -> PaymentResult:
    attempt = PaymentAttempt(
        checkout_session=command.checkout_session,
        one_time_token=command.one_time_token,
        amount=command.amount if command.amount is not None else DEFAULT_AMOUNT,
        currency=resolve(command.country, context.settings.default_country).currency,
        merchant_order_id=new_merchant_order_id("PAYMENT"),
        idempotency_key=str(uuid4()),
    )

    result = context.gateway.submit_payment(attempt, customer_id=context.customer_id, country=command.country)
    logger.info(
        "payment_submitted",
        checkout_session=attempt.checkout_session,
        merchant_order_id=attempt.merchant_order_id,
        idempotency_key=attempt.idempotency_key,
        amount=attempt.amount,
        status=result.status,
        sub_status=result.sub_status,
        outcome=result.outcome().value,
    )
    return result
