"""Checkout session creation: command and handler.

Opens a provider checkout session for the cart the browser sends. Input has
already been validated by the API schemas; this handler only fills defaults
and issues the single outbound call.
"""

import time
from dataclasses import dataclass
from uuid import uuid4

import structlog

from payments.context import StoreContext
from payments.gateway.port import DEFAULT_DESCRIPTION, CheckoutOrder, CheckoutSession, LineItem
from shared.countries import is_supported, resolve

logger = structlog.get_logger(__name__)

DEFAULT_AMOUNT = 2000


def new_merchant_order_id(prefix: str = "ORDER") -> str:
    """Merchant order id: millisecond timestamp plus a random 128-bit suffix."""
    return f"{prefix}_{int(time.time() * 1000)}_{uuid4().hex}"


def describe(items: tuple[LineItem, ...] | None) -> str:
    if items:
        return f"Purchase: {', '.join(item.name for item in items)}"
    return DEFAULT_DESCRIPTION


@dataclass(frozen=True)
class OpenCheckoutSession:
    """Open a checkout session for one purchase attempt."""

    country: str
    amount: int | None = None
    items: tuple[LineItem, ...] | None = None


def open_checkout_session(command: OpenCheckoutSession, context: StoreContext) -> CheckoutSession:
    home = context.settings.default_country
    if not is_supported(command.country):
        logger.info("country_fallback", country=command.country, resolved_as=home)
    amount = command.amount if command.amount is not None else DEFAULT_AMOUNT
    order = CheckoutOrder(
        merchant_order_id=new_merchant_order_id(),
        country=command.country,
        currency=resolve(command.country, home).currency,
        amount=amount,
        description=describe(command.items),
        customer_id=context.customer_id,
        items=command.items,
    )

    session = context.gateway.create_checkout_session(order)
    logger.info(
        "checkout_session_created",
        checkout_session=session.checkout_session,
        merchant_order_id=session.merchant_order_id,
        country=session.country,
        amount=session.amount,
        currency=session.currency,
    )
    return session
