import uuid

import pytest
from checkout.backend import CheckoutBackend
from checkout.cart import CartItem
from checkout.orchestrator import CheckoutOrchestrator
from checkout.widget.fake_widget import FakeWidget
from payments.gateway.port import CheckoutSession, PaymentResult


class StubBackend(CheckoutBackend):
    """In-memory CheckoutBackend that records calls and replays scripted answers."""

    def __init__(self):
        self.session_error: Exception | None = None
        self.payment_error: Exception | None = None
        self.payment_payload: dict = {"status": "SUCCEEDED", "sub_status": "APPROVED"}
        self.session_calls: list[dict] = []
        self.payment_calls: list[dict] = []

    def create_session(self, country, amount, items):
        self.session_calls.append({"country": country, "amount": amount, "items": items})
        if self.session_error is not None:
            raise self.session_error
        return CheckoutSession(
            checkout_session=str(uuid.uuid4()),
            merchant_order_id=f"ORDER_{uuid.uuid4().hex}",
            country=country,
            currency="COP",
            amount=amount,
            payment_description="Purchase: " + ", ".join(item["name"] for item in items),
            customer_id="cus_stub",
        )

    def submit_payment(self, country, session_id, token, amount):
        self.payment_calls.append({"country": country, "session_id": session_id, "token": token, "amount": amount})
        if self.payment_error is not None:
            raise self.payment_error
        return PaymentResult.from_payload(dict(self.payment_payload))


@pytest.fixture()
def backend():
    return StubBackend()


@pytest.fixture()
def widget():
    return FakeWidget()


@pytest.fixture()
def shirt_cart():
    return [CartItem(product_id="A", name="Shirt", quantity=2, unit_amount=2500)]


@pytest.fixture()
def orchestrator(backend, widget, shirt_cart):
    return CheckoutOrchestrator(backend, widget, shirt_cart)


@pytest.fixture()
def ready_orchestrator(orchestrator):
    """An attempt whose widget has rendered and is waiting for the user to pay."""
    orchestrator.begin()
    return orchestrator
