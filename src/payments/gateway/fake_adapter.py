"""Configurable fake payment gateway for development and testing.

This adapter simulates the hosted-payments provider without any external
calls. It can be configured at runtime to succeed or fail, making it useful
for:
- Manual API testing without provider credentials
- Automated tests with predictable outcomes, including asserting that no
  outbound call was made
"""

from collections import deque
from typing import Any
from uuid import uuid4

from payments.customer import CustomerProfile
from payments.gateway.port import (
    CheckoutOrder,
    CheckoutSession,
    CustomerSession,
    PaymentAttempt,
    PaymentGateway,
    PaymentResult,
)
from shared.errors import GatewayError, NetworkError

APPROVED_RESULT = {"status": "SUCCEEDED", "sub_status": "APPROVED"}


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_payload: dict[str, Any] = {"code": "INVALID_REQUEST", "messages": ["Declined by fake gateway"]}
        self.network_down: bool = False
        self.customer_creation_fails: bool = False
        self.payment_results: deque[dict[str, Any]] = deque()
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool = True,
        failure_payload: dict[str, Any] | None = None,
        network_down: bool = False,
        customer_creation_fails: bool = False,
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        if failure_payload is not None:
            self.failure_payload = failure_payload
        self.network_down = network_down
        self.customer_creation_fails = customer_creation_fails

    def queue_payment_result(self, payload: dict[str, Any]) -> None:
        """Script the provider payload returned by the next submit_payment call."""
        self.payment_results.append(payload)

    def calls_to(self, method: str) -> list[dict]:
        return [call for call in self.calls if call["method"] == method]

    def _fail_if_configured(self) -> None:
        if self.network_down:
            raise NetworkError("Could not reach payment provider: fake network outage")
        if not self.should_succeed:
            raise GatewayError("Payment provider rejected the request", status_code=400, payload=self.failure_payload)

    def create_checkout_session(self, order: CheckoutOrder) -> CheckoutSession:
        self.calls.append({"method": "create_checkout_session", "order": order})
        self._fail_if_configured()
        return CheckoutSession(
            checkout_session=str(uuid4()),
            merchant_order_id=order.merchant_order_id,
            country=order.country,
            currency=order.currency,
            amount=order.amount,
            payment_description=order.description,
            customer_id=order.customer_id,
        )

    def submit_payment(self, attempt: PaymentAttempt, customer_id: str, country: str) -> PaymentResult:
        self.calls.append(
            {
                "method": "submit_payment",
                "attempt": attempt,
                "customer_id": customer_id,
                "country": country,
            }
        )
        self._fail_if_configured()
        payload = self.payment_results.popleft() if self.payment_results else dict(APPROVED_RESULT)
        payload.setdefault("id", f"fake_pay_{uuid4().hex[:12]}")
        return PaymentResult.from_payload(payload)

    def create_customer_session(self, country: str) -> CustomerSession:
        self.calls.append({"method": "create_customer_session", "country": country})
        self._fail_if_configured()
        token = f"fake_cs_{uuid4().hex[:12]}"
        return CustomerSession(customer_session=token, raw={"customer_session": token, "country": country})

    def create_customer(self, profile: CustomerProfile) -> str:
        self.calls.append({"method": "create_customer", "profile": profile})
        if self.customer_creation_fails:
            raise GatewayError("Customer creation rejected", status_code=400, payload=self.failure_payload)
        return f"fake_cus_{uuid4().hex[:12]}"

    def reset(self) -> None:
        """Clear recorded calls and restore default behavior."""
        self.__init__()
