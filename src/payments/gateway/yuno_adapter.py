"""Yuno hosted-payments adapter.

Talks to the provider's REST API over httpx. Every request is authenticated
with the public/private key pair sent as headers. Calls are plain round
trips: no caching and no retries. Callers decide whether to retry.
"""

import time
from typing import Any

import httpx
import structlog

from payments.config import Settings
from payments.customer import DEMO_CUSTOMER, CustomerProfile
from payments.gateway.port import (
    DEFAULT_DESCRIPTION,
    CheckoutOrder,
    CheckoutSession,
    CustomerSession,
    PaymentAttempt,
    PaymentGateway,
    PaymentResult,
)
from shared.errors import GatewayError, NetworkError

logger = structlog.get_logger(__name__)

IDEMPOTENCY_HEADER = "X-idempotency-key"


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {"raw": response.text}


class YunoGateway(PaymentGateway):
    """Payment gateway backed by the Yuno API."""

    def __init__(self, settings: Settings, client: httpx.Client | None = None) -> None:
        self.account_code = settings.account_code
        self.base_url = settings.api_base_url
        self.home_country = settings.default_country
        self._client = client or httpx.Client(timeout=settings.provider_timeout_seconds)
        self._headers = {
            "public-api-key": settings.public_api_key,
            "private-secret-key": settings.private_secret_key,
            "Content-Type": "application/json",
        }

    def close(self) -> None:
        self._client.close()

    # -------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------
    def _post(self, path: str, body: dict, headers: dict | None = None) -> dict:
        url = f"{self.base_url}{path}"
        started = time.perf_counter()
        try:
            response = self._client.post(url, json=body, headers={**self._headers, **(headers or {})})
        except httpx.TransportError as exc:
            logger.warning("provider_unreachable", path=path, error=str(exc))
            raise NetworkError(f"Could not reach payment provider: {exc}") from exc

        elapsed_ms = round((time.perf_counter() - started) * 1000, 1)
        payload = _decode(response)
        if not response.is_success:
            logger.warning(
                "provider_request_failed",
                path=path,
                status_code=response.status_code,
                elapsed_ms=elapsed_ms,
            )
            raise GatewayError(
                f"Payment provider rejected {path} with status {response.status_code}",
                status_code=response.status_code,
                payload=payload,
            )
        if not isinstance(payload, dict):
            raise GatewayError(
                f"Payment provider returned an unexpected body for {path}",
                status_code=response.status_code,
                payload=payload,
            )

        logger.info("provider_request_succeeded", path=path, status_code=response.status_code, elapsed_ms=elapsed_ms)
        return payload

    # -------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------
    def create_checkout_session(self, order: CheckoutOrder) -> CheckoutSession:
        body: dict[str, Any] = {
            "account_id": self.account_code,
            "merchant_order_id": order.merchant_order_id,
            "payment_description": order.description,
            "country": order.country,
            "customer_id": order.customer_id,
            "amount": {"currency": order.currency, "value": order.amount},
        }
        if order.items is not None:
            body["additional_data"] = {
                "order": {
                    "items": [
                        {
                            "id": item.id,
                            "name": item.name,
                            "quantity": item.quantity,
                            "unit_amount": item.unit_amount,
                            "category": item.category,
                        }
                        for item in order.items
                    ]
                }
            }

        payload = self._post("/v1/checkout/sessions", body)
        session_id = payload.get("checkout_session")
        if not isinstance(session_id, str) or not session_id:
            raise GatewayError(
                "Checkout session response is missing 'checkout_session'",
                payload=payload,
            )

        return CheckoutSession(
            checkout_session=session_id,
            merchant_order_id=order.merchant_order_id,
            country=order.country,
            currency=order.currency,
            amount=order.amount,
            payment_description=order.description,
            customer_id=order.customer_id,
        )

    def submit_payment(self, attempt: PaymentAttempt, customer_id: str, country: str) -> PaymentResult:
        body = {
            "description": DEFAULT_DESCRIPTION,
            "account_id": self.account_code,
            "merchant_order_id": attempt.merchant_order_id,
            "country": country,
            "amount": {"currency": attempt.currency, "value": attempt.amount},
            "additional_data": {
                "order": {
                    "fee_amount": 0,
                    "shipping_amount": 0,
                    "items": [
                        {
                            "brand": "Store",
                            "category": "General",
                            "id": "ITEM_001",
                            "manufacture_part_number": "STORE_001",
                            "name": DEFAULT_DESCRIPTION,
                            "quantity": 1,
                            "sku_code": "STORE_001",
                            "unit_amount": attempt.amount / 100,
                        }
                    ],
                }
            },
            "checkout": {"session": attempt.checkout_session},
            "customer_payer": {
                **DEMO_CUSTOMER.payer_payload(customer_id, country, self.home_country),
                "device_fingerprint": "hi88287gbd8d7d782ge",
                "ip_address": "192.168.123.167",
            },
            "payment_method": {"token": attempt.one_time_token, "vaulted_token": None},
        }

        payload = self._post(
            "/v1/payments",
            body,
            headers={IDEMPOTENCY_HEADER: attempt.idempotency_key},
        )
        return PaymentResult.from_payload(payload)

    def create_customer_session(self, country: str) -> CustomerSession:
        payload = self._post("/v1/customers/sessions", {"account_id": self.account_code, "country": country})
        return CustomerSession(customer_session=payload.get("customer_session", ""), raw=payload)

    def create_customer(self, profile: CustomerProfile) -> str:
        payload = self._post("/v1/customers", {"account_id": self.account_code, **profile.to_payload()})
        customer_id = payload.get("id")
        if not isinstance(customer_id, str) or not customer_id:
            raise GatewayError("Customer response is missing 'id'", payload=payload)
        return customer_id
