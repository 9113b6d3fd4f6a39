"""Storefront backend port used by the checkout orchestrator.

``StorefrontClient`` talks to the storefront HTTP API (``POST /checkout/sessions``
and ``POST /payments``) and translates error responses back into the shared
error taxonomy, so the orchestrator never inspects HTTP status codes.
"""

from abc import ABC, abstractmethod
from typing import Any

import httpx

from checkout.utils.logging import logger
from payments.gateway.port import CheckoutSession, PaymentResult
from shared.errors import GatewayError, NetworkError, ValidationError


class CheckoutBackend(ABC):
    @abstractmethod
    def create_session(self, country: str, amount: int, items: list[dict]) -> CheckoutSession:
        ...

    @abstractmethod
    def submit_payment(self, country: str, session_id: str, token: str, amount: int) -> PaymentResult:
        ...


class StorefrontClient(CheckoutBackend):
    """CheckoutBackend over an ``httpx.Client`` pointed at the storefront API."""

    def __init__(self, http: httpx.Client) -> None:
        self._http = http

    def create_session(self, country: str, amount: int, items: list[dict]) -> CheckoutSession:
        body = self._post("/checkout/sessions", country, {"amount": amount, "items": items})
        try:
            return CheckoutSession(
                checkout_session=body["checkout_session"],
                merchant_order_id=body["merchant_order_id"],
                country=body["country"],
                currency=body["currency"],
                amount=body["amount"],
                payment_description=body["payment_description"],
                customer_id=body["customer_id"],
            )
        except KeyError as exc:
            raise GatewayError(f"Checkout session response is missing {exc.args[0]}", payload=body) from exc

    def submit_payment(self, country: str, session_id: str, token: str, amount: int) -> PaymentResult:
        body = self._post(
            "/payments",
            country,
            {"checkoutSession": session_id, "oneTimeToken": token, "amount": amount},
        )
        return PaymentResult.from_payload(body)

    def _post(self, path: str, country: str, body: dict) -> dict:
        try:
            response = self._http.post(path, params={"country": country}, json=body)
        except httpx.TransportError as exc:
            raise NetworkError(f"Could not reach the storefront backend: {exc}") from exc

        payload = _decode(response)
        if response.is_success:
            if not isinstance(payload, dict):
                raise GatewayError(f"Unexpected response body from {path}", response.status_code, payload)
            return payload

        logger.warning("backend_request_failed", path=path, status_code=response.status_code)
        raise _error_for(response.status_code, payload)


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {"error": response.reason_phrase, "message": response.text}


def _error_for(status_code: int, payload: Any) -> Exception:
    body = payload if isinstance(payload, dict) else {}
    title = body.get("error") or f"Request failed with status {status_code}"
    message = body.get("message") or title

    if status_code == 502:
        return NetworkError(message)
    if status_code == 400 and body.get("details") is not None and title in (
        "Failed to create checkout session",
        "Payment failed",
    ):
        return GatewayError(title, status_code=status_code, payload=body["details"])
    if status_code == 400:
        return ValidationError({"request": [message]}, title=title)
    return GatewayError(message, status_code=status_code, payload=payload)
