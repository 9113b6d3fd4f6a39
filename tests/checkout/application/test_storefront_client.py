"""Tests for StorefrontClient error translation (httpx.MockTransport)."""

import json

import httpx
import pytest
from checkout.backend import StorefrontClient
from payments.gateway.port import PaymentOutcome
from shared.errors import GatewayError, NetworkError, ValidationError

SESSION_ID = "6f1c2a4e-3b1d-4c8e-9f2a-1b2c3d4e5f60"

SESSION_BODY = {
    "checkout_session": SESSION_ID,
    "merchant_order_id": "ORDER_1",
    "country": "CO",
    "payment_description": "Purchase: Shirt",
    "customer_id": "cus_1",
    "amount": 5000,
    "currency": "COP",
}


def _client(status_code=200, body=None, error=None, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if error is not None:
            raise error
        return httpx.Response(status_code, json=body if body is not None else {})

    return StorefrontClient(httpx.Client(base_url="http://storefront.test", transport=httpx.MockTransport(handler)))


class TestCreateSession:
    def test_request_and_parsed_session(self):
        seen = []
        client = _client(body=SESSION_BODY, seen=seen)
        session = client.create_session("CO", 5000, [{"id": "A", "name": "Shirt", "quantity": 2, "unit_amount": 2500}])
        request = seen[0]
        assert request.url.path == "/checkout/sessions"
        assert request.url.params["country"] == "CO"
        assert json.loads(request.content)["amount"] == 5000
        assert session.checkout_session == SESSION_ID
        assert session.amount == 5000

    def test_incomplete_response(self):
        body = {k: v for k, v in SESSION_BODY.items() if k != "checkout_session"}
        with pytest.raises(GatewayError, match="checkout_session"):
            _client(body=body).create_session("CO", 5000, [])

    def test_provider_rejection(self):
        client = _client(400, {"error": "Failed to create checkout session", "details": {"code": "X"}})
        with pytest.raises(GatewayError) as exc_info:
            client.create_session("CO", 5000, [])
        assert exc_info.value.payload == {"code": "X"}

    def test_validation_rejection(self):
        client = _client(400, {"error": "Invalid amount", "message": "Amount must be positive", "details": []})
        with pytest.raises(ValidationError) as exc_info:
            client.create_session("CO", 0, [])
        assert exc_info.value.title == "Invalid amount"
        assert exc_info.value.message == "Amount must be positive"

    def test_provider_unavailable(self):
        with pytest.raises(NetworkError):
            _client(502, {"error": "Payment provider unavailable", "message": "timeout"}).create_session("CO", 1, [])

    def test_backend_unreachable(self):
        with pytest.raises(NetworkError):
            _client(error=httpx.ConnectError("refused")).create_session("CO", 1, [])

    def test_throttled(self):
        client = _client(429, {"error": "Too many requests", "message": "slow down"})
        with pytest.raises(GatewayError) as exc_info:
            client.create_session("CO", 1, [])
        assert exc_info.value.status_code == 429


class TestSubmitPayment:
    def test_request_and_result(self):
        seen = []
        client = _client(body={"status": "SUCCEEDED", "sub_status": "PENDING"}, seen=seen)
        result = client.submit_payment("BR", SESSION_ID, "ott_1", 5000)
        assert json.loads(seen[0].content) == {"checkoutSession": SESSION_ID, "oneTimeToken": "ott_1", "amount": 5000}
        assert seen[0].url.params["country"] == "BR"
        assert result.outcome() == PaymentOutcome.PROCESSING

    def test_payment_rejected(self):
        client = _client(400, {"error": "Payment failed", "message": "declined", "details": {"code": "D"}})
        with pytest.raises(GatewayError):
            client.submit_payment("CO", SESSION_ID, "ott_1", 5000)

    def test_internal_error(self):
        with pytest.raises(GatewayError) as exc_info:
            _client(500, {"error": "Internal server error", "message": "boom"}).submit_payment("CO", SESSION_ID, "t", 1)
        assert exc_info.value.status_code == 500
