"""Tests for the configurable fake gateway."""

import pytest
from payments.customer import DEMO_CUSTOMER
from payments.gateway import build_gateway
from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import CheckoutOrder, PaymentAttempt, PaymentOutcome
from shared.errors import GatewayError, NetworkError


def _order(**overrides):
    values = {
        "merchant_order_id": "ORDER_1",
        "country": "CO",
        "currency": "COP",
        "amount": 2000,
        "description": "E-commerce Purchase",
        "customer_id": "cus_1",
    }
    values.update(overrides)
    return CheckoutOrder(**values)


def _attempt():
    return PaymentAttempt(
        checkout_session="6f1c2a4e-3b1d-4c8e-9f2a-1b2c3d4e5f60",
        one_time_token="ott_1",
        amount=2000,
        currency="COP",
        merchant_order_id="PAYMENT_1",
        idempotency_key="idem-1",
    )


class TestFakeGateway:
    def test_checkout_session_echoes_order(self):
        session = FakeGateway().create_checkout_session(_order(amount=5000))
        assert session.amount == 5000
        assert session.merchant_order_id == "ORDER_1"
        assert session.currency == "COP"
        assert session.checkout_session

    def test_default_payment_is_approved(self):
        result = FakeGateway().submit_payment(_attempt(), customer_id="cus_1", country="CO")
        assert result.outcome() == PaymentOutcome.APPROVED
        assert result.payment_id.startswith("fake_pay_")

    def test_queued_results_are_returned_in_order(self):
        gateway = FakeGateway()
        gateway.queue_payment_result({"status": "SUCCEEDED", "sub_status": "PENDING"})
        gateway.queue_payment_result({"requiresAction": True})
        first = gateway.submit_payment(_attempt(), customer_id="cus_1", country="CO")
        second = gateway.submit_payment(_attempt(), customer_id="cus_1", country="CO")
        assert first.outcome() == PaymentOutcome.PROCESSING
        assert second.outcome() == PaymentOutcome.CONTINUATION

    def test_configured_rejection(self):
        gateway = FakeGateway()
        gateway.configure(should_succeed=False, failure_payload={"code": "CARD_DECLINED"})
        with pytest.raises(GatewayError) as exc_info:
            gateway.create_checkout_session(_order())
        assert exc_info.value.payload == {"code": "CARD_DECLINED"}
        assert exc_info.value.status_code == 400

    def test_network_outage(self):
        gateway = FakeGateway()
        gateway.configure(network_down=True)
        with pytest.raises(NetworkError):
            gateway.submit_payment(_attempt(), customer_id="cus_1", country="CO")

    def test_customer_creation_failure(self):
        gateway = FakeGateway()
        gateway.configure(customer_creation_fails=True)
        with pytest.raises(GatewayError):
            gateway.create_customer(DEMO_CUSTOMER)

    def test_records_calls(self):
        gateway = FakeGateway()
        gateway.create_customer_session("MX")
        gateway.create_checkout_session(_order())
        assert [call["method"] for call in gateway.calls] == ["create_customer_session", "create_checkout_session"]
        assert gateway.calls_to("create_customer_session")[0]["country"] == "MX"

    def test_reset_restores_defaults(self):
        gateway = FakeGateway()
        gateway.configure(should_succeed=False, network_down=True)
        gateway.create_customer(DEMO_CUSTOMER)
        gateway.reset()
        assert gateway.calls == []
        assert gateway.should_succeed is True
        assert gateway.network_down is False


class TestBuildGateway:
    def test_fake(self, settings):
        assert isinstance(build_gateway(settings, "fake"), FakeGateway)

    def test_yuno(self, settings):
        from payments.gateway.yuno_adapter import YunoGateway

        gateway = build_gateway(settings, "yuno")
        try:
            assert isinstance(gateway, YunoGateway)
            assert gateway.base_url == "https://api-sandbox.y.uno"
        finally:
            gateway.close()

    def test_env_var_selects_adapter(self, settings, monkeypatch):
        monkeypatch.setenv("GATEWAY", "fake")
        assert isinstance(build_gateway(settings), FakeGateway)

    def test_unknown_kind(self, settings):
        with pytest.raises(ValueError):
            build_gateway(settings, "paypal")
