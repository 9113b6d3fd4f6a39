"""Integration tests for startup failures and the internal error boundary."""

import pytest
from fastapi.testclient import TestClient
from shared.errors import ConfigurationError

SHIRT_CART = {"amount": 5000, "items": [{"id": "A", "name": "Shirt", "quantity": 2, "unit_amount": 2500}]}


def _explode(*args, **kwargs):
    raise RuntimeError("database exploded")


class TestStartup:
    def test_context_is_built_once(self, client, gateway):
        context = client.app.state.context
        assert context.customer_id.startswith("fake_cus_")
        assert context.gateway is gateway
        client.post("/checkout/sessions")
        client.post("/checkout/sessions")
        assert len(gateway.calls_to("create_customer")) == 1

    def test_failed_customer_creation_aborts_startup(self, settings, gateway):
        from app import create_app

        gateway.configure(customer_creation_fails=True)
        app = create_app(settings=settings, gateway=gateway, setup_logging=False)
        with pytest.raises(ConfigurationError):
            with TestClient(app):
                pass

    def test_missing_configuration_aborts_startup(self, monkeypatch, gateway):
        from app import create_app

        for name in ("ACCOUNT_CODE", "PUBLIC_API_KEY", "PRIVATE_SECRET_KEY"):
            monkeypatch.setenv(name, "")
        app = create_app(gateway=gateway, setup_logging=False)
        with pytest.raises(ConfigurationError, match="ACCOUNT_CODE"):
            with TestClient(app):
                pass

    def test_settings_from_environment(self, monkeypatch, gateway):
        from app import create_app

        monkeypatch.setenv("ACCOUNT_CODE", "acct-env")
        monkeypatch.setenv("PUBLIC_API_KEY", "staging_pk_env")
        monkeypatch.setenv("PRIVATE_SECRET_KEY", "sk_env")
        app = create_app(gateway=gateway, setup_logging=False)
        with TestClient(app) as client:
            assert client.app.state.context.settings.api_base_url == "https://api-staging.y.uno"


class TestErrorBoundary:
    def test_unexpected_error_includes_trace_outside_production(self, client, gateway, monkeypatch):
        monkeypatch.setattr(gateway, "create_checkout_session", _explode)
        response = client.post("/checkout/sessions", json=SHIRT_CART)
        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Internal server error"
        assert body["message"] == "database exploded"
        assert body["timestamp"]
        assert any("RuntimeError" in line for line in body["trace"])

    def test_production_hides_details(self, make_client, make_settings, gateway, monkeypatch):
        client = make_client(make_settings(environment="production"))
        monkeypatch.setattr(gateway, "submit_payment", _explode)
        response = client.post(
            "/payments",
            json={"checkoutSession": "6f1c2a4e-3b1d-4c8e-9f2a-1b2c3d4e5f60", "oneTimeToken": "ott_1"},
        )
        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Something went wrong. Please try again later."
        assert "trace" not in body
        assert "database exploded" not in response.text

    def test_process_keeps_serving_after_an_error(self, client, gateway, monkeypatch):
        monkeypatch.setattr(gateway, "create_checkout_session", _explode)
        client.post("/checkout/sessions")
        monkeypatch.undo()
        assert client.post("/checkout/sessions").status_code == 200
