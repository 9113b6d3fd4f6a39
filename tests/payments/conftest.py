import pytest
from fastapi.testclient import TestClient
from payments.config import Settings
from payments.gateway.fake_adapter import FakeGateway


@pytest.fixture()
def make_settings():
    def _make(**overrides) -> Settings:
        values = {
            "account_code": "acct-test",
            "public_api_key": "sandbox_pk_test",
            "private_secret_key": "sk_test",
            "environment": "test",
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture()
def settings(make_settings):
    return make_settings()


@pytest.fixture()
def gateway():
    return FakeGateway()


@pytest.fixture()
def make_client(gateway):
    """Open a TestClient over an app built with the given settings."""
    from app import create_app

    clients = []

    def _make(settings, app_gateway=None):
        app = create_app(settings=settings, gateway=app_gateway or gateway, setup_logging=False)
        test_client = TestClient(app)
        # Entering the client runs the lifespan, which builds the StoreContext
        test_client.__enter__()
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        test_client.__exit__(None, None, None)


@pytest.fixture()
def client(make_client, settings):
    return make_client(settings)


@pytest.fixture()
def context(client):
    return client.app.state.context
