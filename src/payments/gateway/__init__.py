"""Payment gateway factory.

- FakeGateway for development and testing (GATEWAY=fake)
- YunoGateway for the hosted-payments provider (default)
"""

import os

from payments.config import Settings
from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import PaymentGateway


def build_gateway(settings: Settings, kind: str | None = None) -> PaymentGateway:
    """Create the gateway adapter selected by ``kind`` or the GATEWAY env var."""
    kind = (kind or os.getenv("GATEWAY") or "yuno").lower()
    if kind == "fake":
        return FakeGateway()
    if kind == "yuno":
        from payments.gateway.yuno_adapter import YunoGateway

        return YunoGateway(settings)
    raise ValueError(f"Unknown gateway: {kind}")
