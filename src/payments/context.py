"""Process-wide state established once at startup."""

from dataclasses import dataclass

from payments.api.ratelimit import FixedWindowRateLimiter
from payments.config import Settings
from payments.gateway.port import PaymentGateway


@dataclass(frozen=True)
class StoreContext:
    """Startup configuration handed to every request handler.

    Written once in the application lifespan, then only read.
    """

    settings: Settings
    gateway: PaymentGateway
    customer_id: str
    general_limiter: FixedWindowRateLimiter
    payment_limiter: FixedWindowRateLimiter

    @classmethod
    def build(cls, settings: Settings, gateway: PaymentGateway, customer_id: str) -> "StoreContext":
        return cls(
            settings=settings,
            gateway=gateway,
            customer_id=customer_id,
            general_limiter=FixedWindowRateLimiter(
                max_requests=settings.rate_limit_max_requests,
                window_seconds=settings.rate_limit_window_seconds,
                name="general",
            ),
            payment_limiter=FixedWindowRateLimiter(
                max_requests=settings.payment_rate_limit_max_requests,
                window_seconds=settings.payment_rate_limit_window_seconds,
                name="payments",
            ),
        )
