"""Storefront FastAPI application.

Backend for the checkout flow: creates checkout sessions and submits payments
through the hosted-payments provider. Startup builds the ``StoreContext``
once (settings, gateway adapter, demo customer id) and refuses to serve
traffic if any of it fails.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8080
    python src/server.py
"""

import traceback
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from payments.api.errors import register_error_handlers
from payments.api.routes import checkout_router, customer_router, payment_router, system_router
from payments.config import Settings
from payments.context import StoreContext
from payments.customer import provision_customer
from payments.gateway import build_gateway
from payments.gateway.port import PaymentGateway
from payments.utils.logging import add_context, clear_context, configure_logging
from shared.errors import ConfigurationError

logger = structlog.get_logger(__name__)

_DEVELOPMENT_ORIGINS = ["http://localhost:3000", "http://localhost:5173", "http://localhost:8080"]
_PRODUCTION_ORIGINS = ["https://yourdomain.com"]

_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Content-Security-Policy": (
        "default-src 'self'; "
        "script-src 'self' 'unsafe-inline' https://api-sandbox.y.uno https://api.y.uno; "
        "style-src 'self' 'unsafe-inline'; "
        "img-src 'self' data: https:; "
        "connect-src 'self' https://api-sandbox.y.uno https://api.y.uno"
    ),
}


def create_app(
    settings: Settings | None = None,
    gateway: PaymentGateway | None = None,
    setup_logging: bool = True,
) -> FastAPI:
    """Build the application.

    ``settings`` defaults to ``Settings.from_env()`` and ``gateway`` to the
    adapter selected by ``build_gateway``; tests inject both.
    """
    cors_settings = settings or _settings_or_none()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        resolved = settings or Settings.from_env()
        if setup_logging:
            configure_logging(resolved.environment)
        active_gateway = gateway or build_gateway(resolved)
        customer_id = provision_customer(active_gateway)
        app.state.context = StoreContext.build(resolved, active_gateway, customer_id)
        logger.info(
            "storefront_started",
            environment=resolved.environment,
            api_base_url=resolved.api_base_url,
            gateway=type(active_gateway).__name__,
        )
        yield
        close = getattr(active_gateway, "close", None)
        if close is not None:
            close()
        app.state.context = None

    app = FastAPI(
        title="Storefront Checkout API",
        description="Checkout sessions and payments through a hosted-payments provider",
        version=(cors_settings.version if cors_settings else "1.0.0"),
        lifespan=lifespan,
    )

    production = cors_settings is not None and cors_settings.is_production
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_PRODUCTION_ORIGINS if production else _DEVELOPMENT_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """Bind request info into the log context and turn stray exceptions into 500s."""
        clear_context()
        add_context(
            request_id=uuid4().hex[:12],
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )
        try:
            response = await call_next(request)
        except Exception as exc:
            context = getattr(request.app.state, "context", None)
            is_production = context.settings.is_production if context else production
            response = _internal_error_response(exc, production=is_production)
        for header, value in _SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        logger.debug("request_completed", status_code=response.status_code)
        return response

    register_error_handlers(app)

    app.include_router(system_router)
    app.include_router(checkout_router)
    app.include_router(payment_router)
    app.include_router(customer_router)

    return app


def _settings_or_none() -> Settings | None:
    """Best-effort settings for app construction; startup re-reads and fails loudly."""
    try:
        return Settings.from_env()
    except ConfigurationError:
        return None


def _internal_error_response(exc: Exception, production: bool) -> JSONResponse:
    logger.exception("unhandled_error", error=str(exc))

    body = {
        "error": "Internal server error",
        "message": "Something went wrong. Please try again later." if production else str(exc),
        "timestamp": datetime.now(UTC).isoformat(),
    }
    if not production:
        body["trace"] = traceback.format_exception(exc)
    return JSONResponse(status_code=500, content=body)


app = create_app()
