"""FastAPI routes for the storefront backend: checkout sessions, payments and customers.

Handlers are plain ``def`` functions: provider calls are blocking and run in
FastAPI's threadpool.
"""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import JSONResponse

from payments.api.errors import error_body, gateway_error_response, network_error_response
from payments.api.ratelimit import RateLimitExceeded
from payments.api.schemas import (
    COUNTRY_PATTERN,
    CheckoutSessionResponse,
    CreateCheckoutSessionRequest,
    ErrorResponse,
    HealthResponse,
    PublicApiKeyResponse,
    SubmitPaymentRequest,
)
from payments.context import StoreContext
from payments.payment.session import OpenCheckoutSession, open_checkout_session
from payments.payment.submission import SubmitPayment, submit_payment
from shared.errors import GatewayError, NetworkError


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------
def get_context(request: Request) -> StoreContext:
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise RuntimeError("Storefront context is not initialised; application startup did not complete")
    return context


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def country_param(
    country: str | None = Query(None, pattern=COUNTRY_PATTERN),
    context: StoreContext = Depends(get_context),
) -> str:
    return (country or context.settings.default_country).upper()


class RateLimit:
    """Dependency that counts the request against one of the context's limiters."""

    def __init__(self, limiter: str, message: str) -> None:
        self.limiter = limiter
        self.message = message

    def __call__(self, request: Request, response: Response, context: StoreContext = Depends(get_context)) -> None:
        limiter = getattr(context, f"{self.limiter}_limiter")
        decision = limiter.hit(client_key(request))
        if not decision.allowed:
            raise RateLimitExceeded(self.limiter, decision.retry_after, self.message)
        response.headers[f"X-RateLimit-{self.limiter.title()}-Remaining"] = str(decision.remaining)


general_limit = RateLimit("general", "Too many requests from this IP, please try again later.")
payment_limit = RateLimit("payment", "Too many payment attempts, please try again later.")


# ---------------------------------------------------------------------------
# System Router
# ---------------------------------------------------------------------------
system_router = APIRouter(tags=["system"])


@system_router.get("/healthy", response_model=HealthResponse)
def healthy(context: StoreContext = Depends(get_context)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(UTC).isoformat(),
        environment=context.settings.environment,
        version=context.settings.version,
    )


@system_router.get("/public-api-key", response_model=PublicApiKeyResponse, dependencies=[Depends(general_limit)])
def public_api_key(context: StoreContext = Depends(get_context)) -> PublicApiKeyResponse:
    """Public key the browser needs to load the payment widget."""
    return PublicApiKeyResponse(
        publicApiKey=context.settings.public_api_key,
        environment=context.settings.public_environment,
    )


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"], dependencies=[Depends(general_limit)])


@checkout_router.post(
    "/sessions",
    response_model=CheckoutSessionResponse,
    responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
def create_checkout_session(
    body: CreateCheckoutSessionRequest | None = None,
    country: str = Depends(country_param),
    context: StoreContext = Depends(get_context),
):
    """Open a checkout session for the cart; amount defaults to 2000 minor units."""
    body = body or CreateCheckoutSessionRequest()
    command = OpenCheckoutSession(country=country, amount=body.amount, items=body.line_items())
    try:
        session = open_checkout_session(command, context)
    except GatewayError as exc:
        return gateway_error_response("Failed to create checkout session", exc)
    except NetworkError as exc:
        return network_error_response(exc)
    return CheckoutSessionResponse(**session.to_dict())


# ---------------------------------------------------------------------------
# Payment Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(
    prefix="/payments",
    tags=["payments"],
    dependencies=[Depends(general_limit), Depends(payment_limit)],
)


@payment_router.post(
    "",
    responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
def create_payment(
    body: SubmitPaymentRequest,
    country: str = Depends(country_param),
    context: StoreContext = Depends(get_context),
):
    """Submit the widget's one-time token; answers with the provider's raw result."""
    command = SubmitPayment(
        country=country,
        checkout_session=body.checkout_session,
        one_time_token=body.one_time_token,
        amount=body.amount,
    )
    try:
        result = submit_payment(command, context)
    except GatewayError as exc:
        return gateway_error_response("Payment failed", exc)
    except NetworkError as exc:
        return network_error_response(exc)
    return JSONResponse(content=result.raw)


# ---------------------------------------------------------------------------
# Customer Router
# ---------------------------------------------------------------------------
customer_router = APIRouter(prefix="/customers", tags=["customers"], dependencies=[Depends(general_limit)])


@customer_router.post("/sessions", responses={500: {"model": ErrorResponse}})
def create_customer_session(
    country: str = Depends(country_param),
    context: StoreContext = Depends(get_context),
):
    """Open a provider customer session; answers with the provider's raw object."""
    try:
        session = context.gateway.create_customer_session(country)
    except (GatewayError, NetworkError) as exc:
        return JSONResponse(status_code=500, content=error_body("Failed to create customer session", exc.message))
    return JSONResponse(content=session.raw)
