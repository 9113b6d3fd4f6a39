"""Error responses for the storefront API.

Every failure body has the shape ``{"error": <title>, "message": ..., "details": ...}``.
Request validation failures are answered with 400 (not FastAPI's default
422) before any provider call is made.
"""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from payments.api.ratelimit import RateLimitExceeded
from shared.errors import GatewayError, NetworkError

_ITEM_SHAPE_ERRORS = {"missing", "string_too_short", "string_type", "int_type", "int_parsing"}
_MISSING_ERRORS = {"missing", "string_too_short"}

_TITLES = {
    "amount": ("Invalid amount", "Amount must be a positive integer number of minor units no greater than 1000000"),
    "item_data": ("Invalid item data", "Each item must have id, name, quantity, and unit_amount"),
    "item_values": ("Invalid item values", "Quantity and unit_amount must be positive numbers"),
    "items": ("Invalid item data", "items must be a list of items"),
    "missing_payment_fields": ("Missing required fields", "checkoutSession and oneTimeToken are required"),
    "checkout_session_format": ("Invalid checkout session format", "Checkout session must be a valid UUID v4"),
    "country": ("Invalid country", "country must be a two-letter ISO country code"),
}


def error_body(error: str, message: str | None = None, details: object | None = None) -> dict:
    body: dict = {"error": error}
    if message is not None:
        body["message"] = message
    if details is not None:
        body["details"] = details
    return body


def classify_validation_error(error: dict) -> tuple[str, str]:
    """Map one pydantic error entry to an API error title and message."""
    loc = [part for part in error.get("loc", ()) if part not in ("body", "query")]
    kind = error.get("type", "")
    field = loc[0] if loc else None

    if field is None and kind == "missing":
        return "Missing required fields", "Request body is required"
    if field == "amount":
        return _TITLES["amount"]
    if field == "items":
        if len(loc) < 3:
            return _TITLES["items"]
        item_field = loc[2]
        if kind in _ITEM_SHAPE_ERRORS or item_field in ("id", "name"):
            return _TITLES["item_data"]
        return _TITLES["item_values"]
    if field in ("checkoutSession", "oneTimeToken"):
        if kind in _MISSING_ERRORS:
            return _TITLES["missing_payment_fields"]
        if field == "checkoutSession":
            return _TITLES["checkout_session_format"]
        return _TITLES["missing_payment_fields"]
    if field == "country":
        return _TITLES["country"]
    return "Invalid request", error.get("msg", "Request body is malformed")


def _jsonable_errors(errors: list[dict]) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in errors
    ]


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = list(exc.errors())
    title, message = classify_validation_error(errors[0]) if errors else ("Invalid request", "Malformed request")
    return JSONResponse(status_code=400, content=error_body(title, message, _jsonable_errors(errors)))


def gateway_error_response(title: str, exc: GatewayError) -> JSONResponse:
    return JSONResponse(status_code=400, content=error_body(title, exc.message, exc.payload))


def network_error_response(exc: NetworkError) -> JSONResponse:
    return JSONResponse(status_code=502, content=error_body("Payment provider unavailable", exc.message))


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content=error_body("Too many requests", exc.message),
        headers={"Retry-After": str(exc.retry_after)},
    )


def register_error_handlers(app) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
