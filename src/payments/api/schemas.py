"""Pydantic request/response schemas for the storefront API.

These are the external contracts the browser talks to. Field names follow
the wire format (the payment request is camelCase). Amounts and item counts
are strict integers, so `true` or `"5000"` is rejected instead of coerced.
"""

from pydantic import BaseModel, ConfigDict, Field

from payments.gateway.port import LineItem

MAX_AMOUNT = 1_000_000

UUID4_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-4[0-9a-fA-F]{3}-[89abAB][0-9a-fA-F]{3}-[0-9a-fA-F]{12}$"

COUNTRY_PATTERN = r"^[A-Za-z]{2}$"


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class CheckoutItemSchema(BaseModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    quantity: int = Field(gt=0, strict=True)
    unit_amount: int = Field(gt=0, strict=True)

    def to_line_item(self) -> LineItem:
        return LineItem(id=self.id, name=self.name, quantity=self.quantity, unit_amount=self.unit_amount)


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CreateCheckoutSessionRequest(BaseModel):
    amount: int | None = Field(None, gt=0, le=MAX_AMOUNT, strict=True)
    items: list[CheckoutItemSchema] | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "amount": 5000,
                    "items": [{"id": "A", "name": "Shirt", "quantity": 2, "unit_amount": 2500}],
                }
            ]
        }
    }

    def line_items(self) -> tuple[LineItem, ...] | None:
        if self.items is None:
            return None
        return tuple(item.to_line_item() for item in self.items)


class SubmitPaymentRequest(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "checkoutSession": "6f1c2a4e-3b1d-4c8e-9f2a-1b2c3d4e5f60",
                    "oneTimeToken": "ott_7d9c2f",
                    "amount": 5000,
                }
            ]
        },
    )

    checkout_session: str = Field(alias="checkoutSession", min_length=1, pattern=UUID4_PATTERN)
    one_time_token: str = Field(alias="oneTimeToken", min_length=1)
    amount: int | None = Field(None, gt=0, strict=True)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CheckoutSessionResponse(BaseModel):
    checkout_session: str
    merchant_order_id: str
    country: str
    payment_description: str
    customer_id: str
    amount: int
    currency: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    environment: str
    version: str


class PublicApiKeyResponse(BaseModel):
    publicApiKey: str
    environment: str


class ErrorResponse(BaseModel):
    error: str
    message: str | None = None
    details: object | None = None
