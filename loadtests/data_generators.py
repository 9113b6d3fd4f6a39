"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the storefront's request
validation (positive integer minor units, non-empty item ids and names) and
match the exact field names expected by the API's Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()

COUNTRIES = ["AR", "BR", "CL", "CO", "EC", "MX", "PE", "US", "UY"]


def country() -> str:
    return random.choice(COUNTRIES)


def cart_item() -> dict:
    """One line item; unit amounts between 5.00 and 250.00 in minor units."""
    return {
        "id": f"SKU-{uuid.uuid4().hex[:8].upper()}",
        "name": fake.catch_phrase()[:60],
        "quantity": random.randint(1, 3),
        "unit_amount": random.randint(500, 25000),
    }


def cart(max_items: int = 4) -> list[dict]:
    return [cart_item() for _ in range(random.randint(1, max_items))]


def checkout_session_data() -> dict:
    """CreateCheckoutSessionRequest payload whose amount equals the cart total."""
    items = cart()
    return {
        "amount": sum(item["quantity"] * item["unit_amount"] for item in items),
        "items": items,
    }


def one_time_token() -> str:
    """Stand-in for the widget's one-time token."""
    return f"ott_{uuid.uuid4().hex}"


def payment_data(checkout_session: str, amount: int) -> dict:
    """SubmitPaymentRequest payload for an existing session."""
    return {
        "checkoutSession": checkout_session,
        "oneTimeToken": one_time_token(),
        "amount": amount,
    }


def invalid_item_payload() -> dict:
    """A cart the backend must reject with 400 before calling the provider."""
    item = cart_item()
    item[random.choice(["quantity", "unit_amount"])] = random.choice([0, -1])
    return {"amount": 2000, "items": [item]}


def malformed_session_id() -> str:
    """Session ids that fail the UUID v4 shape check."""
    return random.choice(
        [
            "not-a-uuid",
            str(uuid.uuid1()),
            uuid.uuid4().hex,
            "",
        ]
    )
