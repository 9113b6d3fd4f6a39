"""Cart items handed to the checkout orchestrator by the storefront UI."""

from dataclasses import dataclass

from shared.errors import ValidationError


@dataclass(frozen=True)
class CartItem:
    product_id: str
    name: str
    quantity: int
    unit_amount: int

    def __post_init__(self):
        errors: dict[str, list[str]] = {}
        if not self.product_id:
            errors.setdefault("product_id", []).append("Product id is required")
        if not self.name:
            errors.setdefault("name", []).append("Name is required")
        if not isinstance(self.quantity, int) or self.quantity <= 0:
            errors.setdefault("quantity", []).append("Quantity must be a positive integer")
        if not isinstance(self.unit_amount, int) or self.unit_amount <= 0:
            errors.setdefault("unit_amount", []).append("Unit amount must be a positive integer")
        if errors:
            raise ValidationError(errors, title="Invalid item data")

    @property
    def line_total(self) -> int:
        return self.quantity * self.unit_amount

    def to_payload(self) -> dict:
        """Item shape accepted by ``POST /checkout/sessions``."""
        return {
            "id": self.product_id,
            "name": self.name,
            "quantity": self.quantity,
            "unit_amount": self.unit_amount,
        }


def cart_total(items) -> int:
    """Sum of line totals in minor units."""
    return sum(item.line_total for item in items)
