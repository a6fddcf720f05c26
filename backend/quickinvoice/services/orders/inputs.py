"""Order input data and validation.

The input models only fix field types; business rules live in
``validate_order_input`` so the API and the CLI reject the same things
with the same ``InvalidOrder`` error.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from quickinvoice.services.orders.exceptions import InvalidOrder


class LineItemInput(BaseModel):
    """One purchased product line."""

    name: str
    quantity: int
    unit_price: Decimal = Field(validation_alias="price")

    model_config = ConfigDict(populate_by_name=True)


class OrderInput(BaseModel):
    """Data needed to create an order.

    Derived money fields (subtotal, total) are deliberately absent: they are
    always recomputed from ``items`` and ``delivery_fee``.
    """

    customer_name: str
    customer_phone: str
    items: list[LineItemInput]
    delivery_fee: Decimal = Decimal("0")
    payment_method: str | None = None
    notes: str | None = None


def validate_order_input(data: OrderInput) -> None:
    """Check business rules for a new order.

    Raises:
        InvalidOrder: With every problem found, not just the first.
    """
    errors: list[str] = []

    if not data.customer_name.strip():
        errors.append("customer_name must not be empty")
    if not data.customer_phone.strip():
        errors.append("customer_phone must not be empty")
    if not data.items:
        errors.append("at least one item is required")
    if data.delivery_fee < 0:
        errors.append("delivery_fee must not be negative")

    for index, item in enumerate(data.items):
        if not item.name.strip():
            errors.append(f"items[{index}].name must not be empty")
        if item.quantity <= 0:
            errors.append(f"items[{index}].quantity must be positive")
        if item.unit_price < 0:
            errors.append(f"items[{index}].unit_price must not be negative")

    if errors:
        raise InvalidOrder(errors)
