"""Order and OrderItem database models."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Column, DateTime, Enum, ForeignKey, UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from quickinvoice.models.enums import OrderStatus
from quickinvoice.models.types import MoneyType, ULIDType, new_ulid
from quickinvoice.utils.datetime_utils import utc_now

# Order numbers are unique per seller, never globally
ORDER_NUMBER_CONSTRAINT = UniqueConstraint("seller_id", "order_number", name="uq_order_seller_number")


class Order(SQLModel, table=True):
    """Sales order recorded by a seller."""

    __tablename__ = "orders"
    __table_args__ = (ORDER_NUMBER_CONSTRAINT,)

    id: str = Field(
        default_factory=new_ulid,
        max_length=26,
        sa_column=Column(ULIDType, primary_key=True),
    )
    seller_id: str = Field(
        sa_column=Column(ULIDType, ForeignKey("sellers.id"), index=True, nullable=False),
    )

    # Display order number: "INV-0001", assigned once by OrderNumberSequencer
    order_number: str = Field(index=True)

    customer_name: str
    customer_phone: str

    # Derived from items/delivery_fee at write time
    subtotal: Decimal = Field(default=Decimal("0.00"), sa_column=Column(MoneyType, nullable=False))
    delivery_fee: Decimal = Field(default=Decimal("0.00"), sa_column=Column(MoneyType, nullable=False))
    total: Decimal = Field(default=Decimal("0.00"), sa_column=Column(MoneyType, nullable=False))

    status: OrderStatus = Field(
        default=OrderStatus.UNPAID,
        sa_column=Column(
            Enum(OrderStatus, values_callable=lambda e: [x.value for x in e], name="orderstatus"),
            nullable=False,
        ),
    )
    payment_method: str | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))

    # Relationships
    items: list["OrderItem"] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={
            "order_by": "OrderItem.position",
            "cascade": "all, delete-orphan",
        },
    )


ORDER_ITEM_POSITION_CONSTRAINT = UniqueConstraint("order_id", "position", name="uq_order_item_position")


class OrderItem(SQLModel, table=True):
    """Line item within an order, kept in entry order by ``position``."""

    __tablename__ = "order_items"
    __table_args__ = (ORDER_ITEM_POSITION_CONSTRAINT,)

    id: int | None = Field(default=None, primary_key=True)
    order_id: str = Field(
        sa_column=Column(ULIDType, ForeignKey("orders.id", ondelete="CASCADE"), index=True, nullable=False),
    )
    position: int
    name: str
    quantity: int
    unit_price: Decimal = Field(sa_column=Column(MoneyType, nullable=False))

    # Relationships
    order: Order = Relationship(back_populates="items")
