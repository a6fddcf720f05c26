"""Database models."""

# ruff: noqa: I001 - Import order matters for SQLAlchemy relationship resolution
from sqlmodel import SQLModel

from quickinvoice.models.enums import OrderStatus, SubscriptionTier

# seller.py must be imported first (orders reference sellers.id)
from quickinvoice.models.seller import Seller
from quickinvoice.models.order import Order, OrderItem
from quickinvoice.models.sequence_counter import SequenceCounter

__all__ = [
    "SQLModel",
    "Seller",
    "Order",
    "OrderItem",
    "SequenceCounter",
    "OrderStatus",
    "SubscriptionTier",
]
