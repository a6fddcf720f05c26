"""Enum definitions for database models."""

from enum import StrEnum

from quickinvoice.models.status import LifecycleStatusEnum, Status, Tone


class OrderStatus(LifecycleStatusEnum):
    """Lifecycle of an order.

    Status flow (which moves are allowed is decided in services.orders.transitions):
        UNPAID -> PAID -> DELIVERED
    """

    UNPAID = Status("unpaid", rank=0, label="UNPAID", tone=Tone.WARNING)
    PAID = Status("paid", rank=1, label="PAID", tone=Tone.SUCCESS)
    DELIVERED = Status("delivered", rank=2, label="DELIVERED", tone=Tone.INFO)


class SubscriptionTier(StrEnum):
    """Seller subscription tier."""

    FREE = "free"
    PREMIUM = "premium"
