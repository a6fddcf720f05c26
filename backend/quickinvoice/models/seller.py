"""Seller (account branding profile) database model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Enum
from sqlmodel import Field, SQLModel

from quickinvoice.models.enums import SubscriptionTier
from quickinvoice.models.types import ULIDType, new_ulid
from quickinvoice.utils.datetime_utils import ensure_utc, utc_now


class Seller(SQLModel, table=True):
    """Account holder who owns orders and controls invoice branding."""

    __tablename__ = "sellers"

    id: str = Field(
        default_factory=new_ulid,
        max_length=26,
        sa_column=Column(ULIDType, primary_key=True),
    )
    email: str | None = None

    subscription_tier: SubscriptionTier = Field(
        default=SubscriptionTier.FREE,
        sa_column=Column(
            Enum(SubscriptionTier, values_callable=lambda e: [x.value for x in e], name="subscriptiontier"),
            nullable=False,
        ),
    )
    subscription_expires_at: datetime | None = Field(default=None, sa_column=Column(DateTime(timezone=True)))

    business_name: str | None = None
    phone: str | None = None
    momo_number: str | None = None  # Mobile-money number printed on premium invoices

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))

    def is_premium_active(self, at: datetime) -> bool:
        """True if the premium tier is paid up at the given instant.

        Recomputed on every call; expiry exactly at ``at`` counts as expired.
        """
        if self.subscription_tier != SubscriptionTier.PREMIUM:
            return False
        if self.subscription_expires_at is None:
            return False
        return ensure_utc(self.subscription_expires_at) > ensure_utc(at)
