"""API schemas for seller endpoints."""

from datetime import datetime

from pydantic import BaseModel, field_serializer

from quickinvoice.models.enums import SubscriptionTier
from quickinvoice.models.seller import Seller
from quickinvoice.utils.datetime_utils import to_display_timezone


class SellerResponse(BaseModel):
    """Seller profile response schema."""

    id: str
    email: str | None
    business_name: str | None
    phone: str | None
    momo_number: str | None
    subscription_tier: SubscriptionTier
    subscription_expires_at: datetime | None
    premium_active: bool
    created_at: datetime

    @field_serializer("subscription_expires_at", "created_at")
    def serialize_datetime(self, dt: datetime | None) -> str | None:
        """Serialize datetime to display timezone."""
        localized_dt = to_display_timezone(dt)
        return localized_dt.isoformat() if localized_dt else None

    @classmethod
    def from_model(cls, seller: Seller, *, now: datetime) -> "SellerResponse":
        """Create response from Seller model."""
        return cls(
            id=seller.id,
            email=seller.email,
            business_name=seller.business_name,
            phone=seller.phone,
            momo_number=seller.momo_number,
            subscription_tier=seller.subscription_tier,
            subscription_expires_at=seller.subscription_expires_at,
            premium_active=seller.is_premium_active(now),
            created_at=seller.created_at,
        )
