"""Seller profile service.

Sellers are changed only through account settings; order flows read them.
"""

from datetime import datetime

import structlog
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from quickinvoice.models.enums import SubscriptionTier
from quickinvoice.models.seller import Seller
from quickinvoice.services.sellers.exceptions import SellerNotFound

logger = structlog.get_logger(__name__)


class SellerProfileInput(BaseModel):
    """Account settings fields. Unset fields are left untouched on update."""

    email: str | None = None
    business_name: str | None = None
    phone: str | None = None
    momo_number: str | None = None
    subscription_tier: SubscriptionTier | None = None
    subscription_expires_at: datetime | None = None


class SellerService:
    """Service for seller account operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_seller(self, data: SellerProfileInput, *, now: datetime) -> Seller:
        """Create a seller; tier defaults to free."""
        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        seller = Seller(**fields, created_at=now, updated_at=now)
        self.session.add(seller)
        await self.session.commit()

        logger.info("Created seller", seller_id=seller.id, tier=seller.subscription_tier.value)
        return seller

    async def get_seller(self, seller_id: str) -> Seller:
        """Get seller by ID."""
        seller = await self.session.get(Seller, seller_id)
        if not seller:
            raise SellerNotFound()
        return seller

    async def update_profile(self, seller_id: str, data: SellerProfileInput, *, now: datetime) -> Seller:
        """Apply a partial profile update.

        Fields explicitly set to null are cleared; omitted fields keep their value.
        """
        seller = await self.get_seller(seller_id)
        changes = data.model_dump(exclude_unset=True)
        # Tier column is not nullable
        if "subscription_tier" in changes and changes["subscription_tier"] is None:
            del changes["subscription_tier"]
        for key, value in changes.items():
            setattr(seller, key, value)
        seller.updated_at = now
        await self.session.commit()

        logger.info("Updated seller profile", seller_id=seller_id, fields=sorted(changes))
        return seller
