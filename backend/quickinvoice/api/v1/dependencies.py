"""FastAPI dependencies for service injection."""

from datetime import datetime
from typing import Annotated

from fastapi import Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from quickinvoice.db import get_session
from quickinvoice.services.invoices.invoice_service import InvoiceService
from quickinvoice.services.orders.order_service import OrderService
from quickinvoice.services.sellers.seller_service import SellerService
from quickinvoice.utils.datetime_utils import utc_now


def get_clock() -> datetime:
    """Current instant for the request; override in tests to pin time."""
    return utc_now()


async def get_order_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> OrderService:
    """Get an OrderService instance with the current session."""
    return OrderService(session)


async def get_seller_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> SellerService:
    """Get a SellerService instance with the current session."""
    return SellerService(session)


async def get_invoice_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> InvoiceService:
    """Get an InvoiceService instance with the current session."""
    return InvoiceService(session)


# Crockford base32, 128 bits: the first character carries only 3 bits
ULID_PATTERN = r"^[0-7][0-9A-HJKMNP-TV-Z]{25}$"

# Type aliases for cleaner endpoint signatures
UlidPath = Annotated[str, Path(pattern=ULID_PATTERN)]
Now = Annotated[datetime, Depends(get_clock)]
OrderServiceDep = Annotated[OrderService, Depends(get_order_service)]
SellerServiceDep = Annotated[SellerService, Depends(get_seller_service)]
InvoiceServiceDep = Annotated[InvoiceService, Depends(get_invoice_service)]
