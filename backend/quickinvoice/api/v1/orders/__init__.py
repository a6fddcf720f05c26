"""Orders API package.

This package contains all order-related API endpoints organized by domain:
- order_routes: Order CRUD, status changes and dashboard stats
- invoice_routes: Invoice PDF download and share link
"""

from fastapi import APIRouter

from quickinvoice.api.v1.orders.invoice_routes import router as invoice_router
from quickinvoice.api.v1.orders.order_routes import router as order_router

# Create a combined router for all order-related endpoints
router = APIRouter()

# Include all sub-routers
router.include_router(order_router)
router.include_router(invoice_router)

__all__ = ["router"]
