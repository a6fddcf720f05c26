"""Services module.

This module provides the service layer architecture:
- exceptions: Custom service exceptions
- orders: Order CRUD, order number sequencing and status transitions
- sellers: Seller profile management
- invoices: Invoice document model, PDF/text rendering and share links
"""
