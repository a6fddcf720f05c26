"""Invoice generation service.

Loads the persisted order and seller, then hands them to the pure document
builder and the renderer. Nothing is written back to the database.
"""

from dataclasses import dataclass
from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from quickinvoice.models.order import Order
from quickinvoice.services.invoices.document import Branding, InvoiceDocument, build_invoice_document
from quickinvoice.services.invoices.exceptions import IntegrityWarning
from quickinvoice.services.invoices.renderer import InvoiceRenderer, RenderedInvoice
from quickinvoice.services.invoices.share_link import ShareLink, build_share_link
from quickinvoice.services.invoices.text_summary import render_text_summary
from quickinvoice.services.orders.order_service import OrderService
from quickinvoice.services.sellers.seller_service import SellerService

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class InvoiceResult:
    """Rendered invoice plus any non-fatal data problems found on the way."""

    invoice: RenderedInvoice
    warnings: tuple[IntegrityWarning, ...]


class InvoiceService:
    """Service for building, rendering and sharing invoices."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        renderer: InvoiceRenderer | None = None,
        branding: Branding | None = None,
    ):
        self.orders = OrderService(session)
        self.sellers = SellerService(session)
        self.renderer = renderer or InvoiceRenderer()
        self.branding = branding or Branding()

    async def build_document(self, seller_id: str, order_id: str, *, rendered_at: datetime) -> InvoiceDocument:
        """Load order and seller and assemble the logical invoice."""
        _, document = await self._load_document(seller_id, order_id, rendered_at=rendered_at)
        return document

    async def _load_document(
        self, seller_id: str, order_id: str, *, rendered_at: datetime
    ) -> tuple[Order, InvoiceDocument]:
        seller = await self.sellers.get_seller(seller_id)
        order = await self.orders.get_order(seller_id, order_id)
        document = build_invoice_document(order, seller, rendered_at=rendered_at, branding=self.branding)

        for warning in document.warnings:
            logger.warning(
                "Invoice totals disagree with items",
                order_id=order.id,
                order_number=order.order_number,
                field=warning.field,
                persisted=str(warning.persisted),
                recomputed=str(warning.recomputed),
            )
        return order, document

    async def render_invoice(self, seller_id: str, order_id: str, *, rendered_at: datetime) -> InvoiceResult:
        """Render the invoice PDF for an order.

        Raises:
            OrderNotFound / SellerNotFound: Unknown IDs.
            RenderError: The document cannot be laid out without losing content.
        """
        document = await self.build_document(seller_id, order_id, rendered_at=rendered_at)
        invoice = self.renderer.render(document)
        logger.info(
            "Generated invoice",
            order_id=order_id,
            filename=invoice.filename,
            pages=invoice.page_count,
            warnings=len(document.warnings),
        )
        return InvoiceResult(invoice=invoice, warnings=document.warnings)

    async def share_invoice(self, seller_id: str, order_id: str, *, rendered_at: datetime) -> ShareLink:
        """Compose the customer message (with a text summary) and contact link."""
        order, document = await self._load_document(seller_id, order_id, rendered_at=rendered_at)
        return build_share_link(
            order,
            currency_prefix=self.branding.currency_prefix,
            summary=render_text_summary(document),
        )
