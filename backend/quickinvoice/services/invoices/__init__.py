"""Invoice services."""

from quickinvoice.services.invoices.document import Branding, InvoiceDocument, build_invoice_document
from quickinvoice.services.invoices.renderer import InvoiceRenderer, RenderedInvoice
from quickinvoice.services.invoices.share_link import ShareLink, build_share_link, normalize_phone
from quickinvoice.services.invoices.text_summary import render_text_summary

__all__ = [
    "Branding",
    "InvoiceDocument",
    "InvoiceRenderer",
    "RenderedInvoice",
    "ShareLink",
    "build_invoice_document",
    "build_share_link",
    "normalize_phone",
    "render_text_summary",
]
