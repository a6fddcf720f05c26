"""Logical invoice content, independent of any rendering backend.

``build_invoice_document`` is a pure function of the order, the seller and
the render instant: no I/O, no clock reads. Renderers consume the resulting
``InvoiceDocument`` and only decide how it looks.
"""

import textwrap
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Literal

from quickinvoice.config import settings
from quickinvoice.models.enums import OrderStatus
from quickinvoice.models.order import Order
from quickinvoice.models.seller import Seller
from quickinvoice.models.status import Tone
from quickinvoice.money import line_total, to_money
from quickinvoice.services.invoices.exceptions import IntegrityWarning
from quickinvoice.utils.datetime_utils import to_display_timezone

DEFAULT_SELLER_NAME = "My Business"
ISSUE_DATE_FORMAT = "%d/%m/%Y"
GENERATED_AT_FORMAT = "%d/%m/%Y %H:%M %Z"

Align = Literal["left", "center", "right"]


@dataclass(frozen=True, slots=True)
class TableColumn:
    """Item table column; ``width`` is a fraction of the usable page width."""

    title: str
    width: float
    align: Align


ITEM_COLUMNS: tuple[TableColumn, ...] = (
    TableColumn("Item", 0.42, "left"),
    TableColumn("Qty", 0.16, "center"),
    TableColumn("Price", 0.21, "right"),
    TableColumn("Total", 0.21, "right"),
)


@dataclass(frozen=True)
class Branding:
    """Deployment-wide presentation constants."""

    product_name: str = settings.product_name
    currency_prefix: str = settings.currency_prefix
    currency_code: str = settings.currency_code
    notes_wrap_columns: int = settings.notes_wrap_columns

    @property
    def watermark(self) -> str:
        return f"Created with {self.product_name}"


@dataclass(frozen=True, slots=True)
class IdentityHeader:
    business_name: str
    invoice_number: str
    issued_on: str
    status: OrderStatus
    status_label: str
    status_tone: Tone


@dataclass(frozen=True, slots=True)
class PartyBlock:
    heading: str
    lines: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ItemRow:
    name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


@dataclass(frozen=True, slots=True)
class SummaryRow:
    label: str
    amount: Decimal
    emphasized: bool = False


@dataclass(frozen=True, slots=True)
class Footer:
    watermark: str | None
    generated_at: str

    @property
    def lines(self) -> tuple[str, ...]:
        if self.watermark:
            return (self.watermark, self.generated_at)
        return (self.generated_at,)


@dataclass(frozen=True)
class InvoiceDocument:
    """Everything an invoice shows, in section order."""

    order_id: str
    header: IdentityHeader
    bill_to: PartyBlock
    seller_block: PartyBlock | None
    columns: tuple[TableColumn, ...]
    rows: tuple[ItemRow, ...]
    summary: tuple[SummaryRow, ...]
    notes: tuple[str, ...]
    footer: Footer
    premium: bool
    rendered_at: datetime
    currency_prefix: str
    currency_code: str
    warnings: tuple[IntegrityWarning, ...] = field(default=())

    @property
    def total(self) -> Decimal:
        return self.summary[-1].amount

    @property
    def filename(self) -> str:
        return f"{self.header.invoice_number}.pdf"


def wrap_notes(text: str, width: int) -> tuple[str, ...]:
    """Wrap notes per paragraph; blank lines between paragraphs survive.

    Long words are split rather than dropped. Indentation and inner runs of
    spaces are kept as typed; only blank lines around the notes are trimmed.
    """
    paragraphs = [paragraph.rstrip() for paragraph in text.splitlines()]
    while paragraphs and not paragraphs[0]:
        paragraphs.pop(0)
    while paragraphs and not paragraphs[-1]:
        paragraphs.pop()

    lines: list[str] = []
    for paragraph in paragraphs:
        if not paragraph.strip():
            lines.append("")
            continue
        lines.extend(textwrap.wrap(paragraph, width=width, break_long_words=True, break_on_hyphens=False))
    return tuple(lines)


def _clean(value: str | None) -> str:
    return (value or "").strip()


def _format_timestamp(dt: datetime, fmt: str) -> str:
    localized = to_display_timezone(dt)
    assert localized is not None
    return localized.strftime(fmt)


def _seller_block(seller: Seller) -> PartyBlock | None:
    business_name = _clean(seller.business_name)
    phone = _clean(seller.phone)
    momo = _clean(seller.momo_number)
    # Business name alone is not a way to reach the seller
    if not (phone or momo):
        return None

    lines = [business_name or DEFAULT_SELLER_NAME]
    if phone:
        lines.append(phone)
    if momo:
        lines.append(f"MoMo: {momo}")
    return PartyBlock(heading="From:", lines=tuple(lines))


def _integrity_warnings(order: Order, rows: tuple[ItemRow, ...]) -> tuple[IntegrityWarning, ...]:
    """Compare persisted totals with the sum of line totals plus delivery fee."""
    recomputed_subtotal = to_money(sum((row.line_total for row in rows), Decimal(0)))
    recomputed_total = to_money(recomputed_subtotal + to_money(order.delivery_fee))

    warnings: list[IntegrityWarning] = []
    persisted_subtotal = to_money(order.subtotal)
    persisted_total = to_money(order.total)
    if persisted_subtotal != recomputed_subtotal:
        warnings.append(IntegrityWarning("subtotal", persisted_subtotal, recomputed_subtotal))
    if persisted_total != recomputed_total:
        warnings.append(IntegrityWarning("total", persisted_total, recomputed_total))
    return tuple(warnings)


def build_invoice_document(
    order: Order,
    seller: Seller | None,
    *,
    rendered_at: datetime,
    branding: Branding | None = None,
) -> InvoiceDocument:
    """Assemble the logical invoice for an order.

    Args:
        order: Order with ``items`` loaded.
        seller: Branding profile, or None to render unbranded.
        rendered_at: Instant of rendering; drives premium checks and the footer.
        branding: Presentation constants; defaults from settings.

    Returns:
        The document. Total mismatches are reported in ``warnings`` and the
        persisted amounts are shown unchanged.
    """
    brand = branding or Branding()
    premium = seller is not None and seller.is_premium_active(rendered_at)

    business_name = brand.product_name
    if premium and seller is not None and _clean(seller.business_name):
        business_name = _clean(seller.business_name)

    status_meta = order.status.meta
    header = IdentityHeader(
        business_name=business_name,
        invoice_number=order.order_number,
        issued_on=_format_timestamp(order.created_at, ISSUE_DATE_FORMAT),
        status=order.status,
        status_label=status_meta.display,
        status_tone=status_meta.tone,
    )

    bill_to = PartyBlock(heading="Bill To:", lines=(order.customer_name, order.customer_phone))
    seller_block = _seller_block(seller) if premium and seller is not None else None

    rows = tuple(
        ItemRow(
            name=item.name,
            quantity=item.quantity,
            unit_price=to_money(item.unit_price),
            line_total=line_total(item.quantity, item.unit_price),
        )
        for item in order.items
    )

    delivery_fee = to_money(order.delivery_fee)
    summary: list[SummaryRow] = [SummaryRow("Subtotal:", to_money(order.subtotal))]
    if delivery_fee > 0:
        summary.append(SummaryRow("Delivery Fee:", delivery_fee))
    summary.append(SummaryRow("TOTAL:", to_money(order.total), emphasized=True))

    notes = wrap_notes(order.notes or "", brand.notes_wrap_columns) if _clean(order.notes) else ()

    footer = Footer(
        watermark=None if premium else brand.watermark,
        generated_at=f"Generated on {_format_timestamp(rendered_at, GENERATED_AT_FORMAT)}",
    )

    return InvoiceDocument(
        order_id=order.id,
        header=header,
        bill_to=bill_to,
        seller_block=seller_block,
        columns=ITEM_COLUMNS,
        rows=rows,
        summary=tuple(summary),
        notes=notes,
        footer=footer,
        premium=premium,
        rendered_at=rendered_at,
        currency_prefix=brand.currency_prefix,
        currency_code=brand.currency_code,
        warnings=_integrity_warnings(order, rows),
    )
