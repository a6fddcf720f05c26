"""Plain-text rendering of an invoice, for chat messages and logs."""

from quickinvoice.money import format_money
from quickinvoice.services.invoices.document import InvoiceDocument


def render_text_summary(document: InvoiceDocument) -> str:
    """Render the document as plain text, one section per paragraph.

    Deterministic for a fixed document; uses the real currency prefix since
    plain text has no font limits.
    """
    header = document.header
    prefix = document.currency_prefix

    lines: list[str] = [
        header.business_name,
        f"Invoice: {header.invoice_number} ({header.status_label})",
        f"Date: {header.issued_on}",
        "",
        f"{document.bill_to.heading} {', '.join(document.bill_to.lines)}",
    ]
    if document.seller_block:
        lines.append(f"{document.seller_block.heading} {', '.join(document.seller_block.lines)}")

    lines.append("")
    for row in document.rows:
        lines.append(
            f"- {row.name} x{row.quantity} @ {format_money(row.unit_price, prefix)}"
            f" = {format_money(row.line_total, prefix)}"
        )

    lines.append("")
    lines.extend(f"{row.label} {format_money(row.amount, prefix)}" for row in document.summary)

    if document.notes:
        lines.append("")
        lines.append("Notes:")
        lines.extend(document.notes)

    lines.append("")
    lines.extend(document.footer.lines)
    return "\n".join(lines)
