"""PDF layout for invoice documents (reportlab platypus).

The renderer never decides *what* is on an invoice, only how it looks: every
string comes from the ``InvoiceDocument``. Output is byte-identical for an
identical document because reportlab runs in invariant mode (fixed creation
date and document ID).

Long item tables flow onto further pages; the table header row, the running
page header and the footer repeat on every page.
"""

import base64
import io
from dataclasses import dataclass, field
from typing import Any
from xml.sax.saxutils import escape as xml_escape

import structlog
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen.canvas import Canvas
from reportlab.platypus import Flowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle, XPreformatted
from reportlab.platypus.flowables import HRFlowable

from quickinvoice.config import settings
from quickinvoice.models.status import Tone
from quickinvoice.money import format_money
from quickinvoice.services.invoices.document import InvoiceDocument, PartyBlock
from quickinvoice.services.invoices.exceptions import RenderError, UnrenderableText

logger = structlog.get_logger(__name__)

PDF_MEDIA_TYPE = "application/pdf"

PRIMARY = colors.HexColor("#22c55e")  # green-500
DARK = colors.HexColor("#1f2937")  # gray-800
MUTED = colors.HexColor("#9ca3af")  # gray-400
STRIPE = colors.HexColor("#f3f4f6")  # gray-100

TONE_COLORS: dict[Tone, colors.Color] = {
    Tone.WARNING: colors.HexColor("#eab308"),  # yellow
    Tone.SUCCESS: colors.HexColor("#22c55e"),  # green
    Tone.INFO: colors.HexColor("#3b82f6"),  # blue
    Tone.NEUTRAL: DARK,
}

_ALIGNMENTS = {"left": TA_LEFT, "center": TA_CENTER, "right": TA_RIGHT}
_TABLE_ALIGN = {"left": "LEFT", "center": "CENTER", "right": "RIGHT"}

_TTF_REGULAR = "QuickInvoiceSans"
_TTF_BOLD = "QuickInvoiceSans-Bold"


@dataclass(frozen=True)
class RenderedInvoice:
    """Printable invoice artifact."""

    content: bytes
    filename: str
    page_count: int
    media_type: str = PDF_MEDIA_TYPE

    def as_data_url(self) -> str:
        """Embeddable ``data:`` URL form of the artifact."""
        encoded = base64.b64encode(self.content).decode("ascii")
        return f"data:{self.media_type};filename={self.filename};base64,{encoded}"


@dataclass(frozen=True)
class InvoiceFonts:
    """Font pair used for an invoice plus glyph coverage checks.

    Standard PDF fonts (Helvetica) draw WinAnsi (cp1252) characters only;
    TrueType fonts draw whatever their cmap contains.
    """

    regular: str = "Helvetica"
    bold: str = "Helvetica-Bold"
    truetype: bool = False

    def missing_glyphs(self, text: str) -> str:
        """Characters of ``text`` the regular font cannot draw, in order of first use."""
        missing: list[str] = []
        for char in text:
            if char in missing or self._covers(char):
                continue
            missing.append(char)
        return "".join(missing)

    def covers(self, text: str) -> bool:
        return not self.missing_glyphs(text)

    def _covers(self, char: str) -> bool:
        if self.truetype:
            face = pdfmetrics.getFont(self.regular).face  # type: ignore[attr-defined]
            return ord(char) in face.charToGlyph
        try:
            char.encode("cp1252")
        except UnicodeEncodeError:
            return False
        return True


def load_fonts(regular_path: str | None, bold_path: str | None = None) -> InvoiceFonts:
    """Register TrueType fonts if configured, else fall back to Helvetica."""
    if not regular_path:
        return InvoiceFonts()

    registered = set(pdfmetrics.getRegisteredFontNames())
    try:
        if _TTF_REGULAR not in registered:
            pdfmetrics.registerFont(TTFont(_TTF_REGULAR, regular_path))
        bold_name = _TTF_REGULAR
        if bold_path:
            if _TTF_BOLD not in registered:
                pdfmetrics.registerFont(TTFont(_TTF_BOLD, bold_path))
            bold_name = _TTF_BOLD
    except Exception as e:
        raise RenderError(f"Cannot load invoice font {regular_path}: {e}") from e

    logger.debug("Registered invoice fonts", regular=regular_path, bold=bold_path)
    return InvoiceFonts(regular=_TTF_REGULAR, bold=bold_name, truetype=True)


@dataclass(frozen=True)
class _Styles:
    title: ParagraphStyle
    base: ParagraphStyle
    small: ParagraphStyle
    muted: ParagraphStyle
    heading: ParagraphStyle
    status: ParagraphStyle
    table_header: ParagraphStyle
    cells: dict[str, ParagraphStyle] = field(default_factory=dict)


def _styles(fonts: InvoiceFonts, document: InvoiceDocument) -> _Styles:
    base = ParagraphStyle("base", fontName=fonts.regular, fontSize=10, leading=13, textColor=DARK)
    small = ParagraphStyle("small", parent=base, fontSize=9, leading=12)
    cells = {
        column.align: ParagraphStyle(f"cell-{column.align}", parent=small, alignment=_ALIGNMENTS[column.align])
        for column in document.columns
    }
    return _Styles(
        title=ParagraphStyle("title", parent=base, fontName=fonts.bold, fontSize=24, leading=28, textColor=PRIMARY),
        base=base,
        small=small,
        muted=ParagraphStyle("muted", parent=small, textColor=MUTED),
        heading=ParagraphStyle("heading", parent=base, fontName=fonts.bold, fontSize=11, leading=14),
        status=ParagraphStyle(
            "status",
            parent=base,
            fontName=fonts.bold,
            fontSize=12,
            leading=15,
            alignment=TA_RIGHT,
            textColor=TONE_COLORS.get(document.header.status_tone, DARK),
        ),
        table_header=ParagraphStyle("tableHeader", parent=small, fontName=fonts.bold, textColor=colors.white),
        cells=cells,
    )


def _text(value: str, style: ParagraphStyle) -> Paragraph:
    return Paragraph(xml_escape(value), style)


def _verbatim(value: str, style: ParagraphStyle) -> XPreformatted:
    # Keeps leading indentation and runs of spaces
    return XPreformatted(xml_escape(value), style)


class _PageDecorator:
    """Draws the running header and footer on every page."""

    def __init__(self, document: InvoiceDocument, fonts: InvoiceFonts):
        self.document = document
        self.fonts = fonts
        self.page_count = 0

    def first_page(self, canvas: Canvas, doc: SimpleDocTemplate) -> None:
        self._footer(canvas, doc)

    def later_pages(self, canvas: Canvas, doc: SimpleDocTemplate) -> None:
        header = self.document.header
        canvas.saveState()
        canvas.setFont(self.fonts.bold, 10)
        canvas.setFillColor(PRIMARY)
        canvas.drawString(doc.leftMargin, doc.pagesize[1] - 12 * mm, header.business_name)
        canvas.setFont(self.fonts.regular, 9)
        canvas.setFillColor(DARK)
        canvas.drawRightString(
            doc.leftMargin + doc.width,
            doc.pagesize[1] - 12 * mm,
            f"Invoice: {header.invoice_number} (continued)",
        )
        canvas.setStrokeColor(MUTED)
        canvas.line(doc.leftMargin, doc.pagesize[1] - 14 * mm, doc.leftMargin + doc.width, doc.pagesize[1] - 14 * mm)
        canvas.restoreState()
        self._footer(canvas, doc)

    def _footer(self, canvas: Canvas, doc: SimpleDocTemplate) -> None:
        page = canvas.getPageNumber()
        self.page_count = max(self.page_count, page)

        canvas.saveState()
        canvas.setFont(self.fonts.regular, 8)
        canvas.setFillColor(MUTED)
        center = doc.pagesize[0] / 2
        y = 15 * mm
        for line in self.document.footer.lines:
            canvas.drawCentredString(center, y, line)
            y -= 4 * mm
        canvas.drawRightString(doc.leftMargin + doc.width, 15 * mm, f"Page {page}")
        canvas.restoreState()


class InvoiceRenderer:
    """Turns an ``InvoiceDocument`` into a paginated A4 PDF."""

    def __init__(self, fonts: InvoiceFonts | None = None, *, compress: bool = True):
        self.fonts = fonts or load_fonts(settings.invoice_font_path, settings.invoice_bold_font_path)
        # Uncompressed output keeps page content streams readable
        self.compress = compress

    def render(self, document: InvoiceDocument) -> RenderedInvoice:
        """Render the document to PDF bytes.

        Raises:
            UnrenderableText: Some text needs glyphs the font does not have.
            RenderError: Layout failed (nothing is truncated to make it fit).
        """
        self._check_glyphs(document)
        styles = _styles(self.fonts, document)
        currency = self._currency_prefix(document)

        buf = io.BytesIO()
        doc = SimpleDocTemplate(
            buf,
            pagesize=A4,
            leftMargin=20 * mm,
            rightMargin=20 * mm,
            topMargin=20 * mm,
            bottomMargin=25 * mm,
            title=f"Invoice {document.header.invoice_number}",
            author=document.header.business_name,
            creator=document.header.business_name,
            invariant=True,
            pageCompression=1 if self.compress else 0,
        )

        story: list[Flowable] = []
        self._append_header(story, document, styles, doc)
        self._append_parties(story, document, styles, doc)
        self._append_items(story, document, styles, doc, currency)
        self._append_summary(story, document, styles, doc, currency)
        self._append_notes(story, document, styles)

        decorator = _PageDecorator(document, self.fonts)
        try:
            doc.build(story, onFirstPage=decorator.first_page, onLaterPages=decorator.later_pages)
        except Exception as e:
            logger.error("Invoice layout failed", invoice_number=document.header.invoice_number, error=str(e))
            raise RenderError(f"Cannot lay out invoice {document.header.invoice_number}: {e}") from e

        logger.debug(
            "Rendered invoice",
            invoice_number=document.header.invoice_number,
            pages=decorator.page_count,
            rows=len(document.rows),
        )
        return RenderedInvoice(content=buf.getvalue(), filename=document.filename, page_count=decorator.page_count)

    def _currency_prefix(self, document: InvoiceDocument) -> str:
        if self.fonts.covers(document.currency_prefix):
            return document.currency_prefix
        return f"{document.currency_code} "

    def _check_glyphs(self, document: InvoiceDocument) -> None:
        header = document.header
        texts: list[str] = [header.business_name, header.invoice_number, header.issued_on, header.status_label]
        texts.extend(document.bill_to.lines)
        if document.seller_block:
            texts.extend(document.seller_block.lines)
        texts.extend(row.name for row in document.rows)
        texts.extend(row.label for row in document.summary)
        texts.extend(document.notes)
        texts.extend(document.footer.lines)
        for text in texts:
            missing = self.fonts.missing_glyphs(text)
            if missing:
                raise UnrenderableText(text, missing, self.fonts.regular)

    def _append_header(self, story: list[Flowable], document: InvoiceDocument, styles: _Styles, doc: Any) -> None:
        header = document.header
        left = [
            _text(header.business_name, styles.title),
            Spacer(1, 4),
            _text(f"Invoice: {header.invoice_number}", styles.base),
            _text(f"Date: {header.issued_on}", styles.base),
        ]
        table = Table([[left, _text(header.status_label, styles.status)]], colWidths=[doc.width * 0.7, doc.width * 0.3])
        table.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "BOTTOM"),
                    ("LEFTPADDING", (0, 0), (-1, -1), 0),
                    ("RIGHTPADDING", (0, 0), (-1, -1), 0),
                ]
            )
        )
        story.append(table)
        story.append(HRFlowable(width="100%", thickness=0.8, color=MUTED, spaceBefore=6, spaceAfter=10))

    def _party_cell(self, block: PartyBlock | None, styles: _Styles) -> list[Flowable] | str:
        if block is None:
            return ""
        cell: list[Flowable] = [_text(block.heading, styles.heading)]
        cell.extend(_text(line, styles.base) for line in block.lines)
        return cell

    def _append_parties(self, story: list[Flowable], document: InvoiceDocument, styles: _Styles, doc: Any) -> None:
        row = [self._party_cell(document.bill_to, styles), self._party_cell(document.seller_block, styles)]
        table = Table([row], colWidths=[doc.width * 0.6, doc.width * 0.4])
        table.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("LEFTPADDING", (0, 0), (-1, -1), 0),
                ]
            )
        )
        story.append(table)
        story.append(Spacer(1, 12))

    def _append_items(
        self, story: list[Flowable], document: InvoiceDocument, styles: _Styles, doc: Any, currency: str
    ) -> None:
        columns = document.columns
        rows: list[list[Flowable]] = [[_text(column.title, styles.table_header) for column in columns]]
        for item in document.rows:
            values = (
                item.name,
                str(item.quantity),
                format_money(item.unit_price, currency),
                format_money(item.line_total, currency),
            )
            rows.append([_text(value, styles.cells[column.align]) for column, value in zip(columns, values)])

        # repeatRows=1 re-draws the header row on every page the table spills onto
        table = Table(rows, colWidths=[doc.width * column.width for column in columns], repeatRows=1)
        commands: list[tuple[Any, ...]] = [
            ("BACKGROUND", (0, 0), (-1, 0), PRIMARY),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, STRIPE]),
            ("TOPPADDING", (0, 0), (-1, -1), 5),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 5),
        ]
        commands.extend(
            ("ALIGN", (index, 0), (index, -1), _TABLE_ALIGN[column.align]) for index, column in enumerate(columns)
        )
        table.setStyle(TableStyle(commands))
        story.append(table)
        story.append(Spacer(1, 10))

    def _append_summary(
        self, story: list[Flowable], document: InvoiceDocument, styles: _Styles, doc: Any, currency: str
    ) -> None:
        right = ParagraphStyle("summaryValue", parent=styles.base, alignment=TA_RIGHT)
        total_value = ParagraphStyle("summaryTotal", parent=right, fontName=self.fonts.bold)
        rows: list[list[Any]] = []
        commands: list[tuple[Any, ...]] = [("ALIGN", (2, 0), (2, -1), "RIGHT")]
        for index, row in enumerate(document.summary):
            label_style = styles.heading if row.emphasized else styles.base
            value_style = total_value if row.emphasized else right
            rows.append(["", _text(row.label, label_style), _text(format_money(row.amount, currency), value_style)])
            if row.emphasized:
                commands.append(("LINEABOVE", (1, index), (2, index), 0.8, DARK))

        table = Table(rows, colWidths=[doc.width * 0.55, doc.width * 0.2, doc.width * 0.25])
        table.setStyle(TableStyle(commands))
        story.append(table)

    def _append_notes(self, story: list[Flowable], document: InvoiceDocument, styles: _Styles) -> None:
        if not document.notes:
            return
        story.append(Spacer(1, 14))
        story.append(_text("Notes:", styles.muted))
        for line in document.notes:
            if line:
                story.append(_verbatim(line, styles.small))
            else:
                story.append(Spacer(1, styles.small.leading))
