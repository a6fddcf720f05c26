from datetime import timedelta
from decimal import Decimal

from quickinvoice.models import Seller, SubscriptionTier
from quickinvoice.services.invoices.document import Branding, build_invoice_document, wrap_notes
from quickinvoice.services.invoices.exceptions import IntegrityWarning

from tests.factories import NOW, make_order

BRANDING = Branding(product_name="QuickInvoice GH", currency_prefix="GH₵", currency_code="GHS")


def premium(expires_in: timedelta = timedelta(days=30), **fields: object) -> Seller:
    values: dict[str, object] = {
        "business_name": "Ama Foods",
        "phone": "0244000111",
        "momo_number": "0555000222",
        "subscription_tier": SubscriptionTier.PREMIUM,
        "subscription_expires_at": NOW + expires_in,
    }
    values.update(fields)
    return Seller(**values)


def test_premium_seller_brands_the_invoice() -> None:
    document = build_invoice_document(make_order(), premium(), rendered_at=NOW, branding=BRANDING)

    assert document.premium is True
    assert document.header.business_name == "Ama Foods"
    assert document.footer.watermark is None
    assert document.footer.lines == ("Generated on 01/03/2024 10:00 GMT",)
    assert document.seller_block is not None
    assert document.seller_block.heading == "From:"
    assert document.seller_block.lines == ("Ama Foods", "0244000111", "MoMo: 0555000222")


def test_free_seller_gets_watermark_and_no_from_block() -> None:
    seller = Seller(business_name="Ama Foods", subscription_tier=SubscriptionTier.FREE)

    document = build_invoice_document(make_order(), seller, rendered_at=NOW, branding=BRANDING)

    assert document.premium is False
    assert document.header.business_name == "QuickInvoice GH"
    assert document.seller_block is None
    assert document.footer.lines[0] == "Created with QuickInvoice GH"


def test_premium_expiring_at_render_time_counts_as_expired() -> None:
    document = build_invoice_document(make_order(), premium(timedelta(0)), rendered_at=NOW, branding=BRANDING)

    assert document.premium is False
    assert document.footer.watermark == "Created with QuickInvoice GH"


def test_premium_without_business_name_uses_default_seller_name() -> None:
    document = build_invoice_document(
        make_order(), premium(business_name=None), rendered_at=NOW, branding=BRANDING
    )

    assert document.header.business_name == "QuickInvoice GH"
    assert document.seller_block is not None
    assert document.seller_block.lines[0] == "My Business"


def test_premium_with_name_but_no_contacts_has_no_from_block() -> None:
    document = build_invoice_document(
        make_order(), premium(phone=None, momo_number="  "), rendered_at=NOW, branding=BRANDING
    )

    assert document.premium is True
    assert document.header.business_name == "Ama Foods"
    assert document.seller_block is None


def test_missing_seller_renders_unbranded() -> None:
    document = build_invoice_document(make_order(), None, rendered_at=NOW, branding=BRANDING)

    assert document.premium is False
    assert document.seller_block is None


def test_header_bill_to_and_rows() -> None:
    order = make_order(order_number="INV-0007", items=[("Rice", 2, "15.00"), ("Oil", 1, "30.00")])

    document = build_invoice_document(order, None, rendered_at=NOW, branding=BRANDING)

    assert document.header.invoice_number == "INV-0007"
    assert document.header.issued_on == "01/03/2024"
    assert document.header.status_label == "UNPAID"
    assert document.bill_to.heading == "Bill To:"
    assert document.bill_to.lines == ("Akosua Mensah", "+233 24 412 3456")
    assert [column.title for column in document.columns] == ["Item", "Qty", "Price", "Total"]
    assert [(row.name, row.quantity, row.line_total) for row in document.rows] == [
        ("Rice", 2, Decimal("30.00")),
        ("Oil", 1, Decimal("30.00")),
    ]
    assert document.filename == "INV-0007.pdf"


def test_delivery_fee_row_only_when_positive() -> None:
    with_fee = build_invoice_document(make_order(delivery_fee="5.00"), None, rendered_at=NOW, branding=BRANDING)
    without_fee = build_invoice_document(make_order(), None, rendered_at=NOW, branding=BRANDING)

    assert [row.label for row in with_fee.summary] == ["Subtotal:", "Delivery Fee:", "TOTAL:"]
    assert [row.label for row in without_fee.summary] == ["Subtotal:", "TOTAL:"]
    assert with_fee.summary[-1].emphasized
    assert with_fee.total == Decimal("55.00")


def test_mismatched_totals_warn_but_show_persisted_amounts() -> None:
    order = make_order(items=[("Rice", 2, "15.00")], subtotal="30.00", total="99.00")

    document = build_invoice_document(order, None, rendered_at=NOW, branding=BRANDING)

    assert document.total == Decimal("99.00")
    assert document.warnings == (IntegrityWarning("total", Decimal("99.00"), Decimal("30.00")),)


def test_consistent_totals_have_no_warnings() -> None:
    document = build_invoice_document(make_order(delivery_fee="5"), None, rendered_at=NOW, branding=BRANDING)

    assert document.warnings == ()


def test_notes_are_wrapped_and_blank_notes_dropped() -> None:
    noted = build_invoice_document(
        make_order(notes="Deliver after 5pm.\n\nCall on arrival."), None, rendered_at=NOW, branding=BRANDING
    )
    blank = build_invoice_document(make_order(notes="   "), None, rendered_at=NOW, branding=BRANDING)

    assert noted.notes == ("Deliver after 5pm.", "", "Call on arrival.")
    assert blank.notes == ()


def test_wrap_notes_splits_long_lines() -> None:
    lines = wrap_notes("word " * 30, width=20)

    assert all(len(line) <= 20 for line in lines)
    assert " ".join(lines).split() == ["word"] * 30


def test_notes_keep_indentation_and_inner_spacing() -> None:
    document = build_invoice_document(
        make_order(notes="\na    b\n  - indented\n\n"), None, rendered_at=NOW, branding=BRANDING
    )

    assert document.notes == ("a    b", "  - indented")
