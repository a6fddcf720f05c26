"""Command line tools for rendering and sharing invoices offline.

Both commands read an order snapshot (JSON) instead of the database, so an
invoice can be reproduced exactly from exported data::

    quickinvoice render order.json --seller seller.json --rendered-at 2024-03-01T10:00:00Z
    quickinvoice share order.json
"""

import json
import sys
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

import click
import structlog
from dateutil import parser as date_parser
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from quickinvoice.logging import setup_logging
from quickinvoice.models.enums import OrderStatus, SubscriptionTier
from quickinvoice.models.order import Order, OrderItem
from quickinvoice.models.seller import Seller
from quickinvoice.money import compute_totals, to_money
from quickinvoice.services.invoices import build_invoice_document, build_share_link, render_text_summary
from quickinvoice.services.invoices.exceptions import RenderError
from quickinvoice.services.invoices.renderer import InvoiceRenderer
from quickinvoice.services.orders.inputs import LineItemInput
from quickinvoice.utils.datetime_utils import ensure_utc, utc_now

logger = structlog.get_logger(__name__)


class OrderSnapshot(BaseModel):
    """Exported order. Missing subtotal/total are recomputed from the items."""

    id: str | None = None
    order_number: str
    customer_name: str
    customer_phone: str
    items: list[LineItemInput]
    delivery_fee: Decimal = Decimal("0")
    subtotal: Decimal | None = None
    total: Decimal | None = None
    status: OrderStatus = OrderStatus.UNPAID
    payment_method: str | None = None
    notes: str | None = None
    created_at: datetime


class SellerSnapshot(BaseModel):
    """Exported seller branding profile."""

    business_name: str | None = None
    phone: str | None = None
    momo_number: str | None = None
    subscription_tier: SubscriptionTier = SubscriptionTier.FREE
    subscription_expires_at: datetime | None = None


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{path}: invalid JSON ({e})") from e


def load_order(path: Path) -> Order:
    """Build a transient Order (not attached to any session) from a snapshot file."""
    try:
        snapshot = OrderSnapshot.model_validate(_read_json(path))
    except PydanticValidationError as e:
        raise click.ClickException(f"{path}: {e}") from e

    items = [
        OrderItem(position=position, name=item.name, quantity=item.quantity, unit_price=to_money(item.unit_price))
        for position, item in enumerate(snapshot.items, start=1)
    ]
    delivery_fee = to_money(snapshot.delivery_fee)
    subtotal, total = compute_totals(items, delivery_fee)
    created_at = ensure_utc(snapshot.created_at)

    fields: dict[str, Any] = {}
    if snapshot.id:
        fields["id"] = snapshot.id
    return Order(
        **fields,
        seller_id="",
        order_number=snapshot.order_number,
        customer_name=snapshot.customer_name,
        customer_phone=snapshot.customer_phone,
        items=items,
        subtotal=to_money(snapshot.subtotal) if snapshot.subtotal is not None else subtotal,
        delivery_fee=delivery_fee,
        total=to_money(snapshot.total) if snapshot.total is not None else total,
        status=snapshot.status,
        payment_method=snapshot.payment_method,
        notes=snapshot.notes,
        created_at=created_at,
        updated_at=created_at,
    )


def load_seller(path: Path) -> Seller:
    """Build a transient Seller from a snapshot file."""
    try:
        snapshot = SellerSnapshot.model_validate(_read_json(path))
    except PydanticValidationError as e:
        raise click.ClickException(f"{path}: {e}") from e
    return Seller(**snapshot.model_dump())


def parse_instant(value: str | None) -> datetime:
    """Parse a user-supplied timestamp; naive values are taken as UTC."""
    if not value:
        return utc_now()
    try:
        return ensure_utc(date_parser.isoparse(value))
    except ValueError as e:
        raise click.BadParameter(f"not an ISO 8601 timestamp: {value}", param_hint="--rendered-at") from e


@click.group()
def cli() -> None:
    """QuickInvoice invoice tools."""
    # stdout carries invoice text and share links
    setup_logging(stream=sys.stderr)


@cli.command("render")
@click.argument("order_json", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--seller",
    "seller_json",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Seller profile snapshot; without it the invoice is unbranded",
)
@click.option("--rendered-at", help="Render instant (ISO 8601, default: now)")
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory for <order_number>.pdf",
)
@click.option("--text", "as_text", is_flag=True, help="Print the plain-text summary instead of writing a PDF")
def render(
    order_json: Path,
    seller_json: Path | None,
    rendered_at: str | None,
    output_dir: Path,
    as_text: bool,
) -> None:
    """Render ORDER_JSON to an invoice PDF."""
    order = load_order(order_json)
    seller = load_seller(seller_json) if seller_json else None
    document = build_invoice_document(order, seller, rendered_at=parse_instant(rendered_at))

    for warning in document.warnings:
        click.secho(f"Warning: {warning}", fg="yellow", err=True)

    if as_text:
        click.echo(render_text_summary(document))
        return

    try:
        invoice = InvoiceRenderer().render(document)
    except RenderError as e:
        raise click.ClickException(str(e)) from e

    output_dir.mkdir(parents=True, exist_ok=True)
    target = output_dir / invoice.filename
    target.write_bytes(invoice.content)
    logger.info("Wrote invoice", path=str(target), pages=invoice.page_count)
    click.echo(f"Wrote {target} ({invoice.page_count} page(s))")


@cli.command("share")
@click.argument("order_json", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--base-url", help="Public URL of the app (default: from settings)")
def share(order_json: Path, base_url: str | None) -> None:
    """Print the customer message and WhatsApp link for ORDER_JSON."""
    order = load_order(order_json)
    link = build_share_link(order, base_url=base_url)
    click.echo(link.message)
    click.echo()
    click.echo(link.contact_link)


if __name__ == "__main__":
    cli()
