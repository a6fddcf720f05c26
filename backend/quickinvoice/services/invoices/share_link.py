"""Customer-facing share message and WhatsApp contact link."""

import re
from dataclasses import dataclass
from urllib.parse import quote

from quickinvoice.config import settings
from quickinvoice.models.order import Order
from quickinvoice.money import format_money

_NON_DIGITS = re.compile(r"[^0-9]")

# Characters JavaScript's encodeURIComponent leaves alone (besides alphanumerics and "-_.~")
_URI_COMPONENT_SAFE = "!*'()"


@dataclass(frozen=True)
class ShareLink:
    message: str
    contact_link: str


def normalize_phone(phone: str) -> str:
    """Keep only ASCII digits: ``"024-412 3456"`` -> ``"0244123456"``.

    Never fails and is idempotent.
    """
    return _NON_DIGITS.sub("", phone or "")


def order_url(order: Order, base_url: str) -> str:
    return f"{base_url.rstrip('/')}/orders/{order.id}"


def build_message(
    order: Order,
    *,
    base_url: str,
    currency_prefix: str,
    summary: str | None = None,
) -> str:
    """Fill the share message template for an order.

    A plain-text invoice summary, if given, goes between the total and the link.
    """
    parts = [
        f"*Invoice #{order.order_number}*",
        f"Hi {order.customer_name},",
        f"Your invoice is ready! Total: {format_money(order.total, currency_prefix)}",
    ]
    if summary:
        parts.append(summary)
    parts.append(f"View your invoice: {order_url(order, base_url)}")
    parts.append("Thank you for your business!")
    return "\n\n".join(parts)


def build_share_link(
    order: Order,
    *,
    base_url: str | None = None,
    share_base_url: str | None = None,
    currency_prefix: str | None = None,
    summary: str | None = None,
) -> ShareLink:
    """Build the share message and a ``wa.me`` link that pre-fills it."""
    message = build_message(
        order,
        base_url=base_url or settings.public_base_url,
        currency_prefix=currency_prefix or settings.currency_prefix,
        summary=summary,
    )
    share_base = (share_base_url or settings.share_base_url).rstrip("/")
    digits = normalize_phone(order.customer_phone)
    contact_link = f"{share_base}/{digits}?text={quote(message, safe=_URI_COMPONENT_SAFE)}"
    return ShareLink(message=message, contact_link=contact_link)
