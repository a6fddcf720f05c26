import json
from pathlib import Path
from urllib.parse import unquote

import pytest
from click.testing import CliRunner

from quickinvoice.cli import cli

ORDER_SNAPSHOT = {
    "id": "01HQZ8M5X3J9K2V7N4P6R8T0WA",
    "order_number": "INV-0012",
    "customer_name": "Yaw Boateng",
    "customer_phone": "020 111 2222",
    "items": [{"name": "Shea butter", "quantity": 3, "price": "12.50"}],
    "delivery_fee": "7.00",
    "status": "paid",
    "created_at": "2024-03-01T09:30:00Z",
}


@pytest.fixture
def order_file(tmp_path: Path) -> Path:
    path = tmp_path / "order.json"
    path.write_text(json.dumps(ORDER_SNAPSHOT), encoding="utf-8")
    return path


def test_render_writes_pdf_named_after_order(order_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "out"

    result = CliRunner().invoke(
        cli, ["render", str(order_file), "--rendered-at", "2024-03-01T10:00:00Z", "--output-dir", str(out)]
    )

    assert result.exit_code == 0, result.output
    pdf = out / "INV-0012.pdf"
    assert pdf.read_bytes().startswith(b"%PDF")
    assert "INV-0012.pdf (1 page(s))" in result.output


def test_render_is_reproducible(order_file: Path, tmp_path: Path) -> None:
    args = ["render", str(order_file), "--rendered-at", "2024-03-01T10:00:00Z"]

    runner = CliRunner()
    runner.invoke(cli, [*args, "--output-dir", str(tmp_path / "a")])
    runner.invoke(cli, [*args, "--output-dir", str(tmp_path / "b")])

    assert (tmp_path / "a" / "INV-0012.pdf").read_bytes() == (tmp_path / "b" / "INV-0012.pdf").read_bytes()


def test_render_text_with_premium_seller(order_file: Path, tmp_path: Path) -> None:
    seller_file = tmp_path / "seller.json"
    seller_file.write_text(
        json.dumps(
            {
                "business_name": "Ama Foods",
                "subscription_tier": "premium",
                "subscription_expires_at": "2024-12-31T00:00:00Z",
            }
        ),
        encoding="utf-8",
    )

    result = CliRunner().invoke(
        cli,
        ["render", str(order_file), "--seller", str(seller_file), "--rendered-at", "2024-03-01T10:00:00", "--text"],
    )

    assert result.exit_code == 0, result.output
    assert result.output.startswith("Ama Foods\nInvoice: INV-0012 (PAID)")
    assert "TOTAL: GH₵44.50" in result.output
    assert "Created with" not in result.output


def test_render_reports_total_mismatch(tmp_path: Path) -> None:
    path = tmp_path / "order.json"
    path.write_text(json.dumps({**ORDER_SNAPSHOT, "total": "50.00"}), encoding="utf-8")

    result = CliRunner().invoke(cli, ["render", str(path), "--text"])

    assert result.exit_code == 0, result.output
    assert "Warning: total mismatch: persisted 50.00, recomputed 44.50" in result.output
    assert "TOTAL: GH₵50.00" in result.output


def test_render_rejects_bad_timestamp(order_file: Path) -> None:
    result = CliRunner().invoke(cli, ["render", str(order_file), "--rendered-at", "yesterday"])

    assert result.exit_code == 2
    assert "not an ISO 8601 timestamp" in result.output


def test_render_rejects_invalid_snapshot(tmp_path: Path) -> None:
    path = tmp_path / "order.json"
    path.write_text(json.dumps({"order_number": "INV-0001"}), encoding="utf-8")

    result = CliRunner().invoke(cli, ["render", str(path)])

    assert result.exit_code == 1
    assert "customer_name" in result.output


def test_share_prints_message_and_link(order_file: Path) -> None:
    result = CliRunner().invoke(cli, ["share", str(order_file), "--base-url", "https://app.example.com"])

    assert result.exit_code == 0, result.output
    message, link = result.output.rstrip("\n").rsplit("\n\n", 1)
    assert message.startswith("*Invoice #INV-0012*")
    assert "https://app.example.com/orders/01HQZ8M5X3J9K2V7N4P6R8T0WA" in message
    assert link.startswith("https://wa.me/0201112222?text=")
    assert unquote(link.split("?text=", 1)[1]) == message
