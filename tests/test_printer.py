from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from caisse import printer
from caisse.models import OrderLine, PaymentMethod, Transaction


@pytest.fixture
def transaction():
    return Transaction(
        id="tx-1",
        items=(OrderLine("Ricard", Decimal("4.00")), OrderLine("Prosecco DOC - Riccadonna (Verre)", Decimal("7"))),
        total=Decimal("11.00"),
        payment_method=PaymentMethod.CARD,
        timestamp=datetime(2024, 6, 21, 18, 5, tzinfo=timezone.utc),
    )


class FakePrinter:
    def __init__(self):
        self.images = []
        self.cut_count = 0

    def image(self, img):
        self.images.append(img)

    def cut(self):
        self.cut_count += 1


def test_ticket_lines_list_items_total_and_method(transaction):
    lines = printer.ticket_lines(transaction)

    assert lines[0][0] == "Autobus Café"
    assert ("Ricard", "4.00 €") in lines
    assert ("Prosecco DOC - Riccadonna (Verre)", "7.00 €") in lines
    assert ("TOTAL", "11.00 €") in lines
    assert lines[-1] == ("CB", "")


def test_print_transaction_sends_every_image_then_cuts(monkeypatch, transaction):
    monkeypatch.setattr(printer, "render_ticket", lambda t: ["header", "line", "total"])
    fake = FakePrinter()

    printer.print_transaction(transaction, printer=fake)

    assert fake.images == ["header", "line", "total"]
    assert fake.cut_count == 1


def test_font_env_override_wins(monkeypatch, tmp_path):
    font = tmp_path / "ticket.ttf"
    font.write_bytes(b"")
    monkeypatch.setenv("CAISSE_PRINTER_FONT_PATH", str(font))

    assert printer.resolve_printer_font_path() == str(font)


def test_missing_font_raises(monkeypatch, tmp_path):
    monkeypatch.delenv("CAISSE_PRINTER_FONT_PATH", raising=False)
    monkeypatch.setattr(printer, "PRINTER_FONT_PATH", str(tmp_path / "missing.ttf"))
    monkeypatch.setattr(printer, "_LINUX_FONT_FALLBACKS", ())

    with pytest.raises(RuntimeError, match="No usable printer font"):
        printer.resolve_printer_font_path()


def test_dependency_check_reports_missing_font(monkeypatch, tmp_path):
    pytest.importorskip("escpos")
    pytest.importorskip("PIL")
    monkeypatch.delenv("CAISSE_PRINTER_FONT_PATH", raising=False)
    monkeypatch.setattr(printer, "PRINTER_FONT_PATH", str(tmp_path / "missing.ttf"))
    monkeypatch.setattr(printer, "_LINUX_FONT_FALLBACKS", ())

    ok, message = printer.check_printer_dependencies()

    assert ok is False
    assert message.startswith("Printer unavailable")


_FONT_CANDIDATES = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/System/Library/Fonts/SFNS.ttf",
    "/Library/Fonts/Arial.ttf",
)


@pytest.fixture
def ticket_font(monkeypatch):
    """Point the printer at a real TrueType font, or skip when none is installed."""
    pytest.importorskip("PIL")
    from pathlib import Path

    font_path = next((path for path in _FONT_CANDIDATES if Path(path).is_file()), None)
    if font_path is None:
        pytest.skip("no TrueType font available")
    monkeypatch.setenv("CAISSE_PRINTER_FONT_PATH", font_path)
    return font_path


def test_render_ticket_one_full_width_image_per_row(ticket_font, transaction):
    long_line = OrderLine("Chateauneuf-du-Pape " * 5, Decimal("78"))
    transaction = Transaction(
        id=transaction.id,
        items=transaction.items + (long_line,),
        total=transaction.total + long_line.price,
        payment_method=transaction.payment_method,
        timestamp=transaction.timestamp,
    )

    images = printer.render_ticket(transaction)

    assert len(images) == len(printer.ticket_lines(transaction)) + 1
    assert all(img.size[0] == printer.PRINTER_WIDTH_PX for img in images)
    assert images[-1].size[1] == printer.PRINTER_TAIL_SPACER_PX


def test_long_text_is_truncated_to_fit(ticket_font):
    from PIL import Image, ImageDraw, ImageFont

    font = ImageFont.truetype(ticket_font, printer.PRINTER_FONT_SIZE)
    max_width = 200

    fitted = printer._fit_text_to_px("x" * 100, font, max_width)

    assert fitted.endswith("...")
    assert len(fitted) < 100
    draw = ImageDraw.Draw(Image.new("1", (1, 1), color=1))
    assert draw.textbbox((0, 0), fitted, font=font)[2] <= max_width


def test_short_text_is_left_untouched(ticket_font):
    from PIL import ImageFont

    font = ImageFont.truetype(ticket_font, printer.PRINTER_FONT_SIZE)

    assert printer._fit_text_to_px("Demi", font, printer.PRINTER_WIDTH_PX) == "Demi"
