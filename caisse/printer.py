"""ESC/POS ticket printing for completed transactions."""

from __future__ import annotations

import os
from pathlib import Path

from caisse.config import (
    PRINTER_FONT_PATH,
    PRINTER_FONT_PATH_ENV,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_TAIL_SPACER_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
    SHOP_NAME,
)
from caisse.models import Transaction
from caisse.rendering import format_money, format_time, payment_label

_RULE_HEIGHT_PX = 12
_RULE_THICKNESS_PX = 2
_LINE_EXTRA_PX = 10
_PRICE_GUTTER_PX = 12
_LINUX_FONT_FALLBACKS = (
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
)


def resolve_printer_font_path() -> str:
    """
    Resolve a printer font path.

    Resolution order:
    1. CAISSE_PRINTER_FONT_PATH (if set)
    2. PRINTER_FONT_PATH
    3. Known Linux fallbacks
    """
    env_override = os.environ.get(PRINTER_FONT_PATH_ENV, "").strip()
    candidates: list[str] = []
    if env_override:
        candidates.append(env_override)
    candidates.append(PRINTER_FONT_PATH)
    candidates.extend(_LINUX_FONT_FALLBACKS)

    seen: set[str] = set()
    for candidate in candidates:
        if not candidate or candidate in seen:
            continue
        seen.add(candidate)
        if Path(candidate).is_file():
            return candidate

    raise RuntimeError(
        f"No usable printer font found. Set {PRINTER_FONT_PATH_ENV} to a valid .ttf/.otf file. "
        f"Tried: {', '.join(seen)}"
    )


def check_printer_dependencies() -> tuple[bool, str]:
    """Check whether printer dependencies are importable and a font is available."""
    try:
        from escpos.printer import Usb  # noqa: F401
        from PIL import ImageFont

        font_path = resolve_printer_font_path()
        ImageFont.truetype(font_path, PRINTER_FONT_SIZE)
    except (ImportError, OSError, RuntimeError) as exc:
        return (False, f"Printer unavailable: {exc}")
    return (True, "Printer ready")


def ticket_lines(transaction: Transaction) -> list[tuple[str, str]]:
    """Left/right text pairs for a ticket, top to bottom. ``("", "")`` marks a rule."""
    lines: list[tuple[str, str]] = [
        (SHOP_NAME, format_time(transaction.timestamp)),
        ("", ""),
    ]
    lines.extend((line.name, format_money(line.price)) for line in transaction.items)
    lines.append(("", ""))
    lines.append(("TOTAL", format_money(transaction.total)))
    lines.append((payment_label(transaction.payment_method), ""))
    return lines


def _fit_text_to_px(text: str, font: object, max_width_px: int) -> str:
    from PIL import Image, ImageDraw

    probe = Image.new("1", (1, 1), color=1)
    draw = ImageDraw.Draw(probe)
    if draw.textbbox((0, 0), text, font=font)[2] <= max_width_px:
        return text
    ellipsis = "..."
    trimmed = text
    while trimmed:
        candidate = f"{trimmed}{ellipsis}"
        if draw.textbbox((0, 0), candidate, font=font)[2] <= max_width_px:
            return candidate
        trimmed = trimmed[:-1]
    return ellipsis


def _render_line(left: str, right: str, font: object) -> object:
    from PIL import Image, ImageDraw

    canvas_height = PRINTER_FONT_SIZE + _LINE_EXTRA_PX
    img = Image.new("1", (PRINTER_WIDTH_PX, canvas_height), color=1)
    draw = ImageDraw.Draw(img)

    right_width = 0
    right_bbox = (0, 0, 0, 0)
    if right:
        right_bbox = draw.textbbox((0, 0), right, font=font)
        right_width = right_bbox[2] - right_bbox[0]

    max_left_px = PRINTER_WIDTH_PX - (PRINTER_LEFT_INDENT_PX * 2) - right_width - _PRICE_GUTTER_PX
    left = _fit_text_to_px(left, font, max(40, max_left_px))
    left_bbox = draw.textbbox((0, 0), left, font=font)
    text_height = left_bbox[3] - left_bbox[1]
    # Offset by bbox top so descenders are not clipped.
    y = (canvas_height - text_height) // 2 - left_bbox[1]
    draw.text((PRINTER_LEFT_INDENT_PX, y), left, font=font, fill=0)

    if right:
        x = PRINTER_WIDTH_PX - PRINTER_LEFT_INDENT_PX - right_width - right_bbox[0]
        draw.text((x, y), right, font=font, fill=0)
    return img


def _render_rule() -> object:
    from PIL import Image, ImageDraw

    img = Image.new("1", (PRINTER_WIDTH_PX, _RULE_HEIGHT_PX), color=1)
    draw = ImageDraw.Draw(img)
    top = (_RULE_HEIGHT_PX - _RULE_THICKNESS_PX) // 2
    draw.rectangle((PRINTER_LEFT_INDENT_PX, top, PRINTER_WIDTH_PX - PRINTER_LEFT_INDENT_PX, top + _RULE_THICKNESS_PX - 1), fill=0)
    return img


def _render_spacer(height_px: int) -> object:
    from PIL import Image

    return Image.new("1", (PRINTER_WIDTH_PX, max(1, height_px)), color=1)


def render_ticket(transaction: Transaction) -> list[object]:
    """Render a transaction ticket as a list of 1-bit images, one per printed row."""
    try:
        from PIL import ImageFont
    except ImportError as exc:
        raise RuntimeError(f"Printer dependencies unavailable: {exc}") from exc

    font = ImageFont.truetype(resolve_printer_font_path(), PRINTER_FONT_SIZE)
    images = []
    for left, right in ticket_lines(transaction):
        if not left and not right:
            images.append(_render_rule())
            continue
        images.append(_render_line(left, right, font))
    images.append(_render_spacer(PRINTER_TAIL_SPACER_PX))
    return images


def print_transaction(transaction: Transaction, printer: object | None = None) -> None:
    """Print one transaction ticket and cut the paper."""
    images = render_ticket(transaction)

    if printer is None:
        try:
            from escpos.printer import Usb
        except ImportError as exc:
            raise RuntimeError(f"Printer dependencies unavailable: {exc}") from exc
        printer = Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)

    for img in images:
        printer.image(img)
    printer.cut()
