"""Formatting helpers for amounts, times and Rich labels."""

from __future__ import annotations

from datetime import datetime

from rich.text import Text

from caisse.config import CURRENCY_SYMBOL
from caisse.constant import PAYMENT_METHOD_LABELS
from caisse.models import OrderLine, PaymentMethod, Transaction
from caisse.money import round_money


def format_money(amount: object) -> str:
    """Two decimals and a trailing currency symbol, e.g. ``7.50 €``."""
    return f"{round_money(amount):.2f} {CURRENCY_SYMBOL}"


def format_time(moment: datetime) -> str:
    """Local wall-clock hour and minute."""
    return moment.astimezone().strftime("%H:%M")


def payment_label(method: PaymentMethod | str) -> str:
    return PAYMENT_METHOD_LABELS[PaymentMethod(method).value]


def badge_style(method: PaymentMethod | str) -> str:
    """Return a consistent badge style for payment tags."""
    if PaymentMethod(method) is PaymentMethod.CARD:
        return "bold #ffffff on #2f6db5"
    return "bold #0b1f0f on #5fbf72"


def format_payment_badge(method: PaymentMethod | str) -> Text:
    text = Text()
    text.append(f" {payment_label(method)} ", style=badge_style(method))
    return text


def format_order_line(line: OrderLine) -> Text:
    text = Text()
    text.append(line.name)
    text.append(f"  {format_money(line.price)}", style="bold")
    return text


def format_transaction_row(transaction: Transaction) -> Text:
    """Render one history row: time, items, total and payment badge."""
    style = "dim strike" if transaction.cancelled else ""
    text = Text()
    text.append(format_time(transaction.timestamp), style=style)
    text.append("  ")
    text.append(", ".join(line.name for line in transaction.items), style=style)
    text.append(f"  {format_money(transaction.total)} ", style=f"bold {style}".strip())
    text.append_text(format_payment_badge(transaction.payment_method))
    if transaction.cancelled:
        text.append(" cancelled", style="italic #b23a48")
    return text
