"""Decimal helpers for currency amounts."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

Money = Decimal

ZERO = Decimal("0")


def D(x: object) -> Money:
    """Coerce a price-like value to an exact Decimal."""
    return x if isinstance(x, Decimal) else Decimal(str(x or "0"))


def round_money(x: object) -> Money:
    return D(x).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def sum_money(values) -> Money:
    return sum((D(v) for v in values), ZERO)
