"""Aggregates derived from the transaction ledger.

Everything here is recomputed from scratch on each call and ignores
cancelled transactions.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from caisse.models import PaymentMethod, ProductSales, Summary, Transaction
from caisse.money import ZERO, sum_money


def _active(ledger: Iterable[Transaction]) -> list[Transaction]:
    return [t for t in ledger if not t.cancelled]


def total_revenue(ledger: Iterable[Transaction]) -> Decimal:
    return sum_money(t.total for t in _active(ledger))


def total_by_method(ledger: Iterable[Transaction], method: PaymentMethod | str) -> Decimal:
    method = PaymentMethod(method)
    return sum_money(t.total for t in _active(ledger) if t.payment_method is method)


def transaction_count(ledger: Iterable[Transaction]) -> int:
    return len(_active(ledger))


def sales_by_product(ledger: Iterable[Transaction]) -> dict[str, ProductSales]:
    """Quantity and revenue per line name, highest revenue first.

    Ties keep the order in which names first appear in the ledger.
    """
    quantities: dict[str, int] = {}
    totals: dict[str, Decimal] = {}
    for transaction in _active(ledger):
        for line in transaction.items:
            quantities[line.name] = quantities.get(line.name, 0) + 1
            totals[line.name] = totals.get(line.name, ZERO) + line.price

    names = sorted(totals, key=lambda name: totals[name], reverse=True)
    return {name: ProductSales(name=name, quantity=quantities[name], total=totals[name]) for name in names}


def summarize(ledger: Iterable[Transaction]) -> Summary:
    active = _active(ledger)
    return Summary(
        revenue=total_revenue(active),
        card_total=total_by_method(active, PaymentMethod.CARD),
        cash_total=total_by_method(active, PaymentMethod.CASH),
        transaction_count=len(active),
        sales_by_product=sales_by_product(active),
    )
