"""In-memory register: running order, payment and transaction ledger."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable
from uuid import uuid4

from caisse.models import CatalogItem, OrderLine, PaymentMethod, RemovalPolicy, Transaction
from caisse.money import sum_money


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_transaction_id() -> str:
    return uuid4().hex


class Register:
    """
    Explicit state holder for one register session.

    The app owns one instance and routes every user action through it. All
    guard conditions (empty order, unknown transaction id) are no-ops that
    report ``False`` or ``None`` instead of raising.
    """

    def __init__(
        self,
        removal_policy: RemovalPolicy = RemovalPolicy.CANCEL,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_transaction_id,
    ) -> None:
        self.removal_policy = RemovalPolicy(removal_policy)
        self._clock = clock
        self._id_factory = id_factory
        self._order: list[OrderLine] = []
        self._ledger: list[Transaction] = []

    @property
    def order(self) -> tuple[OrderLine, ...]:
        return tuple(self._order)

    @property
    def order_total(self) -> Decimal:
        return sum_money(line.price for line in self._order)

    @property
    def ledger(self) -> tuple[Transaction, ...]:
        """Transactions, newest first."""
        return tuple(self._ledger)

    def add_item(self, item: OrderLine | CatalogItem) -> OrderLine:
        if isinstance(item, OrderLine):
            line = item
        elif isinstance(item, CatalogItem):
            line = OrderLine(name=item.name, price=item.price)
        else:
            raise TypeError(f"Cannot add {type(item).__name__} to an order; resolve wines to an OrderLine first")
        self._order.append(line)
        return line

    def remove_last_item(self) -> bool:
        if not self._order:
            return False
        self._order.pop()
        return True

    def clear_order(self) -> bool:
        if not self._order:
            return False
        self._order.clear()
        return True

    def pay(self, method: PaymentMethod | str) -> Transaction | None:
        """Turn the running order into a transaction and empty the order."""
        method = PaymentMethod(method)
        if not self._order:
            return None

        items = tuple(self._order)
        transaction = Transaction(
            id=self._id_factory(),
            items=items,
            total=sum_money(line.price for line in items),
            payment_method=method,
            timestamp=self._clock(),
        )
        self._ledger.insert(0, transaction)
        self._order = []
        return transaction

    def find_transaction(self, transaction_id: str) -> Transaction | None:
        for transaction in self._ledger:
            if transaction.id == transaction_id:
                return transaction
        return None

    def delete_transaction(self, transaction_id: str) -> bool:
        """Drop a transaction from the ledger entirely."""
        remaining = [t for t in self._ledger if t.id != transaction_id]
        if len(remaining) == len(self._ledger):
            return False
        self._ledger = remaining
        return True

    def cancel_transaction(self, transaction_id: str) -> bool:
        """Mark a transaction cancelled, keeping it in the ledger."""
        for idx, transaction in enumerate(self._ledger):
            if transaction.id != transaction_id:
                continue
            if transaction.cancelled:
                return False
            self._ledger[idx] = replace(transaction, cancelled=True)
            return True
        return False

    def remove_transaction(self, transaction_id: str) -> bool:
        """Take a transaction out of the statistics using the configured policy."""
        if self.removal_policy is RemovalPolicy.DELETE:
            return self.delete_transaction(transaction_id)
        return self.cancel_transaction(transaction_id)
