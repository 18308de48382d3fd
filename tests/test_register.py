from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from caisse.models import CatalogItem, PaymentMethod, RemovalPolicy, WineItem, WinePrices
from caisse.register import Register

PAID_AT = datetime(2024, 6, 21, 18, 30, tzinfo=timezone.utc)


def test_total_is_exact_sum_of_lines(register, line):
    for name, price in [("Demi", "3.50"), ("Cocktail", "8.00"), ("Glass", "0.10"), ("Glass", "0.20")]:
        register.add_item(line(name, price))

    assert register.order_total == Decimal("11.80")
    assert len(register.order) == 4


def test_total_ignores_order_of_addition(clock, id_factory, line):
    prices = ["0.10", "0.20", "3.50", "7", "0.30"]
    forward = Register(clock=clock, id_factory=id_factory)
    backward = Register(clock=clock, id_factory=id_factory)
    for price in prices:
        forward.add_item(line("x", price))
    for price in reversed(prices):
        backward.add_item(line("x", price))

    assert forward.order_total == backward.order_total == Decimal("11.10")


def test_empty_order_total_is_zero(register):
    assert register.order_total == Decimal("0")
    assert register.order == ()


def test_add_catalog_item_becomes_order_line(register):
    added = register.add_item(CatalogItem(name="Ricard", price=Decimal("4.00")))

    assert added.name == "Ricard"
    assert register.order == (added,)


def test_remove_last_then_readd_restores_total(register, line):
    register.add_item(line("Ricard", "4.00"))
    register.add_item(line("Demi", "3.50"))
    before = register.order_total

    assert register.remove_last_item() is True
    register.add_item(line("Demi", "3.50"))

    assert register.order_total == before


def test_remove_last_item_on_pinte_leaves_empty_order(register, line):
    register.add_item(line("Pinte", "6.00"))

    register.remove_last_item()

    assert register.order == ()
    assert register.order_total == Decimal("0.00")


def test_remove_and_clear_on_empty_order_are_noops(register):
    assert register.remove_last_item() is False
    assert register.clear_order() is False
    assert register.order == ()


def test_clear_order_empties_without_transaction(register, line):
    register.add_item(line("Ricard", "4.00"))

    assert register.clear_order() is True
    assert register.order == ()
    assert register.ledger == ()


def test_pay_cash_records_transaction_and_clears_order(register, line):
    register.add_item(line("Ricard", "4.00"))
    register.add_item(line("Demi", "3.50"))
    assert register.order_total == Decimal("7.50")

    transaction = register.pay("cash")

    assert register.ledger == (transaction,)
    assert transaction.total == Decimal("7.50")
    assert transaction.payment_method is PaymentMethod.CASH
    assert transaction.timestamp == PAID_AT
    assert transaction.cancelled is False
    assert register.order == ()
    assert register.order_total == Decimal("0")


def test_pay_with_empty_order_is_noop(register):
    assert register.pay(PaymentMethod.CARD) is None
    assert register.ledger == ()


def test_pay_rejects_unknown_method(register, line):
    register.add_item(line("Ricard", "4.00"))

    with pytest.raises(ValueError):
        register.pay("cheque")
    assert len(register.order) == 1


def test_transaction_snapshot_survives_later_orders(register, line):
    register.add_item(line("Ricard", "4.00"))
    register.add_item(line("Demi", "3.50"))
    lines_at_payment = register.order
    transaction = register.pay(PaymentMethod.CARD)

    register.add_item(line("Pinte", "6.00"))
    register.remove_last_item()
    register.add_item(line("Cocktail", "8.00"))
    register.clear_order()

    assert transaction.items == lines_at_payment
    assert register.ledger[0].items == lines_at_payment
    assert register.ledger[0].total == Decimal("7.50")


def test_ledger_is_newest_first_with_unique_ids(register, line):
    ids = []
    for price in ["1.00", "2.00", "3.00"]:
        register.add_item(line("x", price))
        ids.append(register.pay(PaymentMethod.CASH).id)

    assert [t.id for t in register.ledger] == list(reversed(ids))
    assert len(set(ids)) == 3


def test_default_ids_are_unique(line):
    register = Register()
    ids = set()
    for _ in range(50):
        register.add_item(line("Demi", "3.50"))
        ids.add(register.pay(PaymentMethod.CASH).id)

    assert len(ids) == 50


def test_default_timestamp_is_timezone_aware(line):
    register = Register()
    register.add_item(line("Demi", "3.50"))

    transaction = register.pay(PaymentMethod.CASH)

    assert transaction.timestamp.tzinfo is not None


def _two_transactions(register, line):
    register.add_item(line("Cocktail", "10.00"))
    card = register.pay(PaymentMethod.CARD)
    register.add_item(line("Cocktail", "5.00"))
    cash = register.pay(PaymentMethod.CASH)
    return card, cash


def test_delete_removes_transaction(register, line):
    card, cash = _two_transactions(register, line)

    assert register.delete_transaction(card.id) is True
    assert register.ledger == (cash,)
    assert register.find_transaction(card.id) is None


def test_cancel_keeps_transaction_flagged(register, line):
    card, cash = _two_transactions(register, line)

    assert register.cancel_transaction(card.id) is True

    cancelled = register.find_transaction(card.id)
    assert cancelled.cancelled is True
    assert cancelled.items == card.items
    assert cancelled.total == card.total
    assert cancelled.timestamp == card.timestamp
    assert [t.id for t in register.ledger] == [cash.id, card.id]


def test_cancel_twice_is_idempotent(register, line):
    card, _ = _two_transactions(register, line)
    register.cancel_transaction(card.id)
    ledger = register.ledger

    assert register.cancel_transaction(card.id) is False
    assert register.ledger == ledger


@pytest.mark.parametrize("operation", ["delete_transaction", "cancel_transaction", "remove_transaction"])
def test_unknown_id_leaves_ledger_unchanged(register, line, operation):
    _two_transactions(register, line)
    ledger = register.ledger

    assert getattr(register, operation)("missing") is False
    assert register.ledger == ledger


def test_remove_transaction_follows_policy(clock, id_factory, line):
    soft = Register(removal_policy=RemovalPolicy.CANCEL, clock=clock, id_factory=id_factory)
    hard = Register(removal_policy="delete", clock=clock, id_factory=id_factory)
    for register in (soft, hard):
        register.add_item(line("Demi", "3.50"))
        register.pay(PaymentMethod.CASH)

    soft.remove_transaction(soft.ledger[0].id)
    hard.remove_transaction(hard.ledger[0].id)

    assert len(soft.ledger) == 1
    assert soft.ledger[0].cancelled is True
    assert hard.ledger == ()


def test_ledger_view_cannot_mutate_register(register, line):
    register.add_item(line("Demi", "3.50"))
    register.pay(PaymentMethod.CASH)

    view = register.ledger
    assert isinstance(view, tuple)
    assert isinstance(register.order, tuple)


def test_add_item_rejects_unresolved_wine(register):
    wine = WineItem(name="Chablis", prices=WinePrices(Decimal("7"), Decimal("12"), Decimal("28")))

    with pytest.raises(TypeError, match="WineItem"):
        register.add_item(wine)
    assert register.order == ()
