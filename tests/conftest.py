"""Shared fixtures for register tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from caisse.catalog import load_catalog
from caisse.models import OrderLine
from caisse.money import D
from caisse.register import Register

START = datetime(2024, 6, 21, 18, 30, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def debug_log_path(tmp_path, monkeypatch):
    """Keep the debug log out of /tmp during tests."""
    path = tmp_path / "caisse-debug.log"
    monkeypatch.setenv("CAISSE_DEBUG_LOG_PATH", str(path))
    monkeypatch.delenv("CAISSE_REMOVAL_POLICY", raising=False)
    return path


@pytest.fixture
def clock():
    """A clock that advances one minute per call."""
    ticks = count()

    def _now() -> datetime:
        return START + timedelta(minutes=next(ticks))

    return _now


@pytest.fixture
def id_factory():
    ids = count(1)
    return lambda: f"tx-{next(ids)}"


@pytest.fixture
def register(clock, id_factory):
    return Register(clock=clock, id_factory=id_factory)


@pytest.fixture
def catalog():
    return load_catalog()


@pytest.fixture
def line():
    def _line(name: str, price: str) -> OrderLine:
        return OrderLine(name=name, price=D(price))

    return _line
