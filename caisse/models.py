"""Domain models for the café register."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class Tier(str, Enum):
    """Serving size a wine can be sold in."""

    GLASS = "glass"
    DOUBLE_GLASS = "double_glass"
    BOTTLE = "bottle"


class PaymentMethod(str, Enum):
    CARD = "card"
    CASH = "cash"


class RemovalPolicy(str, Enum):
    """How a transaction is taken out of the statistics."""

    DELETE = "delete"
    CANCEL = "cancel"


@dataclass(frozen=True)
class CatalogItem:
    """A simple sellable item with a single price."""

    name: str
    price: Decimal


@dataclass(frozen=True)
class WinePrices:
    glass: Decimal
    double_glass: Decimal
    bottle: Decimal

    def for_tier(self, tier: Tier) -> Decimal:
        return getattr(self, Tier(tier).value)


@dataclass(frozen=True)
class WineItem:
    """A wine sold by glass, double glass or bottle."""

    name: str
    prices: WinePrices


@dataclass(frozen=True)
class MenuCategory:
    name: str
    items: tuple[CatalogItem, ...]


@dataclass(frozen=True)
class WineSubcategory:
    name: str
    wines: tuple[WineItem, ...]


@dataclass(frozen=True)
class WineCategory:
    name: str
    subcategories: tuple[WineSubcategory, ...]


@dataclass(frozen=True)
class Catalog:
    """Everything the café sells, grouped for display."""

    categories: tuple[MenuCategory, ...]
    wine_categories: tuple[WineCategory, ...]


@dataclass(frozen=True)
class OrderLine:
    """A priced selection in the running order."""

    name: str
    price: Decimal


@dataclass(frozen=True)
class Transaction:
    """A completed sale. Only ``cancelled`` may change, by replacement."""

    id: str
    items: tuple[OrderLine, ...]
    total: Decimal
    payment_method: PaymentMethod
    timestamp: datetime
    cancelled: bool = False


@dataclass(frozen=True)
class ProductSales:
    name: str
    quantity: int
    total: Decimal


@dataclass(frozen=True)
class Summary:
    """Aggregates shown on the data tab."""

    revenue: Decimal
    card_total: Decimal
    cash_total: Decimal
    transaction_count: int
    sales_by_product: dict[str, ProductSales]
