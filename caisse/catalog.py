"""Static catalog loading, wine tier resolution and search."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from caisse.constant import MENU_CATEGORIES, TIER_LABELS, WINE_MENU
from caisse.money import D
from caisse.models import (
    Catalog,
    CatalogItem,
    MenuCategory,
    OrderLine,
    Tier,
    WineCategory,
    WineItem,
    WinePrices,
    WineSubcategory,
)

HEADER_ROW = "header"
SUBHEADER_ROW = "subheader"
ITEM_ROW = "item"
WINE_ROW = "wine"


def _price(raw: object, name: object) -> Decimal:
    price = D(raw)
    if price < 0:
        raise ValueError(f"Price for {name!r} must not be negative (got {raw!r})")
    return price


@dataclass(frozen=True)
class CatalogRow:
    """One line of the flattened menu list."""

    kind: str
    label: str
    entry: CatalogItem | WineItem | None = None

    @property
    def selectable(self) -> bool:
        return self.kind in {ITEM_ROW, WINE_ROW}


def _build_wine_category(raw: dict[str, object]) -> WineCategory:
    subcategories = []
    for sub in raw["subcategories"]:  # type: ignore[union-attr]
        wines = tuple(
            WineItem(
                name=str(name),
                prices=WinePrices(
                    glass=_price(glass, name),
                    double_glass=_price(double, name),
                    bottle=_price(bottle, name),
                ),
            )
            for name, (glass, double, bottle) in sub["wines"]
        )
        subcategories.append(WineSubcategory(name=str(sub["name"]), wines=wines))
    return WineCategory(name=str(raw["category"]), subcategories=tuple(subcategories))


def load_catalog(
    menu_categories: list[dict[str, object]] | None = None,
    wine_menus: list[dict[str, object]] | None = None,
) -> Catalog:
    """Build the frozen catalog from raw menu data (defaults to ``constant.py``)."""
    menu_categories = MENU_CATEGORIES if menu_categories is None else menu_categories
    wine_menus = [WINE_MENU] if wine_menus is None else wine_menus

    categories = tuple(
        MenuCategory(
            name=str(raw["category"]),
            items=tuple(
                CatalogItem(name=str(item["name"]), price=_price(item["price"], item["name"]))
                for item in raw["items"]  # type: ignore[union-attr]
            ),
        )
        for raw in menu_categories
    )
    return Catalog(
        categories=categories,
        wine_categories=tuple(_build_wine_category(raw) for raw in wine_menus),
    )


def tier_label(tier: Tier) -> str:
    return TIER_LABELS[Tier(tier).value]


def resolve_selection(wine: WineItem, tier: Tier) -> OrderLine:
    """Flatten a wine and a tier into a priced order line, e.g. ``"Chablis (Bouteille)"``."""
    tier = Tier(tier)
    return OrderLine(name=f"{wine.name} ({tier_label(tier)})", price=wine.prices.for_tier(tier))


def filter_catalog(catalog: Catalog, query: str) -> Catalog:
    """
    Project the catalog down to entries matching ``query``.

    Matching is a case-insensitive substring test on simple item names, and on
    either the wine name or its subcategory name for wines. Categories and
    subcategories left without entries are dropped. An empty query returns the
    catalog as is.
    """
    q = query.strip().lower()
    if not q:
        return catalog

    categories = []
    for category in catalog.categories:
        items = tuple(item for item in category.items if q in item.name.lower())
        if items:
            categories.append(MenuCategory(name=category.name, items=items))

    wine_categories = []
    for wine_category in catalog.wine_categories:
        subcategories = []
        for sub in wine_category.subcategories:
            if q in sub.name.lower():
                wines = sub.wines
            else:
                wines = tuple(wine for wine in sub.wines if q in wine.name.lower())
            if wines:
                subcategories.append(WineSubcategory(name=sub.name, wines=wines))
        if subcategories:
            wine_categories.append(WineCategory(name=wine_category.name, subcategories=tuple(subcategories)))

    return Catalog(categories=tuple(categories), wine_categories=tuple(wine_categories))


def catalog_rows(catalog: Catalog) -> list[CatalogRow]:
    """Flatten a catalog into headed display rows."""
    rows: list[CatalogRow] = []
    for category in catalog.categories:
        rows.append(CatalogRow(HEADER_ROW, category.name))
        rows.extend(CatalogRow(ITEM_ROW, item.name, item) for item in category.items)
    for wine_category in catalog.wine_categories:
        rows.append(CatalogRow(HEADER_ROW, wine_category.name))
        for sub in wine_category.subcategories:
            rows.append(CatalogRow(SUBHEADER_ROW, sub.name))
            rows.extend(CatalogRow(WINE_ROW, wine.name, wine) for wine in sub.wines)
    return rows
