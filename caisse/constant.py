"""Editable static menu and wine list."""

from __future__ import annotations

# Prices are strings so they load as exact decimals.
MENU_CATEGORIES: list[dict[str, object]] = [
    {
        "category": "Apéritifs",
        "items": [
            {"name": "Ricard", "price": "4.00"},
        ],
    },
    {
        "category": "Cocktails",
        "items": [
            {"name": "Cocktail", "price": "8.00"},
            {"name": "St Germain Spritz", "price": "10.00"},
        ],
    },
    {
        "category": "Bières",
        "items": [
            {"name": "Demi", "price": "3.50"},
            {"name": "Demi St Omer", "price": "4.00"},
            {"name": "Pinte", "price": "6.00"},
            {"name": "Pinte St Omer", "price": "8.00"},
        ],
    },
]

# Wine prices are (glass, double glass, bottle).
WINE_MENU: dict[str, object] = {
    "category": "Vins",
    "subcategories": [
        {
            "name": "Bulles",
            "wines": [
                ("Prosecco DOC - Riccadonna", ("7", "12", "26")),
                ("Champagne brut - Maxime Taillefert", ("11", "19", "54")),
            ],
        },
        {
            "name": "Blancs",
            "wines": [
                ("Menetou Salon - Domaine Chavet", ("7", "13", "31")),
                ("Saint-Véran - Domaine du Paradis", ("7", "13", "30")),
                ("Viognier - Paul Mas Estate", ("6", "10", "22")),
                ("IGP Côtes de Gascogne - Plaimont", ("6", "10", "22")),
                ("Bordeaux AOP - Altitude", ("6", "10", "22")),
            ],
        },
        {
            "name": "Rouges",
            "wines": [
                ("Côteaux bourguignons - Bouchard Aîné", ("6", "11", "24")),
                ("Chateauneuf-du-Pape - Clos de l'Oratoire", ("14", "25", "78")),
                ("Saint-Julien - Château Moulin de la Bridane", ("9", "16", "45")),
                ("Pic Saint Loup - Héritage", ("6", "11", "24")),
                ("Bordeaux AOP - Altitude", ("6", "10", "22")),
            ],
        },
        {
            "name": "Rosés",
            "wines": [
                ("Côtes de Provence - Estandon Héritage", ("6", "11", "24")),
                ("Gris Blanc - Gérard Bertrand", ("6", "11", "24")),
                ("Bordeaux rosé - Altitude", ("6", "10", "22")),
            ],
        },
    ],
}

# Suffix used in the order line name for each wine tier.
TIER_LABELS: dict[str, str] = {
    "glass": "Verre",
    "double_glass": "Double",
    "bottle": "Bouteille",
}

PAYMENT_METHOD_LABELS: dict[str, str] = {
    "card": "CB",
    "cash": "Espèces",
}
