"""Shared constants for recipe text parsing."""

FRACTION_MAP = {
    "¼": "1/4",
    "½": "1/2",
    "¾": "3/4",
    "⅐": "1/7",
    "⅑": "1/9",
    "⅒": "1/10",
    "⅓": "1/3",
    "⅔": "2/3",
    "⅕": "1/5",
    "⅖": "2/5",
    "⅗": "3/5",
    "⅘": "4/5",
    "⅙": "1/6",
    "⅚": "5/6",
    "⅛": "1/8",
    "⅜": "3/8",
    "⅝": "5/8",
    "⅞": "7/8",
}

FRACTION_CHARS = "".join(FRACTION_MAP.keys())

# Singular, lowercase, without trailing periods; see normalize_unit_token
COMMON_UNITS = {
    "tsp",
    "teaspoon",
    "tbsp",
    "tbs",
    "tablespoon",
    "cup",
    "c",
    "oz",
    "ounce",
    "fl",
    "lb",
    "lbs",
    "pound",
    "g",
    "gram",
    "kg",
    "kilogram",
    "mg",
    "ml",
    "milliliter",
    "millilitre",
    "l",
    "liter",
    "litre",
    "pint",
    "pt",
    "quart",
    "qt",
    "gallon",
    "gal",
    "stick",
    "clove",
    "can",
    "package",
    "pkg",
    "slice",
    "piece",
    "pinch",
    "dash",
    "bunch",
    "sprig",
    "head",
    "inch",
    "jar",
    "bottle",
    "handful",
    "fillet",
}
