"""Ingredient line normalization and quantity splitting."""

import re

from pydantic import BaseModel

from ecoswap.app.services.url_parsing.constants import FRACTION_CHARS
from ecoswap.app.services.url_parsing.parsing_utils import clean_text, is_known_unit

_NUMBER = r"\d+(?:\.\d+)?"
QUANTITY_RE = re.compile(
    rf"^\s*(\d+\s+\d+/\d+|\d+/\d+|{_NUMBER}\s*[{FRACTION_CHARS}]|{_NUMBER}|[{FRACTION_CHARS}])(?=\s|$|[A-Za-z])\s*(.*)$",
    re.DOTALL,
)
NON_WORD_RE = re.compile(r"[^\w\s]")


class QuantitySplit(BaseModel):
    quantity: str = ""
    unit: str = ""
    ingredient: str = ""


def normalize(text: str) -> str:
    """Lowercase, drop punctuation and collapse whitespace."""
    return clean_text(NON_WORD_RE.sub("", (text or "").lower()))


def parse_quantity(text: str) -> QuantitySplit:
    """Split a leading quantity and optional known unit off an ingredient line.

    "1 1/2 cups flour" gives quantity "1 1/2", unit "cups", ingredient "flour".
    Lines without a leading quantity come back whole as the ingredient.
    """
    raw = clean_text(text)
    match = QUANTITY_RE.match(raw)
    if not match:
        return QuantitySplit(ingredient=raw)

    quantity = clean_text(match.group(1))
    rest = match.group(2).strip()
    unit = ""
    parts = rest.split(" ", 1)
    if parts and parts[0] and is_known_unit(parts[0]):
        unit = parts[0].lower().rstrip(".")
        rest = parts[1].strip() if len(parts) > 1 else ""
    return QuantitySplit(quantity=quantity, unit=unit, ingredient=rest)
