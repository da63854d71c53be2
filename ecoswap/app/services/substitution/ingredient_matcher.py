"""Catalog lookup for free-text ingredient lines."""

import logging
import re
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from nltk.stem.porter import PorterStemmer

from ecoswap.app.services.substitution.catalog import (
    CATALOG,
    VEGAN_COMPOUNDS,
    VEGAN_QUALIFIERS,
    CatalogEntry,
)
from ecoswap.app.services.substitution.models import MatchedIngredient
from ecoswap.app.services.substitution.text_normalizer import normalize, parse_quantity

logger = logging.getLogger(__name__)


def _plant_based_phrases(phrases: Iterable[str]) -> Tuple[str, ...]:
    return tuple(sorted({normalize(p) for p in phrases if normalize(p)}, key=len, reverse=True))


def _plant_based_pattern(phrases: Sequence[str]) -> Optional[re.Pattern]:
    if not phrases:
        return None
    alternation = "|".join(re.escape(p) for p in phrases)
    return re.compile(rf"\b(?:{alternation})(?:es|s)?\b")


class IngredientMatcher:
    """Finds the first catalog key contained in an ingredient line.

    Plant-based phrases (catalog alternatives such as "oat milk", plus common
    compounds like "peanut butter") are blanked out before matching, and lines
    carrying a qualifier such as "vegan" or "dairy-free" never match. An exact
    substring pass runs first; a Porter-stemmed pass is the fallback.
    """

    def __init__(self, catalog: Optional[Mapping[str, CatalogEntry]] = None):
        self.catalog = catalog if catalog is not None else CATALOG
        self.stemmer = PorterStemmer()
        alternatives = [alt for entry in self.catalog.values() for alt in entry.alternatives]
        self.plant_based_phrases = _plant_based_phrases(list(alternatives) + list(VEGAN_COMPOUNDS))
        self._plant_based_re = _plant_based_pattern(self.plant_based_phrases)
        self._stemmed_keys: Dict[str, str] = {key: self.stem_phrase(key) for key in self.catalog}

    def stem_phrase(self, phrase: str) -> str:
        return " ".join(self.stemmer.stem(word) for word in phrase.split())

    def strip_plant_based(self, phrase: str) -> str:
        if self._plant_based_re is None:
            return phrase
        return re.sub(r"\s+", " ", self._plant_based_re.sub(" ", phrase)).strip()

    def _exact_match(self, phrase: str) -> Optional[str]:
        for key in self.catalog:
            if key in phrase:
                return key
        return None

    def _stemmed_match(self, phrase: str) -> Optional[str]:
        stemmed = self.stem_phrase(phrase)
        for key, stemmed_key in self._stemmed_keys.items():
            if stemmed_key in stemmed or key in phrase:
                return key
        return None

    def match(self, line: str) -> Optional[MatchedIngredient]:
        split = parse_quantity(line)
        normalized = normalize(split.ingredient)
        if not normalized:
            return None
        if VEGAN_QUALIFIERS.intersection(normalized.split()):
            logger.debug("Ingredient '%s' carries a plant-based qualifier", line)
            return None

        phrase = self.strip_plant_based(normalized)
        if not phrase:
            return None

        key = self._exact_match(phrase) or self._stemmed_match(phrase)
        if key is None:
            return None

        logger.debug("Ingredient '%s' matched catalog key '%s'", line, key)
        return MatchedIngredient(
            original=line,
            normalized=normalized,
            quantity=split.quantity,
            unit=split.unit,
            matched_key=key,
            category=self.catalog[key].category,
        )
