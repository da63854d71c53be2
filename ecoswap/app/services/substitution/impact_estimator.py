"""Environmental savings and sustainability scoring."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence, Tuple

from ecoswap.app.services.substitution.catalog import IngredientCategory
from ecoswap.app.services.substitution.models import (
    AnalysisReport,
    EnvironmentalImpact,
    SubstitutionSuggestion,
)

# kg CO2e saved per substituted ingredient
CARBON_SAVINGS = {
    "beef": 15.0,
    "beef broth": 2.0,
    "beef stock": 2.0,
    "lamb": 10.0,
    "pork": 3.5,
    "bacon": 3.0,
    "sausage": 3.0,
    "pepperoni": 3.0,
    "chicken": 2.5,
    "chicken broth": 0.5,
    "chicken stock": 0.5,
    "turkey": 2.5,
    "fish": 2.0,
    "salmon": 2.5,
    "tuna": 2.0,
    "shrimp": 3.0,
    "crab": 2.5,
    "milk": 0.8,
    "buttermilk": 0.6,
    "butter": 2.0,
    "ghee": 2.0,
    "cream": 1.2,
    "heavy cream": 1.2,
    "sour cream": 1.0,
    "cream cheese": 1.5,
    "ice cream": 1.0,
    "cheese": 2.5,
    "parmesan": 2.5,
    "mozzarella": 2.5,
    "yogurt": 0.6,
    "eggs": 0.9,
    "egg": 0.45,
    "honey": 0.2,
}

# Liters of water saved per substituted ingredient
WATER_SAVINGS = {
    "beef": 1500.0,
    "beef broth": 200.0,
    "beef stock": 200.0,
    "lamb": 1000.0,
    "pork": 600.0,
    "bacon": 500.0,
    "sausage": 500.0,
    "pepperoni": 500.0,
    "chicken": 430.0,
    "chicken broth": 100.0,
    "chicken stock": 100.0,
    "turkey": 400.0,
    "fish": 300.0,
    "salmon": 350.0,
    "tuna": 300.0,
    "shrimp": 350.0,
    "crab": 300.0,
    "milk": 200.0,
    "buttermilk": 150.0,
    "butter": 500.0,
    "ghee": 500.0,
    "cream": 300.0,
    "heavy cream": 300.0,
    "sour cream": 250.0,
    "cream cheese": 350.0,
    "ice cream": 250.0,
    "cheese": 500.0,
    "parmesan": 500.0,
    "mozzarella": 500.0,
    "yogurt": 150.0,
    "eggs": 200.0,
    "egg": 100.0,
    "honey": 30.0,
}

DEFAULT_CARBON_SAVINGS = 0.5
DEFAULT_WATER_SAVINGS = 50.0

HIGH_IMPACT_KEYS = frozenset({"beef", "pork", "lamb"})
MEDIUM_IMPACT_KEYS = frozenset({"chicken", "fish", "salmon"})

VEGAN_RATIO_WEIGHT = 60
HIGH_IMPACT_BONUS = 15
MEDIUM_IMPACT_BONUS = 10
BASE_BONUS = 5

# Land use has no table of its own
LAND_USE_FACTOR = 2


def savings_for(key: str) -> Tuple[float, float]:
    """Carbon and water savings for a catalog key, never zero."""
    return (
        CARBON_SAVINGS.get(key, DEFAULT_CARBON_SAVINGS),
        WATER_SAVINGS.get(key, DEFAULT_WATER_SAVINGS),
    )


def substitution_bonus(key: str, category: IngredientCategory) -> int:
    if key in HIGH_IMPACT_KEYS:
        return HIGH_IMPACT_BONUS
    if key in MEDIUM_IMPACT_KEYS or category == IngredientCategory.DAIRY:
        return MEDIUM_IMPACT_BONUS
    return BASE_BONUS


def _round_half_up(value: float, places: str = "1") -> Decimal:
    return Decimal(str(value)).quantize(Decimal(places), rounding=ROUND_HALF_UP)


class ImpactEstimator:
    def score(
        self, total_ingredients: int, suggestions: Sequence[SubstitutionSuggestion]
    ) -> AnalysisReport:
        non_vegan_count = len(suggestions)
        vegan_count = total_ingredients - non_vegan_count
        if total_ingredients <= 0:
            return AnalysisReport(
                total_ingredients=0, non_vegan_count=0, vegan_count=0, sustainability_score=0
            )

        raw = VEGAN_RATIO_WEIGHT * vegan_count / total_ingredients
        raw += sum(substitution_bonus(s.matched_key, s.category) for s in suggestions)
        clamped = min(100.0, max(0.0, raw))
        return AnalysisReport(
            total_ingredients=total_ingredients,
            non_vegan_count=non_vegan_count,
            vegan_count=vegan_count,
            sustainability_score=int(_round_half_up(clamped)),
        )

    def impact(self, suggestions: Sequence[SubstitutionSuggestion]) -> EnvironmentalImpact:
        carbon = sum(s.carbon_savings for s in suggestions)
        water = sum(s.water_savings for s in suggestions)
        return EnvironmentalImpact(
            carbon_footprint_reduction=float(_round_half_up(carbon, "0.1")),
            water_usage_reduction=float(_round_half_up(water, "0.1")),
            land_use_reduction=float(_round_half_up(carbon * LAND_USE_FACTOR, "0.1")),
        )
