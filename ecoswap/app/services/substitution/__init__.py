"""Ingredient substitution and sustainability scoring."""

from ecoswap.app.services.substitution.catalog import CATALOG, CatalogEntry, IngredientCategory
from ecoswap.app.services.substitution.impact_estimator import ImpactEstimator
from ecoswap.app.services.substitution.ingredient_analyzer import (
    IngredientAnalyzer,
    get_ingredient_analyzer,
)
from ecoswap.app.services.substitution.ingredient_matcher import IngredientMatcher
from ecoswap.app.services.substitution.recipe_rewriter import RecipeRewriter, replace_whole_word
from ecoswap.app.services.substitution.text_normalizer import (
    QuantitySplit,
    normalize,
    parse_quantity,
)

__all__ = [
    "CATALOG",
    "CatalogEntry",
    "IngredientCategory",
    "ImpactEstimator",
    "IngredientAnalyzer",
    "IngredientMatcher",
    "QuantitySplit",
    "RecipeRewriter",
    "get_ingredient_analyzer",
    "normalize",
    "parse_quantity",
    "replace_whole_word",
]
