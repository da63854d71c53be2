from ecoswap.app.services.substitution.ingredient_analyzer import (
    IngredientAnalyzer,
    get_ingredient_analyzer,
)
from ecoswap.app.services.url_parsing.usage_governor import UsageGovernor
from ecoswap.app.services.url_recipe_parser import (
    RecipeExtractor,
    get_recipe_extractor,
    get_usage_governor,
)


def get_extractor() -> RecipeExtractor:
    return get_recipe_extractor()


def get_analyzer() -> IngredientAnalyzer:
    return get_ingredient_analyzer()


def get_governor() -> UsageGovernor:
    return get_usage_governor()
