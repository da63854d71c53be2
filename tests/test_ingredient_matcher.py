import pytest

from ecoswap.app.services.substitution.catalog import CATALOG, IngredientCategory
from ecoswap.app.services.substitution.ingredient_matcher import IngredientMatcher


@pytest.fixture(scope="module")
def matcher():
    return IngredientMatcher()


def test_match_whole_milk_keeps_quantity_and_unit(matcher):
    match = matcher.match("2 cups whole milk")
    assert match is not None
    assert match.matched_key == "milk"
    assert match.quantity == "2"
    assert match.unit == "cups"
    assert match.normalized == "whole milk"
    assert match.category == IngredientCategory.DAIRY


def test_plural_eggs_prefers_plural_key(matcher):
    assert matcher.match("3 free-range eggs").matched_key == "eggs"
    assert matcher.match("1 egg yolk").matched_key == "egg"


def test_earlier_catalog_key_wins(matcher):
    keys = list(CATALOG)
    assert keys.index("milk") < keys.index("butter")
    assert matcher.match("butter and milk").matched_key == "milk"


@pytest.mark.parametrize(
    "line, key",
    [
        ("1 cup sour cream", "sour cream"),
        ("2 cups chicken broth", "chicken broth"),
        ("1 cup buttermilk", "buttermilk"),
        ("1 tbsp fish sauce", "fish sauce"),
        ("1 lb ground beef", "beef"),
    ],
)
def test_compound_keys_match_before_single_words(matcher, line, key):
    assert matcher.match(line).matched_key == key


@pytest.mark.parametrize(
    "line",
    [
        "2 cups oat milk",
        "1/2 cup vegan butter",
        "2 tbsp peanut butter",
        "1 large eggplant, diced",
        "1 cup dairy-free yogurt",
        "1 cup coconut milk",
        "1 cup rice",
        "",
    ],
)
def test_plant_based_lines_do_not_match(matcher, line):
    assert matcher.match(line) is None


def test_stemmed_fallback_matches_plural_forms(matcher):
    match = matcher.match("4 anchovies, minced")
    assert match is not None
    assert match.matched_key == "anchovy"
    assert match.category == IngredientCategory.SEAFOOD
