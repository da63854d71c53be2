from ecoswap.app.services.substitution.catalog import CATALOG
from ecoswap.app.services.substitution.impact_estimator import (
    DEFAULT_CARBON_SAVINGS,
    DEFAULT_WATER_SAVINGS,
    ImpactEstimator,
    savings_for,
)
from ecoswap.app.services.substitution.ingredient_analyzer import suggestion_for
from ecoswap.app.services.substitution.models import MatchedIngredient


def make_suggestion(key: str, original: str = ""):
    match = MatchedIngredient(
        original=original or key,
        normalized=key,
        matched_key=key,
        category=CATALOG[key].category,
    )
    return suggestion_for(match)


def test_empty_ingredient_list_scores_zero():
    report = ImpactEstimator().score(0, [])
    assert report.total_ingredients == 0
    assert report.sustainability_score == 0


def test_fully_vegan_recipe_scores_vegan_weight_only():
    report = ImpactEstimator().score(4, [])
    assert report.vegan_count == 4
    assert report.non_vegan_count == 0
    assert report.sustainability_score == 60


def test_dairy_substitution_gets_medium_bonus():
    report = ImpactEstimator().score(2, [make_suggestion("milk")])
    assert report.sustainability_score == 40


def test_score_rounds_half_up():
    suggestions = [make_suggestion("egg"), make_suggestion("honey"), make_suggestion("mayonnaise")]
    report = ImpactEstimator().score(8, suggestions)
    # 60 * 5/8 + 3 * 5 = 52.5
    assert report.sustainability_score == 53


def test_score_is_capped_at_100():
    suggestions = [make_suggestion("beef") for _ in range(8)]
    report = ImpactEstimator().score(10, suggestions)
    assert report.sustainability_score == 100
    assert report.vegan_count + report.non_vegan_count == report.total_ingredients


def test_unlisted_keys_use_non_zero_defaults():
    assert savings_for("gelatin") == (DEFAULT_CARBON_SAVINGS, DEFAULT_WATER_SAVINGS)
    assert DEFAULT_CARBON_SAVINGS > 0
    assert DEFAULT_WATER_SAVINGS > 0


def test_impact_totals_and_land_use_proxy():
    impact = ImpactEstimator().impact([make_suggestion("beef"), make_suggestion("milk")])
    assert impact.carbon_footprint_reduction == 15.8
    assert impact.water_usage_reduction == 1700.0
    assert impact.land_use_reduction == 31.6
