import logging
from functools import lru_cache
from typing import List, Optional, Sequence

from ecoswap.app.services.substitution.catalog import CATALOG
from ecoswap.app.services.substitution.impact_estimator import ImpactEstimator, savings_for
from ecoswap.app.services.substitution.ingredient_matcher import IngredientMatcher
from ecoswap.app.services.substitution.models import (
    AnalysisResult,
    EcoSwappedRecipe,
    EnvironmentalImpact,
    MatchedIngredient,
    SubstitutionSuggestion,
)
from ecoswap.app.services.substitution.recipe_rewriter import RecipeRewriter
from ecoswap.app.services.url_parsing.models import RawExtractionResult

logger = logging.getLogger(__name__)


def suggestion_for(match: MatchedIngredient) -> SubstitutionSuggestion:
    entry = CATALOG[match.matched_key]
    carbon, water = savings_for(match.matched_key)
    return SubstitutionSuggestion(
        original=match.original,
        matched_key=match.matched_key,
        alternatives=list(entry.alternatives),
        recommended=entry.default_alternative,
        ratio=entry.ratio,
        notes=entry.notes,
        quantity=match.quantity,
        unit=match.unit,
        category=entry.category,
        carbon_savings=carbon,
        water_savings=water,
    )


class IngredientAnalyzer:
    """Matches ingredient lines against the catalog, scores them and rewrites recipes."""

    def __init__(
        self,
        matcher: Optional[IngredientMatcher] = None,
        estimator: Optional[ImpactEstimator] = None,
        rewriter: Optional[RecipeRewriter] = None,
    ):
        self.matcher = matcher or IngredientMatcher()
        self.estimator = estimator or ImpactEstimator()
        self.rewriter = rewriter or RecipeRewriter(self.matcher)

    def analyze(self, ingredients: Sequence[str]) -> AnalysisResult:
        lines = [line for line in ingredients if line and line.strip()]
        matches: List[MatchedIngredient] = []
        for line in lines:
            match = self.matcher.match(line)
            if match is not None:
                matches.append(match)

        suggestions = [suggestion_for(match) for match in matches]
        report = self.estimator.score(len(lines), suggestions)
        logger.info(
            "Analyzed %d ingredients: %d non-vegan, score %d",
            report.total_ingredients,
            report.non_vegan_count,
            report.sustainability_score,
        )
        return AnalysisResult(report=report, suggestions=suggestions, non_vegan_ingredients=matches)

    def environmental_impact(self, suggestions: Sequence[SubstitutionSuggestion]) -> EnvironmentalImpact:
        return self.estimator.impact(suggestions)

    def rewrite(
        self,
        recipe: Optional[RawExtractionResult],
        suggestions: Optional[Sequence[SubstitutionSuggestion]],
    ) -> Optional[EcoSwappedRecipe]:
        return self.rewriter.rewrite(recipe, suggestions)


@lru_cache
def get_ingredient_analyzer() -> IngredientAnalyzer:
    return IngredientAnalyzer()
