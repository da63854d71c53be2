"""Produces a copy of a recipe with substitutions applied in place."""

import logging
import re
from typing import Iterable, List, Optional, Sequence

from ecoswap.app.services.substitution.ingredient_matcher import IngredientMatcher
from ecoswap.app.services.substitution.models import (
    EcoSwappedIngredient,
    EcoSwappedRecipe,
    SubstitutionSuggestion,
    SwapSummaryItem,
)
from ecoswap.app.services.url_parsing.models import RawExtractionResult

logger = logging.getLogger(__name__)

TITLE_PREFIX = "Eco-Swapped "


def replace_whole_word(
    text: str, key: str, replacement: str, protected: Iterable[str] = ()
) -> str:
    """Replace every case-insensitive whole-word occurrence of ``key``.

    Occurrences that sit inside one of the ``protected`` phrases (or its plural)
    are left alone, so "oat milk" survives a milk -> oat milk swap.
    """
    if not key:
        return text
    phrases = sorted({p for p in protected if p}, key=len, reverse=True)
    guarded = []
    if phrases:
        alternation = "|".join(re.escape(p) for p in phrases)
        guarded = [
            m.span()
            for m in re.finditer(rf"\b(?:{alternation})(?:es|s)?\b", text, re.IGNORECASE)
        ]

    def _swap(match: re.Match) -> str:
        start, end = match.span()
        if any(g_start <= start and end <= g_end for g_start, g_end in guarded):
            return match.group(0)
        return replacement

    pattern = re.compile(rf"\b{re.escape(key)}\b", re.IGNORECASE)
    return pattern.sub(_swap, text)


def find_suggestion(
    line: str,
    suggestions: Sequence[SubstitutionSuggestion],
    matcher: IngredientMatcher,
) -> Optional[SubstitutionSuggestion]:
    """Suggestion for an ingredient line: by its original text, else by re-matching it."""
    for suggestion in suggestions:
        if suggestion.original == line:
            return suggestion
    match = matcher.match(line)
    if match is None:
        return None
    for suggestion in suggestions:
        if suggestion.matched_key == match.matched_key:
            return suggestion
    return None


class RecipeRewriter:
    def __init__(self, matcher: Optional[IngredientMatcher] = None):
        self.matcher = matcher or IngredientMatcher()

    def _protected(self, suggestion: SubstitutionSuggestion) -> List[str]:
        return [suggestion.recommended, *self.matcher.plant_based_phrases]

    def rewrite(
        self,
        recipe: Optional[RawExtractionResult],
        suggestions: Optional[Sequence[SubstitutionSuggestion]],
    ) -> Optional[EcoSwappedRecipe]:
        if recipe is None or suggestions is None:
            return None

        ingredients = []
        summary = []
        for line in recipe.ingredients:
            suggestion = find_suggestion(line, suggestions, self.matcher)
            if suggestion is None:
                ingredients.append(EcoSwappedIngredient(original=line, swapped=line))
                continue
            ingredients.append(
                EcoSwappedIngredient(
                    original=line,
                    swapped=replace_whole_word(
                        line,
                        suggestion.matched_key,
                        suggestion.recommended,
                        self._protected(suggestion),
                    ),
                    is_swapped=True,
                    notes=suggestion.notes,
                )
            )
            summary.append(
                SwapSummaryItem(
                    from_=suggestion.matched_key, to=suggestion.recommended, notes=suggestion.notes
                )
            )

        # Each suggestion sees the text produced by the ones before it
        instructions = []
        for step in recipe.instructions:
            for suggestion in suggestions:
                step = replace_whole_word(
                    step, suggestion.matched_key, suggestion.recommended, self._protected(suggestion)
                )
            instructions.append(step)

        logger.info("Rewrote recipe with %d swapped ingredients", len(summary))
        return EcoSwappedRecipe(
            title=f"{TITLE_PREFIX}{recipe.title}" if recipe.title else recipe.title,
            description=recipe.description,
            servings=recipe.servings,
            prep_time=recipe.prep_time,
            cook_time=recipe.cook_time,
            total_time=recipe.total_time,
            ingredients=ingredients,
            instructions=instructions,
            swap_count=len(summary),
            swap_summary=summary,
        )
