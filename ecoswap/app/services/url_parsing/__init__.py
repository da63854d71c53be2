"""URL recipe extraction package.

This package extracts recipes from URLs using an ordered cascade of
strategies: schema.org JSON-LD, heuristic CSS selectors, a headless browser
render, and a governed LLM fallback.
"""

from ecoswap.app.services.url_parsing.html_fetcher import (
    fetch_html,
    is_private_host,
    validate_recipe_url,
)
from ecoswap.app.services.url_parsing.models import (
    ExtractionContext,
    ExtractionMethod,
    OutcomeStatus,
    RawExtractionResult,
    RenderedPage,
    StrategyOutcome,
    UrlValidation,
    UsageSnapshot,
)
from ecoswap.app.services.url_parsing.parsing_utils import (
    clean_text,
    coerce_text,
    extract_author,
    extract_image,
    extract_ingredient_text,
    extract_instruction_text,
    is_known_unit,
    normalize_unit_token,
)
from ecoswap.app.services.url_parsing.usage_governor import UsageGovernor

__all__ = [
    # Models
    "ExtractionContext",
    "ExtractionMethod",
    "OutcomeStatus",
    "RawExtractionResult",
    "RenderedPage",
    "StrategyOutcome",
    "UrlValidation",
    "UsageSnapshot",
    # HTML fetching
    "fetch_html",
    "is_private_host",
    "validate_recipe_url",
    # Usage limits
    "UsageGovernor",
    # Parsing utilities
    "clean_text",
    "coerce_text",
    "extract_author",
    "extract_image",
    "extract_ingredient_text",
    "extract_instruction_text",
    "is_known_unit",
    "normalize_unit_token",
]
