"""Recipe extraction cascade: static fetch, browser render, then generative fallback."""

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import List, Optional, Sequence

from ecoswap.app.core.config import Settings, get_settings
from ecoswap.app.services.llm_client import LLMClient
from ecoswap.app.services.url_parsing.extractors.dynamic import (
    BrowserSession,
    DynamicRenderExtractor,
)
from ecoswap.app.services.url_parsing.extractors.heuristic import HeuristicDomExtractor
from ecoswap.app.services.url_parsing.extractors.llm import GenerativeFallbackExtractor
from ecoswap.app.services.url_parsing.extractors.schema_org import StructuredDataExtractor
from ecoswap.app.services.url_parsing.models import (
    ExtractionContext,
    ExtractionMethod,
    OutcomeStatus,
    RawExtractionResult,
)
from ecoswap.app.services.url_parsing.strategies import (
    DynamicRenderStrategy,
    ExtractionStrategy,
    GenerativeStrategy,
    StaticFetchStrategy,
)
from ecoswap.app.services.url_parsing.usage_governor import UsageGovernor

logger = logging.getLogger(__name__)

ALL_METHODS_FAILED = "Could not extract recipe data using any method"


class RecipeExtractor:
    """Runs strategies in order and returns the first sufficient result.

    A browser render timeout skips straight to the generative strategy, which
    receives whatever markup was gathered so far. Failures never raise; they
    come back as ``failed`` or ``error`` results.
    """

    def __init__(self, strategies: Sequence[ExtractionStrategy]):
        self.strategies: List[ExtractionStrategy] = list(strategies)

    def _terminal(
        self, url: str, method: ExtractionMethod, error: str
    ) -> RawExtractionResult:
        return RawExtractionResult(
            source_url=url,
            scraped_at=datetime.now(timezone.utc),
            extraction_method=method,
            error=error,
        )

    async def extract(self, url: str) -> RawExtractionResult:
        context = ExtractionContext(url=url)
        try:
            for strategy in self.strategies:
                if context.render_timed_out and not isinstance(strategy, GenerativeStrategy):
                    logger.info("Skipping %s strategy after render timeout", strategy.name)
                    continue

                logger.info("Trying %s extraction for %s", strategy.name, url)
                outcome = await strategy.attempt_extract(context)

                if outcome.status == OutcomeStatus.SUFFICIENT and outcome.result is not None:
                    logger.info(
                        "Extracted recipe from %s via %s (%d ingredients)",
                        url,
                        outcome.result.extraction_method.value,
                        len(outcome.result.ingredients),
                    )
                    return outcome.result.model_copy(
                        update={"source_url": url, "scraped_at": datetime.now(timezone.utc)}
                    )
                if outcome.status == OutcomeStatus.ERROR:
                    logger.warning("%s extraction errored for %s: %s", strategy.name, url, outcome.error)
                elif outcome.timed_out:
                    logger.warning("Render timed out for %s; escalating to generative fallback", url)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error extracting recipe from %s", url)
            return self._terminal(url, ExtractionMethod.ERROR, f"Extraction error: {exc}")

        error = ALL_METHODS_FAILED
        if context.errors:
            error = f"{error} ({'; '.join(context.errors)})"
        logger.warning("All extraction methods failed for %s", url)
        return self._terminal(url, ExtractionMethod.FAILED, error)


def build_recipe_extractor(
    settings: Settings,
    governor: UsageGovernor,
    session: BrowserSession,
    llm_client: Optional[LLMClient] = None,
) -> RecipeExtractor:
    structured = StructuredDataExtractor()
    heuristic = HeuristicDomExtractor()
    renderer = DynamicRenderExtractor(
        session,
        structured,
        heuristic,
        timeout_ms=settings.render_timeout_ms,
        settle_ms=settings.render_settle_ms,
    )
    client = llm_client or LLMClient(
        base_url=settings.llm_base_url,
        api_key=settings.openai_api_key,
        model=settings.llm_model_name,
        timeout_seconds=settings.llm_timeout_seconds,
    )
    generative = GenerativeFallbackExtractor(
        client,
        governor,
        max_content_chars=settings.llm_max_content_chars,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        input_cost_per_million=settings.llm_input_cost_per_million,
        output_cost_per_million=settings.llm_output_cost_per_million,
    )
    return RecipeExtractor(
        [
            StaticFetchStrategy(
                structured,
                heuristic,
                timeout=settings.fetch_timeout_seconds,
                user_agent=settings.scraper_user_agent,
            ),
            DynamicRenderStrategy(renderer),
            GenerativeStrategy(generative),
        ]
    )


@lru_cache
def get_usage_governor() -> UsageGovernor:
    settings = get_settings()
    return UsageGovernor(
        max_requests=settings.llm_max_requests_per_hour,
        max_daily_cost=settings.llm_max_daily_cost,
        has_credential=settings.has_llm_credential,
    )


@lru_cache
def get_browser_session() -> BrowserSession:
    return BrowserSession(user_agent=get_settings().scraper_user_agent)


@lru_cache
def get_recipe_extractor() -> RecipeExtractor:
    return build_recipe_extractor(get_settings(), get_usage_governor(), get_browser_session())


async def extract_recipe(url: str) -> RawExtractionResult:
    return await get_recipe_extractor().extract(url)
