"""Extraction strategies tried in order by the recipe extractor."""

import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable

import httpx

from ecoswap.app.services.url_parsing.extractors.dynamic import DynamicRenderExtractor
from ecoswap.app.services.url_parsing.extractors.heuristic import HeuristicDomExtractor
from ecoswap.app.services.url_parsing.extractors.llm import GenerativeFallbackExtractor
from ecoswap.app.services.url_parsing.extractors.schema_org import StructuredDataExtractor
from ecoswap.app.services.url_parsing.html_fetcher import fetch_html
from ecoswap.app.services.url_parsing.models import (
    ExtractionContext,
    RawExtractionResult,
    StrategyOutcome,
)

logger = logging.getLogger(__name__)

Fetcher = Callable[[str, float, str], Awaitable[str]]


def _filtered(result: RawExtractionResult) -> RawExtractionResult:
    """Drop blank ingredient and instruction lines before the sufficiency check."""
    return result.model_copy(
        update={
            "ingredients": [item for item in result.ingredients if item and item.strip()],
            "instructions": [item for item in result.instructions if item and item.strip()],
        }
    )


def outcome_for(result: RawExtractionResult) -> StrategyOutcome:
    result = _filtered(result)
    if result.is_sufficient():
        return StrategyOutcome.sufficient(result)
    return StrategyOutcome.insufficient(result)


class ExtractionStrategy(ABC):
    name: str = "strategy"

    @abstractmethod
    async def attempt_extract(self, context: ExtractionContext) -> StrategyOutcome:
        """Try to produce a recipe, recording any markup gathered on ``context``."""


class StaticFetchStrategy(ExtractionStrategy):
    """Plain GET, then structured data, then CSS heuristics on the same markup."""

    name = "static"

    def __init__(
        self,
        structured: StructuredDataExtractor,
        heuristic: HeuristicDomExtractor,
        timeout: float,
        user_agent: str,
        fetcher: Fetcher = fetch_html,
    ):
        self.structured = structured
        self.heuristic = heuristic
        self.timeout = timeout
        self.user_agent = user_agent
        self.fetcher = fetcher

    async def attempt_extract(self, context: ExtractionContext) -> StrategyOutcome:
        try:
            html = await self.fetcher(context.url, self.timeout, self.user_agent)
        except (httpx.HTTPError, ValueError) as exc:
            message = f"Static fetch failed: {exc}"
            logger.warning("%s (%s)", message, context.url)
            context.errors.append(message)
            return StrategyOutcome.failed(message)

        context.static_html = html

        try:
            structured = self.structured.parse(html)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Structured data extraction crashed for %s", context.url)
            context.errors.append(f"Structured data extraction failed: {exc}")
            structured = None
        if structured is not None:
            outcome = outcome_for(structured)
            if outcome.result and outcome.result.is_sufficient():
                logger.info("Structured data extraction succeeded for %s", context.url)
                return outcome
            logger.info("Structured data insufficient for %s; trying selectors", context.url)

        outcome = outcome_for(self.heuristic.parse(html, context.url))
        if outcome.result and outcome.result.is_sufficient():
            logger.info("Heuristic extraction succeeded for %s", context.url)
        return outcome


class DynamicRenderStrategy(ExtractionStrategy):
    name = "dynamic"

    def __init__(self, renderer: DynamicRenderExtractor):
        self.renderer = renderer

    async def attempt_extract(self, context: ExtractionContext) -> StrategyOutcome:
        rendered = await self.renderer.parse(context.url)
        if rendered is None:
            context.errors.append("Browser render failed")
            return StrategyOutcome.insufficient()

        context.rendered_html = rendered.html
        if rendered.timed_out:
            context.render_timed_out = True
            return StrategyOutcome.insufficient(rendered.result, timed_out=True)
        if rendered.result is None:
            return StrategyOutcome.insufficient()
        return outcome_for(rendered.result)


class GenerativeStrategy(ExtractionStrategy):
    name = "generative"

    def __init__(self, extractor: GenerativeFallbackExtractor):
        self.extractor = extractor

    async def attempt_extract(self, context: ExtractionContext) -> StrategyOutcome:
        result = await self.extractor.parse(context.best_html(), context.url)
        if result is None:
            return StrategyOutcome.insufficient()
        return outcome_for(result)
