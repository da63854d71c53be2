"""Recipe extractors for the different extraction strategies."""

from ecoswap.app.services.url_parsing.extractors.dynamic import (
    BrowserSession,
    DynamicRenderExtractor,
)
from ecoswap.app.services.url_parsing.extractors.heuristic import HeuristicDomExtractor
from ecoswap.app.services.url_parsing.extractors.llm import GenerativeFallbackExtractor
from ecoswap.app.services.url_parsing.extractors.schema_org import StructuredDataExtractor

__all__ = [
    "BrowserSession",
    "DynamicRenderExtractor",
    "GenerativeFallbackExtractor",
    "HeuristicDomExtractor",
    "StructuredDataExtractor",
]
