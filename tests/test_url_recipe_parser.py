import json

import httpx
import pytest

from ecoswap.app.core.config import Settings
from ecoswap.app.services.url_parsing.extractors.dynamic import BrowserSession
from ecoswap.app.services.url_parsing.extractors.heuristic import HeuristicDomExtractor
from ecoswap.app.services.url_parsing.extractors.llm import GenerativeFallbackExtractor
from ecoswap.app.services.url_parsing.extractors.schema_org import StructuredDataExtractor
from ecoswap.app.services.url_parsing.models import (
    ExtractionMethod,
    RawExtractionResult,
    RenderedPage,
    StrategyOutcome,
)
from ecoswap.app.services.url_parsing.strategies import (
    DynamicRenderStrategy,
    ExtractionStrategy,
    GenerativeStrategy,
    StaticFetchStrategy,
)
from ecoswap.app.services.url_parsing.usage_governor import UsageGovernor
from ecoswap.app.services.url_recipe_parser import (
    ALL_METHODS_FAILED,
    RecipeExtractor,
    build_recipe_extractor,
)

URL = "https://example.com/recipe"

EMPTY_PAGE = "<html><body><p>Loading...</p></body></html>"


def json_ld_page(payload):
    return (
        '<html><head><script type="application/ld+json">'
        + json.dumps(payload)
        + "</script></head><body></body></html>"
    )


def static_fetcher(html=None, exc=None):
    async def fetch(url, timeout, user_agent):
        if exc is not None:
            raise exc
        return html

    return fetch


class FakeRenderer:
    def __init__(self, rendered=None):
        self.rendered = rendered
        self.calls = []

    async def parse(self, url):
        self.calls.append(url)
        return self.rendered


class FakeGenerative:
    def __init__(self, result=None):
        self.result = result
        self.calls = []

    async def parse(self, html, url):
        self.calls.append((html, url))
        return self.result


class NeverCalledClient:
    async def complete(self, messages, temperature, max_tokens):
        raise AssertionError("completion service should not be called")


class RecordingStrategy(ExtractionStrategy):
    name = "recording"

    def __init__(self):
        self.calls = 0

    async def attempt_extract(self, context):
        self.calls += 1
        return StrategyOutcome.insufficient()


class ExplodingStrategy(ExtractionStrategy):
    name = "exploding"

    async def attempt_extract(self, context):
        raise RuntimeError("kaboom")


def static_strategy(fetcher):
    return StaticFetchStrategy(
        StructuredDataExtractor(),
        HeuristicDomExtractor(),
        timeout=5,
        user_agent="test-agent",
        fetcher=fetcher,
    )


def uncredentialed_generative():
    governor = UsageGovernor(max_requests=5, max_daily_cost=2.0, has_credential=False)
    return GenerativeStrategy(GenerativeFallbackExtractor(NeverCalledClient(), governor))


@pytest.mark.asyncio
async def test_structured_data_wins_without_rendering():
    html = json_ld_page(
        {
            "@type": "Recipe",
            "name": "Static Pancakes",
            "recipeIngredient": ["1 cup flour", "1 cup milk"],
            "recipeInstructions": ["Mix", "Cook"],
        }
    )
    renderer = FakeRenderer()
    extractor = RecipeExtractor(
        [static_strategy(static_fetcher(html)), DynamicRenderStrategy(renderer)]
    )

    result = await extractor.extract(URL)

    assert result.title == "Static Pancakes"
    assert result.extraction_method == ExtractionMethod.STRUCTURED
    assert result.source_url == URL
    assert result.scraped_at is not None
    assert renderer.calls == []


@pytest.mark.asyncio
async def test_structured_without_ingredients_falls_back_to_selectors():
    html = (
        '<html><head><script type="application/ld+json">'
        + json.dumps({"@type": "Recipe", "name": "Sparse Stew", "recipeIngredient": []})
        + "</script></head><body><h1>Selector Stew</h1>"
        "<ul class='ingredients'><li>1 lb carrots</li><li>2 cups stock</li></ul></body></html>"
    )
    extractor = RecipeExtractor([static_strategy(static_fetcher(html))])

    result = await extractor.extract(URL)

    assert result.extraction_method == ExtractionMethod.HEURISTIC
    assert result.ingredients == ["1 lb carrots", "2 cups stock"]


@pytest.mark.asyncio
async def test_escalates_to_browser_render():
    rendered = RenderedPage(
        html="<html><body>rendered</body></html>",
        result=RawExtractionResult(
            title="Rendered Curry",
            ingredients=["1 can chickpeas"],
            extraction_method=ExtractionMethod.DYNAMIC,
        ),
    )
    renderer = FakeRenderer(rendered)
    generative = FakeGenerative()
    extractor = RecipeExtractor(
        [
            static_strategy(static_fetcher(EMPTY_PAGE)),
            DynamicRenderStrategy(renderer),
            GenerativeStrategy(generative),
        ]
    )

    result = await extractor.extract(URL)

    assert result.title == "Rendered Curry"
    assert result.extraction_method == ExtractionMethod.DYNAMIC
    assert renderer.calls == [URL]
    assert generative.calls == []


@pytest.mark.asyncio
async def test_render_timeout_skips_to_generative_with_partial_markup():
    partial = "<html><body><main>partial recipe text</main></body></html>"
    renderer = FakeRenderer(
        RenderedPage(
            html=partial,
            timed_out=True,
            result=RawExtractionResult(extraction_method=ExtractionMethod.DYNAMIC_TIMEOUT),
        )
    )
    recording = RecordingStrategy()
    generative = FakeGenerative(
        RawExtractionResult(
            title="Inferred Bread",
            ingredients=["3 cups flour"],
            extraction_method=ExtractionMethod.GENERATIVE,
        )
    )
    extractor = RecipeExtractor(
        [
            static_strategy(static_fetcher(exc=httpx.ConnectError("connection refused"))),
            DynamicRenderStrategy(renderer),
            recording,
            GenerativeStrategy(generative),
        ]
    )

    result = await extractor.extract(URL)

    assert result.title == "Inferred Bread"
    assert result.extraction_method == ExtractionMethod.GENERATIVE
    assert recording.calls == 0
    assert generative.calls == [(partial, URL)]


@pytest.mark.asyncio
async def test_all_methods_fail_without_markup_or_credential():
    extractor = RecipeExtractor(
        [
            static_strategy(static_fetcher(exc=httpx.ConnectError("connection refused"))),
            DynamicRenderStrategy(FakeRenderer(None)),
            uncredentialed_generative(),
        ]
    )

    result = await extractor.extract(URL)

    assert result.extraction_method == ExtractionMethod.FAILED
    assert result.title is None
    assert result.ingredients == []
    assert result.instructions == []
    assert result.source_url == URL
    assert result.error.startswith(ALL_METHODS_FAILED)
    assert "Static fetch failed" in result.error
    assert "Browser render failed" in result.error


@pytest.mark.asyncio
async def test_blank_ingredient_lines_do_not_count():
    html = json_ld_page({"@type": "Recipe", "name": "Ghost Soup", "recipeIngredient": ["", "   "]})
    extractor = RecipeExtractor(
        [
            static_strategy(static_fetcher(html)),
            DynamicRenderStrategy(FakeRenderer(None)),
            uncredentialed_generative(),
        ]
    )

    result = await extractor.extract(URL)

    assert result.extraction_method == ExtractionMethod.FAILED
    assert result.ingredients == []


@pytest.mark.asyncio
async def test_generative_receives_static_markup_first():
    generative = FakeGenerative()
    extractor = RecipeExtractor(
        [
            static_strategy(static_fetcher(EMPTY_PAGE)),
            DynamicRenderStrategy(FakeRenderer(RenderedPage(html="<html>rendered</html>"))),
            GenerativeStrategy(generative),
        ]
    )

    await extractor.extract(URL)

    assert generative.calls == [(EMPTY_PAGE, URL)]


@pytest.mark.asyncio
async def test_unexpected_exception_becomes_error_result():
    extractor = RecipeExtractor([ExplodingStrategy()])

    result = await extractor.extract(URL)

    assert result.extraction_method == ExtractionMethod.ERROR
    assert result.error == "Extraction error: kaboom"
    assert result.ingredients == []


def test_build_recipe_extractor_orders_strategies():
    settings = Settings(_env_file=None, OPENAI_API_KEY=None)
    governor = UsageGovernor(max_requests=5, max_daily_cost=2.0, has_credential=False)

    extractor = build_recipe_extractor(settings, governor, BrowserSession(user_agent="test-agent"))

    assert [strategy.name for strategy in extractor.strategies] == ["static", "dynamic", "generative"]


@pytest.mark.asyncio
async def test_list_valued_name_still_escalates_to_selectors():
    html = (
        '<html><head><script type="application/ld+json">'
        + json.dumps({"@type": "Recipe", "name": ["Pancakes"], "recipeIngredient": []})
        + "</script></head><body><h1>Pancakes</h1>"
        "<ul class='ingredients'><li>2 cups flour</li><li>1 cup oat milk</li></ul></body></html>"
    )
    extractor = RecipeExtractor([static_strategy(static_fetcher(html))])

    result = await extractor.extract(URL)

    assert result.extraction_method == ExtractionMethod.HEURISTIC
    assert result.title == "Pancakes"
    assert result.ingredients == ["2 cups flour", "1 cup oat milk"]


class CrashingStructured(StructuredDataExtractor):
    def parse(self, html):
        raise TypeError("unexpected JSON-LD shape")


@pytest.mark.asyncio
async def test_structured_crash_falls_through_to_selectors():
    html = "<html><body><h1>Plain Soup</h1><ul class='ingredients'><li>1 cup lentils</li></ul></body></html>"
    strategy = StaticFetchStrategy(
        CrashingStructured(),
        HeuristicDomExtractor(),
        timeout=5,
        user_agent="test-agent",
        fetcher=static_fetcher(html),
    )

    result = await RecipeExtractor([strategy]).extract(URL)

    assert result.extraction_method == ExtractionMethod.HEURISTIC
    assert result.ingredients == ["1 cup lentils"]
