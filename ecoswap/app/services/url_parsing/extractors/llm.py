"""LLM-based recipe extraction, the last and most expensive stage."""

import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup

from ecoswap.app.services.llm_client import (
    Completion,
    LLMClient,
    LLMRateLimitError,
    LLMServiceError,
    parse_llm_json_content,
)
from ecoswap.app.services.url_parsing.extractors.heuristic import (
    clean_soup_for_content,
    find_main_node,
)
from ecoswap.app.services.url_parsing.models import ExtractionMethod, RawExtractionResult
from ecoswap.app.services.url_parsing.parsing_utils import clean_text, coerce_text
from ecoswap.app.services.url_parsing.usage_governor import UsageGovernor

logger = logging.getLogger(__name__)

EMPTY_CONTENT_MARKER = "No HTML content available"

SYSTEM_PROMPT = "You are a precise recipe extraction assistant. Return only valid JSON."

RESPONSE_SCHEMA = """{
  "title": "Recipe title",
  "description": "Brief description",
  "ingredients": ["ingredient 1", "ingredient 2", "..."],
  "instructions": ["step 1", "step 2", "..."],
  "prepTime": "prep time if found",
  "cookTime": "cook time if found",
  "totalTime": "total time if found",
  "servings": "number of servings if found",
  "image": "image URL if found"
}"""


def build_llm_content(html: str, url: str, max_chars: int) -> str:
    """Reduce page markup to main-content text within the character budget."""
    if not html or not html.strip():
        return f"{EMPTY_CONTENT_MARKER}. URL: {url}"

    soup = BeautifulSoup(html, "lxml")
    clean_soup_for_content(soup)
    main_node = find_main_node(soup) or soup
    text = re.sub(r"\s+", " ", main_node.get_text(" ", strip=True)).strip()
    if not text:
        return f"{EMPTY_CONTENT_MARKER}. URL: {url}"
    if len(text) > max_chars:
        text = text[:max_chars] + "..."
    return text


def build_user_prompt(content: str, url: str) -> str:
    prompt = (
        "You are a recipe extraction expert. Extract recipe information from the following webpage content.\n\n"
        f"URL: {url}\n\n"
        f"Content:\n{content}\n\n"
    )
    if EMPTY_CONTENT_MARKER in content:
        prompt += (
            "Note: The webpage content could not be loaded. Infer the recipe only if the URL "
            "clearly identifies it; otherwise return empty fields.\n\n"
        )
    prompt += (
        "Return ONLY a valid JSON object with this exact structure:\n"
        f"{RESPONSE_SCHEMA}\n\n"
        "Rules:\n"
        '- Extract ALL ingredients with quantities (e.g., "2 cups flour", "1 lb chicken breast")\n'
        "- Extract ALL cooking steps in order\n"
        "- If any field is not found, use an empty string or empty array\n"
        "- Return ONLY the JSON object, no other text\n"
    )
    return prompt


def _string_list(value) -> List[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    items = []
    for item in value:
        text = coerce_text(item) if not isinstance(item, dict) else coerce_text(item.get("text"))
        if text:
            items.append(text)
    return items


class GenerativeFallbackExtractor:
    """Asks a chat completion model for the recipe, within the governor's limits."""

    def __init__(
        self,
        client: LLMClient,
        governor: UsageGovernor,
        max_content_chars: int = 8000,
        temperature: float = 0.1,
        max_tokens: int = 1000,
        input_cost_per_million: float = 0.15,
        output_cost_per_million: float = 0.60,
    ):
        self.client = client
        self.governor = governor
        self.max_content_chars = max_content_chars
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.input_cost_per_million = input_cost_per_million
        self.output_cost_per_million = output_cost_per_million

    def estimate_cost(self, completion: Completion) -> float:
        return (
            completion.prompt_tokens / 1_000_000 * self.input_cost_per_million
            + completion.completion_tokens / 1_000_000 * self.output_cost_per_million
        )

    async def parse(self, html: str, url: str) -> Optional[RawExtractionResult]:
        if not self.governor.reserve():
            return None

        # Release the slot on every exit that neither commits nor exhausts it
        settled = False
        try:
            content = build_llm_content(html, url, self.max_content_chars)
            messages = [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_user_prompt(content, url)},
            ]
            logger.info("Requesting generative extraction for %s (%d content chars)", url, len(content))

            try:
                completion = await self.client.complete(
                    messages, temperature=self.temperature, max_tokens=self.max_tokens
                )
            except LLMRateLimitError as exc:
                logger.warning("Generative extraction rate limited for %s: %s", url, exc)
                self.governor.mark_exhausted()
                settled = True
                return None
            except LLMServiceError as exc:
                logger.warning("Generative extraction failed for %s: %s", url, exc)
                return None

            try:
                data = parse_llm_json_content(completion.content)
            except ValueError as exc:
                logger.warning("Generative extraction returned invalid JSON for %s: %s", url, exc)
                return None

            title = clean_text(coerce_text(data.get("title")) or "")
            ingredients = _string_list(data.get("ingredients"))
            if not title or not ingredients:
                logger.warning(
                    "Generative extraction for %s missing title or ingredients (title=%s, ingredients=%d)",
                    url,
                    "yes" if title else "no",
                    len(ingredients),
                )
                return None

            usage = self.governor.commit(
                self.estimate_cost(completion), tokens_used=completion.total_tokens
            )
            settled = True
        finally:
            if not settled:
                self.governor.release()

        return RawExtractionResult(
            title=title,
            description=coerce_text(data.get("description")),
            image=coerce_text(data.get("image")),
            ingredients=ingredients,
            instructions=_string_list(data.get("instructions")),
            prep_time=coerce_text(data.get("prepTime")),
            cook_time=coerce_text(data.get("cookTime")),
            total_time=coerce_text(data.get("totalTime")),
            servings=coerce_text(data.get("servings")),
            extraction_method=ExtractionMethod.GENERATIVE,
            generative_usage=usage,
        )
