"""Schema.org JSON-LD recipe extraction."""

import json
import logging
import re
from typing import Iterator, List, Optional

from bs4 import BeautifulSoup

from ecoswap.app.services.url_parsing.models import ExtractionMethod, RawExtractionResult
from ecoswap.app.services.url_parsing.parsing_utils import (
    coerce_text,
    extract_author,
    extract_image,
    extract_ingredient_text,
    extract_instruction_text,
)

logger = logging.getLogger(__name__)

# Keys whose values may hold further JSON-LD nodes
CONTAINER_KEYS = ("@graph", "mainEntity", "mainEntityOfPage", "itemListElement")

INGREDIENT_KEYS = ("recipeIngredient", "recipeIngredients", "ingredients")
YIELD_KEYS = ("recipeYield", "yield")


def _type_name(value) -> str:
    """Last segment of a type IRI or prefixed name, so "schema:Recipe" reads as "recipe"."""
    return re.split(r"[/#:]", str(value).strip().rstrip("/"))[-1].lower()


def _is_recipe(obj: dict) -> bool:
    obj_type = obj.get("@type")
    if not obj_type:
        return False
    types = [obj_type] if isinstance(obj_type, str) else obj_type
    if not isinstance(types, list):
        return False
    return any(_type_name(t) == "recipe" for t in types)


def _walk(node, depth: int = 0) -> Iterator[dict]:
    """Yield every JSON-LD object reachable through lists and container keys."""
    if depth > 6:
        return
    if isinstance(node, list):
        for item in node:
            yield from _walk(item, depth + 1)
    elif isinstance(node, dict):
        yield node
        for key in CONTAINER_KEYS:
            if key in node:
                yield from _walk(node[key], depth + 1)


def _first_present(obj: dict, keys) -> object:
    for key in keys:
        value = obj.get(key)
        if value:
            return value
    return None


class StructuredDataExtractor:
    """Reads embedded schema.org Recipe objects, the most reliable signal on a page."""

    def find_recipe_objects(self, html: str) -> List[dict]:
        soup = BeautifulSoup(html or "", "lxml")
        scripts = soup.find_all("script", attrs={"type": "application/ld+json"})
        logger.info("Found %d JSON-LD script blocks", len(scripts))

        recipes: List[dict] = []
        for idx, script in enumerate(scripts):
            raw_json = script.string or script.get_text()
            if not raw_json or not raw_json.strip():
                logger.debug("JSON-LD block %d is empty", idx)
                continue
            try:
                data = json.loads(raw_json)
            except json.JSONDecodeError as exc:
                logger.warning(
                    "JSON-LD block %d failed to parse: %s (first 200 chars: %s)",
                    idx,
                    exc,
                    raw_json[:200],
                )
                continue
            recipes.extend(obj for obj in _walk(data) if _is_recipe(obj))
        return recipes

    def to_result(self, obj: dict) -> RawExtractionResult:
        ingredients = extract_ingredient_text(_first_present(obj, INGREDIENT_KEYS) or [])
        instructions = extract_instruction_text(obj.get("recipeInstructions") or [])
        return RawExtractionResult(
            title=coerce_text(obj.get("name")) or coerce_text(obj.get("headline")),
            description=coerce_text(obj.get("description")),
            image=extract_image(obj.get("image")),
            author=extract_author(obj.get("author")),
            ingredients=ingredients,
            instructions=instructions,
            prep_time=coerce_text(obj.get("prepTime")),
            cook_time=coerce_text(obj.get("cookTime")),
            total_time=coerce_text(obj.get("totalTime")),
            servings=coerce_text(_first_present(obj, YIELD_KEYS)),
            extraction_method=ExtractionMethod.STRUCTURED,
        )

    def parse(self, html: str) -> Optional[RawExtractionResult]:
        """Return the first Recipe object found, preferring one that lists ingredients."""
        candidates = [self.to_result(obj) for obj in self.find_recipe_objects(html)]
        if not candidates:
            logger.info("No schema.org Recipe objects found")
            return None

        for idx, result in enumerate(candidates):
            logger.info(
                "Recipe candidate %d: title=%s, ingredients=%d, steps=%d",
                idx,
                (result.title or "None")[:50],
                len(result.ingredients),
                len(result.instructions),
            )
            if result.ingredients:
                return result

        logger.warning("Found %d Recipe objects but none list ingredients", len(candidates))
        return candidates[0]
