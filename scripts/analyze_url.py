#!/usr/bin/env python
"""
Extract a recipe from a URL, analyze it and print the result as JSON.

Run manually:
    python scripts/analyze_url.py https://example.com/some-recipe
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from ecoswap.app.services.substitution.ingredient_analyzer import get_ingredient_analyzer
from ecoswap.app.services.url_recipe_parser import extract_recipe, get_browser_session

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("analyze_url")


async def run(url: str) -> dict:
    try:
        recipe = await extract_recipe(url)
    finally:
        session = get_browser_session()
        if session.is_started:
            await session.close()

    output = {"recipe": recipe.model_dump(mode="json")}
    if not recipe.ingredients:
        return output

    analyzer = get_ingredient_analyzer()
    analysis = analyzer.analyze(recipe.ingredients)
    swapped = analyzer.rewrite(recipe, analysis.suggestions)
    output["analysis"] = analysis.model_dump(mode="json")
    output["environmental_impact"] = analyzer.environmental_impact(analysis.suggestions).model_dump(mode="json")
    output["eco_swapped_recipe"] = swapped.model_dump(mode="json", by_alias=True) if swapped else None
    return output


def main() -> int:
    parser = argparse.ArgumentParser(description="Analyze a recipe URL for plant-based swaps")
    parser.add_argument("url", help="Recipe page URL")
    args = parser.parse_args()

    # Load .env at repo root
    env_path = Path(__file__).resolve().parents[1] / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    output = asyncio.run(run(args.url))
    print(json.dumps(output, indent=2))
    if not output["recipe"]["ingredients"]:
        logger.error("No recipe found: %s", output["recipe"].get("error"))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
