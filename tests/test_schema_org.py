import json

import pytest

from ecoswap.app.services.url_parsing.extractors.schema_org import StructuredDataExtractor
from ecoswap.app.services.url_parsing.models import ExtractionMethod


def page(*blocks: str) -> str:
    scripts = "".join(f'<script type="application/ld+json">{block}</script>' for block in blocks)
    return f"<html><head>{scripts}</head><body></body></html>"


def test_plain_recipe_object():
    html = page(
        json.dumps(
            {
                "@context": "https://schema.org",
                "@type": "Recipe",
                "name": "Test Recipe",
                "recipeIngredient": ["1 cup flour", "2 eggs"],
                "recipeInstructions": ["Mix", "Bake"],
                "totalTime": "PT30M",
                "recipeYield": "4",
            }
        )
    )
    result = StructuredDataExtractor().parse(html)
    assert result is not None
    assert result.title == "Test Recipe"
    assert result.ingredients == ["1 cup flour", "2 eggs"]
    assert result.instructions == ["Mix", "Bake"]
    assert result.total_time == "PT30M"
    assert result.servings == "4"
    assert result.extraction_method == ExtractionMethod.STRUCTURED


def test_graph_with_synonyms_and_nested_sections():
    html = page(
        json.dumps(
            {
                "@context": "https://schema.org",
                "@graph": [
                    {"@type": "WebPage", "name": "Blog"},
                    {
                        "@type": ["Recipe", "NewsArticle"],
                        "headline": "Lentil Soup",
                        "ingredients": ["1 cup lentils", "4 cups broth"],
                        "yield": ["6", "6 bowls"],
                        "author": [{"@type": "Person", "name": "Ana"}, "Ben"],
                        "image": {"@type": "ImageObject", "url": "https://img.example.com/soup.jpg"},
                        "recipeInstructions": [
                            {
                                "@type": "HowToSection",
                                "name": "Prep",
                                "itemListElement": [
                                    {"@type": "HowToStep", "text": "Rinse the lentils."},
                                ],
                            },
                            {"@type": "HowToStep", "text": "Simmer for 30 minutes."},
                        ],
                    },
                ],
            }
        )
    )
    result = StructuredDataExtractor().parse(html)
    assert result.title == "Lentil Soup"
    assert result.ingredients == ["1 cup lentils", "4 cups broth"]
    assert result.servings == "6"
    assert result.author == "Ana, Ben"
    assert result.image == "https://img.example.com/soup.jpg"
    assert result.instructions == ["Rinse the lentils.", "Simmer for 30 minutes."]


def test_invalid_json_block_is_skipped():
    html = page(
        "{not valid json",
        json.dumps({"@type": "Recipe", "name": "Valid", "recipeIngredient": ["1 egg"]}),
    )
    result = StructuredDataExtractor().parse(html)
    assert result.title == "Valid"


def test_recipe_without_ingredients_is_still_returned():
    html = page(json.dumps({"@type": "Recipe", "name": "Empty"}))
    result = StructuredDataExtractor().parse(html)
    assert result is not None
    assert result.title == "Empty"
    assert result.ingredients == []
    assert not result.is_sufficient()


def test_no_recipe_objects():
    html = page(json.dumps({"@type": "Organization", "name": "Acme"}))
    assert StructuredDataExtractor().parse(html) is None
    assert StructuredDataExtractor().parse("") is None


def test_list_and_object_valued_fields_are_coerced():
    html = page(
        json.dumps(
            {
                "@type": "Recipe",
                "name": ["Pancakes", "Fluffy Pancakes"],
                "description": {"@value": "ignored"},
                "recipeIngredient": [
                    {"text": {"@value": "nested"}, "name": "2 cups flour"},
                    "1 cup milk",
                ],
                "recipeInstructions": [{"@type": "HowToStep", "text": ["Whisk everything."]}],
            }
        )
    )
    result = StructuredDataExtractor().parse(html)
    assert result.title == "Pancakes"
    assert result.description is None
    assert result.ingredients == ["2 cups flour", "1 cup milk"]
    assert result.instructions == ["Whisk everything."]


@pytest.mark.parametrize(
    "recipe_type",
    ["schema:Recipe", "http://schema.org/Recipe", "https://schema.org/recipe/", ["Thing", "RECIPE"]],
)
def test_prefixed_and_iri_types_are_recognized(recipe_type):
    html = page(json.dumps({"@type": recipe_type, "name": "Typed", "recipeIngredient": ["1 egg"]}))
    result = StructuredDataExtractor().parse(html)
    assert result is not None
    assert result.title == "Typed"


def test_similar_type_names_are_not_recipes():
    html = page(json.dumps({"@type": "schema:RecipeCollection", "name": "Many"}))
    assert StructuredDataExtractor().parse(html) is None
