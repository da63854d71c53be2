"""Heuristic recipe extraction from HTML structure via ordered CSS selectors."""

import logging
import re
from typing import Dict, List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from soupsieve import SelectorSyntaxError

from ecoswap.app.services.url_parsing.models import ExtractionMethod, RawExtractionResult
from ecoswap.app.services.url_parsing.parsing_utils import (
    MIN_PARAGRAPH_CHARS,
    clean_text,
    truncate_description,
)

logger = logging.getLogger(__name__)

MIN_INGREDIENT_CHARS = 3
MIN_INSTRUCTION_CHARS = 10

LIST_FIELDS = ("ingredients", "instructions")
SCALAR_FIELDS = ("title", "prep_time", "cook_time", "total_time", "servings")
TIME_FIELDS = ("prep_time", "cook_time", "total_time")

GENERIC_SELECTORS: Dict[str, List[str]] = {
    "title": [
        'h1[class*="recipe-title"]',
        'h1[class*="entry-title"]',
        'h1[class*="post-title"]',
        ".recipe-summary__h1",
        ".entry-title-primary",
        ".recipe-header h1",
        ".recipe-title",
        ".post-title",
        ".entry-title",
        "h1.title",
        "h1",
        '[data-test-id="recipe-title"]',
        '[itemprop="name"]',
    ],
    "ingredients": [
        '[itemprop="recipeIngredient"]',
        ".recipe-card-ingredient",
        ".recipe-ingredient",
        ".ingredients li",
        ".ingredient-list li",
        ".recipe-ingredients li",
        ".ingredients-section li",
        ".recipe-card-ingredients li",
        ".ingredient",
        ".structured-ingredients__list-item",
        ".recipe-summary__item",
        '[data-test-id="ingredients-prep"] li',
        ".ingredients-list li",
        ".recipe-card-ingredient-list li",
    ],
    "instructions": [
        '[itemprop="recipeInstructions"] li',
        '[itemprop="recipeInstructions"]',
        ".recipe-instruction",
        ".instructions li",
        ".recipe-instructions li",
        ".directions li",
        ".recipe-directions li",
        ".instructions-section li",
        ".recipe-card-instructions li",
        ".direction",
        ".recipe-instruction-text",
        ".mntl-sc-block-group--LI .mntl-sc-block-callout",
        ".instructions-section .paragraph",
        '[data-test-id="instructions-prep"] li',
        ".instructions-list li",
        ".recipe-card-instruction-list li",
    ],
    "prep_time": [
        '[itemprop="prepTime"]',
        ".recipe-prep-time",
        ".prep-time",
        ".recipe-summary__prep-time",
        ".recipe-time .prep",
        ".recipe-meta .prep-time",
        '[data-test-id="prep-time"]',
        ".recipe-details .prep-time",
    ],
    "cook_time": [
        '[itemprop="cookTime"]',
        ".recipe-cook-time",
        ".cook-time",
        ".recipe-summary__cook-time",
        ".recipe-time .cook",
        ".recipe-meta .cook-time",
        '[data-test-id="cook-time"]',
        ".recipe-details .cook-time",
    ],
    "total_time": [
        '[itemprop="totalTime"]',
        ".recipe-total-time",
        ".total-time",
    ],
    "servings": [
        '[itemprop="recipeYield"]',
        '[itemprop="yield"]',
        ".recipe-servings",
        ".servings",
        ".recipe-summary__servings",
        ".recipe-yield",
        ".yield",
        ".recipe-meta .servings",
        '[data-test-id="servings"]',
        ".recipe-details .servings",
    ],
}

SITE_SELECTORS: Dict[str, Dict[str, List[str]]] = {
    "allrecipes.com": {
        "title": [
            "h1.entry-title",
            "h1.recipe-summary__h1",
            'h1[data-module="RecipeHeaderTitle"]',
            ".recipe-header h1",
        ],
        "ingredients": [
            ".mntl-structured-ingredients__list-item",
            'span[data-ingredient-name="true"]',
            ".recipe-ingred_txt",
            ".ingredients-item-name",
        ],
        "instructions": [
            ".mntl-sc-block-group--LI .mntl-sc-block-html",
            ".recipe-instructions__list-item p",
            ".instructions-section-item p",
            ".recipe-instructions p",
        ],
    },
    "food.com": {
        "title": ["h1.recipe-title"],
        "ingredients": [".recipe-ingredients li"],
        "instructions": [".recipe-directions li"],
    },
    "foodnetwork.com": {
        "title": ["h1.o-AssetTitle__a-HeadlineText"],
        "ingredients": [".o-RecipeIngredients__a-Ingredient"],
        "instructions": [".o-Method__m-Step"],
    },
    "epicurious.com": {
        "title": ['h1[data-testid="recipe-header-title"]'],
        "ingredients": ['[data-testid="ingredient"] p'],
        "instructions": ['[data-testid="instruction"] p'],
    },
    "simplyrecipes.com": {
        "title": ["h1.entry-title"],
        "ingredients": [".structured-ingredients__list-item"],
        "instructions": [".structured-project__steps li"],
    },
    "tasteofhome.com": {
        "title": ["h1.recipe-title"],
        "ingredients": [".recipe-ingredients__item"],
        "instructions": [".recipe-directions__item p"],
    },
    "delish.com": {
        "title": ["h1.recipe-hed"],
        "ingredients": [".ingredient-item"],
        "instructions": [".direction-lists li"],
    },
    "eatingwell.com": {
        "title": ["h1.recipe-title"],
        "ingredients": [".recipe-ingredients li"],
        "instructions": [".recipe-instructions li"],
    },
}


def normalize_hostname(url: str) -> str:
    """Lowercase the hostname and drop a leading www."""
    hostname = (urlparse(url or "").hostname or "").lower()
    return re.sub(r"^www\.", "", hostname)


class HeuristicDomExtractor:
    """Tries per-field selector candidates, site-specific ones first."""

    def __init__(
        self,
        generic_selectors: Optional[Dict[str, List[str]]] = None,
        site_selectors: Optional[Dict[str, Dict[str, List[str]]]] = None,
    ):
        self.generic_selectors = generic_selectors or GENERIC_SELECTORS
        self.site_selectors = site_selectors if site_selectors is not None else SITE_SELECTORS

    def selectors_for(self, field: str, url: str) -> List[str]:
        site_config = self.site_selectors.get(normalize_hostname(url), {})
        return list(site_config.get(field, [])) + list(self.generic_selectors.get(field, []))

    @staticmethod
    def _select(soup: BeautifulSoup, selector: str):
        try:
            return soup.select(selector)
        except (SelectorSyntaxError, ValueError) as exc:
            logger.debug('Selector "%s" failed: %s', selector, exc)
            return []

    def _first_text(self, soup: BeautifulSoup, selectors: List[str], prefer_attrs=()) -> Optional[str]:
        for selector in selectors:
            for element in self._select(soup, selector):
                for attr in prefer_attrs:
                    value = clean_text(element.get(attr) or "")
                    if value:
                        return value
                text = clean_text(element.get_text(" ", strip=True))
                if text:
                    return text
        return None

    def _all_texts(self, soup: BeautifulSoup, selectors: List[str], min_chars: int) -> List[str]:
        for selector in selectors:
            items = [
                text
                for text in (
                    clean_text(el.get_text(" ", strip=True)) for el in self._select(soup, selector)
                )
                if len(text) > min_chars
            ]
            if items:
                logger.debug('Selector "%s" matched %d items', selector, len(items))
                return items
        return []

    @staticmethod
    def _meta_content(soup: BeautifulSoup, **attrs) -> Optional[str]:
        tag = soup.find("meta", attrs=attrs)
        if tag and tag.get("content"):
            return clean_text(tag["content"]) or None
        return None

    def _description(self, soup: BeautifulSoup) -> Optional[str]:
        description = self._meta_content(soup, name="description") or self._meta_content(
            soup, property="og:description"
        )
        if description:
            return description
        for paragraph in soup.find_all("p"):
            text = clean_text(paragraph.get_text(" ", strip=True))
            if len(text) > MIN_PARAGRAPH_CHARS:
                return truncate_description(text)
        return None

    def _image(self, soup: BeautifulSoup) -> Optional[str]:
        image = self._meta_content(soup, property="og:image") or self._meta_content(
            soup, name="twitter:image"
        )
        if image:
            return image
        for img in self._select(soup, ".recipe-image img"):
            if img.get("src"):
                return img["src"]
        return None

    def parse(self, html: str, url: str) -> RawExtractionResult:
        soup = BeautifulSoup(html or "", "lxml")

        fields = {}
        for field in SCALAR_FIELDS:
            prefer_attrs = ("datetime", "content") if field in TIME_FIELDS else ("content",)
            fields[field] = self._first_text(soup, self.selectors_for(field, url), prefer_attrs)

        ingredients = self._all_texts(
            soup, self.selectors_for("ingredients", url), MIN_INGREDIENT_CHARS
        )
        instructions = self._all_texts(
            soup, self.selectors_for("instructions", url), MIN_INSTRUCTION_CHARS
        )

        logger.info(
            "Heuristic results for %s: title=%s, ingredients=%d, instructions=%d",
            normalize_hostname(url) or "unknown host",
            "yes" if fields["title"] else "no",
            len(ingredients),
            len(instructions),
        )

        return RawExtractionResult(
            title=fields["title"],
            description=self._description(soup),
            image=self._image(soup),
            ingredients=ingredients,
            instructions=instructions,
            prep_time=fields["prep_time"],
            cook_time=fields["cook_time"],
            total_time=fields["total_time"],
            servings=fields["servings"],
            extraction_method=ExtractionMethod.HEURISTIC,
        )


def clean_soup_for_content(soup: BeautifulSoup) -> None:
    """Remove obvious boilerplate nodes before extracting candidate content."""
    for noisy in soup.find_all(["header", "footer", "nav", "aside", "form"]):
        noisy.decompose()
    for tag in soup.find_all(["script", "style", "noscript", "link", "meta"]):
        tag.decompose()


def find_main_node(soup: BeautifulSoup):
    """Find the main content node in the soup."""
    return (
        soup.find(attrs={"itemtype": re.compile("Recipe", re.I)})
        or soup.find("main")
        or soup.find(class_=re.compile(r"^(main-content|recipe-content|entry-content)$"))
        or soup.find("article")
        or soup.body
    )
