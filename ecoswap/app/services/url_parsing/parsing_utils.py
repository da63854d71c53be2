"""General parsing utilities for recipe extraction."""

import re
from typing import List, Optional

from ecoswap.app.services.url_parsing.constants import COMMON_UNITS

DESCRIPTION_MAX_CHARS = 200
MIN_PARAGRAPH_CHARS = 20


def clean_text(text: str) -> str:
    """Normalize whitespace in text."""
    return re.sub(r"\s+", " ", text or "").strip()


def normalize_unit_token(unit: str) -> str:
    """Normalize a unit token for comparison."""
    token = unit.lower().strip(".")
    if token.endswith("s") and token[:-1] in COMMON_UNITS:
        token = token[:-1]
    elif token.endswith("es") and token[:-2] in COMMON_UNITS:
        token = token[:-2]
    return token


def is_known_unit(unit: str) -> bool:
    """Check if a unit string is a recognized cooking unit."""
    return normalize_unit_token(unit) in COMMON_UNITS


def coerce_text(value) -> Optional[str]:
    """Turn a scalar or list metadata value into a trimmed string, or None."""
    if value is None:
        return None
    if isinstance(value, list):
        for item in value:
            text = coerce_text(item)
            if text:
                return text
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(int(value)) if float(value).is_integer() else str(value)
    if isinstance(value, str):
        return clean_text(value) or None
    return None


def extract_image(value) -> Optional[str]:
    """Extract image URL from the string, list and ImageObject encodings."""
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, list):
        for item in value:
            found = extract_image(item)
            if found:
                return found
        return None
    if isinstance(value, dict):
        return extract_image(value.get("url") or value.get("contentUrl"))
    return None


def extract_author(value) -> Optional[str]:
    """Extract an author name from string, Person/Organization or list encodings."""
    if isinstance(value, str):
        return clean_text(value) or None
    if isinstance(value, list):
        names = [name for name in (extract_author(item) for item in value) if name]
        return ", ".join(names) or None
    if isinstance(value, dict):
        return extract_author(value.get("name"))
    return None


def extract_ingredient_text(ingredients) -> List[str]:
    """Extract ingredient lines from a list of strings/dicts, or a single string."""
    lines: List[str] = []
    if isinstance(ingredients, str):
        ingredients = [ingredients]
    if not isinstance(ingredients, list):
        return lines
    for entry in ingredients:
        if isinstance(entry, dict):
            text = coerce_text(entry.get("text")) or coerce_text(entry.get("name"))
        else:
            text = coerce_text(entry)
        if text:
            lines.append(text)
    return lines


def extract_instruction_text(instructions) -> List[str]:
    """Extract step text from strings, HowToStep and HowToSection encodings."""
    steps: List[str] = []
    if isinstance(instructions, list):
        for entry in instructions:
            if isinstance(entry, str):
                cleaned = clean_text(entry)
                if cleaned:
                    steps.append(cleaned)
            elif isinstance(entry, dict):
                nested = entry.get("itemListElement")
                if nested:
                    steps.extend(extract_instruction_text(nested))
                    continue
                cleaned = (
                    coerce_text(entry.get("text"))
                    or coerce_text(entry.get("name"))
                    or coerce_text(entry.get("description"))
                )
                if cleaned:
                    steps.append(cleaned)
    elif isinstance(instructions, dict):
        steps.extend(extract_instruction_text([instructions]))
    elif isinstance(instructions, str):
        cleaned = clean_text(instructions)
        if cleaned:
            steps.append(cleaned)
    return steps


def truncate_description(text: str, limit: int = DESCRIPTION_MAX_CHARS) -> str:
    """Cut a paragraph down to a short description with an ellipsis marker."""
    text = clean_text(text)
    if len(text) > limit:
        return text[:limit] + "..."
    return text
