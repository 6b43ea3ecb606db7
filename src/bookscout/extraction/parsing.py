# ABOUTME: Converts recovered model JSON into ExtractionResult and VisionItem instances.
# ABOUTME: Coerces loosely-typed model fields (numbers as strings, blanks, nulls) into clean values.

import math
from typing import Any

from bookscout.extraction.types import ExtractionResult, VisionItem


def clamp_confidence(value: Any) -> float:
    """Coerce a model-reported confidence into [0.0, 1.0].

    Numbers and numeric strings are clamped. Missing, boolean, non-numeric
    and NaN values become 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number):
        return 0.0
    return max(0.0, min(1.0, number))


def _text(value: Any) -> str | None:
    """Return a stripped string, or None for blanks and non-strings."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _text_list(value: Any) -> tuple[str, ...]:
    """Keep only the non-blank strings of a list-like field."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return ()
    items = (_text(item) for item in value)
    return tuple(item for item in items if item)


def parse_extraction(data: dict[str, Any]) -> ExtractionResult:
    """Build an ExtractionResult from a recovered text-extraction object.

    Expected shape (every field optional):
        {"query": str, "title": str|null, "author": str|null,
         "confidence": number, "translated_query": str|null,
         "translated_title": str|null, "translated_author": str|null,
         "keywords": [str], "tags": [str], "variants": [str]}

    camelCase spellings of the translated fields are accepted as well.
    """

    def pick(snake: str, camel: str) -> Any:
        return data.get(snake, data.get(camel))

    return ExtractionResult(
        query=_text(data.get("query")) or "",
        title=_text(data.get("title")),
        author=_text(data.get("author")),
        confidence=clamp_confidence(data.get("confidence")),
        translated_query=_text(pick("translated_query", "translatedQuery")),
        translated_title=_text(pick("translated_title", "translatedTitle")),
        translated_author=_text(pick("translated_author", "translatedAuthor")),
        keywords=_text_list(data.get("keywords")),
        tags=_text_list(data.get("tags")),
        variants=_text_list(data.get("variants")),
    )


def parse_vision_items(data: dict[str, Any]) -> list[VisionItem]:
    """Parse the vision model's {"items": [...]} object.

    Items are returned best-first by confidence. Ties keep the model's order.
    Entries that are not objects are skipped; items without a title are kept
    so the caller can decide what a title-less best guess means.
    """
    raw_items = data.get("items")
    if not isinstance(raw_items, list):
        return []

    items = [
        VisionItem(
            title=_text(entry.get("title")),
            author=_text(entry.get("author")),
            confidence=clamp_confidence(entry.get("confidence")),
            evidence=_text_list(entry.get("evidence")),
        )
        for entry in raw_items
        if isinstance(entry, dict)
    ]
    items.sort(key=lambda item: item.confidence, reverse=True)
    return items
