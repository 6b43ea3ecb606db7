# ABOUTME: Unit tests for turning recovered model JSON into extraction types.
# ABOUTME: Checks confidence clamping, field coercion, camelCase keys, and vision item ordering.

import pytest

from bookscout.extraction.parsing import clamp_confidence, parse_extraction, parse_vision_items
from bookscout.extraction.recovery import recover
from bookscout.extraction.types import ExtractionResult, VisionItem
from tests.fixtures.gemini_responses import TEXT_EXTRACTION_JSON, VISION_EXTRACTION_JSON


class TestClampConfidence:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0.7, 0.7),
            (1.5, 1.0),
            (-0.2, 0.0),
            ("0.8", 0.8),
            ("high", 0.0),
            (None, 0.0),
            (True, 0.0),
            (float("nan"), 0.0),
            ([0.5], 0.0),
            (1, 1.0),
        ],
    )
    def test_clamp(self, value: object, expected: float) -> None:
        assert clamp_confidence(value) == expected


class TestParseExtraction:
    """Tests for parse_extraction."""

    def test_full_response(self) -> None:
        data = recover(TEXT_EXTRACTION_JSON)
        assert isinstance(data, dict)

        result = parse_extraction(data)

        assert result.query == "дюна герберт пустынная планета"
        assert result.title == "Дюна"
        assert result.author == "Фрэнк Герберт"
        assert result.confidence == 0.92
        assert result.translated_title == "Dune"
        assert result.translated_author == "Frank Herbert"
        assert result.keywords == ("пустыня", "пряность")
        assert result.tags == ("фантастика",)
        assert result.variants == ()

    def test_empty_object_gives_empty_query(self) -> None:
        result = parse_extraction({})
        assert result == ExtractionResult(query="")

    def test_camel_case_translated_fields(self) -> None:
        result = parse_extraction(
            {"query": "x y", "translatedQuery": "a b", "translatedTitle": "T"}
        )
        assert result.translated_query == "a b"
        assert result.translated_title == "T"

    def test_blank_and_null_fields_become_none(self) -> None:
        result = parse_extraction({"query": "  ", "title": "", "author": None})
        assert result.query == ""
        assert result.title is None
        assert result.author is None

    def test_list_fields_drop_junk(self) -> None:
        result = parse_extraction({"query": "q w", "keywords": ["a", "", None, 3, {"x": 1}]})
        assert result.keywords == ("a", "3")

    def test_single_string_list_field(self) -> None:
        assert parse_extraction({"variants": "Дюна"}).variants == ("Дюна",)

    def test_out_of_range_confidence_is_clamped(self) -> None:
        assert parse_extraction({"query": "a b", "confidence": 7}).confidence == 1.0


class TestParseVisionItems:
    """Tests for parse_vision_items."""

    def test_items_sorted_best_first(self) -> None:
        data = recover(VISION_EXTRACTION_JSON)
        assert isinstance(data, dict)

        items = parse_vision_items(data)

        assert items[0] == VisionItem(
            title="Дюна",
            author="Фрэнк Герберт",
            confidence=0.93,
            evidence=("ДЮНА", "ФРЭНК ГЕРБЕРТ"),
        )
        assert items[1].author is None

    def test_reorders_by_confidence(self) -> None:
        items = parse_vision_items(
            {
                "items": [
                    {"title": "A", "confidence": 0.2},
                    {"title": "B", "confidence": 0.9},
                    {"title": "C", "confidence": 0.2},
                ]
            }
        )
        assert [item.title for item in items] == ["B", "A", "C"]

    def test_missing_items(self) -> None:
        assert parse_vision_items({}) == []
        assert parse_vision_items({"items": "nope"}) == []

    def test_skips_non_object_entries(self) -> None:
        items = parse_vision_items({"items": ["x", {"title": "Солярис", "confidence": "0.7"}]})
        assert items == [VisionItem(title="Солярис", author=None, confidence=0.7)]


class TestExtractionResult:
    def test_rejects_out_of_range_confidence(self) -> None:
        with pytest.raises(ValueError, match="confidence"):
            ExtractionResult(query="x", confidence=1.2)

    def test_with_query_returns_copy(self) -> None:
        original = ExtractionResult(query="x", title="T", confidence=0.1)
        updated = original.with_query("new phrase", 0.5)
        assert updated.query == "new phrase"
        assert updated.confidence == 0.5
        assert updated.title == "T"
        assert original.query == "x"

    def test_from_vision_item(self) -> None:
        item = VisionItem(title="Солярис", author="Станислав Лем", confidence=0.8)
        result = ExtractionResult.from_vision_item(item)
        assert result.query == "Солярис Станислав Лем"
        assert result.confidence == 0.8
