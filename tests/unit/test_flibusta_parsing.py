# ABOUTME: Unit tests for Flibusta OPDS feed and book page parsing.
# ABOUTME: Uses canned Atom feeds and HTML from tests/fixtures/flibusta_responses.py.

import pytest

from bookscout.catalog.flibusta_parser import (
    FeedParseError,
    parse_author_ids,
    parse_book_feed,
    parse_book_page,
)
from bookscout.catalog.types import BookInfo
from tests.fixtures.flibusta_responses import (
    AUTHOR_SEARCH_FEED,
    BOOK_PAGE_HTML,
    BOOK_PAGE_NO_ANNOTATION,
    BOOK_SEARCH_FEED,
    EMPTY_FEED,
    MULTI_AUTHOR_FEED,
)


class TestParseBookFeed:
    """Tests for parse_book_feed."""

    def test_parses_book_entries_in_order(self) -> None:
        candidates = parse_book_feed(BOOK_SEARCH_FEED)
        assert [c.id for c in candidates] == ["172148", "301002"]

    def test_candidate_fields(self) -> None:
        dune = parse_book_feed(BOOK_SEARCH_FEED)[0]
        assert dune.title == "Дюна"
        assert dune.author == "Фрэнк Герберт"
        assert dune.link == "/b/172148"

    def test_raw_metadata(self) -> None:
        dune = parse_book_feed(BOOK_SEARCH_FEED)[0]
        assert set(dune.raw["formats"]) == {"fb2", "epub", "mobi"}
        assert dune.raw["genres"] == ["Эпическая фантастика"]
        assert dune.raw["language"] == "ru"
        assert dune.raw["annotation"] == "Первая книга цикла ."

    def test_default_link_without_page_link(self) -> None:
        children = parse_book_feed(BOOK_SEARCH_FEED)[1]
        assert children.link == "/b/301002"
        assert children.raw["language"] is None

    def test_skips_non_book_entries(self) -> None:
        assert all(c.id.isdigit() for c in parse_book_feed(BOOK_SEARCH_FEED))

    def test_joins_multiple_authors(self) -> None:
        book = parse_book_feed(MULTI_AUTHOR_FEED)[0]
        assert book.author == "Аркадий Стругацкий, Борис Стругацкий"

    def test_empty_feed(self) -> None:
        assert parse_book_feed(EMPTY_FEED) == []

    def test_invalid_xml_raises(self) -> None:
        with pytest.raises(FeedParseError):
            parse_book_feed("<html><body>Cloudflare says no")


class TestParseAuthorIds:
    def test_returns_ids_in_feed_order(self) -> None:
        assert parse_author_ids(AUTHOR_SEARCH_FEED) == ["21512", "99001"]

    def test_book_feed_has_no_authors(self) -> None:
        assert parse_author_ids(BOOK_SEARCH_FEED) == []


class TestParseBookPage:
    """Tests for scraping the book page."""

    def test_annotation_and_genres(self) -> None:
        info = parse_book_page(BOOK_PAGE_HTML)
        assert info.description == (
            "Роман о пустынной планете Арракис & её обитателях. Первая книга цикла."
        )
        assert info.genres == ("Эпическая фантастика", "Социальная фантастика")

    def test_page_without_annotation(self) -> None:
        assert parse_book_page(BOOK_PAGE_NO_ANNOTATION) == BookInfo()
