# ABOUTME: Unit tests for the Google Books secondary lookup.
# ABOUTME: Uses a FakeHttpClient to test query building, parsing, and best-effort failure handling.

import logging
from urllib.parse import quote_plus

import pytest

from bookscout.catalog.googlebooks import GoogleBooksLookup, build_volume_query, parse_volume
from bookscout.catalog.provider import SecondaryLookup
from bookscout.catalog.types import VolumeInfo
from bookscout.http import HttpRequestError
from tests.fixtures.fakes import FakeHttpClient
from tests.fixtures.google_books_responses import (
    VOLUMES_RESPONSE,
    VOLUMES_RESPONSE_EMPTY,
    VOLUMES_RESPONSE_UNTITLED_FIRST,
)


class TestBuildVolumeQuery:
    def test_title_and_author(self) -> None:
        assert build_volume_query("Дюна", "Герберт") == 'intitle:"Дюна" inauthor:"Герберт"'

    def test_title_only(self) -> None:
        assert build_volume_query(" Дюна ", None) == 'intitle:"Дюна"'

    def test_blank(self) -> None:
        assert build_volume_query("", "  ") == ""


class TestParseVolume:
    def test_prefers_canonical_link(self) -> None:
        volume = parse_volume(VOLUMES_RESPONSE["items"][0])
        assert volume is not None
        assert volume.title == "Дюна"
        assert volume.authors == ("Фрэнк Герберт",)
        assert volume.canonical_link.startswith("https://books.google.com/books/about/")

    def test_missing_title(self) -> None:
        assert parse_volume({"volumeInfo": {"authors": ["X"]}}) is None
        assert parse_volume({}) is None

    def test_null_authors_are_treated_as_missing(self) -> None:
        volume = parse_volume({"volumeInfo": {"title": "Дюна", "authors": None}})
        assert volume is not None
        assert volume.authors == ()

    def test_non_string_authors_are_skipped(self) -> None:
        volume = parse_volume({"volumeInfo": {"title": "Дюна", "authors": [None, 7, " Герберт "]}})
        assert volume is not None
        assert volume.authors == ("Герберт",)

    @pytest.mark.parametrize(
        "item",
        [None, "Дюна", ["Дюна"], {"volumeInfo": None}, {"volumeInfo": {"title": None}}],
    )
    def test_malformed_items_are_skipped(self, item: object) -> None:
        assert parse_volume(item) is None


class TestVolumeInfo:
    def test_link_falls_back_to_web_search(self) -> None:
        volume = VolumeInfo(title="Пикник на обочине", authors=("Стругацкие",))
        expected = quote_plus("Пикник на обочине Стругацкие")
        assert volume.link_or_search_url() == f"https://www.google.com/search?q={expected}"

    def test_author_is_first_listed(self) -> None:
        assert VolumeInfo(title="T", authors=("A", "B")).author == "A"
        assert VolumeInfo(title="T").author == ""


class TestGoogleBooksLookup:
    """Tests for GoogleBooksLookup.lookup_by_title_author."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(GoogleBooksLookup(FakeHttpClient()), SecondaryLookup)

    def test_returns_first_volume(self) -> None:
        client = FakeHttpClient({"books/v1/volumes": VOLUMES_RESPONSE})
        volume = GoogleBooksLookup(client).lookup_by_title_author("Дюна", "Фрэнк Герберт")
        assert volume is not None
        assert volume.title == "Дюна"

    def test_request_parameters(self) -> None:
        client = FakeHttpClient({"books/v1/volumes": VOLUMES_RESPONSE_EMPTY})
        GoogleBooksLookup(client, api_key="secret").lookup_by_title_author("Дюна", None)
        _, url, params = client.request_log[0]
        assert url == "https://www.googleapis.com/books/v1/volumes"
        assert params == {
            "q": 'intitle:"Дюна"',
            "maxResults": "5",
            "printType": "books",
            "langRestrict": "ru",
            "key": "secret",
        }

    def test_no_language_restriction(self) -> None:
        client = FakeHttpClient({"books/v1/volumes": VOLUMES_RESPONSE_EMPTY})
        GoogleBooksLookup(client, lang_restrict=None).lookup_by_title_author("Solaris")
        assert "langRestrict" not in client.request_log[0][2]

    def test_skips_untitled_items(self) -> None:
        client = FakeHttpClient({"books/v1/volumes": VOLUMES_RESPONSE_UNTITLED_FIRST})
        volume = GoogleBooksLookup(client).lookup_by_title_author("Solaris", "Lem")
        assert volume is not None
        assert volume.title == "Solaris"
        assert volume.canonical_link == "https://books.google.com/books?id=y"

    def test_no_results(self) -> None:
        client = FakeHttpClient({"books/v1/volumes": VOLUMES_RESPONSE_EMPTY})
        assert GoogleBooksLookup(client).lookup_by_title_author("xyz") is None

    def test_malformed_items_do_not_escape_the_lookup(self) -> None:
        body = {
            "items": [
                "junk",
                {"volumeInfo": {"title": "Дюна", "authors": None}},
            ]
        }
        client = FakeHttpClient({"books/v1/volumes": body})
        volume = GoogleBooksLookup(client).lookup_by_title_author("Дюна", "Герберт")
        assert volume is not None
        assert volume.title == "Дюна"
        assert volume.authors == ()

    def test_non_list_items_count_as_no_results(self) -> None:
        client = FakeHttpClient({"books/v1/volumes": {"items": None, "totalItems": 0}})
        assert GoogleBooksLookup(client).lookup_by_title_author("Дюна") is None

    def test_blank_title_makes_no_request(self) -> None:
        client = FakeHttpClient()
        assert GoogleBooksLookup(client).lookup_by_title_author("", None) is None
        assert client.request_log == []

    def test_failure_is_logged_and_treated_as_no_match(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        client = FakeHttpClient({"books/v1/volumes": HttpRequestError("HTTP 503", 503)})
        with caplog.at_level(logging.WARNING, logger="bookscout.catalog.googlebooks"):
            assert GoogleBooksLookup(client).lookup_by_title_author("Дюна") is None
        assert "Google Books lookup failed" in caplog.text
