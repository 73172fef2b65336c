# ABOUTME: Unit tests for OpenLibraryClient and the OpenLibrary response parsers.
# ABOUTME: Uses a FakeHttpClient to test edition, work, and search lookups and failure handling.

import logging

import pytest

from bookstitch.metadata.http import MetadataFetchError
from bookstitch.metadata.openlibrary import OpenLibraryClient
from bookstitch.metadata.openlibrary_parser import (
    build_cover_url,
    first_cover_id,
    parse_edition_response,
    parse_work_response,
    positive_int,
)
from bookstitch.metadata.provider import OpenLibrarySource
from tests.fixtures.fakes import FakeHttpClient
from tests.fixtures.openlibrary_responses import (
    EDITION_RESPONSE,
    ISBN_RESPONSE,
    ISBN_RESPONSE_BARE,
    ISBN_RESPONSE_WITH_DESCRIPTION,
    LONG_DESCRIPTION,
    SEARCH_RESPONSE,
    SEARCH_RESPONSE_EMPTY,
    WORK_RESPONSE,
)


class TestParsers:
    def test_positive_int(self) -> None:
        assert positive_int(12) == 12
        assert positive_int("12") == 12
        assert positive_int(12.0) == 12
        assert positive_int(0) is None
        assert positive_int(-5) is None
        assert positive_int(True) is None
        assert positive_int("twelve") is None

    def test_first_cover_id_skips_missing_marker(self) -> None:
        assert first_cover_id([-1, 0, 240727]) == 240727
        assert first_cover_id([-1]) is None
        assert first_cover_id(None) is None

    def test_parse_edition(self) -> None:
        edition = parse_edition_response(ISBN_RESPONSE_WITH_DESCRIPTION)
        assert edition.edition_key == "/books/OL24364628M"
        assert edition.work_key == "/works/OL456W"
        assert edition.pages == 536
        assert edition.cover_id == 240727
        assert edition.description == LONG_DESCRIPTION

    def test_parse_edition_explicit_work_key(self) -> None:
        edition = parse_edition_response({"work_key": "OL5W", "works": [{"key": "/works/OL6W"}]})
        assert edition.work_key == "/works/OL5W"

    def test_parse_bare_edition(self) -> None:
        edition = parse_edition_response(ISBN_RESPONSE_BARE)
        assert edition.cover_id is None
        assert edition.pages is None

    def test_parse_work(self) -> None:
        work = parse_work_response(WORK_RESPONSE)
        assert work.work_key == "/works/OL456W"
        assert work.cover_id == 8231856
        assert work.pages_median == 502
        assert work.description is not None

    def test_build_cover_url(self) -> None:
        assert build_cover_url(240727) == "https://covers.openlibrary.org/b/id/240727-L.jpg"
        assert build_cover_url(1, size="M") == "https://covers.openlibrary.org/b/id/1-M.jpg"


class TestOpenLibraryClient:
    def test_satisfies_protocol(self) -> None:
        client = OpenLibraryClient(FakeHttpClient())
        assert isinstance(client, OpenLibrarySource)
        assert client.name == "openlibrary"

    def test_fetch_by_isbn_cleans_isbn(self) -> None:
        http = FakeHttpClient({"/isbn/9780156001311.json": ISBN_RESPONSE})
        edition = OpenLibraryClient(http).fetch_by_isbn("978-0-15-600131-1")
        assert edition is not None
        assert edition.pages == 536
        assert http.urls == ["https://openlibrary.org/isbn/9780156001311.json"]

    def test_fetch_by_isbn_empty_skips_request(self) -> None:
        http = FakeHttpClient()
        assert OpenLibraryClient(http).fetch_by_isbn(" ") is None
        assert http.urls == []

    def test_fetch_work_normalizes_key(self) -> None:
        http = FakeHttpClient({"/works/OL456W.json": WORK_RESPONSE})
        work = OpenLibraryClient(http).fetch_work("OL456W")
        assert work is not None
        assert work.work_key == "/works/OL456W"
        assert http.urls == ["https://openlibrary.org/works/OL456W.json"]

    def test_fetch_work_malformed_key(self) -> None:
        http = FakeHttpClient()
        assert OpenLibraryClient(http).fetch_work("not-a-key") is None
        assert http.urls == []

    def test_fetch_edition(self) -> None:
        http = FakeHttpClient({"/books/OL7353617M.json": EDITION_RESPONSE})
        edition = OpenLibraryClient(http).fetch_edition("/books/OL7353617M")
        assert edition is not None
        assert edition.pages == 612
        assert edition.cover_id == 555111

    def test_fetch_failure_returns_none_and_logs(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        http = FakeHttpClient({"/works/": MetadataFetchError("HTTP 500", status_code=500)})
        with caplog.at_level(logging.WARNING, logger="bookstitch.metadata.openlibrary"):
            assert OpenLibraryClient(http).fetch_work("/works/OL1W") is None
        assert "lookup failed" in caplog.text

    def test_fetch_edition_record(self) -> None:
        http = FakeHttpClient({"/isbn/9780156001311.json": ISBN_RESPONSE})
        record = OpenLibraryClient(http).fetch_edition_record("9780156001311")
        assert record is not None
        assert record.title == "The Name of the Rose"
        assert record.isbn13 == "9780156001311"

    def test_fetch_edition_record_keeps_scanned_isbn(self) -> None:
        http = FakeHttpClient({"/isbn/1234567890.json": ISBN_RESPONSE_BARE})
        record = OpenLibraryClient(http).fetch_edition_record("1234567890")
        assert record is not None
        assert record.isbn == "1234567890"

    def test_search(self) -> None:
        http = FakeHttpClient({"search.json": SEARCH_RESPONSE})
        results = OpenLibraryClient(http).search("The Name of the Rose", "Eco")
        assert [r.title for r in results] == ["The Name of the Rose", "Foucault's Pendulum"]
        _, params = http.request_log[0]
        assert params is not None
        assert params["title"] == "The Name of the Rose"
        assert params["author"] == "Eco"

    def test_search_empty_and_failure(self) -> None:
        assert OpenLibraryClient(FakeHttpClient({"search.json": SEARCH_RESPONSE_EMPTY})).search(
            "x"
        ) == []
        assert OpenLibraryClient(FakeHttpClient()).search("x") == []
