# ABOUTME: Unit tests for the Gemini extraction service.
# ABOUTME: Uses a FakeHttpClient to check request payloads, response reading, and error mapping.

import base64

import pytest

from bookscout.errors import ConfigurationError, ExtractionServiceError
from bookscout.extraction.gemini import Extractor, GeminiExtractor, read_candidate_text
from bookscout.extraction.prompts import VISION_PROMPT
from bookscout.http import HttpRequestError
from tests.fixtures.fakes import FakeHttpClient
from tests.fixtures.gemini_responses import (
    EMPTY_CANDIDATES_BODY,
    SPLIT_PARTS_BODY,
    TEXT_EXTRACTION_JSON,
    generate_content_body,
)

_ENDPOINT = ":generateContent"


class TestReadCandidateText:
    def test_reads_text_finish_reason_and_usage(self) -> None:
        body = generate_content_body(TEXT_EXTRACTION_JSON, finish_reason="MAX_TOKENS")
        response = read_candidate_text(body)
        assert response.text == TEXT_EXTRACTION_JSON
        assert response.finish_reason == "MAX_TOKENS"
        assert response.usage == body["usageMetadata"]
        assert response.raw_body is body

    def test_joins_text_parts(self) -> None:
        response = read_candidate_text(SPLIT_PARTS_BODY)
        assert response.text == '{"query":"мастер и\n маргарита","confidence":0.9}'

    def test_no_candidates(self) -> None:
        response = read_candidate_text(EMPTY_CANDIDATES_BODY)
        assert response.text == ""
        assert response.finish_reason is None


class TestGeminiExtractor:
    """Tests for GeminiExtractor."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(GeminiExtractor(FakeHttpClient(), "key"), Extractor)

    def test_text_request(self) -> None:
        client = FakeHttpClient({_ENDPOINT: generate_content_body(TEXT_EXTRACTION_JSON)})
        extractor = GeminiExtractor(client, "secret", model="gemini-test")

        response = extractor.extract_from_text("книга про пустынную планету")

        assert response.text == TEXT_EXTRACTION_JSON
        method, url, params = client.request_log[0]
        assert method == "POST"
        assert url.endswith("/models/gemini-test:generateContent")
        assert params == {"key": "secret"}
        payload = client.payloads[0]
        assert payload["generationConfig"] == {"temperature": 0, "maxOutputTokens": 1024}
        prompt = payload["contents"][0]["parts"][0]["text"]
        assert "книга про пустынную планету" in prompt

    def test_image_request(self) -> None:
        client = FakeHttpClient({_ENDPOINT: generate_content_body('{"items":[]}')})
        extractor = GeminiExtractor(client, "secret")

        extractor.extract_from_image(b"\xff\xd8jpeg", "image/png")

        parts = client.payloads[0]["contents"][0]["parts"]
        assert parts[0] == {"text": VISION_PROMPT}
        assert parts[1]["inlineData"] == {
            "mimeType": "image/png",
            "data": base64.b64encode(b"\xff\xd8jpeg").decode("ascii"),
        }
        assert client.payloads[0]["generationConfig"]["maxOutputTokens"] == 512

    def test_missing_api_key(self) -> None:
        client = FakeHttpClient()
        with pytest.raises(ConfigurationError, match="GEMINI_API_KEY"):
            GeminiExtractor(client, None).extract_from_text("x")
        assert client.request_log == []

    def test_http_failure_becomes_service_error(self) -> None:
        client = FakeHttpClient({_ENDPOINT: HttpRequestError("HTTP 400", status_code=400)})
        with pytest.raises(ExtractionServiceError, match="Gemini request failed") as exc_info:
            GeminiExtractor(client, "secret").extract_from_text("x")
        assert isinstance(exc_info.value.__cause__, HttpRequestError)
