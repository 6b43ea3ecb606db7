# ABOUTME: Extraction service backed by the Gemini generateContent REST endpoint.
# ABOUTME: Returns the model's raw text plus finish reason and usage; parsing happens elsewhere.

import base64
import logging
from typing import Any, Protocol, runtime_checkable

from bookscout.errors import ConfigurationError, ExtractionServiceError
from bookscout.extraction.prompts import VISION_PROMPT, build_text_prompt
from bookscout.extraction.types import ModelResponse
from bookscout.http import HttpClient, HttpRequestError

logger = logging.getLogger(__name__)

_API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"
_TEXT_MAX_OUTPUT_TOKENS = 1024
_IMAGE_MAX_OUTPUT_TOKENS = 512


@runtime_checkable
class Extractor(Protocol):
    """Protocol for services that turn a description or photo into model text."""

    def extract_from_text(self, text: str) -> ModelResponse: ...

    def extract_from_image(self, data: bytes, mime_type: str) -> ModelResponse: ...


def read_candidate_text(body: dict[str, Any]) -> ModelResponse:
    """Pull the first candidate's text parts, finish reason and usage out of a response."""
    candidates = body.get("candidates") or []
    candidate = candidates[0] if candidates and isinstance(candidates[0], dict) else {}
    content = candidate.get("content") or {}
    parts = content.get("parts") or []
    texts = [
        part["text"]
        for part in parts
        if isinstance(part, dict) and isinstance(part.get("text"), str) and part["text"]
    ]
    return ModelResponse(
        text="\n".join(texts).strip(),
        finish_reason=candidate.get("finishReason"),
        usage=body.get("usageMetadata"),
        raw_body=body,
    )


class GeminiExtractor:
    """Extractor that calls Gemini with deterministic (temperature 0) generation."""

    def __init__(
        self,
        http_client: HttpClient,
        api_key: str | None,
        model: str = "gemini-2.5-flash",
    ) -> None:
        self._http = http_client
        self._api_key = api_key
        self._model = model

    def extract_from_text(self, text: str) -> ModelResponse:
        parts = [{"text": build_text_prompt(text)}]
        return self._generate(parts, _TEXT_MAX_OUTPUT_TOKENS)

    def extract_from_image(self, data: bytes, mime_type: str = "image/jpeg") -> ModelResponse:
        encoded = base64.b64encode(data).decode("ascii")
        parts = [
            {"text": VISION_PROMPT},
            {"inlineData": {"mimeType": mime_type, "data": encoded}},
        ]
        return self._generate(parts, _IMAGE_MAX_OUTPUT_TOKENS)

    def _generate(self, parts: list[dict[str, Any]], max_output_tokens: int) -> ModelResponse:
        if not self._api_key:
            raise ConfigurationError("GEMINI_API_KEY is missing")

        payload = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {"temperature": 0, "maxOutputTokens": max_output_tokens},
        }
        url = f"{_API_BASE}/{self._model}:generateContent"
        try:
            body = self._http.post(url, payload, params={"key": self._api_key})
        except HttpRequestError as exc:
            raise ExtractionServiceError(f"Gemini request failed: {exc}") from exc

        response = read_candidate_text(body)
        logger.debug(
            "Gemini returned %d chars (finish_reason=%s)",
            len(response.text),
            response.finish_reason,
        )
        return response
