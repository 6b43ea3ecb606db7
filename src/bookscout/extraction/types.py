# ABOUTME: Structured results of the extraction step (text description or cover photo).
# ABOUTME: ExtractionResult is the guess that flows through the gate and the resolver.

from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True)
class ModelResponse:
    """The text a generative model returned, with the signals that explain it.

    Attributes:
        text: Concatenated text parts of the first candidate ("" if none).
        finish_reason: The model's stop reason, e.g. "STOP" or "MAX_TOKENS".
        usage: Token usage metadata, passed through untouched.
        raw_body: The decoded response body, kept for diagnostics.
    """

    text: str
    finish_reason: str | None = None
    usage: dict[str, Any] | None = None
    raw_body: dict[str, Any] | None = None


@dataclass(frozen=True)
class ExtractionResult:
    """A title/author guess extracted from a user's description or photo.

    Immutable once built. query is never None; an empty query means the
    extraction produced nothing searchable.
    """

    query: str
    title: str | None = None
    author: str | None = None
    confidence: float = 0.0
    translated_query: str | None = None
    translated_title: str | None = None
    translated_author: str | None = None
    keywords: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    variants: tuple[str, ...] = ()
    evidence: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            msg = f"confidence must be between 0.0 and 1.0, got {self.confidence}"
            raise ValueError(msg)

    def with_query(self, query: str, confidence: float) -> "ExtractionResult":
        """Return a copy with a substituted query and confidence."""
        return replace(self, query=query, confidence=confidence)

    @classmethod
    def from_vision_item(cls, item: "VisionItem") -> "ExtractionResult":
        """Build the guess the resolver uses for a recognised cover."""
        query = " ".join(part for part in (item.title, item.author) if part)
        return cls(
            query=query,
            title=item.title,
            author=item.author,
            confidence=item.confidence,
            evidence=item.evidence,
        )


@dataclass(frozen=True)
class VisionItem:
    """One book the vision model believes it can read on a photo."""

    title: str | None
    author: str | None
    confidence: float
    evidence: tuple[str, ...] = ()
