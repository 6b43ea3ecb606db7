# ABOUTME: Confidence gate deciding whether an extraction is good enough to search with.
# ABOUTME: Substitutes a fallback query for unusable model queries and floors confidence.

from collections.abc import Sequence
from dataclasses import dataclass

from bookscout.config import DEFAULT_THRESHOLDS, Thresholds
from bookscout.extraction.types import ExtractionResult, VisionItem
from bookscout.matching.normalizer import build_fallback_query, is_bad_query, normalize

INSUFFICIENT_INFO = "insufficient-info"
UNCLEAR_PHOTO = "unclear-photo"


@dataclass(frozen=True)
class Reject:
    """Stop: the request cannot be searched."""

    reason: str


@dataclass(frozen=True)
class AskForDetail:
    """Stop and ask the user for a more specific description."""

    confidence: float


@dataclass(frozen=True)
class Proceed:
    """Search the catalog with this extraction."""

    extraction: ExtractionResult


Action = Reject | AskForDetail | Proceed


def apply_query_fallback(
    extraction: ExtractionResult,
    original_text: str,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> ExtractionResult:
    """Replace an unusable model query with one built from the user's own text.

    A zero confidence on an otherwise well-formed response means the model
    did not bother to score, so the confidence is floored: higher when the
    model still named a title.
    """
    if not is_bad_query(extraction.query):
        return extraction

    floor = (
        thresholds.fallback_floor_titled
        if extraction.title
        else thresholds.fallback_floor_untitled
    )
    return extraction.with_query(
        build_fallback_query(original_text), max(extraction.confidence, floor)
    )


def decide(extraction: ExtractionResult, thresholds: Thresholds = DEFAULT_THRESHOLDS) -> Action:
    """Decide what to do with a (fallback-substituted) text extraction.

    A query with no letters or digits left after normalization counts as empty.
    """
    if not normalize(extraction.query):
        return Reject(INSUFFICIENT_INFO)
    if extraction.confidence < thresholds.ask_detail_below:
        return AskForDetail(extraction.confidence)
    return Proceed(extraction)


def decide_photo(
    items: Sequence[VisionItem], thresholds: Thresholds = DEFAULT_THRESHOLDS
) -> Reject | Proceed:
    """Decide whether a cover photo was read well enough to search with.

    Stricter than the text gate: a misread cover leads to the wrong book
    entirely.
    """
    if not items:
        return Reject(UNCLEAR_PHOTO)
    best = sorted(items, key=lambda item: item.confidence, reverse=True)[0]
    if not best.title or best.confidence < thresholds.photo_min_confidence:
        return Reject(UNCLEAR_PHOTO)
    return Proceed(ExtractionResult.from_vision_item(best))
