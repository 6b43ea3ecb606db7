# ABOUTME: Request pipeline from a description or cover photo to a find outcome.
# ABOUTME: Extraction -> JSON recovery -> confidence gate -> catalog resolution -> secondary lookup.

import json
import logging

from bookscout.catalog.provider import CatalogProvider, SecondaryLookup
from bookscout.config import DEFAULT_THRESHOLDS, RequestOptions, Thresholds
from bookscout.core.outcomes import (
    CatalogMatch,
    ExtractionFailed,
    InsufficientInfo,
    NeedMoreDetail,
    NoMatch,
    Outcome,
    SecondaryMatch,
    UnclearPhoto,
)
from bookscout.extraction.gemini import Extractor
from bookscout.extraction.parsing import parse_extraction, parse_vision_items
from bookscout.extraction.recovery import RecoveryFailure, recover
from bookscout.extraction.types import ExtractionResult, ModelResponse
from bookscout.matching.gate import (
    AskForDetail,
    Reject,
    apply_query_fallback,
    decide,
    decide_photo,
)
from bookscout.matching.resolver import CandidateResolver, PickTrace, SearchTrace

logger = logging.getLogger(__name__)

DOWNLOAD_FORMATS = ("mobi", "epub")
_TRACE_LIST_LIMIT = 5


def format_trace(record: SearchTrace | PickTrace) -> str:
    """Render a resolver trace record as a short diagnostic note."""
    if isinstance(record, PickTrace):
        if record.best is None:
            return "Catalog pick: none"
        author = f", {record.best.author}" if record.best.author else ""
        return (
            f"Catalog pick: score={record.score}, min_score={record.min_score}\n"
            f"BEST: {record.best.id} | {record.best.title}{author}"
        )

    lines = [f'Catalog {record.search} search("{record.phrase}") -> {len(record.candidates)}']
    if not record.candidates:
        lines.append("empty")
    for index, candidate in enumerate(record.candidates[:_TRACE_LIST_LIMIT], start=1):
        author = f", {candidate.author[:80]}" if candidate.author else ""
        lines.append(f"{index}) {candidate.id} | {candidate.title[:120]}{author}")
    return "\n".join(lines)


def _raw_note(response: ModelResponse) -> str:
    usage = json.dumps(response.usage, ensure_ascii=False) if response.usage else "-"
    return (
        f"RAW model output (finish_reason={response.finish_reason or '-'}, usage={usage}):\n\n"
        f"{response.text or '<empty>'}"
    )


class BookFinder:
    """Identify a book from a description or a photo and find where to get it.

    Holds no per-request state; toggles arrive with each call as RequestOptions.
    """

    def __init__(
        self,
        extractor: Extractor,
        catalog: CatalogProvider,
        lookup: SecondaryLookup,
        thresholds: Thresholds = DEFAULT_THRESHOLDS,
        *,
        resolver: CandidateResolver | None = None,
    ) -> None:
        self._extractor = extractor
        self._catalog = catalog
        self._lookup = lookup
        self._thresholds = thresholds
        self._resolver = resolver or CandidateResolver(catalog, thresholds)

    def find_from_text(self, text: str, options: RequestOptions | None = None) -> Outcome:
        """Find a book from a free-text description."""
        options = options or RequestOptions()
        notes: list[str] = []

        response = self._extractor.extract_from_text(text)
        if options.raw_mode:
            notes.append(_raw_note(response))

        recovered = recover(
            response.text, finish_reason=response.finish_reason, usage=response.usage
        )
        if isinstance(recovered, RecoveryFailure):
            return ExtractionFailed(failure=recovered, notes=notes)

        extraction = apply_query_fallback(parse_extraction(recovered), text, self._thresholds)
        action = decide(extraction, self._thresholds)
        if isinstance(action, Reject):
            return InsufficientInfo(notes=notes)
        if isinstance(action, AskForDetail):
            return NeedMoreDetail(confidence=action.confidence, notes=notes)
        return self._resolve(action.extraction, text, options, notes)

    def find_from_photo(
        self,
        data: bytes,
        mime_type: str = "image/jpeg",
        options: RequestOptions | None = None,
    ) -> Outcome:
        """Find a book from a photographed cover."""
        options = options or RequestOptions()
        notes: list[str] = []

        response = self._extractor.extract_from_image(data, mime_type)
        if options.raw_mode:
            notes.append(_raw_note(response))

        recovered = recover(
            response.text, finish_reason=response.finish_reason, usage=response.usage
        )
        if isinstance(recovered, RecoveryFailure):
            return ExtractionFailed(failure=recovered, notes=notes)

        action = decide_photo(parse_vision_items(recovered), self._thresholds)
        if isinstance(action, Reject):
            return UnclearPhoto(notes=notes)
        guess = action.extraction
        return self._resolve(guess, " ".join(guess.evidence), options, notes)

    def debug_text(self, text: str) -> tuple[ModelResponse, dict | RecoveryFailure]:
        """Run only the text extraction and recovery, for diagnostics."""
        response = self._extractor.extract_from_text(text)
        return response, recover(
            response.text, finish_reason=response.finish_reason, usage=response.usage
        )

    def _resolve(
        self,
        guess: ExtractionResult,
        original_text: str,
        options: RequestOptions,
        notes: list[str],
    ) -> Outcome:
        def trace(record: SearchTrace | PickTrace) -> None:
            notes.append(format_trace(record))

        match = self._resolver.resolve(
            guess, original_text, trace if options.catalog_debug else None
        )
        if match is not None:
            book_id = match.candidate.id
            downloads = {
                fmt: url
                for fmt in DOWNLOAD_FORMATS
                if (url := self._catalog.get_download_url(book_id, fmt))
            }
            return CatalogMatch(
                guess=guess,
                match=match,
                page_url=self._catalog.page_url(match.candidate.link or ""),
                downloads=downloads,
                notes=notes,
            )

        volume = self._lookup.lookup_by_title_author(guess.title or guess.query, guess.author)
        if volume is not None:
            return SecondaryMatch(guess=guess, volume=volume, notes=notes)

        logger.info("No match for guess %r / %r", guess.title or guess.query, guess.author)
        return NoMatch(guess=guess, notes=notes)
