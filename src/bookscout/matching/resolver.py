# ABOUTME: Multi-query catalog resolution: turns a noisy title/author guess into a confident match.
# ABOUTME: Issues ordered, deduplicated search attempts and stops at the first candidate clearing the gate.

import logging
from collections.abc import Callable
from dataclasses import dataclass

from bookscout.catalog.provider import CatalogProvider
from bookscout.catalog.types import BookInfo, CatalogCandidate
from bookscout.config import DEFAULT_THRESHOLDS, Thresholds
from bookscout.extraction.types import ExtractionResult
from bookscout.matching.normalizer import collapse_whitespace, normalize, short_title
from bookscout.matching.scoring import score_candidate

logger = logging.getLogger(__name__)

DEFAULT_TITLE_LIMIT = 20
DEFAULT_AUTHOR_LIMIT = 20


@dataclass(frozen=True)
class SearchAttempt:
    """One (title, author) phrase pair to submit to the catalog."""

    title_phrase: str
    author_phrase: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        """Identity of the attempt: normalized title and author."""
        return normalize(self.title_phrase), normalize(self.author_phrase)

    @property
    def phrase(self) -> str:
        """The text sent to the catalog's title search."""
        if self.author_phrase:
            return f"{self.title_phrase} {self.author_phrase}"
        return self.title_phrase


@dataclass(frozen=True)
class BestMatch:
    """The accepted candidate, its score, and its extended catalog metadata."""

    candidate: CatalogCandidate
    score: int
    info: BookInfo


@dataclass(frozen=True)
class SearchTrace:
    """Record of one catalog call, for debugging the resolution."""

    search: str
    phrase: str
    candidates: tuple[CatalogCandidate, ...]


@dataclass(frozen=True)
class PickTrace:
    """Record of the final pick, for debugging the resolution."""

    best: CatalogCandidate | None
    score: int
    min_score: int


Trace = Callable[[SearchTrace | PickTrace], None]


def build_attempts(guess: ExtractionResult, original_text: str) -> list[SearchAttempt]:
    """Build the ordered, deduplicated list of search attempts for a guess.

    Priority: short title with author, short title, full title, translated
    title (with translated author, then alone), translated query, variants,
    the model's query, and finally the user's untouched input.
    """
    attempts: list[SearchAttempt] = []
    seen: set[tuple[str, str]] = set()

    def add(title: str | None, author: str | None = None) -> None:
        attempt = SearchAttempt(
            title_phrase=collapse_whitespace(title),
            author_phrase=collapse_whitespace(author) or None,
        )
        if not attempt.key[0] or attempt.key in seen:
            return
        seen.add(attempt.key)
        attempts.append(attempt)

    short = short_title(guess.title)
    if guess.author:
        add(short, guess.author)
    add(short)
    add(guess.title)

    translated_short = short_title(guess.translated_title)
    if guess.translated_author:
        add(translated_short, guess.translated_author)
    add(translated_short)
    add(guess.translated_title)
    add(guess.translated_query)

    for variant in guess.variants:
        add(variant)
    add(guess.query)
    add(original_text)
    return attempts


class CandidateResolver:
    """Resolve an extraction guess to a single catalog book, or to no confident match.

    Attempts run strictly one after another. Candidates accumulate across
    attempts and are always scored against the guess itself, never against
    the phrase that happened to find them.
    """

    def __init__(
        self,
        catalog: CatalogProvider,
        thresholds: Thresholds = DEFAULT_THRESHOLDS,
        *,
        title_limit: int = DEFAULT_TITLE_LIMIT,
        author_limit: int = DEFAULT_AUTHOR_LIMIT,
    ) -> None:
        self._catalog = catalog
        self._thresholds = thresholds
        self._title_limit = title_limit
        self._author_limit = author_limit

    def resolve(
        self,
        guess: ExtractionResult,
        original_text: str = "",
        trace: Trace | None = None,
    ) -> BestMatch | None:
        """Find the best-scoring catalog candidate for a guess.

        Returns None when no candidate reaches the minimum score. Catalog
        transport failures (CatalogUnavailableError) propagate immediately.
        """
        target_title = short_title(guess.title) or guess.query
        target_author = guess.author
        min_score = self._thresholds.min_score(bool(normalize(target_author)))

        seen_ids: set[str] = set()
        searched_authors: set[str] = set()
        best: CatalogCandidate | None = None
        best_score = -1

        for attempt in build_attempts(guess, original_text):
            found = self._catalog.search_by_title(attempt.phrase, self._title_limit)
            logger.debug("Title search %r -> %d results", attempt.phrase, len(found))
            if trace:
                trace(SearchTrace("title", attempt.phrase, tuple(found)))

            author = attempt.author_phrase or target_author
            if not found and author and normalize(author) not in searched_authors:
                searched_authors.add(normalize(author))
                found = self._catalog.search_by_author(author, self._author_limit)
                logger.debug("Author search %r -> %d results", author, len(found))
                if trace:
                    trace(SearchTrace("author", author, tuple(found)))

            for candidate in found:
                if not candidate.id or candidate.id in seen_ids:
                    continue
                seen_ids.add(candidate.id)
                score = score_candidate(candidate, target_title, target_author)
                if score > best_score:
                    best, best_score = candidate, score

            if best is not None and best_score >= min_score:
                break

        if trace:
            trace(PickTrace(best, max(best_score, 0), min_score))

        if best is None or best_score < min_score:
            logger.info(
                "No confident catalog match for %r (best score %d, need %d)",
                target_title,
                max(best_score, 0),
                min_score,
            )
            return None

        info = self._catalog.get_metadata(best.id)
        return BestMatch(candidate=best, score=best_score, info=info)
