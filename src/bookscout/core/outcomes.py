# ABOUTME: Semantic results of one find request, independent of how they are rendered.
# ABOUTME: Each outcome carries optional diagnostic notes (raw model output, catalog traces).

from dataclasses import dataclass, field

from bookscout.catalog.types import VolumeInfo
from bookscout.extraction.recovery import RecoveryFailure
from bookscout.extraction.types import ExtractionResult
from bookscout.matching.resolver import BestMatch

MAX_EVIDENCE = 3
MAX_GENRES = 3
MAX_DESCRIPTION = 500


def excerpt(text: str | None, limit: int = MAX_DESCRIPTION) -> str | None:
    """First `limit` characters of stripped text, or None when blank."""
    value = (text or "").strip()
    return value[:limit] if value else None


@dataclass(kw_only=True)
class Outcome:
    """Base class for find results."""

    notes: list[str] = field(default_factory=list)

    @property
    def cacheable(self) -> bool:
        """Whether the rendered reply may be reused for an identical request."""
        return False


@dataclass(kw_only=True)
class CatalogMatch(Outcome):
    """The catalog had a confident match; links point at downloadable files."""

    guess: ExtractionResult
    match: BestMatch
    page_url: str = ""
    downloads: dict[str, str] = field(default_factory=dict)

    @property
    def cacheable(self) -> bool:
        return True

    @property
    def title(self) -> str:
        return self.match.candidate.title

    @property
    def author(self) -> str | None:
        return self.match.candidate.author

    @property
    def confidence(self) -> float:
        return self.guess.confidence

    @property
    def evidence(self) -> tuple[str, ...]:
        return self.guess.evidence[:MAX_EVIDENCE]

    @property
    def genres(self) -> tuple[str, ...]:
        return self.match.info.genres[:MAX_GENRES]

    @property
    def description(self) -> str | None:
        return excerpt(self.match.info.description)


@dataclass(kw_only=True)
class SecondaryMatch(Outcome):
    """No confident catalog match, but the secondary service confirmed the book."""

    guess: ExtractionResult
    volume: VolumeInfo

    @property
    def cacheable(self) -> bool:
        return True

    @property
    def confidence(self) -> float:
        return self.guess.confidence

    @property
    def evidence(self) -> tuple[str, ...]:
        return self.guess.evidence[:MAX_EVIDENCE]

    @property
    def link(self) -> str:
        return self.volume.link_or_search_url()


@dataclass(kw_only=True)
class NoMatch(Outcome):
    """Neither the catalog nor the secondary service could confirm the guess."""

    guess: ExtractionResult


@dataclass(kw_only=True)
class NeedMoreDetail(Outcome):
    """The description was too vague; the user should add detail."""

    confidence: float


@dataclass(kw_only=True)
class InsufficientInfo(Outcome):
    """Nothing searchable could be extracted from the request."""


@dataclass(kw_only=True)
class UnclearPhoto(Outcome):
    """The cover could not be read confidently; the user should retake the photo."""


@dataclass(kw_only=True)
class ExtractionFailed(Outcome):
    """The model's response could not be turned into a JSON object."""

    failure: RecoveryFailure
