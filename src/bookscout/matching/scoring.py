# ABOUTME: Deterministic scoring of catalog candidates against a title/author guess.
# ABOUTME: Exact and substring tiers on normalized text; title weighs more than author.

from bookscout.catalog.types import CatalogCandidate
from bookscout.matching.normalizer import normalize

# Tier weights. Title matches weigh 1.5x author matches: author names drift
# more under transliteration than titles do.
_TITLE_EXACT = 6
_TITLE_PARTIAL = 4
_AUTHOR_EXACT = 4
_AUTHOR_PARTIAL = 2

MAX_SCORE = _TITLE_EXACT + _AUTHOR_EXACT


def _tier(candidate_value: str, target: str, exact: int, partial: int) -> int:
    """Score one field: exact match, containment either way, or nothing."""
    if not target:
        return 0
    if candidate_value == target:
        return exact
    if candidate_value and (target in candidate_value or candidate_value in target):
        return partial
    return 0


def score_candidate(
    candidate: CatalogCandidate, target_title: str | None, target_author: str | None
) -> int:
    """Score how well a catalog candidate matches the guessed title and author.

    Both sides are normalized first. Returns an integer in [0, MAX_SCORE].
    """
    score = _tier(
        normalize(candidate.title), normalize(target_title), _TITLE_EXACT, _TITLE_PARTIAL
    )
    score += _tier(
        normalize(candidate.author), normalize(target_author), _AUTHOR_EXACT, _AUTHOR_PARTIAL
    )
    return score
