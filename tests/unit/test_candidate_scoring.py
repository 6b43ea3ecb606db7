# ABOUTME: Unit tests for scoring catalog candidates against a title/author guess.
# ABOUTME: Verifies the exact and substring tiers for title and author.

import pytest

from bookscout.catalog.types import CatalogCandidate
from bookscout.matching.scoring import MAX_SCORE, score_candidate


def _candidate(title: str, author: str | None = None) -> CatalogCandidate:
    return CatalogCandidate(id="1", title=title, author=author)


class TestScoreCandidate:
    """Tests for score_candidate."""

    def test_exact_title_and_partial_author(self) -> None:
        candidate = _candidate("War and Peace", "Leo Tolstoy")
        assert score_candidate(candidate, "war and peace", "tolstoy") == 8

    def test_exact_title_and_exact_author(self) -> None:
        candidate = _candidate("Дюна", "Фрэнк Герберт")
        assert score_candidate(candidate, "ДЮНА", "фрэнк  герберт") == MAX_SCORE

    def test_partial_title_either_direction(self) -> None:
        longer = _candidate("Дюна. Книга первая")
        shorter = _candidate("Дюна")
        assert score_candidate(longer, "Дюна", None) == 4
        assert score_candidate(shorter, "Дюна: Мессия", None) == 4

    def test_no_match_scores_zero(self) -> None:
        candidate = _candidate("Солярис", "Станислав Лем")
        assert score_candidate(candidate, "Дюна", "Герберт") == 0

    def test_missing_target_author_adds_nothing(self) -> None:
        candidate = _candidate("Дюна", "Фрэнк Герберт")
        assert score_candidate(candidate, "Дюна", None) == 6

    def test_missing_candidate_author_adds_nothing(self) -> None:
        candidate = _candidate("Дюна")
        assert score_candidate(candidate, "Дюна", "Герберт") == 6

    def test_yo_and_punctuation_do_not_matter(self) -> None:
        candidate = _candidate("Ёлки-палки!", "Пётр Иванов")
        assert score_candidate(candidate, "елки палки", "петр иванов") == MAX_SCORE

    @pytest.mark.parametrize(
        ("title", "author"),
        [("", ""), ("x", None), ("Дюна", "Герберт"), ("a" * 500, "b" * 500)],
    )
    def test_score_stays_in_range(self, title: str, author: str | None) -> None:
        score = score_candidate(_candidate("Дюна", "Герберт"), title, author)
        assert 0 <= score <= MAX_SCORE
