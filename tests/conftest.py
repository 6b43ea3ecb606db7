# ABOUTME: Shared pytest fixtures for Bookscout tests.
# ABOUTME: Provides a fake catalog, a recording console, and a sample cover photo.

from pathlib import Path

import pytest
from rich.console import Console

from bookscout.catalog.types import BookInfo
from tests.fixtures.fakes import FakeCatalog, candidate


@pytest.fixture
def console() -> Console:
    """A Rich console that records output instead of writing to a terminal."""
    return Console(record=True, width=120, force_terminal=False, color_system=None)


@pytest.fixture
def dune_catalog() -> FakeCatalog:
    """A catalog that knows Dune by its short title and by its author."""
    dune = candidate("172148", "Дюна", "Фрэнк Герберт")
    messiah = candidate("172150", "Мессия Дюны", "Фрэнк Герберт")
    return FakeCatalog(
        title_results={
            "Дюна Фрэнк Герберт": [dune, messiah],
            "Дюна": [messiah, dune],
        },
        author_results={"Фрэнк Герберт": [messiah, dune]},
        info=BookInfo(
            description="Роман о пустынной планете Арракис.",
            genres=("Эпическая фантастика", "Социальная фантастика", "Классика", "Роман"),
        ),
    )


@pytest.fixture
def cover_photo(tmp_path: Path) -> Path:
    """A small file standing in for a JPEG cover photo."""
    path = tmp_path / "cover.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0fake jpeg bytes")
    return path
