# ABOUTME: Settings and tuned thresholds for the Bookscout pipeline.
# ABOUTME: Reads API keys and toggles from the environment; thresholds are plain constants.

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_FLIBUSTA_BASE_URL = "https://flibusta.is"
DEFAULT_TIMEOUT = 20.0
DEFAULT_CACHE_SIZE = 256

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class Thresholds:
    """Empirically tuned gates for candidate acceptance and extraction confidence.

    None of these values has a documented derivation; they are kept in one
    place so a test corpus can tune them.
    """

    # Minimum candidate score when the guess carries an author / has none.
    min_score_with_author: int = 4
    min_score_without_author: int = 5
    # Text extractions below this confidence ask the user for more detail.
    ask_detail_below: float = 0.25
    # Confidence floors applied when the model's own query was replaced.
    fallback_floor_untitled: float = 0.35
    fallback_floor_titled: float = 0.55
    # Photo extractions below this confidence ask for a clearer photo.
    photo_min_confidence: float = 0.65

    def min_score(self, has_author: bool) -> int:
        return self.min_score_with_author if has_author else self.min_score_without_author


DEFAULT_THRESHOLDS = Thresholds()


@dataclass(frozen=True)
class RequestOptions:
    """Per-request toggles chosen by the presentation layer."""

    raw_mode: bool = False
    catalog_debug: bool = False


def parse_flag(value: str | None) -> bool:
    """Interpret an environment flag such as RAW_MODE=1."""
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


@dataclass
class Settings:
    """Process-wide configuration for external services and default toggles."""

    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    google_books_api_key: str | None = None
    flibusta_base_url: str = DEFAULT_FLIBUSTA_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    cache_size: int = DEFAULT_CACHE_SIZE
    raw_mode: bool = False
    catalog_debug: bool = False
    debug_errors: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Unset or blank variables fall back to the defaults. Numeric values
        that fail to parse raise ValueError so misconfiguration is loud.
        """
        env = os.environ if environ is None else environ

        def text(name: str) -> str | None:
            value = env.get(name, "").strip()
            return value or None

        timeout = text("BOOKSCOUT_TIMEOUT")
        cache_size = text("BOOKSCOUT_CACHE_SIZE")
        return cls(
            gemini_api_key=text("GEMINI_API_KEY"),
            gemini_model=text("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
            google_books_api_key=text("GOOGLE_BOOKS_API_KEY"),
            flibusta_base_url=text("FLIBUSTA_BASE_URL") or DEFAULT_FLIBUSTA_BASE_URL,
            timeout=float(timeout) if timeout else DEFAULT_TIMEOUT,
            cache_size=int(cache_size) if cache_size else DEFAULT_CACHE_SIZE,
            raw_mode=parse_flag(env.get("RAW_MODE")),
            catalog_debug=parse_flag(env.get("FLIBUSTA_DEBUG")),
            debug_errors=parse_flag(env.get("DEBUG_ERRORS")),
        )

    def request_options(self) -> RequestOptions:
        return RequestOptions(raw_mode=self.raw_mode, catalog_debug=self.catalog_debug)
