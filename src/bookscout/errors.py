# ABOUTME: Exception hierarchy shared across Bookscout services and the CLI.
# ABOUTME: UserFacingError messages are shown verbatim; everything else is a generic failure.


class BookscoutError(Exception):
    """Base class for Bookscout errors."""


class UserFacingError(BookscoutError):
    """An error whose message is safe and meaningful to show to the user as-is."""


class ConfigurationError(BookscoutError):
    """Raised when a required setting (such as an API key) is missing."""


class ExtractionServiceError(BookscoutError):
    """Raised when the extraction model endpoint cannot be reached or rejects a call."""
