from __future__ import annotations


class TrendtagsError(Exception):
    """Base class for errors raised by the recommendation core and its store."""


class InvalidTextError(TrendtagsError, ValueError):
    """Input text is missing or too short to extract keywords from."""

    def __init__(self, message: str = "Provide text") -> None:
        super().__init__(message)
        self.message = message


class TrendStoreError(TrendtagsError):
    """The trend snapshot store could not be read or written."""
