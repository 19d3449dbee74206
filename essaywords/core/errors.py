from __future__ import annotations

from typing import Optional


class EssayWordsError(Exception):
    """Base error for the essaywords pipeline. Always fatal for a run."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(EssayWordsError):
    """Invalid run settings."""


class DictionaryLoadError(EssayWordsError):
    """Word list could not be fetched or read."""


class EssayListError(EssayWordsError):
    """Essay URL file could not be read."""


class _EssayError(EssayWordsError):
    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class EssayFetchError(_EssayError):
    """Network failure or non-2xx response for one essay."""


class DocumentParseError(_EssayError):
    """Essay HTML could not be parsed."""


class StructuredDataError(_EssayError):
    """The ld+json block is not valid JSON."""


class FetchAborted(_EssayError):
    """Raised by a sibling task after the run was aborted by another failure."""


__all__ = [
    "EssayWordsError",
    "ConfigError",
    "DictionaryLoadError",
    "EssayListError",
    "EssayFetchError",
    "DocumentParseError",
    "StructuredDataError",
    "FetchAborted",
]
