"""Exceptions raised by the i18n catalog engine."""

from typing import Optional


class I18nError(Exception):
    """Base class for catalog engine errors."""


class MalformedCatalog(I18nError):
    """Raised when a catalog document does not have the expected shape."""

    def __init__(self, message: str, table: Optional[str] = None):
        super().__init__(message)
        self.table = table


class TransportFailure(I18nError):
    """Raised when the transport could not evaluate any catalog file."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class CacheIOFailure(I18nError):
    """Raised by cache stores when reading or writing persisted data fails."""
