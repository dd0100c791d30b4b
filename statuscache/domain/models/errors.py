"""Error taxonomy for the cache server.

Per-request errors (``EntryNotFound``, ``BadRequest``, ``StorageError``) are
converted to HTTP responses at the handler boundary. ``StartupFailure`` and
``ConfigurationError`` are fatal and stop the process before it serves.
"""

from typing import Optional


class CacheError(Exception):
    """Base class for all cache server errors."""


class EntryNotFound(CacheError):
    """No cache entry exists for the requested code."""

    def __init__(self, code: str, message: Optional[str] = None):
        self.code = code
        super().__init__(message or f"No cache entry for code {code}")


class BadRequest(CacheError):
    """The request cannot be served as sent (e.g. an empty PUT body)."""


class StorageError(CacheError):
    """Unexpected filesystem or stream failure."""


class StartupFailure(CacheError):
    """The server cannot start (e.g. the cache directory cannot be created)."""


class ConfigurationError(StartupFailure):
    """A required startup parameter is missing or invalid."""
