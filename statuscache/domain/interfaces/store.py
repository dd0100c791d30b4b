"""Interface for the entry store backing the cache.

Defines the contract for mapping a code to its backing file and reading,
writing and deleting it. The directory itself is the index: implementations
must not keep any in-memory copy of entries between requests.
"""

import abc
from pathlib import Path
from typing import AsyncIterator

# Import relevant domain models
from statuscache.domain.models.common import Code


class EntryStream(abc.ABC):
    """An opened cache entry, consumed as an async iterator of byte chunks."""

    @abc.abstractmethod
    def __aiter__(self) -> AsyncIterator[bytes]:
        pass

    @abc.abstractmethod
    async def read_chunk(self) -> bytes:
        """Reads the next chunk; returns b"" at end of entry.

        Raises:
            StorageError: If the underlying read fails.
        """
        pass

    @abc.abstractmethod
    async def aclose(self) -> None:
        """Releases the underlying file handle. Safe to call more than once."""
        pass


class EntryStore(abc.ABC):
    """Abstract Base Class for cache entry storage."""

    @abc.abstractmethod
    def path_for(self, code: Code) -> Path:
        """Returns the path backing the given code (pure, no I/O)."""
        pass

    @abc.abstractmethod
    async def ensure_directory(self) -> None:
        """Creates the cache directory if needed.

        Raises:
            StartupFailure: If the directory cannot be created.
        """
        pass

    @abc.abstractmethod
    async def read(self, code: Code) -> EntryStream:
        """Opens the entry for streaming read.

        Raises:
            EntryNotFound: If there is no entry for the code.
            StorageError: For any other filesystem error.
        """
        pass

    @abc.abstractmethod
    async def write(self, code: Code, data: bytes) -> None:
        """Replaces the entry contents with ``data``.

        Readers see either the previous contents or the new ones, never a mix.

        Raises:
            StorageError: If the underlying storage fails.
        """
        pass

    @abc.abstractmethod
    async def delete(self, code: Code) -> None:
        """Removes the entry.

        Raises:
            EntryNotFound: If there is no entry for the code.
            StorageError: For any other filesystem error.
        """
        pass
