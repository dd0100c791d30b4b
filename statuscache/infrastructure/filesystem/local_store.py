"""Concrete implementation of the EntryStore interface on the local disk.

Each code maps to exactly one file, ``<cache_dir>/<code>.jpeg``. Uses
`aiofiles` so file I/O runs off the event loop and never stalls other requests.
No locking is done between concurrent operations on the same code: the last
filesystem operation to complete wins.
"""

import logging
import uuid
from pathlib import Path
from typing import AsyncIterator

import aiofiles
import aiofiles.os

# Domain Layer Imports
from statuscache.domain.interfaces.store import EntryStore, EntryStream
from statuscache.domain.models.common import CACHE_FILE_SUFFIX, STREAM_CHUNK_SIZE, Code
from statuscache.domain.models.errors import EntryNotFound, StartupFailure, StorageError

logger = logging.getLogger(__name__)


class LocalEntryStream(EntryStream):
    """Streams an already-opened cache file in fixed-size chunks."""

    def __init__(self, handle, path: Path, chunk_size: int = STREAM_CHUNK_SIZE):
        self._handle = handle
        self._path = path
        self._chunk_size = chunk_size
        self._closed = False

    async def __aiter__(self) -> AsyncIterator[bytes]:
        try:
            while True:
                chunk = await self.read_chunk()
                if not chunk:
                    break
                yield chunk
        finally:
            await self.aclose()

    async def read_chunk(self) -> bytes:
        if self._closed:
            return b""
        try:
            return await self._handle.read(self._chunk_size)
        except OSError as e:
            raise StorageError(f"Failed to read {self._path}: {e}") from e

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._handle.close()
        except OSError as e:
            logger.warning(f"Error closing {self._path}: {e}")


class LocalFileStore(EntryStore):
    """Implementation of EntryStore backed by one file per code."""

    def __init__(self, cache_dir: Path, chunk_size: int = STREAM_CHUNK_SIZE):
        """Initializes the store for ``cache_dir``. Does not touch the disk."""
        self.cache_dir = Path(cache_dir)
        self.chunk_size = chunk_size
        logger.debug(f"LocalFileStore initialized for {self.cache_dir}")

    def path_for(self, code: Code) -> Path:
        return self.cache_dir / f"{code}{CACHE_FILE_SUFFIX}"

    async def ensure_directory(self) -> None:
        try:
            await aiofiles.os.makedirs(self.cache_dir, exist_ok=True)
        except OSError as e:
            logger.error(f"error creating cache directory: {e}")
            raise StartupFailure(f"Cannot create cache directory '{self.cache_dir}': {e}") from e
        logger.info(f"cache directory '{self.cache_dir}' created")

    async def read(self, code: Code) -> EntryStream:
        path = self.path_for(code)
        logger.debug(f"Opening cache entry: {path}")
        try:
            handle = await aiofiles.open(path, mode="rb")
        except FileNotFoundError as e:
            raise EntryNotFound(code) from e
        except OSError as e:
            raise StorageError(f"Failed to open {path}: {e}") from e
        return LocalEntryStream(handle, path, self.chunk_size)

    async def write(self, code: Code, data: bytes) -> None:
        path = self.path_for(code)
        # Write next to the target so the final rename stays on one filesystem
        tmp_path = self.cache_dir / f".{path.name}.{uuid.uuid4().hex}.tmp"
        logger.debug(f"Writing {len(data)} bytes to {path} via {tmp_path.name}")
        try:
            async with aiofiles.open(tmp_path, mode="wb") as f:
                await f.write(data)
            await aiofiles.os.replace(tmp_path, path)
        except OSError as e:
            await self._discard(tmp_path)
            raise StorageError(f"Failed to write {path}: {e}") from e

    async def delete(self, code: Code) -> None:
        path = self.path_for(code)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError as e:
            raise EntryNotFound(code) from e
        except OSError as e:
            raise StorageError(f"Failed to delete {path}: {e}") from e

    async def _discard(self, tmp_path: Path) -> None:
        """Removes a leftover temporary file after a failed write."""
        try:
            await aiofiles.os.remove(tmp_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove temporary file {tmp_path}: {e}")
