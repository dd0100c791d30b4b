"""GET/PUT/DELETE orchestration over the entry store.

Handlers never raise for per-request failures: every store error is turned
into a ``CacheResponse`` with a status code and a short plain-text body.
System error details go to the log only.
"""

import logging
from dataclasses import dataclass, field
from typing import AsyncIterable, AsyncIterator, Dict, Optional

# Domain Layer Imports
from statuscache.domain.interfaces.store import EntryStore, EntryStream
from statuscache.domain.models.common import IMAGE_CONTENT_TYPE, TEXT_CONTENT_TYPE, Code
from statuscache.domain.models.errors import BadRequest, EntryNotFound, StorageError

# Core Imports
from statuscache.core.router import RouteKind, resolve

logger = logging.getLogger(__name__)

INVALID_URL_MESSAGE = "Invalid URL format. Use /XXX where XXX is a 3-digit HTTP code."
METHOD_NOT_ALLOWED_MESSAGE = "Method Not Allowed"
EMPTY_BODY_MESSAGE = "Bad Request: Image body is empty."
INTERNAL_ERROR_MESSAGE = "Internal Server Error."


@dataclass
class CacheResponse:
    """Transport-neutral response produced by the handlers.

    Exactly one of ``body`` or ``stream`` carries the payload.
    """
    status: int
    body: bytes = b""
    content_type: str = TEXT_CONTENT_TYPE
    headers: Dict[str, str] = field(default_factory=dict)
    stream: Optional[AsyncIterator[bytes]] = None


def text_response(status: int, message: str) -> CacheResponse:
    return CacheResponse(status=status, body=message.encode("utf-8"))


class CacheHandlers:
    """Serves cache requests against an EntryStore."""

    def __init__(self, store: EntryStore):
        self.store = store

    async def dispatch(
        self,
        method: str,
        target: str,
        body: Optional[AsyncIterable[bytes]] = None,
    ) -> CacheResponse:
        """Routes one request and runs its handler.

        Args:
            method: HTTP method as received.
            target: Raw request path, including ``?query`` if one was sent.
            body: Request body chunks; only consumed for PUT.

        Returns:
            The response to send. Never raises for request-level failures.
        """
        route = resolve(method, target)
        if route.kind is RouteKind.INVALID_PATH:
            logger.debug(f"Rejected request target: {method} {target}")
            return text_response(404, INVALID_URL_MESSAGE)

        logger.info(f"Request: {method} {target}")
        if route.kind is RouteKind.METHOD_NOT_ALLOWED:
            return text_response(405, METHOD_NOT_ALLOWED_MESSAGE)

        try:
            if route.method == "GET":
                return await self.handle_get(route.code)
            if route.method == "PUT":
                return await self.handle_put(route.code, body)
            return await self.handle_delete(route.code)
        except Exception as e:
            logger.error(f"[{route.method} {route.code}] Unhandled error: {e}", exc_info=True)
            return text_response(500, INTERNAL_ERROR_MESSAGE)

    async def handle_get(self, code: Code) -> CacheResponse:
        try:
            entry = await self.store.read(code)
        except EntryNotFound:
            logger.info(f"[GET {code}] Image not found (404 Not Found).")
            return text_response(404, f"Not Found: Image for code {code} not in cache.")
        except StorageError as e:
            logger.error(f"[GET {code}] Error reading from cache: {e}")
            return text_response(500, "Internal Server Error while reading from cache.")

        # Headers are not committed until the first chunk has been read
        try:
            first_chunk = await entry.read_chunk()
        except StorageError as e:
            await entry.aclose()
            logger.error(f"[GET {code}] Stream error: {e}")
            return text_response(500, "Internal Server Error during file streaming.")

        logger.info(f"[GET {code}] Image served from cache (200 OK).")
        return CacheResponse(
            status=200,
            content_type=IMAGE_CONTENT_TYPE,
            headers={"X-Cache": "HIT"},
            stream=self._stream_entry(code, entry, first_chunk),
        )

    async def _stream_entry(self, code: Code, entry: EntryStream, first_chunk: bytes) -> AsyncIterator[bytes]:
        """Yields the entry body; a read failure after headers just ends the body."""
        try:
            if not first_chunk:
                return
            yield first_chunk
            async for chunk in entry:
                yield chunk
        except StorageError as e:
            logger.error(f"[GET {code}] Stream error: {e}")
        finally:
            await entry.aclose()

    async def handle_put(self, code: Code, body: Optional[AsyncIterable[bytes]]) -> CacheResponse:
        try:
            image = await self._read_body(body)
        except StorageError as e:
            logger.error(f"[PUT {code}] {e}")
            return text_response(500, INTERNAL_ERROR_MESSAGE)
        except BadRequest:
            logger.warning(f"[PUT {code}] Rejected empty body (400 Bad Request).")
            return text_response(400, EMPTY_BODY_MESSAGE)

        try:
            await self.store.write(code, image)
        except StorageError as e:
            logger.error(f"[PUT {code}] Error saving file: {e}")
            return text_response(500, "Internal Server Error while saving file.")

        logger.info(f"[PUT {code}] Image saved/replaced (201 Created).")
        return text_response(201, f"Created: Image for code {code} saved/replaced in cache.")

    async def _read_body(self, body: Optional[AsyncIterable[bytes]]) -> bytes:
        """Buffers the whole request body so a broken upload never reaches storage."""
        chunks = []
        try:
            if body is not None:
                async for chunk in body:
                    chunks.append(chunk)
        except Exception as e:
            raise StorageError(f"Error reading request body: {e}") from e

        image = b"".join(chunks)
        if not image:
            raise BadRequest("Image body is empty")
        return image

    async def handle_delete(self, code: Code) -> CacheResponse:
        try:
            await self.store.delete(code)
        except EntryNotFound:
            logger.info(f"[DELETE {code}] Image not found (404 Not Found).")
            return text_response(404, "Not Found: Image not in cache.")
        except StorageError as e:
            logger.error(f"[DELETE {code}] Error deleting file: {e}")
            return text_response(500, "Internal Server Error while deleting file.")

        logger.info(f"[DELETE {code}] Image deleted (200 OK).")
        return text_response(200, f"OK: Image for code {code} deleted from cache.")
