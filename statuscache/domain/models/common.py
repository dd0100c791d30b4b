"""Defines common Value Objects used across the server.

These objects represent simple values or concepts like cache codes and the
startup configuration, ensuring consistency and type safety.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import NewType

# === Core Value Objects ===

# A validated 3-digit code taken from the URL path, e.g. "404".
Code = NewType("Code", str)
RequestTarget = NewType("RequestTarget", str)  # Raw path plus optional "?query"

# === Storage Layout ===
CACHE_FILE_SUFFIX = ".jpeg"
IMAGE_CONTENT_TYPE = "image/jpeg"
TEXT_CONTENT_TYPE = "text/plain"
STREAM_CHUNK_SIZE = 64 * 1024

# === HTTP Methods ===
SUPPORTED_METHODS = ("GET", "PUT", "DELETE")


@dataclass(frozen=True)
class ServerConfig:
    """Immutable startup configuration, built once and passed to the server."""
    host: str
    port: int
    cache_dir: Path

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"
