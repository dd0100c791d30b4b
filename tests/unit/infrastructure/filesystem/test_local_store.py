import asyncio
import os
from pathlib import Path

import pytest

from statuscache.domain.models.common import Code
from statuscache.domain.models.errors import EntryNotFound, StartupFailure, StorageError
from statuscache.infrastructure.filesystem.local_store import LocalFileStore


async def _read_all(store: LocalFileStore, code: Code) -> bytes:
    entry = await store.read(code)
    return b"".join([chunk async for chunk in entry])


def test_path_for_maps_code_to_jpeg(store: LocalFileStore, cache_dir: Path):
    assert store.path_for(Code("404")) == cache_dir / "404.jpeg"


def test_write_then_read(store: LocalFileStore, cache_dir: Path):
    async def scenario():
        await store.write(Code("200"), b"\xff\xd8image\xff\xd9")
        return await _read_all(store, Code("200"))

    assert asyncio.run(scenario()) == b"\xff\xd8image\xff\xd9"
    assert (cache_dir / "200.jpeg").read_bytes() == b"\xff\xd8image\xff\xd9"


def test_write_replaces_existing_entry(store: LocalFileStore, cache_dir: Path):
    (cache_dir / "301.jpeg").write_bytes(b"old contents that are longer")

    asyncio.run(store.write(Code("301"), b"new"))

    assert (cache_dir / "301.jpeg").read_bytes() == b"new"


def test_write_leaves_no_temporary_files(store: LocalFileStore, cache_dir: Path):
    asyncio.run(store.write(Code("302"), b"data"))

    assert sorted(os.listdir(cache_dir)) == ["302.jpeg"]


def test_read_streams_in_chunks(cache_dir: Path):
    store = LocalFileStore(cache_dir, chunk_size=4)
    (cache_dir / "206.jpeg").write_bytes(b"0123456789")

    async def scenario():
        entry = await store.read(Code("206"))
        return [chunk async for chunk in entry]

    assert asyncio.run(scenario()) == [b"0123", b"4567", b"89"]


def test_read_missing_entry(store: LocalFileStore):
    with pytest.raises(EntryNotFound) as exc_info:
        asyncio.run(store.read(Code("404")))
    assert exc_info.value.code == "404"


def test_read_directory_in_place_of_entry_is_storage_error(store: LocalFileStore, cache_dir: Path):
    (cache_dir / "500.jpeg").mkdir()

    with pytest.raises(StorageError):
        asyncio.run(store.read(Code("500")))


def test_write_failure_raises_storage_error(store: LocalFileStore, cache_dir: Path):
    # A directory at the target path makes the final rename fail
    (cache_dir / "507.jpeg").mkdir()
    (cache_dir / "507.jpeg" / "keep").write_bytes(b"x")

    with pytest.raises(StorageError):
        asyncio.run(store.write(Code("507"), b"data"))
    assert sorted(os.listdir(cache_dir)) == ["507.jpeg"]


def test_delete_removes_entry(store: LocalFileStore, cache_dir: Path):
    (cache_dir / "410.jpeg").write_bytes(b"gone")

    asyncio.run(store.delete(Code("410")))

    assert not (cache_dir / "410.jpeg").exists()


def test_delete_missing_entry(store: LocalFileStore):
    with pytest.raises(EntryNotFound):
        asyncio.run(store.delete(Code("410")))


def test_delete_directory_is_storage_error(store: LocalFileStore, cache_dir: Path):
    (cache_dir / "423.jpeg").mkdir()

    with pytest.raises(StorageError):
        asyncio.run(store.delete(Code("423")))


def test_ensure_directory_creates_parents(tmp_path: Path):
    store = LocalFileStore(tmp_path / "a" / "b" / "cache")

    asyncio.run(store.ensure_directory())

    assert (tmp_path / "a" / "b" / "cache").is_dir()


def test_ensure_directory_existing_is_ok(store: LocalFileStore, cache_dir: Path):
    asyncio.run(store.ensure_directory())
    assert cache_dir.is_dir()


def test_ensure_directory_failure_is_startup_failure(tmp_path: Path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("file")
    store = LocalFileStore(blocker / "cache")

    with pytest.raises(StartupFailure):
        asyncio.run(store.ensure_directory())
