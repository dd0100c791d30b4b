import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from typer.testing import CliRunner

from statuscache.domain.models.common import ServerConfig
from statuscache.infrastructure.config.settings import ENV_PREFIX, clear_test_config
from statuscache.infrastructure.filesystem.local_store import LocalFileStore
from statuscache.infrastructure.http.server import create_app


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keeps real STATUSCACHE_* variables and earlier loads out of each test."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)
    clear_test_config()
    yield
    clear_test_config()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """An existing, empty cache directory."""
    path = tmp_path / "cache"
    path.mkdir()
    return path


@pytest.fixture
def server_config(cache_dir: Path) -> ServerConfig:
    return ServerConfig(host="127.0.0.1", port=8080, cache_dir=cache_dir)


@pytest.fixture
def store(cache_dir: Path) -> LocalFileStore:
    return LocalFileStore(cache_dir)


@pytest.fixture
def client(server_config: ServerConfig, store: LocalFileStore) -> TestClient:
    """HTTP client bound to an app backed by a real on-disk store."""
    return TestClient(create_app(server_config, store))
