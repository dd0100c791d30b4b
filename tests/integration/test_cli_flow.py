from pathlib import Path
from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

from statuscache.domain.models.common import ServerConfig
from statuscache.infrastructure.cli.display import ConsoleDisplay
from statuscache.main import app, create_dependencies

# These fixtures are defined in tests/conftest.py:
# runner: CliRunner
# isolated_config: clears STATUSCACHE_* variables (autouse)


@pytest.fixture
def mock_run_server(mocker):
    """Stops the command before uvicorn would start serving."""
    return mocker.patch("statuscache.main.run_server")


@pytest.fixture
def mock_console_display(mocker):
    mock = mocker.MagicMock(spec=ConsoleDisplay)
    mocker.patch("statuscache.main.ConsoleDisplay", return_value=mock)
    return mock


@pytest.fixture(autouse=True)
def quiet_logging(mocker, tmp_path: Path, monkeypatch):
    """Leaves the root logger alone and keeps stray .env files out of the run."""
    mocker.patch("statuscache.main.setup_logging")
    monkeypatch.chdir(tmp_path)
    mocker.patch("statuscache.infrastructure.config.settings.find_dotenv_path", return_value=None)


def test_serve_creates_cache_dir_and_starts(
    runner: CliRunner,
    tmp_path: Path,
    mock_run_server: MagicMock,
    mock_console_display: MagicMock,
):
    cache = tmp_path / "nested" / "cache"

    result = runner.invoke(app, [
        "-h", "127.0.0.1",
        "-p", "8081",
        "-c", str(cache),
        "--config", str(tmp_path / "absent.yaml"),
    ])

    assert result.exit_code == 0, result.output
    assert cache.is_dir()
    config = mock_run_server.call_args.args[0]
    assert config == ServerConfig(host="127.0.0.1", port=8081, cache_dir=cache)
    mock_console_display.display_startup_banner.assert_called_once_with(config)
    mock_console_display.display_error.assert_not_called()


def test_serve_reads_yaml_config(
    runner: CliRunner,
    tmp_path: Path,
    mock_run_server: MagicMock,
    mock_console_display: MagicMock,
):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(f"host: 0.0.0.0\nport: 9090\ncache: {tmp_path / 'yaml_cache'}\n")

    result = runner.invoke(app, ["--config", str(config_file), "--port", "9191"])

    assert result.exit_code == 0, result.output
    config = mock_run_server.call_args.args[0]
    assert config.host == "0.0.0.0"
    assert config.port == 9191
    assert (tmp_path / "yaml_cache").is_dir()


def test_uncreatable_cache_dir_exits_non_zero(
    runner: CliRunner,
    tmp_path: Path,
    mock_run_server: MagicMock,
    mock_console_display: MagicMock,
):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    result = runner.invoke(app, [
        "--host", "127.0.0.1",
        "--port", "8080",
        "--cache", str(blocker / "cache"),
        "--config", str(tmp_path / "absent.yaml"),
    ])

    assert result.exit_code == 1
    mock_run_server.assert_not_called()
    mock_console_display.display_error.assert_called_once()
    assert "Cannot create cache directory" in mock_console_display.display_error.call_args.args[0]


def test_missing_options_exit_non_zero(
    runner: CliRunner,
    tmp_path: Path,
    mock_run_server: MagicMock,
    mock_console_display: MagicMock,
):
    result = runner.invoke(app, ["--host", "127.0.0.1", "--config", str(tmp_path / "absent.yaml")])

    assert result.exit_code == 1
    mock_run_server.assert_not_called()
    message = mock_console_display.display_error.call_args.args[0]
    assert "port" in message and "cache" in message


def test_create_dependencies_wires_app(tmp_path: Path):
    dependencies = create_dependencies(
        host="localhost",
        port=8080,
        cache=tmp_path / "cache",
        config_file=tmp_path / "absent.yaml",
    )

    asgi_app = dependencies['asgi_app']
    assert asgi_app.state.handlers is dependencies['handlers']
    assert dependencies['store'].cache_dir == tmp_path / "cache"
    assert dependencies['log_level'] == "INFO"
