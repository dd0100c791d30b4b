"""Main entry point for the statuscache server.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
creates the cache directory (Initializing) and hands over to uvicorn (Serving).
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from typing_extensions import Annotated

# --- Domain Layer ---
from statuscache.domain.interfaces.user_interface import UserInterface
from statuscache.domain.models.errors import StartupFailure

# --- Core Layer ---
from statuscache.core.handlers import CacheHandlers

# --- Infrastructure Layer ---
from statuscache.infrastructure.cli.display import ConsoleDisplay
from statuscache.infrastructure.config.settings import (
    DEFAULT_CONFIG_FILE,
    build_server_config,
    get_config,
    load_configuration,
)
from statuscache.infrastructure.filesystem.local_store import LocalFileStore
from statuscache.infrastructure.http.server import create_app, run_server
from statuscache.infrastructure.monitoring.logger_setup import (
    DEFAULT_LOG_FORMAT,
    resolve_log_level,
    setup_logging,
)

logger = logging.getLogger(__name__)


def create_dependencies(
    host: Optional[str],
    port: Optional[int],
    cache: Optional[Path],
    config_file: Path = DEFAULT_CONFIG_FILE,
    log_level: Optional[str] = None,
) -> Dict[str, Any]:
    """Creates and wires up all dependencies for the server.

    This acts as the Composition Root. The cache directory is created here,
    before anything is served.

    Raises:
        StartupFailure: If configuration is incomplete or the cache directory
            cannot be created.
    """
    # 1. Load Configuration First, then logging from it
    load_configuration(config_file=config_file)
    level = resolve_log_level(log_level or get_config('logging.level', 'INFO'))
    setup_logging(
        log_level=level,
        log_format=get_config('logging.format', DEFAULT_LOG_FORMAT),
        log_file=get_config('logging.file'),
    )
    config = build_server_config(host=host, port=port, cache=cache)

    # 2. Storage (Initializing state)
    store = LocalFileStore(config.cache_dir)
    asyncio.run(store.ensure_directory())

    # 3. Request handling
    handlers = CacheHandlers(store)
    asgi_app = create_app(config, store, handlers)

    logger.info("All dependencies initialized successfully.")
    return {
        'config': config,
        'store': store,
        'handlers': handlers,
        'asgi_app': asgi_app,
        'log_level': logging.getLevelName(level),
    }


# --- Typer App Definition ---
app = typer.Typer(
    name="statuscache",
    help="HTTP file cache serving status-code images from /XXX paths.",
    add_completion=False,
)


@app.command()
def serve(
    host: Annotated[Optional[str], typer.Option("--host", "-h", help="Server host.")] = None,
    port: Annotated[Optional[int], typer.Option("--port", "-p", help="Server port.")] = None,
    cache: Annotated[Optional[Path], typer.Option("--cache", "-c", help="Cache directory path.")] = None,
    config_file: Annotated[Path, typer.Option("--config", help="YAML configuration file.")] = DEFAULT_CONFIG_FILE,
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="Logging level (DEBUG, INFO, ...).")] = None,
):
    """Start the cache server."""
    ui: UserInterface = ConsoleDisplay()
    try:
        dependencies = create_dependencies(host, port, cache, config_file, log_level)
    except StartupFailure as e:
        logger.error(f"Startup failed: {e}")
        ui.display_error(str(e))
        raise typer.Exit(code=1)

    ui.display_startup_banner(dependencies['config'])
    run_server(dependencies['config'], dependencies['asgi_app'], log_level=dependencies['log_level'])


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
