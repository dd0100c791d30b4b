"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a dedicated
YAML configuration file (e.g., ~/.statuscache/config.yaml). The result of
startup resolution is an immutable ``ServerConfig``.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv

# Domain Layer Imports
from statuscache.domain.models.common import ServerConfig
from statuscache.domain.models.errors import ConfigurationError

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".statuscache"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"
ENV_PREFIX = "STATUSCACHE_"

# --- Global Configuration Store (Simple Approach) ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}  # For testing purposes
_loaded = False


def _flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flattens nested YAML mappings into dotted keys ('logging.level')."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, prefix=f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


def load_configuration(
    config_file: Path = DEFAULT_CONFIG_FILE,
    env_file: Optional[Path] = None,
    reload: bool = False,
) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
        reload: Discard previously loaded values and load again.
    """
    global _config, _loaded
    if _loaded and not reload:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. Load from YAML file (Lowest priority)
    config_file = Path(config_file).expanduser()
    if config_file.is_file():
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load config file {config_file}: {e}") from e
        if isinstance(yaml_config, dict):
            _config.update(_flatten(yaml_config))
            logger.info(f"Loaded configuration from YAML: {config_file}")
        elif yaml_config is not None:
            logger.warning(f"YAML config file {config_file} did not contain a mapping.")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. Load from .env file (Medium priority)
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        # override=False: real environment variables take precedence
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug(".env file not found at or above current directory.")

    # 3. Environment Variables (Highest priority) are handled in get_config

    _loaded = True
    logger.debug("Configuration loading process completed.")


def env_var_for(key: str) -> str:
    """Returns the environment variable name for a dotted config key."""
    return f"{ENV_PREFIX}{key.upper().replace('.', '_')}"


def _coerce(value: str) -> Union[bool, int, str]:
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    try:
        return int(value)
    except ValueError:
        return value


def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by key.

    Priority:
    1. Test configuration (if in testing mode)
    2. Environment variable (STATUSCACHE_<KEY>)
    3. YAML config
    4. Default value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = env_var_for(key)
    if env_key in os.environ:
        return _coerce(os.environ[env_key])

    if key in _config:
        return _config[key]

    logger.debug(f"Config key '{key}' not found in environment or loaded config. Returning default: {default}")
    return default


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


def _parse_port(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid port: {value!r}")
    try:
        port = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid port: {value!r}") from e
    if not 1 <= port <= 65535:
        raise ConfigurationError(f"Port out of range (1-65535): {port}")
    return port


def build_server_config(
    host: Optional[str] = None,
    port: Optional[int] = None,
    cache: Optional[Union[str, Path]] = None,
) -> ServerConfig:
    """Resolves host, port and cache directory into a ``ServerConfig``.

    Explicit arguments win over loaded configuration. All three values are
    required.

    Raises:
        ConfigurationError: If a value is missing or invalid.
    """
    host = host if host is not None else get_config("host")
    port = port if port is not None else get_config("port")
    cache = cache if cache is not None else get_config("cache")

    missing = [name for name, value in (("host", host), ("port", port), ("cache", cache)) if value in (None, "")]
    if missing:
        raise ConfigurationError(f"Missing required option(s): {', '.join(missing)}")

    config = ServerConfig(
        host=str(host),
        port=_parse_port(port),
        cache_dir=Path(str(cache)).expanduser(),
    )
    logger.debug(f"Resolved server configuration: {config}")
    return config


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")


def clear_test_config() -> None:
    """Clear all testing configuration values and forget loaded state."""
    global _config, _loaded
    _test_config.clear()
    _config = {}
    _loaded = False
    logger.debug("Cleared testing configuration")
