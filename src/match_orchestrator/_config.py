# Area: Shared
"""
match_orchestrator._config — Service configuration
==================================================

Config is a plain dict built from defaults, an optional JSON file, and
environment variables (a .env file in the working directory is loaded
first). Later sources win.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ._shared.logging_config import LOG_LEVELS
from .errors import ConfigError

logger = logging.getLogger("match_orchestrator")

DEFAULT_CONFIG: Dict[str, Any] = {
    "host": "127.0.0.1",
    "port": 4004,
    "region": "local",
    "log_file": "match_orchestrator.log",
    "log_level": "INFO",
    "matchmaking_interval_seconds": 0,
    "enable_cors": True,
}

# env var -> config key
ENV_MAPPINGS = {
    "ORCHESTRATOR_HOST": "host",
    "PORT": "port",
    "REGION": "region",
    "LOG_FILE": "log_file",
    "LOG_LEVEL": "log_level",
    "MATCHMAKING_INTERVAL_SECONDS": "matchmaking_interval_seconds",
    "ENABLE_CORS": "enable_cors",
}

INT_KEYS = {"port"}
FLOAT_KEYS = {"matchmaking_interval_seconds"}
BOOL_KEYS = {"enable_cors"}


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "on")


def _coerce(key: str, raw: str) -> Any:
    try:
        if key in INT_KEYS:
            return int(raw)
        if key in FLOAT_KEYS:
            return float(raw)
    except ValueError:
        raise ConfigError(f"Invalid value for {key}: {raw!r}") from None
    if key in BOOL_KEYS:
        return _parse_bool(raw)
    return raw


def load_config(
    config_path: Optional[str] = None,
    environ: Optional[Dict[str, str]] = None,
    use_dotenv: bool = True,
) -> Dict[str, Any]:
    """
    Load config from defaults, a JSON file, then the environment.

    Args:
        config_path: Optional path to a JSON config file
        environ: Environment mapping (os.environ by default)
        use_dotenv: Load a .env file before reading the environment

    Raises:
        ConfigError: If the file is not valid JSON or a value cannot be parsed
    """
    if use_dotenv and environ is None:
        load_dotenv()
    env = os.environ if environ is None else environ

    config: Dict[str, Any] = dict(DEFAULT_CONFIG)

    if config_path:
        path = Path(config_path)
        if path.exists():
            try:
                with open(path, encoding="utf-8") as f:
                    config.update(json.load(f))
            except json.JSONDecodeError as e:
                raise ConfigError(f"Config file {path} is not valid JSON: {e}") from e
        else:
            logger.warning(f"Config file not found: {path}")

    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key in env:
            config[config_key] = _coerce(config_key, env[env_key])

    return config


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate a loaded config.

    Raises:
        ConfigError: If the port, interval, or log level is unusable
    """
    port = config.get("port")
    if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
        raise ConfigError(f"port must be an integer in 1..65535, got {port!r}")

    interval = config.get("matchmaking_interval_seconds", 0)
    if isinstance(interval, bool) or not isinstance(interval, (int, float)) or interval < 0:
        raise ConfigError(
            f"matchmaking_interval_seconds must be a non-negative number, got {interval!r}"
        )

    level = config.get("log_level", "INFO")
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        raise ConfigError(f"Unknown log level: {level!r}")
