"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

The Config model is defined in quakemap/core/config.py so the core never
depends on the shell.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from quakemap.core.config import Config, DEFAULT_FEED_BASE_URL, DEFAULT_TILE_URL
from quakemap.core.event import TimeWindow


logger = logging.getLogger(__name__)


def _resolve_value(value: Any) -> Any:
    """Resolve a ${VAR} environment placeholder.

    Non-string values and plain strings are returned unchanged. An unset
    variable leaves the placeholder in place.

    Args:
        value: Value to resolve

    Returns:
        Resolved value
    """
    if not isinstance(value, str):
        return value

    if value.startswith("${") and value.endswith("}"):
        var_name = value[2:-1]
        env_value = os.environ.get(var_name)
        if env_value:
            return env_value
        logger.warning("Environment variable %s not set", var_name)

    return value


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only env var expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object

    Raises:
        ValueError: If a value has the wrong type or an unknown window
    """
    data = {key: _resolve_value(value) for key, value in data.items()}

    map_data = data.get("map") or {}
    map_data = {key: _resolve_value(value) for key, value in map_data.items()}
    center = map_data.get("center") or {}

    return Config(
        feed_base_url=data.get("feed_base_url", DEFAULT_FEED_BASE_URL),
        default_window=TimeWindow.parse(data.get("default_window", TimeWindow.DAY)),
        request_timeout_seconds=_optional_float(data.get("request_timeout_seconds")),
        max_workers=int(data.get("max_workers", 4)),
        display_timezone=data.get("display_timezone") or None,
        tile_url=map_data.get("tile_url", DEFAULT_TILE_URL),
        map_width=int(map_data.get("width", 1024)),
        map_height=int(map_data.get("height", 512)),
        map_center_latitude=float(center.get("latitude", 20.0)),
        map_center_longitude=float(center.get("longitude", 0.0)),
        map_zoom=int(map_data.get("zoom", 2)),
    )


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", "config/config.yaml")

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return Config()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    config = load_config_from_dict(data)

    logger.info(
        "Loaded config: feed %s, default window %s",
        config.feed_base_url,
        config.default_window.value,
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Useful for simple deployments without a YAML file.

    Environment variables:
        FEED_BASE_URL: Base URL of the summary feeds
        DEFAULT_WINDOW: hour, day or week
        DISPLAY_TIMEZONE: IANA timezone for marker times
        REQUEST_TIMEOUT: Transport timeout in seconds
        MAX_WORKERS: Fetch thread pool size

    Returns:
        Config object from environment
    """
    return Config(
        feed_base_url=os.environ.get("FEED_BASE_URL", DEFAULT_FEED_BASE_URL),
        default_window=TimeWindow.parse(os.environ.get("DEFAULT_WINDOW", "day")),
        request_timeout_seconds=_optional_float(os.environ.get("REQUEST_TIMEOUT")),
        max_workers=int(os.environ.get("MAX_WORKERS", "4")),
        display_timezone=os.environ.get("DISPLAY_TIMEZONE") or None,
    )
