"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

The Config model is defined in quakeview/core/config.py.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from quakeview.core.config import Config, DEFAULT_FEED_URLS, validate_config
from quakeview.core.event import TimeRange


logger = logging.getLogger(__name__)


ENV_PREFIX = "QUAKEVIEW_"


def _resolve_value(value: Any) -> Any:
    """Resolve a ${VAR} placeholder from the environment.

    Non-strings and plain strings are returned unchanged; unset variables
    leave the placeholder in place.
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


def _parse_feed_urls(data: dict[str, Any]) -> dict[TimeRange, str]:
    """Parse feed URLs, keeping defaults for ranges not given."""
    feed_urls = dict(DEFAULT_FEED_URLS)
    for key, url in data.items():
        feed_urls[TimeRange(key)] = _resolve_value(url)
    return feed_urls


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only env var expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object

    Raises:
        ValueError: If a time range key or numeric value is invalid, or
            validation reports an error
    """
    defaults = Config()

    config = Config(
        feed_urls=_parse_feed_urls(data.get("feed_urls") or {}),
        poll_interval_seconds=float(
            data.get("poll_interval_seconds", defaults.poll_interval_seconds)
        ),
        request_timeout_seconds=float(
            data.get("request_timeout_seconds", defaults.request_timeout_seconds)
        ),
        initial_time_range=TimeRange(
            data.get("initial_time_range", defaults.initial_time_range.value)
        ),
        fit_padding_px=int(data.get("fit_padding_px", defaults.fit_padding_px)),
        discard_stale_responses=_parse_bool(
            data.get("discard_stale_responses", defaults.discard_stale_responses)
        ),
        map_width=int(data.get("map_width", defaults.map_width)),
        map_height=int(data.get("map_height", defaults.map_height)),
        tile_url=_resolve_value(data.get("tile_url", defaults.tile_url)),
    )

    result = validate_config(config)
    for error in result.errors:
        if error.severity == "warning":
            logger.warning("Config %s: %s", error.field, error.message)
        else:
            logger.error("Config %s: %s", error.field, error.message)

    if not result.valid:
        fields = ", ".join(e.field for e in result.errors if e.severity != "warning")
        raise ValueError(f"Invalid configuration: {fields}")

    return config


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
        "Loaded config: poll every %ss, initial range %s",
        config.poll_interval_seconds,
        config.initial_time_range.value,
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Environment variables:
        QUAKEVIEW_POLL_INTERVAL_SECONDS: Refresh period
        QUAKEVIEW_REQUEST_TIMEOUT_SECONDS: Feed request timeout
        QUAKEVIEW_TIME_RANGE: Initial time range (day/week/month)
        QUAKEVIEW_FIT_PADDING_PX: Viewport padding
        QUAKEVIEW_DISCARD_STALE_RESPONSES: Apply only the newest response
        QUAKEVIEW_FEED_URL_DAY / _WEEK / _MONTH: Feed endpoint overrides
        QUAKEVIEW_TILE_URL: Tile URL template

    Returns:
        Config object from environment
    """
    data: dict[str, Any] = {}

    simple_keys = {
        "POLL_INTERVAL_SECONDS": "poll_interval_seconds",
        "REQUEST_TIMEOUT_SECONDS": "request_timeout_seconds",
        "TIME_RANGE": "initial_time_range",
        "FIT_PADDING_PX": "fit_padding_px",
        "DISCARD_STALE_RESPONSES": "discard_stale_responses",
        "TILE_URL": "tile_url",
    }
    for env_key, config_key in simple_keys.items():
        value = os.environ.get(ENV_PREFIX + env_key)
        if value:
            data[config_key] = value

    feed_urls = {}
    for time_range in TimeRange:
        value = os.environ.get(f"{ENV_PREFIX}FEED_URL_{time_range.value.upper()}")
        if value:
            feed_urls[time_range.value] = value
    if feed_urls:
        data["feed_urls"] = feed_urls

    return load_config_from_dict(data)
