"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- USGS feed client (HTTP)
- Static map renderer (tile fetching, image rendering)
- Configuration loading (environment/files)

Keep this layer thin and simple. All display logic should be in core.
"""

from quakeview.shell.feed_client import FeedClient
from quakeview.shell.map_renderer import StaticMapRenderer, MapImageResult
from quakeview.shell.config_loader import load_config, load_config_from_env

__all__ = [
    "FeedClient",
    "StaticMapRenderer",
    "MapImageResult",
    "load_config",
    "load_config_from_env",
]
