"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- Seismic feed client (HTTP)
- Map renderer (tile fetching, image rendering)
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from quakemap.shell.feed_client import FeedClient
from quakemap.shell.map_renderer import MapImageResult, MapRenderer, StaticMapRenderer
from quakemap.shell.config_loader import load_config, Config

__all__ = [
    "FeedClient",
    "MapImageResult",
    "MapRenderer",
    "StaticMapRenderer",
    "load_config",
    "Config",
]
