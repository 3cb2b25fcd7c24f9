"""Functional Core - Pure functions with no side effects.

This module contains all feed and presentation logic as pure functions:
- Feed record normalization
- Magnitude classification
- Marker and view building
- Configuration models and validation

All functions here are deterministic and have no I/O.
"""

from quakemap.core.errors import FetchError, MalformedFeedError
from quakemap.core.event import NormalizationResult, SeismicEvent, TimeWindow, normalize
from quakemap.core.classifier import Classification, MagnitudeTier, classify, legend_entries
from quakemap.core.markers import MapView, MarkerSpec, build_markers, build_view

__all__ = [
    # Errors
    "FetchError",
    "MalformedFeedError",
    # Events
    "NormalizationResult",
    "SeismicEvent",
    "TimeWindow",
    "normalize",
    # Classification
    "Classification",
    "MagnitudeTier",
    "classify",
    "legend_entries",
    # Markers
    "MapView",
    "MarkerSpec",
    "build_markers",
    "build_view",
]
