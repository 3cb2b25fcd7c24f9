"""Seismic event model and feed normalization - Pure functions.

This module turns raw USGS GeoJSON feature records into typed SeismicEvent
objects. All functions are pure with no side effects.
"""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from quakemap.core.errors import MalformedFeedError


class TimeWindow(str, Enum):
    """Selectable recency window; the value is the feed key."""
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"

    @classmethod
    def parse(cls, value: "str | TimeWindow") -> "TimeWindow":
        """Parse a window key such as "day" (case-insensitive).

        Raises:
            ValueError: If the key is not one of hour/day/week
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(w.value for w in cls)
            raise ValueError(f"Unknown time window {value!r} (expected one of: {valid})") from None


@dataclass(frozen=True)
class SeismicEvent:
    """Immutable seismic event.

    Attributes:
        id: Feed event ID, unique within a fetch batch
        place: Human-readable location, None if the feed omits it
        magnitude: Event magnitude, None if absent or non-numeric
        timestamp: Event instant (timezone-aware, UTC)
        latitude: Epicenter latitude
        longitude: Epicenter longitude
        depth_km: Depth in kilometers (optional)
        url: Feed event detail URL (optional)
    """
    id: str
    place: str | None
    magnitude: float | None
    timestamp: datetime
    latitude: float
    longitude: float
    depth_km: float | None = None
    url: str | None = None

    @property
    def coordinates(self) -> tuple[float, float]:
        """Return (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class NormalizationResult:
    """Outcome of normalizing one feed payload.

    Attributes:
        events: Valid events, in feed order
        skipped: Number of records that were dropped
    """
    events: tuple[SeismicEvent, ...]
    skipped: int


def _as_number(value: Any) -> float | None:
    """Coerce a JSON number to float, rejecting bools, strings and NaN/inf."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    if not math.isfinite(number):
        return None
    return number


def _parse_id(feature: Mapping[str, Any]) -> str | None:
    event_id = feature.get("id")
    if isinstance(event_id, bool) or not isinstance(event_id, (str, int)):
        return None
    event_id = str(event_id).strip()
    return event_id or None


def _parse_place(props: Mapping[str, Any]) -> str | None:
    place = props.get("place")
    if not isinstance(place, str) or not place.strip():
        return None
    return place


def _parse_time(props: Mapping[str, Any]) -> datetime | None:
    # USGS uses milliseconds since epoch
    time_ms = _as_number(props.get("time"))
    if time_ms is None:
        return None
    try:
        return datetime.fromtimestamp(time_ms / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _parse_coordinates(geometry: Mapping[str, Any]) -> tuple[float, float, float | None] | None:
    """Return (latitude, longitude, depth) from a [lon, lat, depth?] array."""
    coords = geometry.get("coordinates")
    if not isinstance(coords, (list, tuple)) or len(coords) < 2:
        return None

    longitude = _as_number(coords[0])
    latitude = _as_number(coords[1])
    if latitude is None or longitude is None:
        return None
    if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
        return None

    depth = _as_number(coords[2]) if len(coords) > 2 else None
    return latitude, longitude, depth


def parse_event(feature: Any) -> SeismicEvent | None:
    """Parse a single GeoJSON feature into a SeismicEvent.

    Pure function: returns None when the record is unusable (no id, no
    valid coordinates or no valid time). Missing place or magnitude is
    tolerated and stored as None.

    Args:
        feature: GeoJSON feature dict from the feed

    Returns:
        SeismicEvent or None if the record must be skipped
    """
    if not isinstance(feature, Mapping):
        return None

    event_id = _parse_id(feature)
    if event_id is None:
        return None

    props = feature.get("properties")
    if not isinstance(props, Mapping):
        props = {}
    geometry = feature.get("geometry")
    if not isinstance(geometry, Mapping):
        return None

    position = _parse_coordinates(geometry)
    if position is None:
        return None
    latitude, longitude, depth = position

    timestamp = _parse_time(props)
    if timestamp is None:
        return None

    url = props.get("url")

    return SeismicEvent(
        id=event_id,
        place=_parse_place(props),
        magnitude=_as_number(props.get("mag")),
        timestamp=timestamp,
        latitude=latitude,
        longitude=longitude,
        depth_km=depth,
        url=url if isinstance(url, str) and url else None,
    )


def normalize(raw_features: Any) -> NormalizationResult:
    """Normalize a sequence of raw feature records.

    Pure function. Bad records are dropped and counted, never raised;
    the first occurrence of a repeated id wins.

    Args:
        raw_features: The feed's list of feature records

    Returns:
        NormalizationResult with events in feed order and the skip count

    Raises:
        MalformedFeedError: If raw_features is not a sequence of records
    """
    if (
        raw_features is None
        or isinstance(raw_features, (str, bytes, bytearray, Mapping))
        or not isinstance(raw_features, Iterable)
    ):
        raise MalformedFeedError(
            f"Expected a list of feature records, got {type(raw_features).__name__}"
        )

    events: list[SeismicEvent] = []
    seen_ids: set[str] = set()
    skipped = 0

    for feature in raw_features:
        event = parse_event(feature)
        if event is None or event.id in seen_ids:
            skipped += 1
            continue
        seen_ids.add(event.id)
        events.append(event)

    return NormalizationResult(events=tuple(events), skipped=skipped)
