"""Marker and view building - Pure functions.

This module turns events into renderer-ready marker specs and builds the
view snapshot the UI shell displays. Presentation concerns (time
formatting, "Unknown location") live here rather than in the event model.
"""

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any

from quakemap.core.classifier import LegendEntry, classify, legend_entries
from quakemap.core.event import SeismicEvent, TimeWindow


UNKNOWN_LOCATION = "Unknown location"

MARKER_BORDER_COLOR = "#000"
MARKER_BORDER_WEIGHT = 1
MARKER_FILL_OPACITY = 0.8

TIME_FORMAT = "%Y-%m-%d %H:%M:%S %Z"


@dataclass(frozen=True)
class MarkerSpec:
    """Immutable description of one circle marker.

    Attributes:
        event_id: ID of the event the marker represents
        latitude: Marker latitude
        longitude: Marker longitude
        radius: Radius in pixels
        fill_color: Hex fill color from the magnitude tier
        label: Popup text (place, magnitude, time), one item per line
        border_color: Hex outline color
        border_weight: Outline width in pixels
        fill_opacity: Fill opacity in [0, 1]
    """
    event_id: str
    latitude: float
    longitude: float
    radius: float
    fill_color: str
    label: str
    border_color: str = MARKER_BORDER_COLOR
    border_weight: int = MARKER_BORDER_WEIGHT
    fill_opacity: float = MARKER_FILL_OPACITY


@dataclass(frozen=True)
class MapView:
    """Everything the UI shell needs to draw one frame.

    Attributes:
        window: Selected time window
        loading: True while the latest fetch is in flight
        failed: True if the latest fetch failed
        markers: One marker per event in the current snapshot
        legend: Magnitude legend rows
        skipped: Records dropped from the current snapshot's feed
        error: Message of the latest failure, if any
        events_window: Window the marker snapshot was fetched for (None
            before the first successful fetch). Differs from window while
            a new selection is loading or after it failed.
    """
    window: TimeWindow
    loading: bool
    failed: bool
    markers: tuple[MarkerSpec, ...]
    legend: tuple[LegendEntry, ...]
    skipped: int = 0
    error: str | None = None
    events_window: TimeWindow | None = None

    @property
    def status_text(self) -> str:
        if self.loading:
            return "Loading..."
        if self.failed:
            return "Refresh failed"
        return f"{len(self.markers)} events"

    @property
    def refresh_label(self) -> str:
        return "Refreshing..." if self.loading else "Refresh Data"


def format_timestamp(timestamp: datetime, tz: tzinfo | None = None) -> str:
    """Render an instant for display.

    Pure function (given tz). With tz None the system local timezone is used.
    """
    return timestamp.astimezone(tz).strftime(TIME_FORMAT).strip()


def format_magnitude(magnitude: float | None) -> str:
    if magnitude is None:
        return "unknown"
    return str(magnitude)


def format_label(event: SeismicEvent, tz: tzinfo | None = None) -> str:
    """Compose the popup label for an event.

    Pure function.

    Args:
        event: Event to describe
        tz: Display timezone (None for system local)

    Returns:
        Three-line label: place, magnitude and time
    """
    return "\n".join([
        event.place or UNKNOWN_LOCATION,
        f"Magnitude: {format_magnitude(event.magnitude)}",
        f"Time: {format_timestamp(event.timestamp, tz)}",
    ])


def build_marker(event: SeismicEvent, tz: tzinfo | None = None) -> MarkerSpec:
    """Create the marker for a single event.

    Pure function. Position is (latitude, longitude); size and color come
    from the magnitude classification.
    """
    classification = classify(event.magnitude)
    return MarkerSpec(
        event_id=event.id,
        latitude=event.latitude,
        longitude=event.longitude,
        radius=classification.radius,
        fill_color=classification.color,
        label=format_label(event, tz),
    )


def build_markers(events: list[SeismicEvent], tz: tzinfo | None = None) -> list[MarkerSpec]:
    """Create exactly one marker per event, in event order."""
    return [build_marker(event, tz) for event in events]


def build_view(
    window: TimeWindow,
    events: list[SeismicEvent],
    loading: bool,
    error: str | None = None,
    skipped: int = 0,
    tz: tzinfo | None = None,
    events_window: TimeWindow | None = None,
) -> MapView:
    """Assemble the view snapshot.

    Pure function.

    Args:
        window: Selected time window
        events: Current event snapshot
        loading: Whether a fetch is in flight
        error: Latest failure message, None if the latest fetch succeeded
        skipped: Records skipped from the snapshot's feed
        tz: Display timezone (None for system local)
        events_window: Window the events were fetched for

    Returns:
        MapView for the UI shell
    """
    return MapView(
        window=window,
        loading=loading,
        failed=error is not None and not loading,
        markers=tuple(build_markers(events, tz)),
        legend=tuple(legend_entries()),
        skipped=skipped,
        error=error,
        events_window=events_window,
    )


def view_to_dict(view: MapView) -> dict[str, Any]:
    """Serialize a MapView into a JSON-ready dict."""
    return {
        "window": view.window.value,
        "events_window": view.events_window.value if view.events_window is not None else None,
        "loading": view.loading,
        "failed": view.failed,
        "status": view.status_text,
        "refresh_label": view.refresh_label,
        "skipped": view.skipped,
        "error": view.error,
        "markers": [
            {
                "id": m.event_id,
                "latitude": m.latitude,
                "longitude": m.longitude,
                "radius": m.radius,
                "fill_color": m.fill_color,
                "border_color": m.border_color,
                "border_weight": m.border_weight,
                "fill_opacity": m.fill_opacity,
                "label": m.label,
            }
            for m in view.markers
        ],
        "legend": [
            {"tier": e.tier.value, "label": e.label, "color": e.color}
            for e in view.legend
        ],
    }
