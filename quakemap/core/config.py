"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field
from urllib.parse import urlparse
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from quakemap.core.event import TimeWindow


# USGS real-time summary feeds; the window picks all_{hour,day,week}.geojson
DEFAULT_FEED_BASE_URL = "https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary"

DEFAULT_TILE_URL = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        feed_base_url: Base URL of the summary feeds
        default_window: Window selected at startup
        request_timeout_seconds: Transport timeout, None for no timeout
        max_workers: Threads available for concurrent fetches
        display_timezone: IANA zone for marker times, None for system local
        tile_url: Map tile URL template
        map_width: Rendered map width in pixels
        map_height: Rendered map height in pixels
        map_center_latitude: Initial map center latitude
        map_center_longitude: Initial map center longitude
        map_zoom: Initial map zoom level
    """
    feed_base_url: str = DEFAULT_FEED_BASE_URL
    default_window: TimeWindow = TimeWindow.DAY
    request_timeout_seconds: float | None = None
    max_workers: int = 4
    display_timezone: str | None = None
    tile_url: str = DEFAULT_TILE_URL
    map_width: int = 1024
    map_height: int = 512
    map_center_latitude: float = 20.0
    map_center_longitude: float = 0.0
    map_zoom: int = 2

    @property
    def tz(self) -> ZoneInfo | None:
        """Display timezone object, None for system local."""
        if not self.display_timezone:
            return None
        return ZoneInfo(self.display_timezone)


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_coordinates(lat: float, lon: float, field_name: str) -> list[ValidationError]:
    """Validate latitude/longitude coordinates.

    Pure function.

    Args:
        lat: Latitude value
        lon: Longitude value
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not -90 <= lat <= 90:
        errors.append(ValidationError(
            field=field_name,
            message=f"Latitude {lat} out of range [-90, 90]",
        ))

    if not -180 <= lon <= 180:
        errors.append(ValidationError(
            field=field_name,
            message=f"Longitude {lon} out of range [-180, 180]",
        ))

    return errors


def validate_config(config: Config) -> ValidationResult:
    """Validate complete configuration.

    Pure function (timezone lookup reads the system tz database).

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with all errors and warnings
    """
    errors: list[ValidationError] = []

    parsed = urlparse(config.feed_base_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        errors.append(ValidationError(
            field="feed_base_url",
            message=f"Feed URL must be http(s): {config.feed_base_url!r}",
        ))
    elif parsed.scheme == "http":
        errors.append(ValidationError(
            field="feed_base_url",
            message="Feed URL is not HTTPS",
            severity="warning",
        ))

    if config.request_timeout_seconds is None:
        errors.append(ValidationError(
            field="request_timeout_seconds",
            message="No request timeout: a hung fetch keeps the view loading",
            severity="warning",
        ))
    elif config.request_timeout_seconds <= 0:
        errors.append(ValidationError(
            field="request_timeout_seconds",
            message="Request timeout must be positive",
        ))

    if config.max_workers < 1:
        errors.append(ValidationError(
            field="max_workers",
            message="max_workers must be at least 1",
        ))

    if config.display_timezone:
        try:
            ZoneInfo(config.display_timezone)
        except (ZoneInfoNotFoundError, ValueError):
            errors.append(ValidationError(
                field="display_timezone",
                message=f"Unknown timezone {config.display_timezone!r}",
            ))

    if config.map_width <= 0 or config.map_height <= 0:
        errors.append(ValidationError(
            field="map_width/map_height",
            message="Map dimensions must be positive",
        ))

    if not 0 <= config.map_zoom <= 18:
        errors.append(ValidationError(
            field="map_zoom",
            message=f"Zoom {config.map_zoom} out of range [0, 18]",
        ))

    errors.extend(validate_coordinates(
        config.map_center_latitude,
        config.map_center_longitude,
        "map_center",
    ))

    has_errors = any(e.severity == "error" for e in errors)
    return ValidationResult(valid=not has_errors, errors=errors)
