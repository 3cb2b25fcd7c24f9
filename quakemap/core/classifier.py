"""Magnitude classification - Pure functions.

Maps a magnitude to a severity tier and its marker encoding (color and
radius). The actual drawing is handled by the shell layer.
"""

import math
from dataclasses import dataclass
from enum import Enum


# Minimum marker radius so tiny and unknown-magnitude events stay visible
MIN_RADIUS = 3.0

# Radius pixels per magnitude unit
RADIUS_SCALE = 2.0


class MagnitudeTier(str, Enum):
    """Discrete severity bucket, mildest first."""
    LIGHT = "light"
    MODERATE = "moderate"
    STRONG = "strong"
    SEVERE = "severe"


@dataclass(frozen=True)
class Classification:
    """Visual encoding of a magnitude.

    Attributes:
        tier: Severity tier
        color: Hex fill color for the tier
        radius: Marker radius in pixels (never below MIN_RADIUS)
    """
    tier: MagnitudeTier
    color: str
    radius: float


@dataclass(frozen=True)
class LegendEntry:
    """One row of the magnitude legend."""
    tier: MagnitudeTier
    label: str
    color: str


TIER_COLORS: dict[MagnitudeTier, str] = {
    MagnitudeTier.LIGHT: "#00ff66",
    MagnitudeTier.MODERATE: "#ffcc00",
    MagnitudeTier.STRONG: "#ff6600",
    MagnitudeTier.SEVERE: "#ff0000",
}

TIER_LABELS: dict[MagnitudeTier, str] = {
    MagnitudeTier.LIGHT: "Light (< 2.5)",
    MagnitudeTier.MODERATE: "Moderate (2.5-4)",
    MagnitudeTier.STRONG: "Strong (4-6)",
    MagnitudeTier.SEVERE: "Severe (>= 6)",
}


def get_magnitude_tier(magnitude: float | None) -> MagnitudeTier:
    """Get the severity tier for a magnitude.

    Pure function. Thresholds are closed lower bounds; None (or NaN) falls
    into the lowest tier.
    """
    if magnitude is None or math.isnan(magnitude):
        return MagnitudeTier.LIGHT
    if magnitude >= 6.0:
        return MagnitudeTier.SEVERE
    elif magnitude >= 4.0:
        return MagnitudeTier.STRONG
    elif magnitude >= 2.5:
        return MagnitudeTier.MODERATE
    return MagnitudeTier.LIGHT


def get_marker_radius(magnitude: float | None) -> float:
    """Determine marker radius based on magnitude.

    Pure function. Radius is twice the magnitude, floored at MIN_RADIUS;
    None counts as 0.
    """
    if magnitude is None or math.isnan(magnitude):
        magnitude = 0.0
    return max(magnitude * RADIUS_SCALE, MIN_RADIUS)


def classify(magnitude: float | None) -> Classification:
    """Classify a magnitude into tier, color and radius.

    Pure function.

    Args:
        magnitude: Event magnitude, or None when unknown

    Returns:
        Classification for the marker
    """
    tier = get_magnitude_tier(magnitude)
    return Classification(
        tier=tier,
        color=TIER_COLORS[tier],
        radius=get_marker_radius(magnitude),
    )


def legend_entries() -> list[LegendEntry]:
    """Legend rows for every tier, mildest first."""
    return [
        LegendEntry(tier=tier, label=TIER_LABELS[tier], color=TIER_COLORS[tier])
        for tier in MagnitudeTier
    ]
