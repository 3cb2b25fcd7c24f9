"""Map Renderer - Imperative Shell.

This module draws event markers on a map image using OpenStreetMap tiles.
All I/O is contained here; marker specs are built in the core module.
"""

import io
import logging
from dataclasses import dataclass
from typing import Protocol

from staticmap import StaticMap, CircleMarker

from quakemap.core.config import DEFAULT_TILE_URL
from quakemap.core.markers import MarkerSpec


logger = logging.getLogger(__name__)


@dataclass
class MapImageResult:
    """Result of map image generation.

    Attributes:
        success: Whether the image was generated successfully
        image_bytes: PNG image data if successful
        marker_count: Number of markers drawn
        error: Error message if failed
    """
    success: bool
    image_bytes: bytes | None = None
    marker_count: int = 0
    error: str | None = None


class MapRenderer(Protocol):
    """Anything that can draw one marker per MarkerSpec."""

    def render(self, markers: list[MarkerSpec]) -> MapImageResult:
        ...


class StaticMapRenderer:
    """Renders markers onto a static PNG world map.

    This is part of the imperative shell - it handles I/O (fetching map tiles
    and rendering images).
    """

    def __init__(
        self,
        width: int = 1024,
        height: int = 512,
        center: tuple[float, float] = (20.0, 0.0),
        zoom: int = 2,
        tile_url: str | None = None,
    ) -> None:
        """Initialize static map renderer.

        Args:
            width: Image width in pixels
            height: Image height in pixels
            center: Map center as (latitude, longitude)
            zoom: Zoom level
            tile_url: Custom tile URL template. Defaults to OpenStreetMap.
        """
        self.width = width
        self.height = height
        self.center = center
        self.zoom = zoom
        self.tile_url = tile_url or DEFAULT_TILE_URL

    def render(self, markers: list[MarkerSpec]) -> MapImageResult:
        """Render one circle marker per spec.

        This method performs I/O (fetches map tiles from tile server).

        Args:
            markers: Marker specs from the core module

        Returns:
            MapImageResult with image bytes or error
        """
        logger.info(
            "Rendering %d markers at zoom %d",
            len(markers),
            self.zoom,
        )

        try:
            static_map = StaticMap(
                self.width,
                self.height,
                url_template=self.tile_url,
            )

            for marker in markers:
                # staticmap takes (lon, lat)
                position = (marker.longitude, marker.latitude)
                # CircleMarker width is in canvas units; staticmap draws on a
                # 2x canvas and downsamples, so one map pixel is two units
                fill_width = int(round(marker.radius * 2))
                outline_width = int(round((marker.radius + marker.border_weight) * 2))

                # Outline first so the fill is drawn on top of it
                static_map.add_marker(CircleMarker(
                    position,
                    marker.border_color,
                    outline_width,
                ))
                static_map.add_marker(CircleMarker(
                    position,
                    marker.fill_color,
                    fill_width,
                ))

            latitude, longitude = self.center
            image = static_map.render(zoom=self.zoom, center=[longitude, latitude])

            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
            image_bytes = buffer.getvalue()

            logger.info(
                "Rendered map image: %d bytes",
                len(image_bytes),
            )

            return MapImageResult(
                success=True,
                image_bytes=image_bytes,
                marker_count=len(markers),
            )

        except Exception as e:
            logger.error("Failed to render map: %s", str(e))
            return MapImageResult(
                success=False,
                error=str(e),
            )
