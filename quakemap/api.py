"""Quakemap API - FastAPI UI shell.

Exposes the two control inputs (window selection, manual refresh) and
read-only views of the store. Never waits on an in-flight fetch.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Response
from pydantic import BaseModel

from quakemap.controller import FetchAttempt, RefreshController
from quakemap.core.classifier import legend_entries
from quakemap.core.config import Config
from quakemap.core.event import TimeWindow
from quakemap.core.markers import build_markers, build_view, view_to_dict
from quakemap.shell.feed_client import FeedClient
from quakemap.shell.map_renderer import MapRenderer, StaticMapRenderer
from quakemap.store import EventStore


logger = logging.getLogger(__name__)


class WindowSelection(BaseModel):
    window: str


def _attempt_response(attempt: FetchAttempt | None) -> dict[str, Any]:
    if attempt is None:
        return {"status": "unchanged"}
    return {
        "status": "fetching",
        "window": attempt.window.value,
        "generation": attempt.token.generation,
    }


def create_app(
    config: Config | None = None,
    controller: RefreshController | None = None,
    renderer: MapRenderer | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Application configuration (defaults if not provided)
        controller: Refresh controller (created from config if not provided)
        renderer: Map renderer (StaticMapRenderer if not provided)

    Returns:
        Configured FastAPI app. The initial fetch is issued on startup.
    """
    config = config or Config()

    if controller is None:
        controller = RefreshController(
            EventStore(window=config.default_window),
            FeedClient(
                base_url=config.feed_base_url,
                timeout=config.request_timeout_seconds,
            ),
            max_workers=config.max_workers,
        )

    if renderer is None:
        renderer = StaticMapRenderer(
            width=config.map_width,
            height=config.map_height,
            center=(config.map_center_latitude, config.map_center_longitude),
            zoom=config.map_zoom,
            tile_url=config.tile_url,
        )

    store = controller.store
    tz = config.tz

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting initial fetch for %s", store.window.value)
        controller.start()
        yield
        controller.shutdown(wait=False)

    app = FastAPI(
        title="Quakemap",
        description="Seismic event map driven by the USGS real-time feeds",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.controller = controller
    app.state.renderer = renderer

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    @app.get("/api/view")
    async def get_view():
        error = store.last_error
        view = build_view(
            window=store.window,
            events=store.current_events(),
            loading=store.is_loading(),
            error=str(error) if error is not None else None,
            skipped=store.last_skipped,
            tz=tz,
            events_window=store.events_window,
        )
        return view_to_dict(view)

    @app.get("/api/legend")
    async def get_legend():
        return [
            {"tier": e.tier.value, "label": e.label, "color": e.color}
            for e in legend_entries()
        ]

    @app.post("/api/window")
    async def select_window(selection: WindowSelection):
        try:
            window = TimeWindow.parse(selection.window)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
        return _attempt_response(controller.on_window_change(window))

    @app.post("/api/refresh")
    async def refresh():
        return _attempt_response(controller.on_manual_refresh())

    @app.get("/api/map.png")
    def get_map():
        markers = build_markers(store.current_events(), tz)
        result = renderer.render(markers)
        if not result.success or result.image_bytes is None:
            raise HTTPException(
                status_code=502,
                detail=f"Map rendering failed: {result.error}",
            )
        return Response(content=result.image_bytes, media_type="image/png")

    return app
