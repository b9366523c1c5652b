"""FastAPI routes: dump collector, view API, HTML page and WebSocket."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, PlainTextResponse
from pydantic import BaseModel

from dumpviewer.dashboard.page import render_page
from dumpviewer.dashboard.server import (
    get_dashboard_status,
    get_refresh_loop,
    get_store,
    get_viewer,
)
from dumpviewer.dashboard.websocket import ConnectionManager
from dumpviewer.errors import UnknownNodeError, WidgetToggleError
from dumpviewer.models import Dump
from dumpviewer.refresh import RefreshLoop
from dumpviewer.render.html import render_view_html
from dumpviewer.render.orchestrator import DumpViewer
from dumpviewer.render.view import ViewTree
from dumpviewer.transport.store import DumpStore

log = logging.getLogger(__name__)

connection_manager = ConnectionManager()


class ToggleRequest(BaseModel):
    key: str
    open: bool | None = None


class WidgetToggleRequest(BaseModel):
    identity: str
    index: int
    recursive: bool = False


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Dump Viewer",
        description="Collects diagnostic dumps and renders them as collapsible trees",
        version="0.1.0",
    )
    # Producers post from arbitrary local pages and scripts
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["content-type"],
    )
    _register_routes(app)
    return app


def _require_viewer() -> DumpViewer:
    viewer = get_viewer()
    if viewer is None:
        raise HTTPException(status_code=503, detail="Dashboard not initialized")
    return viewer


def _require_store() -> DumpStore:
    store = get_store()
    if store is None:
        raise HTTPException(status_code=503, detail="Dashboard not initialized")
    return store


def _require_refresh_loop() -> RefreshLoop:
    loop = get_refresh_loop()
    if loop is None:
        raise HTTPException(status_code=503, detail="Dashboard not initialized")
    return loop


def view_message(view: ViewTree) -> dict[str, Any]:
    return {
        "type": "view",
        "generation": view.generation,
        "count": len(view.panels),
        "html": render_view_html(view),
    }


def _register_routes(app: FastAPI) -> None:
    """Register all routes."""

    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        """Serve the viewer page with the current view pre-rendered."""
        viewer = _require_viewer()
        return render_page(render_view_html(viewer.view))

    @app.post("/api/dump", response_class=PlainTextResponse)
    async def api_dump(dump: Dump) -> str:
        """Collector endpoint for producers."""
        count = _require_store().add(dump)
        log.debug("Received dump from %s (%d stored)", dump.location or "unknown", count)
        return "OK"

    @app.get("/api/dumps")
    async def api_dumps() -> list[dict[str, Any]]:
        return [dump.to_wire() for dump in _require_store().snapshot()]

    @app.delete("/api/dumps")
    async def api_clear() -> dict[str, Any]:
        """Clear every dump and reset the viewer."""
        loop = _require_refresh_loop()
        if not await loop.clear():
            raise HTTPException(status_code=502, detail="Failed to clear dumps")
        return {"status": "ok"}

    @app.get("/api/view")
    async def api_view() -> dict[str, Any]:
        return _require_viewer().view.to_dict()

    @app.post("/api/view/toggle")
    async def api_toggle(request: ToggleRequest) -> dict[str, Any]:
        """Open, close or flip a panel or tree node."""
        viewer = _require_viewer()
        try:
            is_open = viewer.toggle(request.key, request.open)
        except UnknownNodeError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        return {"key": request.key, "open": is_open}

    @app.post("/api/view/widget")
    async def api_widget(request: WidgetToggleRequest) -> dict[str, Any]:
        """Toggle a region inside an embedded widget and push the new markup."""
        viewer = _require_viewer()
        try:
            expanded = viewer.toggle_widget(request.identity, request.index, request.recursive)
        except WidgetToggleError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        await broadcast_view(viewer.view)
        return {"identity": request.identity, "index": request.index, "expanded": expanded}

    @app.post("/api/refresh")
    async def api_refresh() -> dict[str, Any]:
        """Manual refresh; ignores the interaction cool-down."""
        loop = _require_refresh_loop()
        refreshed = await loop.refresh()
        return {"refreshed": refreshed, "generation": loop.viewer.view.generation}

    @app.get("/api/status")
    async def api_status() -> dict[str, Any]:
        status = get_dashboard_status()
        viewer = get_viewer()
        store = get_store()
        return {
            "status": "ok" if viewer is not None else "uninitialized",
            "uptime": status["uptime"],
            "connections": status["connections"],
            "dumps": len(store) if store is not None else 0,
            "refresh_blocked": viewer.refresh_blocked() if viewer is not None else False,
            "generation": viewer.view.generation if viewer is not None else 0,
        }

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        """Push the current view, then every re-render."""
        await connection_manager.connect(websocket)
        try:
            viewer = get_viewer()
            if viewer is not None:
                await websocket.send_json(view_message(viewer.view))

            while True:
                try:
                    data = await websocket.receive_text()
                    if data == "ping":
                        await websocket.send_text("pong")
                except WebSocketDisconnect:
                    break
        finally:
            await connection_manager.disconnect(websocket)


async def broadcast_view(view: ViewTree) -> None:
    """Push a rendered view to every connected page."""
    await connection_manager.broadcast(view_message(view))
