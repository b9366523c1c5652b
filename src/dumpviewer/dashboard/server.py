"""Dashboard server lifecycle and shared state."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from typing import TYPE_CHECKING, Any

from dumpviewer.refresh import RefreshLoop
from dumpviewer.render.orchestrator import DumpViewer
from dumpviewer.transport.local import LocalTransport
from dumpviewer.transport.store import DumpStore

if TYPE_CHECKING:
    from dumpviewer.config.schema import Config

log = logging.getLogger(__name__)

# Server state
_server_task: asyncio.Task[None] | None = None
_server_port: int | None = None
_start_time: float | None = None

# Shared state for routes
_store: DumpStore | None = None
_viewer: DumpViewer | None = None
_refresh_loop: RefreshLoop | None = None


def setup_state(store: DumpStore, viewer: DumpViewer, refresh_loop: RefreshLoop) -> None:
    """Install the store, viewer and refresh loop the routes operate on."""
    global _store, _viewer, _refresh_loop
    _store = store
    _viewer = viewer
    _refresh_loop = refresh_loop


def clear_state() -> None:
    global _store, _viewer, _refresh_loop
    _store = None
    _viewer = None
    _refresh_loop = None


def get_store() -> DumpStore | None:
    return _store


def get_viewer() -> DumpViewer | None:
    return _viewer


def get_refresh_loop() -> RefreshLoop | None:
    return _refresh_loop


def build_state(config: Config) -> RefreshLoop:
    """Create and install a store, viewer and refresh loop from config.

    The loop's render callback broadcasts every new view to the dashboard.
    """
    from dumpviewer.dashboard.routes import broadcast_view

    store = DumpStore(max_dumps=config.server.max_dumps)
    viewer = DumpViewer(cooldown=config.refresh.cooldown)
    loop = RefreshLoop(
        viewer,
        LocalTransport(store),
        interval=config.refresh.interval,
        on_render=broadcast_view,
    )
    setup_state(store, viewer, loop)
    return loop


def is_dashboard_running() -> bool:
    return _server_task is not None and not _server_task.done()


def get_dashboard_status() -> dict[str, Any]:
    from dumpviewer.dashboard.routes import connection_manager

    return {
        "running": is_dashboard_running(),
        "port": _server_port,
        "uptime": time.time() - _start_time if _start_time else 0,
        "connections": connection_manager.get_connection_count(),
    }


async def start_dashboard(config: Config) -> None:
    """Start the collector and dashboard server as a background task.

    Raises:
        RuntimeError: If a server is already running in this process.
    """
    global _server_task, _server_port, _start_time

    if is_dashboard_running():
        raise RuntimeError(f"Dashboard already running on port {_server_port}")

    # Import here to keep CLI startup light
    import uvicorn

    from dumpviewer.dashboard.routes import create_app

    refresh_loop = build_state(config)
    app = create_app()

    uvicorn_config = uvicorn.Config(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level="warning",
        access_log=False,
    )
    server = uvicorn.Server(uvicorn_config)

    _server_task = asyncio.create_task(server.serve())
    _server_port = config.server.port
    _start_time = time.time()
    refresh_loop.start()

    log.info("Dump viewer listening on http://%s:%d", config.server.host, config.server.port)


async def stop_dashboard() -> None:
    """Stop the refresh loop, websocket clients and server."""
    global _server_task, _server_port, _start_time

    if not _server_task:
        return

    if _refresh_loop is not None:
        await _refresh_loop.stop()

    from dumpviewer.dashboard.routes import connection_manager

    await connection_manager.close_all("Server shutting down")

    _server_task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await _server_task

    log.info("Dump viewer stopped (was on port %s)", _server_port)

    _server_task = None
    _server_port = None
    _start_time = None
    clear_state()


async def serve_forever(config: Config) -> None:
    """Run the server until uvicorn exits (Ctrl-C), then clean up."""
    await start_dashboard(config)
    try:
        if _server_task is not None:
            await _server_task
    finally:
        await stop_dashboard()
