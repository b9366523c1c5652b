"""Collector and dashboard web service.

Usage:
    dumpviewer serve [--host HOST] [--port PORT]

Producers POST dumps to /api/dump; the page at / shows them live.
"""

from dumpviewer.dashboard.routes import broadcast_view, create_app
from dumpviewer.dashboard.server import (
    get_dashboard_status,
    is_dashboard_running,
    serve_forever,
    start_dashboard,
    stop_dashboard,
)

__all__ = [
    "create_app",
    "start_dashboard",
    "stop_dashboard",
    "serve_forever",
    "is_dashboard_running",
    "get_dashboard_status",
    "broadcast_view",
]
