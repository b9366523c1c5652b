"""WebSocket connection manager for live view updates."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fastapi import WebSocket

log = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks connected dashboard pages and pushes view updates to them.

    Every page watches the same dump list, so there is a single connection set.
    """

    def __init__(self) -> None:
        self._connections: set[WebSocket] = set()
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._connections.add(websocket)
        log.debug("Dashboard client connected (%d total)", len(self._connections))

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._connections.discard(websocket)
        log.debug("Dashboard client disconnected (%d left)", len(self._connections))

    async def broadcast(self, message: dict[str, Any]) -> int:
        """Send a message to every client, dropping the ones that fail.

        Returns:
            Number of clients the message reached.
        """
        async with self._lock:
            connections = list(self._connections)

        dead: list[WebSocket] = []
        for websocket in connections:
            try:
                await websocket.send_json(message)
            except Exception as e:
                log.debug("Dropping dashboard client: %s", e)
                dead.append(websocket)

        if dead:
            async with self._lock:
                self._connections.difference_update(dead)
        return len(connections) - len(dead)

    def get_connection_count(self) -> int:
        return len(self._connections)

    async def close_all(self, reason: str = "Server shutting down") -> None:
        """Close every connection gracefully."""
        async with self._lock:
            connections = list(self._connections)
            self._connections.clear()

        for websocket in connections:
            with contextlib.suppress(Exception):
                await websocket.close(code=1001, reason=reason)
        log.info("Closed %d dashboard connections", len(connections))
