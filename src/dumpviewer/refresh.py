"""Polling refresh loop.

Fetches the dump list on a fixed interval and re-renders. Automatic ticks
respect the viewer's RefreshGate; manual refresh and clear bypass it.
Transport failures are logged and leave the previous view in place.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from dumpviewer.errors import TransportError

if TYPE_CHECKING:
    from dumpviewer.render.orchestrator import DumpViewer
    from dumpviewer.render.view import ViewTree
    from dumpviewer.transport.base import DumpTransport

log = logging.getLogger(__name__)

# Seconds between automatic refresh ticks
DEFAULT_INTERVAL = 2.0

RenderCallback = Callable[["ViewTree"], Awaitable[None]]


class RefreshLoop:
    """Drives a DumpViewer from a DumpTransport.

    Every fetch takes a request number; a response that arrives after a newer
    one has been applied is dropped instead of re-rendering older data.
    """

    def __init__(
        self,
        viewer: DumpViewer,
        transport: DumpTransport,
        interval: float = DEFAULT_INTERVAL,
        on_render: RenderCallback | None = None,
    ) -> None:
        self.viewer = viewer
        self.transport = transport
        self._interval = interval
        self._on_render = on_render
        self._running = False
        self._task: asyncio.Task[None] | None = None
        self._requested = 0
        self._applied = 0

    @property
    def running(self) -> bool:
        return self._running

    async def tick(self) -> bool:
        """Automatic refresh: skipped while the refresh gate is closed.

        Returns:
            True if a new view was rendered.
        """
        if self.viewer.refresh_blocked():
            log.debug("Refresh skipped, user interaction cool-down active")
            return False
        return await self._refresh()

    async def refresh(self) -> bool:
        """Manual refresh, bypassing the gate."""
        return await self._refresh()

    async def clear(self) -> bool:
        """Clear the dumps and reset the viewer to its initial state.

        Returns:
            False if the transport failed; the view is then left unchanged.
        """
        try:
            await self.transport.clear_dumps()
        except TransportError as e:
            log.error("Failed to clear dumps: %s", e)
            return False
        # Anything still in flight predates the clear
        self._applied = self._requested
        self.viewer.reset()
        await self._notify(self.viewer.render([]))
        return True

    async def _refresh(self) -> bool:
        self._requested += 1
        request = self._requested
        try:
            dumps = await self.transport.fetch_dumps()
        except TransportError as e:
            log.warning("Failed to load dumps: %s", e)
            return False

        if request <= self._applied:
            log.debug("Dropping stale dump list (request %d, applied %d)", request, self._applied)
            return False
        self._applied = request

        view = self.viewer.render(dumps)
        await self._notify(view)
        return True

    async def _notify(self, view: ViewTree) -> None:
        if self._on_render is None:
            return
        try:
            await self._on_render(view)
        except Exception as e:
            log.warning("Render callback error: %s", e)

    async def _poll_loop(self) -> None:
        while self._running:
            try:
                await self.tick()
            except Exception as e:
                log.error("Error refreshing dumps: %s", e)
            await asyncio.sleep(self._interval)

    def start(self) -> None:
        """Start polling. Must be called from within a running event loop."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._poll_loop())
        log.debug("Refresh loop started (interval=%.1fs)", self._interval)

    async def stop(self) -> None:
        """Stop polling and wait for the loop task to finish."""
        self._running = False
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        log.debug("Refresh loop stopped")

    async def __aenter__(self) -> RefreshLoop:
        self.start()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.stop()
