"""Tests for the polling refresh loop."""

from __future__ import annotations

import asyncio

import pytest

from dumpviewer.errors import TransportError
from dumpviewer.models import Dump
from dumpviewer.refresh import RefreshLoop
from dumpviewer.render.orchestrator import DumpViewer
from dumpviewer.render.view import ViewTree
from dumpviewer.transport.local import LocalTransport
from dumpviewer.transport.store import DumpStore

from tests.utils import FakeClock, make_dump


class FlakyTransport:
    """Transport that can be told to fail."""

    def __init__(self, dumps: list[Dump]) -> None:
        self.dumps = dumps
        self.fail = False
        self.fetches = 0
        self.cleared = False

    async def fetch_dumps(self) -> list[Dump]:
        self.fetches += 1
        if self.fail:
            raise TransportError("connection refused")
        return list(self.dumps)

    async def clear_dumps(self) -> None:
        if self.fail:
            raise TransportError("connection refused")
        self.cleared = True
        self.dumps = []


class GatedTransport:
    """Transport whose responses are released manually, to reorder them."""

    def __init__(self) -> None:
        self.pending: list[tuple[asyncio.Future[list[Dump]], int]] = []

    async def fetch_dumps(self) -> list[Dump]:
        future: asyncio.Future[list[Dump]] = asyncio.get_running_loop().create_future()
        self.pending.append((future, len(self.pending)))
        return await future

    async def clear_dumps(self) -> None:
        return None


@pytest.fixture
def viewer(clock: FakeClock) -> DumpViewer:
    return DumpViewer(cooldown=5.0, clock=clock)


class TestRefreshLoop:
    async def test_refresh_renders_and_notifies(self, viewer: DumpViewer) -> None:
        rendered: list[ViewTree] = []

        async def on_render(view: ViewTree) -> None:
            rendered.append(view)

        store = DumpStore()
        store.add(make_dump("one"))
        loop = RefreshLoop(viewer, LocalTransport(store), on_render=on_render)

        assert await loop.refresh() is True
        assert len(rendered) == 1
        assert len(rendered[0].panels) == 1

    async def test_tick_suppressed_during_cooldown(
        self, viewer: DumpViewer, clock: FakeClock
    ) -> None:
        transport = FlakyTransport([make_dump('{"a": [1, 2, 3, 4]}')])
        loop = RefreshLoop(viewer, transport)
        await loop.refresh()

        viewer.toggle("struct:0/a")
        assert await loop.tick() is False
        assert transport.fetches == 1

        clock.advance(5.1)
        assert await loop.tick() is True
        assert transport.fetches == 2

    async def test_manual_refresh_bypasses_gate(self, viewer: DumpViewer) -> None:
        transport = FlakyTransport([make_dump('{"a": [1, 2, 3, 4]}')])
        loop = RefreshLoop(viewer, transport)
        await loop.refresh()
        viewer.toggle("struct:0/a")
        assert await loop.refresh() is True

    async def test_failure_keeps_previous_view(self, viewer: DumpViewer) -> None:
        transport = FlakyTransport([make_dump("one")])
        loop = RefreshLoop(viewer, transport)
        await loop.refresh()
        before = viewer.view

        transport.fail = True
        assert await loop.refresh() is False
        assert viewer.view is before

    async def test_stale_response_dropped(self, viewer: DumpViewer) -> None:
        transport = GatedTransport()
        loop = RefreshLoop(viewer, transport)

        older = asyncio.create_task(loop.refresh())
        newer = asyncio.create_task(loop.refresh())
        await asyncio.sleep(0)
        assert len(transport.pending) == 2

        transport.pending[1][0].set_result([make_dump("new"), make_dump("newer")])
        assert await newer is True
        transport.pending[0][0].set_result([make_dump("old")])
        assert await older is False

        assert len(viewer.view.panels) == 2

    async def test_clear_resets_viewer(self, viewer: DumpViewer) -> None:
        rendered: list[ViewTree] = []

        async def on_render(view: ViewTree) -> None:
            rendered.append(view)

        transport = FlakyTransport([make_dump("one"), make_dump("two")])
        loop = RefreshLoop(viewer, transport, on_render=on_render)
        await loop.refresh()
        viewer.toggle(viewer.view.panels[0].identity, False)

        assert await loop.clear() is True
        assert transport.cleared
        assert viewer.first_render
        assert rendered[-1].empty
        assert not viewer.refresh_blocked()

    async def test_clear_failure_leaves_view(self, viewer: DumpViewer) -> None:
        transport = FlakyTransport([make_dump("one")])
        loop = RefreshLoop(viewer, transport)
        await loop.refresh()
        transport.fail = True
        assert await loop.clear() is False
        assert len(viewer.view.panels) == 1

    async def test_callback_errors_are_contained(self, viewer: DumpViewer) -> None:
        async def on_render(view: ViewTree) -> None:
            raise RuntimeError("boom")

        loop = RefreshLoop(viewer, FlakyTransport([]), on_render=on_render)
        assert await loop.refresh() is True

    async def test_start_stop(self, viewer: DumpViewer) -> None:
        transport = FlakyTransport([make_dump("one")])
        async with RefreshLoop(viewer, transport, interval=0.01) as loop:
            assert loop.running
            await asyncio.sleep(0.05)
        assert not loop.running
        assert transport.fetches >= 2

    async def test_poll_loop_survives_render_errors(
        self, viewer: DumpViewer, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        transport = FlakyTransport([make_dump("one")])
        render = viewer.render
        calls = 0

        def render_once_broken(dumps: list[Dump]) -> ViewTree:
            nonlocal calls
            calls += 1
            if calls == 1:
                raise RuntimeError("render failed")
            return render(dumps)

        monkeypatch.setattr(viewer, "render", render_once_broken)
        async with RefreshLoop(viewer, transport, interval=0.01) as loop:
            await asyncio.sleep(0.1)
            assert loop.running
        assert transport.fetches >= 2
        assert len(viewer.view.panels) == 1
