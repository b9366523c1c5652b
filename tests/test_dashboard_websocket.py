"""Tests for the dashboard websocket ConnectionManager."""

import asyncio

import pytest

from dumpviewer.dashboard.websocket import ConnectionManager


class MockWebSocket:
    """Mock WebSocket for testing."""

    def __init__(self, should_fail: bool = False):
        self.should_fail = should_fail
        self.accepted = False
        self.closed = False
        self.close_code: int | None = None
        self.sent_messages: list = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message: dict) -> None:
        if self.should_fail:
            raise Exception("WebSocket connection failed")
        self.sent_messages.append(message)

    async def close(self, code: int = 1000, reason: str = "") -> None:
        self.closed = True
        self.close_code = code


@pytest.fixture
def manager() -> ConnectionManager:
    return ConnectionManager()


class TestConnectionManager:
    def test_init(self, manager: ConnectionManager) -> None:
        assert manager.get_connection_count() == 0
        assert isinstance(manager._lock, asyncio.Lock)

    @pytest.mark.asyncio
    async def test_connect_and_disconnect(self, manager: ConnectionManager) -> None:
        websocket = MockWebSocket()
        await manager.connect(websocket)
        assert websocket.accepted
        assert manager.get_connection_count() == 1

        await manager.disconnect(websocket)
        assert manager.get_connection_count() == 0

    @pytest.mark.asyncio
    async def test_disconnect_unknown_is_harmless(self, manager: ConnectionManager) -> None:
        await manager.disconnect(MockWebSocket())
        assert manager.get_connection_count() == 0

    @pytest.mark.asyncio
    async def test_broadcast_reaches_all(self, manager: ConnectionManager) -> None:
        first, second = MockWebSocket(), MockWebSocket()
        await manager.connect(first)
        await manager.connect(second)

        reached = await manager.broadcast({"type": "view", "generation": 1})
        assert reached == 2
        assert first.sent_messages == [{"type": "view", "generation": 1}]
        assert second.sent_messages == [{"type": "view", "generation": 1}]

    @pytest.mark.asyncio
    async def test_broadcast_drops_failing(self, manager: ConnectionManager) -> None:
        good, bad = MockWebSocket(), MockWebSocket(should_fail=True)
        await manager.connect(good)
        await manager.connect(bad)

        assert await manager.broadcast({"type": "view"}) == 1
        assert manager.get_connection_count() == 1

    @pytest.mark.asyncio
    async def test_broadcast_without_clients(self, manager: ConnectionManager) -> None:
        assert await manager.broadcast({"type": "view"}) == 0

    @pytest.mark.asyncio
    async def test_close_all(self, manager: ConnectionManager) -> None:
        websockets = [MockWebSocket(), MockWebSocket()]
        for websocket in websockets:
            await manager.connect(websocket)

        await manager.close_all("bye")
        assert all(ws.closed and ws.close_code == 1001 for ws in websockets)
        assert manager.get_connection_count() == 0
