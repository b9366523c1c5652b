"""Tests for dump storage and transports."""

from __future__ import annotations

import json

import httpx
import pytest

from dumpviewer.errors import TransportError
from dumpviewer.models import Dump
from dumpviewer.transport.http import HttpTransport
from dumpviewer.transport.local import LocalTransport
from dumpviewer.transport.store import DumpStore

from tests.utils import make_dump


class TestDump:
    def test_wire_uses_type_alias(self) -> None:
        dump = Dump.model_validate(
            {"type": "dump", "timestamp": "t", "output": "x", "file": "a.php", "line": 3}
        )
        assert dump.category == "dump"
        assert dump.to_wire() == {
            "type": "dump",
            "timestamp": "t",
            "output": "x",
            "file": "a.php",
            "line": 3,
        }

    def test_optional_fields_omitted(self) -> None:
        assert make_dump("x", timestamp="t").to_wire() == {"timestamp": "t", "output": "x"}

    def test_location(self) -> None:
        assert make_dump("x", file="a.php", line=3).location == "a.php:3"
        assert make_dump("x", file="a.php").location == "a.php"
        assert make_dump("x").location is None


class TestDumpStore:
    def test_add_and_snapshot(self) -> None:
        store = DumpStore()
        assert store.add(make_dump("a")) == 1
        assert store.add(make_dump("b")) == 2
        assert [dump.output for dump in store.snapshot()] == ["a", "b"]
        assert len(store) == 2

    def test_snapshot_is_a_copy(self) -> None:
        store = DumpStore()
        store.add(make_dump("a"))
        snapshot = store.snapshot()
        snapshot.clear()
        assert len(store) == 1

    def test_cap_drops_oldest(self) -> None:
        store = DumpStore(max_dumps=2)
        for output in ("a", "b", "c"):
            store.add(make_dump(output))
        assert [dump.output for dump in store.snapshot()] == ["b", "c"]

    def test_clear(self) -> None:
        store = DumpStore()
        store.add(make_dump("a"))
        assert store.clear() == 1
        assert len(store) == 0


class TestLocalTransport:
    async def test_fetch_and_clear(self) -> None:
        store = DumpStore()
        store.add(make_dump("a"))
        transport = LocalTransport(store)
        assert len(await transport.fetch_dumps()) == 1
        await transport.clear_dumps()
        assert await transport.fetch_dumps() == []


def _http_transport(handler: httpx.MockTransport) -> HttpTransport:
    client = httpx.AsyncClient(transport=handler, base_url="http://dumps.test")
    return HttpTransport("http://dumps.test", client=client)


class TestHttpTransport:
    async def test_fetch(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "GET"
            assert request.url.path == "/api/dumps"
            return httpx.Response(200, json=[{"type": "dump", "timestamp": "t", "output": "x"}])

        async with _http_transport(httpx.MockTransport(handler)) as transport:
            dumps = await transport.fetch_dumps()
        assert dumps == [Dump(timestamp="t", output="x", category="dump")]

    async def test_clear(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(f"{request.method} {request.url.path}")
            return httpx.Response(200, json={"status": "ok"})

        async with _http_transport(httpx.MockTransport(handler)) as transport:
            await transport.clear_dumps()
        assert seen == ["DELETE /api/dumps"]

    async def test_send(self) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, text="OK")

        async with _http_transport(httpx.MockTransport(handler)) as transport:
            await transport.send_dump(make_dump("x", timestamp="t", file="a.php", line=1))
        assert bodies == [{"timestamp": "t", "output": "x", "file": "a.php", "line": 1}]

    async def test_server_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        async with _http_transport(httpx.MockTransport(handler)) as transport:
            with pytest.raises(TransportError):
                await transport.fetch_dumps()

    async def test_connection_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with _http_transport(httpx.MockTransport(handler)) as transport:
            with pytest.raises(TransportError):
                await transport.clear_dumps()

    async def test_invalid_payload_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"not": "a list"})

        async with _http_transport(httpx.MockTransport(handler)) as transport:
            with pytest.raises(TransportError):
                await transport.fetch_dumps()

    async def test_non_json_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>")

        async with _http_transport(httpx.MockTransport(handler)) as transport:
            with pytest.raises(TransportError):
                await transport.fetch_dumps()
