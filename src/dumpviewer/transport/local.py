"""Transport backed by an in-process DumpStore."""

from __future__ import annotations

from dumpviewer.models import Dump
from dumpviewer.transport.store import DumpStore


class LocalTransport:
    """Reads and clears a DumpStore in the same process."""

    def __init__(self, store: DumpStore) -> None:
        self.store = store

    async def fetch_dumps(self) -> list[Dump]:
        return self.store.snapshot()

    async def clear_dumps(self) -> None:
        self.store.clear()
