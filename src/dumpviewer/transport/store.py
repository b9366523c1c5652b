"""In-memory dump storage shared by the collector and the viewer."""

from __future__ import annotations

import logging
import threading

from dumpviewer.models import Dump

log = logging.getLogger(__name__)


class DumpStore:
    """Append-only list of received dumps.

    Guarded by a lock since uvicorn may call sync code from worker threads.
    With ``max_dumps`` set, the oldest dumps are dropped past the cap.
    """

    def __init__(self, max_dumps: int | None = None) -> None:
        self._dumps: list[Dump] = []
        self._lock = threading.Lock()
        self._max_dumps = max_dumps

    def add(self, dump: Dump) -> int:
        """Store a dump and return the new count."""
        with self._lock:
            self._dumps.append(dump)
            if self._max_dumps and len(self._dumps) > self._max_dumps:
                dropped = len(self._dumps) - self._max_dumps
                del self._dumps[:dropped]
                log.debug("Dropped %d oldest dumps (cap %d)", dropped, self._max_dumps)
            return len(self._dumps)

    def snapshot(self) -> list[Dump]:
        with self._lock:
            return list(self._dumps)

    def clear(self) -> int:
        """Remove all dumps and return how many were removed."""
        with self._lock:
            count = len(self._dumps)
            self._dumps.clear()
        log.info("Cleared %d dumps", count)
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._dumps)
