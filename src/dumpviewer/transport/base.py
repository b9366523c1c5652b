"""Dump transport protocol."""

from __future__ import annotations

from typing import Protocol

from dumpviewer.models import Dump


class DumpTransport(Protocol):
    """Source of the dump list.

    Implementations:
    - LocalTransport: in-process DumpStore
    - HttpTransport: a remote dumpviewer server
    """

    async def fetch_dumps(self) -> list[Dump]:
        """Return the current dump list in arrival order.

        Raises:
            TransportError: If the list could not be fetched.
        """
        ...

    async def clear_dumps(self) -> None:
        """Remove every stored dump.

        Raises:
            TransportError: If the clear was not acknowledged.
        """
        ...
