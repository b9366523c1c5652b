"""Dump list transports: where the viewer gets its dumps from."""

from dumpviewer.transport.base import DumpTransport
from dumpviewer.transport.http import HttpTransport
from dumpviewer.transport.local import LocalTransport
from dumpviewer.transport.store import DumpStore

__all__ = [
    "DumpStore",
    "DumpTransport",
    "HttpTransport",
    "LocalTransport",
]
