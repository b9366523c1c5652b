"""Interactive terminal front end."""

from dumpviewer.interactive.commands import CommandHandler
from dumpviewer.interactive.repl import WatchRepl

__all__ = [
    "WatchRepl",
    "CommandHandler",
]
