"""Interactive watch mode: a prompt over a live-refreshing view."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.history import FileHistory
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console

from dumpviewer.interactive.commands import CommandHandler
from dumpviewer.refresh import RefreshLoop
from dumpviewer.render.console import render_view
from dumpviewer.render.orchestrator import DumpViewer

if TYPE_CHECKING:
    from pathlib import Path

    from dumpviewer.config.schema import Config
    from dumpviewer.render.view import ViewTree
    from dumpviewer.transport.base import DumpTransport


class WatchRepl:
    """Polls a transport in the background and takes slash commands.

    The tree is only reprinted on demand; background refreshes print a
    one-line notice when the number of dumps changes.
    """

    def __init__(
        self,
        config: Config,
        transport: DumpTransport,
        history_file: Path | None = None,
        console: Console | None = None,
    ) -> None:
        self.config = config
        self.console = console or Console()
        self.viewer = DumpViewer(cooldown=config.refresh.cooldown)
        self.refresh_loop = RefreshLoop(
            self.viewer,
            transport,
            interval=config.refresh.interval,
            on_render=self._on_render,
        )
        self.commands = CommandHandler(self.refresh_loop, self.console)
        self._last_count: int | None = None
        self._running = False

        history = FileHistory(str(history_file)) if history_file else None
        self.session: PromptSession[str] = PromptSession(
            history=history,
            auto_suggest=AutoSuggestFromHistory(),
        )

    async def _on_render(self, view: ViewTree) -> None:
        count = len(view.panels)
        if self._last_count is not None and count != self._last_count:
            self.console.print(f"[dim]{count} dumps, /tree to show[/dim]")
        self._last_count = count

    async def run(self) -> None:
        self._running = True

        self.console.print("[bold]Dump Viewer[/bold] - watch mode")
        self.console.print("Type [bold]/help[/bold] for commands, [bold]/quit[/bold] to exit.\n")

        await self.refresh_loop.refresh()
        self.console.print(render_view(self.viewer.view))

        with patch_stdout():
            async with self.refresh_loop:
                while self._running:
                    try:
                        line = await asyncio.get_event_loop().run_in_executor(
                            None,
                            lambda: self.session.prompt("dump> "),
                        )
                    except KeyboardInterrupt:
                        continue
                    except EOFError:
                        break

                    line = line.strip()
                    if not line:
                        continue
                    if line.startswith("/"):
                        await self.commands.handle(line)
                        if line == "/quit":
                            break
                    else:
                        self.console.print("[dim]Unknown input. Type /help for commands.[/dim]")

        self._running = False

    def stop(self) -> None:
        self._running = False
