"""Slash commands for the interactive watch mode."""

from __future__ import annotations

import shlex
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dumpviewer.errors import UnknownNodeError, WidgetToggleError
from dumpviewer.render.console import render_view

if TYPE_CHECKING:
    from dumpviewer.refresh import RefreshLoop
    from dumpviewer.render.view import PanelView

HELP_ROWS = [
    ("/refresh", "Fetch dumps now, ignoring the cool-down"),
    ("/clear", "Delete all dumps on the server"),
    ("/open <n>", "Expand dump panel n"),
    ("/close <n>", "Collapse dump panel n"),
    ("/toggle <key>", "Flip a panel or node by state key"),
    ("/widget <n> <i> [-r]", "Toggle region i of panel n's widget (-r: recursive)"),
    ("/keys [n]", "List toggle keys, optionally for panel n only"),
    ("/tree", "Print the current view"),
    ("/help", "Show this help message"),
    ("/quit", "Exit"),
]


class CommandHandler:
    """Maps slash commands onto a RefreshLoop and its DumpViewer."""

    def __init__(self, refresh_loop: RefreshLoop, console: Console | None = None) -> None:
        self.refresh_loop = refresh_loop
        self.viewer = refresh_loop.viewer
        self.console = console or Console()

    async def handle(self, line: str) -> None:
        try:
            parts = shlex.split(line)
        except ValueError as e:
            self.console.print(f"[red]{escape(str(e))}[/red]")
            return
        if not parts:
            return

        cmd = parts[0].lower()
        args = parts[1:]

        handlers = {
            "/help": self._cmd_help,
            "/refresh": self._cmd_refresh,
            "/clear": self._cmd_clear,
            "/open": self._cmd_open,
            "/close": self._cmd_close,
            "/toggle": self._cmd_toggle,
            "/widget": self._cmd_widget,
            "/keys": self._cmd_keys,
            "/tree": self._cmd_tree,
            "/quit": self._cmd_quit,
        }

        handler = handlers.get(cmd)
        if handler:
            await handler(args)
        else:
            self.console.print(f"[red]Unknown command: {cmd}[/red]")
            self.console.print("Type [bold]/help[/bold] for available commands.")

    def _panel(self, number: str) -> PanelView | None:
        """Panel by its 1-based number as shown in the tree."""
        try:
            position = int(number) - 1
        except ValueError:
            self.console.print(f"[red]Not a panel number: {number}[/red]")
            return None
        panels = self.viewer.view.panels
        if not 0 <= position < len(panels):
            self.console.print(f"[red]No dump {number} (have {len(panels)})[/red]")
            return None
        return panels[position]

    async def _cmd_help(self, args: list[str]) -> None:
        table = Table(title="Available Commands")
        table.add_column("Command", style="bold")
        table.add_column("Description")
        for cmd, desc in HELP_ROWS:
            table.add_row(cmd, desc)
        self.console.print(table)

    async def _cmd_refresh(self, args: list[str]) -> None:
        if await self.refresh_loop.refresh():
            await self._cmd_tree(args)
        else:
            self.console.print("[yellow]Refresh failed, showing previous view[/yellow]")

    async def _cmd_clear(self, args: list[str]) -> None:
        if await self.refresh_loop.clear():
            self.console.print("[dim]Dumps cleared[/dim]")
        else:
            self.console.print("[red]Failed to clear dumps[/red]")

    async def _set_panel(self, args: list[str], is_open: bool) -> None:
        if not args:
            self.console.print("[red]Usage: /open <n> or /close <n>[/red]")
            return
        panel = self._panel(args[0])
        if panel is None:
            return
        self.viewer.toggle(panel.identity, is_open)
        await self._cmd_tree([])

    async def _cmd_open(self, args: list[str]) -> None:
        await self._set_panel(args, True)

    async def _cmd_close(self, args: list[str]) -> None:
        await self._set_panel(args, False)

    async def _cmd_toggle(self, args: list[str]) -> None:
        if not args:
            self.console.print("[red]Usage: /toggle <key>[/red]")
            return
        try:
            is_open = self.viewer.toggle(args[0])
        except UnknownNodeError as e:
            self.console.print(f"[red]{escape(str(e))}[/red]")
            return
        self.console.print(f"[dim]{escape(args[0])} {'opened' if is_open else 'closed'}[/dim]")
        await self._cmd_tree([])

    async def _cmd_widget(self, args: list[str]) -> None:
        recursive = "-r" in args
        args = [arg for arg in args if arg != "-r"]
        if len(args) != 2:
            self.console.print("[red]Usage: /widget <n> <index> [-r][/red]")
            return
        panel = self._panel(args[0])
        if panel is None:
            return
        try:
            expanded = self.viewer.toggle_widget(panel.identity, int(args[1]), recursive)
        except (WidgetToggleError, ValueError) as e:
            self.console.print(f"[red]{escape(str(e))}[/red]")
            return
        self.console.print(f"[dim]Region {args[1]} {'expanded' if expanded else 'collapsed'}[/dim]")
        await self._cmd_tree([])

    async def _cmd_keys(self, args: list[str]) -> None:
        keys = self.viewer.toggle_keys()
        if args:
            panel = self._panel(args[0])
            if panel is None:
                return
            nodes = {node.path for node in panel.collapsible_nodes()}
            keys = [key for key in keys if key == panel.identity or key in nodes]
        if not keys:
            self.console.print("[dim]No toggle keys[/dim]")
            return
        for key in keys:
            self.console.print(key, markup=False, highlight=False)

    async def _cmd_tree(self, args: list[str]) -> None:
        self.console.print(render_view(self.viewer.view))

    async def _cmd_quit(self, args: list[str]) -> None:
        self.console.print("Goodbye!")
