"""Command-line interface for dumpviewer."""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from dumpviewer import __version__

if TYPE_CHECKING:
    from dumpviewer.config.schema import Config


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="dumpviewer",
        description="Collect diagnostic dumps and browse them as collapsible trees",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=None,
        help="More log output: -v verbose, -vv trace",
    )
    parser.add_argument(
        "--project",
        type=Path,
        help="Project directory holding .dumpviewer/config.yaml",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the dump collector and web viewer",
    )
    serve_parser.add_argument("--host", help="Interface to bind (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, help="Port to listen on (default: 3000)")

    show_parser = subparsers.add_parser(
        "show",
        help="Print the dumps held by a running server",
    )
    show_parser.add_argument("--url", help="Server URL (default: http://127.0.0.1:3000)")
    show_parser.add_argument(
        "--all",
        action="store_true",
        help="Expand every panel and node",
    )

    watch_parser = subparsers.add_parser(
        "watch",
        help="Interactive viewer that follows a running server",
    )
    watch_parser.add_argument("--url", help="Server URL (default: http://127.0.0.1:3000)")
    watch_parser.add_argument(
        "--history",
        type=Path,
        help="File to keep prompt history in",
    )

    send_parser = subparsers.add_parser(
        "send",
        help="Post a dump to a running server",
    )
    send_parser.add_argument("--url", help="Server URL (default: http://127.0.0.1:3000)")
    send_parser.add_argument("--file", help="Source file to report")
    send_parser.add_argument("--line", type=int, help="Source line to report")
    send_parser.add_argument("--type", dest="category", default="dump", help="Dump category")
    send_parser.add_argument("text", help="Dump output, or - to read stdin")

    return parser


def _load_config(parsed: argparse.Namespace) -> Config:
    from dumpviewer.config import load_config

    config = load_config(project_root=parsed.project)
    if parsed.verbose is not None:
        config.logging.verbose = min(2 + parsed.verbose, 4)
    if getattr(parsed, "host", None):
        config.server.host = parsed.host
    if getattr(parsed, "port", None):
        config.server.port = parsed.port
    if getattr(parsed, "url", None):
        config.client.url = parsed.url
    return config


async def run_show(config: Config, expand_all: bool = False) -> int:
    """Fetch once and print the view."""
    from rich.console import Console

    from dumpviewer.refresh import RefreshLoop
    from dumpviewer.render.console import render_view
    from dumpviewer.render.orchestrator import DumpViewer
    from dumpviewer.transport.http import HttpTransport

    console = Console()
    viewer = DumpViewer(cooldown=config.refresh.cooldown)
    async with HttpTransport(config.client.url, timeout=config.client.timeout) as transport:
        if not await RefreshLoop(viewer, transport).refresh():
            console.print(f"[red]Could not load dumps from {config.client.url}[/red]")
            return 1

    if expand_all:
        for key in viewer.toggle_keys():
            viewer.toggle(key, True)
    console.print(render_view(viewer.view))
    return 0


async def run_watch(config: Config, history_file: Path | None = None) -> int:
    from dumpviewer.interactive.repl import WatchRepl
    from dumpviewer.transport.http import HttpTransport

    async with HttpTransport(config.client.url, timeout=config.client.timeout) as transport:
        await WatchRepl(config, transport, history_file=history_file).run()
    return 0


async def run_send(
    config: Config,
    text: str,
    file: str | None = None,
    line: int | None = None,
    category: str | None = None,
) -> int:
    from dumpviewer.errors import TransportError
    from dumpviewer.models import Dump
    from dumpviewer.transport.http import HttpTransport

    dump = Dump(
        timestamp=datetime.now().isoformat(timespec="seconds"),
        output=text,
        file=file,
        line=line,
        category=category,
    )
    async with HttpTransport(config.client.url, timeout=config.client.timeout) as transport:
        try:
            await transport.send_dump(dump)
        except TransportError as e:
            print(f"dumpviewer: {e}", file=sys.stderr)
            return 1
    return 0


def run_cli(args: Sequence[str]) -> int:
    """Run the CLI with the given arguments."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    if parsed.command is None:
        parser.print_help()
        return 1

    from dumpviewer.logging import setup_logging

    config = _load_config(parsed)
    setup_logging(config.logging, force_stderr=parsed.command == "serve")

    if parsed.command == "serve":
        from dumpviewer.dashboard.server import serve_forever

        try:
            asyncio.run(serve_forever(config))
        except KeyboardInterrupt:
            pass
        return 0
    elif parsed.command == "show":
        return asyncio.run(run_show(config, expand_all=parsed.all))
    elif parsed.command == "watch":
        return asyncio.run(run_watch(config, parsed.history))
    elif parsed.command == "send":
        text = sys.stdin.read() if parsed.text == "-" else parsed.text
        return asyncio.run(
            run_send(config, text, file=parsed.file, line=parsed.line, category=parsed.category)
        )
    else:
        parser.print_help()
        return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Console script entry point."""
    return run_cli(sys.argv[1:] if argv is None else argv)
