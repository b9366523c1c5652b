"""Tests for HTML, terminal and dict output of rendered views."""

from __future__ import annotations

import json

from rich.console import Console

from dumpviewer.render.console import dump_label_text, render_view
from dumpviewer.render.html import EMPTY_VIEW_HTML, render_panel_html, render_view_html
from dumpviewer.render.orchestrator import DumpViewer
from dumpviewer.render.view import ViewTree, format_timestamp

from tests.utils import INDENTED_SAMPLE, WIDGET_SAMPLE, make_dump


def _console_text(renderable: object) -> str:
    console = Console(record=True, width=120, color_system=None)
    console.print(renderable)
    return console.export_text()


class TestFormatTimestamp:
    def test_iso_string(self) -> None:
        assert format_timestamp("2024-05-01T10:00:00") == "2024-05-01 10:00:00"

    def test_unparseable_string_unchanged(self) -> None:
        assert format_timestamp("yesterday") == "yesterday"

    def test_seconds_and_milliseconds_agree(self) -> None:
        assert format_timestamp(1714557600) == format_timestamp(1714557600000)


class TestHtml:
    def test_empty_placeholder(self) -> None:
        assert render_view_html(ViewTree()) == EMPTY_VIEW_HTML
        assert "No dumps available" in EMPTY_VIEW_HTML

    def test_panel_markup(self) -> None:
        viewer = DumpViewer()
        view = viewer.render([make_dump("x", file="a.php", line=3)])
        html = render_panel_html(view.panels[0])
        assert html.startswith('<details class="dump-item" data-key="panel:')
        assert " open>" in html
        assert '<span class="dump-timestamp">2024-05-01 10:00:00</span>' in html
        assert '<span class="dump-file">a.php:3</span>' in html

    def test_json_tree(self) -> None:
        viewer = DumpViewer()
        view = viewer.render([make_dump(json.dumps({"a": [1, 2, 3, 4], "s": "<x>"}))])
        html = render_view_html(view)
        assert 'data-key="struct:0"' in html
        assert 'data-key="struct:0/a"' in html
        assert "4 items" in html
        assert "&quot;&lt;x&gt;&quot;" in html

    def test_dialect_tree(self) -> None:
        viewer = DumpViewer()
        html = render_view_html(viewer.render([make_dump(INDENTED_SAMPLE)]))
        assert 'data-key="dump:0/0"' in html
        assert '<span class="dump-class">App\\Models\\User</span>' in html
        assert "{#1234" not in html

    def test_widget_embedded(self) -> None:
        viewer = DumpViewer()
        html = render_view_html(viewer.render([make_dump(WIDGET_SAMPLE)]))
        assert 'class="dump-widget"' in html
        assert "data-toggle-index" in html
        assert "<script" not in html


class TestConsole:
    def test_empty(self) -> None:
        assert "No dumps available" in _console_text(render_view(ViewTree()))

    def test_open_panel_shows_tree(self) -> None:
        viewer = DumpViewer()
        view = viewer.render([make_dump(json.dumps({"a": [1, 2, 3, 4]}), file="a.php", line=3)])
        text = _console_text(render_view(view))
        assert "[1] 2024-05-01 10:00:00" in text
        assert "a.php:3" in text
        assert "4 items" in text
        assert "struct:0/a" in text

    def test_closed_panel_hides_body(self) -> None:
        viewer = DumpViewer()
        view = viewer.render([make_dump("first"), make_dump("second body")])
        text = _console_text(render_view(view))
        assert "first" in text
        assert "second body" not in text

    def test_dump_label_text_cleans(self) -> None:
        assert dump_label_text("App\\Models\\User {#1").plain == "App\\Models\\User"


class TestViewDict:
    def test_panel_dict(self) -> None:
        viewer = DumpViewer()
        view = viewer.render([make_dump(INDENTED_SAMPLE, category="dump")])
        data = view.to_dict()
        assert data["count"] == 1
        panel = data["panels"][0]
        assert panel["category"] == "dump"
        assert panel["format"] == "indented_dump"
        header = panel["tree"]["children"][0]
        assert header["type"] == "toggle"
        assert header["text"] == "App\\Models\\User"
        assert header["open"] is True
