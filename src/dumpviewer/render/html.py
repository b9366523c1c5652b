"""Server-side HTML for a view tree.

Panels and collapsible nodes become ``<details>`` elements carrying their
state key in ``data-key``, so a page script can post toggles back. All dump
content is escaped before markup is added.
"""

from __future__ import annotations

import html

from dumpviewer.models import NodeKind, ParseNode
from dumpviewer.parsing.labels import stylize_label
from dumpviewer.render.values import scalar_text
from dumpviewer.render.view import PanelView, ViewTree

EMPTY_VIEW_HTML = '<p id="no-dumps" class="no-dumps">No dumps available</p>'

_SCALAR_CLASSES = {type(None): "json-null", bool: "json-bool", str: "json-string"}


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def _key_html(node: ParseNode) -> str:
    if node.key is None:
        return ""
    if isinstance(node.key, int):
        return f'<span class="json-index">{node.key}</span>: '
    return f'<span class="json-key">{html.escape(node.key)}</span>: '


def _json_node_html(node: ParseNode) -> str:
    key = _key_html(node)
    if node.kind is NodeKind.SCALAR:
        css = _SCALAR_CLASSES.get(type(node.value), "json-number")
        value = html.escape(scalar_text(node.value))
        return f'<div class="tree-leaf">{key}<span class="{css}">{value}</span></div>'

    if not node.children:
        return f'<div class="tree-leaf">{key}<span class="json-empty">{node.summary}</span></div>'

    opener, closer = ("{", "}") if node.kind is NodeKind.OBJECT else ("[", "]")
    children = "".join(_json_node_html(child) for child in node.children)
    if node.inline:
        return (
            f'<div class="tree-inline">{key}{opener}'
            f'<div class="tree-children">{children}</div>{closer}</div>'
        )
    open_attr = " open" if node.open else ""
    return (
        f'<details class="tree-node" data-key="{_attr(node.path)}"{open_attr}>'
        f'<summary>{key}<span class="tree-summary">{opener} {node.summary} {closer}</span></summary>'
        f'<div class="tree-children">{children}</div></details>'
    )


def _dump_node_html(node: ParseNode) -> str:
    label = stylize_label(node.label)
    if not node.collapsible:
        return f'<div class="tree-leaf">{label}</div>'
    open_attr = " open" if node.open else ""
    children = "".join(_dump_node_html(child) for child in node.children)
    return (
        f'<details class="tree-node" data-key="{_attr(node.path)}"{open_attr}>'
        f'<summary>{label}</summary><div class="tree-children">{children}</div></details>'
    )


def render_tree_html(tree: ParseNode) -> str:
    if tree.kind is NodeKind.ROOT:
        return "".join(_dump_node_html(child) for child in tree.children)
    return _json_node_html(tree)


def render_panel_html(panel: PanelView) -> str:
    """Render one dump panel."""
    if panel.tree is not None:
        body = f'<div class="dump-tree">{render_tree_html(panel.tree)}</div>'
    elif panel.widget is not None:
        body = panel.widget.to_html()
    else:
        body = f'<pre class="dump-output">{html.escape(panel.text or "")}</pre>'

    location = ""
    if panel.dump.location:
        location = f'<span class="dump-file">{html.escape(panel.dump.location)}</span>'
    open_attr = " open" if panel.open else ""
    return (
        f'<details class="dump-item" data-key="{_attr(panel.identity)}"{open_attr}>'
        f'<summary class="dump-summary">'
        f'<span class="dump-timestamp">{html.escape(panel.title)}</span>{location}'
        f'<span class="dump-format">{panel.format.value}</span>'
        f"</summary>{body}</details>"
    )


def render_view_html(view: ViewTree) -> str:
    """Render every panel, or the empty-state placeholder."""
    if view.empty:
        return EMPTY_VIEW_HTML
    return "".join(render_panel_html(panel) for panel in view.panels)
