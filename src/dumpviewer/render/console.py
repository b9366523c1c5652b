"""Terminal rendering of view trees with rich."""

from __future__ import annotations

from rich.console import Group, RenderableType
from rich.text import Text
from rich.tree import Tree

from dumpviewer.models import NodeKind, ParseNode
from dumpviewer.parsing.labels import clean_label
from dumpviewer.render.values import scalar_text
from dumpviewer.render.view import PanelView, ViewTree
from dumpviewer.render.widget import COLLAPSED_GLYPH, EXPANDED_GLYPH

_SCALAR_STYLES = {type(None): "dim italic", bool: "magenta", str: "green"}


def _glyph(node_open: bool) -> str:
    return EXPANDED_GLYPH if node_open else COLLAPSED_GLYPH


def dump_label_text(label: str) -> Text:
    """Styled text for an indentation-dialect label."""
    text = Text(clean_label(label))
    text.highlight_regex(r"^#[\w-]+:", "bold cyan")
    text.highlight_regex(r"(?<=array )\d+", "yellow")
    text.highlight_regex(r"\b[A-Za-z_]\w*(?:\\[A-Za-z_]\w*)+", "bold blue")
    text.highlight_regex(r"=>", "dim")
    return text


def _json_label(node: ParseNode) -> Text:
    text = Text()
    if node.key is not None:
        text.append(str(node.key), style="cyan" if isinstance(node.key, str) else "yellow")
        text.append(": ")
    if node.kind is NodeKind.SCALAR:
        text.append(scalar_text(node.value), style=_SCALAR_STYLES.get(type(node.value), "blue"))
    elif not node.children:
        text.append(node.summary, style="dim")
    elif node.inline:
        text.append("{" if node.kind is NodeKind.OBJECT else "[", style="dim")
    else:
        text.append(f"{_glyph(node.open)} {node.summary}", style="bold")
        text.append(f"  {node.path}", style="dim")
    return text


def _add_json(parent: Tree, node: ParseNode) -> None:
    branch = parent.add(_json_label(node))
    if node.children and (node.inline or node.open):
        for child in node.children:
            _add_json(branch, child)


def _add_dump(parent: Tree, node: ParseNode) -> None:
    label = dump_label_text(node.label)
    if node.collapsible:
        label = Text.assemble(f"{_glyph(node.open)} ", label, (f"  {node.path}", "dim"))
    branch = parent.add(label)
    if node.collapsible and node.open:
        for child in node.children:
            _add_dump(branch, child)


def panel_heading(panel: PanelView) -> Text:
    heading = Text.assemble(
        (f"{_glyph(panel.open)} ", "bold"),
        (f"[{panel.position + 1}] ", "bold"),
        (panel.title, "bold white"),
    )
    if panel.dump.location:
        heading.append(f"  {panel.dump.location}", style="cyan")
    heading.append(f"  ({panel.format.value})", style="dim")
    return heading


def render_panel(panel: PanelView) -> RenderableType:
    tree = Tree(panel_heading(panel), guide_style="dim")
    if not panel.open:
        return tree
    if panel.tree is not None:
        if panel.tree.kind is NodeKind.ROOT:
            for child in panel.tree.children:
                _add_dump(tree, child)
        else:
            _add_json(tree, panel.tree)
    elif panel.widget is not None:
        tree.add(Text(panel.widget.text()))
    else:
        tree.add(Text(panel.text or ""))
    return tree


def render_view(view: ViewTree) -> RenderableType:
    """Renderable for a whole view, or the empty-state line."""
    if view.empty:
        return Text("No dumps available", style="dim")
    return Group(*(render_panel(panel) for panel in view.panels))
