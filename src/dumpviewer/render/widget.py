"""Adapter for pre-rendered VarDumper HTML fragments.

The fragment is kept close to verbatim; only its toggle affordances are
rewired so that they follow the same contract as native tree nodes:

- the affordance loses its identifier text (``#1234``) and keeps a glyph,
  ``▶`` when its region is compact and ``▼`` when expanded
- each affordance gets a ``data-toggle-index`` the host posts back
- toggling flips the sibling ``<samp>`` region between ``sf-dump-compact``
  and ``sf-dump-expanded``, optionally for every nested region too

Scripts, event-handler attributes and ``javascript:`` URLs are removed while
the fragment is parsed. Widget state is rebuilt from the markup on every
render and is not kept in the OpenStateStore.
"""

from __future__ import annotations

import html
from collections.abc import Iterator
from dataclasses import dataclass, field
from html.parser import HTMLParser

COLLAPSED_GLYPH = "▶"
EXPANDED_GLYPH = "▼"
GLYPHS = {COLLAPSED_GLYPH, EXPANDED_GLYPH}

COMPACT_CLASS = "sf-dump-compact"
EXPANDED_CLASS = "sf-dump-expanded"
TOGGLE_CLASS = "sf-dump-toggle"
REF_CLASS = "sf-dump-ref"

WRAPPER_CLASS = "dump-widget"

VOID_ELEMENTS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"}
)
RAW_TEXT_ELEMENTS = frozenset({"style", "script"})
URL_ATTRIBUTES = frozenset({"href", "src", "action", "formaction", "xlink:href"})

MAX_FRAGMENT_DEPTH = 128


@dataclass(eq=False)
class Element:
    """Minimal mutable HTML element."""

    tag: str
    attrs: list[tuple[str, str | None]] = field(default_factory=list)
    children: list[Element | str] = field(default_factory=list)
    parent: Element | None = field(default=None, repr=False)

    def get(self, name: str) -> str | None:
        for key, value in self.attrs:
            if key == name:
                return value
        return None

    def set(self, name: str, value: str | None) -> None:
        for i, (key, _) in enumerate(self.attrs):
            if key == name:
                self.attrs[i] = (name, value)
                return
        self.attrs.append((name, value))

    @property
    def classes(self) -> list[str]:
        return (self.get("class") or "").split()

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def add_class(self, name: str) -> None:
        if not self.has_class(name):
            self.set("class", " ".join([*self.classes, name]))

    def remove_class(self, name: str) -> None:
        if self.has_class(name):
            self.set("class", " ".join(c for c in self.classes if c != name))

    def append(self, child: Element | str) -> None:
        if isinstance(child, Element):
            child.parent = self
        self.children.append(child)

    def iter(self) -> Iterator[Element]:
        """Yield this element and all descendant elements in document order."""
        stack = [self]
        while stack:
            element = stack.pop()
            yield element
            stack.extend(c for c in reversed(element.children) if isinstance(c, Element))

    def next_element(self) -> Element | None:
        """Next sibling element, skipping whitespace-only text."""
        if self.parent is None:
            return None
        siblings = self.parent.children
        for sibling in siblings[siblings.index(self) + 1 :]:
            if isinstance(sibling, Element):
                return sibling
            if sibling.strip():
                return None
        return None

    def previous_element(self) -> Element | None:
        """Previous sibling element, skipping whitespace-only text."""
        if self.parent is None:
            return None
        siblings = self.parent.children
        for sibling in reversed(siblings[: siblings.index(self)]):
            if isinstance(sibling, Element):
                return sibling
            if sibling.strip():
                return None
        return None

    def is_descendant_of(self, other: Element) -> bool:
        node = self.parent
        while node is not None:
            if node is other:
                return True
            node = node.parent
        return False

    def text(self) -> str:
        return "".join(c.text() if isinstance(c, Element) else c for c in self.children)

    def to_html(self) -> str:
        attrs = "".join(
            f" {key}" if value is None else f' {key}="{html.escape(value)}"'
            for key, value in self.attrs
        )
        if self.tag in VOID_ELEMENTS:
            return f"<{self.tag}{attrs}>"
        raw = self.tag in RAW_TEXT_ELEMENTS
        inner = "".join(
            c.to_html() if isinstance(c, Element) else (c if raw else html.escape(c, quote=False))
            for c in self.children
        )
        return f"<{self.tag}{attrs}>{inner}</{self.tag}>"


def safe_attrs(attrs: list[tuple[str, str | None]]) -> list[tuple[str, str | None]]:
    """Drop event-handler attributes and ``javascript:`` URLs."""
    kept = []
    for name, value in attrs:
        if name.startswith("on"):
            continue
        if name in URL_ATTRIBUTES and value is not None:
            scheme = "".join(value.split()).lower()
            if scheme.startswith("javascript:"):
                continue
        kept.append((name, value))
    return kept


class _FragmentBuilder(HTMLParser):
    """Builds an Element tree from a fragment, dropping scripts and comments.

    Elements nested deeper than MAX_FRAGMENT_DEPTH are dropped; their text
    stays with the deepest kept ancestor.
    """

    def __init__(self, root: Element) -> None:
        super().__init__(convert_charrefs=True)
        self._stack: list[Element] = [root]
        self._in_script = False

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag == "script":
            self._in_script = True
            return
        if len(self._stack) > MAX_FRAGMENT_DEPTH:
            return
        element = Element(tag=tag, attrs=safe_attrs(attrs))
        self._stack[-1].append(element)
        if tag not in VOID_ELEMENTS:
            self._stack.append(element)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag != "script" and len(self._stack) <= MAX_FRAGMENT_DEPTH:
            self._stack[-1].append(Element(tag=tag, attrs=safe_attrs(attrs)))

    def handle_endtag(self, tag: str) -> None:
        if tag == "script":
            self._in_script = False
            return
        # Close up to the matching open tag; stray end tags are ignored
        for depth in range(len(self._stack) - 1, 0, -1):
            if self._stack[depth].tag == tag:
                del self._stack[depth:]
                return

    def handle_data(self, data: str) -> None:
        if not self._in_script:
            self._stack[-1].append(data)


@dataclass
class WidgetToggle:
    """One rewired affordance and the region it controls."""

    index: int
    anchor: Element
    region: Element

    @property
    def expanded(self) -> bool:
        return not self.region.has_class(COMPACT_CLASS)


class EmbeddedWidget:
    """A wrapped VarDumper fragment with rewired toggles."""

    def __init__(self, root: Element) -> None:
        self.root = root
        self.toggles: list[WidgetToggle] = []

    @classmethod
    def from_markup(cls, markup: str) -> EmbeddedWidget:
        """Insert a fragment into a wrapping container. Call ``wire()`` next."""
        root = Element(tag="div", attrs=[("class", WRAPPER_CLASS)])
        builder = _FragmentBuilder(root)
        builder.feed(markup)
        builder.close()
        return cls(root)

    def wire(self) -> int:
        """Locate and rewire toggle affordances.

        Affordances are ``a.sf-dump-toggle`` anchors and ``a.sf-dump-ref``
        anchors directly followed by a ``<samp>`` region. A region with no
        affordance in front of it gets one, the way the dumper's own script
        would add it.

        Returns:
            Number of wired toggles.
        """
        self.toggles = []
        for region in list(self.root.iter()):
            if region.tag != "samp":
                continue
            anchor = region.previous_element()
            if anchor is None or anchor.tag != "a" or not (
                anchor.has_class(TOGGLE_CLASS) or anchor.has_class(REF_CLASS)
            ):
                anchor = self._insert_anchor(region)
            self._rewire(anchor, region, len(self.toggles))
        return len(self.toggles)

    def _insert_anchor(self, region: Element) -> Element:
        anchor = Element(tag="a", attrs=[("class", TOGGLE_CLASS)])
        parent = region.parent
        if parent is None:
            raise ValueError("Cannot insert a toggle before the widget root")
        anchor.parent = parent
        parent.children.insert(parent.children.index(region), anchor)
        return anchor

    def _rewire(self, anchor: Element, region: Element, index: int) -> None:
        glyph = next(
            (c for c in anchor.children if isinstance(c, Element) and c.tag == "span" and c.text().strip() in GLYPHS),
            None,
        )
        anchor.children = []
        if glyph is None:
            glyph = Element(tag="span")
        anchor.append(glyph)
        anchor.add_class(TOGGLE_CLASS)
        anchor.set("data-toggle-index", str(index))

        toggle = WidgetToggle(index=index, anchor=anchor, region=region)
        self._apply(toggle, toggle.expanded)
        self.toggles.append(toggle)

    def _apply(self, toggle: WidgetToggle, expanded: bool) -> None:
        region = toggle.region
        region.remove_class(COMPACT_CLASS if expanded else EXPANDED_CLASS)
        region.add_class(EXPANDED_CLASS if expanded else COMPACT_CLASS)
        glyph = toggle.anchor.children[0]
        if isinstance(glyph, Element):
            glyph.children = [EXPANDED_GLYPH if expanded else COLLAPSED_GLYPH]

    def is_expanded(self, index: int) -> bool:
        return self.toggles[index].expanded

    def toggle(self, index: int, recursive: bool = False) -> bool:
        """Flip a region between compact and expanded.

        Args:
            index: Affordance index (``data-toggle-index``)
            recursive: Apply the new state to every nested region as well

        Returns:
            The new expanded state.

        Raises:
            IndexError: If no affordance has this index.
        """
        if not 0 <= index < len(self.toggles):
            raise IndexError(index)
        target = self.toggles[index]
        expanded = not target.expanded
        self._apply(target, expanded)
        if recursive:
            for other in self.toggles:
                if other.region.is_descendant_of(target.region):
                    self._apply(other, expanded)
        return expanded

    def to_html(self) -> str:
        return self.root.to_html()

    def text(self) -> str:
        """Plain text of the fragment, with compact regions elided."""
        return _visible_text(self.root).strip("\n")

    def __len__(self) -> int:
        return len(self.toggles)


def _visible_text(element: Element) -> str:
    if element.tag == "samp" and element.has_class(COMPACT_CLASS):
        return "…"
    if element.tag in RAW_TEXT_ELEMENTS:
        return ""
    return "".join(_visible_text(c) if isinstance(c, Element) else c for c in element.children)


def adapt_widget(markup: str) -> EmbeddedWidget:
    """Wrap and wire a fragment in one step."""
    widget = EmbeddedWidget.from_markup(markup)
    widget.wire()
    return widget
