"""Tree renderer for decoded JSON values.

Small containers below the root are rendered inline (expanded, no toggle) to
keep the tree compact; everything else becomes a collapsible node whose open
state comes from the OpenStateStore keyed by path.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from dumpviewer.errors import TreeTooDeepError
from dumpviewer.models import MAX_TREE_DEPTH, STRUCT_NAMESPACE, NodeKind, ParseNode

if TYPE_CHECKING:
    from dumpviewer.state import OpenStateStore

# Containers at or under these sizes render inline below the root
INLINE_ARRAY_LIMIT = 3
INLINE_OBJECT_LIMIT = 2


def escape_key(key: str) -> str:
    """Escape an object key for use as a path segment.

    ``[`` is escaped too so a key such as ``a[0]`` never collides with index
    0 of key ``a``.
    """
    return key.replace("~", "~0").replace("/", "~1").replace("[", "~2")


def scalar_text(value: Any) -> str:
    """JSON literal text for a scalar (``null``, ``true``, ``1.5``, ``"s"``)."""
    return json.dumps(value, ensure_ascii=False)


def summarize(kind: NodeKind, count: int) -> str:
    noun = "item" if kind is NodeKind.ARRAY else "property"
    if count == 1:
        return f"1 {noun}"
    plural = "items" if kind is NodeKind.ARRAY else "properties"
    return f"{count} {plural}"


class ValueTreeRenderer:
    """Builds ParseNode trees from decoded JSON values."""

    def __init__(self, store: OpenStateStore) -> None:
        self._store = store

    def render(self, value: Any, path: str = STRUCT_NAMESPACE) -> ParseNode:
        """Render a value whose root sits at ``path``.

        Raises:
            TreeTooDeepError: If the value nests deeper than MAX_TREE_DEPTH.
        """
        return self._build(value, path, key=None, depth=0)

    def _build(self, value: Any, path: str, key: str | int | None, depth: int) -> ParseNode:
        if depth > MAX_TREE_DEPTH:
            raise TreeTooDeepError(MAX_TREE_DEPTH)
        if isinstance(value, dict):
            kind = NodeKind.OBJECT
            items = [(k, v, f"{path}/{escape_key(str(k))}") for k, v in value.items()]
            limit = INLINE_OBJECT_LIMIT
        elif isinstance(value, list):
            kind = NodeKind.ARRAY
            items = [(i, v, f"{path}[{i}]") for i, v in enumerate(value)]
            limit = INLINE_ARRAY_LIMIT
        else:
            return ParseNode(kind=NodeKind.SCALAR, value=value, path=path, key=key)

        node = ParseNode(kind=kind, path=path, key=key)
        if not items:
            node.summary = "{}" if kind is NodeKind.OBJECT else "[]"
            return node

        node.children = [
            self._build(child, child_path, child_key, depth + 1)
            for child_key, child, child_path in items
        ]

        if depth > 0 and len(items) <= limit:
            node.inline = True
            node.open = True
            return node

        node.summary = summarize(kind, len(items))
        if depth == 0:
            # Roots open the first time their path is seen; later renders
            # read back whatever the user left.
            node.open = self._store.setdefault(path, True)
        else:
            node.open = self._store.is_open(path)
        return node
