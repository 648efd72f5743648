"""Convert an object graph to an annotated, indented text tree.

Each composite gets a header line with its type name and child count, each
leaf a line with its rendered value. Output stops at a depth limit and at
circular references.

Usage:
    print("\n".join(Dump().convert(user)))

    User (2) {
        [name] str (5) => "Alice"
        [address] Address (1) {
            [city] str (6) => "Berlin"
        }
    }
"""

from __future__ import annotations

from typing import Any

from entitymarshal.convert.base import Convertible, GraphWalker, children, is_leaf

DEPTH_PLACEHOLDER = "... depth limit reached"
CYCLE_PLACEHOLDER = "... circular reference omitted"


def _runtime_type(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__qualname__


class Dump(GraphWalker):
    """Line-oriented tree converter.

    Args:
        max_depth: Nesting depth at which composites are replaced with a
            placeholder (0 = no limit).
        indent: Indentation string for one level.
    """

    def __init__(self, max_depth: int = 5, indent: str = "    ") -> None:
        super().__init__()
        self.max_depth = max_depth
        self.indent = indent
        self._out: list[str] = []

    def convert(self, root: Any) -> list[str]:
        """Render root as a list of lines."""
        self._reset()
        self._out = []
        self._recurse(root, None, None)
        return self._out

    def _recurse(self, node: Any, name: Any, type_name: str | None) -> None:
        if is_leaf(node):
            self._out.append(self._leaf(node, name, type_name))
            return

        type_name = type_name or _runtime_type(node)

        if self.max_depth > 0 and self.depth >= self.max_depth:
            self._out.append(f"{self._definition(type_name, None, name)} {DEPTH_PLACEHOLDER}")
            return

        if self._is_circular(node):
            self._out.append(f"{self._definition(type_name, None, name)} {CYCLE_PLACEHOLDER}")
            return

        pad = self.indent * self.depth
        items = list(children(node))
        self._out.append(f"{self._definition(type_name, len(items), name)} {{")
        self._enter(node)
        try:
            for key, child in items:
                self._recurse(child, key, self._child_type(node, key, child))
        finally:
            self._leave(node)
        self._out.append(f"{pad}}}")

    @staticmethod
    def _child_type(node: Any, key: Any, child: Any) -> str | None:
        if isinstance(node, Convertible):
            return node.typeof(key) or None
        if isinstance(child, Convertible) and not isinstance(child, type):
            return child.type_id()
        return None

    def _definition(self, type_name: str, count: int | None, name: Any) -> str:
        pad = self.indent * self.depth
        name_part = f"[{name}] " if name is not None and name != "" else ""
        count_part = f" ({count})" if count is not None else ""
        return f"{pad}{name_part}{type_name}{count_part}"

    def _leaf(self, value: Any, name: Any, type_name: str | None) -> str:
        type_name = type_name or _runtime_type(value)
        if isinstance(value, str):
            rendered = f'"{value}"'
            count = len(value)
        elif isinstance(value, bool):
            rendered = "true" if value else "false"
            count = len(rendered)
        elif value is None:
            rendered = "null"
            count = 0
        else:
            rendered = str(value)
            count = len(rendered)
        return f"{self._definition(type_name, count, name)} => {rendered}"
