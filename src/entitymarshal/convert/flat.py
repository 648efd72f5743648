"""Convert an object graph to plain nested containers.

Entities, mappings and objects become dicts, lists and tuples keep their
kind, and leaves pass through unchanged.

Usage:
    data = FlatArray().convert(user)
    data = FlatArray(graceful=True).convert(cyclic)  # cycles become None
"""

from __future__ import annotations

from typing import Any

from entitymarshal.convert.base import Convertible, GraphWalker, children, is_leaf
from entitymarshal.core.errors import CircularReferenceError


class FlatArray(GraphWalker):
    """Flat associative converter with no depth limit.

    Args:
        graceful: Emit None for circular references instead of raising.
    """

    def __init__(self, graceful: bool = False) -> None:
        super().__init__()
        self.graceful = graceful

    def convert(self, root: Any) -> Any:
        """Convert root to nested dicts, lists and tuples.

        Raises:
            CircularReferenceError: On a cycle when not graceful.
        """
        self._reset()
        return self._recurse(root, "", root)

    def _recurse(self, node: Any, key: Any, parent: Any) -> Any:
        if is_leaf(node):
            return node

        if self._is_circular(node):
            if not self.graceful:
                raise CircularReferenceError(str(key), _type_id(parent), action="convert")
            return None

        self._enter(node)
        try:
            if isinstance(node, (list, tuple, set, frozenset)):
                items = [self._recurse(child, index, node) for index, child in enumerate(node)]
                result: Any = tuple(items) if isinstance(node, tuple) else items
            else:
                result = {
                    name: self._recurse(child, name, node) for name, child in children(node)
                }
        finally:
            self._leave(node)
        return result


def _type_id(node: Any) -> str:
    return node.type_id() if isinstance(node, Convertible) else type(node).__qualname__
