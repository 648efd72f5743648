"""Converter strategy contract and cycle-safe traversal helpers.

Converters walk an object graph depth-first. A per-call identity stack
holds the composites currently being visited; meeting one of them again
means the graph is cyclic.

Usage:
    lines = entity.convert(Dump(max_depth=3))
    data = entity.convert(FlatArray(graceful=True))
"""

from __future__ import annotations

import dataclasses
import enum
import functools
import inspect
import types
from collections.abc import Iterator, Mapping
from typing import Any, Protocol, runtime_checkable

from entitymarshal.core.marshal.types import is_pydantic_model


@runtime_checkable
class ConverterStrategy(Protocol):
    """Renders an object graph into an external representation."""

    def convert(self, root: Any) -> Any:
        """Convert root and everything reachable from it."""
        ...


@runtime_checkable
class Convertible(Protocol):
    """Data holder exposing declared fields to converters."""

    @classmethod
    def type_id(cls) -> str: ...

    def keys(self) -> list[str]: ...

    def get(self, name: str) -> Any: ...

    def typeof(self, name: str) -> str: ...


def is_leaf(value: Any) -> bool:
    """True if value has no enumerable children."""
    if value is None or isinstance(value, (str, bytes, bytearray, int, float, bool, enum.Enum)):
        return True
    # Classes and functions are values, not nodes.
    if isinstance(value, (type, types.ModuleType, functools.partial)) or inspect.isroutine(value):
        return True
    if isinstance(value, (Mapping, list, tuple, set, frozenset, Convertible)):
        return False
    if dataclasses.is_dataclass(value) or is_pydantic_model(type(value)):
        return False
    return not (hasattr(value, "__dict__") or hasattr(type(value), "__slots__"))


def children(node: Any) -> Iterator[tuple[Any, Any]]:
    """Enumerate (key, child) pairs of a composite node in natural order."""
    if isinstance(node, Convertible):
        for name in node.keys():
            yield name, node.get(name)
    elif isinstance(node, Mapping):
        yield from node.items()
    elif isinstance(node, (list, tuple, set, frozenset)):
        yield from enumerate(node)
    elif dataclasses.is_dataclass(node):
        for f in dataclasses.fields(node):
            yield f.name, getattr(node, f.name)
    elif is_pydantic_model(type(node)):
        for name in type(node).model_fields:
            yield name, getattr(node, name, None)
    else:
        yield from vars(node).items() if hasattr(node, "__dict__") else ()
        for name in getattr(type(node), "__slots__", ()):
            if name != "__dict__" and hasattr(node, name):
                yield name, getattr(node, name)


class GraphWalker:
    """Base for converters: tracks the identity of composites being visited."""

    def __init__(self) -> None:
        self._visiting: list[int] = []

    def _reset(self) -> None:
        self._visiting = []

    def _is_circular(self, node: Any) -> bool:
        return id(node) in self._visiting

    def _enter(self, node: Any) -> None:
        self._visiting.append(id(node))

    def _leave(self, node: Any) -> None:
        self._visiting.pop()

    @property
    def depth(self) -> int:
        """Number of composites currently being visited."""
        return len(self._visiting)
