"""
Evaluation scope shared by every template of one render chain.

bind() copies the caller's data once per top-level render; loops layer
their variables on top with Scope.child() without touching the parent.
"""

from __future__ import annotations

from collections import ChainMap
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any, Iterator, Optional

from .errors import ScopeError

# Returned by Scope.lookup() for undefined paths when no default is given
MISSING: Any = object()


class Scope(Mapping):
    """
    Read-only name -> value mapping visible to template bodies.
    """

    def __init__(self, values: Mapping[str, Any], parent: Optional[Scope] = None):
        self._values = MappingProxyType(dict(values))
        self._parent = parent
        if parent is None:
            self._chain: ChainMap = ChainMap(self._values)
        else:
            self._chain = parent._chain.new_child(self._values)

    def __getitem__(self, key: str) -> Any:
        return self._chain[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._chain)

    def __len__(self) -> int:
        return len(self._chain)

    def __repr__(self) -> str:
        return f"Scope({dict(self._chain)!r})"

    @property
    def parent(self) -> Optional[Scope]:
        return self._parent

    def child(self, values: Mapping[str, Any]) -> Scope:
        """New scope with `values` layered over this one."""
        return Scope(values, parent=self)

    def lookup(self, path: str, default: Any = MISSING) -> Any:
        """
        Resolves a dotted path: user.name, items.0, order.total.

        Each segment after the first is tried as a mapping key (digit
        segments also as integer keys), then as an integer index into a
        sequence, then as a public attribute.
        """
        head, *rest = path.split(".")
        if head not in self._chain:
            return default

        value = self._chain[head]
        for segment in rest:
            value = _step(value, segment)
            if value is MISSING:
                return default
        return value


def _step(value: Any, segment: str) -> Any:
    if isinstance(value, Mapping):
        if segment in value:
            return value[segment]
        # Integer keys: {0: "a"} is reached by items.0
        if segment.isdigit() and int(segment) in value:
            return value[int(segment)]
        return MISSING
    if segment.isdigit() and isinstance(value, Sequence) and not isinstance(value, str):
        index = int(segment)
        return value[index] if index < len(value) else MISSING
    if segment.startswith("_"):
        return MISSING
    return getattr(value, segment, MISSING)


def bind(data: Optional[Mapping[str, Any]]) -> Scope:
    """
    Builds the root scope of a render from its data mapping.

    Raises:
        ScopeError: If data is not a mapping or has non-string keys
    """
    if data is None:
        return Scope({})
    if not isinstance(data, Mapping):
        raise ScopeError(f"Render data must be a mapping, got {type(data).__name__}")
    bad = [k for k in data if not isinstance(k, str)]
    if bad:
        raise ScopeError(f"Render data keys must be strings, got {bad!r}")
    return Scope(data)


__all__ = ["Scope", "bind", "MISSING"]
