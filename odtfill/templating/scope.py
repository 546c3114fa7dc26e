from __future__ import annotations

from collections import ChainMap
from collections.abc import Mapping
from typing import Any, Iterator


class Scope(Mapping):
    """
    Read-only view of the data visible to marker expressions.

    Loop iterations extend it with bind(), which returns a child scope
    and leaves the parent untouched, so sibling iterations never see
    each other's bindings.
    """

    __slots__ = ("_chain",)

    def __init__(self, data: Mapping | None = None, *, _chain: ChainMap | None = None):
        if _chain is not None:
            self._chain = _chain
            return
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise TypeError(f"Scope data must be a mapping, got {type(data).__name__}")
        self._chain = ChainMap(data)

    def bind(self, name: str, value: Any) -> Scope:
        return Scope(_chain=self._chain.new_child({name: value}))

    def __getitem__(self, key: str) -> Any:
        return self._chain[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._chain)

    def __len__(self) -> int:
        return len(self._chain)

    def __repr__(self) -> str:
        return f"Scope({dict(self._chain)!r})"


__all__ = ["Scope"]
