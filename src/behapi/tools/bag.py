"""Resettable key/value holder for state shared between scenario steps."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any


class Bag(MutableMapping[str, Any]):
    """Mapping that can be restored to its initial content.

    Tag it ``behapi.bag`` with ``reset=True`` to have it cleared after every
    scenario.
    """

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._initial = dict(initial or {})
        self._data = dict(self._initial)

    def reset(self) -> None:
        self._data = dict(self._initial)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Bag({self._data!r})"
