"""Query cache the client republishes derived views into."""

from __future__ import annotations

import copy
from typing import Any, Hashable, Protocol


class CacheObserver(Protocol):  # pragma: no cover - structural typing helper
    def set_query_data(self, key: tuple[Hashable, ...], value: Any) -> None: ...


class QueryCache:
    """Minimal keyed cache standing in for a reactive consumer's store."""

    def __init__(self) -> None:
        self._data: dict[tuple[Hashable, ...], Any] = {}
        self.writes = 0

    def set_query_data(self, key: tuple[Hashable, ...], value: Any) -> None:
        self._data[key] = copy.deepcopy(value)
        self.writes += 1

    def get_query_data(self, key: tuple[Hashable, ...]) -> Any:
        return copy.deepcopy(self._data.get(key))

    def keys(self) -> list[tuple[Hashable, ...]]:
        return list(self._data)

    def clear(self) -> None:
        self._data.clear()
