"""A small insertion-ordered mapping whose keys only need to support equality."""

from __future__ import annotations

from typing import Callable, Generic, Iterable, Iterator, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class OrderedMap(Generic[K, V]):
    """Mapping stored as a list of pairs, preserving insertion order.

    Keys are compared with ``==``, so they need not be hashable.
    """

    def __init__(self, items: Iterable[tuple[K, V]] = ()) -> None:
        self._entries: list[list] = []
        for key, value in items:
            self.insert(key, value)

    def _find(self, key: K) -> list | None:
        return next((entry for entry in self._entries if entry[0] == key), None)

    def get(self, key: K) -> V | None:
        """Return the value stored under ``key``, or None if absent."""
        entry = self._find(key)
        return None if entry is None else entry[1]

    def insert(self, key: K, value: V) -> None:
        """Store ``value`` under ``key``, replacing any previous value in place."""
        entry = self._find(key)
        if entry is None:
            self._entries.append([key, value])
        else:
            entry[1] = value

    def get_or_insert_with(self, key: K, factory: Callable[[], V]) -> V:
        """Return the value under ``key``, inserting ``factory()`` first if absent."""
        entry = self._find(key)
        if entry is None:
            entry = [key, factory()]
            self._entries.append(entry)
        return entry[1]

    def __iter__(self) -> Iterator[tuple[K, V]]:
        return ((key, value) for key, value in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return self._find(key) is not None  # type: ignore[arg-type]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OrderedMap):
            return NotImplemented
        return list(self) == list(other)

    def __repr__(self) -> str:
        return f"OrderedMap({list(self)!r})"