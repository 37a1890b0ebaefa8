from __future__ import annotations

from collections.abc import Hashable
from collections.abc import Iterable
from collections.abc import Iterator
from typing import Generic
from typing import TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class Graph(Generic[K, V]):
    """An immutable keyed adjacency structure.

    Every declared entry maps a key to a value and to the keys it points to.
    Neighbor keys need not be declared themselves.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: dict[K, tuple[V, Iterable[K]]]) -> None:
        self._entries: dict[K, tuple[V, tuple[K, ...]]] = {
            key: (value, tuple(neighbors)) for key, (value, neighbors) in entries.items()
        }

    @classmethod
    def from_edges(cls, triples: Iterable[tuple[K, V, Iterable[K]]]) -> Graph[K, V]:
        """Build a graph from `(key, value, neighbor keys)` triples.

        A key given more than once keeps its last value and neighbors.
        """
        entries: dict[K, tuple[V, Iterable[K]]] = {}
        for key, value, neighbors in triples:
            entries[key] = (value, tuple(dict.fromkeys(neighbors)))
        return cls(entries)

    @property
    def size(self) -> int:
        return len(self._entries)

    def get(self, key: K) -> V | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        return entry[0]

    def neighbors(self, key: K) -> tuple[K, ...]:
        entry = self._entries.get(key)
        if entry is None:
            return ()
        return entry[1]

    def items(self) -> Iterator[tuple[K, V]]:
        for key, (value, _) in self._entries.items():
            yield key, value

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[K]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"Graph(size={self.size})"
