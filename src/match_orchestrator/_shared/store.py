# Area: Shared
"""
match_orchestrator._shared.store — Key/value store abstraction
==============================================================

All mutable state lives behind a small get/put/delete/list interface so
that a persistent backend can replace the in-memory one without touching
the matchmaking or rating algorithms. Repositories extend BaseRepository
and own exactly one store each.
"""

from typing import Dict, Generic, List, Optional, Protocol, TypeVar

V = TypeVar("V")


class KeyValueStore(Protocol[V]):
    """Protocol for the storage backends used by repositories."""

    def get(self, key: str) -> Optional[V]:
        ...

    def put(self, key: str, value: V) -> None:
        ...

    def delete(self, key: str) -> bool:
        ...

    def list(self) -> List[V]:
        ...


class InMemoryStore(Generic[V]):
    """
    Process-lifetime store backed by a dict.

    Values are returned by reference; iteration order is insertion order.
    """

    def __init__(self) -> None:
        self._items: Dict[str, V] = {}

    def get(self, key: str) -> Optional[V]:
        return self._items.get(key)

    def put(self, key: str, value: V) -> None:
        self._items[key] = value

    def delete(self, key: str) -> bool:
        """Remove a key. Returns False if it was not present."""
        return self._items.pop(key, None) is not None

    def list(self) -> List[V]:
        return list(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items


class BaseRepository(Generic[V]):
    """
    Base class for repositories.

    Provides common store access; subclasses add the domain queries.
    """

    def __init__(self, store: Optional[KeyValueStore[V]] = None):
        """
        Initialize repository.

        Args:
            store: Storage backend. Defaults to a fresh InMemoryStore.
        """
        self._store: KeyValueStore[V] = store if store is not None else InMemoryStore()

    def _get(self, key: str) -> Optional[V]:
        return self._store.get(key)

    def _put(self, key: str, value: V) -> None:
        self._store.put(key, value)

    def _delete(self, key: str) -> bool:
        return self._store.delete(key)

    def _all(self) -> List[V]:
        return self._store.list()
