import threading
from typing import Callable, Dict, Generic, Hashable, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class CompatibilityCache(Generic[K, V]):
    """Thread-safe compute-once map.

    ``compute`` runs outside the lock, so two racing callers may both compute a
    key; the first value published wins and every later reader sees it until
    :meth:`clear`. A value whose computation overlapped a :meth:`clear` is
    never published; it is computed again instead.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[K, V] = {}
        self._generation = 0

    def get(self, key: K) -> Optional[V]:
        with self._lock:
            return self._entries.get(key)

    def get_or_compute(self, key: K, compute: Callable[[K], V]) -> V:
        while True:
            with self._lock:
                if key in self._entries:
                    return self._entries[key]
                generation = self._generation
            value = compute(key)
            with self._lock:
                if generation == self._generation:
                    return self._entries.setdefault(key, value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._generation += 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
