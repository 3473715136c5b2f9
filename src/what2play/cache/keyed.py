"""
Process-lifetime keyed memory cache.

Entries are never evicted or invalidated. Each cache owns its own
read/write lock: lookups run concurrently, writes are exclusive.

Values are shared, not copied: whatever a lookup returns is the
cached object itself and must be treated as read-only.
"""

import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Generic, Hashable, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class ReadWriteLock:
    """Many readers or one writer."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            # pending writers go first
            while self._writing or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            while self._writing or self._readers > 0:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


class KeyedCache(Generic[K, V]):
    """
    Thread-safe single-type memory cache.

    Example:
        >>> prices: KeyedCache[int, Price] = KeyedCache("prices")
        >>> prices.set(570, Price("USD", 0, 0, 0))
        >>> value, found = prices.get(570)
    """

    def __init__(self, name: str = "cache") -> None:
        self.name = name
        self._entries: dict[K, V] = {}
        self._lock = ReadWriteLock()

    def get(self, key: K) -> tuple[V | None, bool]:
        """
        Return ``(value, True)`` on a hit and ``(None, False)`` on a miss.

        The value is the cached object, not a copy; don't mutate it.
        """
        with self._lock.read():
            if key in self._entries:
                return self._entries[key], True
            return None, False

    def get_many(self, keys: Iterable[K]) -> tuple[dict[K, V], list[K]]:
        """
        Look up several keys under a single read lock.

        Returns:
            Hits as a mapping, and the missing keys in input order
        """
        hits: dict[K, V] = {}
        misses: list[K] = []
        with self._lock.read():
            for key in keys:
                if key in self._entries:
                    hits[key] = self._entries[key]
                else:
                    misses.append(key)
        return hits, misses

    def set(self, key: K, value: V) -> None:
        with self._lock.write():
            self._entries[key] = value

    def set_many(self, entries: dict[K, V]) -> None:
        with self._lock.write():
            self._entries.update(entries)

    def __contains__(self, key: object) -> bool:
        with self._lock.read():
            return key in self._entries

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entries)

    def __repr__(self) -> str:
        return f"KeyedCache(name={self.name!r}, size={len(self)})"
