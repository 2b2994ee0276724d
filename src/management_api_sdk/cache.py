"""Shared token cache.

One bearer token per deployment, stored under a fixed group and key so
every client instance reads and refreshes the same slot. No TTL is kept
here: a stale token is discovered when it fails to decode or lacks the
required scope, and the client deletes it then.
"""

from __future__ import annotations

import threading
from typing import Protocol, runtime_checkable


@runtime_checkable
class TokenCache(Protocol):
    """Key-value cache namespaced by a group identifier."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryTokenCache:
    """Thread-safe in-process cache.

    Each operation is atomic; refreshes are not serialized, so two clients
    racing on an empty cache may both fetch a token and the last write wins.
    """

    def __init__(self, group: str = "management_api") -> None:
        self.group = group
        self._values: dict[str, str] = {}
        self._lock = threading.RLock()

    def _namespaced(self, key: str) -> str:
        return f"{self.group}:{key}"

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(self._namespaced(key))

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[self._namespaced(key)] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._values.pop(self._namespaced(key), None)

    def clear(self) -> None:
        """Drop every entry in this group."""
        with self._lock:
            self._values.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)


_shared_caches: dict[str, MemoryTokenCache] = {}
_shared_lock = threading.Lock()


def get_shared_cache(group: str = "management_api") -> MemoryTokenCache:
    """Process-wide cache for ``group``, created on first use."""
    with _shared_lock:
        cache = _shared_caches.get(group)
        if cache is None:
            cache = MemoryTokenCache(group)
            _shared_caches[group] = cache
        return cache
