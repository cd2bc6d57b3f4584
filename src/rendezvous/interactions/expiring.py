"""A process-local key/value store whose entries expire after a fixed TTL.

Expiry is lazy: an expired entry is invisible to every read and is dropped
when it is touched. `sweep()` purges all expired entries at once for callers
that want memory bounded without waiting for reads. The clock is injectable
so timing behaviour is deterministic under test.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
import time


class ExpiringMap[K, V]:
    """Maps keys to values for ``ttl_seconds`` after each write.

    Single-process memory only. Concurrent writers to one key are not
    coordinated; the last write wins.
    """

    def __init__(
        self, ttl_seconds: float, *, clock: Callable[[], float] = time.monotonic
    ) -> None:
        """Initialize an empty map.

        Args:
            ttl_seconds: Lifetime of each entry, counted from its last `set`.
            clock: Monotonic time source in seconds.
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds: must be > 0, got {ttl_seconds!r}")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[K, tuple[float, V]] = {}

    def set(self, key: K, value: V) -> None:
        """Store ``value`` under ``key``, restarting its lifetime."""
        self._entries[key] = (self._clock() + self.ttl_seconds, value)

    def get(self, key: K) -> V | None:
        """Return the live value for ``key``, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def expires_at(self, key: K) -> float | None:
        entry = self._entries.get(key)
        return entry[0] if entry is not None else None

    def pop(self, key: K) -> V | None:
        value = self.get(key)
        self._entries.pop(key, None)
        return value

    def sweep(self) -> int:
        """Drop every expired entry and return how many were dropped."""
        now = self._clock()
        expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __contains__(self, key: object) -> bool:
        return self.get(key) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        """Number of stored entries, including expired ones not yet swept."""
        return len(self._entries)

    def __iter__(self) -> Iterator[K]:
        now = self._clock()
        return iter([k for k, (exp, _) in self._entries.items() if now < exp])
