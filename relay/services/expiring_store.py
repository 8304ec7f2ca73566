"""
In-memory keyed store with per-entry expiry.

Backs both the login token store and the rate limiters. Keys are hashed
into shards, each guarded by its own lock, so operations on the same key
are serialized while unrelated keys rarely contend.

Expired entries are treated as absent on every read. sweep_expired() only
reclaims memory; it is never needed for correct results.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

V = TypeVar("V")


@dataclass
class Entry(Generic[V]):
    """A stored value and the monotonic time at which it stops existing."""

    key: str
    value: V
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class _Shard:
    __slots__ = ("lock", "entries")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.entries: dict[str, Entry[Any]] = {}


class KeyedExpiringStore(Generic[V]):
    """
    Thread-safe map of string keys to values with individual TTLs.

    Every operation completes in the time of a dict lookup plus one lock
    acquisition, so it can be called directly from async request handlers.
    """

    def __init__(self, shards: int = 16, clock: Callable[[], float] = time.monotonic):
        """
        Initialize the store.

        Args:
            shards: Number of independently locked partitions
            clock: Source of the current time in seconds (monotonic by default)
        """
        if shards < 1:
            raise ValueError("shards must be at least 1")
        self._shards = [_Shard() for _ in range(shards)]
        self._clock = clock

    def _shard(self, key: str) -> _Shard:
        return self._shards[hash(key) % len(self._shards)]

    def now(self) -> float:
        """Current time as seen by this store."""
        return self._clock()

    def put(self, key: str, value: V, ttl: float) -> None:
        """
        Insert or replace the entry for key.

        Args:
            key: Entry key
            value: Value to store
            ttl: Seconds until the entry expires
        """
        shard = self._shard(key)
        with shard.lock:
            shard.entries[key] = Entry(key, value, self._clock() + ttl)

    def get(self, key: str) -> V | None:
        """
        Return the value for key if present and not expired.

        An expired entry is reported as absent but left for the sweeper.
        """
        shard = self._shard(key)
        with shard.lock:
            entry = shard.entries.get(key)
            if entry is None or entry.is_expired(self._clock()):
                return None
            return entry.value

    def take_if_present(self, key: str) -> V | None:
        """
        Atomically read and remove the value for key.

        Of several callers racing on the same key, at most one receives
        the value; the others get None.
        """
        shard = self._shard(key)
        with shard.lock:
            entry = shard.entries.pop(key, None)
            if entry is None or entry.is_expired(self._clock()):
                return None
            return entry.value

    def mutate(self, key: str, fn: Callable[[V | None], tuple[V, float]]) -> V:
        """
        Atomically replace the value for key with one computed from it.

        Args:
            key: Entry key
            fn: Called with the current live value (or None) while the key's
                shard is locked; returns (new_value, ttl_seconds)

        Returns:
            The newly stored value
        """
        shard = self._shard(key)
        with shard.lock:
            now = self._clock()
            entry = shard.entries.get(key)
            current = None if entry is None or entry.is_expired(now) else entry.value
            value, ttl = fn(current)
            shard.entries[key] = Entry(key, value, now + ttl)
            return value

    def sweep_expired(self) -> int:
        """
        Remove every entry whose expiry has passed.

        Shards are swept one at a time so a sweep never holds more than
        one lock.

        Returns:
            Number of entries removed
        """
        removed = 0
        for shard in self._shards:
            with shard.lock:
                now = self._clock()
                expired = [key for key, entry in shard.entries.items() if entry.is_expired(now)]
                for key in expired:
                    del shard.entries[key]
                removed += len(expired)
        return removed

    def clear(self) -> None:
        """Drop all entries."""
        for shard in self._shards:
            with shard.lock:
                shard.entries.clear()

    def __len__(self) -> int:
        """Number of stored entries, including expired ones not yet swept."""
        total = 0
        for shard in self._shards:
            with shard.lock:
                total += len(shard.entries)
        return total
