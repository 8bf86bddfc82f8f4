"""In-memory TTL cache used by the sentiment and authority scorers.

The cache is never authoritative: losing an entry only costs a recomputation.
Concurrent misses on the same key are coalesced so the compute function runs
once per key while the entry is being filled.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import time
from collections import OrderedDict
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


def content_key(namespace: str, content: str) -> str:
    """Build a deterministic cache key from the MD5 digest of ``content``."""
    digest = hashlib.md5(content.encode("utf-8")).hexdigest()
    return f"{namespace}:{digest}"


class TTLCache:
    """Async-friendly in-memory cache with TTL and an optional LRU bound."""

    def __init__(
        self,
        default_ttl: int = 300,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._entries: OrderedDict[str, tuple[Any, float]] = OrderedDict()
        # key -> [lock, callers holding or waiting on it]
        self._locks: dict[str, list] = {}
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self._clock = clock

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self._lookup(key)[0]

    def _lookup(self, key: str) -> tuple[bool, Any]:
        entry = self._entries.get(key)
        if entry is None:
            return False, None
        value, expiry = entry
        if self._clock() >= expiry:
            del self._entries[key]
            return False, None
        self._entries.move_to_end(key)
        return True, value

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache if not expired."""
        return self._lookup(key)[1]

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Set value in cache with TTL (seconds)."""
        ttl = ttl if ttl is not None else self.default_ttl
        self._entries[key] = (value, self._clock() + ttl)
        self._entries.move_to_end(key)
        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted cache entry %s", evicted)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def cleanup_expired(self) -> int:
        """Remove all expired entries. Returns how many were dropped."""
        now = self._clock()
        expired = [k for k, (_, expiry) in self._entries.items() if now >= expiry]
        for key in expired:
            del self._entries[key]
        return len(expired)

    async def get_or_set(
        self,
        key: str,
        compute: Callable[[], Awaitable[Any]],
        ttl: Optional[int] = None,
    ) -> Any:
        """Return the cached value for ``key`` or compute, store and return it.

        A failing ``compute`` propagates to the caller and leaves no entry
        behind. Callers racing on the same missing key wait for the first
        computation and then read its stored result.
        """
        found, value = self._lookup(key)
        if found:
            return value

        entry = self._locks.get(key)
        if entry is None:
            entry = self._locks[key] = [asyncio.Lock(), 0]
        entry[1] += 1
        try:
            async with entry[0]:
                found, value = self._lookup(key)
                if found:
                    return value
                value = await compute()
                self.set(key, value, ttl)
                return value
        finally:
            entry[1] -= 1
            if entry[1] == 0 and self._locks.get(key) is entry:
                del self._locks[key]
