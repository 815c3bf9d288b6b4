"""Time-bounded response cache keyed by strings like ``shops:all``."""

import time

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_TTL = 30.0  # seconds


class CacheStore:
    """In-memory cache with per-entry TTL.

    An entry is fresh while ``now - stored_at <= ttl``; ``get`` evicts it on
    the first read after that.
    """

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._entries = {}
        self._version = 0
        # Latest version at which each pattern (None meaning everything) was invalidated
        self._invalidations = {}

    def get(self, key):
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("cache_miss", key=key)
            return None

        value, stored_at, ttl = entry
        if self._clock() - stored_at > ttl:
            del self._entries[key]
            logger.debug("cache_expired", key=key)
            return None

        logger.debug("cache_hit", key=key)
        return value

    def set(self, key, value, ttl=DEFAULT_TTL):
        self._entries[key] = (value, self._clock(), ttl)

    def invalidate(self, pattern=None):
        """Drop every entry, or those whose key contains ``pattern``."""
        self._version += 1
        self._invalidations[pattern] = self._version
        if pattern is None:
            removed = len(self._entries)
            self._entries.clear()
        else:
            keys = [key for key in self._entries if pattern in key]
            for key in keys:
                del self._entries[key]
            removed = len(keys)

        logger.debug("cache_invalidated", pattern=pattern, removed=removed)
        return removed

    def mark(self):
        """Opaque token for ``invalidated_since``; take it before fetching a value."""
        return self._version

    def invalidated_since(self, key, mark):
        """Whether an invalidation covering ``key`` happened after ``mark`` was taken.

        A value fetched across such an invalidation is stale and must not be stored.
        """
        return any(
            version > mark and (pattern is None or pattern in key)
            for pattern, version in self._invalidations.items()
        )

    def __contains__(self, key):
        return self.get(key) is not None

    def __len__(self):
        return len(self._entries)
