"""
Tag-aware response cache.

List endpoints store their computed payload under a key derived from the
request parameters and label the entry with a resource tag
(``productsCache``, ``usersCache``). Mutating endpoints evict everything
carrying that tag in one call instead of tracking individual keys.

Storage is delegated to ``cachetools``: an ``LRUCache`` bounded by size, or a
``TTLCache`` when a time-to-live is configured.
"""
import logging
import threading
from collections import defaultdict
from typing import Any, Callable, Dict, Iterable, Optional, Set

from cachetools import LRUCache, TTLCache

from bilemo.core.config import settings

logger = logging.getLogger(__name__)

PRODUCTS_TAG = "productsCache"
USERS_TAG = "usersCache"


class TagAwareCache:
    """
    Key/value cache with grouped eviction by tag.

    Each tag carries a generation counter bumped on invalidation. A value whose
    computation overlapped an invalidation of one of its tags is handed back to
    the caller but never stored, so an eviction cannot be undone by a slow
    reader finishing after it.
    """

    def __init__(self, maxsize: int = 1024, ttl: Optional[int] = None):
        if ttl:
            self._store = TTLCache(maxsize=maxsize, ttl=ttl)
        else:
            self._store = LRUCache(maxsize=maxsize)
        self._tags: Dict[str, Set[str]] = defaultdict(set)
        self._generations: Dict[str, int] = defaultdict(int)
        self._lock = threading.RLock()

    def get(self, key: str, compute: Callable[[], Any], tags: Iterable[str] = ()) -> Any:
        """
        Return the value cached under ``key``, computing and storing it on a miss.
        """
        tags = tuple(tags)
        with self._lock:
            if key in self._store:
                logger.debug("Cache hit for %s", key)
                return self._store[key]
            started_at = {tag: self._generations[tag] for tag in tags}

        logger.debug("Cache miss for %s", key)
        value = compute()

        with self._lock:
            if any(self._generations[tag] != gen for tag, gen in started_at.items()):
                logger.debug("Discarding %s, a tag was invalidated during computation", key)
                return value
            self._store[key] = value
            self._prune_index()
            for tag in tags:
                self._tags[tag].add(key)
        return value

    def _prune_index(self) -> None:
        # Forget keys the store has evicted or expired, so the index stays within maxsize
        for tag in list(self._tags):
            live = {key for key in self._tags[tag] if key in self._store}
            if live:
                self._tags[tag] = live
            else:
                del self._tags[tag]

    def invalidate_tags(self, tags: Iterable[str]) -> None:
        with self._lock:
            for tag in tags:
                self._generations[tag] += 1
                keys = self._tags.pop(tag, set())
                for key in keys:
                    self._store.pop(key, None)
                logger.info("Invalidated cache tag %s (%d entries)", tag, len(keys))

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self._tags.clear()
            for tag in list(self._generations):
                self._generations[tag] += 1


cache = TagAwareCache(maxsize=settings.CACHE_MAXSIZE, ttl=settings.CACHE_TTL_SECONDS)


def get_cache() -> TagAwareCache:
    return cache
