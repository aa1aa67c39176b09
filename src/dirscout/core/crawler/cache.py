"""
Directory type cache for the crawler.
"""

import logging
from collections import OrderedDict

logger = logging.getLogger(__name__)


class DirectoryTypeCache:
    """
    Bounded LRU mapping of absolute path -> is-directory.

    Entries are never invalidated; a path is assumed not to change type
    while the cache is alive. Only touched from the event-loop thread.

    Attributes:
        max_entries: Entry count above which the least recently used entry is evicted
    """

    def __init__(self, max_entries: int = 100_000):
        if max_entries <= 0:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self._max_entries = max_entries
        self._entries: OrderedDict[str, bool] = OrderedDict()
        self._hits = 0
        self._misses = 0

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def get(self, path: str) -> bool | None:
        """Return the cached type for a path, or None if unknown."""
        value = self._entries.get(path)
        if value is None:
            self._misses += 1
            return None
        self._entries.move_to_end(path)
        self._hits += 1
        return value

    def set(self, path: str, is_dir: bool) -> None:
        self._entries[path] = is_dir
        self._entries.move_to_end(path)
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()
        self._hits = 0
        self._misses = 0

    def stats(self) -> dict[str, int]:
        """Get cache statistics."""
        return {
            "entries": len(self._entries),
            "max_entries": self._max_entries,
            "hits": self._hits,
            "misses": self._misses,
        }
