"""Bounded LRU cache with statistics.

Used for memoising pure, repeatable engine work (parsing source text)
without letting a long notebook session grow memory without limit.
"""

from typing import Any, Callable, Generic, TypeVar
from collections import OrderedDict
from dataclasses import dataclass

T = TypeVar("T")


@dataclass
class Stats:
    """Cache statistics."""

    size: int = 0
    max_size: int = 0
    hits: int = 0
    misses: int = 0
    evictions: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate hit rate (0.0 to 1.0)."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        """Export as dictionary."""
        return {
            "size": self.size,
            "max_size": self.max_size,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "hit_rate": self.hit_rate,
        }


class LRUCache(Generic[T]):
    """
    LRU cache keyed by strings.

    Examples:
        >>> cache = LRUCache[str](max_size=2)
        >>> cache.get_or_compute("b", lambda key: key.upper())
        'B'
        >>> cache.get_or_compute("b", lambda key: key.lower())
        'B'
        >>> cache.stats.hits
        1
    """

    def __init__(self, max_size: int = 100):
        """
        Initialize LRU cache.

        Args:
            max_size: Maximum number of entries
        """
        if max_size <= 0:
            raise ValueError("max_size must be positive")

        self.max_size = max_size
        self._cache: OrderedDict[str, T] = OrderedDict()
        self._stats = Stats(max_size=max_size)

    def set(self, key: str, value: T) -> None:
        """Cache value, evicting the least recently used entry when full."""
        if key in self._cache:
            del self._cache[key]

        self._cache[key] = value

        if len(self._cache) > self.max_size:
            self._cache.popitem(last=False)
            self._stats.evictions += 1

        self._stats.size = len(self._cache)

    def get_or_compute(self, key: str, factory: Callable[[str], T]) -> T:
        """
        Return the cached value for key, computing and storing it on a miss.

        Exceptions raised by factory propagate and nothing is cached.
        """
        if key in self._cache:
            self._cache.move_to_end(key)
            self._stats.hits += 1
            return self._cache[key]

        self._stats.misses += 1
        value = factory(key)
        self.set(key, value)
        return value

    @property
    def stats(self) -> Stats:
        """Get cache statistics."""
        return self._stats

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: str) -> bool:
        """Check if key exists (doesn't update LRU order)."""
        return key in self._cache


__all__ = ["LRUCache", "Stats"]
