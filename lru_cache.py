from collections import OrderedDict
from dataclasses import dataclass
import logging
from typing import Generic, Iterator, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


@dataclass
class Entry(Generic[V]):
    """
    A cached value together with its recency rank.

    Higher rank means more recently used. Ranks are handed out by the
    owning cache and are unique among its live entries.
    """

    value: V
    rank: int


class LRUCache(Generic[K, V]):
    """
    A fixed-capacity LRU (Least Recently Used) cache.

    Every rank-affecting operation (a `get` hit, or any `put`) advances a
    monotonic counter and stamps the touched entry with the new value, so
    the entry with the lowest rank is always the least recently used one.

    Entries are kept in an OrderedDict in the same order as their ranks:
    each touched entry is moved to the end when it receives the newest rank.
    That makes eviction of the lowest-rank entry O(1) while the rank numbers
    stay exactly those of the counter model.

    Not thread-safe. The caller owns the cache exclusively.
    """

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError("capacity must be positive")

        self._capacity = capacity
        self._cache: "OrderedDict[K, Entry[V]]" = OrderedDict()
        self._next_rank = 0

        # Metrics
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def next_rank(self) -> int:
        """The last rank handed out (0 for a cache that was never touched)."""
        return self._next_rank

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key) -> bool:
        # Membership never counts as an access
        return key in self._cache

    def __repr__(self) -> str:
        items = ", ".join(
            f"{key!r}: ({entry.value!r}, {entry.rank})" for key, entry in self.entries()
        )
        return f"LRUCache(capacity={self._capacity}, {{{items}}})"

    def get(self, key: K) -> Optional[V]:
        """
        Return the value for `key` if present, otherwise None.
        Accessing a key marks it as the most recently used.
        """
        entry = self._cache.get(key)
        if entry is None:
            self._misses += 1
            return None

        self._hits += 1
        self._touch(key, entry)
        return entry.value

    def put(self, key: K, value: V) -> Optional[V]:
        """
        Insert or update a key-value pair.

        Returns the previous value when `key` was already cached, None when
        it is a new key. Inserting a new key into a full cache evicts the
        least recently used entry first.
        """
        entry = self._cache.get(key)
        if entry is not None:
            old_value = entry.value
            entry.value = value
            self._touch(key, entry)
            return old_value

        if len(self._cache) >= self._capacity:
            self._evict_least_recently_used()

        self._next_rank += 1
        self._cache[key] = Entry(value=value, rank=self._next_rank)
        return None

    def peek(self, key: K) -> Optional[Entry[V]]:
        """
        Return the entry (value and rank) for `key` without touching it.
        """
        return self._cache.get(key)

    def entries(self) -> Iterator[Tuple[K, Entry[V]]]:
        """
        Iterate over (key, entry) pairs from least to most recently used.
        """
        return iter(list(self._cache.items()))

    def _touch(self, key: K, entry: Entry[V]):
        self._next_rank += 1
        entry.rank = self._next_rank
        self._cache.move_to_end(key)

    def _evict_least_recently_used(self):
        """
        Remove the entry with the lowest rank from the cache.
        """
        key, entry = self._cache.popitem(last=False)
        self._evictions += 1
        logger.debug("Evicted %r (rank %d)", key, entry.rank)

    def get_stats(self) -> dict:
        """
        Return a snapshot of cache metrics.
        """
        total = self._hits + self._misses
        hit_ratio = (self._hits / total) if total > 0 else 0.0
        return {
            "hits": self._hits,
            "misses": self._misses,
            "evictions": self._evictions,
            "hit_ratio": hit_ratio,
        }
