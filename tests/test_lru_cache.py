import logging

import pytest

from lru_cache import Entry, LRUCache


def _ranks(cache: LRUCache) -> dict:
    return {key: entry.rank for key, entry in cache.entries()}


def test_new_cache_is_empty() -> None:
    cache = LRUCache(3)
    assert len(cache) == 0
    assert cache.capacity == 3
    assert cache.next_rank == 0
    assert list(cache.entries()) == []


@pytest.mark.parametrize("capacity", [0, -1])
def test_non_positive_capacity_is_rejected(capacity: int) -> None:
    with pytest.raises(ValueError):
        LRUCache(capacity)


def test_put_and_get_basic() -> None:
    cache = LRUCache(2)
    assert cache.put("A", "value_a") is None
    assert cache.put("B", "value_b") is None
    assert cache.peek("A") == Entry(value="value_a", rank=1)
    assert cache.peek("B") == Entry(value="value_b", rank=2)

    assert cache.get("A") == "value_a"
    assert cache.get("B") == "value_b"
    assert _ranks(cache) == {"A": 3, "B": 4}


def test_puts_within_capacity_never_evict() -> None:
    cache = LRUCache(4)
    for i in range(4):
        cache.put(i, i * 10)
    cache.put(2, 200)

    assert len(cache) == 4
    assert cache.get_stats()["evictions"] == 0
    assert [cache.get(i) for i in range(4)] == [0, 10, 200, 30]


def test_put_updates_existing_value() -> None:
    cache = LRUCache(3)
    cache.put("A", "value_a")
    cache.put("B", "value_b")

    assert cache.put("A", "value_A") == "value_a"
    assert cache.peek("A") == Entry(value="value_A", rank=3)
    assert len(cache) == 2


def test_eviction_removes_least_recently_used() -> None:
    cache = LRUCache(2)
    cache.put("A", "value_a")
    cache.put("B", "value_b")
    cache.put("C", "value_c")

    assert "A" not in cache
    assert cache.get("B") == "value_b"
    assert cache.get("C") == "value_c"


def test_get_refreshes_recency_before_eviction() -> None:
    cache = LRUCache(2)
    cache.put("A", "value_a")
    cache.put("B", "value_b")
    assert cache.get("A") == "value_a"

    cache.put("C", "value_c")
    assert cache.get("B") is None
    assert cache.get("A") == "value_a"
    assert cache.get("C") == "value_c"


def test_eviction_picks_globally_lowest_rank() -> None:
    cache = LRUCache(3)
    cache.put("A", 1)
    cache.put("B", 2)
    cache.put("C", 3)
    cache.get("A")
    cache.put("B", 20)

    # C now holds the lowest rank
    cache.put("D", 4)
    assert set(key for key, _ in cache.entries()) == {"A", "B", "D"}
    assert cache.get_stats()["evictions"] == 1


def test_get_miss_has_no_side_effects() -> None:
    cache = LRUCache(2)
    cache.put("A", "value_a")
    before = _ranks(cache)

    assert cache.get("X") is None
    assert cache.next_rank == 1
    assert _ranks(cache) == before


def test_repeated_get_advances_rank() -> None:
    cache = LRUCache(3)
    cache.put("A", "value_a")
    cache.put("B", "value_b")
    cache.put("C", "value_c")
    assert _ranks(cache) == {"A": 1, "B": 2, "C": 3}

    for _ in range(4):
        cache.get("B")
    assert _ranks(cache) == {"A": 1, "B": 7, "C": 3}

    cache.get("A")
    assert _ranks(cache) == {"A": 8, "B": 7, "C": 3}


def test_rank_counter_survives_eviction() -> None:
    cache = LRUCache(1)
    cache.put("A", 1)
    cache.put("B", 2)
    cache.put("C", 3)

    assert cache.next_rank == 3
    assert cache.peek("C") == Entry(value=3, rank=3)


def test_peek_does_not_touch_rank() -> None:
    cache = LRUCache(2)
    cache.put("A", "value_a")
    cache.put("B", "value_b")

    assert cache.peek("A").rank == 1
    assert cache.peek("X") is None
    assert cache.next_rank == 2

    cache.put("C", "value_c")
    assert "A" not in cache


def test_entries_are_ordered_oldest_first() -> None:
    cache = LRUCache(3)
    cache.put("A", 1)
    cache.put("B", 2)
    cache.put("C", 3)
    cache.get("A")

    assert [key for key, _ in cache.entries()] == ["B", "C", "A"]


def test_scenario_from_walkthrough() -> None:
    cache = LRUCache(3)
    cache.put("A", "value_a")
    cache.put("B", "value_b")
    cache.put("C", "value_c")
    cache.get("A")

    assert cache.put("D", "value_d") is None
    assert "B" not in cache

    assert cache.put("C", "value_C_new") == "value_c"
    assert [key for key, _ in cache.entries()] == ["A", "D", "C"]
    assert cache.get("X") is None


def test_integer_and_bool_values() -> None:
    ints = LRUCache(3)
    bools = LRUCache(3)
    for i, flag in zip(range(1, 5), [True, False, True, False]):
        ints.put(i, i * 10)
        bools.put(i, flag)

    assert ints.get(1) is None
    assert [ints.get(i) for i in (2, 3, 4)] == [20, 30, 40]
    assert bools.get(1) is None
    assert [bools.get(i) for i in (2, 3, 4)] == [False, True, False]


def test_stats_count_hits_misses_and_evictions() -> None:
    cache = LRUCache(2)
    cache.put(1, "one")
    cache.put(2, "two")
    cache.get(1)
    cache.get(99)
    cache.put(3, "three")

    assert cache.get_stats() == {
        "hits": 1,
        "misses": 1,
        "evictions": 1,
        "hit_ratio": 0.5,
    }


def test_eviction_is_logged(caplog) -> None:
    cache = LRUCache(1)
    cache.put("A", 1)
    with caplog.at_level(logging.DEBUG, logger="lru_cache"):
        cache.put("B", 2)

    assert "Evicted 'A' (rank 1)" in caplog.text
