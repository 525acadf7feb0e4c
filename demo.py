import argparse
import logging
import sys

from lru_cache import LRUCache
from file_persistence import FilePersistence


def format_entries(cache: LRUCache) -> str:
    """Render the live entries oldest first as `key=value(rank)`."""
    return "[" + ", ".join(
        f"{key}={entry.value}({entry.rank})" for key, entry in cache.entries()
    ) + "]"


def run_cache_operations(capacity: int) -> LRUCache:
    print(f"--- Cache operations (capacity {capacity}) ---")
    cache = LRUCache(capacity)

    cache.put("A", "value_a")
    cache.put("B", "value_b")
    cache.put("C", "value_c")
    print(f"After put A, B, C:      {format_entries(cache)}")

    cache.get("A")
    print(f"After get A:            {format_entries(cache)}")

    cache.put("D", "value_d")
    print(f"After put D:            {format_entries(cache)}")

    old = cache.put("C", "value_C_new")
    print(f"Previous value of C:    {old}")
    print(f"After update of C:      {format_entries(cache)}")

    print(f"get X (missing):        {cache.get('X')}")
    print(f"Stats:                  {cache.get_stats()}")
    print()
    return cache


def run_persistence_cycle(cache: LRUCache, path: str, capacity: int):
    persistence = FilePersistence()

    print(f"--- Writing cache to {path} ---")
    persistence.write(cache, path)

    print(f"--- Reading cache from {path} ---")
    loaded = persistence.read(capacity, path)
    print(f"Loaded:                 {format_entries(loaded)}")
    print()

    print("--- Put X and get D to change the order ---")
    loaded.put("X", "value_x")
    loaded.get("D")
    print(f"Modified:               {format_entries(loaded)}")
    print()

    print(f"--- Writing modified cache to {path} ---")
    persistence.write(loaded, path)

    print(f"--- Reading cache from {path} ---")
    reloaded = persistence.read(capacity, path)
    print(f"Loaded:                 {format_entries(reloaded)}")
    print()
    return reloaded


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Walk through LRU cache operations and a write/read cycle."
    )
    parser.add_argument(
        "--path",
        default="demo_cache.txt",
        help="cache file used for the persistence cycle (default: %(default)s)",
    )
    parser.add_argument(
        "--capacity",
        type=int,
        default=3,
        help="cache capacity (default: %(default)s)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="log evictions and file access",
    )
    args = parser.parse_args(argv)
    if args.capacity <= 0:
        parser.error("--capacity must be positive")
    return args


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    cache = run_cache_operations(args.capacity)
    run_persistence_cycle(cache, args.path, args.capacity)
    return 0


if __name__ == "__main__":
    sys.exit(main())
