import logging
import os
from pathlib import Path
from typing import Union

from lru_cache import LRUCache
from text_codec import STR_CODEC, TextCodec

logger = logging.getLogger(__name__)

DELIMITER = ":"


def _has_line_break(text: str) -> bool:
    return bool(text) and text.splitlines() != [text]


class FilePersistence:
    """
    Text-file persistence for an LRUCache.

    The file holds one `key:value` line per entry, least recently used
    first. Ranks are not stored; recency order is carried by line position
    alone, so a cache read back gets fresh ranks 1..N in file order.

    The format has no escaping. Keys may not contain the delimiter, and
    neither keys nor values may contain line breaks; `write` rejects such
    entries with ValueError. A delimiter inside a value is fine because
    lines are split on the first delimiter only.

    I/O errors are logged and swallowed unless the instance is created with
    `strict=True`, in which case they propagate to the caller.
    """

    def __init__(
        self,
        key_codec: TextCodec = STR_CODEC,
        value_codec: TextCodec = STR_CODEC,
        strict: bool = False,
    ):
        """
        Args:
            key_codec: Text conversions for cache keys.
            value_codec: Text conversions for cache values.
            strict: Re-raise OSError from file access instead of logging it.
        """
        self._key_codec = key_codec
        self._value_codec = value_codec
        self._strict = strict

    def _format_line(self, key, value) -> str:
        key_text = self._key_codec.to_text(key)
        value_text = self._value_codec.to_text(value)

        if DELIMITER in key_text or _has_line_break(key_text):
            raise ValueError(f"key {key_text!r} cannot be stored as text")
        if _has_line_break(value_text):
            raise ValueError(f"value for key {key_text!r} contains a line break")

        return f"{key_text}{DELIMITER}{value_text}"

    def _parse_line(self, line: str):
        """
        Split a line into a decoded (key, value) pair.

        Raises:
            ValueError: If the delimiter is missing or a codec rejects its text.
        """
        key_text, sep, value_text = line.partition(DELIMITER)
        if not sep:
            raise ValueError("missing delimiter")
        return self._key_codec.from_text(key_text), self._value_codec.from_text(value_text)

    def write(self, cache: LRUCache, filepath: Union[str, os.PathLike]):
        """
        Write all entries of `cache` to `filepath`, oldest first.

        The whole text replaces any previous content in a single step: it is
        written to a temporary file beside the target, which is then renamed
        over it.

        Args:
            cache: The cache to serialize. It is not modified.
            filepath: Destination file.

        Raises:
            ValueError: If an entry cannot be represented in the text format.
            OSError: If the file cannot be written and `strict` is set.
        """
        filepath = Path(filepath)
        lines = [self._format_line(key, entry.value) for key, entry in
                 sorted(cache.entries(), key=lambda item: item[1].rank)]
        content = "\n".join(lines)

        temp_filepath = filepath.with_name(filepath.name + ".tmp")

        try:
            with open(temp_filepath, "w", encoding="utf-8", newline="") as f:
                f.write(content)

            temp_filepath.replace(filepath)
        except OSError as e:
            if temp_filepath.exists():
                try:
                    temp_filepath.unlink()
                except OSError:
                    logger.debug("Could not remove temporary file %s", temp_filepath)
            if self._strict:
                raise
            logger.warning("Failed to write cache to %s: %s", filepath, e)
            return

        logger.info("Wrote %d entries to %s", len(lines), filepath)

    def read(self, capacity: int, filepath: Union[str, os.PathLike]) -> LRUCache:
        """
        Build a new cache of `capacity` from the lines of `filepath`.

        When the file holds more lines than `capacity`, only the last
        `capacity` lines (the most recently used entries) are loaded.
        Lines that cannot be parsed are skipped.

        A missing file yields an empty cache and an empty file is created at
        `filepath`. A file that exists but cannot be read or decoded also
        yields an empty cache and is left untouched.

        Args:
            capacity: Capacity of the returned cache.
            filepath: Source file.

        Returns:
            The populated LRUCache, ranks 1..N in file order.

        Raises:
            ValueError: If `capacity` is not positive, or the file is not
                valid UTF-8 and `strict` is set.
            OSError: If the file cannot be read or created and `strict` is set.
        """
        cache = LRUCache(capacity)
        filepath = Path(filepath)

        try:
            content = filepath.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("Cache file %s does not exist; starting empty", filepath)
            self._create_empty(filepath)
            return cache
        except (OSError, UnicodeDecodeError) as e:
            if self._strict:
                raise
            logger.warning("Failed to read cache from %s: %s", filepath, e)
            return cache

        lines = content.splitlines()
        if len(lines) > capacity:
            logger.debug(
                "Dropping %d oldest lines from %s", len(lines) - capacity, filepath
            )
            lines = lines[-capacity:]

        for lineno, line in enumerate(lines, start=1):
            try:
                key, value = self._parse_line(line)
            except ValueError as e:
                logger.debug("Skipping line %d of %s: %s", lineno, filepath, e)
                continue
            cache.put(key, value)

        logger.info("Read %d entries from %s", len(cache), filepath)
        return cache

    def _create_empty(self, filepath: Path):
        try:
            filepath.touch()
        except OSError as e:
            if self._strict:
                raise
            logger.warning("Failed to create cache file %s: %s", filepath, e)
