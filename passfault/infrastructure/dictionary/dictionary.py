"""
Dictionaries - immutable word sets queried by the dictionary finders.

Both implementations answer exact lookups and prefix queries; the finder
uses the prefix query to stop extending a candidate as soon as no word can
start with it.
"""

from __future__ import annotations

import logging
import mmap
from abc import ABC, abstractmethod
from array import array
from bisect import bisect_left
from collections.abc import Iterable, Iterator
from pathlib import Path

from ...core.exceptions import DictionaryLoadError

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"


def _clean(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        word = line.strip()
        if word and not word.startswith(COMMENT_PREFIX):
            yield word


class Dictionary(ABC):
    """Named, read-only set of words. Safe to share between threads."""

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @abstractmethod
    def __contains__(self, word: object) -> bool:
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...

    @abstractmethod
    def has_prefix(self, prefix: str) -> bool:
        """True if at least one word starts with ``prefix``."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, words={len(self)})"


class InMemoryDictionary(Dictionary):
    """
    Dictionary held as a sorted tuple plus a frozenset.

    Usage:
        d = InMemoryDictionary.from_word_list("pets", ["cat", "dog"])
        "cat" in d          # True
        d.has_prefix("do")  # True
    """

    def __init__(self, name: str, words: Iterable[str]) -> None:
        super().__init__(name)
        self._words = tuple(sorted(set(_clean(words))))
        self._lookup = frozenset(self._words)

    @classmethod
    def from_word_list(cls, name: str, words: Iterable[str]) -> InMemoryDictionary:
        return cls(name, words)

    @classmethod
    def from_file(cls, path: Path | str, name: str | None = None) -> InMemoryDictionary:
        """Load one word per line. Blank lines and ``#`` comments are skipped."""
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8", errors="ignore") as fp:
                dictionary = cls(name or path.stem, fp)
        except FileNotFoundError as exc:
            raise DictionaryLoadError(str(path), "file not found") from exc
        except OSError as exc:
            raise DictionaryLoadError(str(path), str(exc)) from exc
        logger.info("Loaded dictionary %s: %d words", dictionary.name, len(dictionary))
        return dictionary

    def __contains__(self, word: object) -> bool:
        return word in self._lookup

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def has_prefix(self, prefix: str) -> bool:
        i = bisect_left(self._words, prefix)
        return i < len(self._words) and self._words[i].startswith(prefix)


class FileDictionary(Dictionary):
    """
    Dictionary answered from a sorted word file without loading the words.

    The file is memory-mapped and only a table of line offsets is kept in
    memory; lookups binary-search the mapped bytes. Lines must be sorted by
    their UTF-8 bytes (``LC_ALL=C sort``), which is checked on open.
    """

    def __init__(self, name: str, path: Path, data: mmap.mmap | None, offsets: array) -> None:
        super().__init__(name)
        self._path = path
        # empty files are not mapped
        self._data: mmap.mmap | bytes = data if data is not None else b""
        self._offsets = offsets  # start, end pairs

    @classmethod
    def from_file(cls, path: Path | str, name: str | None = None) -> FileDictionary:
        path = Path(path)
        try:
            with path.open("rb") as fp:
                size = path.stat().st_size
                data = mmap.mmap(fp.fileno(), 0, access=mmap.ACCESS_READ) if size else None
        except FileNotFoundError as exc:
            raise DictionaryLoadError(str(path), "file not found") from exc
        except OSError as exc:
            raise DictionaryLoadError(str(path), str(exc)) from exc

        offsets = array("Q")
        if data is not None:
            previous = b""
            position = 0
            while position < size:
                newline = data.find(b"\n", position)
                line_end = size if newline < 0 else newline
                start, end = position, line_end
                while start < end and data[start:start + 1].isspace():
                    start += 1
                while end > start and data[end - 1:end].isspace():
                    end -= 1
                word = data[start:end]
                if word and word != previous and not word.startswith(COMMENT_PREFIX.encode()):
                    if word < previous:
                        data.close()
                        raise DictionaryLoadError(str(path), f"words are not sorted near {word!r}")
                    offsets.extend((start, end))
                    previous = word
                position = line_end + 1

        dictionary = cls(name or path.stem, path, data, offsets)
        logger.info("Opened file dictionary %s: %d words", dictionary.name, len(dictionary))
        return dictionary

    @property
    def path(self) -> Path:
        return self._path

    def _word(self, index: int) -> bytes:
        return self._data[self._offsets[2 * index]:self._offsets[2 * index + 1]]

    def _lower_bound(self, key: bytes) -> int:
        lo, hi = 0, len(self)
        while lo < hi:
            mid = (lo + hi) // 2
            if self._word(mid) < key:
                lo = mid + 1
            else:
                hi = mid
        return lo

    def __contains__(self, word: object) -> bool:
        if not isinstance(word, str) or not len(self):
            return False
        key = word.encode("utf-8")
        i = self._lower_bound(key)
        return i < len(self) and self._word(i) == key

    def __len__(self) -> int:
        return len(self._offsets) // 2

    def has_prefix(self, prefix: str) -> bool:
        if not len(self):
            return False
        key = prefix.encode("utf-8")
        i = self._lower_bound(key)
        return i < len(self) and self._word(i).startswith(key)

    def close(self) -> None:
        if isinstance(self._data, mmap.mmap):
            self._data.close()
        self._data = b""
        self._offsets = array("Q")

    def __enter__(self) -> FileDictionary:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
