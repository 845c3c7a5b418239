"""
Word list catalogue - finds ``.words`` files and opens them as dictionaries.

Supports:
- Bundled word lists shipped with the package
- Custom search directories
- In-memory or file-backed loading
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ...core.exceptions import DictionaryLoadError
from .dictionary import Dictionary, FileDictionary, InMemoryDictionary

logger = logging.getLogger(__name__)

WORD_LIST_EXTENSION = ".words"

BUNDLED_WORDLIST_DIR = Path(__file__).resolve().parents[2] / "data"

# Common word list locations
WORDLIST_PATHS = [
    Path("/usr/share/passfault"),
    Path.home() / ".passfault",
]


@dataclass
class Wordlist:
    """A word list file on disk."""
    name: str
    path: Path
    size_bytes: int = 0
    bundled: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": str(self.path),
            "size_bytes": self.size_bytes,
            "bundled": self.bundled,
        }


class WordlistManager:
    """
    Catalogue of word lists available to the finders.

    Usage:
        manager = WordlistManager()
        manager.scan()

        for wl in manager.wordlists:
            print(wl.name, wl.path)

        english = manager.load("english")
    """

    def __init__(self, custom_paths: list[Path] | None = None, include_system: bool = False) -> None:
        self._wordlists: dict[str, Wordlist] = {}
        self._search_paths = [BUNDLED_WORDLIST_DIR]
        if include_system:
            self._search_paths.extend(WORDLIST_PATHS)
        if custom_paths:
            self._search_paths.extend(Path(p).expanduser() for p in custom_paths)

    @property
    def wordlists(self) -> list[Wordlist]:
        return sorted(self._wordlists.values(), key=lambda w: w.name)

    def scan(self) -> int:
        """
        Scan the search paths for ``.words`` files.

        Returns:
            Number of word lists found.
        """
        found = 0
        for search_path in self._search_paths:
            if not search_path.is_dir():
                continue
            for path in sorted(search_path.glob(f"*{WORD_LIST_EXTENSION}")):
                if path.is_file() and path.stem not in self._wordlists:
                    self._wordlists[path.stem] = Wordlist(
                        name=path.stem,
                        path=path,
                        size_bytes=path.stat().st_size,
                        bundled=search_path == BUNDLED_WORDLIST_DIR,
                    )
                    found += 1
        logger.info("Found %d word lists", len(self._wordlists))
        return found

    def get(self, name: str) -> Wordlist | None:
        """Get word list by name."""
        return self._wordlists.get(name)

    def add(self, path: Path, name: str | None = None) -> Wordlist:
        """Register a word list file outside the search paths."""
        path = Path(path).expanduser()
        if not path.is_file():
            raise DictionaryLoadError(str(path), "file not found")
        wl = Wordlist(name=name or path.stem, path=path, size_bytes=path.stat().st_size)
        self._wordlists[wl.name] = wl
        logger.info("Added word list: %s", wl.name)
        return wl

    def load(self, name: str, in_memory: bool = True) -> Dictionary:
        """Open a catalogued word list as a dictionary."""
        wl = self._wordlists.get(name)
        if wl is None:
            raise DictionaryLoadError(name, "no such word list")
        if in_memory:
            return InMemoryDictionary.from_file(wl.path, wl.name)
        return FileDictionary.from_file(wl.path, wl.name)

    def load_all(self, in_memory: bool = True) -> list[Dictionary]:
        """Open every catalogued word list; unreadable ones are skipped with a warning."""
        dictionaries: list[Dictionary] = []
        for wl in self.wordlists:
            try:
                dictionaries.append(self.load(wl.name, in_memory=in_memory))
            except DictionaryLoadError as exc:
                logger.warning("Skipping word list %s: %s", wl.name, exc)
        return dictionaries
