"""
Dictionary matching strategies.

A strategy says which dictionary characters a password character may stand
for, and how many extra bits of guessing the variation (case changes,
substitutions) costs on top of picking the word.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ...core.charsets import case_variation_bits

# password character -> dictionary characters it commonly replaces
LEET_TABLE: dict[str, tuple[str, ...]] = {
    "4": ("a",),
    "@": ("a",),
    "8": ("b",),
    "(": ("c",),
    "{": ("c",),
    "3": ("e",),
    "6": ("g",),
    "9": ("g",),
    "#": ("h",),
    "1": ("i", "l"),
    "!": ("i", "l"),
    "|": ("i", "l"),
    "0": ("o",),
    "$": ("s",),
    "5": ("s",),
    "+": ("t",),
    "7": ("t",),
    "%": ("x",),
    "2": ("z",),
}


class MatchStrategy(ABC):
    """How password text is compared with dictionary words."""

    name: str = "strategy"
    description: str = ""

    @abstractmethod
    def char_options(self, char: str) -> tuple[str, ...]:
        """Dictionary characters ``char`` may match."""
        ...

    def accepts(self, text: str, word: str) -> bool:
        """Whether a reachable match should be reported (lets strategies skip plain matches)."""
        return True

    def extra_bits(self, text: str, word: str) -> float:
        """Bits added to the dictionary cost when ``text`` matched ``word``."""
        return 0.0

    def describe(self, text: str, word: str) -> str:
        return self.description

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class ExactWordStrategy(MatchStrategy):
    """Character-for-character equality."""

    name = "exact"
    description = "Exact dictionary word"

    def char_options(self, char: str) -> tuple[str, ...]:
        return (char,)


class LowerCaseStrategy(MatchStrategy):
    """Case-insensitive match; only reports words with at least one upper-case letter."""

    name = "lowercase"
    description = "Dictionary word with case variation"

    def char_options(self, char: str) -> tuple[str, ...]:
        return (char.lower(),)

    def accepts(self, text: str, word: str) -> bool:
        return text != word

    def extra_bits(self, text: str, word: str) -> float:
        return case_variation_bits(text)


class SubstitutionStrategy(MatchStrategy):
    """Leetspeak: digits and symbols standing in for letters, case-insensitive."""

    name = "substitution"
    description = "Dictionary word with character substitutions"

    def __init__(self, table: dict[str, tuple[str, ...]] | None = None) -> None:
        self._table = dict(LEET_TABLE if table is None else table)

    def char_options(self, char: str) -> tuple[str, ...]:
        lower = char.lower()
        return (lower, *(c for c in self._table.get(char, ()) if c != lower))

    def accepts(self, text: str, word: str) -> bool:
        return self.substitutions(text, word) > 0

    def substitutions(self, text: str, word: str) -> int:
        return sum(1 for t, w in zip(text, word) if t.lower() != w)

    def extra_bits(self, text: str, word: str) -> float:
        plain = "".join(w if t.lower() != w else t for t, w in zip(text, word))
        return case_variation_bits(plain) + self.substitutions(text, word)

    def describe(self, text: str, word: str) -> str:
        return f"{self.description} ({word})"
