"""Sequence finder - runs like "1234", "abcd" or "9876"."""

from __future__ import annotations

import math

from ...core.charsets import ALPHABET_SIZES, CharacterClass, character_class
from ...core.finder import FinderMetadata, PatternFinder

MIN_LENGTH = 3

_SEQUENCE_CLASSES = (CharacterClass.LOWER, CharacterClass.UPPER, CharacterClass.DIGIT)


def _step(a: str, b: str) -> int:
    """+1 / -1 when ``b`` follows / precedes ``a`` within one class, else 0."""
    cls = character_class(a)
    if cls not in _SEQUENCE_CLASSES or character_class(b) != cls:
        return 0
    delta = ord(b) - ord(a)
    return delta if delta in (1, -1) else 0


class SequencePatternFinder(PatternFinder):
    """
    Reports every run of at least three characters stepping by one in the
    same direction within digits, lower case or upper case letters.

    Cost: start character, direction and length of the run:
    ``log2(alphabet * 2 * length)``.
    """

    def metadata(self) -> FinderMetadata:
        return FinderMetadata(
            name="sequences",
            classification="Character Sequence",
            description="Consecutive characters in alphabet or digit order",
        )

    def analyze(self, analysis) -> None:
        password = analysis.password
        n = len(password)
        i = 0
        while i < n - 1:
            if analysis.cancelled:
                return
            step = _step(password[i], password[i + 1])
            if step == 0:
                i += 1
                continue
            j = i + 1
            while j + 1 < n and _step(password[j], password[j + 1]) == step:
                j += 1
            self._report_run(analysis, i, j + 1, step)
            i = j

    def _report_run(self, analysis, start: int, end: int, step: int) -> None:
        cls = character_class(analysis.password[start])
        direction = "ascending" if step > 0 else "descending"
        for s in range(start, end - MIN_LENGTH + 1):
            for e in range(s + MIN_LENGTH, end + 1):
                length = e - s
                self.report(
                    analysis,
                    s,
                    e,
                    f"{length}-character {direction} {cls.value} sequence",
                    math.log2(ALPHABET_SIZES[cls] * 2 * length),
                )
