"""Keyboard finder - walks across neighbouring keys ("qwerty", "zxcvb", "1qaz")."""

from __future__ import annotations

import math

from ...core.finder import FinderMetadata, PatternFinder

MIN_LENGTH = 3

# US QWERTY, unshifted; each row with its horizontal offset in key widths
QWERTY_ROWS: tuple[tuple[str, float], ...] = (
    ("`1234567890-=", 0.0),
    ("qwertyuiop[]\\", 1.5),
    ("asdfghjkl;'", 1.75),
    ("zxcvbnm,./", 2.25),
)

SHIFTED = dict(zip('~!@#$%^&*()_+{}|:"<>?', "`1234567890-=[]\\;',./"))


def build_adjacency(rows: tuple[tuple[str, float], ...] = QWERTY_ROWS) -> dict[str, frozenset[str]]:
    """Keys touching each key: same row neighbours and the overlapping keys above and below."""
    positions = {
        key: (r, offset + c)
        for r, (row, offset) in enumerate(rows)
        for c, key in enumerate(row)
    }
    graph: dict[str, frozenset[str]] = {}
    for key, (r, x) in positions.items():
        graph[key] = frozenset(
            other
            for other, (r2, x2) in positions.items()
            if other != key and abs(r2 - r) <= 1 and abs(x2 - x) <= (1.0 if r2 == r else 0.99)
        )
    return graph


def unshift(char: str) -> tuple[str, bool]:
    """Base key for ``char`` and whether shift was held."""
    if char in SHIFTED:
        return SHIFTED[char], True
    if char.isascii() and char.isupper():
        return char.lower(), True
    return char, False


class KeyboardPatternFinder(PatternFinder):
    """
    Reports every run of three or more keys where each key touches the next.

    Cost: a start key, then one of the average number of neighbours per
    further key, plus one bit per shifted key:
    ``log2(keys) + (length - 1) * log2(avg_degree) + shifted``.
    """

    def __init__(self, rows: tuple[tuple[str, float], ...] = QWERTY_ROWS, layout: str = "qwerty") -> None:
        self._layout = layout
        self._graph = build_adjacency(rows)
        self._key_bits = math.log2(len(self._graph))
        self._step_bits = math.log2(sum(len(v) for v in self._graph.values()) / len(self._graph))
        super().__init__()

    def metadata(self) -> FinderMetadata:
        return FinderMetadata(
            name=f"keyboard:{self._layout}",
            classification="Keyboard Pattern",
            description=f"Adjacent keys on a {self._layout.upper()} keyboard",
        )

    def _adjacent(self, a: str, b: str) -> bool:
        return b in self._graph.get(a, ())

    def analyze(self, analysis) -> None:
        password = analysis.password
        keys = [unshift(c) for c in password]
        n = len(keys)
        i = 0
        while i < n - 1:
            if analysis.cancelled:
                return
            j = i
            while j + 1 < n and self._adjacent(keys[j][0], keys[j + 1][0]):
                j += 1
            if j + 1 - i >= MIN_LENGTH:
                self._report_walk(analysis, keys, i, j + 1)
            i = max(j, i + 1)

    def _report_walk(self, analysis, keys: list[tuple[str, bool]], start: int, end: int) -> None:
        for s in range(start, end - MIN_LENGTH + 1):
            for e in range(s + MIN_LENGTH, end + 1):
                length = e - s
                shifted = sum(1 for _, shift in keys[s:e] if shift)
                self.report(
                    analysis,
                    s,
                    e,
                    f"{length}-key walk",
                    self._key_bits + (length - 1) * self._step_bits + shifted,
                )
