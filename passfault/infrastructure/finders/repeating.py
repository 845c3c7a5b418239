"""Repeating pattern finder - the same block typed two or more times in a row."""

from __future__ import annotations

import math

from ...core.charsets import alphabet_size
from ...core.finder import FinderMetadata, PatternFinder

MIN_LENGTH = 3


def _is_periodic(block: str) -> bool:
    """True if ``block`` is itself a shorter block repeated ("abab", "aaa")."""
    return len(block) > 1 and block in (block + block)[1:-1]


class RepeatingPatternFinder(PatternFinder):
    """
    Reports ``block * k`` for every start position, block and ``k >= 2``.

    Cost: guessing the block by brute force over the alphabet of its
    characters, then the repeat count: ``len(block) * log2(alphabet) + log2(k)``.
    Blocks that are themselves periodic are left to their shortest period.
    """

    def metadata(self) -> FinderMetadata:
        return FinderMetadata(
            name="repeats",
            classification="Repeated Pattern",
            description="A block of characters typed several times in a row",
        )

    def analyze(self, analysis) -> None:
        password = analysis.password
        n = len(password)
        for start in range(n):
            if analysis.cancelled:
                return
            for size in range(1, (n - start) // 2 + 1):
                block = password[start:start + size]
                if _is_periodic(block):
                    continue
                block_bits = size * math.log2(alphabet_size(block))
                count = 1
                position = start + size
                while password[position:position + size] == block:
                    count += 1
                    position += size
                    if count * size < MIN_LENGTH:
                        continue
                    self.report(
                        analysis,
                        start,
                        position,
                        f"'{block}' repeated {count} times",
                        block_bits + math.log2(count),
                    )
