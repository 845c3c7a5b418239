"""Dictionary pattern finder - dictionary words anywhere in the password."""

from __future__ import annotations

import math

from ...core.finder import FinderMetadata, FinderType, PatternFinder
from .dictionary import Dictionary
from .strategies import ExactWordStrategy, MatchStrategy

MIN_WORD_LENGTH = 3


class DictionaryPatternsFinder(PatternFinder):
    """
    Reports every dictionary word the strategy can read in the password.

    From each start position the finder extends a set of candidate word
    prefixes one password character at a time, keeping only prefixes the
    dictionary still has words for. Each complete word of at least
    ``min_word_length`` characters becomes a pattern costing
    ``log2(len(dictionary))`` plus the strategy's extra bits.
    """

    def __init__(
        self,
        dictionary: Dictionary,
        strategy: MatchStrategy | None = None,
        min_word_length: int = MIN_WORD_LENGTH,
    ) -> None:
        if min_word_length < 1:
            raise ValueError("min_word_length must be >= 1")
        self._dictionary = dictionary
        self._strategy = strategy or ExactWordStrategy()
        self._min_word_length = min_word_length
        super().__init__()

    def metadata(self) -> FinderMetadata:
        return FinderMetadata(
            name=f"{self._dictionary.name}:{self._strategy.name}",
            classification=f"{self._dictionary.name} dictionary",
            description=self._strategy.description,
            finder_type=FinderType.DICTIONARY,
        )

    @property
    def dictionary(self) -> Dictionary:
        return self._dictionary

    @property
    def strategy(self) -> MatchStrategy:
        return self._strategy

    def analyze(self, analysis) -> None:
        size = len(self._dictionary)
        if size == 0:
            return
        base_cost = math.log2(size)
        password = analysis.password
        found = 0

        for start in range(len(password)):
            if analysis.cancelled:
                self.log.debug("Cancelled at position %d", start)
                return
            prefixes = {""}
            for end in range(start + 1, len(password) + 1):
                options = self._strategy.char_options(password[end - 1])
                prefixes = {
                    prefix + option
                    for prefix in prefixes
                    for option in options
                    if self._dictionary.has_prefix(prefix + option)
                }
                if not prefixes:
                    break
                if end - start < self._min_word_length:
                    continue
                text = password[start:end]
                for word in sorted(prefixes):
                    if word in self._dictionary and self._strategy.accepts(text, word):
                        self.report(
                            analysis,
                            start,
                            end,
                            self._strategy.describe(text, word),
                            base_cost + self._strategy.extra_bits(text, word),
                        )
                        found += 1

        self.log.debug("%d dictionary pattern(s)", found)
