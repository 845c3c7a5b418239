"""
Finder set builder - assembles the default collection of pattern finders.

Usage:
    finders = (
        FinderSetBuilder()
        .load_default_word_lists()
        .in_memory(True)
        .build()
    )
    analysis = ParallelFinder(finders).analyze("Passw0rd2019")
"""

from __future__ import annotations

import logging
from typing import Iterable

from .config import PassfaultConfig, StrategyEnum
from .core.composite import CompositeFinder, ParallelFinder, SequentialFinder
from .core.exceptions import DictionaryLoadError
from .core.finder import PatternFinder
from .infrastructure.dictionary import (
    Dictionary,
    DictionaryPatternsFinder,
    ExactWordStrategy,
    FileDictionary,
    InMemoryDictionary,
    LowerCaseStrategy,
    MatchStrategy,
    SubstitutionStrategy,
    WordlistManager,
)
from .infrastructure.dictionary.finder import MIN_WORD_LENGTH
from .infrastructure.finders import (
    DatePatternFinder,
    KeyboardPatternFinder,
    RepeatingPatternFinder,
    SequencePatternFinder,
)

logger = logging.getLogger(__name__)

STRATEGIES: dict[StrategyEnum, type[MatchStrategy]] = {
    StrategyEnum.EXACT: ExactWordStrategy,
    StrategyEnum.LOWERCASE: LowerCaseStrategy,
    StrategyEnum.SUBSTITUTION: SubstitutionStrategy,
}


def default_strategies() -> list[MatchStrategy]:
    return [ExactWordStrategy(), LowerCaseStrategy(), SubstitutionStrategy()]


class FinderSetBuilder:
    """
    Fluent builder for the finder collection.

    Structural finders (repeats, sequences, keyboard walks, dates) are always
    included unless switched off. Each loaded word list contributes one
    dictionary finder per match strategy. A custom dictionary is matched
    exactly; with ``custom_only`` it replaces every other finder.
    """

    def __init__(self, manager: WordlistManager | None = None) -> None:
        self._manager = manager or WordlistManager()
        self._load_defaults = False
        self._word_list_names: list[str] | None = None
        self._in_memory = True
        self._strategies: list[MatchStrategy] = default_strategies()
        self._min_word_length = MIN_WORD_LENGTH
        self._structural = {"repeats": True, "sequences": True, "keyboard": True, "dates": True}
        self._custom: list[Dictionary] = []
        self._custom_only = False

    def load_default_word_lists(self, names: Iterable[str] | None = None) -> FinderSetBuilder:
        """Include catalogued word lists; ``names`` restricts which ones."""
        self._load_defaults = True
        self._word_list_names = list(names) if names else None
        return self

    def in_memory(self, flag: bool = True) -> FinderSetBuilder:
        self._in_memory = flag
        return self

    def with_strategies(self, strategies: Iterable[MatchStrategy]) -> FinderSetBuilder:
        strategies = list(strategies)
        if not strategies:
            raise ValueError("at least one match strategy is required")
        self._strategies = strategies
        return self

    def with_structural(
        self,
        repeats: bool = True,
        sequences: bool = True,
        keyboard: bool = True,
        dates: bool = True,
    ) -> FinderSetBuilder:
        self._structural = {"repeats": repeats, "sequences": sequences, "keyboard": keyboard, "dates": dates}
        return self

    def min_word_length(self, length: int) -> FinderSetBuilder:
        if length < 1:
            raise ValueError("min_word_length must be >= 1")
        self._min_word_length = length
        return self

    def add_custom_dictionary(self, dictionary: Dictionary, custom_only: bool = False) -> FinderSetBuilder:
        self._custom.append(dictionary)
        self._custom_only = self._custom_only or custom_only
        return self

    def build(self) -> list[PatternFinder]:
        custom = [
            DictionaryPatternsFinder(d, ExactWordStrategy(), self._min_word_length)
            for d in self._custom
        ]
        if self._custom_only:
            logger.info("Using %d custom dictionary finder(s) only", len(custom))
            return list(custom)

        finders: list[PatternFinder] = []
        if self._structural["repeats"]:
            finders.append(RepeatingPatternFinder())
        if self._structural["sequences"]:
            finders.append(SequencePatternFinder())
        if self._structural["keyboard"]:
            finders.append(KeyboardPatternFinder())
        if self._structural["dates"]:
            finders.append(DatePatternFinder())

        for dictionary in self._dictionaries():
            for strategy in self._strategies:
                finders.append(DictionaryPatternsFinder(dictionary, strategy, self._min_word_length))

        finders.extend(custom)
        logger.info("Built %d finder(s)", len(finders))
        return finders

    def _dictionaries(self) -> list[Dictionary]:
        if not self._load_defaults:
            return []
        if not self._manager.wordlists:
            self._manager.scan()
        names = self._word_list_names or [wl.name for wl in self._manager.wordlists]
        dictionaries: list[Dictionary] = []
        for name in names:
            try:
                dictionaries.append(self._manager.load(name, in_memory=self._in_memory))
            except DictionaryLoadError as exc:
                logger.warning("Skipping word list %s: %s", name, exc)
        return dictionaries


def load_dictionary(path, in_memory: bool = True, name: str | None = None) -> Dictionary:
    """Open a word list file; raises DictionaryLoadError."""
    if in_memory:
        return InMemoryDictionary.from_file(path, name)
    return FileDictionary.from_file(path, name)


def build_finders(config: PassfaultConfig) -> list[PatternFinder]:
    """Assemble the finder collection described by ``config.finders``."""
    cfg = config.finders
    manager = WordlistManager(custom_paths=cfg.wordlist_dirs, include_system=cfg.include_system_wordlists)
    builder = (
        FinderSetBuilder(manager)
        .load_default_word_lists(cfg.word_lists)
        .in_memory(cfg.in_memory)
        .with_strategies(STRATEGIES[s]() for s in cfg.strategies)
        .with_structural(cfg.repeats, cfg.sequences, cfg.keyboard, cfg.dates)
        .min_word_length(cfg.min_word_length)
    )
    if cfg.custom_dictionary is not None:
        builder.add_custom_dictionary(
            load_dictionary(cfg.custom_dictionary, cfg.in_memory, "custom"),
            custom_only=cfg.custom_only,
        )
    return builder.build()


def build_composite(config: PassfaultConfig, finders: Iterable[PatternFinder] | None = None) -> CompositeFinder:
    """Wrap the finders in a parallel or sequential composite per ``config.analysis``."""
    finders = build_finders(config) if finders is None else list(finders)
    if config.analysis.parallel:
        return ParallelFinder(
            finders,
            max_workers=config.analysis.max_workers,
            timeout=config.analysis.timeout_seconds,
        )
    return SequentialFinder(finders)
