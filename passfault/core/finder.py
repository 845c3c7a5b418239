"""
Pattern finder contract.

A finder reads ``analysis.password`` and reports every pattern it
recognises through ``analysis.found_pattern``. Finders hold only their own
configuration (dictionary, strategy), so one instance can serve any number
of passwords and run in parallel with any other finder on the same
analysis.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

from ..domain.models import PasswordPattern

if TYPE_CHECKING:
    from .analysis import AnalysisScope, PasswordAnalysis

    AnalysisTarget = Union[PasswordAnalysis, AnalysisScope]


class FinderType(str, Enum):
    """Finder families."""
    DICTIONARY = "dictionary"
    STRUCTURAL = "structural"


@dataclass
class FinderMetadata:
    """Finder metadata used for naming, logging and reports."""
    name: str
    classification: str
    description: str = ""
    finder_type: FinderType = FinderType.STRUCTURAL

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "classification": self.classification,
            "description": self.description,
            "type": self.finder_type.value,
        }


class PatternFinder(ABC):
    """
    Base class for all pattern finders.

    Example:
        class VowelFinder(PatternFinder):
            def metadata(self) -> FinderMetadata:
                return FinderMetadata(name="vowels", classification="Vowels")

            def analyze(self, analysis) -> None:
                for i, c in enumerate(analysis.password):
                    if c in "aeiou":
                        self.report(analysis, i, i + 1, "Single vowel", 2.32)
    """

    def __init__(self) -> None:
        meta = self.metadata()
        self.log = logging.getLogger(f"passfault.finders.{meta.name}")

    @abstractmethod
    def metadata(self) -> FinderMetadata:
        """Return finder metadata. Must be implemented."""
        ...

    @abstractmethod
    def analyze(self, analysis: AnalysisTarget) -> None:
        """Report every pattern found in ``analysis.password``."""
        ...

    @property
    def name(self) -> str:
        return self.metadata().name

    def report(
        self,
        analysis: AnalysisTarget,
        start: int,
        end: int,
        description: str,
        cost: float,
    ) -> PasswordPattern:
        """Build a pattern for ``password[start:end]`` and add it to the analysis."""
        pattern = PasswordPattern(
            start=start,
            end=end,
            classification=self.metadata().classification,
            description=description,
            match_string=analysis.password[start:end],
            cost=max(0.0, cost),
        )
        analysis.found_pattern(pattern)
        return pattern

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
