"""Structural pattern finders."""

from .date import DatePatternFinder
from .keyboard import KeyboardPatternFinder
from .repeating import RepeatingPatternFinder
from .sequence import SequencePatternFinder

__all__ = [
    "DatePatternFinder",
    "KeyboardPatternFinder",
    "RepeatingPatternFinder",
    "SequencePatternFinder",
]
