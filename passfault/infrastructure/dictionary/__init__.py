"""
Dictionary Module.

Provides word sets (in memory or memory-mapped from sorted files), the
strategies used to match them against password text, and the dictionary
pattern finder.
"""

from .dictionary import Dictionary, FileDictionary, InMemoryDictionary
from .finder import DictionaryPatternsFinder
from .strategies import (
    LEET_TABLE,
    ExactWordStrategy,
    LowerCaseStrategy,
    MatchStrategy,
    SubstitutionStrategy,
)
from .wordlists import WORD_LIST_EXTENSION, Wordlist, WordlistManager

__all__ = [
    "LEET_TABLE",
    "WORD_LIST_EXTENSION",
    # Dictionaries
    "Dictionary",
    "DictionaryPatternsFinder",
    "ExactWordStrategy",
    "FileDictionary",
    "InMemoryDictionary",
    "LowerCaseStrategy",
    "MatchStrategy",
    "SubstitutionStrategy",
    # Word lists
    "Wordlist",
    "WordlistManager",
]
