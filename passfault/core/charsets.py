"""Character classes and brute-force costs."""

from __future__ import annotations

import math
import string
from enum import Enum

from ..domain.models import BRUTE_FORCE_CLASSIFICATION, PasswordPattern


class CharacterClass(str, Enum):
    """Alphabet a single character is assumed to be drawn from."""
    LOWER = "lower"
    UPPER = "upper"
    DIGIT = "digit"
    SYMBOL = "symbol"
    OTHER = "other"


ALPHABET_SIZES: dict[CharacterClass, int] = {
    CharacterClass.LOWER: 26,
    CharacterClass.UPPER: 26,
    CharacterClass.DIGIT: 10,
    CharacterClass.SYMBOL: len(string.punctuation) + 1,  # printable symbols plus space
    CharacterClass.OTHER: 100,
}

_SYMBOLS = frozenset(string.punctuation + " ")


def character_class(char: str) -> CharacterClass:
    if char in string.ascii_lowercase:
        return CharacterClass.LOWER
    if char in string.ascii_uppercase:
        return CharacterClass.UPPER
    if char in string.digits:
        return CharacterClass.DIGIT
    if char in _SYMBOLS:
        return CharacterClass.SYMBOL
    return CharacterClass.OTHER


def alphabet_size(text: str) -> int:
    """Size of the union of the character classes used by ``text``."""
    classes = {character_class(c) for c in text}
    return sum(ALPHABET_SIZES[c] for c in classes) or 1


def brute_force_cost(text: str) -> float:
    """log2 guesses for characters costed one by one by their own class."""
    return sum(math.log2(ALPHABET_SIZES[character_class(c)]) for c in text)


def brute_force_pattern(password: str, index: int) -> PasswordPattern:
    char = password[index]
    cls = character_class(char)
    return PasswordPattern(
        start=index,
        end=index + 1,
        classification=BRUTE_FORCE_CLASSIFICATION,
        description=f"Random {cls.value} character",
        match_string=char,
        cost=brute_force_cost(char),
    )


def case_variation_bits(text: str) -> float:
    """Extra bits for the upper/lower case arrangement of ``text``.

    All lower case costs nothing; a capitalised first letter or all upper
    case costs one bit; anything else is the log2 of the number of ways to
    place the minority case among the letters.
    """
    upper = sum(1 for c in text if c.isupper())
    lower = sum(1 for c in text if c.islower())
    if upper == 0:
        return 0.0
    if lower == 0 or (upper == 1 and text[:1].isupper()):
        return 1.0
    letters = upper + lower
    variations = sum(math.comb(letters, i) for i in range(1, min(upper, lower) + 1))
    return math.log2(variations)
