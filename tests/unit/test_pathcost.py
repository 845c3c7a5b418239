"""Unit tests for the cost-minimization engine."""

from __future__ import annotations

import math
import random

import pytest
from pydantic import ValidationError

from passfault.core.charsets import brute_force_cost
from passfault.core.composite import SequentialFinder
from passfault.core.exceptions import InvalidDecompositionState
from passfault.core.pathcost import find_minimum_cost_path
from passfault.domain.models import BRUTE_FORCE_CLASSIFICATION, PasswordPattern, PathCost
from passfault.infrastructure.dictionary import DictionaryPatternsFinder, InMemoryDictionary
from passfault.infrastructure.finders import (
    DatePatternFinder,
    KeyboardPatternFinder,
    RepeatingPatternFinder,
    SequencePatternFinder,
)


def _pattern(password: str, start: int, end: int, cost: float, classification: str = "Test") -> PasswordPattern:
    return PasswordPattern(
        start=start,
        end=end,
        classification=classification,
        description="test pattern",
        match_string=password[start:end],
        cost=cost,
    )


def _assert_tiles(path: PathCost, password: str) -> None:
    position = 0
    for pattern in path.patterns:
        assert pattern.start == position
        position = pattern.end
    assert position == len(password)
    assert path.password == password
    assert path.total_cost == pytest.approx(sum(p.cost for p in path.patterns))


class TestBasics:
    """Empty input, brute force and tiling."""

    def test_empty_password(self):
        path = find_minimum_cost_path("", [])

        assert path.patterns == ()
        assert path.total_cost == 0

    def test_no_patterns_is_all_brute_force(self):
        """Without patterns every character is costed by its class."""
        password = "xq7#Zk"
        path = find_minimum_cost_path(password, [])

        assert len(path.patterns) == len(password)
        assert all(p.is_brute_force for p in path.patterns)
        expected = 4 * math.log2(26) + math.log2(10) + math.log2(33)
        assert path.total_cost == pytest.approx(expected)
        assert brute_force_cost(password) == pytest.approx(expected)

    def test_no_dictionary_match_is_all_brute_force(self):
        """A dictionary finder that matches nothing leaves a brute-force path."""
        finder = DictionaryPatternsFinder(InMemoryDictionary.from_word_list("pets", ["cat", "dog"]))
        analysis = SequentialFinder([finder]).analyze("xq7#Zk")

        path = analysis.minimum_cost_decomposition()

        assert [p.classification for p in path.patterns] == [BRUTE_FORCE_CLASSIFICATION] * 6

    def test_single_word_of_large_dictionary(self):
        """A whole-password word of a 10,000-word list costs log2(10000)."""
        words = ["password"] + [f"w{i:05d}" for i in range(9999)]
        finder = DictionaryPatternsFinder(InMemoryDictionary.from_word_list("big", words))
        analysis = SequentialFinder([finder]).analyze("password")

        path = analysis.minimum_cost_decomposition()

        assert len(path.patterns) == 1
        assert path.patterns[0].match_string == "password"
        assert path.total_cost == pytest.approx(math.log2(10000))

    @pytest.mark.parametrize("password", ["Password2019!", "qwertyqwerty", "abc123abc", "x", "12/25/1999zz"])
    def test_path_tiles_password(self, password):
        """Every path is contiguous, gap free and sums its costs."""
        finders = [
            RepeatingPatternFinder(),
            SequencePatternFinder(),
            KeyboardPatternFinder(),
            DatePatternFinder(),
            DictionaryPatternsFinder(InMemoryDictionary.from_word_list("en", ["pass", "word", "password"])),
        ]
        analysis = SequentialFinder(finders).analyze(password)

        _assert_tiles(analysis.minimum_cost_decomposition(), password)

    def test_never_worse_than_brute_force(self):
        password = "abcd"
        expensive = _pattern(password, 0, 4, 100.0)

        path = find_minimum_cost_path(password, [expensive])

        assert path.total_cost == pytest.approx(brute_force_cost(password))

    def test_random_suffix_never_lowers_cost(self):
        """Appending characters that form no new pattern cannot make it cheaper."""
        finder = DictionaryPatternsFinder(InMemoryDictionary.from_word_list("pets", ["cat", "dog", "password"]))
        composite = SequentialFinder([finder])

        base = composite.analyze("password").minimum_cost_decomposition()
        longer = composite.analyze("password#Q").minimum_cost_decomposition()

        assert longer.total_cost >= base.total_cost

    def test_inconsistent_pattern_raises(self):
        pattern = PasswordPattern(
            start=0, end=2, classification="Test", description="x", match_string="zz", cost=1.0
        )

        with pytest.raises(InvalidDecompositionState):
            find_minimum_cost_path("abcd", [pattern])

    def test_path_model_rejects_gaps(self):
        pattern = _pattern("abcd", 1, 3, 1.0)

        with pytest.raises(ValidationError):
            PathCost(length=4, patterns=(pattern,))


class TestTieBreak:
    """Equal-cost paths resolve deterministically."""

    def test_fewer_edges_wins(self):
        password = "abcd"
        whole = _pattern(password, 0, 4, 8.0)
        left = _pattern(password, 0, 2, 4.0)
        right = _pattern(password, 2, 4, 4.0)

        path = find_minimum_cost_path(password, [left, right, whole])

        assert path.patterns == (whole,)

    def test_earliest_next_start_wins(self):
        """Among equal paths the first differing edge starts earliest."""
        password = "abcdef"
        a1 = _pattern(password, 0, 2, 1.0)
        a2 = _pattern(password, 2, 6, 5.0)
        b1 = _pattern(password, 0, 4, 3.0)
        b2 = _pattern(password, 4, 6, 3.0)

        path = find_minimum_cost_path(password, [b1, b2, a1, a2])

        assert [p.start for p in path.patterns] == [0, 2]

    def test_same_span_prefers_classification_order(self):
        password = "abcd"
        zeta = _pattern(password, 0, 4, 5.0, classification="Zeta")
        alpha = _pattern(password, 0, 4, 5.0, classification="Alpha")

        path = find_minimum_cost_path(password, [zeta, alpha])

        assert path.patterns[0].classification == "Alpha"

    def test_result_independent_of_report_order(self):
        """Shuffling the reported patterns never changes the path."""
        password = "abcdabcd"
        patterns = [
            _pattern(password, 0, 4, 6.0, "A"),
            _pattern(password, 4, 8, 6.0, "A"),
            _pattern(password, 0, 8, 12.0, "B"),
            _pattern(password, 2, 6, 3.0, "C"),
            _pattern(password, 0, 2, 4.5, "D"),
            _pattern(password, 6, 8, 4.5, "D"),
        ]
        expected = find_minimum_cost_path(password, patterns)

        rng = random.Random(7)
        for _ in range(20):
            rng.shuffle(patterns)
            assert find_minimum_cost_path(password, patterns) == expected
