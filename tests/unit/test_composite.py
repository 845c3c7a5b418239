"""Unit tests for the sequential and parallel composite finders."""

from __future__ import annotations

import time

import pytest

from passfault.core.analysis import AnalysisState, PasswordAnalysis
from passfault.core.composite import ParallelFinder, SequentialFinder
from passfault.core.exceptions import AnalysisCancelled, FinderExecutionError
from passfault.core.finder import FinderMetadata, PatternFinder


class SpanFinder(PatternFinder):
    """Reports a fixed list of spans."""

    def __init__(self, name: str, spans: list[tuple[int, int]], cost: float = 1.0) -> None:
        self._name = name
        self._spans = spans
        self._cost = cost
        super().__init__()

    def metadata(self) -> FinderMetadata:
        return FinderMetadata(name=self._name, classification=f"{self._name} class")

    def analyze(self, analysis) -> None:
        for start, end in self._spans:
            self.report(analysis, start, end, f"{self._name} span", self._cost)


class FailingFinder(SpanFinder):
    """Reports its spans, then fails."""

    def analyze(self, analysis) -> None:
        super().analyze(analysis)
        raise RuntimeError("boom")


class SlowFinder(SpanFinder):
    """Reports its spans, then waits until asked to stop."""

    def analyze(self, analysis) -> None:
        super().analyze(analysis)
        deadline = time.monotonic() + 5
        while not analysis.cancelled and time.monotonic() < deadline:
            time.sleep(0.01)


class CancellingFinder(SpanFinder):
    """Cancels the whole analysis it is part of."""

    def __init__(self, target: PasswordAnalysis) -> None:
        self._target = target
        super().__init__("canceller", [])

    def analyze(self, analysis) -> None:
        self._target.cancel()


class CancelledOnCompleteAnalysis(PasswordAnalysis):
    """Gets cancelled from elsewhere just as the composite completes it."""

    def complete(self, error=None) -> bool:
        self.cancel()
        return super().complete(error)


class TestParallelFinder:
    """ParallelFinder fan-out and join."""

    def test_collects_every_pattern(self):
        """No pattern is lost when many finders write at once."""
        password = "abcdefghijklmnopqrstuvwxyz"
        spans = [(i, i + 1) for i in range(25)] + [(i, i + 2) for i in range(24)] + [(0, 26)]
        finders = [SpanFinder(f"f{n}", spans) for n in range(20)]

        analysis = ParallelFinder(finders).analyze(password)

        assert analysis.state == AnalysisState.COMPLETE
        assert analysis.error is None
        assert analysis.pattern_count == 20 * len(spans)

    def test_failure_keeps_siblings(self):
        """A failing finder loses its own patterns, not its siblings'."""
        password = "abcdef"
        finders = [
            SpanFinder("good", [(0, 3)]),
            FailingFinder("bad", [(3, 6)]),
            SpanFinder("other", [(3, 6)]),
        ]
        analysis = PasswordAnalysis(password)

        error = ParallelFinder(finders).blocking_analyze(analysis)

        assert isinstance(error, FinderExecutionError)
        assert [f.finder for f in error.failures] == ["bad"]
        assert isinstance(error.failures[0].error, RuntimeError)
        assert analysis.error is error
        assert sorted(analysis.patterns_by_finder()) == ["good", "other"]
        assert analysis.pattern_count == 2

    def test_timeout_omits_unfinished_finder(self):
        """Finders still running at the timeout are dropped and reported."""
        password = "abcdef"
        finders = [SpanFinder("fast", [(0, 3)]), SlowFinder("slow", [(3, 6)])]

        analysis = ParallelFinder(finders, timeout=0.2).analyze(password)

        assert analysis.state == AnalysisState.COMPLETE
        assert analysis.error is not None
        failure = analysis.error.failures[0]
        assert failure.finder == "slow"
        assert failure.timed_out is True
        assert list(analysis.patterns_by_finder()) == ["fast"]
        assert analysis.minimum_cost_decomposition().total_cost > 0

    def test_duplicate_names_get_distinct_scopes(self):
        finders = [SpanFinder("same", [(0, 1)]), SpanFinder("same", [(1, 2)])]

        analysis = ParallelFinder(finders).analyze("ab")

        assert sorted(analysis.patterns_by_finder()) == ["same", "same#2"]

    def test_no_finders(self):
        analysis = ParallelFinder([]).analyze("abcd")

        assert analysis.state == AnalysisState.COMPLETE
        assert analysis.pattern_count == 0

    @pytest.mark.parametrize("kwargs", [{"max_workers": 0}, {"timeout": 0}, {"timeout": -1.0}])
    def test_invalid_arguments(self, kwargs):
        with pytest.raises(ValueError):
            ParallelFinder([], **kwargs)

    def test_limited_workers_still_run_everything(self):
        finders = [SpanFinder(f"f{n}", [(0, 2)]) for n in range(6)]

        analysis = ParallelFinder(finders, max_workers=2).analyze("ab")

        assert analysis.pattern_count == 6


class TestSequentialFinder:
    """SequentialFinder runs in the calling thread."""

    def test_failure_is_isolated(self):
        finders = [FailingFinder("bad", [(0, 2)]), SpanFinder("good", [(2, 4)])]

        analysis = SequentialFinder(finders).analyze("abcd")

        assert [f.finder for f in analysis.error.failures] == ["bad"]
        assert list(analysis.patterns_by_finder()) == ["good"]

    def test_cancellation_raises(self):
        """Cancelling mid-run invalidates the analysis."""
        analysis = PasswordAnalysis("abcd")
        finders = [SpanFinder("first", [(0, 2)]), CancellingFinder(analysis), SpanFinder("never", [(2, 4)])]

        with pytest.raises(AnalysisCancelled):
            SequentialFinder(finders).blocking_analyze(analysis)

        assert analysis.state == AnalysisState.CANCELLED
        assert analysis.pattern_count == 0

    @pytest.mark.parametrize("composite", [SequentialFinder, ParallelFinder])
    def test_cancel_racing_completion_raises(self, composite):
        analysis = CancelledOnCompleteAnalysis("abcd")

        with pytest.raises(AnalysisCancelled):
            composite([SpanFinder("only", [(0, 2)])]).blocking_analyze(analysis)

        assert analysis.state == AnalysisState.CANCELLED

    def test_same_result_as_parallel(self):
        finders = [SpanFinder("a", [(0, 2), (1, 4)], cost=2.0), SpanFinder("b", [(2, 4)], cost=1.5)]

        sequential = SequentialFinder(finders).analyze("abcd").minimum_cost_decomposition()
        parallel = ParallelFinder(finders).analyze("abcd").minimum_cost_decomposition()

        assert sequential == parallel
