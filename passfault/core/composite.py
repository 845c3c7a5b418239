"""
Composite finders - run a collection of pattern finders over one password.

``blocking_analyze`` returns only once every finder has finished, so the
caller never observes a partially filled analysis. A finder that raises
loses its own patterns but never its siblings'; all failures are returned
together as one ``FinderExecutionError`` next to the completed analysis.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from concurrent.futures import Future, ThreadPoolExecutor, wait

from .analysis import PasswordAnalysis
from .exceptions import AnalysisCancelled, FinderExecutionError, FinderFailure
from .finder import PatternFinder

logger = logging.getLogger(__name__)


class CompositeFinder(ABC):
    """Ordered collection of finders applied together to one analysis."""

    def __init__(self, finders: Iterable[PatternFinder]) -> None:
        self._finders = list(finders)

    @property
    def finders(self) -> list[PatternFinder]:
        return list(self._finders)

    @abstractmethod
    def blocking_analyze(self, analysis: PasswordAnalysis) -> FinderExecutionError | None:
        """Run every finder on ``analysis`` and complete it.

        Returns the consolidated failure report, or None when every finder
        succeeded. Raises AnalysisCancelled if the analysis was cancelled
        while finders were running.
        """
        ...

    def analyze(self, password: str) -> PasswordAnalysis:
        """Create and fill a new analysis; failures are on ``analysis.error``."""
        analysis = PasswordAnalysis(password)
        self.blocking_analyze(analysis)
        return analysis

    def _scope_names(self) -> list[str]:
        """One distinct scope name per finder, in finder order."""
        names: list[str] = []
        seen: dict[str, int] = {}
        for finder in self._finders:
            base = finder.name
            seen[base] = seen.get(base, 0) + 1
            names.append(base if seen[base] == 1 else f"{base}#{seen[base]}")
        return names

    def _finish(self, analysis: PasswordAnalysis, failures: list[FinderFailure]) -> FinderExecutionError | None:
        if analysis.cancelled:
            analysis.cancel()
            raise AnalysisCancelled("analysis cancelled before all finders finished")
        error = FinderExecutionError(failures) if failures else None
        if not analysis.complete(error):
            raise AnalysisCancelled("analysis cancelled before all finders finished")
        if error:
            for failure in failures:
                logger.warning("Finder failed: %s", failure)
        logger.debug("Analysis complete: %d pattern(s)", analysis.pattern_count)
        return error


class SequentialFinder(CompositeFinder):
    """Runs the finders one after another in the calling thread."""

    def blocking_analyze(self, analysis: PasswordAnalysis) -> FinderExecutionError | None:
        analysis.begin_finding()
        failures: list[FinderFailure] = []
        for name, finder in zip(self._scope_names(), self._finders):
            if analysis.cancelled:
                break
            try:
                finder.analyze(analysis.scope(name))
            except Exception as exc:
                analysis.discard(name)
                failures.append(FinderFailure(name, exc))
        return self._finish(analysis, failures)


class ParallelFinder(CompositeFinder):
    """
    Runs every finder as its own thread-pool task and joins them all.

    Usage:
        finder = ParallelFinder(FinderSetBuilder().load_default_word_lists().build())
        analysis = PasswordAnalysis("Password123")
        error = finder.blocking_analyze(analysis)
        path = analysis.minimum_cost_decomposition()

    With ``timeout`` set, finders still running when it expires are asked
    to stop, their patterns are dropped and each is reported as a
    ``TimeoutError`` failure.
    """

    def __init__(
        self,
        finders: Iterable[PatternFinder],
        max_workers: int | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(finders)
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        if timeout is not None and timeout <= 0:
            raise ValueError("timeout must be > 0")
        self._max_workers = max_workers
        self._timeout = timeout

    @property
    def timeout(self) -> float | None:
        return self._timeout

    def blocking_analyze(self, analysis: PasswordAnalysis) -> FinderExecutionError | None:
        analysis.begin_finding()
        names = self._scope_names()
        if not self._finders:
            return self._finish(analysis, [])

        workers = self._max_workers or len(self._finders)
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="passfault-finder")
        futures: dict[Future[None], str] = {}
        try:
            for name, finder in zip(names, self._finders):
                logger.debug("Dispatching finder %s", name)
                futures[executor.submit(finder.analyze, analysis.scope(name))] = name
            done, not_done = wait(list(futures), timeout=self._timeout)
        finally:
            # running tasks are never interrupted; late writes are dropped by the analysis
            executor.shutdown(wait=False, cancel_futures=True)

        failures: dict[str, FinderFailure] = {}
        for future in not_done:
            name = futures[future]
            future.cancel()
            analysis.discard(name)
            failures[name] = FinderFailure(name, TimeoutError(f"finder did not finish within {self._timeout}s"))
        for future in done:
            exc = future.exception()
            if exc is not None:
                name = futures[future]
                analysis.discard(name)
                failures[name] = FinderFailure(name, exc)

        ordered = [failures[name] for name in names if name in failures]
        return self._finish(analysis, ordered)
