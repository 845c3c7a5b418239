"""
Password analysis - the shared, thread-safe pattern store for one password.

Finders write patterns concurrently; once the owning composite finder
completes the analysis it is frozen and the cost-minimization engine may
read it.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import TYPE_CHECKING

from ..domain.models import PasswordPattern, PathCost
from .exceptions import InvalidDecompositionState
from .pathcost import find_minimum_cost_path

if TYPE_CHECKING:
    from .exceptions import FinderExecutionError

logger = logging.getLogger(__name__)

DEFAULT_SCOPE = "default"


class AnalysisState(str, Enum):
    """Analysis lifecycle state."""
    NEW = "new"
    FINDING = "finding"
    COMPLETE = "complete"
    CANCELLED = "cancelled"


class AnalysisScope:
    """Write handle given to a single finder during a composite run.

    Patterns written through a scope are stored under the scope's name so
    the composite can drop them as a unit when the finder fails.
    """

    def __init__(self, analysis: PasswordAnalysis, name: str) -> None:
        self._analysis = analysis
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def password(self) -> str:
        return self._analysis.password

    @property
    def cancelled(self) -> bool:
        return self._analysis.cancelled or self._analysis.is_discarded(self._name)

    def found_pattern(self, pattern: PasswordPattern) -> None:
        self._analysis._add(self._name, pattern)


class PasswordAnalysis:
    """
    All patterns discovered for one password.

    Usage:
        analysis = PasswordAnalysis("Tr0ub4dor&3")
        ParallelFinder(finders).blocking_analyze(analysis)
        path = analysis.minimum_cost_decomposition()
        print(path.total_cost)
    """

    def __init__(self, password: str) -> None:
        self._password = password
        self._lock = threading.Lock()
        self._cancel_event = threading.Event()
        self._buckets: dict[str, list[PasswordPattern]] = {}
        self._discarded: set[str] = set()
        self._state = AnalysisState.NEW
        self._error: FinderExecutionError | None = None
        self._path: PathCost | None = None

    @property
    def password(self) -> str:
        return self._password

    @property
    def length(self) -> int:
        return len(self._password)

    @property
    def state(self) -> AnalysisState:
        return self._state

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    @property
    def error(self) -> FinderExecutionError | None:
        """Consolidated finder failures of the run that completed this analysis."""
        return self._error

    @property
    def patterns(self) -> tuple[PasswordPattern, ...]:
        """Every stored pattern, in no guaranteed order."""
        with self._lock:
            return tuple(p for bucket in self._buckets.values() for p in bucket)

    @property
    def pattern_count(self) -> int:
        with self._lock:
            return sum(len(b) for b in self._buckets.values())

    def patterns_by_finder(self) -> dict[str, tuple[PasswordPattern, ...]]:
        with self._lock:
            return {name: tuple(bucket) for name, bucket in self._buckets.items()}

    # ==========================================================================
    # Writes
    # ==========================================================================

    def scope(self, name: str) -> AnalysisScope:
        return AnalysisScope(self, name)

    def found_pattern(self, pattern: PasswordPattern) -> None:
        """Add a pattern. Safe to call from any number of threads."""
        self._add(DEFAULT_SCOPE, pattern)

    def _add(self, bucket: str, pattern: PasswordPattern) -> None:
        if pattern.end > len(self._password):
            raise ValueError(f"pattern [{pattern.start}, {pattern.end}) exceeds password length {len(self._password)}")
        if self._password[pattern.start:pattern.end] != pattern.match_string:
            raise ValueError(f"pattern text {pattern.match_string!r} does not match the password at {pattern.start}")
        with self._lock:
            if self._state in (AnalysisState.COMPLETE, AnalysisState.CANCELLED) or bucket in self._discarded:
                logger.debug("Dropped late pattern from %s", bucket)
                return
            self._buckets.setdefault(bucket, []).append(pattern)

    def is_discarded(self, name: str) -> bool:
        with self._lock:
            return name in self._discarded

    def discard(self, name: str) -> int:
        """Drop every pattern written through scope ``name`` and ignore further writes."""
        with self._lock:
            dropped = self._buckets.pop(name, [])
            self._discarded.add(name)
        if dropped:
            logger.debug("Discarded %d pattern(s) from %s", len(dropped), name)
        return len(dropped)

    # ==========================================================================
    # Lifecycle
    # ==========================================================================

    def begin_finding(self) -> None:
        with self._lock:
            if self._state in (AnalysisState.COMPLETE, AnalysisState.CANCELLED):
                raise InvalidDecompositionState(f"analysis is already {self._state.value}")
            self._state = AnalysisState.FINDING

    def complete(self, error: FinderExecutionError | None = None) -> bool:
        """Freeze the pattern store. Called once all finders are done.

        Returns False, leaving the analysis untouched, if it was cancelled first.
        """
        with self._lock:
            if self._state == AnalysisState.CANCELLED:
                return False
            self._state = AnalysisState.COMPLETE
            self._error = error
            return True

    def cancel(self) -> None:
        """Ask running finders to stop and invalidate the analysis.

        A completed analysis is left untouched.
        """
        with self._lock:
            if self._state == AnalysisState.COMPLETE:
                return
            self._cancel_event.set()
            self._state = AnalysisState.CANCELLED
            self._buckets.clear()
        logger.debug("Analysis cancelled")

    # ==========================================================================
    # Cost minimization
    # ==========================================================================

    def minimum_cost_decomposition(self) -> PathCost:
        """Cheapest full decomposition of the password (the attacker's best path)."""
        if self._state != AnalysisState.COMPLETE:
            raise InvalidDecompositionState(
                f"decomposition requested while analysis is {self._state.value}"
            )
        if self._path is None:
            self._path = find_minimum_cost_path(self._password, self.patterns)
        return self._path

    calculate_highest_probable_patterns = minimum_cost_decomposition

    def __repr__(self) -> str:
        return f"PasswordAnalysis(length={len(self._password)}, state={self._state.value}, patterns={self.pattern_count})"
