"""Passfault exception hierarchy."""

from __future__ import annotations

from dataclasses import dataclass


class PassfaultError(Exception):
    """Base class for all passfault errors."""


class DictionaryLoadError(PassfaultError):
    """A dictionary file could not be found or read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot load dictionary {path}: {reason}")
        self.path = path
        self.reason = reason


@dataclass
class FinderFailure:
    """One finder that failed (or timed out) during a composite run."""
    finder: str
    error: BaseException

    @property
    def timed_out(self) -> bool:
        return isinstance(self.error, TimeoutError)

    def __str__(self) -> str:
        return f"{self.finder}: {type(self.error).__name__}: {self.error}"


class FinderExecutionError(PassfaultError):
    """Consolidated report of every finder that failed in one analysis.

    Returned (not raised) by composite finders next to the partial
    analysis; callers may raise it if a partial result is not acceptable.
    """

    def __init__(self, failures: list[FinderFailure]) -> None:
        self.failures = list(failures)
        names = ", ".join(f.finder for f in self.failures)
        super().__init__(f"{len(self.failures)} finder(s) failed: {names}")


class InvalidDecompositionState(PassfaultError):
    """Cost computation requested on an analysis that is not complete."""


class InvalidThroughputConfiguration(PassfaultError, ValueError):
    """Crack-time throughput settings are missing or out of range."""


class AnalysisCancelled(PassfaultError):
    """The analysis was cancelled before all finders finished."""
