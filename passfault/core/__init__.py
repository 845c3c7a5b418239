"""Passfault Core - analysis store, finder contract, composite finders, cost engine, crack time."""

from .analysis import AnalysisScope, AnalysisState, PasswordAnalysis
from .composite import CompositeFinder, ParallelFinder, SequentialFinder
from .crack_time import (
    HASH_SPEEDS,
    CrackTimeEstimate,
    HashFunction,
    ThroughputConfig,
    crack_time,
    duration_string,
    rounded_size_string,
)
from .exceptions import (
    AnalysisCancelled,
    DictionaryLoadError,
    FinderExecutionError,
    FinderFailure,
    InvalidDecompositionState,
    InvalidThroughputConfiguration,
    PassfaultError,
)
from .finder import FinderMetadata, FinderType, PatternFinder
from .pathcost import find_minimum_cost_path

__all__ = [
    "HASH_SPEEDS",
    "AnalysisCancelled",
    "AnalysisScope",
    "AnalysisState",
    "CompositeFinder",
    "CrackTimeEstimate",
    "DictionaryLoadError",
    "FinderExecutionError",
    "FinderFailure",
    "FinderMetadata",
    "FinderType",
    "HashFunction",
    "InvalidDecompositionState",
    "InvalidThroughputConfiguration",
    "ParallelFinder",
    "PassfaultError",
    "PasswordAnalysis",
    "PatternFinder",
    "SequentialFinder",
    "ThroughputConfig",
    "crack_time",
    "duration_string",
    "find_minimum_cost_path",
    "rounded_size_string",
]
