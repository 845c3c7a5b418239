"""
Cost minimization - the attacker's cheapest decomposition of a password.

Positions ``0..L`` are nodes of a forward-only graph. Every pattern
``[s, e)`` is an edge ``s -> e`` weighted by its cost, and every position
also has a single-character brute-force edge ``i -> i + 1``. Because all
edges point forward, a backward pass over the nodes finds the cheapest
``0 -> L`` path in ``O(patterns + L)``.

Ties are broken, in order, by fewer edges, by the edge that ends first
(so the next edge starts earliest) and by the pattern's
classification/description/text, which makes the result independent of
the order finders reported their patterns in.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from ..domain.models import PasswordPattern, PathCost
from .charsets import brute_force_pattern
from .exceptions import InvalidDecompositionState

logger = logging.getLogger(__name__)

COST_TOLERANCE = 1e-9


@dataclass(frozen=True)
class _Choice:
    cost: float
    edges: int
    pattern: PasswordPattern


def _tie_key(pattern: PasswordPattern) -> tuple[int, str, str, str]:
    return (pattern.end, pattern.classification, pattern.description, pattern.match_string)


def _is_better(candidate: _Choice, best: _Choice | None) -> bool:
    if best is None:
        return True
    tolerance = COST_TOLERANCE * max(1.0, abs(best.cost))
    if candidate.cost < best.cost - tolerance:
        return True
    if candidate.cost > best.cost + tolerance:
        return False
    if candidate.edges != best.edges:
        return candidate.edges < best.edges
    return _tie_key(candidate.pattern) < _tie_key(best.pattern)


def _outgoing_edges(password: str, patterns: Iterable[PasswordPattern]) -> list[list[PasswordPattern]]:
    length = len(password)
    outgoing: list[list[PasswordPattern]] = [[] for _ in range(length)]
    for pattern in patterns:
        if pattern.end > length or password[pattern.start:pattern.end] != pattern.match_string:
            raise InvalidDecompositionState(
                f"pattern [{pattern.start}, {pattern.end}) is inconsistent with the password"
            )
        outgoing[pattern.start].append(pattern)
    return outgoing


def find_minimum_cost_path(password: str, patterns: Iterable[PasswordPattern]) -> PathCost:
    """Return the minimum-cost decomposition of ``password``.

    Positions the chosen path does not cover with a pattern are covered by
    brute-force patterns; with no patterns at all the whole password is
    brute force. An empty password yields an empty path of cost 0.
    """
    length = len(password)
    if length == 0:
        return PathCost(length=0)

    outgoing = _outgoing_edges(password, patterns)

    # best[i]: cheapest way to finish the password starting at position i
    best: list[_Choice | None] = [None] * (length + 1)
    for i in range(length - 1, -1, -1):
        chosen: _Choice | None = None
        for edge in (brute_force_pattern(password, i), *outgoing[i]):
            rest = best[edge.end]
            candidate = _Choice(
                cost=edge.cost + (rest.cost if rest else 0.0),
                edges=1 + (rest.edges if rest else 0),
                pattern=edge,
            )
            if _is_better(candidate, chosen):
                chosen = candidate
        best[i] = chosen

    path: list[PasswordPattern] = []
    position = 0
    while position < length:
        step = best[position]
        if step is None:
            raise InvalidDecompositionState(f"no path continues from position {position}")
        path.append(step.pattern)
        position = step.pattern.end

    result = PathCost(length=length, patterns=tuple(path))
    logger.debug("Minimum cost path: %d pattern(s), %.2f bits", len(path), result.total_cost)
    return result
