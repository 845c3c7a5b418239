"""Passfault Domain Models - Pydantic models for patterns and decompositions."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

BRUTE_FORCE_CLASSIFICATION = "Random Characters"


class PasswordPattern(BaseModel):
    """A substring of a password explained by one guessing theory.

    ``cost`` is log2 of the number of guesses an attacker enumerating this
    pattern family needs to reach ``match_string``.
    """

    model_config = ConfigDict(frozen=True)

    start: int = Field(..., ge=0)
    end: int = Field(..., gt=0)
    classification: str
    description: str
    match_string: str
    cost: float = Field(..., ge=0)

    @model_validator(mode="after")
    def _check_span(self) -> PasswordPattern:
        if self.end <= self.start:
            raise ValueError(f"empty span [{self.start}, {self.end})")
        if len(self.match_string) != self.end - self.start:
            raise ValueError("match_string length does not match span")
        return self

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_brute_force(self) -> bool:
        return self.classification == BRUTE_FORCE_CLASSIFICATION

    def sort_key(self) -> tuple[int, int, str, str, str, float]:
        return (self.start, self.end, self.classification, self.description, self.match_string, self.cost)

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": self.start,
            "end": self.end,
            "classification": self.classification,
            "description": self.description,
            "match": self.match_string,
            "cost": round(self.cost, 4),
        }


class PathCost(BaseModel):
    """Left-to-right, gap-free decomposition of a whole password."""

    model_config = ConfigDict(frozen=True)

    length: int = Field(..., ge=0)
    patterns: tuple[PasswordPattern, ...] = ()

    @model_validator(mode="after")
    def _check_tiling(self) -> PathCost:
        position = 0
        for pattern in self.patterns:
            if pattern.start != position:
                raise ValueError(f"pattern at {pattern.start} does not continue from {position}")
            position = pattern.end
        if position != self.length:
            raise ValueError(f"path covers [0, {position}) of a {self.length}-character password")
        return self

    @property
    def total_cost(self) -> float:
        """Sum of pattern costs, i.e. log2 of the product of search spaces."""
        return sum(p.cost for p in self.patterns)

    @property
    def password(self) -> str:
        return "".join(p.match_string for p in self.patterns)

    def share(self, pattern: PasswordPattern) -> float:
        """Fraction of the total cost contributed by ``pattern`` (0..1)."""
        total = self.total_cost
        if total <= 0:
            return 0.0
        return pattern.cost / total

    def __len__(self) -> int:
        return len(self.patterns)

    def to_dict(self) -> dict[str, Any]:
        return {
            "length": self.length,
            "total_cost": round(self.total_cost, 4),
            "patterns": [p.to_dict() for p in self.patterns],
        }
