"""Passfault Domain Layer - pattern and decomposition models."""

from .models import BRUTE_FORCE_CLASSIFICATION, PasswordPattern, PathCost

__all__ = [
    "BRUTE_FORCE_CLASSIFICATION",
    "PasswordPattern",
    "PathCost",
]
