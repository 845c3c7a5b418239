"""Passfault Infrastructure - dictionaries and concrete pattern finders."""
