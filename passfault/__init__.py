"""Passfault - password pattern analysis and crack-time estimation."""

__version__ = "0.9.0"
