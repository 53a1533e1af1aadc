# errors.py
from __future__ import annotations


class ConfigurationError(ValueError):
    """Bad machine or search settings, raised when objects are built."""


class DegenerateInputWarning(UserWarning):
    """Scoring input with no letters; sentinel values are used instead."""
