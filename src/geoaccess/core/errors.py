"""
Domain errors.

Both are `ValueError` subclasses so callers that only care about "bad input" can
catch the builtin, while the CLI/API can map them to precise messages.
"""

from __future__ import annotations


class InvalidPointError(ValueError):
    """A coordinate is non-finite or outside the valid latitude/longitude range."""

    def __init__(self, message: str, *, index: int | None = None):
        super().__init__(message if index is None else f"point[{index}]: {message}")
        self.index = index


class EmptyInputError(ValueError):
    """Fewer than two points were supplied where an average-to-others is requested."""
