"""
geometry/errors.py

Exceptions raised by the edge geometry engine.
"""

from __future__ import annotations


class GeometryError(Exception):
    """Base class for failures local to one edge or one control."""


class InvalidSide(GeometryError, ValueError):
    """Raised when a value is not one of the four node sides."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid side: {value!r} (expected top, bottom, left or right)")


class IncompatibleFrame(GeometryError):
    """Raised when two coordinate frames cannot be related through a shared root."""
