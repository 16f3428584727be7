"""Errors raised while evaluating a route."""

from __future__ import annotations

from typing import Any


class InvalidInputError(ValueError):
    """Waypoints are missing, too few, or outside the valid coordinate range."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.context = context


class OutOfBoundsError(InvalidInputError):
    """A waypoint lies outside the configured operating region."""


class ConstraintViolationError(ValueError):
    """A computed route exceeds a caller-supplied limit."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.context = context
