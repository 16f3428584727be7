"""Route group exports."""

from . import health, navigation

__all__ = ["health", "navigation"]
