"""API routes package."""

from . import (
    coverage,
    dashboards,
    feed,
    health,
)


__all__ = [
    "coverage",
    "dashboards",
    "feed",
    "health",
]
