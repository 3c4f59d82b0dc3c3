"""Business logic services."""

from . import coverage, dashboards, feed_projection, feed_service, recency


__all__ = [
    "coverage",
    "dashboards",
    "feed_projection",
    "feed_service",
    "recency",
]
