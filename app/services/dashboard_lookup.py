"""Analyst id -> dashboard lookup shared by feed, coverage and recency.

Services take an optional ``DashboardLookup``; when omitted they read from
the dashboards repository. ``precomputed_lookup`` wraps dashboards that are
already in memory, e.g. an index built by a batch job.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping

from app.domain import Dashboard
from app.repositories import dashboards_orm as dashboards_repo


DashboardLookup = Callable[[int], Awaitable["Dashboard | None"]]


def get_dashboard_lookup(lookup: DashboardLookup | None = None) -> DashboardLookup:
    """Return ``lookup`` or the repository-backed default."""
    return lookup or dashboards_repo.find_by_id


def precomputed_lookup(dashboards: Mapping[int, Dashboard]) -> DashboardLookup:
    """Lookup over an in-memory analyst id -> dashboard mapping."""

    async def _lookup(analyst_id: int) -> Dashboard | None:
        return dashboards.get(analyst_id)

    return _lookup
