"""Which analysts cover which instruments.

For each analyst, every stock on their dashboard puts them in the bucket of
that stock's canonical reference. Buckets keep first-seen order. Analysts
without a dashboard cover nothing.
"""

from __future__ import annotations

from collections.abc import Iterable

from app.core.logging import get_logger
from app.domain import AnalystRef, StockRef
from app.repositories import users_orm as users_repo
from app.schemas.feed import CoverageEntry, CoverageResponse
from app.services.dashboard_lookup import DashboardLookup, get_dashboard_lookup


logger = get_logger("coverage")

CoverageMap = dict[StockRef, list[AnalystRef]]


async def build_coverage_map(
    analysts: Iterable[AnalystRef],
    lookup: DashboardLookup | None = None,
) -> CoverageMap:
    """Map each covered instrument to the analysts covering it."""
    find_dashboard = get_dashboard_lookup(lookup)
    coverage: CoverageMap = {}

    for analyst in analysts:
        dashboard = await find_dashboard(analyst.id)
        if dashboard is None:
            continue
        for stock in dashboard.stocks:
            bucket = coverage.setdefault(stock.stock_ref, [])
            if analyst not in bucket:
                bucket.append(analyst)

    return coverage


def coverage_entries(coverage: CoverageMap) -> list[CoverageEntry]:
    return [
        CoverageEntry(stock_ref=stock_ref, analysts=list(analysts))
        for stock_ref, analysts in coverage.items()
    ]


async def get_coverage(
    analyst_ids: list[int] | None = None,
    lookup: DashboardLookup | None = None,
) -> CoverageResponse:
    """Coverage for the given analyst ids, or for every analyst when None.

    Unknown ids are ignored.
    """
    if analyst_ids is None:
        users = await users_repo.list_analysts()
    else:
        users = await users_repo.get_users_by_ids(analyst_ids)

    coverage = await build_coverage_map([user.to_ref() for user in users], lookup)
    entries = coverage_entries(coverage)
    logger.debug(f"Coverage over {len(users)} analysts: {len(entries)} instruments")
    return CoverageResponse(coverage=entries, total_count=len(entries))
