"""Latest post/update instants across an analyst's content tree.

A full walk of the dashboard. Analysts without a dashboard or without any
module resolve to ``MIN_INSTANT`` so recency values always compare.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from app.core.exceptions import NotFoundError
from app.core.logging import get_logger
from app.domain import Dashboard
from app.repositories import users_orm as users_repo
from app.schemas.feed import RecencyResponse
from app.services.dashboard_lookup import DashboardLookup, get_dashboard_lookup
from app.services.feed_projection import as_utc


logger = get_logger("recency")

MIN_INSTANT = datetime.min.replace(tzinfo=UTC)


@dataclass(frozen=True)
class Recency:
    last_post: datetime = MIN_INSTANT
    last_update: datetime = MIN_INSTANT


def latest_activity(dashboard: Dashboard | None) -> Recency:
    """Walk every module of ``dashboard`` once and keep the maxima."""
    if dashboard is None:
        return Recency()

    last_post = MIN_INSTANT
    last_update = MIN_INSTANT
    for stock in dashboard.stocks:
        for category in stock.categories:
            for module in category.modules:
                post_date = as_utc(module.post_date)
                updated_date = as_utc(module.updated_date)
                if post_date > last_post:
                    last_post = post_date
                if updated_date > last_update:
                    last_update = updated_date

    return Recency(last_post=last_post, last_update=last_update)


async def resolve_recency(
    analyst_id: int,
    lookup: DashboardLookup | None = None,
) -> Recency:
    """Recency of one analyst, read through the dashboard lookup."""
    dashboard = await get_dashboard_lookup(lookup)(analyst_id)
    return latest_activity(dashboard)


async def last_post_time(analyst_id: int, lookup: DashboardLookup | None = None) -> datetime:
    return (await resolve_recency(analyst_id, lookup)).last_post


async def last_update_time(analyst_id: int, lookup: DashboardLookup | None = None) -> datetime:
    return (await resolve_recency(analyst_id, lookup)).last_update


# Older call sites used these names; same walk.
fetch_last_post_time = last_post_time
fetch_last_update_time = last_update_time


async def get_analyst_recency(
    username: str,
    lookup: DashboardLookup | None = None,
) -> RecencyResponse:
    """Recency of the analyst called ``username``.

    Raises:
        NotFoundError: no user with that name
    """
    user = await users_repo.get_user(username)
    if user is None:
        raise NotFoundError(message=f"Analyst not found: {username}")

    recency = await resolve_recency(user.id, lookup)
    return RecencyResponse(
        analyst=user.to_ref(),
        last_post_time=recency.last_post,
        last_update_time=recency.last_update,
    )
