"""Subscriber feeds.

Merges the feed items of every analyst a subscriber follows, newest first.
Feeds are read from the flat ``feed_cards`` view; ``get_dashboard_feed``
builds the same items by walking dashboards instead.

Items with equal post instants keep their input order.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, timedelta, tzinfo

from app.core.config import settings
from app.core.exceptions import NoContentError, NotFoundError
from app.core.logging import get_logger
from app.domain import AnalystRef, FlatFeedRecord
from app.repositories import feed_cards_orm as feed_cards_repo
from app.repositories import subscriptions_orm as subscriptions_repo
from app.repositories import users_orm as users_repo
from app.schemas.feed import FeedItem, FeedPage
from app.services.dashboard_lookup import DashboardLookup, get_dashboard_lookup
from app.services.feed_projection import (
    as_utc,
    flatten_dashboard,
    flatten_records,
    resolve_timezone,
)
from app.services.recency import MIN_INSTANT


logger = get_logger("feed")

MAX_INSTANT = datetime.max.replace(tzinfo=UTC)


# =============================================================================
# ORDERING, WINDOWS AND PAGES
# =============================================================================


def sort_feed(items: Iterable[FeedItem]) -> list[FeedItem]:
    """Newest first; ties keep input order."""
    return sorted(items, key=lambda item: item.posted_at, reverse=True)


def window_cutoff(days: int, now: datetime | None = None) -> datetime:
    """``now - days``, clamped to the representable range."""
    now = as_utc(now) if now is not None else datetime.now(UTC)
    try:
        return now - timedelta(days=days)
    except OverflowError:
        return MIN_INSTANT if days > 0 else MAX_INSTANT


def filter_window(items: Iterable[FeedItem], cutoff: datetime) -> list[FeedItem]:
    """Items posted strictly after ``cutoff``."""
    return [item for item in items if item.posted_at > cutoff]


def build_page(content: list[FeedItem], page: int, size: int, total: int) -> FeedPage:
    """Wrap one page of items with its position in the whole feed."""
    total_pages = math.ceil(total / size) if size > 0 else 0
    return FeedPage(
        content=content,
        page=page,
        size=size,
        total_elements=total,
        total_pages=total_pages,
        number_of_elements=len(content),
        first=page <= 0,
        last=page >= total_pages - 1,
    )


def paginate(items: Sequence[FeedItem], page: int, size: int) -> FeedPage:
    """Cut page ``page`` (0-based) of ``size`` items out of ``items``.

    Negative pages and non-positive sizes give an empty page.
    """
    if page < 0 or size <= 0:
        content: list[FeedItem] = []
    else:
        content = list(items[page * size:(page + 1) * size])
    return build_page(content, page, size, len(items))


# =============================================================================
# SUBSCRIBER FEEDS
# =============================================================================


async def _subscribed_analysts(subscriber_id: int) -> list[AnalystRef]:
    """Analysts ``subscriber_id`` follows, deduplicated by id.

    Raises:
        NoContentError: the subscriber follows nobody
    """
    subscriptions = await subscriptions_repo.find_by_subscriber(subscriber_id)
    if not subscriptions:
        raise NoContentError(message="No subscriptions")

    analysts: dict[int, AnalystRef] = {}
    for subscription in subscriptions:
        analysts.setdefault(subscription.analyst.id, subscription.analyst)
    return list(analysts.values())


async def _collect_records(
    analysts: list[AnalystRef],
    after: datetime | None = None,
) -> tuple[list[FlatFeedRecord], dict[str, int]]:
    records: list[FlatFeedRecord] = []
    analyst_ids: dict[str, int] = {}
    for analyst in analysts:
        records.extend(
            await feed_cards_repo.find_by_analyst_username(analyst.username, after=after)
        )
        analyst_ids[analyst.username] = analyst.id
    return records, analyst_ids


async def get_full_feed(
    subscriber_id: int,
    tz: tzinfo | None = None,
) -> list[FeedItem]:
    """Every item of every followed analyst, newest first.

    Raises:
        NoContentError: no subscriptions, or the followed analysts have
            published nothing
    """
    analysts = await _subscribed_analysts(subscriber_id)
    records, analyst_ids = await _collect_records(analysts)
    if not records:
        raise NoContentError(message="Subscribed analysts have no content")

    items = sort_feed(flatten_records(records, analyst_ids, tz or resolve_timezone()))
    logger.debug(
        f"Full feed for subscriber {subscriber_id}: "
        f"{len(items)} items from {len(analysts)} analysts"
    )
    return items


async def get_windowed_feed(
    subscriber_id: int,
    days: int,
    tz: tzinfo | None = None,
    now: datetime | None = None,
) -> list[FeedItem]:
    """Items posted within the last ``days`` days, newest first.

    An empty window is a valid, empty result.

    Raises:
        NoContentError: no subscriptions
    """
    analysts = await _subscribed_analysts(subscriber_id)
    cutoff = window_cutoff(days, now)
    records, analyst_ids = await _collect_records(analysts, after=cutoff)

    items = flatten_records(records, analyst_ids, tz or resolve_timezone())
    items = sort_feed(filter_window(items, cutoff))
    logger.debug(
        f"{days}-day feed for subscriber {subscriber_id}: {len(items)} items"
    )
    return items


async def get_weekly_feed(
    subscriber_id: int,
    tz: tzinfo | None = None,
    now: datetime | None = None,
) -> list[FeedItem]:
    return await get_windowed_feed(subscriber_id, settings.feed_week_days, tz, now)


async def get_dashboard_feed(
    subscriber_id: int,
    tz: tzinfo | None = None,
    days: int | None = None,
    now: datetime | None = None,
    lookup: DashboardLookup | None = None,
) -> list[FeedItem]:
    """Subscriber feed built by walking each analyst's dashboard.

    Unlike the flat feed, items carry real stock ids. Analysts without a
    dashboard contribute nothing.

    Raises:
        NoContentError: no subscriptions
    """
    analysts = await _subscribed_analysts(subscriber_id)
    find_dashboard = get_dashboard_lookup(lookup)
    zone = tz or resolve_timezone()

    items: list[FeedItem] = []
    for analyst in analysts:
        dashboard = await find_dashboard(analyst.id)
        if dashboard is None:
            continue
        items.extend(flatten_dashboard(analyst, dashboard, zone))

    if days is not None:
        items = filter_window(items, window_cutoff(days, now))
    return sort_feed(items)


# =============================================================================
# SINGLE ANALYST
# =============================================================================


async def get_analyst_feed_page(
    username: str,
    page: int = 0,
    size: int | None = None,
    tz: tzinfo | None = None,
) -> FeedPage:
    """One page of a single analyst's items, newest first.

    Pages past the end, negative pages and non-positive sizes are empty
    pages, not errors.

    Raises:
        NotFoundError: no user called ``username``
    """
    if size is None:
        size = settings.feed_default_page_size

    analyst = await users_repo.get_user(username)
    if analyst is None:
        raise NotFoundError(message=f"Analyst not found: {username}")

    total = await feed_cards_repo.count_by_analyst_username(analyst.username)
    offset = page * size
    if page < 0 or size <= 0 or offset >= total:
        records: list[FlatFeedRecord] = []
    else:
        # Bounded by total so the binds always fit in int8
        records = await feed_cards_repo.find_page_by_analyst_username(
            analyst.username, offset=offset, limit=min(size, total - offset)
        )

    items = sort_feed(
        flatten_records(records, {analyst.username: analyst.id}, tz or resolve_timezone())
    )
    return build_page(items, page, size, total)
