"""Flatten analyst content into feed items.

Every feed item is built by ``project_item``. Two walkers feed it:

- ``flatten_dashboard`` walks a Dashboard -> Stock -> Category -> Module tree
  and knows every id.
- ``flatten_records`` turns rows of the ``feed_cards`` view into items. The
  view carries no stock id, so those items get ``UNRESOLVED_ID``; the
  analyst id comes from a caller-supplied username map and also falls back
  to ``UNRESOLVED_ID``. Items are never dropped for missing identity.

Both walkers produce items that order identically because ordering uses
``FeedItem.posted_at``, never the rendered strings.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime, tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.config import settings
from app.core.exceptions import BadRequestError
from app.domain import AnalystRef, Dashboard, FlatFeedRecord
from app.schemas.feed import UNRESOLVED_ID, CategoryIdentity, FeedItem, StockIdentity


# English month names regardless of process locale.
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def resolve_timezone(zone_id: str | None = None, default: str | None = None) -> ZoneInfo:
    """Resolve a caller-supplied IANA zone name.

    ``None`` or an empty string selects ``default``, which itself falls back
    to ``settings.default_timezone``.

    Raises:
        BadRequestError: the name is not a known zone
    """
    name = zone_id or default or settings.default_timezone
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        raise BadRequestError(
            message=f"Unknown timezone: {name}",
            error_code="INVALID_TIMEZONE",
            details={"zone_id": name},
        )


def as_utc(instant: datetime) -> datetime:
    """Treat naive datetimes from the store as UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=UTC)
    return instant


def format_instant(instant: datetime, tz: tzinfo) -> str:
    """Render ``instant`` as ``DD MonthName HH:MM YYYY`` in ``tz``."""
    local = as_utc(instant).astimezone(tz)
    return (
        f"{local.day:02d} {MONTH_NAMES[local.month - 1]} "
        f"{local.hour:02d}:{local.minute:02d} {local.year:04d}"
    )


def project_item(
    analyst: AnalystRef,
    stock: StockIdentity,
    category: CategoryIdentity,
    content: Any,
    post_date: datetime,
    updated_date: datetime,
    tz: tzinfo | None = None,
) -> FeedItem:
    """Build one feed item from a content unit and its ancestors."""
    zone = tz or resolve_timezone()
    return FeedItem.create(
        posted_at=as_utc(post_date),
        analyst=analyst,
        stock=stock,
        category=category,
        content=content,
        post_date=format_instant(post_date, zone),
        updated_date=format_instant(updated_date, zone),
    )


def flatten_dashboard(
    analyst: AnalystRef,
    dashboard: Dashboard,
    tz: tzinfo | None = None,
) -> list[FeedItem]:
    """One feed item per module in ``dashboard``, in tree order."""
    zone = tz or resolve_timezone()
    items: list[FeedItem] = []
    for stock in dashboard.stocks:
        stock_identity = StockIdentity(name=stock.name, id=stock.id)
        for category in stock.categories:
            category_identity = CategoryIdentity(name=category.name, id=category.id)
            for module in category.modules:
                items.append(
                    project_item(
                        analyst,
                        stock_identity,
                        category_identity,
                        module.content,
                        module.post_date,
                        module.updated_date,
                        zone,
                    )
                )
    return items


def flatten_records(
    records: Iterable[FlatFeedRecord],
    analyst_ids: Mapping[str, int],
    tz: tzinfo | None = None,
) -> list[FeedItem]:
    """One feed item per flat record, in input order.

    Args:
        records: Rows from the ``feed_cards`` view
        analyst_ids: Analyst username -> user id; missing names get -1
        tz: Zone used to render dates
    """
    zone = tz or resolve_timezone()
    return [
        project_item(
            AnalystRef(
                username=record.analyst_username,
                id=analyst_ids.get(record.analyst_username, UNRESOLVED_ID),
            ),
            StockIdentity(name=record.stock_name, id=UNRESOLVED_ID),
            CategoryIdentity(name=record.category_name, id=record.category_id),
            record.content,
            record.post_date,
            record.updated_date,
            zone,
        )
        for record in records
    ]
