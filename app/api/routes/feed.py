"""Feed API routes.

Subscriber feeds and single-analyst feed pages.
"""

from __future__ import annotations

from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_feed_timezone, require_subscriber
from app.core.config import settings
from app.repositories.users_orm import UserRecord
from app.schemas.common import ErrorResponse
from app.schemas.feed import FeedItem, FeedPage
from app.services import feed_service


router = APIRouter(prefix="/feed", tags=["Feed"])

_NO_CONTENT = {status.HTTP_204_NO_CONTENT: {"description": "No subscriptions or no content"}}


@router.get("/all", response_model=list[FeedItem], responses=_NO_CONTENT)
async def fetch_feed_all(
    subscriber: UserRecord = Depends(require_subscriber),
    tz: ZoneInfo = Depends(get_feed_timezone),
) -> list[FeedItem]:
    """Everything published by the analysts the current user follows."""
    return await feed_service.get_full_feed(subscriber.id, tz)


@router.get("/week", response_model=list[FeedItem], responses=_NO_CONTENT)
async def fetch_feed_week(
    subscriber: UserRecord = Depends(require_subscriber),
    tz: ZoneInfo = Depends(get_feed_timezone),
) -> list[FeedItem]:
    """Items posted in the last week."""
    return await feed_service.get_weekly_feed(subscriber.id, tz)


@router.get("/days-cutoff", response_model=list[FeedItem], responses=_NO_CONTENT)
async def fetch_feed_cutoff_days(
    days: int = Query(..., description="Window length in days"),
    subscriber: UserRecord = Depends(require_subscriber),
    tz: ZoneInfo = Depends(get_feed_timezone),
) -> list[FeedItem]:
    """Items posted in the last ``days`` days."""
    return await feed_service.get_windowed_feed(subscriber.id, days, tz)


@router.get("/dashboards", response_model=list[FeedItem], responses=_NO_CONTENT)
async def fetch_feed_from_dashboards(
    days: int | None = Query(None, description="Optional window length in days"),
    subscriber: UserRecord = Depends(require_subscriber),
    tz: ZoneInfo = Depends(get_feed_timezone),
) -> list[FeedItem]:
    """Subscriber feed built from the analysts' dashboards, with stock ids."""
    return await feed_service.get_dashboard_feed(subscriber.id, tz, days=days)


@router.get(
    "/target-analyst",
    response_model=FeedPage,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def fetch_for_specific_analyst(
    target_username: str = Query(..., description="Analyst username"),
    page: int = Query(0, description="0-based page number"),
    size: int = Query(settings.feed_default_page_size, description="Items per page"),
    tz: ZoneInfo = Depends(get_feed_timezone),
) -> FeedPage:
    """One page of a single analyst's feed. Public."""
    return await feed_service.get_analyst_feed_page(target_username, page, size, tz)
