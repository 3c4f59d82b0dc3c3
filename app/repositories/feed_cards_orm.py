"""Flat feed-card queries against the ``feed_cards`` view.

Every query is ordered by post date, newest first.

Usage:
    from app.repositories.feed_cards_orm import (
        find_by_analyst_username, find_page_by_analyst_username,
        count_by_analyst_username,
    )
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select

from app.core.logging import get_logger
from app.database.connection import get_session
from app.database.orm import FeedCard
from app.domain import FlatFeedRecord


logger = get_logger("repositories.feed_cards_orm")


def _to_record(card: FeedCard) -> FlatFeedRecord:
    return FlatFeedRecord(
        module_id=card.module_id,
        analyst_username=card.analyst_username,
        stock_name=card.stock_name,
        category_name=card.category_name,
        category_id=card.category_id,
        content=card.content,
        post_date=card.post_date,
        updated_date=card.updated_date,
    )


async def find_by_analyst_username(
    username: str,
    after: datetime | None = None,
) -> list[FlatFeedRecord]:
    """All cards of one analyst, newest first.

    Args:
        username: Analyst username
        after: When given, only cards posted strictly after this instant

    Returns:
        Flat feed records ordered by post date descending
    """
    async with get_session() as session:
        stmt = select(FeedCard).where(FeedCard.analyst_username == username)
        if after is not None:
            stmt = stmt.where(FeedCard.post_date > after)
        stmt = stmt.order_by(FeedCard.post_date.desc(), FeedCard.module_id.desc())

        result = await session.execute(stmt)
        return [_to_record(card) for card in result.scalars()]


async def find_page_by_analyst_username(
    username: str,
    offset: int,
    limit: int,
) -> list[FlatFeedRecord]:
    """One page of an analyst's cards, newest first."""
    async with get_session() as session:
        result = await session.execute(
            select(FeedCard)
            .where(FeedCard.analyst_username == username)
            .order_by(FeedCard.post_date.desc(), FeedCard.module_id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [_to_record(card) for card in result.scalars()]


async def count_by_analyst_username(username: str) -> int:
    """Total number of cards an analyst has published."""
    async with get_session() as session:
        result = await session.execute(
            select(func.count())
            .select_from(FeedCard)
            .where(FeedCard.analyst_username == username)
        )
        return result.scalar_one()
