"""Subscription lookups using SQLAlchemy ORM.

Usage:
    from app.repositories.subscriptions_orm import find_by_subscriber
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.core.logging import get_logger
from app.database.connection import get_session
from app.database.orm import Subscription as SubscriptionORM
from app.domain import AnalystRef, Subscription


logger = get_logger("repositories.subscriptions_orm")


async def find_by_subscriber(subscriber_id: int) -> list[Subscription]:
    """List the analysts a subscriber follows, in subscription order."""
    async with get_session() as session:
        result = await session.execute(
            select(SubscriptionORM)
            .where(SubscriptionORM.subscriber_id == subscriber_id)
            .options(selectinload(SubscriptionORM.subscribed_to))
            .order_by(SubscriptionORM.id)
        )
        return [
            Subscription(
                subscriber_id=row.subscriber_id,
                analyst=AnalystRef(
                    username=row.subscribed_to.username,
                    id=row.subscribed_to.id,
                ),
            )
            for row in result.scalars()
        ]
