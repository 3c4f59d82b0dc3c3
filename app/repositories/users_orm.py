"""User lookups using SQLAlchemy ORM.

Read-only: users are created and edited by the identity service.

Usage:
    from app.repositories.users_orm import get_user, get_users_by_ids, list_analysts
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import select

from app.core.logging import get_logger
from app.database.connection import get_session
from app.database.orm import User as UserORM
from app.domain import AnalystRef


logger = get_logger("repositories.users_orm")


@dataclass
class UserRecord:
    """A platform user as seen by the feed service."""

    id: int
    username: str
    is_analyst: bool = False

    @classmethod
    def from_orm(cls, user: UserORM) -> UserRecord:
        """Create from ORM model."""
        return cls(
            id=user.id,
            username=user.username,
            is_analyst=user.is_analyst or False,
        )

    def to_ref(self) -> AnalystRef:
        return AnalystRef(username=self.username, id=self.id)


async def get_user(username: str) -> UserRecord | None:
    """Get a user by username."""
    async with get_session() as session:
        result = await session.execute(
            select(UserORM).where(UserORM.username == username)
        )
        user = result.scalar_one_or_none()

        if user:
            return UserRecord.from_orm(user)
        return None


async def get_user_by_id(user_id: int) -> UserRecord | None:
    """Get a user by ID."""
    async with get_session() as session:
        user = await session.get(UserORM, user_id)

        if user:
            return UserRecord.from_orm(user)
        return None


async def get_users_by_ids(user_ids: Iterable[int]) -> list[UserRecord]:
    """Get users by ID, preserving the order of ``user_ids``.

    Unknown ids are skipped and duplicates collapse to the first occurrence.
    """
    ids = list(dict.fromkeys(user_ids))
    if not ids:
        return []

    async with get_session() as session:
        result = await session.execute(select(UserORM).where(UserORM.id.in_(ids)))
        by_id = {user.id: UserRecord.from_orm(user) for user in result.scalars()}

    return [by_id[user_id] for user_id in ids if user_id in by_id]


async def list_analysts() -> list[UserRecord]:
    """List every analyst ordered by id."""
    async with get_session() as session:
        result = await session.execute(
            select(UserORM).where(UserORM.is_analyst.is_(True)).order_by(UserORM.id)
        )
        return [UserRecord.from_orm(user) for user in result.scalars()]
