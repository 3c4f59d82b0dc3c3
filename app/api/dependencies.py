"""API dependencies for authentication and request parameters."""

from __future__ import annotations

from zoneinfo import ZoneInfo

from fastapi import Cookie, Depends, Header, Query

from app.core.exceptions import AuthenticationError, NotFoundError
from app.core.logging import subscriber_var
from app.core.security import TokenData, decode_access_token
from app.repositories import users_orm as users_repo
from app.repositories.users_orm import UserRecord
from app.services.feed_projection import resolve_timezone


__all__ = [
    "get_feed_timezone",
    "require_subscriber",
    "require_user",
]


def _extract_token(
    authorization: str | None = Header(default=None),
    session: str | None = Cookie(default=None),
) -> str | None:
    """Extract JWT token from Authorization header or session cookie."""
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token:
            return token

    if session:
        return session

    return None


async def require_user(
    authorization: str | None = Header(default=None),
    session: str | None = Cookie(default=None),
) -> TokenData:
    """
    Require authenticated user.

    Raises AuthenticationError if no valid token is present.
    """
    token = _extract_token(authorization, session)
    if not token:
        raise AuthenticationError()
    return decode_access_token(token)


async def require_subscriber(user: TokenData = Depends(require_user)) -> UserRecord:
    """Resolve the token subject to the subscriber's user record."""
    record = await users_repo.get_user(user.sub)
    if record is None:
        raise NotFoundError(message="User not found")
    subscriber_var.set(record.username)
    return record


def get_feed_timezone(
    zone_id: str | None = Query(
        None, description="IANA timezone for rendered dates, e.g. Europe/Stockholm"
    ),
) -> ZoneInfo:
    """Timezone requested by the caller, or the configured default."""
    return resolve_timezone(zone_id)
