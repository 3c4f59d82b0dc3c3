"""Bearer token verification.

Tokens are minted by the identity service with a shared HS256 secret; this
service only needs the subject (the subscriber's username).
``create_access_token`` mints compatible tokens for local tooling and tests.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import BaseModel

from .config import settings
from .exceptions import AuthenticationError


JWT_ALGORITHM = "HS256"
JWT_ISSUER = "analystfeed"
JWT_AUDIENCE = "analystfeed-api"

_REQUIRED_CLAIMS = ["exp", "iat", "sub", "iss", "aud", "jti"]


class TokenData(BaseModel):
    """Claims of a verified token."""

    sub: str  # subscriber username
    exp: datetime
    iat: datetime
    iss: str
    aud: str
    jti: str


def create_access_token(username: str, expires_delta: Optional[timedelta] = None) -> str:
    issued = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {
        "sub": username,
        "iat": issued,
        "exp": issued + lifetime,
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "jti": secrets.token_urlsafe(16),
    }
    return jwt.encode(claims, settings.auth_secret, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> TokenData:
    """Verify signature, issuer, audience and expiry.

    Raises:
        AuthenticationError: expired or otherwise invalid token
    """
    try:
        claims = jwt.decode(
            token,
            settings.auth_secret,
            algorithms=[JWT_ALGORITHM],
            issuer=JWT_ISSUER,
            audience=JWT_AUDIENCE,
            options={"require": _REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError(message="Token has expired", error_code="TOKEN_EXPIRED")
    except jwt.InvalidTokenError:
        raise AuthenticationError(message="Invalid token", error_code="INVALID_TOKEN")

    return TokenData(
        sub=claims["sub"],
        exp=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        iat=datetime.fromtimestamp(claims["iat"], tz=timezone.utc),
        iss=claims["iss"],
        aud=claims["aud"],
        jti=claims["jti"],
    )
