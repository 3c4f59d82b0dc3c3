"""API module with routers and dependencies."""

from .app import create_api_app
from .dependencies import (
    get_feed_timezone,
    require_subscriber,
    require_user,
)


__all__ = [
    "create_api_app",
    "get_feed_timezone",
    "require_subscriber",
    "require_user",
]
