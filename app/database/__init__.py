"""Database module with SQLAlchemy async sessions and ORM models."""

from .connection import (
    close_sqlalchemy_engine,
    get_async_database_url,
    get_session,
    init_sqlalchemy_engine,
    ping_database,
)
from .orm import (
    Base,
    ViewBase,
    Category,
    Dashboard,
    DashboardLayout,
    FeedCard,
    ModuleEntity,
    Stock,
    StockRef,
    Subscription,
    User,
)

__all__ = [
    "Base",
    "ViewBase",
    "Category",
    "Dashboard",
    "DashboardLayout",
    "FeedCard",
    "ModuleEntity",
    "Stock",
    "StockRef",
    "Subscription",
    "User",
    "close_sqlalchemy_engine",
    "get_async_database_url",
    "get_session",
    "init_sqlalchemy_engine",
    "ping_database",
]
