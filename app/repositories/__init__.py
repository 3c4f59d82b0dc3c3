"""Data access layer repositories.

Each repository module provides async functions for database reads.
All code uses SQLAlchemy ORM models from `app.database.orm` with the
`get_session()` context manager.

ORM-based repositories:
- dashboards_orm: dashboard trees, category layouts, stock references
- feed_cards_orm: flat feed-card view queries
- subscriptions_orm: subscriber -> analyst edges
- users_orm: user lookups
"""

from . import dashboards_orm
from . import feed_cards_orm
from . import subscriptions_orm
from . import users_orm

__all__ = [
    "dashboards_orm",
    "feed_cards_orm",
    "subscriptions_orm",
    "users_orm",
]
