"""Domain models for strongly-typed data throughout the application.

Usage:
    from app.domain import Dashboard, FlatFeedRecord, StockRef

    dashboard: Dashboard | None = await dashboards_repo.find_by_id(analyst_id)
"""

from app.domain.content import (
    AnalystRef,
    Category,
    ContentModule,
    Dashboard,
    FlatFeedRecord,
    LayoutRecord,
    Stock,
    StockRef,
    Subscription,
)

__all__ = [
    "AnalystRef",
    "Category",
    "ContentModule",
    "Dashboard",
    "FlatFeedRecord",
    "LayoutRecord",
    "Stock",
    "StockRef",
    "Subscription",
]
