"""Pydantic schemas for API request/response validation."""

from .common import (
    ErrorResponse,
    HealthResponse,
)
from .feed import (
    UNRESOLVED_ID,
    CategoryIdentity,
    CoverageEntry,
    CoverageResponse,
    DashboardWithLayoutResponse,
    FeedItem,
    FeedPage,
    RecencyResponse,
    StockIdentity,
)


__all__ = [
    "UNRESOLVED_ID",
    "CategoryIdentity",
    "CoverageEntry",
    "CoverageResponse",
    "DashboardWithLayoutResponse",
    "ErrorResponse",
    "FeedItem",
    "FeedPage",
    "HealthResponse",
    "RecencyResponse",
    "StockIdentity",
]
