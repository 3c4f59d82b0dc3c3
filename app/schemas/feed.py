"""Feed, coverage and recency schemas.

Plain response models returned by the feed services and serialized as-is
by the API routes.

Usage:
    from app.schemas.feed import FeedItem, FeedPage, CoverageEntry
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from app.domain import AnalystRef, Dashboard, LayoutRecord, StockRef


# Stock id used when the flat-query path cannot recover the numeric id.
UNRESOLVED_ID = -1


# =============================================================================
# FEED ITEMS
# =============================================================================


class StockIdentity(BaseModel):
    """Stock a feed item was published under."""
    model_config = ConfigDict(frozen=True)

    name: str
    id: int = Field(..., description="Dashboard stock id, -1 when unresolved")


class CategoryIdentity(BaseModel):
    """Category a feed item was published under."""
    model_config = ConfigDict(frozen=True)

    name: str
    id: int


class FeedItem(BaseModel):
    """Display-ready projection of one content module.

    Date strings are rendered once at construction in the requested
    timezone. ``posted_at`` keeps the original instant for ordering and is
    not serialized.
    """
    model_config = ConfigDict(frozen=True)

    analyst: AnalystRef
    stock: StockIdentity
    category: CategoryIdentity
    content: Any = None
    post_date: str = Field(..., examples=["05 March 14:30 2024"])
    updated_date: str = Field(..., examples=["06 March 09:05 2024"])

    _posted_at: datetime = PrivateAttr()

    @classmethod
    def create(cls, posted_at: datetime, **fields: Any) -> FeedItem:
        item = cls(**fields)
        item._posted_at = posted_at
        return item

    @property
    def posted_at(self) -> datetime:
        return self._posted_at


class FeedPage(BaseModel):
    """One page of a single analyst's feed."""
    content: list[FeedItem]
    page: int = Field(..., description="0-based page number")
    size: int = Field(..., description="Requested page size")
    total_elements: int
    total_pages: int
    number_of_elements: int
    first: bool
    last: bool


# =============================================================================
# COVERAGE & RECENCY
# =============================================================================


class CoverageEntry(BaseModel):
    """Analysts covering one canonical instrument."""
    stock_ref: StockRef
    analysts: list[AnalystRef]


class CoverageResponse(BaseModel):
    """Coverage map in first-seen order."""
    coverage: list[CoverageEntry]
    total_count: int


class RecencyResponse(BaseModel):
    """Latest post and update instants across an analyst's content."""
    analyst: AnalystRef
    last_post_time: datetime
    last_update_time: datetime


# =============================================================================
# DASHBOARD VIEW
# =============================================================================


class DashboardWithLayoutResponse(BaseModel):
    """Dashboard tree plus the layout rows of all of its categories."""
    dashboard: Dashboard
    layouts: list[LayoutRecord]
