"""Analyst content domain models.

Read-side representation of an analyst's dashboard tree
(Dashboard -> Stock -> Category -> ContentModule) and of the flat
feed-card rows the store projects from it. These are what the
repositories hand to the feed and coverage services; nothing here is
written back.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AnalystRef(BaseModel):
    """Identity of an analyst (or subscriber) as shown to clients."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(..., description="Unique display name")
    id: int = Field(..., description="User id, -1 when it could not be resolved")


class StockRef(BaseModel):
    """Canonical, dashboard-independent reference to an instrument.

    Shared by every analyst covering the instrument, hashable so it can key
    the coverage map.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class ContentModule(BaseModel):
    """One unit of published content. ``updated_date >= post_date``."""

    id: int
    content: Any = None
    post_date: datetime
    updated_date: datetime


class Category(BaseModel):
    """Named grouping such as "Valuation" or "News" under a stock."""

    id: int
    name: str
    modules: list[ContentModule] = Field(default_factory=list)


class Stock(BaseModel):
    """An analyst's dashboard-local covering record for one instrument."""

    id: int
    name: str
    stock_ref: StockRef
    categories: list[Category] = Field(default_factory=list)


class Dashboard(BaseModel):
    """Root content container of one analyst. ``id`` is the owner's user id."""

    id: int
    stocks: list[Stock] = Field(default_factory=list)


class FlatFeedRecord(BaseModel):
    """Pre-flattened module row from the ``feed_cards`` view.

    The view only carries the analyst's username and the stock's name, so
    numeric ids for those have to be supplied by the caller.
    """

    module_id: int
    analyst_username: str
    stock_name: str
    category_name: str
    category_id: int
    content: Any = None
    post_date: datetime
    updated_date: datetime


class Subscription(BaseModel):
    """Directed subscriber -> analyst edge."""

    subscriber_id: int
    analyst: AnalystRef


class LayoutRecord(BaseModel):
    """Layout metadata for a category, passed through untouched."""

    id: int
    category_id: int
    layout: Any = None
