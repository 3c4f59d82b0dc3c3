"""SQLAlchemy ORM models for the analyst content store.

This module defines the tables this service reads, using SQLAlchemy 2.0 ORM
style with async support via the asyncpg driver. The tables are written by
the dashboard editor and the identity service; this service only reads them.

Usage:
    from app.database.orm import Dashboard
    from app.database.connection import get_session

    async with get_session() as session:
        dashboard = await session.get(Dashboard, analyst_id)
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)


# Naming convention for constraints and indexes (deterministic names for Alembic)
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all ORM models with naming convention."""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


# =============================================================================
# USERS & SUBSCRIPTIONS
# =============================================================================


class User(Base):
    """Platform user. Analysts are users with ``is_analyst`` set."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    is_analyst: Mapped[bool] = mapped_column(Boolean, default=False)

    # Relationships
    subscriptions: Mapped[list[Subscription]] = relationship(
        back_populates="subscriber", foreign_keys="Subscription.subscriber_id"
    )
    subscribers: Mapped[list[Subscription]] = relationship(
        back_populates="subscribed_to", foreign_keys="Subscription.subscribed_to_id"
    )

    __table_args__ = (
        Index("idx_users_username", "username"),
    )


class Subscription(Base):
    """Subscriber -> analyst edge, unique per pair."""
    __tablename__ = "subscriptions"

    id: Mapped[int] = mapped_column(primary_key=True)
    subscriber_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    subscribed_to_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    # Relationships
    subscriber: Mapped[User] = relationship(
        back_populates="subscriptions", foreign_keys=[subscriber_id]
    )
    subscribed_to: Mapped[User] = relationship(
        back_populates="subscribers", foreign_keys=[subscribed_to_id]
    )

    __table_args__ = (
        UniqueConstraint("subscriber_id", "subscribed_to_id", name="uq_subscription_pair"),
        Index("idx_subscriptions_subscriber", "subscriber_id"),
    )


# =============================================================================
# DASHBOARD CONTENT TREE
# =============================================================================


class StockRef(Base):
    """Canonical instrument reference shared across dashboards."""
    __tablename__ = "stock_refs"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)


class Dashboard(Base):
    """An analyst's dashboard. The primary key is the owner's user id."""
    __tablename__ = "dashboards"

    id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )

    # Relationships
    stocks: Mapped[list[Stock]] = relationship(
        back_populates="dashboard", order_by="Stock.id"
    )


class Stock(Base):
    """Dashboard-local stock entry."""
    __tablename__ = "stocks"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    dashboard_id: Mapped[int] = mapped_column(
        ForeignKey("dashboards.id", ondelete="CASCADE"), nullable=False
    )
    stock_ref_id: Mapped[int] = mapped_column(
        ForeignKey("stock_refs.id"), nullable=False
    )

    # Relationships
    dashboard: Mapped[Dashboard] = relationship(back_populates="stocks")
    stock_ref: Mapped[StockRef] = relationship()
    categories: Mapped[list[Category]] = relationship(
        back_populates="stock", order_by="Category.id"
    )

    __table_args__ = (
        UniqueConstraint("dashboard_id", "stock_ref_id", name="uq_stock_dashboard_ref"),
        Index("idx_stocks_dashboard", "dashboard_id"),
    )


class Category(Base):
    """Named grouping of modules under a stock."""
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    stock_id: Mapped[int] = mapped_column(
        ForeignKey("stocks.id", ondelete="CASCADE"), nullable=False
    )

    # Relationships
    stock: Mapped[Stock] = relationship(back_populates="categories")
    module_entities: Mapped[list[ModuleEntity]] = relationship(
        back_populates="category", order_by="ModuleEntity.id"
    )

    __table_args__ = (
        Index("idx_categories_stock", "stock_id"),
    )


class ModuleEntity(Base):
    """A single piece of content with opaque JSON payload."""
    __tablename__ = "module_entities"

    id: Mapped[int] = mapped_column(primary_key=True)
    category_id: Mapped[int] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[Any] = mapped_column(JSONB, nullable=True)
    post_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    category: Mapped[Category] = relationship(back_populates="module_entities")

    __table_args__ = (
        CheckConstraint("updated_date >= post_date", name="updated_after_post"),
        Index("idx_module_entities_category", "category_id"),
        Index("idx_module_entities_post_date", "post_date"),
    )


class DashboardLayout(Base):
    """Client layout metadata for a category."""
    __tablename__ = "dashboard_layouts"

    id: Mapped[int] = mapped_column(primary_key=True)
    category_id: Mapped[int] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE"), nullable=False
    )
    layout: Mapped[Any] = mapped_column(JSONB, nullable=True)

    __table_args__ = (
        Index("idx_dashboard_layouts_category", "category_id"),
    )


# =============================================================================
# FLAT FEED VIEW
# =============================================================================


class ViewBase(DeclarativeBase):
    """Mapped SQL views, registered outside ``Base.metadata``.

    Migrations create them with raw SQL; autogenerate only sees ``Base``.
    """
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class FeedCard(ViewBase):
    """Read-only view joining modules with their owner, stock and category.

    Created by migration ``002_feed_cards_view``; never written through the ORM.
    """
    __tablename__ = "feed_cards"

    module_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    analyst_username: Mapped[str] = mapped_column(String(255))
    stock_name: Mapped[str] = mapped_column(String(255))
    category_name: Mapped[str] = mapped_column(String(255))
    category_id: Mapped[int] = mapped_column(Integer)
    content: Mapped[Any] = mapped_column(JSONB, nullable=True)
    post_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))
