"""Dashboard content tree using SQLAlchemy ORM.

``find_by_id`` is the single analyst -> dashboard lookup shared by the
coverage mapper, the recency resolver and the hierarchy-walk feed.

Usage:
    from app.repositories.dashboards_orm import find_by_id, find_layouts_by_category_id
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.core.logging import get_logger
from app.database.connection import get_session
from app.database.orm import (
    Category as CategoryORM,
    Dashboard as DashboardORM,
    DashboardLayout as DashboardLayoutORM,
    Stock as StockORM,
    StockRef as StockRefORM,
)
from app.domain import (
    Category,
    ContentModule,
    Dashboard,
    LayoutRecord,
    Stock,
    StockRef,
)


logger = get_logger("repositories.dashboards_orm")


def _stock_ref_to_domain(ref: StockRefORM) -> StockRef:
    return StockRef(id=ref.id, name=ref.name)


def _dashboard_to_domain(dashboard: DashboardORM) -> Dashboard:
    return Dashboard(
        id=dashboard.id,
        stocks=[
            Stock(
                id=stock.id,
                name=stock.name,
                stock_ref=_stock_ref_to_domain(stock.stock_ref),
                categories=[
                    Category(
                        id=category.id,
                        name=category.name,
                        modules=[
                            ContentModule(
                                id=module.id,
                                content=module.content,
                                post_date=module.post_date,
                                updated_date=module.updated_date,
                            )
                            for module in category.module_entities
                        ],
                    )
                    for category in stock.categories
                ],
            )
            for stock in dashboard.stocks
        ],
    )


async def find_by_id(analyst_id: int) -> Dashboard | None:
    """Load an analyst's full dashboard tree, or None if they have none."""
    async with get_session() as session:
        result = await session.execute(
            select(DashboardORM)
            .where(DashboardORM.id == analyst_id)
            .options(
                selectinload(DashboardORM.stocks).selectinload(StockORM.stock_ref),
                selectinload(DashboardORM.stocks)
                .selectinload(StockORM.categories)
                .selectinload(CategoryORM.module_entities),
            )
        )
        dashboard = result.scalar_one_or_none()

        if dashboard is None:
            return None
        return _dashboard_to_domain(dashboard)


async def find_layouts_by_category_id(category_id: int) -> list[LayoutRecord]:
    """Layout rows stored for one category."""
    async with get_session() as session:
        result = await session.execute(
            select(DashboardLayoutORM)
            .where(DashboardLayoutORM.category_id == category_id)
            .order_by(DashboardLayoutORM.id)
        )
        return [
            LayoutRecord(id=row.id, category_id=row.category_id, layout=row.layout)
            for row in result.scalars()
        ]


async def list_stock_refs() -> list[StockRef]:
    """All canonical stock references ordered by name."""
    async with get_session() as session:
        result = await session.execute(select(StockRefORM).order_by(StockRefORM.name))
        return [_stock_ref_to_domain(ref) for ref in result.scalars()]
