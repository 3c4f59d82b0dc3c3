"""Dashboard view with its layout metadata."""

from __future__ import annotations

from app.core.exceptions import NotFoundError
from app.repositories import dashboards_orm as dashboards_repo
from app.schemas.feed import DashboardWithLayoutResponse
from app.services.dashboard_lookup import DashboardLookup, get_dashboard_lookup


async def get_dashboard_with_layout(
    analyst_id: int,
    lookup: DashboardLookup | None = None,
) -> DashboardWithLayoutResponse:
    """Dashboard of ``analyst_id`` plus the layout rows of every category.

    Raises:
        NotFoundError: the analyst has no dashboard
    """
    dashboard = await get_dashboard_lookup(lookup)(analyst_id)
    if dashboard is None:
        raise NotFoundError(message="Dashboard not found")

    layouts = []
    for stock in dashboard.stocks:
        for category in stock.categories:
            layouts.extend(await dashboards_repo.find_layouts_by_category_id(category.id))

    return DashboardWithLayoutResponse(dashboard=dashboard, layouts=layouts)
