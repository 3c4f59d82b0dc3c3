"""Dashboard read routes."""

from __future__ import annotations

from fastapi import APIRouter, status

from app.domain import StockRef
from app.repositories import dashboards_orm as dashboards_repo
from app.schemas.common import ErrorResponse
from app.schemas.feed import DashboardWithLayoutResponse
from app.services import dashboards as dashboards_service


router = APIRouter(prefix="/dashboard", tags=["Dashboards"])


@router.get("/stock-refs", response_model=list[StockRef])
async def list_stock_refs() -> list[StockRef]:
    """All canonical stock references."""
    return await dashboards_repo.list_stock_refs()


@router.get(
    "/{analyst_id}",
    response_model=DashboardWithLayoutResponse,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def get_dashboard(analyst_id: int) -> DashboardWithLayoutResponse:
    """An analyst's dashboard with the layout of every category."""
    return await dashboards_service.get_dashboard_with_layout(analyst_id)
