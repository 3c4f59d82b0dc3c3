"""Coverage and analyst recency routes."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from app.schemas.common import ErrorResponse
from app.schemas.feed import CoverageResponse, RecencyResponse
from app.services import coverage as coverage_service
from app.services import recency as recency_service


router = APIRouter(tags=["Coverage"])


@router.get("/coverage", response_model=CoverageResponse)
async def get_coverage(
    analyst_id: list[int] | None = Query(
        None, description="Analyst ids to include; all analysts when omitted"
    ),
) -> CoverageResponse:
    """Instruments and the analysts covering them."""
    return await coverage_service.get_coverage(analyst_id)


@router.get(
    "/analysts/{username}/recency",
    response_model=RecencyResponse,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def get_analyst_recency(username: str) -> RecencyResponse:
    """Latest post and update time of an analyst.

    Analysts with no content report ``0001-01-01T00:00:00Z`` for both.
    """
    return await recency_service.get_analyst_recency(username)
