"""Error and health schemas shared by all routes."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every non-2xx JSON response."""

    error: str = Field(..., description="Error code", examples=["NOT_FOUND", "INVALID_TIMEZONE"])
    message: str
    status: int
    details: Optional[Dict[str, Any]] = None

    model_config = {
        "json_schema_extra": {
            "example": {"error": "NOT_FOUND", "message": "Analyst not found: bob", "status": 404}
        }
    }


class HealthResponse(BaseModel):
    status: str = Field(..., examples=["healthy", "unhealthy"])
    version: str
    timestamp: datetime
    checks: Dict[str, bool] = Field(default_factory=dict)
