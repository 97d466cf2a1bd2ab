"""
Shared API schemas.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error body."""

    error: str = Field(..., description="Stable error code")
    detail: str = Field(..., description="Human-readable explanation")
    timestamp: datetime


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
