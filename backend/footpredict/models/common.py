"""
Common data models shared across the application.
"""

from typing import Dict

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error response model returned when an API request fails."""

    detail: str


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    version: str
    environment: str


class ReadinessResponse(BaseModel):
    """Response model for readiness check endpoint."""

    ready: bool
    services: Dict[str, bool]
