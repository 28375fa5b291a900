"""Common schemas used across multiple endpoints."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Response model for request-level errors."""
    detail: str
    code: str


class HealthResponse(BaseModel):
    """Response model for liveness checks."""
    status: str
    service: str
