"""
Inkwell Backend: Shared Response Schemas
=========================================

What:  Error envelope and health report used across every router.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g. "not_found", "not_authorized")
        message: Human-readable description
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "not_authorized",
            "message": "User not authorized",
            "request_id": "1f0c9a2e"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
