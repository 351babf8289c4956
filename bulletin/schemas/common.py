"""
Bulletin Board API — Shared Response Schemas
==============================================

What:  Error body and health report models shared by every surface.
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Error body carried by every non-2xx envelope.

    Example:
        {"error": "Not found"}
    """
    error: str = Field(description="Error description")


class HealthResponse(BaseModel):
    """Returned by GET /health on the HTTP surface."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    schema_variant: str = Field(description="Configured table layout: full, reduced")
    analysis_provider: str = Field(description="Vendor answering POST /analyze")
    uptime_seconds: float = Field(description="Seconds since service started")
