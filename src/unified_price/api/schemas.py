"""API-specific request/response schemas (Pydantic v2)."""

from __future__ import annotations

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    error: str
    detail: str | None = None


class HealthResponse(BaseModel):
    """Liveness probe payload."""

    status: str
    version: str
