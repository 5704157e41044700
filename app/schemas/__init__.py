"""Pydantic request/response schemas for the API."""

from app.schemas.health import HealthResponse
from app.schemas.tenant_copy import (
    CopyPreviewResponse,
    CopyResultResponse,
    CopyTenantDataRequest,
)

__all__ = [
    "CopyPreviewResponse",
    "CopyResultResponse",
    "CopyTenantDataRequest",
    "HealthResponse",
]
