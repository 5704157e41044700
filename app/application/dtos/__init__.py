"""Application DTOs (no ORM dependency)."""

from app.application.dtos.tenant import TenantResult
from app.application.dtos.tenant_copy import (
    CopyCounts,
    CopyModuleSelection,
    CopyPreview,
    CopyRequest,
    CopyResult,
    EndpointPreview,
    EndpointSnapshot,
    EntityPreview,
    EntityRecordSnapshot,
    EntitySelection,
    EntitySnapshot,
    PagePreview,
    PageSnapshot,
    PdfTemplatePreview,
    PdfTemplateSnapshot,
    RolePreview,
    RoleSnapshot,
)

__all__ = [
    "CopyCounts",
    "CopyModuleSelection",
    "CopyPreview",
    "CopyRequest",
    "CopyResult",
    "EndpointPreview",
    "EndpointSnapshot",
    "EntityPreview",
    "EntityRecordSnapshot",
    "EntitySelection",
    "EntitySnapshot",
    "PagePreview",
    "PageSnapshot",
    "PdfTemplatePreview",
    "PdfTemplateSnapshot",
    "RolePreview",
    "RoleSnapshot",
    "TenantResult",
]
