"""Tenant copy API: thin routes delegating to TenantCopyService.

Callers are expected to be authorized for both tenants before reaching
these routes.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import (
    get_tenant_copy_service,
    get_tenant_copy_service_for_write,
)
from app.application.use_cases.tenant_copy import TenantCopyService
from app.schemas.tenant_copy import (
    CopyPreviewResponse,
    CopyResultResponse,
    CopyTenantDataRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{tenant_id}/copy-preview", response_model=CopyPreviewResponse)
async def get_copy_preview(
    tenant_id: str,
    copy_svc: Annotated[TenantCopyService, Depends(get_tenant_copy_service)],
) -> CopyPreviewResponse:
    """List everything copyable from a tenant (roles, entities, pages, endpoints, PDF templates)."""
    preview = await copy_svc.preview_copy(tenant_id)
    return CopyPreviewResponse.from_preview(preview)


@router.post("/copy", response_model=CopyResultResponse)
async def copy_tenant_data(
    body: CopyTenantDataRequest,
    copy_svc: Annotated[
        TenantCopyService, Depends(get_tenant_copy_service_for_write)
    ],
) -> CopyResultResponse:
    """Copy the selected objects from source to target tenant in one transaction.

    Naming conflicts are skipped or renamed per conflictStrategy and reported
    in skipped; broken references are reported in warnings.
    """
    logger.debug(
        "Copy requested: %s -> %s", body.source_tenant_id, body.target_tenant_id
    )
    result = await copy_svc.execute_copy(body.to_command())
    return CopyResultResponse.from_result(result)
