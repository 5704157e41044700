"""Tenant repository. Returns application DTOs."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.tenant import TenantResult
from app.domain.enums import TenantStatus
from app.infrastructure.persistence.models.tenant import Tenant
from app.infrastructure.persistence.repositories.base import BaseRepository


def _tenant_to_result(t: Tenant) -> TenantResult:
    """Map ORM Tenant to application TenantResult."""
    return TenantResult(id=t.id, code=t.code, name=t.name, status=TenantStatus(t.status))


class TenantRepository(BaseRepository[Tenant]):
    """Tenant repository (read side only; tenant lifecycle lives elsewhere)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Tenant)

    async def get_by_id(self, tenant_id: str) -> TenantResult | None:  # type: ignore[override]
        """Get tenant by ID."""
        tenant = await super().get_by_id(tenant_id)
        return _tenant_to_result(tenant) if tenant else None
