"""DTOs for tenant use cases (no dependency on ORM)."""

from dataclasses import dataclass

from app.domain.enums import TenantStatus


@dataclass(frozen=True)
class TenantResult:
    """Tenant read-model (result of get_by_id)."""

    id: str
    code: str
    name: str
    status: TenantStatus
