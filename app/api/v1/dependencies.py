"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions and application use cases.
Use cases are built from infrastructure implementations here; routes depend
only on these dependencies, not on infra directly.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.use_cases.tenant_copy import TenantCopyService
from app.core.config import get_settings
from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import (
    TenantCopyRepository,
    TenantRepository,
)


async def get_tenant_copy_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TenantCopyService:
    """Tenant copy service for read operations (preview)."""
    return TenantCopyService(
        TenantCopyRepository(db),
        TenantRepository(db),
        timeout_seconds=get_settings().copy_transaction_timeout_seconds,
    )


async def get_tenant_copy_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> TenantCopyService:
    """Tenant copy service for executing a copy.

    Tenant checks and the copy share the request transaction; the copy itself
    runs in a SAVEPOINT on it.
    """
    return TenantCopyService(
        TenantCopyRepository(db),
        TenantRepository(db),
        timeout_seconds=get_settings().copy_transaction_timeout_seconds,
    )
