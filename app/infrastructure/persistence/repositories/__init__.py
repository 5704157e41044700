"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.tenant_copy_repo import (
    TenantCopyRepository,
)
from app.infrastructure.persistence.repositories.tenant_repo import TenantRepository

__all__ = [
    "BaseRepository",
    "TenantCopyRepository",
    "TenantRepository",
]
