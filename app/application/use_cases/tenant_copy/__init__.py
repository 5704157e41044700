"""Tenant copy use cases."""

from app.application.use_cases.tenant_copy.conflicts import (
    ConflictResolution,
    ConflictResolver,
)
from app.application.use_cases.tenant_copy.context import CopyContext, IdentifierMap
from app.application.use_cases.tenant_copy.copy_service import TenantCopyService

__all__ = [
    "ConflictResolution",
    "ConflictResolver",
    "CopyContext",
    "IdentifierMap",
    "TenantCopyService",
]
