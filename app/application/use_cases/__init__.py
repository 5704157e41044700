"""Application use cases: one entry point per workflow."""

from app.application.use_cases.tenant_copy import TenantCopyService

__all__ = [
    "TenantCopyService",
]
