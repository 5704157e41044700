"""Application layer: interfaces and use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories).
"""

from app.application.interfaces import ITenantCopyRepository, ITenantRepository
from app.application.use_cases.tenant_copy import TenantCopyService

__all__ = [
    "ITenantCopyRepository",
    "ITenantRepository",
    "TenantCopyService",
]
