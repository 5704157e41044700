"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import (
    ConflictAction,
    ConflictStrategy,
    CopyModule,
    TenantStatus,
)
from app.domain.exceptions import (
    CopyTimeoutException,
    PlatformException,
    SqlNotConfiguredException,
    TenantNotFoundException,
    ValidationException,
)

__all__ = [
    # Enums
    "ConflictAction",
    "ConflictStrategy",
    "CopyModule",
    "TenantStatus",
    # Exceptions
    "CopyTimeoutException",
    "PlatformException",
    "SqlNotConfiguredException",
    "TenantNotFoundException",
    "ValidationException",
]
