"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.custom_endpoint import CustomEndpoint
from app.infrastructure.persistence.models.custom_role import CustomRole
from app.infrastructure.persistence.models.entity import Entity
from app.infrastructure.persistence.models.entity_data import EntityData
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    MultiTenantModel,
    SoftDeleteMixin,
    TenantMixin,
    TimestampMixin,
)
from app.infrastructure.persistence.models.page import Page
from app.infrastructure.persistence.models.pdf_template import PdfTemplate
from app.infrastructure.persistence.models.tenant import Tenant
from app.infrastructure.persistence.models.user import User

__all__ = [
    "Tenant",
    "User",
    "CustomRole",
    "Entity",
    "EntityData",
    "CustomEndpoint",
    "PdfTemplate",
    "Page",
    "CuidMixin",
    "TenantMixin",
    "TimestampMixin",
    "SoftDeleteMixin",
    "MultiTenantModel",
]
