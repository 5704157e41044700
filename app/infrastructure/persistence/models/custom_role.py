"""CustomRole ORM model. Tenant-defined roles with per-entity permission matrices."""

from typing import Any

from sqlalchemy import JSON, Boolean, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import MultiTenantModel


class CustomRole(MultiTenantModel, Base):
    """Custom role. Table: custom_role. Unique (tenant_id, name).

    permissions holds per-entity CRUD flags; module_permissions and
    tenant_permissions are opaque blobs owned by the permission evaluator.
    """

    __tablename__ = "custom_role"

    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    color: Mapped[str | None] = mapped_column(String, nullable=True)
    role_type: Mapped[str] = mapped_column(String, nullable=False, default="CUSTOM")
    is_system: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    permissions: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    module_permissions: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )
    tenant_permissions: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="uq_custom_role_tenant_name"),
    )
