"""Entity ORM model. Tenant-defined record type (name, ordered fields, settings)."""

from typing import Any

from sqlalchemy import JSON, Boolean, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import MultiTenantModel


class Entity(MultiTenantModel, Base):
    """Entity (schema definition). Table: entity. Unique (tenant_id, slug).

    fields is an ordered list of field dicts (slug, type, ...); a field with
    type "relation" names its target entity and its values are EntityData ids.
    """

    __tablename__ = "entity"

    name: Mapped[str] = mapped_column(String, nullable=False)
    name_plural: Mapped[str] = mapped_column(String, nullable=False)
    slug: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String, nullable=True)
    color: Mapped[str | None] = mapped_column(String, nullable=True)
    fields: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    settings: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    is_system: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "slug", name="uq_entity_tenant_slug"),
    )
