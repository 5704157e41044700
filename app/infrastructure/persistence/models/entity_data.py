"""EntityData ORM model. One record of an entity, optionally nested under a parent record."""

from typing import Any

from sqlalchemy import JSON, Boolean, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    MultiTenantModel,
    SoftDeleteMixin,
)


class EntityData(MultiTenantModel, SoftDeleteMixin, Base):
    """Entity record. Table: entity_data.

    visible_to_roles restricts visibility to custom role ids;
    visible_to_roles_json mirrors the same list for JSON containment queries.
    """

    __tablename__ = "entity_data"

    entity_id: Mapped[str] = mapped_column(
        String, ForeignKey("entity.id", ondelete="CASCADE"), nullable=False
    )
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    parent_record_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("entity_data.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    created_by_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    updated_by_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    visible_to_roles: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list
    )
    has_role_filter: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    visible_to_roles_json: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list
    )

    __table_args__ = (
        Index("ix_entity_data_tenant_entity", "tenant_id", "entity_id"),
    )
