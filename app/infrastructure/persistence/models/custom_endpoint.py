"""CustomEndpoint ORM model. Tenant-defined generated API (path + method)."""

from typing import Any

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import MultiTenantModel


class CustomEndpoint(MultiTenantModel, Base):
    """Custom endpoint. Table: custom_endpoint. Unique (tenant_id, path, method).

    Query/filter/ordering/logic columns are opaque configuration for the
    dynamic API executor; source_entity_id optionally binds it to an entity.
    """

    __tablename__ = "custom_endpoint"

    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    path: Mapped[str] = mapped_column(String, nullable=False)
    method: Mapped[str] = mapped_column(String, nullable=False, default="GET")
    mode: Mapped[str] = mapped_column(String, nullable=False, default="BASIC")
    request_schema: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    response_schema: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    source_entity_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("entity.id", ondelete="SET NULL"), nullable=True
    )
    selected_fields: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)
    filters: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)
    query_params: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)
    order_by: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    limit_records: Mapped[int | None] = mapped_column(Integer, nullable=True)
    response_type: Mapped[str] = mapped_column(String, nullable=False, default="list")
    computed_values: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)
    logic: Mapped[str | None] = mapped_column(Text, nullable=True)
    auth: Mapped[str] = mapped_column(String, nullable=False, default="REQUIRED")
    permissions: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)
    rate_limit: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint(
            "tenant_id", "path", "method", name="uq_custom_endpoint_tenant_path_method"
        ),
    )
