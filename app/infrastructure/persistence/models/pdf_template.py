"""PdfTemplate ORM model. Document layout optionally bound to an entity."""

from typing import Any

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import MultiTenantModel


class PdfTemplate(MultiTenantModel, Base):
    """PDF template. Table: pdf_template. Unique (tenant_id, slug)."""

    __tablename__ = "pdf_template"

    name: Mapped[str] = mapped_column(String, nullable=False)
    slug: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String, nullable=True)
    page_size: Mapped[str] = mapped_column(String, nullable=False, default="A4")
    orientation: Mapped[str] = mapped_column(
        String, nullable=False, default="PORTRAIT"
    )
    margins: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    content: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    source_entity_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("entity.id", ondelete="SET NULL"), nullable=True
    )
    selected_fields: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)
    logo_url: Mapped[str | None] = mapped_column(String, nullable=True)
    template_type: Mapped[str] = mapped_column(
        String, nullable=False, default="single"
    )
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __table_args__ = (
        UniqueConstraint("tenant_id", "slug", name="uq_pdf_template_tenant_slug"),
    )
