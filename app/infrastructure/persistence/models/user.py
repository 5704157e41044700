"""User ORM model (tenant-scoped). Read here only to count users per custom role."""

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import MultiTenantModel


class User(MultiTenantModel, Base):
    """User model. Table: app_user. Unique (tenant_id, email)."""

    __tablename__ = "app_user"

    email: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    custom_role_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("custom_role.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "email", name="uq_tenant_email"),
    )
