"""Base repository: primary-key lookup, tenant-scoped listing and create."""

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import Base


ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id, list_for_tenant and create.

    list_for_tenant only applies to models with tenant_id and created_at
    (MultiTenantModel). LSP: subclasses are substitutable for BaseRepository.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def list_for_tenant(
        self, tenant_id: str, ids: Sequence[str] | None = None
    ) -> list[ModelType]:
        """Return records of tenant in creation order, restricted to ids when given."""
        model: Any = self.model
        stmt = select(self.model).where(model.tenant_id == tenant_id)
        if ids is not None:
            if not ids:
                return []
            stmt = stmt.where(model.id.in_(list(ids)))
        result = await self.db.execute(stmt.order_by(model.created_at, model.id))
        return list(result.scalars().all())

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record; flushed so later rows can reference it."""
        self.db.add(obj)
        await self.db.flush()
        return obj
