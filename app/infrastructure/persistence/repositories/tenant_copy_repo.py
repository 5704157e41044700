"""SQLAlchemy implementation of ITenantCopyRepository. Returns application DTOs."""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import fields
from typing import Any, TypeVar

from sqlalchemy import func, select, text, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import SessionTransactionOrigin

from app.application.dtos.tenant_copy import (
    EndpointSnapshot,
    EntityRecordSnapshot,
    EntitySnapshot,
    PageSnapshot,
    PdfTemplateSnapshot,
    RoleSnapshot,
)
from app.infrastructure.persistence.models.custom_endpoint import CustomEndpoint
from app.infrastructure.persistence.models.custom_role import CustomRole
from app.infrastructure.persistence.models.entity import Entity
from app.infrastructure.persistence.models.entity_data import EntityData
from app.infrastructure.persistence.models.page import Page
from app.infrastructure.persistence.models.pdf_template import PdfTemplate
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.telemetry.logging import get_logger
from app.shared.utils.generators import generate_cuid

logger = get_logger(__name__)


T = TypeVar("T")


def _to_snapshot(snapshot_cls: type[T], row: Any) -> T:
    """Map an ORM row to a snapshot; snapshot field names mirror column names."""
    return snapshot_cls(**{f.name: getattr(row, f.name) for f in fields(snapshot_cls)})  # type: ignore[arg-type]


def _to_row_kwargs(snapshot: Any, tenant_id: str) -> dict[str, Any]:
    """Column values for a new target row; id is always freshly generated."""
    values = {f.name: getattr(snapshot, f.name) for f in fields(snapshot)}
    values["id"] = generate_cuid()
    values["tenant_id"] = tenant_id
    return values


def _record_to_snapshot(record: EntityData) -> EntityRecordSnapshot:
    return EntityRecordSnapshot(
        id=record.id,
        entity_id=record.entity_id,
        data=record.data or {},
        parent_record_id=record.parent_record_id,
        visible_to_roles=list(record.visible_to_roles or []),
        has_role_filter=record.has_role_filter,
    )


class TenantCopyRepository:
    """Tenant-scoped reads and inserts for the copy engine, on one AsyncSession.

    The session is shared by every call so all reads and writes of one copy
    run in the same transaction.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self._roles = BaseRepository(db, CustomRole)
        self._entities = BaseRepository(db, Entity)
        self._records = BaseRepository(db, EntityData)
        self._endpoints = BaseRepository(db, CustomEndpoint)
        self._pdf_templates = BaseRepository(db, PdfTemplate)
        self._pages = BaseRepository(db, Page)

    @asynccontextmanager
    async def transaction(
        self, timeout_seconds: float | None = None
    ) -> AsyncIterator[None]:
        """Commit on normal exit, roll back on exception.

        A transaction the caller began explicitly (get_db_transactional) is
        left to the caller: the copy runs in a SAVEPOINT on it, so a failed
        copy leaves the outer transaction usable and the caller's commit
        persists the copy. A transaction the session autobegan (reads issued
        before the copy) is taken over and committed or rolled back here.
        """
        current = self.db.sync_session.get_transaction()
        if current is None:
            logger.debug("Opening tenant copy transaction")
            async with self.db.begin():
                await self._set_statement_timeout(timeout_seconds)
                yield
        elif current.origin is SessionTransactionOrigin.AUTOBEGIN:
            logger.debug("Taking over autobegun transaction for tenant copy")
            try:
                await self._set_statement_timeout(timeout_seconds)
                yield
            except BaseException:
                await self.db.rollback()
                raise
            await self.db.commit()
        else:
            logger.debug("Opening tenant copy savepoint")
            async with self.db.begin_nested():
                await self._set_statement_timeout(timeout_seconds)
                yield

    async def _set_statement_timeout(self, timeout_seconds: float | None) -> None:
        if timeout_seconds and self.db.get_bind().dialect.name == "postgresql":
            # Transaction-scoped; reverts on commit or rollback.
            await self.db.execute(
                text(f"SET LOCAL statement_timeout = {int(timeout_seconds * 1000)}")
            )

    # Roles

    async def list_roles(
        self, tenant_id: str, ids: Sequence[str] | None = None
    ) -> list[RoleSnapshot]:
        rows = await self._roles.list_for_tenant(tenant_id, ids)
        return [_to_snapshot(RoleSnapshot, r) for r in rows]

    async def insert_role(self, tenant_id: str, role: RoleSnapshot) -> str:
        created = await self._roles.create(CustomRole(**_to_row_kwargs(role, tenant_id)))
        return created.id

    # Entities

    async def list_entities(
        self, tenant_id: str, ids: Sequence[str] | None = None
    ) -> list[EntitySnapshot]:
        rows = await self._entities.list_for_tenant(tenant_id, ids)
        return [_to_snapshot(EntitySnapshot, e) for e in rows]

    async def insert_entity(self, tenant_id: str, entity: EntitySnapshot) -> str:
        created = await self._entities.create(Entity(**_to_row_kwargs(entity, tenant_id)))
        return created.id

    # Entity data

    async def list_entity_records(
        self, tenant_id: str, entity_id: str, *, has_parent: bool
    ) -> list[EntityRecordSnapshot]:
        parent_clause = (
            EntityData.parent_record_id.is_not(None)
            if has_parent
            else EntityData.parent_record_id.is_(None)
        )
        result = await self.db.execute(
            select(EntityData)
            .where(
                EntityData.tenant_id == tenant_id,
                EntityData.entity_id == entity_id,
                EntityData.deleted_at.is_(None),
                parent_clause,
            )
            .order_by(EntityData.created_at, EntityData.id)
        )
        return [_record_to_snapshot(r) for r in result.scalars().all()]

    async def insert_entity_record(
        self, tenant_id: str, record: EntityRecordSnapshot
    ) -> str:
        visible = list(record.visible_to_roles)
        created = await self._records.create(
            EntityData(
                id=generate_cuid(),
                tenant_id=tenant_id,
                entity_id=record.entity_id,
                data=record.data,
                parent_record_id=record.parent_record_id,
                created_by_id=None,
                updated_by_id=None,
                visible_to_roles=visible,
                has_role_filter=record.has_role_filter,
                visible_to_roles_json=list(visible),
            )
        )
        return created.id

    async def list_record_payloads(
        self, tenant_id: str, entity_id: str
    ) -> list[tuple[str, dict[str, Any]]]:
        result = await self.db.execute(
            select(EntityData.id, EntityData.data)
            .where(
                EntityData.tenant_id == tenant_id,
                EntityData.entity_id == entity_id,
                EntityData.deleted_at.is_(None),
            )
            .order_by(EntityData.created_at, EntityData.id)
        )
        return [(row.id, row.data or {}) for row in result.all()]

    async def update_record_payload(
        self, tenant_id: str, record_id: str, data: dict[str, Any]
    ) -> None:
        await self.db.execute(
            update(EntityData)
            .where(EntityData.id == record_id, EntityData.tenant_id == tenant_id)
            .values(data=data)
        )

    # Custom endpoints

    async def list_endpoints(
        self, tenant_id: str, ids: Sequence[str] | None = None
    ) -> list[EndpointSnapshot]:
        rows = await self._endpoints.list_for_tenant(tenant_id, ids)
        return [_to_snapshot(EndpointSnapshot, e) for e in rows]

    async def insert_endpoint(
        self, tenant_id: str, endpoint: EndpointSnapshot
    ) -> str:
        created = await self._endpoints.create(
            CustomEndpoint(**_to_row_kwargs(endpoint, tenant_id))
        )
        return created.id

    # PDF templates

    async def list_pdf_templates(
        self, tenant_id: str, ids: Sequence[str] | None = None
    ) -> list[PdfTemplateSnapshot]:
        rows = await self._pdf_templates.list_for_tenant(tenant_id, ids)
        return [_to_snapshot(PdfTemplateSnapshot, t) for t in rows]

    async def insert_pdf_template(
        self, tenant_id: str, template: PdfTemplateSnapshot
    ) -> str:
        created = await self._pdf_templates.create(
            PdfTemplate(**_to_row_kwargs(template, tenant_id))
        )
        return created.id

    # Pages

    async def list_pages(
        self, tenant_id: str, ids: Sequence[str] | None = None
    ) -> list[PageSnapshot]:
        rows = await self._pages.list_for_tenant(tenant_id, ids)
        return [_to_snapshot(PageSnapshot, p) for p in rows]

    async def insert_page(self, tenant_id: str, page: PageSnapshot) -> str:
        created = await self._pages.create(Page(**_to_row_kwargs(page, tenant_id)))
        return created.id

    # Preview counters

    async def count_users_by_role(self, tenant_id: str) -> dict[str, int]:
        result = await self.db.execute(
            select(User.custom_role_id, func.count(User.id))
            .where(User.tenant_id == tenant_id, User.custom_role_id.is_not(None))
            .group_by(User.custom_role_id)
        )
        return {role_id: count for role_id, count in result.all()}

    async def count_live_records_by_entity(self, tenant_id: str) -> dict[str, int]:
        result = await self.db.execute(
            select(EntityData.entity_id, func.count(EntityData.id))
            .where(EntityData.tenant_id == tenant_id, EntityData.deleted_at.is_(None))
            .group_by(EntityData.entity_id)
        )
        return {entity_id: count for entity_id, count in result.all()}
