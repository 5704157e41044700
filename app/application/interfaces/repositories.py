"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.tenant import TenantResult
    from app.application.dtos.tenant_copy import (
        EndpointSnapshot,
        EntityRecordSnapshot,
        EntitySnapshot,
        PageSnapshot,
        PdfTemplateSnapshot,
        RoleSnapshot,
    )


# Tenant repository interface
class ITenantRepository(Protocol):
    """Protocol for tenant repository (DIP)."""

    async def get_by_id(self, tenant_id: str) -> TenantResult | None:
        """Return tenant by ID."""


# Tenant copy repository interface
class ITenantCopyRepository(Protocol):
    """Protocol for the data access used by the tenant copy engine (DIP).

    Every list_* method is scoped to one tenant and returns rows in creation
    order. When ids is given only those rows are returned; ids belonging to
    another tenant are silently ignored. insert_* methods ignore the
    snapshot's id and return the generated one.
    """

    def transaction(
        self, timeout_seconds: float | None = None
    ) -> AbstractAsyncContextManager[None]:
        """Atomic unit: commit when the block exits normally, roll back on any exception."""

    async def list_roles(
        self, tenant_id: str, ids: Sequence[str] | None = None
    ) -> list[RoleSnapshot]:
        """Return custom roles of tenant."""

    async def insert_role(self, tenant_id: str, role: RoleSnapshot) -> str:
        """Insert role into tenant; return new id."""

    async def list_entities(
        self, tenant_id: str, ids: Sequence[str] | None = None
    ) -> list[EntitySnapshot]:
        """Return entities of tenant."""

    async def insert_entity(self, tenant_id: str, entity: EntitySnapshot) -> str:
        """Insert entity into tenant; return new id."""

    async def list_entity_records(
        self, tenant_id: str, entity_id: str, *, has_parent: bool
    ) -> list[EntityRecordSnapshot]:
        """Return live records of entity, either top-level or children only."""

    async def insert_entity_record(
        self, tenant_id: str, record: EntityRecordSnapshot
    ) -> str:
        """Insert record into tenant; return new id."""

    async def list_record_payloads(
        self, tenant_id: str, entity_id: str
    ) -> list[tuple[str, dict[str, Any]]]:
        """Return (record id, data) for every live record of entity."""

    async def update_record_payload(
        self, tenant_id: str, record_id: str, data: dict[str, Any]
    ) -> None:
        """Replace data of a record."""

    async def list_endpoints(
        self, tenant_id: str, ids: Sequence[str] | None = None
    ) -> list[EndpointSnapshot]:
        """Return custom endpoints of tenant."""

    async def insert_endpoint(
        self, tenant_id: str, endpoint: EndpointSnapshot
    ) -> str:
        """Insert endpoint into tenant; return new id."""

    async def list_pdf_templates(
        self, tenant_id: str, ids: Sequence[str] | None = None
    ) -> list[PdfTemplateSnapshot]:
        """Return PDF templates of tenant."""

    async def insert_pdf_template(
        self, tenant_id: str, template: PdfTemplateSnapshot
    ) -> str:
        """Insert PDF template into tenant; return new id."""

    async def list_pages(
        self, tenant_id: str, ids: Sequence[str] | None = None
    ) -> list[PageSnapshot]:
        """Return pages of tenant."""

    async def insert_page(self, tenant_id: str, page: PageSnapshot) -> str:
        """Insert page into tenant; return new id."""

    async def count_users_by_role(self, tenant_id: str) -> dict[str, int]:
        """Return custom role id -> number of users holding it."""

    async def count_live_records_by_entity(self, tenant_id: str) -> dict[str, int]:
        """Return entity id -> number of records not soft-deleted."""
