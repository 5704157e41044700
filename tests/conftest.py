"""Pytest configuration and fixtures for the platform.

Uses app.main:app for HTTP tests and app.infrastructure.persistence.database
for DB-dependent fixtures. Copy engine tests run against an in-memory
repository whose transaction() restores its state when the block raises.
"""

import asyncio
import copy
import itertools
from collections.abc import Sequence
from contextlib import asynccontextmanager
from dataclasses import replace
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.api.v1.dependencies import (
    get_tenant_copy_service,
    get_tenant_copy_service_for_write,
)
from app.application.dtos.tenant import TenantResult
from app.application.dtos.tenant_copy import (
    EndpointSnapshot,
    EntityRecordSnapshot,
    EntitySnapshot,
    PageSnapshot,
    PdfTemplateSnapshot,
    RoleSnapshot,
)
from app.application.use_cases.tenant_copy import TenantCopyService
from app.domain.enums import TenantStatus
from app.infrastructure.persistence import database
from app.main import app

SOURCE_TENANT = "tenant-source"
TARGET_TENANT = "tenant-target"


def _unique_key(kind: str, row: Any) -> Any:
    if kind == "roles":
        return row.name
    if kind == "endpoints":
        return (row.method, row.path)
    if kind == "records":
        return None
    return row.slug


class FakeTenantRepository:
    """In-memory ITenantRepository."""

    def __init__(self, *tenant_ids: str) -> None:
        self.tenant_ids = set(tenant_ids)

    async def get_by_id(self, tenant_id: str) -> TenantResult | None:
        if tenant_id not in self.tenant_ids:
            return None
        return TenantResult(
            id=tenant_id, code=tenant_id, name=tenant_id, status=TenantStatus.ACTIVE
        )


class FakeTenantCopyRepository:
    """In-memory ITenantCopyRepository.

    Rows are kept per kind as (tenant_id, snapshot) in insertion order, which
    stands in for creation order. Uniqueness is enforced the way the database
    does (role name, entity/template/page slug, endpoint method+path), so a
    bad rename surfaces as an error. Set fail_on to a kind to make its next
    insert raise, insert_delay to slow every insert down, or fail_rollback to
    make the rollback itself raise.
    """

    def __init__(self) -> None:
        self.rows: dict[str, list[tuple[str, Any]]] = {
            kind: []
            for kind in ("roles", "entities", "records", "endpoints", "pdf_templates", "pages")
        }
        self.deleted_records: set[str] = set()
        self.users: list[tuple[str, str | None]] = []
        self.transactions: list[float | None] = []
        self.rollbacks = 0
        self.payload_updates = 0
        self.fail_on: str | None = None
        self.insert_delay = 0.0
        self.fail_rollback = False
        self._ids = itertools.count(1)

    # Seeding helpers

    def add(self, kind: str, tenant_id: str, row: Any) -> Any:
        self.rows[kind].append((tenant_id, row))
        return row

    def add_user(self, tenant_id: str, role_id: str | None) -> None:
        self.users.append((tenant_id, role_id))

    def all(self, kind: str, tenant_id: str) -> list[Any]:
        return [row for owner, row in self.rows[kind] if owner == tenant_id]

    def record(self, record_id: str) -> EntityRecordSnapshot:
        return next(row for _, row in self.rows["records"] if row.id == record_id)

    # ITenantCopyRepository

    @asynccontextmanager
    async def transaction(self, timeout_seconds: float | None = None):
        self.transactions.append(timeout_seconds)
        saved = copy.deepcopy(self.rows)
        try:
            yield
        except Exception:
            self.rows = saved
            self.rollbacks += 1
            if self.fail_rollback:
                raise ConnectionError("connection lost during rollback")
            raise

    def _list(self, kind: str, tenant_id: str, ids: Sequence[str] | None) -> list[Any]:
        wanted = set(ids) if ids is not None else None
        return [
            row
            for owner, row in self.rows[kind]
            if owner == tenant_id and (wanted is None or row.id in wanted)
        ]

    async def _insert(self, kind: str, tenant_id: str, row: Any) -> str:
        if self.insert_delay:
            await asyncio.sleep(self.insert_delay)
        if self.fail_on == kind:
            raise RuntimeError(f"insert into {kind} failed")
        key = _unique_key(kind, row)
        if key is not None and any(
            _unique_key(kind, existing) == key for existing in self.all(kind, tenant_id)
        ):
            raise RuntimeError(f"unique violation on {kind}: {key!r}")
        new_id = f"{kind}-{next(self._ids)}"
        self.rows[kind].append((tenant_id, replace(row, id=new_id)))
        return new_id

    async def list_roles(self, tenant_id, ids=None):
        return self._list("roles", tenant_id, ids)

    async def insert_role(self, tenant_id, role):
        return await self._insert("roles", tenant_id, role)

    async def list_entities(self, tenant_id, ids=None):
        return self._list("entities", tenant_id, ids)

    async def insert_entity(self, tenant_id, entity):
        return await self._insert("entities", tenant_id, entity)

    async def list_entity_records(self, tenant_id, entity_id, *, has_parent):
        return [
            row
            for row in self._list("records", tenant_id, None)
            if row.entity_id == entity_id
            and row.id not in self.deleted_records
            and (row.parent_record_id is not None) == has_parent
        ]

    async def insert_entity_record(self, tenant_id, record):
        return await self._insert("records", tenant_id, record)

    async def list_record_payloads(self, tenant_id, entity_id):
        return [
            (row.id, copy.deepcopy(row.data))
            for row in self._list("records", tenant_id, None)
            if row.entity_id == entity_id and row.id not in self.deleted_records
        ]

    async def update_record_payload(self, tenant_id, record_id, data):
        records = self.rows["records"]
        for index, (owner, row) in enumerate(records):
            if owner == tenant_id and row.id == record_id:
                records[index] = (owner, replace(row, data=data))
                self.payload_updates += 1
                return

    async def list_endpoints(self, tenant_id, ids=None):
        return self._list("endpoints", tenant_id, ids)

    async def insert_endpoint(self, tenant_id, endpoint):
        return await self._insert("endpoints", tenant_id, endpoint)

    async def list_pdf_templates(self, tenant_id, ids=None):
        return self._list("pdf_templates", tenant_id, ids)

    async def insert_pdf_template(self, tenant_id, template):
        return await self._insert("pdf_templates", tenant_id, template)

    async def list_pages(self, tenant_id, ids=None):
        return self._list("pages", tenant_id, ids)

    async def insert_page(self, tenant_id, page):
        return await self._insert("pages", tenant_id, page)

    async def count_users_by_role(self, tenant_id):
        counts: dict[str, int] = {}
        for owner, role_id in self.users:
            if owner == tenant_id and role_id is not None:
                counts[role_id] = counts.get(role_id, 0) + 1
        return counts

    async def count_live_records_by_entity(self, tenant_id):
        counts: dict[str, int] = {}
        for row in self._list("records", tenant_id, None):
            if row.id not in self.deleted_records:
                counts[row.entity_id] = counts.get(row.entity_id, 0) + 1
        return counts


@pytest.fixture
def copy_repo() -> FakeTenantCopyRepository:
    return FakeTenantCopyRepository()


@pytest.fixture
def tenant_repo() -> FakeTenantRepository:
    return FakeTenantRepository(SOURCE_TENANT, TARGET_TENANT)


@pytest.fixture
def copy_service(copy_repo, tenant_repo) -> TenantCopyService:
    return TenantCopyService(copy_repo, tenant_repo, timeout_seconds=5.0)


@pytest.fixture
def seeded_repo(copy_repo: FakeTenantCopyRepository) -> FakeTenantCopyRepository:
    """Source tenant with one of everything, plus a parent/child record pair."""
    copy_repo.add(
        "roles",
        SOURCE_TENANT,
        RoleSnapshot(id="r-manager", name="Manager", color="#123456", permissions=[{"entity": "invoice"}]),
    )
    copy_repo.add(
        "entities",
        SOURCE_TENANT,
        EntitySnapshot(
            id="e-invoice",
            name="Invoice",
            name_plural="Invoices",
            slug="invoice",
            fields=[
                {"slug": "number", "type": "text"},
                {"slug": "related", "type": "relation", "relation": {"entity": "invoice"}},
            ],
        ),
    )
    copy_repo.add(
        "records",
        SOURCE_TENANT,
        EntityRecordSnapshot(id="d-1", entity_id="e-invoice", data={"number": "1"}),
    )
    copy_repo.add(
        "records",
        SOURCE_TENANT,
        EntityRecordSnapshot(
            id="d-2",
            entity_id="e-invoice",
            data={"number": "2", "related": "d-1"},
            parent_record_id="d-1",
            visible_to_roles=["r-manager"],
            has_role_filter=True,
        ),
    )
    copy_repo.add(
        "endpoints",
        SOURCE_TENANT,
        EndpointSnapshot(
            id="api-1", name="List invoices", path="/invoices", method="GET", source_entity_id="e-invoice"
        ),
    )
    copy_repo.add(
        "pdf_templates",
        SOURCE_TENANT,
        PdfTemplateSnapshot(
            id="pdf-1",
            name="Invoice PDF",
            slug="invoice-pdf",
            source_entity_id="e-invoice",
            is_published=True,
            version=7,
        ),
    )
    copy_repo.add(
        "pages",
        SOURCE_TENANT,
        PageSnapshot(id="p-1", title="Dashboard", slug="dashboard", is_published=True),
    )
    copy_repo.add_user(SOURCE_TENANT, "r-manager")
    copy_repo.add_user(SOURCE_TENANT, "r-manager")
    return copy_repo


@pytest.fixture
async def client(copy_service: TenantCopyService) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI), copy service backed by the fakes."""
    app.dependency_overrides[get_tenant_copy_service] = lambda: copy_service
    app.dependency_overrides[get_tenant_copy_service_for_write] = lambda: copy_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory against the configured PostgreSQL, tables created.

    Skips when DATABASE_URL is not set. Sessions from it commit for real;
    tests using it clean up after themselves.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip("Postgres not configured: set DATABASE_URL")
    async with database.engine.begin() as conn:
        await conn.run_sync(database.Base.metadata.create_all)
    return database.AsyncSessionLocal


@pytest.fixture
async def db_session(session_factory) -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL (PostgreSQL). Skips (pytest.skip) when it is not
    configured. Use @pytest.mark.requires_db to mark tests that need this
    fixture; run without DB via: pytest -m 'not requires_db'.
    """
    async with session_factory() as session:
        # Explicit begin: code under test sees a caller-owned transaction.
        await session.begin()
        yield session
        await session.rollback()
