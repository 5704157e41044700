"""Module copiers: one class per copyable object kind.

Named kinds share ModuleCopier.run: load the selected source rows, resolve
naming conflicts against the target once, then insert and map each row.
Entity records have no naming conflicts and are copied by EntityDataCopier in
two passes so parents always exist before their children.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from copy import deepcopy
from dataclasses import replace
from typing import Generic, TypeVar

from app.application.dtos.tenant_copy import (
    EndpointSnapshot,
    EntityRecordSnapshot,
    EntitySelection,
    EntitySnapshot,
    PageSnapshot,
    PdfTemplateSnapshot,
    RoleSnapshot,
)
from app.application.use_cases.tenant_copy.conflicts import (
    ConflictResolution,
    ConflictResolver,
    scoped_key,
)
from app.application.use_cases.tenant_copy.context import CopyContext
from app.domain.enums import ConflictAction, CopyModule
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _remap_entity_reference(
    ctx: CopyContext, label: str, source_entity_id: str | None
) -> str | None:
    """Target entity id for a schema reference; None (with a warning) when it was not copied."""
    if not source_entity_id:
        return None
    target_id = ctx.entity_ids.get(source_entity_id)
    if target_id is None:
        ctx.warn(f"{label}: source entity was not copied, source_entity_id removed")
    return target_id


S = TypeVar("S")


class ModuleCopier(ABC, Generic[S]):
    """Template for copying one named object kind."""

    module: CopyModule
    key_is_name: bool = False

    async def run(self, ctx: CopyContext, ids: Sequence[str]) -> None:
        if not ids:
            return
        sources = await self.load_selection(ctx, ids)
        if not sources:
            return
        for source, resolution in await self.resolve_conflicts(ctx, sources):
            if resolution.action == ConflictAction.SKIP:
                ctx.skip(self.describe(source))
                self.on_skipped(ctx, source, resolution)
                continue
            await self.insert_and_map(ctx, source, resolution)
            ctx.copied.increment(self.module)
        logger.debug(
            "Copied %d %s from tenant %s",
            getattr(ctx.copied, self.module.value),
            self.module.value,
            ctx.source_tenant_id,
        )

    @abstractmethod
    async def load_selection(
        self, ctx: CopyContext, ids: Sequence[str]
    ) -> list[S]:
        """Source rows among ids, in creation order."""

    @abstractmethod
    async def load_taken_keys(self, ctx: CopyContext) -> dict[str, str]:
        """Scoped key -> id of every object of this kind already in the target."""

    @abstractmethod
    def candidate(self, source: S) -> tuple[str, str, str | None]:
        """(name, key, scope) used for conflict detection."""

    @abstractmethod
    def describe(self, source: S) -> str:
        """Entry appended to the skipped list."""

    @abstractmethod
    def build_copy(
        self, ctx: CopyContext, source: S, resolution: ConflictResolution
    ) -> S:
        """Row to insert into the target."""

    @abstractmethod
    async def insert(self, ctx: CopyContext, row: S) -> str:
        """Insert row into the target tenant; return its new id."""

    async def resolve_conflicts(
        self, ctx: CopyContext, sources: list[S]
    ) -> list[tuple[S, ConflictResolution]]:
        resolver = ConflictResolver(
            ctx.conflict_strategy,
            await self.load_taken_keys(ctx),
            key_is_name=self.key_is_name,
        )
        return [(source, resolver.resolve(*self.candidate(source))) for source in sources]

    async def insert_and_map(
        self, ctx: CopyContext, source: S, resolution: ConflictResolution
    ) -> str:
        new_id = await self.insert(ctx, self.build_copy(ctx, source, resolution))
        self.map_id(ctx, source, new_id)
        return new_id

    def map_id(self, ctx: CopyContext, source: S, new_id: str) -> None:
        """Record source id -> new id when later modules reference this kind."""

    def on_skipped(
        self, ctx: CopyContext, source: S, resolution: ConflictResolution
    ) -> None:
        """Hook for kinds that still need a mapping when skipped."""


class RoleCopier(ModuleCopier[RoleSnapshot]):
    """Custom roles. Unique by name; copies are never system or default roles."""

    module = CopyModule.ROLES
    key_is_name = True

    async def load_selection(
        self, ctx: CopyContext, ids: Sequence[str]
    ) -> list[RoleSnapshot]:
        return await ctx.repo.list_roles(ctx.source_tenant_id, ids)

    async def load_taken_keys(self, ctx: CopyContext) -> dict[str, str]:
        return {role.name: role.id for role in await ctx.repo.list_roles(ctx.target_tenant_id)}

    def candidate(self, source: RoleSnapshot) -> tuple[str, str, str | None]:
        return source.name, source.name, None

    def describe(self, source: RoleSnapshot) -> str:
        return f"Role: {source.name}"

    def build_copy(
        self, ctx: CopyContext, source: RoleSnapshot, resolution: ConflictResolution
    ) -> RoleSnapshot:
        return replace(
            source,
            name=resolution.name,
            is_system=False,
            is_default=False,
            permissions=deepcopy(source.permissions),
            module_permissions=deepcopy(source.module_permissions),
            tenant_permissions=deepcopy(source.tenant_permissions),
        )

    async def insert(self, ctx: CopyContext, row: RoleSnapshot) -> str:
        return await ctx.repo.insert_role(ctx.target_tenant_id, row)

    def map_id(self, ctx: CopyContext, source: RoleSnapshot, new_id: str) -> None:
        ctx.role_ids.register(source.id, new_id)

    def on_skipped(
        self, ctx: CopyContext, source: RoleSnapshot, resolution: ConflictResolution
    ) -> None:
        # Records copied later still point at a role with the same name.
        if resolution.existing_id:
            ctx.role_ids.register(source.id, resolution.existing_id)


class EntityCopier(ModuleCopier[EntitySnapshot]):
    """Schema definitions. Unique by slug; skipped entities stay unmapped."""

    module = CopyModule.ENTITIES

    async def load_selection(
        self, ctx: CopyContext, ids: Sequence[str]
    ) -> list[EntitySnapshot]:
        return await ctx.repo.list_entities(ctx.source_tenant_id, ids)

    async def load_taken_keys(self, ctx: CopyContext) -> dict[str, str]:
        return {
            entity.slug: entity.id
            for entity in await ctx.repo.list_entities(ctx.target_tenant_id)
        }

    def candidate(self, source: EntitySnapshot) -> tuple[str, str, str | None]:
        return source.name, source.slug, None

    def describe(self, source: EntitySnapshot) -> str:
        return f"Entity: {source.name} ({source.slug})"

    def build_copy(
        self, ctx: CopyContext, source: EntitySnapshot, resolution: ConflictResolution
    ) -> EntitySnapshot:
        return replace(
            source,
            name=resolution.name,
            name_plural=resolution.rename(source.name_plural),
            slug=resolution.key,
            fields=deepcopy(source.fields),
            settings=deepcopy(source.settings),
            is_system=False,
        )

    async def insert(self, ctx: CopyContext, row: EntitySnapshot) -> str:
        return await ctx.repo.insert_entity(ctx.target_tenant_id, row)

    def map_id(self, ctx: CopyContext, source: EntitySnapshot, new_id: str) -> None:
        ctx.entity_ids.register(source.id, new_id)


class EndpointCopier(ModuleCopier[EndpointSnapshot]):
    """Custom endpoints. Unique by path within an HTTP method."""

    module = CopyModule.ENDPOINTS

    async def load_selection(
        self, ctx: CopyContext, ids: Sequence[str]
    ) -> list[EndpointSnapshot]:
        return await ctx.repo.list_endpoints(ctx.source_tenant_id, ids)

    async def load_taken_keys(self, ctx: CopyContext) -> dict[str, str]:
        return {
            scoped_key(endpoint.path, endpoint.method): endpoint.id
            for endpoint in await ctx.repo.list_endpoints(ctx.target_tenant_id)
        }

    def candidate(self, source: EndpointSnapshot) -> tuple[str, str, str | None]:
        return source.name, source.path, source.method

    def describe(self, source: EndpointSnapshot) -> str:
        return f"API: {source.method} {source.path}"

    def build_copy(
        self, ctx: CopyContext, source: EndpointSnapshot, resolution: ConflictResolution
    ) -> EndpointSnapshot:
        return replace(
            source,
            name=resolution.name,
            path=resolution.key,
            source_entity_id=_remap_entity_reference(
                ctx, f'API "{source.name}"', source.source_entity_id
            ),
        )

    async def insert(self, ctx: CopyContext, row: EndpointSnapshot) -> str:
        return await ctx.repo.insert_endpoint(ctx.target_tenant_id, row)


class PdfTemplateCopier(ModuleCopier[PdfTemplateSnapshot]):
    """PDF templates. Unique by slug; copies start unpublished at version 1."""

    module = CopyModule.PDF_TEMPLATES

    async def load_selection(
        self, ctx: CopyContext, ids: Sequence[str]
    ) -> list[PdfTemplateSnapshot]:
        return await ctx.repo.list_pdf_templates(ctx.source_tenant_id, ids)

    async def load_taken_keys(self, ctx: CopyContext) -> dict[str, str]:
        return {
            template.slug: template.id
            for template in await ctx.repo.list_pdf_templates(ctx.target_tenant_id)
        }

    def candidate(self, source: PdfTemplateSnapshot) -> tuple[str, str, str | None]:
        return source.name, source.slug, None

    def describe(self, source: PdfTemplateSnapshot) -> str:
        return f"PDF template: {source.name} ({source.slug})"

    def build_copy(
        self, ctx: CopyContext, source: PdfTemplateSnapshot, resolution: ConflictResolution
    ) -> PdfTemplateSnapshot:
        return replace(
            source,
            name=resolution.name,
            slug=resolution.key,
            content=deepcopy(source.content),
            source_entity_id=_remap_entity_reference(
                ctx, f'PDF template "{source.name}"', source.source_entity_id
            ),
            is_published=False,
            version=1,
        )

    async def insert(self, ctx: CopyContext, row: PdfTemplateSnapshot) -> str:
        return await ctx.repo.insert_pdf_template(ctx.target_tenant_id, row)


class PageCopier(ModuleCopier[PageSnapshot]):
    """UI pages. Unique by slug; copies start unpublished."""

    module = CopyModule.PAGES

    async def load_selection(
        self, ctx: CopyContext, ids: Sequence[str]
    ) -> list[PageSnapshot]:
        return await ctx.repo.list_pages(ctx.source_tenant_id, ids)

    async def load_taken_keys(self, ctx: CopyContext) -> dict[str, str]:
        return {page.slug: page.id for page in await ctx.repo.list_pages(ctx.target_tenant_id)}

    def candidate(self, source: PageSnapshot) -> tuple[str, str, str | None]:
        return source.title, source.slug, None

    def describe(self, source: PageSnapshot) -> str:
        return f"Page: {source.title} ({source.slug})"

    def build_copy(
        self, ctx: CopyContext, source: PageSnapshot, resolution: ConflictResolution
    ) -> PageSnapshot:
        return replace(
            source,
            title=resolution.name,
            slug=resolution.key,
            content=deepcopy(source.content),
            is_published=False,
        )

    async def insert(self, ctx: CopyContext, row: PageSnapshot) -> str:
        return await ctx.repo.insert_page(ctx.target_tenant_id, row)


class EntityDataCopier:
    """Live records of selected entities, parents before children.

    Pass 1 copies records without a parent for every selected entity. Pass 2
    copies children whose parent is already mapped and repeats over the rest
    while it makes progress, so grandchildren land regardless of row order.
    Children whose parent never gets mapped are reported and left out.
    """

    module = CopyModule.ENTITY_DATA

    async def run(
        self, ctx: CopyContext, selections: Sequence[EntitySelection]
    ) -> None:
        entity_ids: list[str] = []
        for selection in selections:
            if not selection.include_data or selection.id in entity_ids:
                continue
            if selection.id not in ctx.entity_ids:
                ctx.warn(f"Data for entity {selection.id} skipped: entity was not copied")
                continue
            entity_ids.append(selection.id)
        if not entity_ids:
            return

        for entity_id in entity_ids:
            for record in await ctx.repo.list_entity_records(
                ctx.source_tenant_id, entity_id, has_parent=False
            ):
                await self._copy_record(ctx, record, parent_record_id=None)

        pending: list[EntityRecordSnapshot] = []
        for entity_id in entity_ids:
            pending.extend(
                await ctx.repo.list_entity_records(
                    ctx.source_tenant_id, entity_id, has_parent=True
                )
            )
        while pending:
            remaining: list[EntityRecordSnapshot] = []
            for record in pending:
                parent_id = ctx.record_ids.get(record.parent_record_id)
                if parent_id is None:
                    remaining.append(record)
                    continue
                await self._copy_record(ctx, record, parent_record_id=parent_id)
            if len(remaining) == len(pending):
                break
            pending = remaining

        for record in pending:
            ctx.warn(
                f"Sub-record {record.id} skipped: parent record "
                f"{record.parent_record_id} was not copied"
            )

    async def _copy_record(
        self,
        ctx: CopyContext,
        record: EntityRecordSnapshot,
        parent_record_id: str | None,
    ) -> None:
        row = replace(
            record,
            entity_id=ctx.entity_ids.get(record.entity_id),
            data=deepcopy(record.data),
            parent_record_id=parent_record_id,
            visible_to_roles=ctx.role_ids.remap_all(record.visible_to_roles),
        )
        new_id = await ctx.repo.insert_entity_record(ctx.target_tenant_id, row)
        ctx.record_ids.register(record.id, new_id)
        ctx.copied.increment(self.module)

