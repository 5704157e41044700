"""Tenant copy use case: preview what a tenant offers and copy a selection of it.

execute_copy validates, then runs every module in dependency order inside one
transaction bounded by a timeout. Either everything selected lands in the
target or nothing does.
"""

from __future__ import annotations

import asyncio

from app.application.dtos.tenant_copy import (
    CopyModuleSelection,
    CopyPreview,
    CopyRequest,
    CopyResult,
    EndpointPreview,
    EntityPreview,
    PagePreview,
    PdfTemplatePreview,
    RolePreview,
)
from app.application.interfaces.repositories import (
    ITenantCopyRepository,
    ITenantRepository,
)
from app.application.use_cases.tenant_copy.context import CopyContext
from app.application.use_cases.tenant_copy.copiers import (
    EndpointCopier,
    EntityCopier,
    EntityDataCopier,
    PageCopier,
    PdfTemplateCopier,
    RoleCopier,
)
from app.application.use_cases.tenant_copy.relation_remap import RelationRemapper
from app.domain.exceptions import (
    CopyTimeoutException,
    TenantNotFoundException,
    ValidationException,
)
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import add_span_attributes, add_span_event, traced

logger = get_logger(__name__)

DEFAULT_COPY_TIMEOUT_SECONDS = 120.0


class TenantCopyService:
    """Copies roles, entities (optionally with data), endpoints, PDF templates
    and pages from one tenant to another.
    """

    def __init__(
        self,
        copy_repo: ITenantCopyRepository,
        tenant_repo: ITenantRepository,
        *,
        timeout_seconds: float = DEFAULT_COPY_TIMEOUT_SECONDS,
    ) -> None:
        self.copy_repo = copy_repo
        self.tenant_repo = tenant_repo
        self.timeout_seconds = timeout_seconds

    @traced("tenant_copy.preview")
    async def preview_copy(self, source_tenant_id: str) -> CopyPreview:
        """Everything copyable from source_tenant_id, each list sorted by name (or title)."""
        await self._require_tenant(source_tenant_id)

        roles = await self.copy_repo.list_roles(source_tenant_id)
        entities = await self.copy_repo.list_entities(source_tenant_id)
        pages = await self.copy_repo.list_pages(source_tenant_id)
        endpoints = await self.copy_repo.list_endpoints(source_tenant_id)
        templates = await self.copy_repo.list_pdf_templates(source_tenant_id)
        user_counts = await self.copy_repo.count_users_by_role(source_tenant_id)
        record_counts = await self.copy_repo.count_live_records_by_entity(
            source_tenant_id
        )

        return CopyPreview(
            roles=sorted(
                (
                    RolePreview(
                        id=r.id,
                        name=r.name,
                        role_type=r.role_type,
                        color=r.color,
                        is_system=r.is_system,
                        user_count=user_counts.get(r.id, 0),
                    )
                    for r in roles
                ),
                key=lambda r: r.name,
            ),
            entities=sorted(
                (
                    EntityPreview(
                        id=e.id,
                        name=e.name,
                        slug=e.slug,
                        icon=e.icon,
                        color=e.color,
                        record_count=record_counts.get(e.id, 0),
                    )
                    for e in entities
                ),
                key=lambda e: e.name,
            ),
            pages=sorted(
                (
                    PagePreview(
                        id=p.id, title=p.title, slug=p.slug, is_published=p.is_published
                    )
                    for p in pages
                ),
                key=lambda p: p.title,
            ),
            endpoints=sorted(
                (
                    EndpointPreview(
                        id=ep.id,
                        name=ep.name,
                        path=ep.path,
                        method=ep.method,
                        is_active=ep.is_active,
                    )
                    for ep in endpoints
                ),
                key=lambda ep: ep.name,
            ),
            pdf_templates=sorted(
                (
                    PdfTemplatePreview(
                        id=t.id,
                        name=t.name,
                        slug=t.slug,
                        template_type=t.template_type,
                        is_published=t.is_published,
                    )
                    for t in templates
                ),
                key=lambda t: t.name,
            ),
        )

    @traced("tenant_copy.execute")
    async def execute_copy(self, request: CopyRequest) -> CopyResult:
        """Copy the selected objects; raise before any write when the request is invalid.

        Raises:
            ValidationException: source equals target, or nothing selected.
            TenantNotFoundException: source or target tenant does not exist.
            CopyTimeoutException: the copy exceeded timeout_seconds (rolled back).
        """
        if request.source_tenant_id == request.target_tenant_id:
            raise ValidationException(
                "Source and target tenant must be different",
                field="targetTenantId",
            )
        await self._require_tenant(request.source_tenant_id, role="source")
        await self._require_tenant(request.target_tenant_id, role="target")
        if request.modules.is_empty():
            raise ValidationException(
                "Select at least one module to copy", field="modules"
            )

        logger.info(
            "Starting tenant copy: %s -> %s (strategy=%s)",
            request.source_tenant_id,
            request.target_tenant_id,
            request.conflict_strategy.value,
        )
        ctx = CopyContext(
            repo=self.copy_repo,
            source_tenant_id=request.source_tenant_id,
            target_tenant_id=request.target_tenant_id,
            conflict_strategy=request.conflict_strategy,
        )
        timeout_error: TimeoutError | None = None
        try:
            async with self.copy_repo.transaction(
                timeout_seconds=self.timeout_seconds
            ):
                try:
                    await asyncio.wait_for(
                        self._copy_modules(ctx, request.modules),
                        timeout=self.timeout_seconds,
                    )
                except TimeoutError as exc:
                    timeout_error = exc
                    raise
        except Exception as exc:
            if timeout_error is None:
                raise
            if exc is not timeout_error:
                # A statement cancelled mid-flight can break the rollback too.
                logger.warning(
                    "Rollback after tenant copy timeout failed: %s", exc
                )
            logger.error(
                "Tenant copy %s -> %s timed out after %ss; rolled back",
                request.source_tenant_id,
                request.target_tenant_id,
                self.timeout_seconds,
            )
            raise CopyTimeoutException(
                request.source_tenant_id,
                request.target_tenant_id,
                self.timeout_seconds,
            ) from timeout_error

        result = ctx.to_result()
        copied = result.copied
        add_span_attributes(
            **{
                "copy.roles": copied.roles,
                "copy.entities": copied.entities,
                "copy.entity_data": copied.entity_data,
                "copy.endpoints": copied.endpoints,
                "copy.pdf_templates": copied.pdf_templates,
                "copy.pages": copied.pages,
                "copy.skipped": len(result.skipped),
                "copy.warnings": len(result.warnings),
            }
        )
        logger.info(
            "Tenant copy %s -> %s completed: roles=%d entities=%d entity_data=%d "
            "endpoints=%d pdf_templates=%d pages=%d skipped=%d warnings=%d",
            request.source_tenant_id,
            request.target_tenant_id,
            copied.roles,
            copied.entities,
            copied.entity_data,
            copied.endpoints,
            copied.pdf_templates,
            copied.pages,
            len(result.skipped),
            len(result.warnings),
        )
        return result

    async def _copy_modules(
        self, ctx: CopyContext, modules: CopyModuleSelection
    ) -> None:
        """Run every copier in dependency order. Roles and entities must precede
        anything that references them.
        """
        await RoleCopier().run(ctx, modules.roles)
        add_span_event("tenant_copy.roles", {"count": ctx.copied.roles})

        await EntityCopier().run(ctx, [s.id for s in modules.entities])
        add_span_event("tenant_copy.entities", {"count": ctx.copied.entities})

        await EntityDataCopier().run(ctx, modules.entities)
        add_span_event("tenant_copy.entity_data", {"count": ctx.copied.entity_data})

        if ctx.record_ids:
            updated = await RelationRemapper().run(ctx, modules.entities)
            add_span_event("tenant_copy.relation_remap", {"count": updated})

        await EndpointCopier().run(ctx, modules.endpoints)
        add_span_event("tenant_copy.endpoints", {"count": ctx.copied.endpoints})

        await PdfTemplateCopier().run(ctx, modules.pdf_templates)
        add_span_event(
            "tenant_copy.pdf_templates", {"count": ctx.copied.pdf_templates}
        )

        await PageCopier().run(ctx, modules.pages)
        add_span_event("tenant_copy.pages", {"count": ctx.copied.pages})

    async def _require_tenant(self, tenant_id: str, role: str | None = None) -> None:
        if await self.tenant_repo.get_by_id(tenant_id) is None:
            raise TenantNotFoundException(tenant_id, role=role)
