"""DTOs for tenant copy use cases (no dependency on ORM).

Snapshots are read-models of source rows; the copy engine derives the row to
insert from them with dataclasses.replace. The repository ignores a
snapshot's id on insert and returns the freshly generated one.
"""

from dataclasses import dataclass, field
from typing import Any

from app.domain.enums import ConflictStrategy, CopyModule


@dataclass(frozen=True)
class RoleSnapshot:
    """Custom role as read from (or written to) a tenant."""

    id: str
    name: str
    description: str | None = None
    color: str | None = None
    role_type: str = "CUSTOM"
    is_system: bool = False
    is_default: bool = False
    permissions: list[Any] = field(default_factory=list)
    module_permissions: dict[str, Any] = field(default_factory=dict)
    tenant_permissions: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class EntitySnapshot:
    """Entity (schema definition). fields keeps the source order verbatim."""

    id: str
    name: str
    name_plural: str
    slug: str
    description: str | None = None
    icon: str | None = None
    color: str | None = None
    fields: list[dict[str, Any]] = field(default_factory=list)
    settings: dict[str, Any] = field(default_factory=dict)
    is_system: bool = False


@dataclass(frozen=True)
class EntityRecordSnapshot:
    """Live (not soft-deleted) entity record. visible_to_roles holds custom role ids."""

    id: str
    entity_id: str
    data: dict[str, Any] = field(default_factory=dict)
    parent_record_id: str | None = None
    visible_to_roles: list[str] = field(default_factory=list)
    has_role_filter: bool = False


@dataclass(frozen=True)
class EndpointSnapshot:
    """Custom endpoint. Everything except source_entity_id is opaque to the copy."""

    id: str
    name: str
    path: str
    method: str
    description: str | None = None
    mode: str = "BASIC"
    request_schema: dict[str, Any] | None = None
    response_schema: dict[str, Any] | None = None
    source_entity_id: str | None = None
    selected_fields: list[Any] | None = None
    filters: list[Any] | None = None
    query_params: list[Any] | None = None
    order_by: dict[str, Any] | None = None
    limit_records: int | None = None
    response_type: str = "list"
    computed_values: list[Any] | None = None
    logic: str | None = None
    auth: str = "REQUIRED"
    permissions: list[Any] | None = None
    rate_limit: int | None = None
    is_active: bool = True


@dataclass(frozen=True)
class PdfTemplateSnapshot:
    """PDF template, optionally bound to a source entity."""

    id: str
    name: str
    slug: str
    description: str | None = None
    icon: str | None = None
    page_size: str = "A4"
    orientation: str = "PORTRAIT"
    margins: dict[str, Any] | None = None
    content: dict[str, Any] = field(default_factory=dict)
    source_entity_id: str | None = None
    selected_fields: list[Any] | None = None
    logo_url: str | None = None
    template_type: str = "single"
    is_published: bool = False
    version: int = 1


@dataclass(frozen=True)
class PageSnapshot:
    """UI page."""

    id: str
    title: str
    slug: str
    description: str | None = None
    icon: str | None = None
    content: dict[str, Any] = field(default_factory=dict)
    is_published: bool = False
    permissions: list[Any] | None = None


@dataclass(frozen=True)
class EntitySelection:
    """One entity chosen for copy; include_data also copies its live records."""

    id: str
    include_data: bool = False


@dataclass(frozen=True)
class CopyModuleSelection:
    """Explicit ids chosen per module. Nothing outside these lists is read."""

    roles: tuple[str, ...] = ()
    entities: tuple[EntitySelection, ...] = ()
    pages: tuple[str, ...] = ()
    endpoints: tuple[str, ...] = ()
    pdf_templates: tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return not (
            self.roles
            or self.entities
            or self.pages
            or self.endpoints
            or self.pdf_templates
        )


@dataclass(frozen=True)
class CopyRequest:
    """Input of TenantCopyService.execute_copy."""

    source_tenant_id: str
    target_tenant_id: str
    modules: CopyModuleSelection
    conflict_strategy: ConflictStrategy = ConflictStrategy.SKIP


@dataclass
class CopyCounts:
    """Objects actually created in the target, per module."""

    roles: int = 0
    entities: int = 0
    entity_data: int = 0
    endpoints: int = 0
    pdf_templates: int = 0
    pages: int = 0

    def increment(self, module: CopyModule) -> None:
        setattr(self, module.value, getattr(self, module.value) + 1)

    def total(self) -> int:
        return (
            self.roles
            + self.entities
            + self.entity_data
            + self.endpoints
            + self.pdf_templates
            + self.pages
        )


@dataclass(frozen=True)
class CopyResult:
    """Complete outcome of one copy. skipped and warnings are human-readable."""

    copied: CopyCounts
    skipped: list[str]
    warnings: list[str]


@dataclass(frozen=True)
class RolePreview:
    id: str
    name: str
    role_type: str
    color: str | None
    is_system: bool
    user_count: int


@dataclass(frozen=True)
class EntityPreview:
    id: str
    name: str
    slug: str
    icon: str | None
    color: str | None
    record_count: int


@dataclass(frozen=True)
class PagePreview:
    id: str
    title: str
    slug: str
    is_published: bool


@dataclass(frozen=True)
class EndpointPreview:
    id: str
    name: str
    path: str
    method: str
    is_active: bool


@dataclass(frozen=True)
class PdfTemplatePreview:
    id: str
    name: str
    slug: str
    template_type: str
    is_published: bool


@dataclass(frozen=True)
class CopyPreview:
    """Everything copyable from a tenant, used to build the user's selection."""

    roles: list[RolePreview]
    entities: list[EntityPreview]
    pages: list[PagePreview]
    endpoints: list[EndpointPreview]
    pdf_templates: list[PdfTemplatePreview]
