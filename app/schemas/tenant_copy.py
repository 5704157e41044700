"""Tenant copy API schemas. camelCase on the wire, snake_case in Python."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

from app.application.dtos.tenant_copy import (
    CopyModuleSelection,
    CopyPreview,
    CopyRequest,
    CopyResult,
    EntitySelection,
)
from app.domain.enums import ConflictStrategy

ObjectId = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CamelModel(BaseModel):
    """Base for schemas serialized with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class EntitySelectionRequest(CamelModel):
    """One entity to copy; include_data also copies its live records."""

    id: ObjectId
    include_data: bool = False


class CopyModulesRequest(CamelModel):
    """Ids to copy per module. Omitted modules are not copied."""

    roles: list[ObjectId] = Field(default_factory=list)
    entities: list[EntitySelectionRequest] = Field(default_factory=list)
    pages: list[ObjectId] = Field(default_factory=list)
    endpoints: list[ObjectId] = Field(default_factory=list)
    pdf_templates: list[ObjectId] = Field(default_factory=list)


class CopyTenantDataRequest(CamelModel):
    """Request body for POST /tenants/copy."""

    source_tenant_id: ObjectId
    target_tenant_id: ObjectId
    conflict_strategy: ConflictStrategy = ConflictStrategy.SKIP
    modules: CopyModulesRequest

    def to_command(self) -> CopyRequest:
        """Map to the application DTO."""
        return CopyRequest(
            source_tenant_id=self.source_tenant_id,
            target_tenant_id=self.target_tenant_id,
            conflict_strategy=self.conflict_strategy,
            modules=CopyModuleSelection(
                roles=tuple(self.modules.roles),
                entities=tuple(
                    EntitySelection(id=e.id, include_data=e.include_data)
                    for e in self.modules.entities
                ),
                pages=tuple(self.modules.pages),
                endpoints=tuple(self.modules.endpoints),
                pdf_templates=tuple(self.modules.pdf_templates),
            ),
        )


class CopyCountsResponse(CamelModel):
    """Objects created in the target, per module."""

    roles: int
    entities: int
    entity_data: int
    endpoints: int
    pdf_templates: int
    pages: int


class CopyResultResponse(CamelModel):
    """Response for POST /tenants/copy."""

    copied: CopyCountsResponse
    skipped: list[str]
    warnings: list[str]

    @classmethod
    def from_result(cls, result: CopyResult) -> "CopyResultResponse":
        return cls(
            copied=CopyCountsResponse.model_validate(result.copied),
            skipped=result.skipped,
            warnings=result.warnings,
        )


class RolePreviewResponse(CamelModel):
    id: str
    name: str
    role_type: str
    color: str | None
    is_system: bool
    user_count: int


class EntityPreviewResponse(CamelModel):
    id: str
    name: str
    slug: str
    icon: str | None
    color: str | None
    record_count: int


class PagePreviewResponse(CamelModel):
    id: str
    title: str
    slug: str
    is_published: bool


class EndpointPreviewResponse(CamelModel):
    id: str
    name: str
    path: str
    method: str
    is_active: bool


class PdfTemplatePreviewResponse(CamelModel):
    id: str
    name: str
    slug: str
    template_type: str
    is_published: bool


class CopyPreviewResponse(CamelModel):
    """Response for GET /tenants/{tenant_id}/copy-preview."""

    roles: list[RolePreviewResponse]
    entities: list[EntityPreviewResponse]
    pages: list[PagePreviewResponse]
    endpoints: list[EndpointPreviewResponse]
    pdf_templates: list[PdfTemplatePreviewResponse]

    @classmethod
    def from_preview(cls, preview: CopyPreview) -> "CopyPreviewResponse":
        return cls.model_validate(preview)
