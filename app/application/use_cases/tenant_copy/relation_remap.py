"""Post-pass that rewrites relation values in copied record payloads.

Relation fields are found through the entity's own field list; payloads are
never traversed blindly. Running the pass twice changes nothing the second
time: values already pointing at target records are not in the record map.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from app.application.dtos.tenant_copy import EntitySelection
from app.application.use_cases.tenant_copy.context import CopyContext, IdentifierMap
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def is_relation_field(field: Any) -> bool:
    """True for a field of type relation that names its target entity."""
    if not isinstance(field, dict) or field.get("type") != "relation":
        return False
    if not field.get("slug"):
        return False
    relation = field.get("relation")
    if isinstance(relation, dict) and relation.get("entity"):
        return True
    return bool(field.get("relatedEntityId") or field.get("relatedEntitySlug"))


def relation_field_slugs(fields: Any) -> list[str]:
    if not isinstance(fields, list):
        return []
    return [field["slug"] for field in fields if is_relation_field(field)]


def remap_relation_values(
    data: dict[str, Any], slugs: Sequence[str], record_ids: IdentifierMap
) -> dict[str, Any] | None:
    """Return a new payload with relation ids remapped, or None if nothing changed.

    A single string id or each string of an id list is replaced when mapped;
    anything else is kept as is.
    """
    updated = dict(data)
    changed = False
    for slug in slugs:
        value = data.get(slug)
        if isinstance(value, str):
            new_value = record_ids.get(value)
            if new_value is not None and new_value != value:
                updated[slug] = new_value
                changed = True
        elif isinstance(value, list):
            new_list = [
                record_ids.remap(item) if isinstance(item, str) else item
                for item in value
            ]
            if new_list != value:
                updated[slug] = new_list
                changed = True
    return updated if changed else None


class RelationRemapper:
    """Rewrites relation values of every entity whose data was copied."""

    async def run(
        self, ctx: CopyContext, selections: Sequence[EntitySelection]
    ) -> int:
        """Return the number of records updated."""
        source_ids = [
            selection.id
            for selection in selections
            if selection.include_data and selection.id in ctx.entity_ids
        ]
        if not source_ids or not ctx.record_ids:
            return 0

        updated = 0
        source_entities = await ctx.repo.list_entities(
            ctx.source_tenant_id, source_ids
        )
        for entity in source_entities:
            slugs = relation_field_slugs(entity.fields)
            target_entity_id = ctx.entity_ids.get(entity.id)
            if not slugs or target_entity_id is None:
                continue
            payloads = await ctx.repo.list_record_payloads(
                ctx.target_tenant_id, target_entity_id
            )
            for record_id, data in payloads:
                new_data = remap_relation_values(data or {}, slugs, ctx.record_ids)
                if new_data is None:
                    continue
                await ctx.repo.update_record_payload(
                    ctx.target_tenant_id, record_id, new_data
                )
                updated += 1
        logger.debug("Relation remap updated %d record(s)", updated)
        return updated
