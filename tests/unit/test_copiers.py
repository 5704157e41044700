"""Unit tests for the per-kind module copiers."""

import typing

import pytest

from app.application.dtos.tenant_copy import (
    EndpointSnapshot,
    EntityRecordSnapshot,
    EntitySelection,
    EntitySnapshot,
    PageSnapshot,
    PdfTemplateSnapshot,
    RoleSnapshot,
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
from app.domain.enums import ConflictStrategy

SOURCE = "tenant-source"
TARGET = "tenant-target"


def _ctx(repo, strategy: ConflictStrategy = ConflictStrategy.SKIP) -> CopyContext:
    return CopyContext(
        repo=repo,
        source_tenant_id=SOURCE,
        target_tenant_id=TARGET,
        conflict_strategy=strategy,
    )


def _entity(entity_id: str, slug: str) -> EntitySnapshot:
    return EntitySnapshot(
        id=entity_id, name=slug.title(), name_plural=f"{slug.title()}s", slug=slug
    )


async def test_role_copier_resets_system_flags_and_maps(copy_repo) -> None:
    copy_repo.add(
        "roles",
        SOURCE,
        RoleSnapshot(id="r1", name="Admin", is_system=True, is_default=True),
    )
    ctx = _ctx(copy_repo)
    await RoleCopier().run(ctx, ["r1"])

    [copied] = copy_repo.all("roles", TARGET)
    assert copied.name == "Admin"
    assert copied.is_system is False
    assert copied.is_default is False
    assert ctx.role_ids.get("r1") == copied.id
    assert ctx.copied.roles == 1


async def test_role_copier_skip_maps_to_existing_role(copy_repo) -> None:
    copy_repo.add("roles", SOURCE, RoleSnapshot(id="r1", name="Manager"))
    copy_repo.add("roles", TARGET, RoleSnapshot(id="t-manager", name="Manager"))
    ctx = _ctx(copy_repo)
    await RoleCopier().run(ctx, ["r1"])

    assert ctx.skipped == ["Role: Manager"]
    assert ctx.role_ids.get("r1") == "t-manager"
    assert ctx.copied.roles == 0
    assert len(copy_repo.all("roles", TARGET)) == 1


async def test_role_copier_only_reads_selected_ids(copy_repo) -> None:
    copy_repo.add("roles", SOURCE, RoleSnapshot(id="r1", name="One"))
    copy_repo.add("roles", SOURCE, RoleSnapshot(id="r2", name="Two"))
    copy_repo.add("roles", "tenant-other", RoleSnapshot(id="r3", name="Three"))
    ctx = _ctx(copy_repo)
    await RoleCopier().run(ctx, ["r2", "r3"])

    assert [r.name for r in copy_repo.all("roles", TARGET)] == ["Two"]


async def test_entity_copier_suffix_renames_plural_and_keeps_fields(copy_repo) -> None:
    fields = [{"slug": "a", "type": "text"}, {"slug": "b", "type": "number"}]
    copy_repo.add(
        "entities",
        SOURCE,
        EntitySnapshot(
            id="e1",
            name="Invoice",
            name_plural="Invoices",
            slug="invoice",
            fields=fields,
            is_system=True,
        ),
    )
    copy_repo.add("entities", TARGET, _entity("t1", "invoice"))
    ctx = _ctx(copy_repo, ConflictStrategy.SUFFIX)
    await EntityCopier().run(ctx, ["e1"])

    copied = copy_repo.all("entities", TARGET)[-1]
    assert copied.slug == "invoice-copy"
    assert copied.name == "Invoice (copy)"
    assert copied.name_plural == "Invoices (copy)"
    assert copied.fields == fields
    assert copied.is_system is False
    assert ctx.entity_ids.get("e1") == copied.id


async def test_entity_copier_skip_leaves_entity_unmapped(copy_repo) -> None:
    copy_repo.add("entities", SOURCE, _entity("e1", "invoice"))
    copy_repo.add("entities", TARGET, _entity("t1", "invoice"))
    ctx = _ctx(copy_repo)
    await EntityCopier().run(ctx, ["e1"])

    assert ctx.skipped == ["Entity: Invoice (invoice)"]
    assert "e1" not in ctx.entity_ids


async def test_endpoint_copier_conflict_is_per_method(copy_repo) -> None:
    copy_repo.add(
        "endpoints", SOURCE, EndpointSnapshot(id="a1", name="Create", path="/orders", method="POST")
    )
    copy_repo.add(
        "endpoints", SOURCE, EndpointSnapshot(id="a2", name="List", path="/orders", method="GET")
    )
    copy_repo.add(
        "endpoints", TARGET, EndpointSnapshot(id="t1", name="List", path="/orders", method="GET")
    )
    ctx = _ctx(copy_repo)
    await EndpointCopier().run(ctx, ["a1", "a2"])

    assert ctx.copied.endpoints == 1
    assert ctx.skipped == ["API: GET /orders"]


async def test_endpoint_copier_nulls_uncopied_entity_reference(copy_repo) -> None:
    copy_repo.add(
        "endpoints",
        SOURCE,
        EndpointSnapshot(id="a1", name="Orders", path="/orders", method="GET", source_entity_id="e-missing"),
    )
    ctx = _ctx(copy_repo)
    await EndpointCopier().run(ctx, ["a1"])

    [copied] = copy_repo.all("endpoints", TARGET)
    assert copied.source_entity_id is None
    assert ctx.warnings == ['API "Orders": source entity was not copied, source_entity_id removed']


async def test_pdf_template_copier_resets_publication(copy_repo) -> None:
    copy_repo.add(
        "pdf_templates",
        SOURCE,
        PdfTemplateSnapshot(
            id="t1", name="Quote", slug="quote", source_entity_id="e1", is_published=True, version=4
        ),
    )
    ctx = _ctx(copy_repo)
    ctx.entity_ids.register("e1", "e1-new")
    await PdfTemplateCopier().run(ctx, ["t1"])

    [copied] = copy_repo.all("pdf_templates", TARGET)
    assert copied.source_entity_id == "e1-new"
    assert copied.is_published is False
    assert copied.version == 1
    assert ctx.warnings == []


async def test_page_copier_suffix_and_unpublished(copy_repo) -> None:
    copy_repo.add("pages", SOURCE, PageSnapshot(id="p1", title="Home", slug="home", is_published=True))
    copy_repo.add("pages", TARGET, PageSnapshot(id="t1", title="Home", slug="home"))
    copy_repo.add("pages", TARGET, PageSnapshot(id="t2", title="Home (copy)", slug="home-copy"))
    ctx = _ctx(copy_repo, ConflictStrategy.SUFFIX)
    await PageCopier().run(ctx, ["p1"])

    copied = copy_repo.all("pages", TARGET)[-1]
    assert copied.slug == "home-copy-2"
    assert copied.title == "Home (copy 2)"
    assert copied.is_published is False


async def test_copier_with_empty_selection_does_not_touch_repo(copy_repo) -> None:
    ctx = _ctx(copy_repo)
    copy_repo.fail_on = "pages"
    await PageCopier().run(ctx, [])
    assert ctx.copied.pages == 0


async def test_entity_data_copier_copies_parents_before_children(copy_repo) -> None:
    # Grandchild listed before its parent; both still land.
    copy_repo.add("records", SOURCE, EntityRecordSnapshot(id="root", entity_id="e1"))
    copy_repo.add(
        "records", SOURCE, EntityRecordSnapshot(id="grandchild", entity_id="e1", parent_record_id="child")
    )
    copy_repo.add(
        "records", SOURCE, EntityRecordSnapshot(id="child", entity_id="e1", parent_record_id="root")
    )
    ctx = _ctx(copy_repo)
    ctx.entity_ids.register("e1", "e1-new")
    await EntityDataCopier().run(ctx, [EntitySelection(id="e1", include_data=True)])

    assert ctx.copied.entity_data == 3
    assert ctx.warnings == []
    child = copy_repo.record(ctx.record_ids.get("child"))
    grandchild = copy_repo.record(ctx.record_ids.get("grandchild"))
    assert child.parent_record_id == ctx.record_ids.get("root")
    assert grandchild.parent_record_id == ctx.record_ids.get("child")
    assert child.entity_id == "e1-new"


async def test_entity_data_copier_warns_on_orphans_and_deleted(copy_repo) -> None:
    copy_repo.add("records", SOURCE, EntityRecordSnapshot(id="live", entity_id="e1"))
    copy_repo.add("records", SOURCE, EntityRecordSnapshot(id="gone", entity_id="e1"))
    copy_repo.add(
        "records", SOURCE, EntityRecordSnapshot(id="orphan", entity_id="e1", parent_record_id="gone")
    )
    copy_repo.deleted_records.add("gone")
    ctx = _ctx(copy_repo)
    ctx.entity_ids.register("e1", "e1-new")
    await EntityDataCopier().run(ctx, [EntitySelection(id="e1", include_data=True)])

    assert ctx.copied.entity_data == 1
    assert "gone" not in ctx.record_ids
    assert ctx.warnings == ["Sub-record orphan skipped: parent record gone was not copied"]


async def test_entity_data_copier_skips_data_of_uncopied_entity(copy_repo) -> None:
    copy_repo.add("records", SOURCE, EntityRecordSnapshot(id="d1", entity_id="e1"))
    ctx = _ctx(copy_repo)
    await EntityDataCopier().run(ctx, [EntitySelection(id="e1", include_data=True)])

    assert ctx.copied.entity_data == 0
    assert ctx.warnings == ["Data for entity e1 skipped: entity was not copied"]


async def test_entity_data_copier_remaps_visibility(copy_repo) -> None:
    copy_repo.add(
        "records",
        SOURCE,
        EntityRecordSnapshot(
            id="d1", entity_id="e1", visible_to_roles=["r1", "r-dangling"], has_role_filter=True
        ),
    )
    ctx = _ctx(copy_repo)
    ctx.entity_ids.register("e1", "e1-new")
    ctx.role_ids.register("r1", "r1-new")
    await EntityDataCopier().run(ctx, [EntitySelection(id="e1", include_data=True)])

    copied = copy_repo.record(ctx.record_ids.get("d1"))
    assert copied.visible_to_roles == ["r1-new", "r-dangling"]
    assert copied.has_role_filter is True


async def test_entity_data_copier_ignores_structure_only_selections(copy_repo) -> None:
    copy_repo.add("records", SOURCE, EntityRecordSnapshot(id="d1", entity_id="e1"))
    ctx = _ctx(copy_repo)
    ctx.entity_ids.register("e1", "e1-new")
    await EntityDataCopier().run(ctx, [EntitySelection(id="e1")])
    assert ctx.copied.entity_data == 0
    assert ctx.warnings == []


_OVERRIDES = (
    "load_selection",
    "load_taken_keys",
    "candidate",
    "describe",
    "build_copy",
    "insert",
)


@pytest.mark.parametrize(
    ("copier_cls", "snapshot_cls"),
    [
        (RoleCopier, RoleSnapshot),
        (EntityCopier, EntitySnapshot),
        (EndpointCopier, EndpointSnapshot),
        (PdfTemplateCopier, PdfTemplateSnapshot),
        (PageCopier, PageSnapshot),
    ],
)
def test_copier_overrides_are_typed_with_their_snapshot(copier_cls, snapshot_cls) -> None:
    for name in _OVERRIDES:
        hints = typing.get_type_hints(getattr(copier_cls, name))
        assert "return" in hints, f"{copier_cls.__name__}.{name}"
    assert typing.get_type_hints(copier_cls.load_selection)["return"] == list[snapshot_cls]
    assert typing.get_type_hints(copier_cls.build_copy)["source"] is snapshot_cls
    assert typing.get_type_hints(copier_cls.insert)["row"] is snapshot_cls
