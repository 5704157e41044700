"""Per-copy state: identifier maps, counters, skipped and warning lists.

One CopyContext lives for exactly one copy invocation and is discarded
afterwards; nothing in it is shared between copies.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from app.application.dtos.tenant_copy import CopyCounts, CopyResult
from app.domain.enums import ConflictStrategy

if TYPE_CHECKING:
    from app.application.interfaces.repositories import ITenantCopyRepository


class IdentifierMap:
    """Source id -> target id for one object kind.

    An entry is only added once the target object exists. Registering the
    same source id twice is a programming error and raises.
    """

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._ids: dict[str, str] = {}

    def register(self, source_id: str, target_id: str) -> None:
        if source_id in self._ids:
            raise ValueError(
                f"{self.kind} {source_id} already mapped to {self._ids[source_id]}"
            )
        self._ids[source_id] = target_id

    def get(self, source_id: str | None) -> str | None:
        if source_id is None:
            return None
        return self._ids.get(source_id)

    def remap(self, source_id: str) -> str:
        """Return the mapped id, or source_id unchanged when it is not mapped."""
        return self._ids.get(source_id, source_id)

    def remap_all(self, source_ids: Iterable[str]) -> list[str]:
        return [self.remap(source_id) for source_id in source_ids]

    def __contains__(self, source_id: object) -> bool:
        return source_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def __bool__(self) -> bool:
        return bool(self._ids)


@dataclass
class CopyContext:
    """Mutable state threaded through every copier of one copy."""

    repo: ITenantCopyRepository
    source_tenant_id: str
    target_tenant_id: str
    conflict_strategy: ConflictStrategy = ConflictStrategy.SKIP
    role_ids: IdentifierMap = field(default_factory=lambda: IdentifierMap("role"))
    entity_ids: IdentifierMap = field(
        default_factory=lambda: IdentifierMap("entity")
    )
    record_ids: IdentifierMap = field(
        default_factory=lambda: IdentifierMap("record")
    )
    copied: CopyCounts = field(default_factory=CopyCounts)
    skipped: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def skip(self, description: str) -> None:
        self.skipped.append(description)

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def to_result(self) -> CopyResult:
        return CopyResult(
            copied=self.copied,
            skipped=list(self.skipped),
            warnings=list(self.warnings),
        )
