"""Naming conflict resolution against the target tenant's existing keys."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from app.domain.enums import ConflictAction, ConflictStrategy


def copy_suffix(name: str, copy_number: int) -> str:
    """Display name for the n-th copy: "X (copy)", "X (copy 2)", ..."""
    if copy_number <= 0:
        return name
    if copy_number == 1:
        return f"{name} (copy)"
    return f"{name} (copy {copy_number})"


def copy_key_suffix(key: str, copy_number: int) -> str:
    """Key for the n-th copy: "x-copy", "x-copy-2", ..."""
    if copy_number <= 0:
        return key
    if copy_number == 1:
        return f"{key}-copy"
    return f"{key}-copy-{copy_number}"


def scoped_key(key: str, scope: str | None = None) -> str:
    """Key as stored in the taken set; endpoints are scoped by HTTP method."""
    return f"{scope}:{key}" if scope else key


@dataclass(frozen=True)
class ConflictResolution:
    """Outcome for one candidate.

    copy_number is 0 unless action is RENAME; copiers pass it to copy_suffix
    for any extra display text (e.g. an entity's plural name).
    existing_id is only set on SKIP when the target object was found.
    """

    action: ConflictAction
    name: str
    key: str
    copy_number: int = 0
    existing_id: str | None = None

    def rename(self, text: str) -> str:
        return copy_suffix(text, self.copy_number)


class ConflictResolver:
    """Decides keep, skip or rename for candidates of one module.

    taken maps scoped key -> target id and is loaded once per module run.
    Every key handed out (kept or renamed) is reserved immediately, so later
    candidates of the same run never collide with earlier ones.
    When key_is_name is set (roles) the name itself is the unique key.
    """

    def __init__(
        self,
        strategy: ConflictStrategy,
        taken: dict[str, str] | Iterable[tuple[str, str]],
        *,
        key_is_name: bool = False,
    ) -> None:
        self.strategy = strategy
        self.key_is_name = key_is_name
        self._taken: dict[str, str | None] = dict(taken)

    def is_taken(self, key: str, scope: str | None = None) -> bool:
        return scoped_key(key, scope) in self._taken

    def reserve(
        self, key: str, target_id: str | None = None, scope: str | None = None
    ) -> None:
        self._taken[scoped_key(key, scope)] = target_id

    def resolve(
        self, name: str, key: str, scope: str | None = None
    ) -> ConflictResolution:
        if self.key_is_name:
            key = name
        if not self.is_taken(key, scope):
            self.reserve(key, scope=scope)
            return ConflictResolution(ConflictAction.KEEP, name, key)

        if self.strategy == ConflictStrategy.SKIP:
            return ConflictResolution(
                ConflictAction.SKIP,
                name,
                key,
                existing_id=self._taken[scoped_key(key, scope)],
            )

        copy_number = 1
        while True:
            new_name = copy_suffix(name, copy_number)
            new_key = new_name if self.key_is_name else copy_key_suffix(key, copy_number)
            if not self.is_taken(new_key, scope):
                break
            copy_number += 1
        self.reserve(new_key, scope=scope)
        return ConflictResolution(
            ConflictAction.RENAME, new_name, new_key, copy_number=copy_number
        )
