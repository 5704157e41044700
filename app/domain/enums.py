"""Domain enumerations for the platform.

Enums represent fixed sets of domain values (e.g. tenant status, copy
conflict strategy).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class TenantStatus(_ValuesMixin, str, Enum):
    """Tenant lifecycle status."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    ARCHIVED = "archived"


class ConflictStrategy(_ValuesMixin, str, Enum):
    """What a tenant copy does when a named object already exists in the target.

    SKIP omits the object (roles are still mapped to the existing one by name);
    SUFFIX renames it with " (copy)", " (copy 2)", ... and "-copy", "-copy-2", ...
    """

    SKIP = "skip"
    SUFFIX = "suffix"


class ConflictAction(_ValuesMixin, str, Enum):
    """Outcome of conflict resolution for one candidate object."""

    KEEP = "keep"
    SKIP = "skip"
    RENAME = "rename"


class CopyModule(_ValuesMixin, str, Enum):
    """Copyable object kinds, in the order the copy engine processes them."""

    ROLES = "roles"
    ENTITIES = "entities"
    ENTITY_DATA = "entity_data"
    ENDPOINTS = "endpoints"
    PDF_TEMPLATES = "pdf_templates"
    PAGES = "pages"
