"""DTOs for custom roles (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CustomRoleResult:
    """Live (non-deleted) tenant custom role with its permission strings."""

    id: str
    tenant_id: str
    name: str
    description: str | None
    permissions: frozenset[str]
