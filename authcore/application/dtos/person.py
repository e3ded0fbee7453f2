"""DTOs for persons (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PersonResult:
    """Person read-model (non-deleted persons only)."""

    id: str
    tenant_id: str | None
    company_id: str | None
    department_id: str | None
    global_role: str | None
    email: str | None = None
