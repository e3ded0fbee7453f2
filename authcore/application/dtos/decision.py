"""DTOs for permission evaluation inputs and outcomes."""

from dataclasses import asdict, dataclass
from typing import Any

from authcore.domain.enums import PermissionSource


@dataclass(frozen=True)
class PermissionContext:
    """What a permission check is evaluated against."""

    tenant_id: str | None = None
    company_id: str | None = None
    resource_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class PermissionDecision:
    """Outcome of PermissionEvaluator.evaluate, kept for auditing.

    role_type is the held role that produced the grant, when there is one.
    """

    granted: bool
    source: PermissionSource
    role_type: str | None = None

    @classmethod
    def deny(cls) -> "PermissionDecision":
        return cls(granted=False, source=PermissionSource.DENIED)
