"""DTOs for tenant resolution (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime

from authcore.domain.enums import DenialReason, ResolutionStep


@dataclass(frozen=True)
class TenantResult:
    """Tenant read-model. Repositories only return active, non-deleted tenants."""

    id: str
    slug: str
    name: str
    domain: str | None
    is_active: bool
    created_at: datetime | None = None


@dataclass(frozen=True)
class ResolvedTenant:
    """Request is bound to tenant; step records which rule matched."""

    tenant: TenantResult
    step: ResolutionStep


@dataclass(frozen=True)
class BypassedTenant:
    """Path is on the bypass allow-list; no tenant context is set."""

    path: str


@dataclass(frozen=True)
class DeniedTenant:
    """No tenant could be bound. Carries host and path only."""

    reason: DenialReason
    host: str | None
    path: str


TenantResolution = ResolvedTenant | BypassedTenant | DeniedTenant
