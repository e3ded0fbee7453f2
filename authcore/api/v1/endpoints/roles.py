"""Roles API: permission catalog, per-tenant statistics, expired-role sweep."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from authcore.api.v1.dependencies import (
    get_current_tenant,
    get_role_store,
    require_permission,
)
from authcore.application.dtos.person import PersonResult
from authcore.application.dtos.tenant import TenantResult
from authcore.application.services.permission_catalog import catalog
from authcore.application.services.role_store import RoleStore
from authcore.core.limiter import limit_maintenance
from authcore.domain.permissions import Permission
from authcore.schemas.role import (
    CleanupResponse,
    RoleCatalogResponse,
    RoleStatisticsResponse,
)

router = APIRouter()


@router.get("/catalog", response_model=RoleCatalogResponse)
async def get_catalog(
    _: Annotated[PersonResult, Depends(require_permission(Permission.VIEW_ROLES))],
):
    """Default permission set of every built-in role type."""
    return RoleCatalogResponse(
        version=catalog.version,
        roles={
            role.value: sorted(p.value for p in perms)
            for role, perms in catalog.table.items()
        },
    )


@router.get("/statistics", response_model=RoleStatisticsResponse)
async def get_statistics(
    tenant: Annotated[TenantResult, Depends(get_current_tenant)],
    role_store: Annotated[RoleStore, Depends(get_role_store)],
    _: Annotated[PersonResult, Depends(require_permission(Permission.VIEW_ROLES))],
):
    counts = await role_store.get_role_statistics(tenant.id)
    return RoleStatisticsResponse(
        tenant_id=tenant.id, counts=counts, total=sum(counts.values())
    )


@router.post("/cleanup-expired", response_model=CleanupResponse)
@limit_maintenance
async def cleanup_expired(
    request: Request,
    role_store: Annotated[RoleStore, Depends(get_role_store)],
    _: Annotated[
        PersonResult, Depends(require_permission(Permission.ROLE_MANAGEMENT))
    ],
):
    """Deactivate expired assignments now (row-level security limits it to this tenant)."""
    return CleanupResponse(deactivated=await role_store.cleanup_expired_roles())
