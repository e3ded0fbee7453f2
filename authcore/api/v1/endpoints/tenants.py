"""Tenant API: the tenant bound to the current request by host resolution."""

from typing import Annotated

from fastapi import APIRouter, Depends

from authcore.api.v1.dependencies import get_current_tenant
from authcore.application.dtos.tenant import TenantResult
from authcore.schemas.tenant import TenantResponse

router = APIRouter()


@router.get("/current", response_model=TenantResponse)
async def get_current(
    tenant: Annotated[TenantResult, Depends(get_current_tenant)],
) -> TenantResponse:
    """Return the tenant resolved for this request (no authentication)."""
    return TenantResponse(
        id=tenant.id, slug=tenant.slug, name=tenant.name, domain=tenant.domain
    )
