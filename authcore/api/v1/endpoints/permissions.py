"""Permission API: check a permission for the caller, filter data to visible fields."""

from typing import Annotated

from fastapi import APIRouter, Depends

from authcore.api.v1.dependencies import (
    get_current_tenant,
    get_permission_evaluator,
    get_tenant_person,
)
from authcore.application.dtos.decision import PermissionContext
from authcore.application.dtos.person import PersonResult
from authcore.application.dtos.tenant import TenantResult
from authcore.application.services.permission_evaluator import PermissionEvaluator
from authcore.domain.exceptions import AuthorizationException
from authcore.schemas.permission import (
    PermissionCheckRequest,
    PermissionCheckResponse,
    PermissionFilterRequest,
    PermissionFilterResponse,
)

router = APIRouter()


@router.post("/check", response_model=PermissionCheckResponse)
async def check_permission(
    body: PermissionCheckRequest,
    person: Annotated[PersonResult, Depends(get_tenant_person)],
    tenant: Annotated[TenantResult, Depends(get_current_tenant)],
    evaluator: Annotated[PermissionEvaluator, Depends(get_permission_evaluator)],
):
    """Check whether the caller holds a permission (or may act on a resource).

    An unknown permission identifier is a 400, not a deny.
    """
    if body.permission:
        decision = await evaluator.evaluate(
            person.id,
            body.permission,
            PermissionContext(
                tenant_id=tenant.id,
                company_id=body.company_id,
                resource_id=body.resource_id,
            ),
        )
        return PermissionCheckResponse(
            granted=decision.granted,
            permission=body.permission.strip().upper(),
            source=decision.source.value,
        )
    granted = await evaluator.can_access_resource(
        person.id, body.resource, body.resource_id, body.action, tenant.id
    )
    return PermissionCheckResponse(
        granted=granted, resource=body.resource, action=body.action
    )


@router.post("/filter", response_model=PermissionFilterResponse)
async def filter_data(
    body: PermissionFilterRequest,
    person: Annotated[PersonResult, Depends(get_tenant_person)],
    tenant: Annotated[TenantResult, Depends(get_current_tenant)],
    evaluator: Annotated[PermissionEvaluator, Depends(get_permission_evaluator)],
):
    """Project data to the fields the caller may see; 403 when nothing is visible."""
    filtered = await evaluator.filter_data_by_permissions(
        person.id, body.resource, body.action, body.data, tenant.id
    )
    if filtered is None:
        raise AuthorizationException(
            required=f"{body.action}:{body.resource}",
            context={"tenant_id": tenant.id},
        )
    return PermissionFilterResponse(data=filtered)
