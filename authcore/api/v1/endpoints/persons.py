"""Person roles API: own roles and permissions, list/assign/revoke roles of a person."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from authcore.api.v1.dependencies import (
    get_current_tenant,
    get_person_repo,
    get_permission_evaluator,
    get_role_store,
    get_tenant_person,
    require_permission,
)
from authcore.application.dtos.decision import PermissionContext
from authcore.application.dtos.person import PersonResult
from authcore.application.dtos.role_assignment import RolePermissionGrant
from authcore.application.dtos.tenant import TenantResult
from authcore.application.interfaces.repositories import IPersonRepository
from authcore.application.services.permission_evaluator import PermissionEvaluator
from authcore.application.services.role_store import RoleStore
from authcore.core.limiter import limit_writes
from authcore.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
)
from authcore.domain.permissions import Permission, parse_permission
from authcore.schemas.permission import EffectivePermissionsResponse
from authcore.schemas.role import (
    RoleAssignmentResponse,
    RoleAssignRequest,
    RolePermissionsUpdate,
)

router = APIRouter()


async def _get_tenant_member(
    person_id: str, tenant: TenantResult, person_repo: IPersonRepository
) -> PersonResult:
    person = await person_repo.get_by_id(person_id)
    if person is None or (person.tenant_id != tenant.id and not person.global_role):
        raise ResourceNotFoundException("person", person_id)
    return person


@router.get("/me/roles", response_model=list[RoleAssignmentResponse])
async def list_my_roles(
    person: Annotated[PersonResult, Depends(get_tenant_person)],
    tenant: Annotated[TenantResult, Depends(get_current_tenant)],
    role_store: Annotated[RoleStore, Depends(get_role_store)],
):
    """Roles the authenticated person holds in the current tenant, global role included."""
    roles = await role_store.get_user_roles(person.id, tenant.id)
    return [RoleAssignmentResponse.from_role(r) for r in roles]


@router.get("/me/permissions", response_model=EffectivePermissionsResponse)
async def list_my_permissions(
    person: Annotated[PersonResult, Depends(get_tenant_person)],
    tenant: Annotated[TenantResult, Depends(get_current_tenant)],
    evaluator: Annotated[PermissionEvaluator, Depends(get_permission_evaluator)],
):
    permissions = await evaluator.get_user_permissions(person.id, tenant.id)
    return EffectivePermissionsResponse(
        person_id=person.id, tenant_id=tenant.id, permissions=sorted(permissions)
    )


@router.get("/{person_id}/roles", response_model=list[RoleAssignmentResponse])
async def list_person_roles(
    person_id: str,
    tenant: Annotated[TenantResult, Depends(get_current_tenant)],
    person_repo: Annotated[IPersonRepository, Depends(get_person_repo)],
    role_store: Annotated[RoleStore, Depends(get_role_store)],
    _: Annotated[PersonResult, Depends(require_permission(Permission.VIEW_ROLES))],
):
    """List roles of a person in the current tenant. 404 if the person is not a member."""
    await _get_tenant_member(person_id, tenant, person_repo)
    roles = await role_store.get_user_roles(person_id, tenant.id)
    return [RoleAssignmentResponse.from_role(r) for r in roles]


@router.post(
    "/{person_id}/roles", response_model=RoleAssignmentResponse, status_code=201
)
@limit_writes
async def assign_role(
    request: Request,
    person_id: str,
    body: RoleAssignRequest,
    tenant: Annotated[TenantResult, Depends(get_current_tenant)],
    role_store: Annotated[RoleStore, Depends(get_role_store)],
    actor: Annotated[
        PersonResult, Depends(require_permission(Permission.ASSIGN_ROLES))
    ],
):
    """Assign a role (or refresh the existing active assignment) in the current tenant."""
    assignment = await role_store.assign_role(
        person_id,
        tenant.id,
        body.role_type,
        company_id=body.company_id,
        department_id=body.department_id,
        assigned_by=actor.id,
        expires_at=body.expires_at,
        custom_permissions=body.custom_permissions,
    )
    return RoleAssignmentResponse.from_role(assignment)


@router.delete("/{person_id}/roles/{role_type}", status_code=204)
@limit_writes
async def remove_role(
    request: Request,
    person_id: str,
    role_type: str,
    tenant: Annotated[TenantResult, Depends(get_current_tenant)],
    role_store: Annotated[RoleStore, Depends(get_role_store)],
    _: Annotated[PersonResult, Depends(require_permission(Permission.REVOKE_ROLES))],
    company_id: Annotated[str | None, Query(alias="companyId")] = None,
) -> Response:
    """Deactivate the person's active assignments of role_type (optionally one company)."""
    removed = await role_store.remove_role(person_id, tenant.id, role_type, company_id)
    if not removed:
        raise ResourceNotFoundException("role_assignment", f"{person_id}/{role_type}")
    return Response(status_code=204)


@router.put(
    "/{person_id}/roles/{assignment_id}/permissions",
    response_model=RoleAssignmentResponse,
)
@limit_writes
async def update_role_permissions(
    request: Request,
    person_id: str,
    assignment_id: str,
    body: RolePermissionsUpdate,
    tenant: Annotated[TenantResult, Depends(get_current_tenant)],
    role_store: Annotated[RoleStore, Depends(get_role_store)],
    evaluator: Annotated[PermissionEvaluator, Depends(get_permission_evaluator)],
    actor: Annotated[
        PersonResult, Depends(require_permission(Permission.ROLE_MANAGEMENT))
    ],
):
    """Replace the direct permission toggles of one of the person's assignments.

    A global role (id global-<person_id>) has nothing to update: 400.
    The actor may not edit their own assignments, and may only grant
    permissions they hold themselves: 403.
    """
    assignment = await role_store.get_assignment(assignment_id)
    if assignment.person_id != person_id or assignment.tenant_id != tenant.id:
        raise ResourceNotFoundException("role_assignment", assignment_id)
    grants = [
        RolePermissionGrant(
            permission=parse_permission(t.permission).value, is_granted=t.is_granted
        )
        for t in body.permissions
    ]
    context = PermissionContext(tenant_id=tenant.id, company_id=assignment.company_id)
    if assignment.person_id == actor.id:
        raise AuthorizationException(
            context=context.to_dict(),
            message="Cannot change permissions of your own role assignment",
        )
    for grant in grants:
        if grant.is_granted:
            await evaluator.require_permission(actor.id, grant.permission, context)
    updated = await role_store.update_role_permissions(assignment, grants)
    return RoleAssignmentResponse.from_role(updated)
