"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, repositories, the authorization
services, the authenticated principal, and the require_permission guard.
RoleStore and PermissionEvaluator are built per request on the request's
session; routes depend only on these dependencies, not on infra directly.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from authcore.application.dtos.decision import PermissionContext
from authcore.application.dtos.person import PersonResult
from authcore.application.dtos.tenant import TenantResult
from authcore.application.interfaces.repositories import (
    ICustomRoleRepository,
    IPersonRepository,
    IRoleAssignmentRepository,
)
from authcore.application.services.condition_evaluator import ConditionEvaluator
from authcore.application.services.permission_evaluator import PermissionEvaluator
from authcore.application.services.role_store import RoleStore
from authcore.core.config import get_settings
from authcore.domain.enums import RoleType
from authcore.domain.exceptions import (
    AuthenticationException,
    TenantMismatchException,
    TenantNotFoundException,
)
from authcore.domain.permissions import Permission, parse_permission
from authcore.infrastructure.persistence.database import get_db_transactional
from authcore.infrastructure.persistence.repositories import (
    CustomRoleRepository,
    PersonRepository,
    RoleAssignmentRepository,
)
from authcore.infrastructure.security.jwt import verify_token

_http_bearer = HTTPBearer(auto_error=False)

ContextExtractor = Callable[
    [Request, TenantResult], PermissionContext | Awaitable[PermissionContext]
]


# ---- Repositories (one transactional session per request) ----


async def get_person_repo(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> IPersonRepository:
    return PersonRepository(db)


async def get_role_assignment_repo(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> IRoleAssignmentRepository:
    return RoleAssignmentRepository(db)


async def get_custom_role_repo(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> ICustomRoleRepository:
    return CustomRoleRepository(db)


# ---- Services ----


async def get_role_store(
    role_repo: Annotated[IRoleAssignmentRepository, Depends(get_role_assignment_repo)],
    person_repo: Annotated[IPersonRepository, Depends(get_person_repo)],
    custom_role_repo: Annotated[ICustomRoleRepository, Depends(get_custom_role_repo)],
) -> RoleStore:
    """RoleStore bound to this request's session."""
    return RoleStore(role_repo, person_repo, custom_role_repo)


async def get_permission_evaluator(
    role_store: Annotated[RoleStore, Depends(get_role_store)],
    person_repo: Annotated[IPersonRepository, Depends(get_person_repo)],
    custom_role_repo: Annotated[ICustomRoleRepository, Depends(get_custom_role_repo)],
) -> PermissionEvaluator:
    """PermissionEvaluator bound to this request's session."""
    return PermissionEvaluator(
        role_store,
        custom_role_repo,
        ConditionEvaluator(person_repo),
        legacy_unscoped_grant=get_settings().legacy_unscoped_grant,
    )


# ---- Tenant and principal ----


def get_current_tenant(request: Request) -> TenantResult:
    """Tenant bound by TenantResolutionMiddleware (404 on bypassed paths)."""
    tenant = getattr(request.state, "tenant", None)
    if tenant is None:
        raise TenantNotFoundException(request.headers.get("host"), request.url.path)
    return tenant


async def get_current_person(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    person_repo: Annotated[IPersonRepository, Depends(get_person_repo)],
) -> PersonResult:
    """Person named by the bearer token's sub; 401 when missing, invalid, or unknown."""
    if credentials is None:
        raise AuthenticationException()
    try:
        payload = verify_token(credentials.credentials)
    except ValueError:
        raise AuthenticationException() from None
    person = await person_repo.get_by_id(payload["sub"])
    if person is None:
        raise AuthenticationException()
    return person


async def get_tenant_person(
    person: Annotated[PersonResult, Depends(get_current_person)],
    tenant: Annotated[TenantResult, Depends(get_current_tenant)],
) -> PersonResult:
    """Authenticated person, required to belong to the tenant unless global SUPER_ADMIN."""
    if person.tenant_id != tenant.id and person.global_role != RoleType.SUPER_ADMIN:
        raise TenantMismatchException(person.id, tenant.id)
    return person


def default_context(request: Request, tenant: TenantResult) -> PermissionContext:
    """Tenant from the request; company and resource from companyId / resourceId query params."""
    return PermissionContext(
        tenant_id=tenant.id,
        company_id=request.query_params.get("companyId"),
        resource_id=request.query_params.get("resourceId"),
    )


def require_permission(
    permission: Permission | str,
    context_extractor: ContextExtractor | None = None,
):
    """Dependency factory: require an authenticated tenant member holding permission.

    The permission is parsed here, when the route is defined, so an unknown
    identifier fails at import. Raises AuthorizationException (403) on deny.
    """
    required = parse_permission(permission)
    extract = context_extractor or default_context

    async def _require(
        request: Request,
        person: Annotated[PersonResult, Depends(get_tenant_person)],
        tenant: Annotated[TenantResult, Depends(get_current_tenant)],
        evaluator: Annotated[PermissionEvaluator, Depends(get_permission_evaluator)],
    ) -> PersonResult:
        context = extract(request, tenant)
        if inspect.isawaitable(context):
            context = await context
        await evaluator.require_permission(person.id, required, context)
        return person

    return _require
