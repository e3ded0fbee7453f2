"""Permission evaluation: combine catalog, direct grants, advanced rows, and custom roles.

Decision pipeline, first grant wins:
    1. global admin bypass (SUPER_ADMIN / ADMIN held)
    2. catalog default for a held role, subject to the role's scope
    3. direct RolePermission toggle on a stored assignment
    4. advanced per-resource row (global / tenant / own + conditions)
    5. live custom role held through its CUSTOM_<id> marker
    6. deny

Evaluation is fail-closed: any error while deciding is logged and denies.
Unknown permission identifiers are rejected before evaluation starts.
"""

from __future__ import annotations

import logging
from typing import Any

from authcore.application.dtos.custom_role import CustomRoleResult
from authcore.application.dtos.decision import PermissionContext, PermissionDecision
from authcore.application.dtos.role_assignment import AdvancedPermissionGrant, UserRole
from authcore.application.interfaces.repositories import ICustomRoleRepository
from authcore.application.services.condition_evaluator import ConditionEvaluator
from authcore.application.services.field_filter import filter_fields
from authcore.application.services.permission_catalog import (
    PermissionCatalog,
    catalog as default_catalog,
)
from authcore.application.services.role_store import RoleStore
from authcore.domain.enums import (
    GLOBAL_ADMIN_ROLES,
    AdvancedScope,
    PermissionSource,
    RoleScope,
    RoleType,
    custom_role_marker,
    parse_custom_role_marker,
)
from authcore.domain.exceptions import AuthorizationException
from authcore.domain.permissions import (
    Permission,
    action_resource,
    encode_action_resource,
    parse_permission,
    permission_for_resource_action,
)
from authcore.shared.telemetry.tracing import (
    add_span_attributes,
    set_span_error,
    traced,
)

logger = logging.getLogger(__name__)


class PermissionEvaluator:
    """Grant/deny decisions for a person, a permission, and a context."""

    def __init__(
        self,
        role_store: RoleStore,
        custom_role_repo: ICustomRoleRepository,
        condition_evaluator: ConditionEvaluator,
        catalog: PermissionCatalog | None = None,
        legacy_unscoped_grant: bool = True,
    ) -> None:
        self._role_store = role_store
        self._custom_roles = custom_role_repo
        self._conditions = condition_evaluator
        self._catalog = catalog or default_catalog
        self._legacy_unscoped_grant = legacy_unscoped_grant

    @traced("permission.has_permission")
    async def has_permission(
        self,
        person_id: str,
        permission: Permission | str,
        context: PermissionContext | None = None,
    ) -> bool:
        decision = await self.evaluate(person_id, permission, context)
        return decision.granted

    async def evaluate(
        self,
        person_id: str,
        permission: Permission | str,
        context: PermissionContext | None = None,
    ) -> PermissionDecision:
        """Run the decision pipeline and report which step decided.

        Raises:
            UnknownPermissionException: permission is not a known identifier.
        """
        perm = parse_permission(permission)
        ctx = context or PermissionContext()
        try:
            decision = await self._decide(person_id, perm, ctx)
        except Exception as exc:
            set_span_error(exc)
            logger.exception(
                "Permission evaluation failed, denying: person=%s permission=%s tenant=%s",
                person_id,
                perm,
                ctx.tenant_id,
            )
            decision = PermissionDecision(granted=False, source=PermissionSource.ERROR)

        add_span_attributes(
            permission=perm.value,
            granted=decision.granted,
            source=decision.source.value,
        )
        if decision.granted:
            logger.debug(
                "Permission %s granted to person %s via %s (role=%s)",
                perm,
                person_id,
                decision.source,
                decision.role_type,
            )
        elif decision.source == PermissionSource.DENIED:
            logger.info(
                "Permission %s denied to person %s (tenant=%s, company=%s)",
                perm,
                person_id,
                ctx.tenant_id,
                ctx.company_id,
            )
        return decision

    async def require_permission(
        self,
        person_id: str,
        permission: Permission | str,
        context: PermissionContext | None = None,
    ) -> None:
        """Raise AuthorizationException unless the permission is granted."""
        ctx = context or PermissionContext()
        perm = parse_permission(permission)
        if not await self.has_permission(person_id, perm, ctx):
            raise AuthorizationException(required=perm.value, context=ctx.to_dict())

    @traced("permission.can_access_resource")
    async def can_access_resource(
        self,
        person_id: str,
        resource: str,
        resource_id: str | None,
        action: str,
        tenant_id: str | None = None,
    ) -> bool:
        """Resource-level check driven by advanced rows, else the named permission.

        With no matching advanced rows the pair resource.action is mapped to a
        permission identifier (companies.read -> VIEW_COMPANIES). A pair with
        no identifier is still granted to global admins and to holders of a
        toggle or custom role naming it.
        """
        try:
            grants = await self.get_advanced_permissions(
                person_id, resource, action, tenant_id
            )
            if not grants:
                perm = permission_for_resource_action(resource, action)
                if perm is None:
                    decision = await self._decide_unmapped(
                        person_id, resource, action, tenant_id
                    )
                    return decision.granted
                return await self.has_permission(
                    person_id,
                    perm,
                    PermissionContext(tenant_id=tenant_id, resource_id=resource_id),
                )
            for grant in grants:
                if grant.scope == AdvancedScope.GLOBAL:
                    return True
                if await self._conditions.evaluate(
                    grant.conditions, person_id, resource_id, tenant_id
                ):
                    return True
            return False
        except Exception as exc:
            set_span_error(exc)
            logger.exception(
                "Resource access check failed, denying: person=%s %s.%s id=%s tenant=%s",
                person_id,
                resource,
                action,
                resource_id,
                tenant_id,
            )
            return False

    async def get_advanced_permissions(
        self,
        person_id: str,
        resource: str,
        action: str,
        tenant_id: str | None = None,
    ) -> list[AdvancedPermissionGrant]:
        """Advanced rows for (resource, action) on the person's active assignments."""
        roles = await self._role_store.get_user_roles(person_id, tenant_id)
        return self._matching_advanced(roles, action.lower(), resource.lower())

    async def get_user_permissions(
        self, person_id: str, tenant_id: str | None = None
    ) -> set[str]:
        """Union of catalog defaults, granted toggles, advanced rows, and custom roles."""
        roles = await self._role_store.get_user_roles(person_id, tenant_id)
        permissions: set[str] = set()
        for role in roles:
            permissions.update(p.value for p in self._catalog.permissions_for(role.role_type))
            permissions.update(
                g.permission for g in role.role_permissions if g.is_granted
            )
            permissions.update(
                encode_action_resource(a.action, a.resource)
                for a in role.advanced_permissions
            )
        for custom_role in await self._held_custom_roles(roles):
            permissions.update(custom_role.permissions)
        return permissions

    async def filter_data_by_permissions(
        self,
        person_id: str,
        resource: str,
        action: str,
        data: Any,
        tenant_id: str | None = None,
    ) -> Any:
        """Return data projected to the fields the person may see, or None.

        None means no access at all. Fail-closed.
        """
        try:
            grants = await self.get_advanced_permissions(
                person_id, resource, action, tenant_id
            )
            if not grants:
                perm = permission_for_resource_action(resource, action)
                if perm is None:
                    decision = await self._decide_unmapped(
                        person_id, resource, action, tenant_id
                    )
                    return data if decision.granted else None
                allowed = await self.has_permission(
                    person_id, perm, PermissionContext(tenant_id=tenant_id)
                )
                return data if allowed else None
            if any(
                g.scope in (AdvancedScope.GLOBAL, AdvancedScope.TENANT)
                and not g.allowed_fields
                for g in grants
            ):
                return data
            allowed_fields: list[str] = []
            for grant in grants:
                allowed_fields.extend(grant.allowed_fields)
            return filter_fields(data, allowed_fields)
        except Exception as exc:
            set_span_error(exc)
            logger.exception(
                "Field filtering failed, withholding data: person=%s %s.%s tenant=%s",
                person_id,
                resource,
                action,
                tenant_id,
            )
            return None

    async def _decide(
        self, person_id: str, perm: Permission, ctx: PermissionContext
    ) -> PermissionDecision:
        roles = await self._role_store.get_user_roles(person_id, ctx.tenant_id)

        admin = self._global_admin_decision(roles)
        if admin is not None:
            return admin

        for role in roles:
            if self._catalog.grants(role.role_type, perm) and self._scope_allows(
                role, ctx, perm
            ):
                return PermissionDecision(True, PermissionSource.CATALOG, role.role_type)

        stored = [r for r in roles if r.persisted]
        for role in stored:
            if any(
                g.permission == perm.value and g.is_granted
                for g in role.role_permissions
            ):
                return PermissionDecision(
                    True, PermissionSource.ROLE_PERMISSION, role.role_type
                )

        action, resource = action_resource(perm)
        for role in stored:
            for grant in self._matching_advanced([role], action, resource):
                if grant.scope == AdvancedScope.GLOBAL:
                    granted = True
                elif grant.scope == AdvancedScope.TENANT:
                    granted = ctx.tenant_id is not None
                else:
                    granted = ctx.resource_id is not None and await self._conditions.evaluate(
                        grant.conditions, person_id, ctx.resource_id, ctx.tenant_id
                    )
                if granted:
                    return PermissionDecision(
                        True, PermissionSource.ADVANCED_PERMISSION, role.role_type
                    )

        for custom_role in await self._held_custom_roles(stored):
            if perm.value in custom_role.permissions:
                return PermissionDecision(
                    True, PermissionSource.CUSTOM_ROLE, custom_role_marker(custom_role.id)
                )

        return PermissionDecision.deny()

    async def _decide_unmapped(
        self, person_id: str, resource: str, action: str, tenant_id: str | None
    ) -> PermissionDecision:
        """Decide a resource.action pair that names no Permission member.

        The catalog and advanced rows never name it, so only the global admin
        bypass, stored toggles and custom roles holding the dotted name apply.
        """
        name = f"{resource.strip().lower()}.{action.strip().lower()}"
        roles = await self._role_store.get_user_roles(person_id, tenant_id)
        decision = self._global_admin_decision(roles)
        if decision is None:
            decision = await self._granted_by_name(roles, name)
        if not decision.granted:
            logger.info(
                "No permission identifier for %s; denying person %s (tenant=%s)",
                name,
                person_id,
                tenant_id,
            )
        add_span_attributes(
            permission=name,
            granted=decision.granted,
            source=decision.source.value,
        )
        return decision

    async def _granted_by_name(
        self, roles: list[UserRole], name: str
    ) -> PermissionDecision:
        stored = [r for r in roles if r.persisted]
        for role in stored:
            if any(
                g.permission.lower() == name and g.is_granted
                for g in role.role_permissions
            ):
                return PermissionDecision(
                    True, PermissionSource.ROLE_PERMISSION, role.role_type
                )
        for custom_role in await self._held_custom_roles(stored):
            if any(p.lower() == name for p in custom_role.permissions):
                return PermissionDecision(
                    True, PermissionSource.CUSTOM_ROLE, custom_role_marker(custom_role.id)
                )
        return PermissionDecision.deny()

    @staticmethod
    def _global_admin_decision(roles: list[UserRole]) -> PermissionDecision | None:
        for role in roles:
            if RoleType.from_value(role.role_type) in GLOBAL_ADMIN_ROLES:
                return PermissionDecision(
                    True, PermissionSource.GLOBAL_ADMIN, role.role_type
                )
        return None

    def _scope_allows(
        self, role: UserRole, ctx: PermissionContext, perm: Permission
    ) -> bool:
        match role.role_scope:
            case RoleScope.GLOBAL:
                return True
            case RoleScope.COMPANY:
                return ctx.company_id is not None and ctx.company_id == role.company_id
            case RoleScope.TENANT:
                return ctx.tenant_id is not None and ctx.tenant_id == role.tenant_id
        if self._legacy_unscoped_grant:
            logger.warning(
                "Unscoped catalog grant: %s via role %s (scope=%s) for person %s",
                perm,
                role.role_type,
                role.role_scope,
                role.person_id,
            )
            return True
        return False

    @staticmethod
    def _matching_advanced(
        roles: list[UserRole], action: str, resource: str
    ) -> list[AdvancedPermissionGrant]:
        return [
            grant
            for role in roles
            if role.persisted
            for grant in role.advanced_permissions
            if grant.action.lower() == action and grant.resource.lower() == resource
        ]

    async def _held_custom_roles(
        self, roles: list[UserRole]
    ) -> list[CustomRoleResult]:
        """Live custom roles held through CUSTOM_<id> markers in the same tenant."""
        tenant_by_role_id: dict[str, str | None] = {}
        for role in roles:
            custom_role_id = parse_custom_role_marker(role.role_type)
            if custom_role_id is not None and role.persisted:
                tenant_by_role_id[custom_role_id] = role.tenant_id
        if not tenant_by_role_id:
            return []
        custom_roles = await self._custom_roles.get_by_ids(set(tenant_by_role_id))
        return [
            cr for cr in custom_roles if cr.tenant_id == tenant_by_role_id.get(cr.id)
        ]
