"""Default permission sets per built-in role type.

Fixed at import and never read from the data layer. Bump CATALOG_VERSION
whenever a set changes so audit logs can tell which table a decision used.
"""

from __future__ import annotations

from types import MappingProxyType

from authcore.domain.enums import RoleType
from authcore.domain.permissions import Permission

CATALOG_VERSION = "2025.07.1"

P = Permission

_TENANT_PROVISIONING = frozenset({
    P.VIEW_TENANTS,
    P.CREATE_TENANTS,
    P.EDIT_TENANTS,
    P.DELETE_TENANTS,
    P.TENANT_MANAGEMENT,
})

_ALL = frozenset(Permission)

_COMPANY_ADMIN = frozenset({
    P.CREATE_USERS, P.VIEW_USERS, P.EDIT_USERS, P.DELETE_USERS,
    P.ROLE_MANAGEMENT,
    P.VIEW_COMPANIES, P.EDIT_COMPANIES,
    P.CREATE_COURSES, P.VIEW_COURSES, P.EDIT_COURSES, P.DELETE_COURSES,
    P.VIEW_EMPLOYEES, P.CREATE_EMPLOYEES, P.EDIT_EMPLOYEES,
    P.VIEW_TRAINERS, P.CREATE_TRAINERS, P.EDIT_TRAINERS,
    P.VIEW_SCHEDULES, P.CREATE_SCHEDULES, P.EDIT_SCHEDULES,
    P.VIEW_REPORTS, P.EXPORT_REPORTS, P.VIEW_ANALYTICS,
})

_DEFAULTS: dict[RoleType, frozenset[Permission]] = {
    RoleType.SUPER_ADMIN: _ALL,
    RoleType.ADMIN: _ALL - _TENANT_PROVISIONING,
    RoleType.COMPANY_ADMIN: _COMPANY_ADMIN,
    RoleType.TENANT_ADMIN: _COMPANY_ADMIN,
    RoleType.MANAGER: frozenset({
        P.VIEW_USERS, P.EDIT_USERS,
        P.VIEW_COMPANIES,
        P.VIEW_COURSES,
        P.VIEW_EMPLOYEES, P.EDIT_EMPLOYEES,
        P.VIEW_TRAINERS,
        P.VIEW_SCHEDULES, P.CREATE_SCHEDULES, P.EDIT_SCHEDULES,
        P.VIEW_REPORTS, P.VIEW_ANALYTICS,
    }),
    RoleType.HR_MANAGER: frozenset({
        P.CREATE_USERS, P.VIEW_USERS, P.EDIT_USERS,
        P.ROLE_MANAGEMENT,
        P.VIEW_COMPANIES,
        P.VIEW_COURSES,
        P.VIEW_EMPLOYEES, P.CREATE_EMPLOYEES, P.EDIT_EMPLOYEES,
        P.VIEW_TRAINERS,
        P.VIEW_SCHEDULES, P.CREATE_SCHEDULES, P.EDIT_SCHEDULES,
        P.VIEW_REPORTS, P.VIEW_ANALYTICS,
    }),
    RoleType.TRAINER: frozenset({
        P.VIEW_USERS,
        P.VIEW_COURSES,
        P.VIEW_EMPLOYEES,
        P.VIEW_SCHEDULES,
        P.VIEW_REPORTS,
    }),
    RoleType.SENIOR_TRAINER: frozenset({
        P.VIEW_USERS,
        P.VIEW_COURSES, P.EDIT_COURSES,
        P.VIEW_EMPLOYEES,
        P.VIEW_TRAINERS,
        P.CREATE_SCHEDULES, P.VIEW_SCHEDULES, P.EDIT_SCHEDULES,
        P.VIEW_REPORTS,
    }),
    RoleType.EMPLOYEE: frozenset({P.VIEW_COURSES, P.VIEW_SCHEDULES}),
    RoleType.VIEWER: frozenset({P.VIEW_COURSES, P.VIEW_SCHEDULES, P.VIEW_REPORTS}),
}

_EMPTY: frozenset[Permission] = frozenset()


class PermissionCatalog:
    """Read-only role type -> default permission set table.

    Every RoleType has an entry (empty for roles without defaults). Lookups
    for custom role markers or unknown strings return the empty set.
    """

    version = CATALOG_VERSION

    def __init__(self) -> None:
        self._table: MappingProxyType[RoleType, frozenset[Permission]] = (
            MappingProxyType({role: _DEFAULTS.get(role, _EMPTY) for role in RoleType})
        )

    @property
    def table(self) -> MappingProxyType[RoleType, frozenset[Permission]]:
        return self._table

    def permissions_for(self, role_type: str) -> frozenset[Permission]:
        """Default permissions of role_type (empty for custom/unknown)."""
        role = RoleType.from_value(role_type)
        if role is None:
            return _EMPTY
        return self._table[role]

    def grants(self, role_type: str, permission: Permission) -> bool:
        return permission in self.permissions_for(role_type)


catalog = PermissionCatalog()
