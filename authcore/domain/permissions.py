"""Closed set of permission identifiers.

Identifiers follow ACTION_RESOURCE (e.g. VIEW_COMPANIES). A handful of
historical identifiers do not (ROLE_MANAGEMENT, ADMIN_PANEL, ...); they are
kept verbatim and their (action, resource) pair comes from IRREGULAR_ALIASES
instead of string splitting. Strings from requests, tokens, or the database
go through parse_permission, so a typo is an error rather than a silent deny.
"""

from enum import StrEnum
from types import MappingProxyType

from authcore.domain.exceptions import UnknownPermissionException


class Permission(StrEnum):
    # Companies
    VIEW_COMPANIES = "VIEW_COMPANIES"
    CREATE_COMPANIES = "CREATE_COMPANIES"
    EDIT_COMPANIES = "EDIT_COMPANIES"
    DELETE_COMPANIES = "DELETE_COMPANIES"
    # Employees
    VIEW_EMPLOYEES = "VIEW_EMPLOYEES"
    CREATE_EMPLOYEES = "CREATE_EMPLOYEES"
    EDIT_EMPLOYEES = "EDIT_EMPLOYEES"
    DELETE_EMPLOYEES = "DELETE_EMPLOYEES"
    # Persons
    VIEW_PERSONS = "VIEW_PERSONS"
    CREATE_PERSONS = "CREATE_PERSONS"
    EDIT_PERSONS = "EDIT_PERSONS"
    DELETE_PERSONS = "DELETE_PERSONS"
    # Users
    VIEW_USERS = "VIEW_USERS"
    CREATE_USERS = "CREATE_USERS"
    EDIT_USERS = "EDIT_USERS"
    DELETE_USERS = "DELETE_USERS"
    MANAGE_USERS = "MANAGE_USERS"
    # Courses
    VIEW_COURSES = "VIEW_COURSES"
    CREATE_COURSES = "CREATE_COURSES"
    EDIT_COURSES = "EDIT_COURSES"
    DELETE_COURSES = "DELETE_COURSES"
    # Trainers
    VIEW_TRAINERS = "VIEW_TRAINERS"
    CREATE_TRAINERS = "CREATE_TRAINERS"
    EDIT_TRAINERS = "EDIT_TRAINERS"
    DELETE_TRAINERS = "DELETE_TRAINERS"
    # Documents
    VIEW_DOCUMENTS = "VIEW_DOCUMENTS"
    CREATE_DOCUMENTS = "CREATE_DOCUMENTS"
    EDIT_DOCUMENTS = "EDIT_DOCUMENTS"
    DELETE_DOCUMENTS = "DELETE_DOCUMENTS"
    DOWNLOAD_DOCUMENTS = "DOWNLOAD_DOCUMENTS"
    # Schedules
    VIEW_SCHEDULES = "VIEW_SCHEDULES"
    CREATE_SCHEDULES = "CREATE_SCHEDULES"
    EDIT_SCHEDULES = "EDIT_SCHEDULES"
    DELETE_SCHEDULES = "DELETE_SCHEDULES"
    # GDPR
    VIEW_GDPR = "VIEW_GDPR"
    CREATE_GDPR = "CREATE_GDPR"
    EDIT_GDPR = "EDIT_GDPR"
    DELETE_GDPR = "DELETE_GDPR"
    MANAGE_GDPR = "MANAGE_GDPR"
    VIEW_GDPR_DATA = "VIEW_GDPR_DATA"
    EXPORT_GDPR_DATA = "EXPORT_GDPR_DATA"
    DELETE_GDPR_DATA = "DELETE_GDPR_DATA"
    MANAGE_CONSENTS = "MANAGE_CONSENTS"
    # Roles
    VIEW_ROLES = "VIEW_ROLES"
    CREATE_ROLES = "CREATE_ROLES"
    EDIT_ROLES = "EDIT_ROLES"
    DELETE_ROLES = "DELETE_ROLES"
    ASSIGN_ROLES = "ASSIGN_ROLES"
    REVOKE_ROLES = "REVOKE_ROLES"
    # Tenants
    VIEW_TENANTS = "VIEW_TENANTS"
    CREATE_TENANTS = "CREATE_TENANTS"
    EDIT_TENANTS = "EDIT_TENANTS"
    DELETE_TENANTS = "DELETE_TENANTS"
    # Administration
    VIEW_ADMINISTRATION = "VIEW_ADMINISTRATION"
    CREATE_ADMINISTRATION = "CREATE_ADMINISTRATION"
    EDIT_ADMINISTRATION = "EDIT_ADMINISTRATION"
    DELETE_ADMINISTRATION = "DELETE_ADMINISTRATION"
    # Reports and analytics
    VIEW_REPORTS = "VIEW_REPORTS"
    CREATE_REPORTS = "CREATE_REPORTS"
    EDIT_REPORTS = "EDIT_REPORTS"
    DELETE_REPORTS = "DELETE_REPORTS"
    EXPORT_REPORTS = "EXPORT_REPORTS"
    VIEW_ANALYTICS = "VIEW_ANALYTICS"
    # Hierarchy
    VIEW_HIERARCHY = "VIEW_HIERARCHY"
    CREATE_HIERARCHY = "CREATE_HIERARCHY"
    EDIT_HIERARCHY = "EDIT_HIERARCHY"
    DELETE_HIERARCHY = "DELETE_HIERARCHY"
    MANAGE_HIERARCHY = "MANAGE_HIERARCHY"
    # Historical identifiers (see IRREGULAR_ALIASES)
    ROLE_MANAGEMENT = "ROLE_MANAGEMENT"
    ADMIN_PANEL = "ADMIN_PANEL"
    SYSTEM_SETTINGS = "SYSTEM_SETTINGS"
    USER_MANAGEMENT = "USER_MANAGEMENT"
    TENANT_MANAGEMENT = "TENANT_MANAGEMENT"
    HIERARCHY_MANAGEMENT = "HIERARCHY_MANAGEMENT"


# (action, resource) for identifiers that are not ACTION_RESOURCE.
IRREGULAR_ALIASES: MappingProxyType[Permission, tuple[str, str]] = MappingProxyType({
    Permission.ROLE_MANAGEMENT: ("manage", "roles"),
    Permission.ADMIN_PANEL: ("view", "administration"),
    Permission.SYSTEM_SETTINGS: ("manage", "settings"),
    Permission.USER_MANAGEMENT: ("manage", "users"),
    Permission.TENANT_MANAGEMENT: ("manage", "tenants"),
    Permission.HIERARCHY_MANAGEMENT: ("manage", "hierarchy"),
})

_IRREGULAR_BY_PAIR: MappingProxyType[tuple[str, str], Permission] = MappingProxyType(
    {pair: permission for permission, pair in IRREGULAR_ALIASES.items()}
)

# Verbs accepted in dotted "resource.action" checks, mapped to identifier prefixes.
_DOTTED_ACTIONS: MappingProxyType[str, str] = MappingProxyType({
    "read": "VIEW",
    "view": "VIEW",
    "create": "CREATE",
    "update": "EDIT",
    "edit": "EDIT",
    "delete": "DELETE",
    "export": "EXPORT",
    "download": "DOWNLOAD",
    "manage": "MANAGE",
    "assign": "ASSIGN",
    "revoke": "REVOKE",
})


def parse_permission(value: "str | Permission") -> Permission:
    """Return the Permission for value.

    Raises:
        UnknownPermissionException: value is not a known identifier.
    """
    if isinstance(value, Permission):
        return value
    try:
        return Permission(value.strip().upper())
    except ValueError:
        raise UnknownPermissionException(value) from None


def try_parse_permission(value: str) -> Permission | None:
    """parse_permission, but None for unknown identifiers."""
    try:
        return parse_permission(value)
    except UnknownPermissionException:
        return None


def action_resource(permission: Permission) -> tuple[str, str]:
    """Lower-cased (action, resource) pair used to match advanced permission rows.

    Irregular identifiers come from the alias table; the rest split at the
    first underscore (VIEW_GDPR_DATA -> ("view", "gdpr_data")).
    """
    alias = IRREGULAR_ALIASES.get(permission)
    if alias is not None:
        return alias
    action, _, resource = permission.value.partition("_")
    return action.lower(), resource.lower()


def encode_action_resource(action: str, resource: str) -> str:
    """ACTION_RESOURCE string for an advanced permission row."""
    return f"{action.upper()}_{resource.upper()}"


def permission_for_resource_action(resource: str, action: str) -> Permission | None:
    """Permission named by a dotted resource.action pair, or None if unmappable.

    Example: ("companies", "read") -> VIEW_COMPANIES. A pair with no
    ACTION_RESOURCE member falls back to the irregular identifiers
    (("roles", "manage") -> ROLE_MANAGEMENT). Unknown verbs and resources
    return None.
    """
    prefix = _DOTTED_ACTIONS.get(action.strip().lower())
    noun = resource.strip().lower()
    if prefix is None or not noun:
        return None
    regular = try_parse_permission(f"{prefix}_{noun.upper()}")
    if regular is not None:
        return regular
    return _IRREGULAR_BY_PAIR.get((prefix.lower(), noun))
