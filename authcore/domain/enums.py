"""Domain enumerations for the authorization core.

Enums represent fixed sets of domain values (role types, scopes, decision
sources). Custom roles are referenced through the CUSTOM_<id> marker, not
through RoleType.
"""

from enum import StrEnum

CUSTOM_ROLE_PREFIX = "CUSTOM_"


class RoleType(StrEnum):
    """Built-in role types a person can hold within a tenant."""

    EMPLOYEE = "EMPLOYEE"
    MANAGER = "MANAGER"
    HR_MANAGER = "HR_MANAGER"
    DEPARTMENT_HEAD = "DEPARTMENT_HEAD"
    TRAINER = "TRAINER"
    SENIOR_TRAINER = "SENIOR_TRAINER"
    TRAINER_COORDINATOR = "TRAINER_COORDINATOR"
    EXTERNAL_TRAINER = "EXTERNAL_TRAINER"
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    COMPANY_ADMIN = "COMPANY_ADMIN"
    TENANT_ADMIN = "TENANT_ADMIN"
    VIEWER = "VIEWER"
    OPERATOR = "OPERATOR"
    COORDINATOR = "COORDINATOR"
    SUPERVISOR = "SUPERVISOR"
    GUEST = "GUEST"
    CONSULTANT = "CONSULTANT"
    AUDITOR = "AUDITOR"

    @classmethod
    def from_value(cls, value: str) -> "RoleType | None":
        """Return the member for value, or None for custom markers and unknown strings."""
        try:
            return cls(value)
        except ValueError:
            return None


GLOBAL_ADMIN_ROLES = frozenset({RoleType.SUPER_ADMIN, RoleType.ADMIN})


class RoleScope(StrEnum):
    """Reach of a role assignment, derived at assignment time."""

    GLOBAL = "global"
    TENANT = "tenant"
    COMPANY = "company"
    DEPARTMENT = "department"


class AdvancedScope(StrEnum):
    """Scope of an advanced per-resource permission row."""

    GLOBAL = "global"
    TENANT = "tenant"
    OWN = "own"


class PermissionSource(StrEnum):
    """Pipeline step that produced a permission decision."""

    GLOBAL_ADMIN = "GLOBAL_ADMIN"
    CATALOG = "CATALOG"
    ROLE_PERMISSION = "ROLE_PERMISSION"
    ADVANCED_PERMISSION = "ADVANCED_PERMISSION"
    CUSTOM_ROLE = "CUSTOM_ROLE"
    DENIED = "DENIED"
    ERROR = "ERROR"


class ResolutionStep(StrEnum):
    """Tenant resolution step that matched."""

    DOMAIN = "domain"
    SUBDOMAIN = "subdomain"
    HEADER = "header"
    QUERY = "query"
    LOOPBACK_DOMAIN = "loopback_domain"
    DEFAULT_TENANT = "default_tenant"
    DEV_FALLBACK = "dev_fallback"


class DenialReason(StrEnum):
    """Why tenant resolution refused a request."""

    NO_TENANT = "NO_TENANT"
    HOST_REQUIRED = "HOST_REQUIRED"


def custom_role_marker(custom_role_id: str) -> str:
    """Role type string under which a custom role is held."""
    return f"{CUSTOM_ROLE_PREFIX}{custom_role_id}"


def parse_custom_role_marker(role_type: str) -> str | None:
    """Return the custom role id for a CUSTOM_<id> marker, else None."""
    if role_type.startswith(CUSTOM_ROLE_PREFIX) and len(role_type) > len(
        CUSTOM_ROLE_PREFIX
    ):
        return role_type[len(CUSTOM_ROLE_PREFIX):]
    return None
