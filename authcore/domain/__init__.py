"""Domain layer: enums, permission identifiers, conditions, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from authcore.domain.conditions import (
    Condition,
    OwnedBySelf,
    SameCompany,
    UnrecognizedCondition,
    parse_conditions,
)
from authcore.domain.enums import (
    AdvancedScope,
    PermissionSource,
    RoleScope,
    RoleType,
)
from authcore.domain.exceptions import (
    AuthcoreException,
    AuthenticationException,
    AuthorizationException,
    DataLayerException,
    DuplicateAssignmentException,
    HostRequiredException,
    PersonNotInTenantException,
    ResourceNotFoundException,
    SyntheticAssignmentError,
    TenantMismatchException,
    TenantNotFoundException,
    UnknownPermissionException,
    ValidationException,
)
from authcore.domain.permissions import Permission, parse_permission

__all__ = [
    # Enums
    "AdvancedScope",
    "PermissionSource",
    "RoleScope",
    "RoleType",
    # Permissions and conditions
    "Permission",
    "parse_permission",
    "Condition",
    "OwnedBySelf",
    "SameCompany",
    "UnrecognizedCondition",
    "parse_conditions",
    # Exceptions
    "AuthcoreException",
    "AuthenticationException",
    "AuthorizationException",
    "DataLayerException",
    "DuplicateAssignmentException",
    "HostRequiredException",
    "PersonNotInTenantException",
    "ResourceNotFoundException",
    "SyntheticAssignmentError",
    "TenantMismatchException",
    "TenantNotFoundException",
    "UnknownPermissionException",
    "ValidationException",
]
