"""Application interfaces (repository protocols)."""

from authcore.application.interfaces.repositories import (
    ICustomRoleRepository,
    IPersonRepository,
    IRoleAssignmentRepository,
    ITenantRepository,
)

__all__ = [
    "ICustomRoleRepository",
    "IPersonRepository",
    "IRoleAssignmentRepository",
    "ITenantRepository",
]
