"""Persistence repositories. Re-exports for dependency injection."""

from authcore.infrastructure.persistence.repositories.base import BaseRepository
from authcore.infrastructure.persistence.repositories.custom_role_repo import (
    CustomRoleRepository,
)
from authcore.infrastructure.persistence.repositories.person_repo import (
    PersonRepository,
)
from authcore.infrastructure.persistence.repositories.role_assignment_repo import (
    RoleAssignmentRepository,
)
from authcore.infrastructure.persistence.repositories.tenant_repo import (
    TenantRepository,
)

__all__ = [
    "BaseRepository",
    "CustomRoleRepository",
    "PersonRepository",
    "RoleAssignmentRepository",
    "TenantRepository",
]
