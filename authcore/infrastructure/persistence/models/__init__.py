"""Persistence models: ORM entities and mixins."""

from authcore.infrastructure.persistence.models.custom_role import (
    CustomRole,
    CustomRolePermission,
)
from authcore.infrastructure.persistence.models.mixins import (
    CuidMixin,
    MultiTenantModel,
    SoftDeleteMixin,
    TenantMixin,
    TimestampMixin,
)
from authcore.infrastructure.persistence.models.person import Person
from authcore.infrastructure.persistence.models.role_assignment import (
    AdvancedPermission,
    PersonRole,
    RolePermission,
)
from authcore.infrastructure.persistence.models.tenant import Tenant

__all__ = [
    "AdvancedPermission",
    "CuidMixin",
    "CustomRole",
    "CustomRolePermission",
    "MultiTenantModel",
    "Person",
    "PersonRole",
    "RolePermission",
    "SoftDeleteMixin",
    "Tenant",
    "TenantMixin",
    "TimestampMixin",
]
