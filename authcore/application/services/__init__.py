"""Application services (business logic orchestration)."""

from authcore.application.services.condition_evaluator import ConditionEvaluator
from authcore.application.services.field_filter import (
    filter_fields,
    filter_object_fields,
)
from authcore.application.services.permission_catalog import (
    CATALOG_VERSION,
    PermissionCatalog,
    catalog,
)
from authcore.application.services.permission_evaluator import PermissionEvaluator
from authcore.application.services.role_store import RoleStore, derive_scope
from authcore.application.services.tenant_resolver import (
    TenantResolver,
    normalize_hostname,
)

__all__ = [
    "CATALOG_VERSION",
    "ConditionEvaluator",
    "PermissionCatalog",
    "PermissionEvaluator",
    "RoleStore",
    "TenantResolver",
    "catalog",
    "derive_scope",
    "filter_fields",
    "filter_object_fields",
    "normalize_hostname",
]
