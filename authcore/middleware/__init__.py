"""HTTP middleware."""

from authcore.middleware.tenant_context import (
    TenantResolutionMiddleware,
    database_tenant_resolver,
)

__all__ = ["TenantResolutionMiddleware", "database_tenant_resolver"]
