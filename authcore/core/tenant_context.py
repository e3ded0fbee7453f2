"""Tenant context for RLS (row-level security).

TenantResolutionMiddleware sets the resolved tenant id in this context
variable so that get_db_transactional / session_scope can run
SET LOCAL app.current_tenant_id on the session.
"""

from contextvars import ContextVar, Token

# Current tenant ID for the request (set by middleware, read by DB session setup).
current_tenant_id: ContextVar[str | None] = ContextVar(
    "current_tenant_id", default=None
)


def set_tenant_id(tenant_id: str | None) -> Token:
    """Set the current tenant ID for this context; returns the reset token."""
    return current_tenant_id.set(tenant_id)


def reset_tenant_id(token: Token) -> None:
    """Restore the tenant ID that was current before set_tenant_id."""
    current_tenant_id.reset(token)


def get_tenant_id() -> str | None:
    """Return the current tenant ID if set."""
    return current_tenant_id.get()
