"""Tenant resolution middleware.

Resolves the tenant for every request (see TenantResolver), exposes it as
request.state.tenant / request.state.tenant_id, and binds the tenant id in
the tenant ContextVar so database sessions run SET LOCAL
app.current_tenant_id. Unresolvable requests are answered here (400/404).
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from authcore.application.dtos.tenant import (
    BypassedTenant,
    DeniedTenant,
    ResolvedTenant,
)
from authcore.application.services.tenant_resolver import TenantResolver
from authcore.core.config import get_settings
from authcore.core.tenant_context import reset_tenant_id, set_tenant_id
from authcore.domain.enums import DenialReason
from authcore.domain.exceptions import HostRequiredException, TenantNotFoundException
from authcore.infrastructure.persistence.database import session_scope
from authcore.infrastructure.persistence.repositories import TenantRepository

logger = logging.getLogger(__name__)


@asynccontextmanager
async def database_tenant_resolver() -> AsyncIterator[TenantResolver]:
    """Default resolver provider: TenantRepository on a short-lived session."""
    async with session_scope() as session:
        yield TenantResolver.from_settings(TenantRepository(session), get_settings())


def _denied_response(denied: DeniedTenant) -> JSONResponse:
    if denied.reason == DenialReason.HOST_REQUIRED:
        return JSONResponse(
            status_code=400, content=HostRequiredException(denied.path).to_dict()
        )
    return JSONResponse(
        status_code=404,
        content=TenantNotFoundException(denied.host, denied.path).to_dict(),
    )


def TenantResolutionMiddleware(app: Callable) -> Callable:
    """Resolve and bind the tenant before the route runs.

    The resolver comes from app.state.tenant_resolver_provider (an async
    context manager factory), defaulting to database_tenant_resolver.
    """

    class _Middleware(BaseHTTPMiddleware):
        async def dispatch(self, request: Request, call_next: Callable) -> Response:
            provider = getattr(
                request.app.state, "tenant_resolver_provider", database_tenant_resolver
            )
            try:
                async with provider() as resolver:
                    resolution = await resolver.resolve(
                        host=request.headers.get("host"),
                        headers=request.headers,
                        query=request.query_params,
                        path=request.url.path,
                    )
            except SQLAlchemyError:
                logger.exception(
                    "Tenant lookup failed for host=%s path=%s",
                    request.headers.get("host"),
                    request.url.path,
                )
                return JSONResponse(
                    status_code=500,
                    content={
                        "error": "DATA_LAYER_ERROR",
                        "message": "Internal server error",
                    },
                )

            match resolution:
                case BypassedTenant():
                    return await call_next(request)
                case DeniedTenant():
                    return _denied_response(resolution)
                case ResolvedTenant(tenant=tenant):
                    request.state.tenant = tenant
                    request.state.tenant_id = tenant.id
                    token = set_tenant_id(tenant.id)
                    try:
                        return await call_next(request)
                    finally:
                        reset_tenant_id(token)
            raise TypeError(f"Unexpected tenant resolution: {resolution!r}")

    return _Middleware(app)
