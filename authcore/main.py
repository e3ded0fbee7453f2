"""FastAPI application entry point.

Wiring only: logging, lifespan, exception handlers, middleware, routers.
See authcore.core.lifespan and authcore.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and
optionally clear the get_settings cache) before calling create_app().
Serve with: uvicorn authcore.main:create_app --factory
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from authcore.api.v1 import api_router
from authcore.core.config import get_settings
from authcore.core.exception_handlers import register_exception_handlers
from authcore.core.lifespan import create_lifespan
from authcore.core.limiter import limiter
from authcore.middleware import TenantResolutionMiddleware, database_tenant_resolver
from authcore.shared.telemetry import setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.state.tenant_resolver_provider = database_tenant_resolver

    register_exception_handlers(app)

    # First added = innermost: tenant resolution runs inside CORS.
    app.add_middleware(TenantResolutionMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")
    return app
