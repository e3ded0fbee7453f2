"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Schema is managed by Alembic migrations. Engine and session factory are
created lazily on first use (get_db_transactional / session_scope)
so import does not trigger Settings validation.

Every session opened while a tenant is bound (see
authcore.core.tenant_context) runs SET LOCAL app.current_tenant_id so
row-level security policies restrict rows to that tenant.
"""

import logging
import re
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from authcore.core.config import get_settings
from authcore.core.tenant_context import get_tenant_id as get_current_tenant_id

logger = logging.getLogger(__name__)

# Strict format for tenant_id before interpolation into SET LOCAL (CUID/UUID-style).
_TENANT_ID_MAX_LENGTH = 64
_TENANT_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{1," + str(_TENANT_ID_MAX_LENGTH) + r"}$")

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: Any = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


def _ensure_engine() -> async_sessionmaker[AsyncSession]:
    """Create engine and AsyncSessionLocal on first use."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return AsyncSessionLocal
    settings = get_settings()
    pool_size = settings.db_pool_size if settings.db_pool_size is not None else 10
    max_overflow = (
        settings.db_max_overflow if settings.db_max_overflow is not None else 20
    )
    command_timeout = (
        settings.db_command_timeout
        if settings.db_command_timeout is not None
        else 30
    )
    connect_args: dict[str, Any] = {}
    if "postgresql" in settings.database_url:
        connect_args["command_timeout"] = command_timeout
    engine = create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_recycle=3600,
        connect_args=connect_args,
    )
    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    return AsyncSessionLocal


async def dispose_engine() -> None:
    """Dispose the engine (if created) and forget the session factory."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")
    engine = None
    AsyncSessionLocal = None


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def _quote_set_value(value: str) -> str:
    """Escape a value for use in PostgreSQL SET (single-quoted literal)."""
    return value.replace("'", "''")


def _is_valid_tenant_id_for_set_local(value: str) -> bool:
    """Return True if value is safe to interpolate into SET LOCAL (format + length)."""
    if not value or len(value) > _TENANT_ID_MAX_LENGTH:
        return False
    return bool(_TENANT_ID_RE.fullmatch(value))


async def _set_tenant_context(session: AsyncSession) -> None:
    """Set app.current_tenant_id on the session for RLS (when tenant context is set).

    SET LOCAL does not support bound parameters in PostgreSQL; the value is
    validated (CUID/UUID-style, max length) and single quotes escaped. If
    validation fails, SET LOCAL is skipped and logged.
    """
    tenant_id = get_current_tenant_id()
    if not tenant_id:
        return
    if not _is_valid_tenant_id_for_set_local(tenant_id):
        logger.warning(
            "Skipping SET LOCAL app.current_tenant_id: tenant_id failed format validation (length=%d, max=%d)",
            len(tenant_id),
            _TENANT_ID_MAX_LENGTH,
        )
        return
    safe = _quote_set_value(tenant_id)
    await session.execute(text(f"SET LOCAL app.current_tenant_id = '{safe}'"))


async def get_db_transactional() -> AsyncIterator[AsyncSession]:
    """Request-scoped session dependency.

    Begins a transaction, commits on success, rolls back on exception.
    Reads use it too: SET LOCAL only lasts inside a transaction.
    """
    session_factory = _ensure_engine()
    async with session_factory() as session:
        async with session.begin():
            await _set_tenant_context(session)
            yield session


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Transactional session outside FastAPI dependencies (middleware, sweeps, scripts).

    Commits on normal exit, rolls back on exception.
    """
    session_factory = _ensure_engine()
    async with session_factory() as session:
        async with session.begin():
            await _set_tenant_context(session)
            yield session
