"""Application lifespan: startup and shutdown.

Single place for startup/shutdown wiring (telemetry, expired-role sweep
task, DB engine dispose); no authorization logic here.
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from authcore.core.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: telemetry (if enabled), expired-role sweep task (if
    role_cleanup_interval_seconds > 0). Shutdown order: sweep task cancel,
    telemetry shutdown, SQL engine dispose.
    """
    settings = get_settings()

    # ---- Startup ----
    if settings.telemetry_enabled:
        from authcore.infrastructure.persistence import database
        from authcore.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        telemetry.instrument_logging()
        database._ensure_engine()
        telemetry.instrument_sqlalchemy(database.engine)
        logger.info("Telemetry initialized")

    if settings.role_cleanup_interval_seconds > 0:
        from authcore.infrastructure.jobs.role_cleanup import run_role_cleanup_loop

        app.state.role_cleanup_task = asyncio.create_task(
            run_role_cleanup_loop(settings.role_cleanup_interval_seconds)
        )
        logger.info(
            "Expired role sweep scheduled every %ds",
            settings.role_cleanup_interval_seconds,
        )
    else:
        app.state.role_cleanup_task = None

    yield

    # ---- Shutdown ----
    cleanup_task = getattr(app.state, "role_cleanup_task", None)
    if cleanup_task is not None:
        cleanup_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await cleanup_task
        app.state.role_cleanup_task = None
        logger.info("Expired role sweep task stopped")

    from authcore.shared.telemetry.telemetry import get_telemetry, set_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)

    from authcore.infrastructure.persistence import database

    await database.dispose_engine()
