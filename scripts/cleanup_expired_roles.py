"""Deactivate role assignments whose valid_until has passed (all tenants).

Usage:
    python -m scripts.cleanup_expired_roles
Meant for cron when the in-process sweep is disabled
(ROLE_CLEANUP_INTERVAL_SECONDS=0).
"""

import asyncio

from authcore.core.config import get_settings
from authcore.infrastructure.jobs.role_cleanup import sweep_expired_roles
from authcore.infrastructure.persistence.database import dispose_engine
from authcore.shared.telemetry import setup_logging


async def main() -> None:
    get_settings()
    setup_logging()
    try:
        count = await sweep_expired_roles()
    finally:
        await dispose_engine()
    print(f"Done. Deactivated {count} expired role assignment(s)")


if __name__ == "__main__":
    asyncio.run(main())
