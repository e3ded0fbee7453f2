"""Expired role sweep: deactivate person_role rows past valid_until.

sweep_expired_roles() runs one sweep in its own short transaction (used by
scripts/cleanup_expired_roles.py); run_role_cleanup_loop() repeats it from
the application lifespan until cancelled.
"""

import asyncio
import logging

from authcore.application.services.role_store import RoleStore
from authcore.infrastructure.persistence.database import session_scope
from authcore.infrastructure.persistence.repositories import (
    CustomRoleRepository,
    PersonRepository,
    RoleAssignmentRepository,
)

logger = logging.getLogger(__name__)


async def sweep_expired_roles() -> int:
    """Deactivate expired assignments across all tenants; return count."""
    async with session_scope() as session:
        store = RoleStore(
            RoleAssignmentRepository(session),
            PersonRepository(session),
            CustomRoleRepository(session),
        )
        return await store.cleanup_expired_roles()


async def run_role_cleanup_loop(interval_seconds: int) -> None:
    """Sweep every interval_seconds. Errors are logged and the loop continues."""
    while True:
        try:
            count = await sweep_expired_roles()
            logger.debug("Expired role sweep finished: %d deactivated", count)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Expired role sweep failed; retrying next interval")
        await asyncio.sleep(interval_seconds)
