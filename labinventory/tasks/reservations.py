"""Serial reservation hygiene task."""

import asyncio
from datetime import timedelta

import dramatiq
import structlog

from labinventory.config import settings
from labinventory.services.serials.serial_service import SerialService
from labinventory.tasks.utils.task_db import task_db_session

logger = structlog.get_logger(__name__)


@dramatiq.actor(max_retries=3, min_backoff=5000, max_backoff=60000, queue_name="default")
def purge_expired_reservations(grace_hours: int | None = None) -> None:
    """Delete serial reservations that expired more than ``grace_hours`` ago.

    Optional hygiene: expired reservations are already ignored when a serial
    is consumed, so nothing depends on this running.

    Args:
        grace_hours: Age past expiry before a row is removed
                     (defaults to settings.serial_purge_grace_hours).
    """
    hours = grace_hours if grace_hours is not None else settings.serial_purge_grace_hours
    deleted = asyncio.run(_purge_async(timedelta(hours=hours)))
    logger.info("Completed reservation purge", deleted=deleted, grace_hours=hours)


async def _purge_async(grace: timedelta) -> int:
    """Async implementation of purge_expired_reservations."""
    async with task_db_session() as session:
        return await SerialService(session).purge_expired(grace)
