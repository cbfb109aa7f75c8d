"""Stale alert rebuild task."""

import asyncio

import dramatiq
import structlog

from labinventory.config import settings
from labinventory.services.alerts.alert_service import AlertService
from labinventory.tasks.utils.task_db import task_db_session

logger = structlog.get_logger(__name__)


@dramatiq.actor(max_retries=3, min_backoff=5000, max_backoff=60000, queue_name="default")
def rebuild_stale_alerts(days: int | None = None) -> None:
    """Refresh the STALE alert inbox in the background.

    Same work as POST /alerts/rebuild, for schedulers that enqueue instead
    of calling the API.

    Args:
        days: Idle days before an item is stale (defaults to settings.stale_days_default).
    """
    days = days or settings.stale_days_default
    touched = asyncio.run(_rebuild_async(days))
    logger.info("Completed stale alert rebuild", days=days, created_or_updated=touched)


async def _rebuild_async(days: int) -> int:
    """Async implementation of rebuild_stale_alerts."""
    async with task_db_session() as session:
        return await AlertService(session).rebuild(days)
