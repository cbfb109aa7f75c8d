"""Dramatiq background tasks package."""

import dramatiq
import redis
import structlog
from dramatiq.brokers.redis import RedisBroker
from dramatiq.middleware import Middleware

from labinventory.config import settings
from labinventory.logging import setup_logging

# Configure logging before anything else
setup_logging()

logger = structlog.get_logger(__name__)

PURGE_LOCK_KEY = "labinventory:serials:purge:lock"
PURGE_LOCK_TTL = 60  # seconds


class ReservationPurgeMiddleware(Middleware):
    """Queue one purge of expired serial reservations when a worker boots.

    A Redis lock keeps several booting worker processes from queueing
    duplicate purges.
    """

    _dispatched = False

    def after_worker_boot(self, broker: dramatiq.Broker, worker: dramatiq.Worker) -> None:
        if ReservationPurgeMiddleware._dispatched:
            return
        ReservationPurgeMiddleware._dispatched = True

        with redis.from_url(settings.redis_url) as r:  # type: ignore[no-untyped-call]
            acquired = r.set(PURGE_LOCK_KEY, "1", nx=True, ex=PURGE_LOCK_TTL)
        if not acquired:
            logger.debug("Purge lock held by another worker, skipping")
            return

        from labinventory.tasks.reservations import purge_expired_reservations

        purge_expired_reservations.send()
        logger.info("Dispatched reservation purge")


# Configure Redis broker
redis_broker = RedisBroker(url=settings.redis_url)  # type: ignore[no-untyped-call]
redis_broker.add_middleware(ReservationPurgeMiddleware())
dramatiq.set_broker(redis_broker)

# Import all tasks to register them with Dramatiq (must be after broker setup)
import labinventory.tasks.alerts  # noqa: E402, F401
import labinventory.tasks.reservations  # noqa: E402, F401
