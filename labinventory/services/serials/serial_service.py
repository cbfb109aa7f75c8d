"""Serial allocation service.

Serials are handed out in two steps. ``reserve`` issues a fresh serial and
holds it for a short TTL; the asset or consumable creation path then calls
``consume`` in the same transaction that inserts the entity.

Numbering uses one shared counter per two-digit year for both item types.
Before a candidate is reserved it is checked against reservations, assets
and consumables, so rows left behind by older numbering schemes are
skipped instead of colliding.
"""

from collections.abc import Callable
from datetime import datetime, timedelta

import structlog
from sqlalchemy import delete, exists, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import RetryError

from labinventory.config import settings
from labinventory.models.base import utc_now
from labinventory.models.enums import TargetType
from labinventory.models.inventory import Asset, Consumable
from labinventory.models.serial import SerialCounter, SerialReservation
from labinventory.services.serials.exceptions import (
    SerialAllocationExhausted,
    SerialNotReserved,
    SerialReservationExpired,
    SerialSequenceExhausted,
    SerialTypeMismatch,
)
from labinventory.services.users.user_service import UserService
from labinventory.utils.datetime_utils import ensure_utc
from labinventory.utils.retry import ConflictRetryConfig, get_conflict_retrying
from labinventory.utils.serials import format_serial, is_valid_serial, year_prefix

logger = structlog.get_logger(__name__)


class SerialService:
    """Reserve, consume and purge serial reservations.

    ``reserve`` and ``purge_expired`` commit their own transaction.
    ``consume`` only stages the deletion; the caller commits it together
    with the entity insert.
    """

    def __init__(self, session: AsyncSession, clock: Callable[[], datetime] = utc_now):
        self.session = session
        self.clock = clock
        self.users = UserService(session)

    @property
    def reservation_ttl(self) -> timedelta:
        return timedelta(minutes=settings.serial_reservation_ttl_minutes)

    async def reserve(self, target_type: TargetType) -> SerialReservation:
        """Allocate the next free serial and reserve it for ``target_type``.

        The whole transaction (counter read, collision check, counter bump, insert) is
        retried when the insert loses a uniqueness race.

        Raises:
            SerialAllocationExhausted: every attempt hit a conflict.
            SerialSequenceExhausted: no six-digit sequence value is left
                for the current year.
        """
        max_attempts = settings.serial_reserve_max_attempts
        retrying = get_conflict_retrying(ConflictRetryConfig(max_attempts=max_attempts))
        reservation: SerialReservation | None = None

        try:
            async for attempt in retrying:
                with attempt:
                    reservation = await self._reserve_once(target_type, attempt.retry_state.attempt_number)
        except RetryError as e:
            logger.error(
                "Serial allocation exhausted",
                type=target_type,
                max_attempts=max_attempts,
                error=str(e.last_attempt.exception()),
            )
            raise SerialAllocationExhausted() from e.last_attempt.exception()

        assert reservation is not None
        return reservation

    async def _reserve_once(self, target_type: TargetType, attempt: int) -> SerialReservation:
        now = self.clock()
        prefix = year_prefix(now)

        try:
            reserved_by = await self.users.get_system_actor_id()
            counter = await self._lock_counter(prefix)

            seq = counter.next_value
            serial = self._candidate(prefix, seq)
            while await self._serial_in_use(serial):
                logger.info("Serial already in use, skipping", serial=serial, prefix=prefix)
                seq += 1
                serial = self._candidate(prefix, seq)

            counter.next_value = seq + 1

            reservation = SerialReservation(
                serial=serial,
                type=target_type,
                reserved_by=reserved_by,
                expires_at=now + self.reservation_ttl,
            )
            self.session.add(reservation)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning(
                "Serial reservation conflict, retrying",
                attempt=attempt,
                prefix=prefix,
                type=target_type,
                error=str(e.orig),
            )
            raise
        except SerialSequenceExhausted:
            await self.session.rollback()
            logger.error("Serial sequence exhausted", prefix=prefix, type=target_type)
            raise

        logger.info(
            "Reserved serial",
            serial=reservation.serial,
            type=target_type,
            expires_at=reservation.expires_at.isoformat(),
            attempt=attempt,
        )
        return reservation

    @staticmethod
    def _candidate(prefix: str, seq: int) -> str:
        try:
            return format_serial(prefix, seq)
        except ValueError as e:
            raise SerialSequenceExhausted() from e

    async def _lock_counter(self, prefix: str) -> SerialCounter:
        """Read the counter row with a row lock, creating it at 1 if missing.

        A concurrent creator of the same row surfaces as IntegrityError on
        flush and is handled by the whole-transaction retry.
        """
        stmt = (
            select(SerialCounter)
            .where(SerialCounter.prefix == prefix)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        counter = result.scalars().first()
        if counter is None:
            counter = SerialCounter(prefix=prefix, next_value=1)
            self.session.add(counter)
            await self.session.flush()
        return counter

    async def _serial_in_use(self, serial: str) -> bool:
        """True if any reservation (expired or not), asset or consumable holds the serial."""
        stmt = select(
            or_(
                exists().where(SerialReservation.serial == serial),
                exists().where(Asset.serial == serial),
                exists().where(Consumable.serial == serial),
            )
        )
        result = await self.session.execute(stmt)
        return bool(result.scalar_one())

    async def consume(self, serial: str, expected_type: TargetType) -> SerialReservation:
        """Validate a reservation and stage its deletion in the open transaction.

        Nothing is committed here. On failure the reservation is left as is.

        Raises:
            SerialNotReserved: no reservation row for ``serial``.
            SerialTypeMismatch: reserved for another item type.
            SerialReservationExpired: TTL elapsed.
        """
        if not is_valid_serial(serial):
            raise SerialNotReserved()

        stmt = (
            select(SerialReservation)
            .where(SerialReservation.serial == serial)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        reservation = result.scalars().first()

        if reservation is None:
            raise SerialNotReserved()
        if reservation.type != expected_type:
            raise SerialTypeMismatch()
        if ensure_utc(reservation.expires_at) < self.clock():
            raise SerialReservationExpired()

        await self.session.delete(reservation)
        logger.debug("Consumed serial reservation", serial=serial, type=expected_type)
        return reservation

    async def purge_expired(self, grace: timedelta) -> int:
        """Delete reservations that expired more than ``grace`` ago.

        Returns the number of deleted rows.
        """
        cutoff = self.clock() - grace
        result = await self.session.execute(delete(SerialReservation).where(SerialReservation.expires_at < cutoff))
        await self.session.commit()

        deleted: int = result.rowcount or 0  # type: ignore[attr-defined]
        logger.info("Purged expired serial reservations", deleted=deleted, cutoff=cutoff.isoformat())
        return deleted
