"""Consumable stock service."""

from decimal import Decimal
from typing import Any

import structlog
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import select

from labinventory.models.base import utc_now
from labinventory.models.enums import ActionType, TargetType
from labinventory.models.inventory import Consumable
from labinventory.models.types import is_ulid
from labinventory.services.activity import record_activity
from labinventory.services.inventory.exceptions import ConsumableNotFound, InsufficientQuantity
from labinventory.services.inventory.location_service import LocationService
from labinventory.services.serials.serial_service import SerialService
from labinventory.services.users.user_service import UserService

logger = structlog.get_logger(__name__)


class ConsumableService:
    """Service for consumable registration and quantity adjustments.

    Stock reaching zero keeps the record so the next delivery can be added.
    """

    def __init__(self, session: AsyncSession, serials: SerialService | None = None):
        self.session = session
        self.serials = serials or SerialService(session)
        self.users = UserService(session)
        self.locations = LocationService(session)

    async def list_consumables(
        self,
        *,
        query: str | None = None,
        needs_reorder: bool = False,
        take: int = 50,
    ) -> list[Consumable]:
        """Search consumables, most recently updated first."""
        statement = select(Consumable).options(*self._load_options())

        if needs_reorder:
            statement = statement.where(Consumable.current_qty < Consumable.reorder_threshold)
        if query and query.strip():
            pattern = f"%{query.strip()}%"
            statement = statement.where(
                or_(
                    Consumable.serial.ilike(pattern),  # type: ignore[attr-defined]
                    Consumable.name.ilike(pattern),  # type: ignore[attr-defined]
                    Consumable.category.ilike(pattern),  # type: ignore[attr-defined]
                )
            )

        statement = statement.order_by(Consumable.updated_at.desc()).limit(take)  # type: ignore[attr-defined]
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_consumable(self, consumable_id: str) -> Consumable:
        if not is_ulid(consumable_id):
            raise ConsumableNotFound()
        statement = (
            select(Consumable)
            .options(*self._load_options())
            .where(Consumable.id == consumable_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(statement)
        consumable = result.scalars().first()
        if consumable is None:
            raise ConsumableNotFound()
        return consumable

    async def create_consumable(
        self,
        *,
        serial: str,
        name: str,
        category: str,
        unit: str,
        location_id: str,
        current_qty: Decimal = Decimal("0"),
        reorder_threshold: Decimal = Decimal("0"),
        note: str | None = None,
    ) -> Consumable:
        """Register a consumable under a reserved CONSUMABLE serial."""
        actor_id = await self.users.get_system_actor_id()
        await self.serials.consume(serial, TargetType.CONSUMABLE)
        await self.locations.require(location_id)

        consumable = Consumable(
            serial=serial,
            name=name,
            category=category,
            unit=unit,
            current_qty=current_qty,
            reorder_threshold=reorder_threshold,
            location_id=location_id,
            note=note or None,
            last_activity_at=utc_now(),
        )
        self.session.add(consumable)
        await self.session.flush()

        record_activity(
            self.session,
            actor_id=actor_id,
            target_type=TargetType.CONSUMABLE,
            target_id=consumable.id,
            action=ActionType.CREATE,
            to_location_id=location_id,
            note="created",
        )
        await self.session.commit()

        logger.info("Created consumable", consumable_id=consumable.id, serial=serial, unit=unit)
        return await self.get_consumable(consumable.id)

    async def adjust_quantity(self, consumable_id: str, delta: Decimal, note: str | None = None) -> Consumable:
        """Add ``delta`` (may be negative) to the current quantity.

        Raises:
            InsufficientQuantity: the result would be below zero.
        """
        if not is_ulid(consumable_id):
            raise ConsumableNotFound()
        statement = (
            select(Consumable)
            .where(Consumable.id == consumable_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(statement)
        consumable = result.scalars().first()
        if consumable is None:
            raise ConsumableNotFound()

        actor_id = await self.users.get_system_actor_id()
        previous_qty = Decimal(consumable.current_qty)
        new_qty = previous_qty + delta
        if new_qty < 0:
            raise InsufficientQuantity()

        consumable.current_qty = new_qty
        consumable.last_activity_at = utc_now()

        record_activity(
            self.session,
            actor_id=actor_id,
            target_type=TargetType.CONSUMABLE,
            target_id=consumable.id,
            action=ActionType.ADJUST,
            from_location_id=consumable.location_id,
            to_location_id=consumable.location_id,
            note=note or f"qty {previous_qty} -> {new_qty}",
        )
        await self.session.commit()

        logger.info(
            "Adjusted consumable quantity",
            consumable_id=consumable.id,
            delta=str(delta),
            current_qty=str(new_qty),
        )
        return await self.get_consumable(consumable.id)

    @staticmethod
    def _load_options() -> tuple[Any, ...]:
        return (selectinload(Consumable.location),)  # type: ignore[arg-type]
