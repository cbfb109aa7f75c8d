"""Asset management service.

Every write bumps ``last_activity_at`` and records an ActivityLog row in
the same transaction. All writes are attributed to the SYSTEM actor.
"""

from datetime import date
from typing import Any

import structlog
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import select

from labinventory.models.base import utc_now
from labinventory.models.enums import ActionType, AssetStatus, TargetType
from labinventory.models.inventory import Asset
from labinventory.models.types import is_ulid
from labinventory.services.activity import record_activity
from labinventory.services.inventory.exceptions import AssetNotFound
from labinventory.services.inventory.location_service import LocationService
from labinventory.services.serials.serial_service import SerialService
from labinventory.services.users.user_service import UserService

logger = structlog.get_logger(__name__)

# Fields that PUT /assets/{id} may change
EDITABLE_FIELDS = frozenset({"name", "category", "current_location_id", "budget_code", "purchased_at", "note"})


class AssetService:
    """Service for asset registration and lifecycle transitions."""

    def __init__(self, session: AsyncSession, serials: SerialService | None = None):
        self.session = session
        self.serials = serials or SerialService(session)
        self.users = UserService(session)
        self.locations = LocationService(session)

    async def list_assets(
        self,
        *,
        query: str | None = None,
        status: AssetStatus | None = None,
        location_id: str | None = None,
        user_id: str | None = None,
        take: int = 50,
    ) -> list[Asset]:
        """Search assets, most recently updated first."""
        statement = select(Asset).options(*self._load_options())

        if status is not None:
            statement = statement.where(Asset.status == status)
        if location_id:
            if not is_ulid(location_id):
                return []
            statement = statement.where(Asset.current_location_id == location_id)
        if user_id:
            if not is_ulid(user_id):
                return []
            statement = statement.where(Asset.current_user_id == user_id)
        if query and query.strip():
            pattern = f"%{query.strip()}%"
            statement = statement.where(
                or_(
                    Asset.serial.ilike(pattern),  # type: ignore[attr-defined]
                    Asset.name.ilike(pattern),  # type: ignore[attr-defined]
                    Asset.category.ilike(pattern),  # type: ignore[attr-defined]
                    Asset.budget_code.ilike(pattern),  # type: ignore[union-attr]
                )
            )

        statement = statement.order_by(Asset.updated_at.desc()).limit(take)  # type: ignore[attr-defined]
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def list_checked_out_by(self, user_id: str) -> list[Asset]:
        """Assets currently borrowed by a user."""
        await self.users.get_user(user_id)
        return await self.list_assets(status=AssetStatus.CHECKED_OUT, user_id=user_id, take=500)

    async def get_asset(self, asset_id: str) -> Asset:
        """Get asset by id with location and borrower loaded."""
        if not is_ulid(asset_id):
            raise AssetNotFound()
        statement = (
            select(Asset)
            .options(*self._load_options())
            .where(Asset.id == asset_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(statement)
        asset = result.scalars().first()
        if asset is None:
            raise AssetNotFound()
        return asset

    async def create_asset(
        self,
        *,
        serial: str,
        name: str,
        category: str,
        location_id: str,
        budget_code: str | None = None,
        purchased_at: date | None = None,
        note: str | None = None,
    ) -> Asset:
        """Register an asset under a reserved ASSET serial.

        The reservation is consumed in the same transaction as the insert.
        """
        actor_id = await self.users.get_system_actor_id()
        await self.serials.consume(serial, TargetType.ASSET)
        await self.locations.require(location_id)

        asset = Asset(
            serial=serial,
            name=name,
            category=category,
            current_location_id=location_id,
            budget_code=budget_code or None,
            purchased_at=purchased_at,
            note=note or None,
            last_activity_at=utc_now(),
        )
        self.session.add(asset)
        await self.session.flush()

        record_activity(
            self.session,
            actor_id=actor_id,
            target_type=TargetType.ASSET,
            target_id=asset.id,
            action=ActionType.CREATE,
            to_location_id=location_id,
            note="created",
        )
        await self.session.commit()

        logger.info("Created asset", asset_id=asset.id, serial=serial, category=category)
        return await self.get_asset(asset.id)

    async def update_asset(self, asset_id: str, changes: dict[str, Any]) -> Asset:
        """Apply a partial metadata update. Keys outside EDITABLE_FIELDS are ignored."""
        asset = await self._get_for_update(asset_id)
        actor_id = await self.users.get_system_actor_id()
        from_location_id = asset.current_location_id

        changes = {key: value for key, value in changes.items() if key in EDITABLE_FIELDS}
        if "current_location_id" in changes:
            await self.locations.require(changes["current_location_id"])

        for key, value in changes.items():
            setattr(asset, key, value)
        asset.last_activity_at = utc_now()

        record_activity(
            self.session,
            actor_id=actor_id,
            target_type=TargetType.ASSET,
            target_id=asset.id,
            action=ActionType.EDIT,
            from_location_id=from_location_id,
            to_location_id=asset.current_location_id,
            note="asset metadata updated",
        )
        await self.session.commit()

        logger.info("Updated asset", asset_id=asset.id, fields=sorted(changes))
        return await self.get_asset(asset.id)

    async def checkout(self, asset_id: str, *, user_id: str, location_id: str, note: str | None = None) -> Asset:
        """Lend an asset to a user at a location."""
        asset = await self._get_for_update(asset_id)
        actor_id = await self.users.get_system_actor_id()
        await self.users.get_user(user_id)
        await self.locations.require(location_id)

        from_location_id, from_user_id = asset.current_location_id, asset.current_user_id
        asset.status = AssetStatus.CHECKED_OUT
        asset.current_user_id = user_id
        asset.current_location_id = location_id
        asset.last_activity_at = utc_now()

        record_activity(
            self.session,
            actor_id=actor_id,
            target_type=TargetType.ASSET,
            target_id=asset.id,
            action=ActionType.CHECKOUT,
            from_location_id=from_location_id,
            to_location_id=location_id,
            from_user_id=from_user_id,
            to_user_id=user_id,
            note=note,
        )
        await self.session.commit()

        logger.info("Checked out asset", asset_id=asset.id, user_id=user_id, location_id=location_id)
        return await self.get_asset(asset.id)

    async def checkin(self, asset_id: str, *, location_id: str, note: str | None = None) -> Asset:
        """Return an asset to a location and clear its borrower."""
        asset = await self._get_for_update(asset_id)
        actor_id = await self.users.get_system_actor_id()
        await self.locations.require(location_id)

        from_location_id, from_user_id = asset.current_location_id, asset.current_user_id
        asset.status = AssetStatus.AVAILABLE
        asset.current_user_id = None
        asset.current_location_id = location_id
        asset.last_activity_at = utc_now()

        record_activity(
            self.session,
            actor_id=actor_id,
            target_type=TargetType.ASSET,
            target_id=asset.id,
            action=ActionType.CHECKIN,
            from_location_id=from_location_id,
            to_location_id=location_id,
            from_user_id=from_user_id,
            to_user_id=None,
            note=note,
        )
        await self.session.commit()

        logger.info("Checked in asset", asset_id=asset.id, location_id=location_id)
        return await self.get_asset(asset.id)

    async def move(self, asset_id: str, *, location_id: str, note: str | None = None) -> Asset:
        """Change an asset's location, keeping status and borrower."""
        asset = await self._get_for_update(asset_id)
        actor_id = await self.users.get_system_actor_id()
        await self.locations.require(location_id)

        from_location_id = asset.current_location_id
        asset.current_location_id = location_id
        asset.last_activity_at = utc_now()

        record_activity(
            self.session,
            actor_id=actor_id,
            target_type=TargetType.ASSET,
            target_id=asset.id,
            action=ActionType.MOVE,
            from_location_id=from_location_id,
            to_location_id=location_id,
            from_user_id=asset.current_user_id,
            to_user_id=asset.current_user_id,
            note=note,
        )
        await self.session.commit()

        logger.info("Moved asset", asset_id=asset.id, from_location_id=from_location_id, location_id=location_id)
        return await self.get_asset(asset.id)

    async def _get_for_update(self, asset_id: str) -> Asset:
        if not is_ulid(asset_id):
            raise AssetNotFound()
        statement = (
            select(Asset).where(Asset.id == asset_id).with_for_update().execution_options(populate_existing=True)
        )
        result = await self.session.execute(statement)
        asset = result.scalars().first()
        if asset is None:
            raise AssetNotFound()
        return asset

    @staticmethod
    def _load_options() -> tuple[Any, ...]:
        return (
            selectinload(Asset.current_location),  # type: ignore[arg-type]
            selectinload(Asset.current_user),  # type: ignore[arg-type]
        )
