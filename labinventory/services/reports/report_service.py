"""Dashboard statistics and stale-item listing.

An item is stale when its ``last_activity_at`` is older than the threshold.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from enum import StrEnum

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import select

from labinventory.models.base import utc_now
from labinventory.models.enums import AssetStatus, TargetType
from labinventory.models.inventory import Asset, Consumable
from labinventory.utils.datetime_utils import ensure_utc

# Upper bound on rows fetched per item type before merging
MAX_MERGE_ROWS = 500


class StaleFilter(StrEnum):
    ASSET = "ASSET"
    CONSUMABLE = "CONSUMABLE"
    ALL = "ALL"


@dataclass
class InventoryStats:
    checked_out_count: int
    stale_days: int
    stale_asset_count: int
    stale_consumable_count: int

    @property
    def stale_count(self) -> int:
        return self.stale_asset_count + self.stale_consumable_count


@dataclass
class StaleItem:
    type: TargetType
    id: str
    serial: str
    name: str
    category: str
    location: str | None
    last_activity_at: datetime
    days_since: int
    # Asset-only
    status: AssetStatus | None = None
    user_id: str | None = None
    user_name: str | None = None
    # Consumable-only
    unit: str | None = None
    current_qty: Decimal | None = None
    reorder_threshold: Decimal | None = None


class ReportService:
    def __init__(self, session: AsyncSession, clock: Callable[[], datetime] = utc_now):
        self.session = session
        self.clock = clock

    def _threshold(self, days: int) -> datetime:
        return self.clock() - timedelta(days=days)

    async def stats(self, stale_days: int) -> InventoryStats:
        """Counts for the home dashboard."""
        threshold = self._threshold(stale_days)

        checked_out = await self.session.execute(
            select(func.count()).select_from(Asset).where(Asset.status == AssetStatus.CHECKED_OUT)
        )
        stale_assets = await self.session.execute(
            select(func.count()).select_from(Asset).where(Asset.last_activity_at < threshold)
        )
        stale_consumables = await self.session.execute(
            select(func.count()).select_from(Consumable).where(Consumable.last_activity_at < threshold)
        )

        return InventoryStats(
            checked_out_count=checked_out.scalar() or 0,
            stale_days=stale_days,
            stale_asset_count=stale_assets.scalar() or 0,
            stale_consumable_count=stale_consumables.scalar() or 0,
        )

    async def stale_items(
        self,
        *,
        days: int,
        type_filter: StaleFilter = StaleFilter.ALL,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[StaleItem], int]:
        """Stale assets and consumables, longest-idle first.

        Returns (page, total_approx). ``total_approx`` counts merged rows
        before paging, which is capped per type.
        """
        now = self.clock()
        threshold = self._threshold(days)
        take_for_merge = min(MAX_MERGE_ROWS, offset + limit)

        def days_since(dt: datetime) -> int:
            return (now - ensure_utc(dt)).days

        items: list[StaleItem] = []

        if type_filter in (StaleFilter.ASSET, StaleFilter.ALL):
            result = await self.session.execute(
                select(Asset)
                .options(
                    selectinload(Asset.current_location),  # type: ignore[arg-type]
                    selectinload(Asset.current_user),  # type: ignore[arg-type]
                )
                .where(Asset.last_activity_at < threshold)
                .order_by(Asset.last_activity_at.asc())  # type: ignore[attr-defined]
                .limit(take_for_merge)
            )
            for asset in result.scalars().all():
                items.append(
                    StaleItem(
                        type=TargetType.ASSET,
                        id=asset.id,
                        serial=asset.serial,
                        name=asset.name,
                        category=asset.category,
                        location=asset.current_location.name if asset.current_location else None,
                        last_activity_at=asset.last_activity_at,
                        days_since=days_since(asset.last_activity_at),
                        status=asset.status,
                        user_id=asset.current_user_id,
                        user_name=asset.current_user.name if asset.current_user else None,
                    )
                )

        if type_filter in (StaleFilter.CONSUMABLE, StaleFilter.ALL):
            result = await self.session.execute(
                select(Consumable)
                .options(selectinload(Consumable.location))  # type: ignore[arg-type]
                .where(Consumable.last_activity_at < threshold)
                .order_by(Consumable.last_activity_at.asc())  # type: ignore[attr-defined]
                .limit(take_for_merge)
            )
            for consumable in result.scalars().all():
                items.append(
                    StaleItem(
                        type=TargetType.CONSUMABLE,
                        id=consumable.id,
                        serial=consumable.serial,
                        name=consumable.name,
                        category=consumable.category,
                        location=consumable.location.name if consumable.location else None,
                        last_activity_at=consumable.last_activity_at,
                        days_since=days_since(consumable.last_activity_at),
                        unit=consumable.unit,
                        current_qty=consumable.current_qty,
                        reorder_threshold=consumable.reorder_threshold,
                    )
                )

        items.sort(key=lambda item: item.days_since, reverse=True)
        return items[offset : offset + limit], len(items)
