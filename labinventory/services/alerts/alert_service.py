"""Alert inbox service.

``rebuild`` raises one STALE alert per idle asset or consumable. Alerts are
keyed by (type, target_type, target_id), so rebuilding refreshes the title
and body of an existing alert but never resets its read flag.
"""

from collections.abc import Callable, Sequence
from datetime import datetime, timedelta

import structlog
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import select
from tenacity import RetryError

from labinventory.models.alert import Alert
from labinventory.models.base import utc_now
from labinventory.models.enums import AlertType, TargetType
from labinventory.models.inventory import Asset, Consumable
from labinventory.models.types import is_ulid
from labinventory.services.alerts.exceptions import AlertNotFound, AlertRebuildConflict
from labinventory.utils.datetime_utils import ensure_utc
from labinventory.utils.retry import get_conflict_retrying

logger = structlog.get_logger(__name__)

# Upper bound on stale items turned into alerts per type and rebuild
MAX_REBUILD_ROWS = 1000

# Size of one inbox page
MAX_LIST_ROWS = 200

_TITLE_LABELS = {
    TargetType.ASSET: "Stale asset",
    TargetType.CONSUMABLE: "Stale consumable",
}


class AlertService:
    def __init__(self, session: AsyncSession, clock: Callable[[], datetime] = utc_now):
        self.session = session
        self.clock = clock

    def _visible(self) -> ColumnElement[bool]:
        """Alerts that are not snoozed right now."""
        now = self.clock()
        return or_(
            Alert.snooze_until.is_(None),  # type: ignore[union-attr]
            Alert.snooze_until < now,  # type: ignore[operator]
        )

    async def rebuild(self, days: int) -> int:
        """Upsert a STALE alert for every item idle longer than ``days`` days.

        Returns the number of alerts created or updated.

        Raises:
            AlertRebuildConflict: a concurrent rebuild kept winning the inserts.
        """
        touched = 0
        try:
            async for attempt in get_conflict_retrying():
                with attempt:
                    touched = await self._rebuild_once(days)
        except RetryError as e:
            logger.error("Alert rebuild kept conflicting", days=days, error=str(e.last_attempt.exception()))
            raise AlertRebuildConflict() from e.last_attempt.exception()

        logger.info("Rebuilt stale alerts", days=days, created_or_updated=touched)
        return touched

    async def _rebuild_once(self, days: int) -> int:
        threshold = self.clock() - timedelta(days=days)

        assets = await self.session.execute(
            select(Asset)
            .where(Asset.last_activity_at < threshold)
            .order_by(Asset.last_activity_at.asc())  # type: ignore[attr-defined]
            .limit(MAX_REBUILD_ROWS)
        )
        consumables = await self.session.execute(
            select(Consumable)
            .where(Consumable.last_activity_at < threshold)
            .order_by(Consumable.last_activity_at.asc())  # type: ignore[attr-defined]
            .limit(MAX_REBUILD_ROWS)
        )

        try:
            touched = await self._upsert(TargetType.ASSET, assets.scalars().all())
            touched += await self._upsert(TargetType.CONSUMABLE, consumables.scalars().all())
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning("Alert rebuild conflict, retrying", error=str(e.orig))
            raise
        return touched

    async def _upsert(self, target_type: TargetType, items: Sequence[Asset | Consumable]) -> int:
        if not items:
            return 0

        result = await self.session.execute(
            select(Alert).where(
                Alert.type == AlertType.STALE,
                Alert.target_type == target_type,
                Alert.target_id.in_([item.id for item in items]),  # type: ignore[attr-defined]
            )
        )
        existing = {alert.target_id: alert for alert in result.scalars().all()}

        for item in items:
            title = f"{_TITLE_LABELS[target_type]}: {item.name} ({item.serial})"
            body = f"last update: {ensure_utc(item.last_activity_at).isoformat()}"
            alert = existing.get(item.id)
            if alert is None:
                self.session.add(
                    Alert(type=AlertType.STALE, target_type=target_type, target_id=item.id, title=title, body=body)
                )
            else:
                alert.title = title
                alert.body = body

        await self.session.flush()
        return len(items)

    async def unread_count(self) -> int:
        """Unread alerts that are not snoozed."""
        result = await self.session.execute(
            select(func.count()).select_from(Alert).where(Alert.is_read == False, self._visible())  # noqa: E712
        )
        return result.scalar() or 0

    async def list_alerts(self, *, is_read: bool = False) -> list[Alert]:
        """Newest alerts with the given read flag, snoozed ones hidden."""
        result = await self.session.execute(
            select(Alert)
            .where(Alert.is_read == is_read, self._visible())
            .order_by(Alert.created_at.desc())  # type: ignore[attr-defined]
            .limit(MAX_LIST_ROWS)
        )
        return list(result.scalars().all())

    async def mark_read(self, alert_id: str) -> Alert:
        """Set the read flag. Marking an already-read alert is a no-op."""
        if not is_ulid(alert_id):
            raise AlertNotFound()
        alert = await self.session.get(Alert, alert_id)
        if alert is None:
            raise AlertNotFound()

        alert.is_read = True
        await self.session.commit()
        logger.info("Marked alert read", alert_id=alert_id)
        return alert
