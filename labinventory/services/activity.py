"""Audit trail writer.

Rows are added to the caller's session and committed with the change
they describe.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from labinventory.models.activity import ActivityLog
from labinventory.models.enums import ActionType, TargetType


def record_activity(
    session: AsyncSession,
    *,
    actor_id: str,
    target_type: TargetType,
    target_id: str,
    action: ActionType,
    from_location_id: str | None = None,
    to_location_id: str | None = None,
    from_user_id: str | None = None,
    to_user_id: str | None = None,
    note: str | None = None,
) -> ActivityLog:
    """Stage an ActivityLog row in the session (no flush)."""
    entry = ActivityLog(
        actor_id=actor_id,
        target_type=target_type,
        target_id=target_id,
        action=action,
        from_location_id=from_location_id,
        to_location_id=to_location_id,
        from_user_id=from_user_id,
        to_user_id=to_user_id,
        note=note,
    )
    session.add(entry)
    return entry
