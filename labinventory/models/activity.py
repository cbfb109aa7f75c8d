"""Activity log model (audit trail of inventory writes)."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey
from sqlmodel import Field, SQLModel

from labinventory.models.base import new_ulid, utc_now
from labinventory.models.enums import ActionType, TargetType, str_enum_column_type
from labinventory.models.types import ULIDType


class ActivityLog(SQLModel, table=True):
    """One recorded action against an asset or consumable."""

    __tablename__ = "activity_logs"

    id: str = Field(
        default_factory=new_ulid,
        max_length=26,
        sa_column=Column(ULIDType, primary_key=True),
    )
    actor_id: str = Field(sa_column=Column(ULIDType, ForeignKey("users.id"), nullable=False))
    target_type: TargetType = Field(
        sa_column=Column(str_enum_column_type(TargetType, "targettype"), nullable=False),
    )
    target_id: str = Field(sa_column=Column(ULIDType, nullable=False, index=True))
    action: ActionType = Field(sa_column=Column(str_enum_column_type(ActionType, "actiontype"), nullable=False))

    from_location_id: str | None = Field(default=None, sa_column=Column(ULIDType, nullable=True))
    to_location_id: str | None = Field(default=None, sa_column=Column(ULIDType, nullable=True))
    from_user_id: str | None = Field(default=None, sa_column=Column(ULIDType, nullable=True))
    to_user_id: str | None = Field(default=None, sa_column=Column(ULIDType, nullable=True))
    note: str | None = None

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
