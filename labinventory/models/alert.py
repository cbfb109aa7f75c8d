"""Alert inbox model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from labinventory.models.base import new_ulid, utc_now
from labinventory.models.enums import AlertType, TargetType, str_enum_column_type
from labinventory.models.types import ULIDType

# One alert per kind and item; rebuilding updates it in place
ALERT_TARGET_CONSTRAINT = UniqueConstraint("type", "target_type", "target_id", name="uq_alert_type_target")


class Alert(SQLModel, table=True):
    """Notification about an inventory item, readable and snoozable."""

    __tablename__ = "alerts"
    __table_args__ = (ALERT_TARGET_CONSTRAINT,)

    id: str = Field(
        default_factory=new_ulid,
        max_length=26,
        sa_column=Column(ULIDType, primary_key=True),
    )
    type: AlertType = Field(sa_column=Column(str_enum_column_type(AlertType, "alerttype"), nullable=False))
    target_type: TargetType = Field(
        sa_column=Column(str_enum_column_type(TargetType, "targettype"), nullable=False),
    )
    target_id: str = Field(sa_column=Column(ULIDType, nullable=False))
    title: str
    body: str

    is_read: bool = Field(default=False, index=True)
    snooze_until: datetime | None = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))

    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, onupdate=utc_now),
    )
