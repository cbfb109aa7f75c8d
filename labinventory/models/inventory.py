"""Location, Asset, and Consumable database models."""

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric
from sqlmodel import Field, Relationship, SQLModel

from labinventory.models.base import new_ulid, utc_now
from labinventory.models.enums import AssetStatus, str_enum_column_type
from labinventory.models.types import ULIDType

if TYPE_CHECKING:
    from labinventory.models.user import User


class Location(SQLModel, table=True):
    """Storage place (shelf, room, personal desk). Managed by seeding only."""

    __tablename__ = "locations"

    id: str = Field(
        default_factory=new_ulid,
        max_length=26,
        sa_column=Column(ULIDType, primary_key=True),
    )
    name: str = Field(index=True)
    note: str | None = None
    parent_id: str | None = Field(default=None, sa_column=Column(ULIDType, ForeignKey("locations.id"), nullable=True))


class Asset(SQLModel, table=True):
    """Piece of equipment identified by a reserved serial."""

    __tablename__ = "assets"

    id: str = Field(
        default_factory=new_ulid,
        max_length=26,
        sa_column=Column(ULIDType, primary_key=True),
    )
    serial: str = Field(unique=True, index=True, max_length=16)
    name: str
    category: str = Field(index=True)
    status: AssetStatus = Field(
        default=AssetStatus.AVAILABLE,
        sa_column=Column(str_enum_column_type(AssetStatus, "assetstatus"), nullable=False, index=True),
    )
    budget_code: str | None = None
    purchased_at: date | None = Field(default=None, sa_column=Column(Date, nullable=True))
    note: str | None = None

    current_location_id: str = Field(
        sa_column=Column(ULIDType, ForeignKey("locations.id"), index=True, nullable=False),
    )
    # Borrower, set only while CHECKED_OUT
    current_user_id: str | None = Field(
        default=None,
        sa_column=Column(ULIDType, ForeignKey("users.id"), index=True, nullable=True),
    )

    last_activity_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, onupdate=utc_now),
    )

    # Relationships (eager-loaded explicitly by services)
    current_location: Location = Relationship(
        sa_relationship_kwargs={"foreign_keys": "[Asset.current_location_id]", "lazy": "raise"},
    )
    current_user: Optional["User"] = Relationship(
        sa_relationship_kwargs={"foreign_keys": "[Asset.current_user_id]", "lazy": "raise"},
    )


class Consumable(SQLModel, table=True):
    """Stock item tracked by quantity rather than by borrower."""

    __tablename__ = "consumables"

    id: str = Field(
        default_factory=new_ulid,
        max_length=26,
        sa_column=Column(ULIDType, primary_key=True),
    )
    serial: str = Field(unique=True, index=True, max_length=16)
    name: str
    category: str = Field(index=True)
    unit: str
    current_qty: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(12, 2), nullable=False))
    reorder_threshold: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(12, 2), nullable=False))
    note: str | None = None

    location_id: str = Field(
        sa_column=Column(ULIDType, ForeignKey("locations.id"), index=True, nullable=False),
    )

    last_activity_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, onupdate=utc_now),
    )

    location: Location = Relationship(
        sa_relationship_kwargs={"foreign_keys": "[Consumable.location_id]", "lazy": "raise"},
    )

    @property
    def needs_reorder(self) -> bool:
        return self.current_qty < self.reorder_threshold
