"""Serial counter and reservation models."""

from datetime import datetime

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel

from labinventory.models.base import utc_now
from labinventory.models.enums import TargetType, str_enum_column_type
from labinventory.models.types import ULIDType


class SerialCounter(SQLModel, table=True):
    """Next sequence number per serial prefix (two-digit year).

    Read with SELECT ... FOR UPDATE and incremented inside the same
    transaction that inserts the reservation.
    """

    __tablename__ = "serial_counters"

    prefix: str = Field(primary_key=True, max_length=8)
    next_value: int = Field(default=1)


class SerialReservation(SQLModel, table=True):
    """Time-boxed claim on a serial, deleted when an entity is created with it.

    Expired rows are never swept by the request path; they are ignored by
    consumption and still block the serial during collision probing.
    """

    __tablename__ = "serial_reservations"

    serial: str = Field(primary_key=True, max_length=16)
    type: TargetType = Field(sa_column=Column(str_enum_column_type(TargetType, "targettype"), nullable=False))
    reserved_by: str = Field(sa_column=Column(ULIDType, nullable=False))
    expires_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False, index=True))
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
