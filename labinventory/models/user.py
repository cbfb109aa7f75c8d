"""User model (lab members and the synthetic SYSTEM actor)."""

from datetime import datetime

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel

from labinventory.models.base import new_ulid, utc_now
from labinventory.models.enums import UserRole, str_enum_column_type
from labinventory.models.types import ULIDType


class User(SQLModel, table=True):
    """Lab member who can borrow assets."""

    __tablename__ = "users"

    id: str = Field(
        default_factory=new_ulid,
        max_length=26,
        sa_column=Column(ULIDType, primary_key=True),
    )
    name: str
    email: str = Field(unique=True, index=True)
    role: UserRole = Field(
        default=UserRole.MEMBER,
        sa_column=Column(str_enum_column_type(UserRole, "userrole"), nullable=False),
    )
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
