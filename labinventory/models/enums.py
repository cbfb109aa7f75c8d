"""Enum definitions for database models."""

from enum import StrEnum

from sqlalchemy import Enum


class TargetType(StrEnum):
    """Kind of inventory item a serial or activity refers to."""

    ASSET = "ASSET"
    CONSUMABLE = "CONSUMABLE"


class AssetStatus(StrEnum):
    """Lifecycle status of an asset."""

    AVAILABLE = "AVAILABLE"
    CHECKED_OUT = "CHECKED_OUT"
    BROKEN = "BROKEN"
    DISPOSED = "DISPOSED"


class UserRole(StrEnum):
    """Role of a lab member."""

    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class ActionType(StrEnum):
    """Action recorded in the activity log."""

    CREATE = "CREATE"
    CHECKOUT = "CHECKOUT"
    CHECKIN = "CHECKIN"
    MOVE = "MOVE"
    EDIT = "EDIT"
    ADJUST = "ADJUST"


class AlertType(StrEnum):
    """Reason an alert was raised."""

    STALE = "STALE"


def str_enum_column_type(enum_cls: type[StrEnum], name: str) -> Enum:
    """Portable VARCHAR-backed enum type storing member values."""
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        length=32,
        values_callable=lambda e: [member.value for member in e],
    )
