"""Database models."""

# ruff: noqa: I001 - Import order matters for SQLAlchemy relationship resolution
from sqlmodel import SQLModel

from labinventory.models.enums import ActionType, AlertType, AssetStatus, TargetType, UserRole

# user.py must be imported before inventory.py (Asset references User)
from labinventory.models.user import User
from labinventory.models.inventory import Asset, Consumable, Location
from labinventory.models.activity import ActivityLog
from labinventory.models.serial import SerialCounter, SerialReservation
from labinventory.models.alert import Alert

__all__ = [
    "SQLModel",
    "User",
    "Location",
    "Asset",
    "Consumable",
    "ActivityLog",
    "SerialCounter",
    "SerialReservation",
    "Alert",
    "ActionType",
    "AlertType",
    "AssetStatus",
    "TargetType",
    "UserRole",
]
