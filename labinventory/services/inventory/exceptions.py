"""Inventory domain exceptions."""

from labinventory.services.exceptions import NotFoundError, ValidationError


class AssetNotFound(NotFoundError):
    message = "Asset not found."


class ConsumableNotFound(NotFoundError):
    message = "Consumable not found."


class LocationNotFound(NotFoundError):
    message = "Location not found."


class InsufficientQuantity(ValidationError):
    """Adjustment would take stock below zero."""

    message = "Quantity cannot be negative."
