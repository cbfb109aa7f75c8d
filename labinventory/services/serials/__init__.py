"""Serial allocation services."""

from labinventory.services.serials.serial_service import SerialService

__all__ = ["SerialService"]
