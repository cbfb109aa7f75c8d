"""Alert inbox services."""

from labinventory.services.alerts.alert_service import AlertService

__all__ = ["AlertService"]
