"""Alert domain exceptions."""

from labinventory.services.exceptions import ConflictError, NotFoundError


class AlertNotFound(NotFoundError):
    message = "Alert not found."


class AlertRebuildConflict(ConflictError):
    """Another rebuild kept inserting the same alerts."""

    message = "Alerts are being rebuilt concurrently."
