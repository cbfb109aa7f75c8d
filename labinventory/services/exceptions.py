"""Base service exceptions.

These exceptions are raised by the service layer and should be caught
by the API layer and converted to appropriate HTTP responses.
"""


class ServiceError(Exception):
    """Base service exception.

    Subclasses set ``message`` as the client-facing default text.
    """

    message = "Service error."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class NotFoundError(ServiceError):
    """Resource not found."""

    message = "Not found."


class ValidationError(ServiceError):
    """Validation error."""

    message = "Invalid request."


class ConflictError(ServiceError):
    """Resource already exists or is in a conflicting state."""

    message = "Conflict."
