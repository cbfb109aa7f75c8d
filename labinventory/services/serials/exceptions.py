"""Serial allocation exceptions."""

from labinventory.services.exceptions import ServiceError, ValidationError


class SerialNotReserved(ValidationError):
    """No reservation row exists for the serial."""

    message = "Serial is not reserved."


class SerialTypeMismatch(ValidationError):
    """Reservation was made for a different item type."""

    message = "Serial type mismatch."


class SerialReservationExpired(ValidationError):
    """Reservation TTL has elapsed."""

    message = "Serial reservation expired."


class SerialAllocationExhausted(ServiceError):
    """Every reserve attempt lost a uniqueness race."""

    message = "Failed to allocate a serial."


class SerialSequenceExhausted(SerialAllocationExhausted):
    """The year's six-digit sequence has no free value left."""
