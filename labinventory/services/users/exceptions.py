"""User domain exceptions."""

from labinventory.services.exceptions import ConflictError, NotFoundError


class UserNotFound(NotFoundError):
    message = "User not found."


class UserAlreadyExists(ConflictError):
    message = "User already exists."
