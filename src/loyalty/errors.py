from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the operator. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested record is not found."""

    def __init__(self, message: str = "Record not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Invalid username or password") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when operator input fails validation."""


class StoreError(Exception):
    """Raised when the backing data store fails to complete an operation.

    The message is meant for logs, not for display.
    """
