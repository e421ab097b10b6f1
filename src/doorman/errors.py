from abc import ABC
from typing import ClassVar


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """

    code: ClassVar[str] = "BAD_REQUEST"
    default_message: ClassVar[str] = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    code = "NOT_FOUND"
    default_message = "Document not found"


class IdentityNotFoundError(NotFoundError):
    """Raised when no account is registered for an email address."""

    code = "IDENTITY_NOT_FOUND"
    default_message = "No account is registered for this email"


class AuthenticationError(UserError):
    """Raised when authentication fails.

    The message never says whether the username or the password was wrong.
    """

    code = "AUTH_FAILED"
    default_message = "Invalid username or password"


class ValidationError(UserError):
    """Raised when user input fails validation."""

    code = "INVALID_INPUT"
    default_message = "Invalid input"


class InvalidInputError(ValidationError):
    """Raised when a required value is missing or empty."""


class WeakCredentialError(ValidationError):
    code = "WEAK_CREDENTIAL"
    default_message = "Password is too short"


class IdentityTakenError(ValidationError):
    code = "IDENTITY_TAKEN"
    default_message = "Username is already taken"


class ReservedIdentityError(ValidationError):
    code = "RESERVED_IDENTITY"
    default_message = "Username contains a reserved word"


class TokenInvalidError(ValidationError):
    """Raised when a reset token was never issued, already used, superseded or expired."""

    code = "TOKEN_INVALID_OR_EXPIRED"
    default_message = "Reset link is invalid or has expired"


class ServerError(Exception):
    """Base class for failures the client cannot correct.

    The message is logged server-side; clients only see a generic text.
    """

    code: ClassVar[str] = "SERVER_ERROR"
    public_message: ClassVar[str] = "An unexpected error occurred."


class StorageError(ServerError):
    """Raised when the database rejects or fails an operation."""

    code = "STORAGE_ERROR"
    public_message = "Storage is temporarily unavailable."


class DeliveryError(ServerError):
    """Raised when an email could not be delivered."""

    code = "DELIVERY_ERROR"
    public_message = "Could not send the email, please try again."
