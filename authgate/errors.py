"""Error kinds raised by the authentication core.

Every failing operation raises exactly one ``AuthError`` whose ``kind`` tells
the transport layer which status to answer with. Messages for credential and
reset-token failures are deliberately generic so they do not reveal whether
an account exists.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Stable error codes exposed to API clients."""

    INVALID_INPUT = "INVALID_INPUT"
    CONFLICT = "CONFLICT"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    EXPIRED_OR_INVALID_TOKEN = "EXPIRED_OR_INVALID_TOKEN"


class AuthError(Exception):
    """Failure of an authentication operation."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"AuthError({self.kind.value}, {self.message!r})"


PASSWORD_RULES_MESSAGE = (
    "Password must be at least 8 characters long and contain at least one number and one letter"
)


def invalid_input(message: str) -> AuthError:
    return AuthError(ErrorKind.INVALID_INPUT, message)


def conflict(message: str = "Email already registered") -> AuthError:
    return AuthError(ErrorKind.CONFLICT, message)


def unauthorized(message: str = "Invalid credentials") -> AuthError:
    return AuthError(ErrorKind.UNAUTHORIZED, message)


def forbidden(message: str = "Account is not active") -> AuthError:
    return AuthError(ErrorKind.FORBIDDEN, message)


def not_found(message: str = "User not found") -> AuthError:
    return AuthError(ErrorKind.NOT_FOUND, message)


def expired_or_invalid_token(message: str = "Invalid or expired reset token") -> AuthError:
    return AuthError(ErrorKind.EXPIRED_OR_INVALID_TOKEN, message)
