"""
Error taxonomy for the token lifecycle.

Every error carries an ErrorKind so the HTTP layer (and any other caller)
can branch on kind instead of on class names. The authorization gate
collapses all token errors into Unauthorized before they reach callers of
protected resources.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    UNKNOWN_TOKEN = "UNKNOWN_TOKEN"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    TOKEN_NOT_FOUND = "TOKEN_NOT_FOUND"
    DUPLICATE_TOKEN = "DUPLICATE_TOKEN"


class AuthError(Exception):
    kind: ErrorKind = ErrorKind.UNAUTHORIZED
    default_message = "Unauthorized"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class TokenError(AuthError):
    """Base for failures while validating a presented token."""


class InvalidSignature(TokenError):
    kind = ErrorKind.INVALID_TOKEN
    default_message = "Invalid token"


# the refresh flow calls this "invalid token"; same failure
InvalidToken = InvalidSignature


class TokenExpired(TokenError):
    kind = ErrorKind.TOKEN_EXPIRED
    default_message = "Token expired"


class UnknownToken(TokenError):
    """Well-formed token that is not (or no longer) registered."""
    kind = ErrorKind.UNKNOWN_TOKEN
    default_message = "Unknown or revoked refresh token"


class UserNotFound(AuthError):
    kind = ErrorKind.USER_NOT_FOUND
    default_message = "User not found"


class Unauthorized(AuthError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "Unauthorized"


class RegistryError(AuthError):
    """Raised by the refresh token registry."""


class TokenNotFound(RegistryError):
    kind = ErrorKind.TOKEN_NOT_FOUND
    default_message = "Refresh token not registered"


class DuplicateToken(RegistryError):
    kind = ErrorKind.DUPLICATE_TOKEN
    default_message = "Refresh token already registered"
