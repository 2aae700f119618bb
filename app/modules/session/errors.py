"""
Typed classification of Supabase Auth failures.

Branching is done on exception classes and the API error ``code`` returned by
Supabase Auth, never on the human-readable message.
"""

from enum import Enum
from typing import Optional

from supabase_auth.errors import (
    AuthApiError,
    AuthError,
    AuthInvalidCredentialsError,
    AuthRetryableError,
    AuthSessionMissingError,
    AuthWeakPasswordError,
)


class AuthErrorKind(str, Enum):
    INVALID_REFRESH_TOKEN = "invalid_refresh_token"
    SESSION_MISSING = "session_missing"
    INVALID_CREDENTIALS = "invalid_credentials"
    USER_EXISTS = "user_exists"
    WEAK_PASSWORD = "weak_password"
    RETRYABLE = "retryable"
    UNKNOWN = "unknown"


_CODE_KINDS = {
    "refresh_token_not_found": AuthErrorKind.INVALID_REFRESH_TOKEN,
    "refresh_token_already_used": AuthErrorKind.INVALID_REFRESH_TOKEN,
    "session_not_found": AuthErrorKind.INVALID_REFRESH_TOKEN,
    "session_expired": AuthErrorKind.INVALID_REFRESH_TOKEN,
    "bad_jwt": AuthErrorKind.INVALID_REFRESH_TOKEN,
    "invalid_credentials": AuthErrorKind.INVALID_CREDENTIALS,
    "email_not_confirmed": AuthErrorKind.INVALID_CREDENTIALS,
    "user_already_exists": AuthErrorKind.USER_EXISTS,
    "email_exists": AuthErrorKind.USER_EXISTS,
    "weak_password": AuthErrorKind.WEAK_PASSWORD,
    "over_request_rate_limit": AuthErrorKind.RETRYABLE,
}


def classify_auth_error(error: BaseException) -> AuthErrorKind:
    if isinstance(error, AuthWeakPasswordError):
        return AuthErrorKind.WEAK_PASSWORD
    if isinstance(error, AuthInvalidCredentialsError):
        return AuthErrorKind.INVALID_CREDENTIALS
    if isinstance(error, AuthSessionMissingError):
        return AuthErrorKind.SESSION_MISSING
    if isinstance(error, AuthRetryableError):
        return AuthErrorKind.RETRYABLE
    if isinstance(error, AuthApiError):
        return _CODE_KINDS.get(getattr(error, "code", None), AuthErrorKind.UNKNOWN)
    return AuthErrorKind.UNKNOWN


class SessionError(Exception):
    """Raised by SessionContext operations; carries the classified kind."""

    def __init__(self, kind: AuthErrorKind, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause

    @classmethod
    def from_auth_error(cls, error: AuthError, message: Optional[str] = None) -> "SessionError":
        return cls(classify_auth_error(error), message or str(error), cause=error)
