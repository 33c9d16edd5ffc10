from __future__ import annotations

from .enums import ErrorCode


class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries an ``ErrorCode`` so the HTTP layer can answer with a
    distinguishable, typed failure instead of a generic error.
    """

    code: ErrorCode = ErrorCode.VALIDATION

    def __init__(self, message: str, *, code: ErrorCode | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class MemberNotFoundError(DomainError):
    code = ErrorCode.NOT_FOUND


class MemberInactiveError(DomainError):
    code = ErrorCode.INACTIVE


class ConflictError(DomainError):
    """Duplicate email registration or a second open visit."""

    code = ErrorCode.CONFLICT


class AlreadySignedInError(ConflictError):
    pass


class NoOpenVisitError(DomainError):
    code = ErrorCode.NOT_FOUND


class InvalidOtpError(DomainError):
    code = ErrorCode.NOT_FOUND


class OtpExpiredError(DomainError):
    code = ErrorCode.EXPIRED


class DeliveryError(DomainError):
    """Transport-level email failure (connection refused, auth rejected, ...)."""

    code = ErrorCode.DELIVERY_FAILURE


class StoreError(DomainError):
    """Underlying store unreachable or rejected the statement."""

    code = ErrorCode.STORE_ERROR


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    code = ErrorCode.UNAUTHORIZED


class AuthorizationError(DomainError):
    """Raised when the caller lacks an admin session."""

    code = ErrorCode.UNAUTHORIZED


class NoActiveSessionError(DomainError):
    code = ErrorCode.UNAUTHORIZED
