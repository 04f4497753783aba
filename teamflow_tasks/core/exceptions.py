"""Custom exception classes for the application."""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class AppException(Exception):
    """Base application exception.

    All custom exceptions should inherit from this class.
    Follows RFC 7807 Problem Details for HTTP APIs.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        type: Error type identifier (used in RFC 7807 problem details).
        title: Short, human-readable summary of the problem type.
        extra: Additional context-specific information about the error.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        titles = {
            400: "Bad Request",
            404: "Not Found",
            422: "Unprocessable Entity",
            500: "Internal Server Error",
            503: "Service Unavailable",
        }
        return titles.get(status_code, "Error")


class ConfigurationError(AppException):
    """Raised at startup when process configuration is unusable.

    Example:
            raise ConfigurationError("PAGINATION_CURSOR_SECRET must be set in production")
    """

    def __init__(self, detail: str, extra: dict[str, Any] | None = None) -> None:
        super().__init__(
            status_code=500,
            detail=detail,
            type="configuration-error",
            title="Configuration Error",
            extra=extra,
        )


class ValidationException(AppException):
    """Exception raised for validation errors.

    Example:
            raise ValidationException(
            detail="Email address is invalid",
            type="validation-error",
            extra={"field": "email", "value": "invalid@"}
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "validation-error",
        status_code: int = 422,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=status_code,
            detail=detail,
            type=type,
            title="Validation Error",
            extra=extra,
        )


class ValidationCode(StrEnum):
    """Machine-readable code carried by every query validation failure."""

    INVALID_ENUM = "INVALID_ENUM"
    INVALID_FORMAT = "INVALID_FORMAT"
    CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"
    INCOMPATIBLE_WITH_CURSOR = "INCOMPATIBLE_WITH_CURSOR"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    EXPIRED = "EXPIRED"
    QUERY_MISMATCH = "QUERY_MISMATCH"


class QueryValidationError(ValidationException):
    """A list-query parameter was rejected.

    Callers branch on ``field`` and ``code`` rather than on the message.
    ``rejected_value`` is the offending input token when one exists
    (for a sort token such as ``-bogus`` it is the bare key ``bogus``).

    Example:
            raise QueryValidationError("status", ValidationCode.INVALID_ENUM, "archived")
    """

    def __init__(
        self,
        field: str,
        code: ValidationCode,
        rejected_value: str | None = None,
        detail: str | None = None,
    ) -> None:
        self.field = field
        self.code = ValidationCode(code)
        self.rejected_value = rejected_value
        message = detail or f"{field}: {self.code}"
        if rejected_value is not None and detail is None:
            message = f"{message} (rejected: {rejected_value})"
        super().__init__(
            detail=message,
            type="query-validation-error",
            status_code=400,
            extra={"field": field, "code": str(self.code), "rejectedValue": rejected_value},
        )


class CursorError(QueryValidationError):
    """Base class for pagination cursor rejections.

    Each subclass maps to one distinct code so clients can decide whether
    to restart pagination from the first page.
    """

    code_for_class: ValidationCode = ValidationCode.INVALID_FORMAT
    message: str = "invalid cursor"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__("cursor", self.code_for_class, detail=detail or self.message)


class CursorFormatError(CursorError):
    """Cursor is not two base64url segments carrying a valid payload."""

    code_for_class = ValidationCode.INVALID_FORMAT
    message = "invalid cursor format"


class CursorSignatureError(CursorError):
    """Cursor signature does not match its payload under the server secret."""

    code_for_class = ValidationCode.INVALID_SIGNATURE
    message = "invalid cursor signature"


class CursorExpiredError(CursorError):
    """Cursor was issued longer ago than the configured lifetime."""

    code_for_class = ValidationCode.EXPIRED
    message = "cursor expired"


class CursorQueryMismatchError(CursorError):
    """Cursor was issued for a different project or filter set."""

    code_for_class = ValidationCode.QUERY_MISMATCH
    message = "cursor query mismatch"


__all__ = [
    "AppException",
    "ConfigurationError",
    "CursorError",
    "CursorExpiredError",
    "CursorFormatError",
    "CursorQueryMismatchError",
    "CursorSignatureError",
    "QueryValidationError",
    "ValidationCode",
    "ValidationException",
]
