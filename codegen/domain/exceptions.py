"""Domain exceptions for the code generator.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.

Transient allocation conflicts are not exceptions; they are returned as
outcomes (see ReservationOutcome) and contained by the retry loop.
"""

from typing import Any


class CodeGenException(Exception):
    """Base exception for all code generator errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, pattern).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(CodeGenException):
    """Raised when input validation fails (e.g. unknown override key or bad value)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ConfigurationException(CodeGenException):
    """Raised when a named pattern key is requested but not defined."""

    def __init__(self, pattern_key: str) -> None:
        """Initialize with the missing pattern key.

        Args:
            pattern_key: The key that has no pattern definition.
        """
        super().__init__(
            f"Code pattern '{pattern_key}' not found in configuration.",
            "CONFIGURATION_ERROR",
            {"pattern_key": pattern_key},
        )


class PatternMismatchException(CodeGenException):
    """Raised when a code does not structurally match the active pattern."""

    def __init__(self, code: str, pattern: str) -> None:
        super().__init__(
            f"Code '{code}' does not match the expected pattern '{pattern}'.",
            "PATTERN_MISMATCH",
            {"code": code, "pattern": pattern},
        )


class AllocationExhaustedException(CodeGenException):
    """Raised when no sequence could be reserved within max_attempts.

    Carries the detail of the last conflict observed by the retry loop.
    """

    def __init__(self, attempts: int, last_conflict: str | None) -> None:
        """Initialize with attempt count and last conflict detail.

        Args:
            attempts: Number of attempts made.
            last_conflict: Detail of the last conflict, if any.
        """
        super().__init__(
            f"Failed to generate code after {attempts} attempts: "
            f"{last_conflict or 'Unknown error.'}",
            "ALLOCATION_EXHAUSTED",
            {"attempts": attempts, "last_conflict": last_conflict},
        )


class SqlNotConfiguredException(CodeGenException):
    """Raised when an operation requires the SQL store but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
