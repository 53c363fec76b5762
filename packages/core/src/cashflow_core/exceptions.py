"""Custom exceptions for the cash flow forecasting packages.

This module provides a hierarchy of exception classes for consistent error
handling across the engine and the jobs that wrap it. All exceptions inherit
from CashflowError, making it easy to catch all application-specific errors.

The forecasting engine itself prefers graceful degradation: malformed amounts
are clamped and unknown frequencies fall back to monthly. These exceptions are
raised at the boundaries (strict parsing of user input, configuration, and
data-access collaborators).

Example:
    try:
        frequency = Frequency.parse(raw, strict=True)
    except ValidationError as e:
        if e.recoverable:
            # Ask the user to pick a supported frequency
            ...
    except CashflowError as e:
        logger.error("unexpected_failure", error=str(e))
"""

from typing import Any, Optional


class CashflowError(Exception):
    """Base exception for all cash flow application errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(CashflowError):
    """Error raised when user-provided data fails validation.

    Raised at the data-entry boundary, for example when a frequency string
    is parsed strictly and does not name a supported recurrence rule.

    Attributes:
        field: The field that failed validation.
        value: The invalid value (if safe to include).
        constraint: The validation constraint that was violated.

    Example:
        >>> raise ValidationError(
        ...     "Unsupported frequency",
        ...     field="frequency",
        ...     value="fortnightly",
        ...     constraint="Must be one of: weekly, biweekly, ...",
        ... )
        ValidationError: Unsupported frequency
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error description.
            field: The name of the field that failed validation.
            value: The invalid value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by user correction.
                Defaults to True.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class ConfigurationError(CashflowError):
    """Error raised when configuration is invalid or missing.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


class DataSourceError(CashflowError):
    """Error raised when a data-access collaborator fails.

    The engine never raises this; it is raised by (or on behalf of) the
    collaborators that fetch accounts, income and bills for a user.

    Attributes:
        user_id: The user whose data could not be fetched.
        operation: The collaborator operation that failed.
    """

    def __init__(
        self,
        message: str,
        *,
        user_id: Optional[str] = None,
        operation: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize DataSourceError.

        Args:
            message: Human-readable error description.
            user_id: Identifier of the user being processed.
            operation: The data-access operation being attempted.
            details: Optional dictionary with additional context.
            recoverable: Whether the operation can be retried. Defaults to True
                since database outages are usually transient.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.user_id = user_id
        self.operation = operation

        if user_id:
            self.details["user_id"] = user_id
        if operation:
            self.details["operation"] = operation


__all__ = [
    "CashflowError",
    "ValidationError",
    "ConfigurationError",
    "DataSourceError",
]
