"""Custom exceptions for the LedgerLens analytics engine.

This module provides the exception hierarchy raised by the engine when a
caller passes parameters that cannot be evaluated, such as a reversed date
window or a zero-length moving average. All exceptions inherit from
LedgerLensError, making it easy to catch every engine-specific error.

Expected numeric edge cases (empty collections, zero denominators) never
raise; they produce zero results instead.

Example:
    try:
        window = DateWindow(start=date(2024, 2, 1), end=date(2024, 1, 1))
    except ValidationError as e:
        logger.warning("bad_window", field=e.field, constraint=e.constraint)
"""

from typing import Any, Optional


class LedgerLensError(Exception):
    """Base exception for all LedgerLens errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the caller can fix the input and retry.

    Example:
        >>> raise LedgerLensError("Something went wrong", details={"code": 500})
        LedgerLensError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize LedgerLensError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error can be fixed by correcting the
                input. Defaults to False.
        """
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


class ValidationError(LedgerLensError):
    """Error raised when an analytics parameter fails validation.

    Raised for operation arguments the engine cannot interpret, e.g. a
    relative window of zero months or a date window whose end precedes its
    start. Record shape is validated by the pydantic models themselves.

    Attributes:
        field: The parameter that failed validation.
        value: The invalid value.
        constraint: The validation constraint that was violated.

    Example:
        >>> raise ValidationError(
        ...     "Window size must be positive",
        ...     field="window_size",
        ...     value=0,
        ...     constraint=">= 1",
        ... )
        ValidationError: Window size must be positive
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
            field: The name of the parameter that failed validation.
            value: The invalid value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by caller correction.
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


__all__ = [
    "LedgerLensError",
    "ValidationError",
]
