"""Standardized errors and warnings for mobspatial.

Provides the error taxonomy shared by every layer plus helpers that keep
messages consistent across the codebase.
"""

from typing import Any, Optional


class MobSpatialError(Exception):
    """Base exception for mobspatial errors."""

    def __init__(
        self,
        message: str,
        suggestion: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        """Initialize mobspatial error.

        Args:
            message: Primary error message.
            suggestion: Optional suggestion for fixing the error.
            details: Optional dictionary with additional error details.
        """
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        """Format error message with suggestion if available."""
        if self.suggestion:
            return f"{self.message}\n\nSuggestion: {self.suggestion}"
        return self.message


class InvalidInputError(MobSpatialError, ValueError):
    """Malformed input: shape mismatch, non-finite values, bad parameters."""

    pass


class DegenerateInputError(MobSpatialError, ValueError):
    """Statistic is undefined for the input (zero variance, no neighbors)."""

    pass


class InsufficientDataError(MobSpatialError, ValueError):
    """Too few zones for the requested statistic."""

    pass


class IsolatedZoneWarning(UserWarning):
    """A zone has no neighbors; its local statistics are undefined."""

    pass


def format_validation_error(
    message: str,
    expected: Optional[str] = None,
    received: Optional[str] = None,
    suggestion: Optional[str] = None,
) -> str:
    """Format a standardized validation error message.

    Args:
        message: Primary error message.
        expected: What was expected (optional).
        received: What was received (optional).
        suggestion: How to fix the error (optional).

    Returns:
        Formatted error message string.
    """
    parts = [message]
    if expected and received:
        parts.append(f"Expected: {expected}, Received: {received}")
    elif expected:
        parts.append(f"Expected: {expected}")
    elif received:
        parts.append(f"Received: {received}")
    if suggestion:
        parts.append(f"Suggestion: {suggestion}")
    return "\n".join(parts)


def format_parameter_error(
    parameter_name: str,
    value: Any,
    valid_values: Optional[list[str]] = None,
    constraint: Optional[str] = None,
) -> str:
    """Format a standardized parameter error message.

    Args:
        parameter_name: Name of the invalid parameter.
        value: Invalid value that was provided.
        valid_values: List of valid values (optional).
        constraint: Constraint that was violated (optional).

    Returns:
        Formatted error message string.
    """
    parts = [f"Invalid value for parameter '{parameter_name}': {value}"]
    if valid_values:
        parts.append(f"Valid values: {', '.join(map(str, valid_values))}")
    if constraint:
        parts.append(f"Constraint: {constraint}")
    return "\n".join(parts)


def raise_validation_error(
    message: str,
    expected: Optional[str] = None,
    received: Optional[str] = None,
    suggestion: Optional[str] = None,
) -> None:
    """Raise a standardized validation error.

    Raises:
        InvalidInputError: Always raises this exception.
    """
    error_msg = format_validation_error(message, expected, received)
    raise InvalidInputError(
        error_msg,
        suggestion=suggestion,
        details={"expected": expected, "received": received},
    )


def raise_parameter_error(
    parameter_name: str,
    value: Any,
    valid_values: Optional[list[str]] = None,
    constraint: Optional[str] = None,
    suggestion: Optional[str] = None,
) -> None:
    """Raise a standardized parameter error.

    Args:
        parameter_name: Name of the invalid parameter.
        value: Invalid value that was provided.
        valid_values: List of valid values (optional).
        constraint: Constraint that was violated (optional).
        suggestion: How to fix the error (optional).

    Raises:
        InvalidInputError: Always raises this exception.
    """
    error_msg = format_parameter_error(parameter_name, value, valid_values, constraint)
    raise InvalidInputError(
        error_msg,
        suggestion=suggestion,
        details={"parameter": parameter_name, "value": value},
    )
