"""Utility modules for mobspatial."""

from mobspatial.utils.errors import (
    DegenerateInputError,
    InsufficientDataError,
    InvalidInputError,
    IsolatedZoneWarning,
    MobSpatialError,
    format_parameter_error,
    format_validation_error,
    raise_parameter_error,
    raise_validation_error,
)

__all__ = [
    "MobSpatialError",
    "InvalidInputError",
    "DegenerateInputError",
    "InsufficientDataError",
    "IsolatedZoneWarning",
    "format_validation_error",
    "format_parameter_error",
    "raise_validation_error",
    "raise_parameter_error",
]
