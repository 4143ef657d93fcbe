"""Input checks shared by the primitives."""

from typing import Optional

import numpy as np

from mobspatial.utils.errors import raise_parameter_error, raise_validation_error


def as_value_vector(
    values, n: Optional[int] = None, name: str = "values"
) -> np.ndarray:
    """Convert ``values`` to a finite 1-D float array of optional length ``n``."""
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1:
        raise_validation_error(
            f"{name} must be one-dimensional",
            expected="shape (n,)",
            received=f"shape {arr.shape}",
        )
    if n is not None and len(arr) != n:
        raise_validation_error(
            f"{name} length does not match the number of zones",
            expected=str(n),
            received=str(len(arr)),
            suggestion="Align the value vector to the zone collection before analysis",
        )
    if not np.all(np.isfinite(arr)):
        bad = np.flatnonzero(~np.isfinite(arr))
        raise_validation_error(
            f"{name} contains missing or non-finite entries",
            received=f"positions {bad[:5].tolist()}",
            suggestion="Impute or drop missing values upstream",
        )
    return arr


def as_square_matrix(matrix, n: Optional[int] = None, name: str = "matrix") -> np.ndarray:
    """Convert ``matrix`` to a finite, non-negative square float array."""
    arr = np.asarray(matrix, dtype=float)
    if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
        raise_validation_error(
            f"{name} must be square",
            expected="shape (n, n)",
            received=f"shape {arr.shape}",
        )
    if n is not None and arr.shape[0] != n:
        raise_validation_error(
            f"{name} size does not match the number of zones",
            expected=f"({n}, {n})",
            received=str(arr.shape),
        )
    if not np.all(np.isfinite(arr)):
        raise_validation_error(f"{name} contains non-finite entries")
    if np.any(arr < 0):
        raise_validation_error(f"{name} contains negative entries")
    return arr


def check_positive(name: str, value: float) -> float:
    """Require a finite, strictly positive scalar."""
    if value is None or not np.isfinite(value) or value <= 0:
        raise_parameter_error(name, value, constraint="must be a finite number > 0")
    return float(value)


def check_non_negative(name: str, value: float) -> float:
    """Require a finite scalar >= 0."""
    if value is None or not np.isfinite(value) or value < 0:
        raise_parameter_error(name, value, constraint="must be a finite number >= 0")
    return float(value)
