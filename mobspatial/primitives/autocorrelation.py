"""Global spatial autocorrelation: Moran's I and Geary's C.

Both statistics are computed with dense matrix-vector products over a
(row-standardized) spatial weights matrix.
"""

import logging
from dataclasses import dataclass
from typing import Literal, Union

import numpy as np
from scipy import stats

from mobspatial.primitives._validation import as_value_vector
from mobspatial.primitives.weights import SpatialWeights, weights_matrix
from mobspatial.utils.errors import (
    DegenerateInputError,
    InsufficientDataError,
    raise_parameter_error,
)

logger = logging.getLogger(__name__)

SIGNIFICANCE_LEVEL = 0.05


@dataclass(frozen=True)
class MoranResult:
    """Results from Moran's I spatial autocorrelation test.

    Attributes:
        statistic: Moran's I statistic (roughly -1 to 1).
        expected_value: Expected value under the null hypothesis, -1 / (n - 1).
        variance: Variance of I under the null hypothesis.
        z_score: Standardized z-score.
        p_value: Two-tailed p-value from the standard normal.
        significant: Whether p_value < 0.05.
        assumption: Null variance assumption ('randomization' or 'normality').
    """

    statistic: float
    expected_value: float
    variance: float
    z_score: float
    p_value: float
    significant: bool
    assumption: str = "randomization"

    def __repr__(self) -> str:
        """String representation."""
        significance = "***" if self.p_value < 0.001 else "**" if self.p_value < 0.01 else "*" if self.p_value < 0.05 else ""
        return (
            f"MoranResult(I={self.statistic:.4f}, z={self.z_score:.2f}, "
            f"p={self.p_value:.4f}{significance})"
        )

    @property
    def interpretation(self) -> str:
        return interpret_autocorrelation(self)


@dataclass(frozen=True)
class GearyResult:
    """Results from Geary's C.

    Attributes:
        statistic: Geary's C statistic (typically 0 to 2).
        expected_value: Expected value under the null hypothesis, always 1.0.
        interpretation: Qualitative reading of C against 1.
    """

    statistic: float
    expected_value: float
    interpretation: str

    def __repr__(self) -> str:
        """String representation."""
        return f"GearyResult(C={self.statistic:.4f}, {self.interpretation})"


def _centered(values, weights) -> tuple[np.ndarray, np.ndarray, float]:
    """Validate inputs and return (centered values, W, sum of squares)."""
    x = as_value_vector(values)
    w = weights_matrix(weights, len(x))
    if np.all(x == x[0]):
        raise DegenerateInputError(
            "Values are constant; spatial autocorrelation is undefined",
            suggestion="Check the aggregation that produced the value vector",
        )
    centered = x - x.mean()
    return centered, w, float(centered @ centered)


def _weights_sum(w: np.ndarray) -> float:
    s0 = float(w.sum())
    if s0 == 0:
        raise DegenerateInputError(
            "Sum of weights is zero - no spatial relationships",
            suggestion="Increase the distance threshold or use k-nearest neighbors",
        )
    return s0


def morans_i(
    values: np.ndarray,
    weights: Union[SpatialWeights, np.ndarray],
    assumption: Literal["randomization", "normality"] = "randomization",
) -> MoranResult:
    """Compute Moran's I statistic for spatial autocorrelation.

    Moran's I measures spatial autocorrelation:
    - I > 0: Positive autocorrelation (similar values cluster)
    - I < 0: Negative autocorrelation (dissimilar values are neighbors)
    - I ≈ -1/(n-1): No spatial autocorrelation

    The variance is the closed-form Cliff-Ord variance, under either the
    randomization assumption (default, exact permutation variance) or the
    normality assumption.

    Args:
        values: Array of values (n_observations,).
        weights: SpatialWeights object or (n, n) weights matrix.
        assumption: 'randomization' (default) or 'normality'.

    Returns:
        MoranResult with statistic, moments, z-score and two-tailed p-value.

    Raises:
        InsufficientDataError: If fewer than 4 zones are given.
        DegenerateInputError: If values are constant or no zone has neighbors.

    Example:
        >>> from mobspatial.primitives.weights import create_knn_weights
        >>> weights = create_knn_weights(coords, k=8)
        >>> result = morans_i(values, weights)
        >>> print(f"Moran's I: {result.statistic:.4f}, p-value: {result.p_value:.4f}")
    """
    if assumption not in ("randomization", "normality"):
        raise_parameter_error(
            "assumption", assumption, valid_values=["randomization", "normality"]
        )
    x = as_value_vector(values)
    n = len(x)
    if n < 4:
        raise InsufficientDataError(
            f"Moran's I variance needs at least 4 zones, got {n}"
        )

    z, w, m2 = _centered(x, weights)
    s0 = _weights_sum(w)

    statistic = (n / s0) * float(z @ w @ z) / m2
    expected = -1.0 / (n - 1)

    s1 = 0.5 * float(np.sum((w + w.T) ** 2))
    s2 = float(np.sum((w.sum(axis=1) + w.sum(axis=0)) ** 2))

    if assumption == "normality":
        variance = (n**2 * s1 - n * s2 + 3 * s0**2) / ((n**2 - 1) * s0**2) - expected**2
    else:
        b2 = n * float(np.sum(z**4)) / m2**2
        variance = (
            n * ((n**2 - 3 * n + 3) * s1 - n * s2 + 3 * s0**2)
            - b2 * ((n**2 - n) * s1 - 2 * n * s2 + 6 * s0**2)
        ) / ((n - 1) * (n - 2) * (n - 3) * s0**2) - expected**2

    if variance <= 0:
        raise DegenerateInputError(
            f"Moran's I variance is not positive ({variance:.3g}) for this weights matrix"
        )

    z_score = (statistic - expected) / np.sqrt(variance)
    p_value = float(2.0 * stats.norm.sf(abs(z_score)))
    logger.debug(f"Moran's I sums: S0={s0:.4f}, S1={s1:.4f}, S2={s2:.4f}")

    return MoranResult(
        statistic=float(statistic),
        expected_value=expected,
        variance=float(variance),
        z_score=float(z_score),
        p_value=p_value,
        significant=p_value < SIGNIFICANCE_LEVEL,
        assumption=assumption,
    )


def gearys_c(
    values: np.ndarray,
    weights: Union[SpatialWeights, np.ndarray],
) -> GearyResult:
    """Compute Geary's C statistic for spatial autocorrelation.

    Geary's C is similar to Moran's I but more sensitive to local differences:
    - C < 1: Positive autocorrelation (similar values cluster)
    - C > 1: Negative autocorrelation (dissimilar values are neighbors)
    - C = 1: No spatial autocorrelation

    Only the point estimate is computed; no significance test.

    Args:
        values: Array of values (n_observations,).
        weights: SpatialWeights object or (n, n) weights matrix.

    Returns:
        GearyResult with statistic, expected value 1.0 and interpretation.
    """
    x = as_value_vector(values)
    n = len(x)
    if n < 2:
        raise InsufficientDataError(f"Geary's C needs at least 2 zones, got {n}")

    z, w, m2 = _centered(x, weights)
    s0 = _weights_sum(w)

    # sum_ij w_ij (z_i - z_j)^2 expanded into row and column sums
    sq = z**2
    numerator = float(sq @ w.sum(axis=1) - 2.0 * (z @ w @ z) + sq @ w.sum(axis=0))
    statistic = ((n - 1) / (2.0 * s0)) * numerator / m2

    if statistic < 1:
        interpretation = "positive autocorrelation"
    elif statistic > 1:
        interpretation = "negative autocorrelation"
    else:
        interpretation = "no autocorrelation"

    return GearyResult(
        statistic=float(statistic),
        expected_value=1.0,
        interpretation=interpretation,
    )


def interpret_autocorrelation(moran: MoranResult) -> str:
    """Describe a Moran's I result in one sentence."""
    if moran.significant:
        if moran.statistic > moran.expected_value:
            return "Significant positive spatial autocorrelation - similar values cluster together"
        return "Significant negative spatial autocorrelation - dissimilar values are neighbors"
    return "No significant spatial autocorrelation - values are randomly distributed"
