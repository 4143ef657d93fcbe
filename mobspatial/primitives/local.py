"""Local indicators of spatial association.

Provides tools for:
- Local Moran's I (LISA) with standardized values and spatial lag
- Conditional permutation pseudo p-values for LISA
- Getis-Ord Gi* hotspot statistic
"""

import logging
import warnings
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
from scipy import stats

from mobspatial.primitives._kernels import conditional_permutation_lisa
from mobspatial.primitives._validation import as_value_vector, check_positive
from mobspatial.primitives.weights import SpatialWeights, weights_matrix
from mobspatial.utils.errors import (
    DegenerateInputError,
    InsufficientDataError,
    IsolatedZoneWarning,
    raise_parameter_error,
)

logger = logging.getLogger(__name__)

GI_HOT_SPOT = "Hot Spot"
GI_COLD_SPOT = "Cold Spot"
GI_NOT_SIGNIFICANT = "Not Significant"


@dataclass
class LocalMoranResult:
    """Per-zone local Moran's I.

    Attributes:
        lisa: Local Moran's I per zone; NaN for isolated zones.
        standardized: Standardized values z = (x - mean) / std.
        spatial_lag: Row-weighted mean of neighbors' standardized values;
            NaN for isolated zones.
        isolated: Boolean mask of zones without neighbors.
        p_values: Conditional permutation pseudo p-values, or None when no
            permutation test was run.
    """

    lisa: np.ndarray
    standardized: np.ndarray
    spatial_lag: np.ndarray
    isolated: np.ndarray
    p_values: Optional[np.ndarray] = None

    def __len__(self) -> int:
        return len(self.lisa)

    def __repr__(self) -> str:
        """String representation."""
        perm = ", permutation p-values" if self.p_values is not None else ""
        return (
            f"LocalMoranResult(n={len(self.lisa)}, "
            f"mean_lisa={np.nanmean(self.lisa):.4f}, "
            f"isolated={int(self.isolated.sum())}{perm})"
        )


@dataclass
class GetisOrdResult:
    """Results from Getis-Ord Gi* hotspot detection.

    Attributes:
        gi_star: Standardized Gi* (or Gi) statistic per zone; NaN where undefined.
        p_values: Two-tailed p-values from the standard normal.
        labels: 'Hot Spot', 'Cold Spot', 'Not Significant', or None where undefined.
        star: Whether the focal zone was included in its own neighborhood.
    """

    gi_star: np.ndarray
    p_values: np.ndarray
    labels: np.ndarray
    star: bool = True

    @property
    def hotspots(self) -> np.ndarray:
        return self.labels == GI_HOT_SPOT

    @property
    def coldspots(self) -> np.ndarray:
        return self.labels == GI_COLD_SPOT

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"GetisOrdResult(n_hotspots={int(self.hotspots.sum())}, "
            f"n_coldspots={int(self.coldspots.sum())}, "
            f"mean_gi={np.nanmean(self.gi_star):.4f})"
        )


def _isolated_rows(w: np.ndarray, weights: Union[SpatialWeights, np.ndarray]) -> np.ndarray:
    if isinstance(weights, SpatialWeights):
        return weights.isolated
    return w.sum(axis=1) == 0


def _warn_isolated(isolated: np.ndarray, what: str) -> None:
    if isolated.any():
        warnings.warn(
            f"{what} undefined for {int(isolated.sum())} isolated zone(s): "
            f"{np.flatnonzero(isolated)[:10].tolist()}",
            IsolatedZoneWarning,
            stacklevel=3,
        )


def standardize(values: np.ndarray) -> np.ndarray:
    """Standardize values with the population standard deviation.

    Raises:
        DegenerateInputError: If values are constant.
    """
    x = as_value_vector(values)
    sigma = x.std()
    if sigma == 0 or np.all(x == x[0]):
        raise DegenerateInputError(
            "Values are constant; standardized values are undefined"
        )
    return (x - x.mean()) / sigma


def spatial_lag(
    values: np.ndarray,
    weights: Union[SpatialWeights, np.ndarray],
) -> np.ndarray:
    """Weighted sum of neighbors' values, W @ values.

    Isolated zones get NaN rather than zero.
    """
    x = as_value_vector(values)
    w = weights_matrix(weights, len(x))
    lag = w @ x
    lag[_isolated_rows(w, weights)] = np.nan
    return lag


def _pack_neighbors(w: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    counts = (w > 0).sum(axis=1)
    packed = np.zeros((len(w), max(int(counts.max()), 1)))
    for i in range(len(w)):
        packed[i, : counts[i]] = w[i, w[i] > 0]
    return packed, counts.astype(np.int64)


def _permutation_p_values(
    centered: np.ndarray,
    w: np.ndarray,
    lisa: np.ndarray,
    variance: float,
    permutations: int,
    seed: Optional[int],
) -> np.ndarray:
    n = len(centered)
    packed, counts = _pack_neighbors(w)
    k_max = packed.shape[1]
    rng = np.random.default_rng(seed)
    random_ids = np.argsort(rng.random((permutations, n - 1)), axis=1)[:, :k_max]

    simulated = conditional_permutation_lisa(
        centered,
        packed,
        counts,
        np.ascontiguousarray(random_ids, dtype=np.int64),
        variance,
    )
    larger = (simulated >= lisa[:, np.newaxis]).sum(axis=1)
    larger = np.minimum(larger, permutations - larger)
    p_values = (larger + 1.0) / (permutations + 1.0)
    p_values[counts == 0] = np.nan
    return p_values


def local_moran(
    values: np.ndarray,
    weights: Union[SpatialWeights, np.ndarray],
    permutations: int = 0,
    seed: Optional[int] = None,
) -> LocalMoranResult:
    """Compute local Moran's I (LISA) for each zone.

    LISA_i = ((x_i - mean) / var) * sum_j W_ij (x_j - mean), with the
    population variance. With row-standardized weights the LISA values sum to
    S0 times the global Moran's I.

    Args:
        values: Array of values (n_observations,).
        weights: SpatialWeights object or (n, n) weights matrix.
        permutations: Number of conditional permutations for pseudo p-values,
            default 0 (no permutation test).
        seed: Seed for the permutation draws.

    Returns:
        LocalMoranResult with LISA, standardized values and spatial lag.

    Example:
        >>> result = local_moran(values, weights)
        >>> labels = classify_hotspots(result.standardized, result.spatial_lag, result.lisa)
    """
    x = as_value_vector(values)
    w = weights_matrix(weights, len(x))
    if isinstance(permutations, bool) or int(permutations) != permutations or permutations < 0:
        raise_parameter_error(
            "permutations", permutations, constraint="must be an integer >= 0"
        )

    z = standardize(x)
    centered = x - x.mean()
    variance = float(centered @ centered) / len(x)

    isolated = _isolated_rows(w, weights)
    lisa = (centered / variance) * (w @ centered)
    lag = w @ z
    lisa[isolated] = np.nan
    lag[isolated] = np.nan
    _warn_isolated(isolated, "Local Moran's I")

    p_values = None
    if permutations > 0:
        p_values = _permutation_p_values(
            centered, w, lisa, variance, int(permutations), seed
        )
        logger.info(f"Ran {permutations} conditional permutations for {len(x)} zones")

    return LocalMoranResult(
        lisa=lisa,
        standardized=z,
        spatial_lag=lag,
        isolated=isolated,
        p_values=p_values,
    )


def getis_ord_gi_star(
    values: np.ndarray,
    weights: Union[SpatialWeights, np.ndarray],
    star: bool = True,
    alpha: float = 0.05,
) -> GetisOrdResult:
    """Compute the Getis-Ord local statistic for hotspot detection.

    Works on the binary neighbor structure of ``weights``. With ``star`` the
    focal zone is part of its own neighborhood (Gi*); otherwise the focal
    value is excluded from the mean and variance (Gi).

    Args:
        values: Array of values (n_observations,).
        weights: SpatialWeights object or (n, n) weights matrix.
        star: Include the focal zone (Gi*), default True.
        alpha: Significance level for Hot Spot / Cold Spot labels, default 0.05.

    Returns:
        GetisOrdResult with statistics, p-values and labels.
    """
    x = as_value_vector(values)
    n = len(x)
    w = weights_matrix(weights, n)
    check_positive("alpha", alpha)
    if n < 3:
        raise InsufficientDataError(f"Getis-Ord statistic needs at least 3 zones, got {n}")
    if np.all(x == x[0]):
        raise DegenerateInputError("Values are constant; Getis-Ord statistic is undefined")

    isolated = _isolated_rows(w, weights)
    b = (w > 0).astype(float)

    with np.errstate(divide="ignore", invalid="ignore"):
        if star:
            np.fill_diagonal(b, 1.0)
            w_i = b.sum(axis=1)
            s1_i = (b**2).sum(axis=1)
            mean = x.mean()
            s = np.sqrt((x**2).mean() - mean**2)
            numerator = b @ x - mean * w_i
            denominator = s * np.sqrt((n * s1_i - w_i**2) / (n - 1))
        else:
            w_i = b.sum(axis=1)
            s1_i = (b**2).sum(axis=1)
            mean_i = (x.sum() - x) / (n - 1)
            var_i = ((x**2).sum() - x**2) / (n - 1) - mean_i**2
            numerator = b @ x - mean_i * w_i
            denominator = np.sqrt(var_i) * np.sqrt(((n - 1) * s1_i - w_i**2) / (n - 2))
        gi = numerator / denominator

    # with the focal zone included an isolated zone still has a neighborhood
    undefined = ~np.isfinite(gi) | (denominator <= 0)
    if not star:
        undefined |= isolated
    gi[undefined] = np.nan
    _warn_isolated(undefined, "Getis-Ord statistic")

    p_values = 2.0 * stats.norm.sf(np.abs(gi))
    labels = np.full(n, GI_NOT_SIGNIFICANT, dtype=object)
    labels[(gi > 0) & (p_values < alpha)] = GI_HOT_SPOT
    labels[(gi < 0) & (p_values < alpha)] = GI_COLD_SPOT
    labels[undefined] = None

    logger.info(
        f"Getis-Ord {'Gi*' if star else 'Gi'}: "
        f"{int((labels == GI_HOT_SPOT).sum())} hot spots, "
        f"{int((labels == GI_COLD_SPOT).sum())} cold spots"
    )
    return GetisOrdResult(gi_star=gi, p_values=p_values, labels=labels, star=star)
