"""Spatial weights construction from zone centroids.

Provides tools for:
- Pairwise centroid distance matrices
- Distance-band (inverse distance) and k-nearest neighbor rules
- Row standardization with isolated-zone flagging
"""

import logging
import warnings
from dataclasses import dataclass
from typing import Literal, Union

import numpy as np
from scipy.spatial.distance import cdist

from mobspatial.objects.zoneset import ZoneSet
from mobspatial.primitives._validation import as_square_matrix, check_positive
from mobspatial.utils.errors import (
    InsufficientDataError,
    IsolatedZoneWarning,
    raise_parameter_error,
    raise_validation_error,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DistanceBandRule:
    """Neighbors are zones within ``threshold`` metres, weighted 1 / d**power."""

    threshold: float
    power: float = 1.0

    def __post_init__(self) -> None:
        check_positive("threshold", self.threshold)
        check_positive("power", self.power)

    @property
    def name(self) -> str:
        return f"distance_{self.threshold:g}"


@dataclass(frozen=True)
class KNearestRule:
    """Neighbors are the ``k`` closest zones, weighted 1 or 1 / d."""

    k: int
    weighting: Literal["binary", "inverse_distance"] = "binary"

    def __post_init__(self) -> None:
        if isinstance(self.k, bool) or int(self.k) != self.k or self.k <= 0:
            raise_parameter_error("k", self.k, constraint="must be a positive integer")
        object.__setattr__(self, "k", int(self.k))
        if self.weighting not in ("binary", "inverse_distance"):
            raise_parameter_error(
                "weighting",
                self.weighting,
                valid_values=["binary", "inverse_distance"],
            )

    @property
    def name(self) -> str:
        return f"knn_{self.k}"


WeightsRule = Union[DistanceBandRule, KNearestRule]


@dataclass
class SpatialWeights:
    """Row-standardized spatial weights matrix.

    Attributes:
        weights: Dense weights matrix (n x n), zero diagonal. Non-zero rows
            sum to 1; rows of isolated zones are all zero.
        neighbors: Dictionary mapping index to list of neighbor indices.
        n_observations: Number of zones.
        weights_type: Rule that produced the matrix ('distance_50000', 'knn_8', 'custom').
        isolated: Boolean mask of zones without neighbors.
    """

    weights: np.ndarray
    neighbors: dict[int, list[int]]
    n_observations: int
    weights_type: str
    isolated: np.ndarray

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"SpatialWeights(type={self.weights_type}, "
            f"n={self.n_observations}, "
            f"avg_neighbors={np.mean([len(v) for v in self.neighbors.values()]):.1f}, "
            f"isolated={int(self.isolated.sum())})"
        )

    @property
    def s0(self) -> float:
        """Sum of all weights."""
        return float(self.weights.sum())

    @property
    def n_isolated(self) -> int:
        return int(self.isolated.sum())

    @classmethod
    def from_array(
        cls,
        matrix: np.ndarray,
        row_standardize: bool = True,
        weights_type: str = "custom",
    ) -> "SpatialWeights":
        """Wrap a caller-supplied weights matrix.

        Args:
            matrix: Square, finite, non-negative matrix with zero diagonal.
            row_standardize: Divide non-zero rows by their sum, default True.
            weights_type: Label stored on the result, default 'custom'.

        Returns:
            SpatialWeights around a copy of ``matrix``.
        """
        arr = as_square_matrix(matrix, name="weights matrix")
        if len(arr) < 2:
            raise InsufficientDataError(
                f"Spatial weights need at least 2 zones, got {len(arr)}"
            )
        if np.any(np.diag(arr) != 0):
            raise_validation_error(
                "Weights matrix diagonal must be zero",
                suggestion="A zone cannot be its own neighbor",
            )
        if row_standardize:
            arr, isolated = row_standardize_matrix(arr)
        else:
            arr = arr.copy()
            isolated = arr.sum(axis=1) == 0
        return _make_weights(arr, isolated, weights_type)


def _coordinates(centroids: Union[ZoneSet, np.ndarray]) -> np.ndarray:
    if isinstance(centroids, ZoneSet):
        coords = centroids.centroids
    else:
        coords = np.asarray(centroids, dtype=float)

    if coords.ndim != 2 or coords.shape[1] != 2:
        raise_validation_error(
            "Centroids must be an (n, 2) array",
            expected="shape (n, 2)",
            received=f"shape {coords.shape}",
        )
    if len(coords) < 2:
        raise InsufficientDataError(
            f"Spatial weights need at least 2 zones, got {len(coords)}",
            suggestion="Widen the analysis region",
        )
    if not np.all(np.isfinite(coords)):
        bad = np.flatnonzero(~np.all(np.isfinite(coords), axis=1))
        raise_validation_error(
            "Centroids contain non-finite coordinates",
            received=f"rows {bad[:5].tolist()}",
        )
    return coords


def zone_distance_matrix(centroids: Union[ZoneSet, np.ndarray]) -> np.ndarray:
    """Compute the Euclidean distance matrix between zone centroids.

    Args:
        centroids: ZoneSet or (n, 2) array of projected coordinates (metres).

    Returns:
        Symmetric (n, n) distance matrix with zero diagonal.
    """
    coords = _coordinates(centroids)
    return cdist(coords, coords)


def row_standardize_matrix(matrix: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Divide each non-zero row by its sum.

    Returns:
        Tuple of (standardized matrix, isolated mask). Rows summing to zero
        are left as zeros and flagged in the mask.
    """
    row_sums = matrix.sum(axis=1)
    isolated = row_sums == 0
    safe_sums = np.where(isolated, 1.0, row_sums)
    return matrix / safe_sums[:, np.newaxis], isolated


def _make_weights(matrix: np.ndarray, isolated: np.ndarray, weights_type: str) -> SpatialWeights:
    neighbors = {i: np.flatnonzero(matrix[i]).tolist() for i in range(len(matrix))}
    if isolated.any():
        warnings.warn(
            f"{int(isolated.sum())} zone(s) have no neighbors under rule "
            f"{weights_type}: {np.flatnonzero(isolated)[:10].tolist()}",
            IsolatedZoneWarning,
            stacklevel=3,
        )
    return SpatialWeights(
        weights=matrix,
        neighbors=neighbors,
        n_observations=len(matrix),
        weights_type=weights_type,
        isolated=isolated,
    )


def _inverse_distance(distances: np.ndarray, mask: np.ndarray, power: float) -> np.ndarray:
    if np.any(distances[mask] == 0):
        i, j = np.argwhere(mask & (distances == 0))[0]
        raise_validation_error(
            "Coincident centroids cannot receive an inverse-distance weight",
            received=f"zones {i} and {j} share a location",
            suggestion="Deduplicate zones or use binary k-nearest weights",
        )
    raw = np.zeros_like(distances)
    raw[mask] = 1.0 / distances[mask] ** power
    return raw


def build_spatial_weights(
    centroids: Union[ZoneSet, np.ndarray],
    rule: WeightsRule,
) -> SpatialWeights:
    """Build a row-standardized spatial weights matrix.

    Args:
        centroids: ZoneSet or (n, 2) array of projected coordinates. Geographic
            coordinates must be reprojected beforehand.
        rule: DistanceBandRule or KNearestRule.

    Returns:
        SpatialWeights with zero diagonal and rows summing to 1 (or 0 for
        isolated zones, which also trigger an IsolatedZoneWarning).

    Example:
        >>> coords = np.array([[0, 0], [1, 0], [0, 1], [1, 1]])
        >>> w = build_spatial_weights(coords, KNearestRule(k=2))
        >>> w.weights.sum(axis=1)
        array([1., 1., 1., 1.])
    """
    distances = zone_distance_matrix(centroids)
    n = len(distances)
    off_diagonal = ~np.eye(n, dtype=bool)

    if isinstance(rule, DistanceBandRule):
        mask = off_diagonal & (distances <= rule.threshold)
        raw = _inverse_distance(distances, mask, rule.power)
    elif isinstance(rule, KNearestRule):
        if rule.k > n - 1:
            raise_parameter_error(
                "k",
                rule.k,
                constraint=f"must be at most n - 1 = {n - 1}",
            )
        ranked = np.where(off_diagonal, distances, np.inf)
        nearest = np.argsort(ranked, axis=1, kind="stable")[:, : rule.k]
        mask = np.zeros((n, n), dtype=bool)
        np.put_along_axis(mask, nearest, True, axis=1)
        if rule.weighting == "binary":
            raw = mask.astype(float)
        else:
            raw = _inverse_distance(distances, mask, 1.0)
    else:
        raise TypeError(
            f"rule must be DistanceBandRule or KNearestRule, got {type(rule).__name__}"
        )

    matrix, isolated = row_standardize_matrix(raw)
    logger.info(
        f"Built {rule.name} weights for {n} zones "
        f"({int(mask.sum())} links, {int(isolated.sum())} isolated)"
    )
    return _make_weights(matrix, isolated, rule.name)


def create_distance_weights(
    points: Union[ZoneSet, np.ndarray],
    threshold: float,
    power: float = 1.0,
) -> SpatialWeights:
    """Create distance-band inverse-distance weights.

    Args:
        points: ZoneSet or (n, 2) array of projected coordinates.
        threshold: Maximum distance for neighbors.
        power: Power for distance weighting (1 = inverse distance, 2 = inverse squared).

    Returns:
        SpatialWeights object with distance-based weights.
    """
    return build_spatial_weights(points, DistanceBandRule(threshold=threshold, power=power))


def create_knn_weights(
    points: Union[ZoneSet, np.ndarray],
    k: int = 8,
    weighting: Literal["binary", "inverse_distance"] = "binary",
) -> SpatialWeights:
    """Create K-nearest neighbors spatial weights.

    Args:
        points: ZoneSet or (n, 2) array of projected coordinates.
        k: Number of nearest neighbors (default: 8).
        weighting: 'binary' or 'inverse_distance' (default: 'binary').

    Returns:
        SpatialWeights object with KNN weights.
    """
    return build_spatial_weights(points, KNearestRule(k=k, weighting=weighting))


def weights_matrix(weights: Union[SpatialWeights, np.ndarray], n: int) -> np.ndarray:
    """Return the dense matrix behind ``weights`` checked against ``n`` zones."""
    if isinstance(weights, SpatialWeights):
        if weights.n_observations != n:
            raise_validation_error(
                "values length must match weights n_observations",
                expected=str(weights.n_observations),
                received=str(n),
            )
        return weights.weights
    matrix = as_square_matrix(weights, n=n, name="weights matrix")
    if np.any(np.diag(matrix) != 0):
        raise_validation_error(
            "Weights matrix diagonal must be zero",
            received=f"non-zero entries at {np.flatnonzero(np.diag(matrix))[:5].tolist()}",
            suggestion="A zone cannot be its own neighbor; zero the diagonal",
        )
    return matrix
