"""Selection among the spatial statistics behind one entry point.

Layer 3: Tasks - User intent translation.
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any, Union

import numpy as np

from mobspatial.primitives.autocorrelation import gearys_c, morans_i
from mobspatial.primitives.local import getis_ord_gi_star, local_moran
from mobspatial.primitives.weights import SpatialWeights
from mobspatial.utils.errors import raise_parameter_error

logger = logging.getLogger(__name__)


class SpatialStatistic(str, Enum):
    """Closed set of spatial statistics."""

    MORAN = "moran"
    GEARY = "geary"
    LOCAL_MORAN = "local_moran"
    GETIS_ORD = "getis_ord"

    @classmethod
    def from_name(cls, name: Union[str, "SpatialStatistic"]) -> "SpatialStatistic":
        """Resolve a statistic from its name, case-insensitively.

        Raises:
            InvalidInputError: If the name is not a known statistic.
        """
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise_parameter_error(
                "method",
                name,
                valid_values=[member.value for member in cls],
            )

    @property
    def is_local(self) -> bool:
        return self in (SpatialStatistic.LOCAL_MORAN, SpatialStatistic.GETIS_ORD)


STATISTIC_REGISTRY: dict[SpatialStatistic, Callable[..., Any]] = {
    SpatialStatistic.MORAN: morans_i,
    SpatialStatistic.GEARY: gearys_c,
    SpatialStatistic.LOCAL_MORAN: local_moran,
    SpatialStatistic.GETIS_ORD: getis_ord_gi_star,
}


def compute_spatial_statistic(
    method: Union[str, SpatialStatistic],
    values: np.ndarray,
    weights: Union[SpatialWeights, np.ndarray],
    **options: Any,
) -> Any:
    """Compute the selected spatial statistic.

    Args:
        method: SpatialStatistic member or its name ('moran', 'geary',
            'local_moran', 'getis_ord').
        values: Array of values (n_observations,).
        weights: SpatialWeights object or (n, n) weights matrix.
        **options: Passed to the statistic (e.g. ``assumption`` for Moran's I,
            ``permutations`` for local Moran, ``star`` for Getis-Ord).

    Returns:
        The statistic's result object (MoranResult, GearyResult,
        LocalMoranResult or GetisOrdResult).

    Example:
        >>> result = compute_spatial_statistic("moran", values, weights)
        >>> result.statistic
    """
    statistic = SpatialStatistic.from_name(method)
    logger.info(f"Computing {statistic.value} for {len(np.asarray(values))} zones")
    return STATISTIC_REGISTRY[statistic](values, weights, **options)
