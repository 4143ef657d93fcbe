"""Layer 3: Tasks - User intent translation.

Tasks translate user intent into primitive calls.
"""

from mobspatial.tasks.statistictask import (
    STATISTIC_REGISTRY,
    SpatialStatistic,
    compute_spatial_statistic,
)

__all__ = ["STATISTIC_REGISTRY", "SpatialStatistic", "compute_spatial_statistic"]
