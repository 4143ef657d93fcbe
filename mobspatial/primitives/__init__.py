"""Layer 2: Primitives - Algorithm interfaces and pure operations.

This layer defines pure spatial-statistics operations. It can import numpy,
pandas, scipy and numba. No file I/O or plotting.
"""

from mobspatial.primitives.accessibility import (
    cumulative_accessibility,
    gravity_accessibility,
)
from mobspatial.primitives.autocorrelation import (
    GearyResult,
    MoranResult,
    gearys_c,
    interpret_autocorrelation,
    morans_i,
)
from mobspatial.primitives.hotspots import (
    HotspotLabel,
    classify_hotspots,
    summarize_labels,
)
from mobspatial.primitives.local import (
    GetisOrdResult,
    LocalMoranResult,
    getis_ord_gi_star,
    local_moran,
    spatial_lag,
    standardize,
)
from mobspatial.primitives.weights import (
    DistanceBandRule,
    KNearestRule,
    SpatialWeights,
    build_spatial_weights,
    create_distance_weights,
    create_knn_weights,
    row_standardize_matrix,
    zone_distance_matrix,
)

__all__ = [
    # Weights
    "DistanceBandRule",
    "KNearestRule",
    "SpatialWeights",
    "build_spatial_weights",
    "create_distance_weights",
    "create_knn_weights",
    "row_standardize_matrix",
    "zone_distance_matrix",
    # Global statistics
    "GearyResult",
    "MoranResult",
    "gearys_c",
    "interpret_autocorrelation",
    "morans_i",
    # Local statistics
    "GetisOrdResult",
    "LocalMoranResult",
    "getis_ord_gi_star",
    "local_moran",
    "spatial_lag",
    "standardize",
    # Classification
    "HotspotLabel",
    "classify_hotspots",
    "summarize_labels",
    # Accessibility
    "cumulative_accessibility",
    "gravity_accessibility",
]
