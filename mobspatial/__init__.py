"""mobspatial: spatial autocorrelation and hotspot detection for mobility data.

Layered like a small scientific library:
- objects: immutable zone collections
- primitives: spatial weights, global and local statistics, accessibility
- tasks: statistic selection
- workflows: configured analyses over trip tables
"""

from mobspatial.objects import ZoneSet
from mobspatial.primitives import (
    DistanceBandRule,
    GearyResult,
    GetisOrdResult,
    HotspotLabel,
    KNearestRule,
    LocalMoranResult,
    MoranResult,
    SpatialWeights,
    build_spatial_weights,
    classify_hotspots,
    cumulative_accessibility,
    gearys_c,
    getis_ord_gi_star,
    gravity_accessibility,
    local_moran,
    morans_i,
)
from mobspatial.tasks import SpatialStatistic, compute_spatial_statistic
from mobspatial.utils.errors import (
    DegenerateInputError,
    InsufficientDataError,
    InvalidInputError,
    IsolatedZoneWarning,
    MobSpatialError,
)
from mobspatial.workflows import (
    AnalysisType,
    SpatialAnalysisConfig,
    SpatialAnalysisResult,
    analyze_spatial_patterns,
    load_analysis_config,
)

__version__ = "0.1.0"

__all__ = [
    "AnalysisType",
    "DegenerateInputError",
    "DistanceBandRule",
    "GearyResult",
    "GetisOrdResult",
    "HotspotLabel",
    "InsufficientDataError",
    "InvalidInputError",
    "IsolatedZoneWarning",
    "KNearestRule",
    "LocalMoranResult",
    "MobSpatialError",
    "MoranResult",
    "SpatialAnalysisConfig",
    "SpatialAnalysisResult",
    "SpatialStatistic",
    "SpatialWeights",
    "ZoneSet",
    "analyze_spatial_patterns",
    "build_spatial_weights",
    "classify_hotspots",
    "compute_spatial_statistic",
    "cumulative_accessibility",
    "gearys_c",
    "getis_ord_gi_star",
    "gravity_accessibility",
    "load_analysis_config",
    "local_moran",
    "morans_i",
]
