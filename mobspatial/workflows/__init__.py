"""Layer 4: Workflows - End-to-end analyses over trip tables and zones.

Workflows combine objects, primitives and tasks; they own configuration
loading and table aggregation.
"""

from mobspatial.workflows.config import (
    AnalysisType,
    SpatialAnalysisConfig,
    load_analysis_config,
)
from mobspatial.workflows.spatial_patterns import (
    SpatialAnalysisResult,
    aggregate_by_zone,
    analyze_spatial_patterns,
)

__all__ = [
    "AnalysisType",
    "SpatialAnalysisConfig",
    "SpatialAnalysisResult",
    "aggregate_by_zone",
    "analyze_spatial_patterns",
    "load_analysis_config",
]
