"""Spatial pattern analysis of mobility data.

Provides the high-level workflow from an origin-destination (or per-zone)
trip table and a zone collection to:
- Global autocorrelation (Moran's I, Geary's C) with local indicators
- LISA hotspot classification
- Gravity and cumulative accessibility
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import numpy as np
import pandas as pd

from mobspatial.objects.zoneset import ZoneSet
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
from mobspatial.primitives.hotspots import classify_hotspots, summarize_labels
from mobspatial.primitives.local import LocalMoranResult, local_moran
from mobspatial.primitives.weights import (
    SpatialWeights,
    build_spatial_weights,
    zone_distance_matrix,
)
from mobspatial.utils.errors import raise_validation_error
from mobspatial.workflows.config import AnalysisType, SpatialAnalysisConfig

logger = logging.getLogger(__name__)


@dataclass
class SpatialAnalysisResult:
    """Results from a spatial pattern analysis.

    Attributes:
        analysis_type: Analysis that produced the result.
        zone_data: One row per zone: 'id', 'value' and per-zone outputs.
        metadata: Analysis type, value column, zone count, date range, rule.
        moran: Global Moran's I (autocorrelation only).
        geary: Global Geary's C (autocorrelation only).
        interpretation: One-sentence reading of Moran's I (autocorrelation only).
        local: Local Moran's I (autocorrelation and hotspots).
        hotspot_summary: Zone count per hotspot label (hotspots only).
        distance_matrix: Centroid distances in metres (accessibility only).
    """

    analysis_type: AnalysisType
    zone_data: pd.DataFrame
    metadata: dict[str, Any] = field(default_factory=dict)
    moran: Optional[MoranResult] = None
    geary: Optional[GearyResult] = None
    interpretation: Optional[str] = None
    local: Optional[LocalMoranResult] = None
    hotspot_summary: Optional[dict[str, int]] = None
    distance_matrix: Optional[np.ndarray] = None

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"SpatialAnalysisResult(type={self.analysis_type.value}, "
            f"n_zones={len(self.zone_data)})"
        )

    def report(self) -> str:
        """Render a plain-text summary of the analysis."""
        lines = [
            "Mobility Spatial Analysis",
            "=========================",
            "",
            "Analysis Summary:",
            f"  Analysis Type: {self.analysis_type.value}",
            f"  Number of Zones: {self.metadata.get('n_zones', len(self.zone_data))}",
            f"  Value Column: {self.metadata.get('value_column')}",
        ]
        date_range = self.metadata.get("date_range")
        if date_range is not None:
            lines.append(f"  Date Range: {date_range[0]} to {date_range[1]}")

        if self.analysis_type is AnalysisType.AUTOCORRELATION and self.moran is not None:
            lines += [
                "",
                "Spatial Autocorrelation Results:",
                f"  Moran's I: {self.moran.statistic:.4f}",
                f"  Expected: {self.moran.expected_value:.4f}",
                f"  Z-score: {self.moran.z_score:.4f}",
                f"  P-value: {self.moran.p_value:.4f}",
                f"  Significant: {self.moran.significant}",
                f"  Geary's C: {self.geary.statistic:.4f} ({self.geary.interpretation})",
                f"  Interpretation: {self.interpretation}",
            ]
        elif self.analysis_type is AnalysisType.HOTSPOTS and self.hotspot_summary is not None:
            lines += ["", "Hotspot Detection Results:"]
            lines += [f"  {label}: {count}" for label, count in self.hotspot_summary.items()]
        elif self.analysis_type is AnalysisType.ACCESSIBILITY:
            lines += [
                "",
                "Accessibility Analysis Results:",
                f"  Mean Gravity Accessibility: {self.zone_data['gravity_accessibility'].mean():.2f}",
                f"  Mean Cumulative Accessibility: {self.zone_data['cumulative_accessibility'].mean():.2f}",
            ]
        return "\n".join(lines)


def aggregate_by_zone(
    mobility_data: pd.DataFrame,
    zone_ids: Union[ZoneSet, np.ndarray, list],
    value_column: str = "n_trips",
) -> pd.Series:
    """Sum a mobility column per zone, aligned to the zone order.

    Origin-destination tables (``id_origin``/``id_destination``) are summed by
    origin; per-zone tables by ``id``. Zones without records get 0.

    Args:
        mobility_data: Trip table.
        zone_ids: ZoneSet or sequence of zone identifiers giving the output order.
        value_column: Column to sum, default 'n_trips'.

    Returns:
        Series indexed by zone id, in zone order.
    """
    if value_column not in mobility_data.columns:
        raise_validation_error(
            f"Column '{value_column}' not found in mobility data",
            received=f"columns {list(mobility_data.columns)}",
        )

    if {"id_origin", "id_destination"}.issubset(mobility_data.columns):
        key = "id_origin"
    elif "id" in mobility_data.columns:
        key = "id"
    else:
        raise_validation_error(
            "Cannot identify spatial identifiers in mobility data",
            expected="columns 'id_origin' and 'id_destination', or 'id'",
            received=f"columns {list(mobility_data.columns)}",
        )

    ids = zone_ids.ids if isinstance(zone_ids, ZoneSet) else np.asarray(zone_ids)
    totals = mobility_data.groupby(key)[value_column].sum(min_count=1)
    aligned = totals.reindex(ids).fillna(0.0).astype(float)
    aligned.index.name = "id"
    aligned.name = "value"

    unmatched = int((~pd.Index(ids).isin(totals.index)).sum())
    if unmatched:
        logger.info(f"{unmatched} zone(s) have no '{value_column}' records; set to 0")
    return aligned


def _date_range(mobility_data: pd.DataFrame) -> Optional[tuple[Any, Any]]:
    if "date" not in mobility_data.columns or mobility_data["date"].isna().all():
        return None
    return mobility_data["date"].min(), mobility_data["date"].max()


def _analyze_autocorrelation(
    values: np.ndarray, weights: SpatialWeights, config: SpatialAnalysisConfig
) -> dict[str, Any]:
    moran = morans_i(values, weights)
    geary = gearys_c(values, weights)
    local = local_moran(values, weights, permutations=config.permutations, seed=config.seed)
    columns = {"lisa": local.lisa}
    if local.p_values is not None:
        columns["lisa_p_value"] = local.p_values
    return {
        "moran": moran,
        "geary": geary,
        "interpretation": interpret_autocorrelation(moran),
        "local": local,
        "columns": columns,
    }


def _analyze_hotspots(
    values: np.ndarray, weights: SpatialWeights, config: SpatialAnalysisConfig
) -> dict[str, Any]:
    local = local_moran(values, weights, permutations=config.permutations, seed=config.seed)
    labels = classify_hotspots(
        local.standardized,
        local.spatial_lag,
        local.lisa,
        threshold=config.hotspot_threshold,
        p_values=local.p_values,
        alpha=config.alpha,
    )
    columns = {
        "standardized_value": local.standardized,
        "spatial_lag": local.spatial_lag,
        "lisa": local.lisa,
        "hotspot_type": [label.value if label is not None else None for label in labels],
    }
    if local.p_values is not None:
        columns["lisa_p_value"] = local.p_values
    return {
        "local": local,
        "hotspot_summary": summarize_labels(labels),
        "columns": columns,
    }


def _analyze_accessibility(
    values: np.ndarray, zones: ZoneSet, config: SpatialAnalysisConfig
) -> dict[str, Any]:
    distances = zone_distance_matrix(zones)
    return {
        "distance_matrix": distances,
        "columns": {
            "gravity_accessibility": gravity_accessibility(
                values, distances, decay=config.gravity_decay
            ),
            "cumulative_accessibility": cumulative_accessibility(
                values, distances, threshold_m=config.cumulative_threshold_m
            ),
        },
    }


def analyze_spatial_patterns(
    mobility_data: pd.DataFrame,
    zones: ZoneSet,
    config: Optional[SpatialAnalysisConfig] = None,
    weights: Optional[SpatialWeights] = None,
) -> SpatialAnalysisResult:
    """Analyze spatial patterns in mobility data.

    Aggregates ``config.value_column`` per zone, builds spatial weights from
    the zone centroids (unless ``weights`` is given) and runs the configured
    analysis.

    Args:
        mobility_data: Origin-destination or per-zone trip table.
        zones: Zones with projected centroids; defines the output order.
        config: Analysis configuration, default SpatialAnalysisConfig().
        weights: Precomputed SpatialWeights aligned to ``zones`` (optional).

    Returns:
        SpatialAnalysisResult.

    Example:
        >>> config = SpatialAnalysisConfig(analysis_type="hotspots", neighbor_rule="knn", k=8)
        >>> result = analyze_spatial_patterns(od_table, zones, config)
        >>> print(result.report())
    """
    config = config or SpatialAnalysisConfig()
    values_series = aggregate_by_zone(mobility_data, zones, config.value_column)
    values = values_series.to_numpy()

    rule_name = None
    if config.analysis_type is not AnalysisType.ACCESSIBILITY:
        if weights is None:
            rule = config.weights_rule()
            weights = build_spatial_weights(zones, rule)
            rule_name = rule.name
        else:
            rule_name = weights.weights_type
        if weights.n_isolated:
            logger.warning(
                f"{weights.n_isolated} isolated zone(s); their local statistics are undefined"
            )

    if config.analysis_type is AnalysisType.AUTOCORRELATION:
        outputs = _analyze_autocorrelation(values, weights, config)
    elif config.analysis_type is AnalysisType.HOTSPOTS:
        outputs = _analyze_hotspots(values, weights, config)
    else:
        outputs = _analyze_accessibility(values, zones, config)

    zone_data = pd.DataFrame({"id": zones.ids, "value": values})
    if zones.attributes is not None:
        reserved = {"id", "value", *outputs["columns"]}
        clashing = sorted(str(c) for c in zones.attributes.columns if c in reserved)
        if clashing:
            raise_validation_error(
                f"Zone attributes clash with result columns: {', '.join(clashing)}",
                expected=f"attribute names other than {sorted(reserved)}",
                suggestion="Rename the attribute columns before analysis",
            )
        zone_data = pd.concat([zone_data, zones.attributes], axis=1)
    for name, column in outputs.pop("columns").items():
        zone_data[name] = column

    metadata = {
        "analysis_type": config.analysis_type.value,
        "value_column": config.value_column,
        "n_zones": len(zones),
        "date_range": _date_range(mobility_data),
        "weights_rule": rule_name,
        "distance_threshold": config.distance_threshold,
    }
    logger.info(
        f"Completed {config.analysis_type.value} analysis over {len(zones)} zones"
    )
    return SpatialAnalysisResult(
        analysis_type=config.analysis_type,
        zone_data=zone_data,
        metadata=metadata,
        **outputs,
    )
