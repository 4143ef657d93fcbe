"""Explicit configuration for spatial pattern analyses.

Configurations are plain values passed into the workflow; they can be read
from YAML or JSON files.
"""

import json
import logging
from dataclasses import asdict, dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml

from mobspatial.primitives._validation import check_non_negative, check_positive
from mobspatial.primitives.weights import DistanceBandRule, KNearestRule, WeightsRule
from mobspatial.utils.errors import raise_parameter_error, raise_validation_error

logger = logging.getLogger(__name__)


class AnalysisType(str, Enum):
    """Kind of spatial pattern analysis."""

    AUTOCORRELATION = "autocorrelation"
    HOTSPOTS = "hotspots"
    ACCESSIBILITY = "accessibility"


@dataclass(frozen=True)
class SpatialAnalysisConfig:
    """Parameters of one spatial pattern analysis.

    Attributes:
        analysis_type: 'autocorrelation', 'hotspots' or 'accessibility'.
        value_column: Column of the mobility table to aggregate per zone.
        neighbor_rule: 'distance' (inverse distance band) or 'knn'.
        distance_threshold: Neighbor distance band in metres.
        k: Number of neighbors for the 'knn' rule.
        hotspot_threshold: |LISA| cut-off for hotspot labels.
        alpha: Significance level for permutation p-values and Getis-Ord.
        gravity_decay: Gravity accessibility decay per kilometre.
        cumulative_threshold_m: Cumulative accessibility cut-off in metres.
        permutations: Conditional permutations for LISA p-values (0 = none).
        seed: Seed for the permutation draws.
    """

    analysis_type: AnalysisType = AnalysisType.AUTOCORRELATION
    value_column: str = "n_trips"
    neighbor_rule: Literal["distance", "knn"] = "distance"
    distance_threshold: float = 50000.0
    k: int = 8
    hotspot_threshold: float = 1.96
    alpha: float = 0.05
    gravity_decay: float = 1.5
    cumulative_threshold_m: float = 30000.0
    permutations: int = 0
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        try:
            analysis_type = AnalysisType(self.analysis_type)
        except ValueError:
            raise_parameter_error(
                "analysis_type",
                self.analysis_type,
                valid_values=[t.value for t in AnalysisType],
            )
        object.__setattr__(self, "analysis_type", analysis_type)

        if self.neighbor_rule not in ("distance", "knn"):
            raise_parameter_error(
                "neighbor_rule", self.neighbor_rule, valid_values=["distance", "knn"]
            )
        check_positive("distance_threshold", self.distance_threshold)
        check_positive("hotspot_threshold", self.hotspot_threshold)
        check_positive("alpha", self.alpha)
        check_positive("cumulative_threshold_m", self.cumulative_threshold_m)
        check_non_negative("gravity_decay", self.gravity_decay)
        if isinstance(self.k, bool) or int(self.k) != self.k or self.k <= 0:
            raise_parameter_error("k", self.k, constraint="must be a positive integer")
        object.__setattr__(self, "k", int(self.k))
        if self.permutations < 0:
            raise_parameter_error(
                "permutations", self.permutations, constraint="must be an integer >= 0"
            )

    def weights_rule(self) -> WeightsRule:
        """Neighbor rule described by this configuration."""
        if self.neighbor_rule == "knn":
            return KNearestRule(k=self.k)
        return DistanceBandRule(threshold=self.distance_threshold)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["analysis_type"] = self.analysis_type.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SpatialAnalysisConfig":
        """Build a configuration from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise_validation_error(
                f"Unknown configuration keys: {', '.join(unknown)}",
                expected=f"keys among {sorted(known)}",
            )
        return cls(**data)


def load_analysis_config(file_path: Union[str, Path]) -> SpatialAnalysisConfig:
    """Load an analysis configuration from a YAML or JSON file.

    A top-level ``spatial_analysis`` section is used when present, otherwise
    the whole mapping.

    Args:
        file_path: Path to a .yaml, .yml or .json file.

    Returns:
        SpatialAnalysisConfig.

    Raises:
        FileNotFoundError: If the file does not exist.
        InvalidInputError: If the format is unsupported or the content is not a mapping.
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    suffix = file_path.suffix.lower()

    with open(file_path, encoding="utf-8") as f:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f) or {}
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise_validation_error(
                f"Unsupported configuration file format: {suffix}",
                expected=".yaml, .yml, or .json",
            )

    if not isinstance(data, dict):
        raise_validation_error(
            "Configuration must be a mapping",
            received=type(data).__name__,
        )
    data = data.get("spatial_analysis", data)

    logger.info(f"Loaded analysis configuration from {file_path}")
    return SpatialAnalysisConfig.from_dict(data)
