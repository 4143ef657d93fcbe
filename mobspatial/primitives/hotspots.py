"""LISA quadrant classification of zones into hotspots, coldspots and outliers."""

import logging
from collections.abc import Iterable
from enum import Enum
from typing import Optional

import numpy as np

from mobspatial.primitives._validation import check_positive
from mobspatial.utils.errors import raise_validation_error

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 1.96
UNDEFINED_LABEL = "Undefined"


class HotspotLabel(str, Enum):
    """LISA cluster category of a zone."""

    HIGH_HIGH = "High-High"
    LOW_LOW = "Low-Low"
    HIGH_LOW = "High-Low"
    LOW_HIGH = "Low-High"
    NOT_SIGNIFICANT = "Not Significant"

    def __str__(self) -> str:
        return self.value

    @property
    def is_cluster(self) -> bool:
        return self in (HotspotLabel.HIGH_HIGH, HotspotLabel.LOW_LOW)

    @property
    def is_outlier(self) -> bool:
        return self in (HotspotLabel.HIGH_LOW, HotspotLabel.LOW_HIGH)


def _classify_zone(z: float, lag: float, significant: bool) -> HotspotLabel:
    if not significant:
        return HotspotLabel.NOT_SIGNIFICANT
    if z > 0 and lag > 0:
        return HotspotLabel.HIGH_HIGH
    if z < 0 and lag < 0:
        return HotspotLabel.LOW_LOW
    if z > 0 and lag < 0:
        return HotspotLabel.HIGH_LOW
    if z < 0 and lag > 0:
        return HotspotLabel.LOW_HIGH
    return HotspotLabel.NOT_SIGNIFICANT


def classify_hotspots(
    standardized: np.ndarray,
    spatial_lag: np.ndarray,
    lisa: np.ndarray,
    threshold: float = DEFAULT_THRESHOLD,
    p_values: Optional[np.ndarray] = None,
    alpha: float = 0.05,
) -> np.ndarray:
    """Label each zone by its LISA quadrant.

    Significance gates first: a zone whose |LISA| does not exceed
    ``threshold`` is 'Not Significant' whatever its quadrant. The default of
    1.96 is a heuristic stand-in for 95% confidence on the raw LISA value,
    not a calibrated p-value. When ``p_values`` from a permutation test are
    given, the gate becomes ``p < alpha`` instead.

    Args:
        standardized: Standardized values z (n,).
        spatial_lag: Spatial lag of the standardized values (n,).
        lisa: Local Moran's I values (n,).
        threshold: |LISA| cut-off, default 1.96.
        p_values: Optional per-zone pseudo p-values (n,).
        alpha: Significance level used with ``p_values``, default 0.05.

    Returns:
        Object array of HotspotLabel, with None where any input is NaN
        (isolated zones).
    """
    z = np.asarray(standardized, dtype=float)
    lag = np.asarray(spatial_lag, dtype=float)
    local = np.asarray(lisa, dtype=float)
    check_positive("threshold", threshold)

    arrays = {"spatial_lag": lag, "lisa": local}
    if p_values is not None:
        check_positive("alpha", alpha)
        arrays["p_values"] = np.asarray(p_values, dtype=float)
    for name, arr in arrays.items():
        if arr.shape != z.shape or z.ndim != 1:
            raise_validation_error(
                f"{name} must align with standardized values",
                expected=f"shape {z.shape}",
                received=f"shape {arr.shape}",
            )

    if p_values is not None:
        gate = arrays["p_values"]
        significant = gate < alpha
        undefined = np.isnan(z) | np.isnan(lag) | np.isnan(local) | np.isnan(gate)
    else:
        significant = np.abs(local) > threshold
        undefined = np.isnan(z) | np.isnan(lag) | np.isnan(local)

    labels = np.empty(len(z), dtype=object)
    for i in range(len(z)):
        if undefined[i]:
            labels[i] = None
        else:
            labels[i] = _classify_zone(z[i], lag[i], bool(significant[i]))

    logger.debug(f"Classified {len(z)} zones, {int(undefined.sum())} undefined")
    return labels


def summarize_labels(labels: Iterable[Optional[HotspotLabel]]) -> dict[str, int]:
    """Count zones per label, in fixed label order.

    Undefined (None) labels are counted under 'Undefined' when present.
    """
    counts = {label.value: 0 for label in HotspotLabel}
    undefined = 0
    for label in labels:
        if label is None:
            undefined += 1
        else:
            counts[HotspotLabel(label).value] += 1
    if undefined:
        counts[UNDEFINED_LABEL] = undefined
    return counts
