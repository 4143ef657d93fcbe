"""Tests for LISA hotspot classification."""

import numpy as np
import pytest

from mobspatial.primitives.hotspots import (
    UNDEFINED_LABEL,
    HotspotLabel,
    classify_hotspots,
    summarize_labels,
)
from mobspatial.primitives.local import local_moran
from mobspatial.primitives.weights import create_knn_weights
from mobspatial.utils.errors import InvalidInputError


class TestClassifyHotspots:
    """Tests for classify_hotspots."""

    def test_quadrants(self):
        """Test each quadrant maps to its label when significant."""
        z = np.array([1.0, -1.0, 1.0, -1.0])
        lag = np.array([2.0, -2.0, -2.0, 2.0])
        lisa = np.array([3.0, 3.0, -3.0, -3.0])
        labels = classify_hotspots(z, lag, lisa)
        assert list(labels) == [
            HotspotLabel.HIGH_HIGH,
            HotspotLabel.LOW_LOW,
            HotspotLabel.HIGH_LOW,
            HotspotLabel.LOW_HIGH,
        ]

    def test_significance_gates_first(self):
        """Test |LISA| at or below the threshold is Not Significant in any quadrant."""
        z = np.array([1.0, -1.0, 1.0, -1.0])
        lag = np.array([2.0, -2.0, -2.0, 2.0])
        lisa = np.array([1.96, 0.5, -1.0, -1.96])
        labels = classify_hotspots(z, lag, lisa)
        assert all(label is HotspotLabel.NOT_SIGNIFICANT for label in labels)

    def test_zero_lag_not_significant(self):
        """Test a zero lag falls outside every quadrant."""
        labels = classify_hotspots(np.array([2.0]), np.array([0.0]), np.array([5.0]))
        assert labels[0] is HotspotLabel.NOT_SIGNIFICANT

    def test_custom_threshold(self):
        """Test a lower threshold promotes weaker associations."""
        z = np.array([1.0, -1.0])
        lag = np.array([1.0, -1.0])
        lisa = np.array([1.0, 1.0])
        assert all(
            label is HotspotLabel.NOT_SIGNIFICANT for label in classify_hotspots(z, lag, lisa)
        )
        labels = classify_hotspots(z, lag, lisa, threshold=0.5)
        assert list(labels) == [HotspotLabel.HIGH_HIGH, HotspotLabel.LOW_LOW]

    def test_always_one_label(self):
        """Test every finite zone receives exactly one of the five labels."""
        rng = np.random.default_rng(99)
        z, lag, lisa = rng.normal(scale=2.0, size=(3, 500))
        labels = classify_hotspots(z, lag, lisa)
        assert all(isinstance(label, HotspotLabel) for label in labels)
        assert sum(summarize_labels(labels).values()) == 500

    def test_nan_inputs_unlabelled(self):
        """Test NaN inputs (isolated zones) give None."""
        z = np.array([1.0, 1.0])
        lag = np.array([np.nan, 1.0])
        lisa = np.array([np.nan, 3.0])
        labels = classify_hotspots(z, lag, lisa)
        assert labels[0] is None
        assert labels[1] is HotspotLabel.HIGH_HIGH

    def test_p_value_gate(self):
        """Test permutation p-values replace the |LISA| gate."""
        z = np.array([1.0, -1.0, 1.0])
        lag = np.array([1.0, -1.0, 1.0])
        lisa = np.array([0.1, 0.1, 5.0])
        p_values = np.array([0.01, 0.04, 0.2])
        labels = classify_hotspots(z, lag, lisa, p_values=p_values, alpha=0.05)
        assert list(labels) == [
            HotspotLabel.HIGH_HIGH,
            HotspotLabel.LOW_LOW,
            HotspotLabel.NOT_SIGNIFICANT,
        ]

    def test_shape_mismatch(self):
        """Test misaligned inputs raise."""
        with pytest.raises(InvalidInputError, match="align"):
            classify_hotspots(np.zeros(3), np.zeros(2), np.zeros(3))

    def test_invalid_threshold(self):
        """Test non-positive thresholds raise."""
        with pytest.raises(InvalidInputError):
            classify_hotspots(np.zeros(2), np.zeros(2), np.zeros(2), threshold=0.0)

    def test_from_local_moran(self):
        """Test two separated clusters become High-High and Low-Low."""
        coords = np.array(
            [[0.0, 0.0], [1.0, 0.0], [0.5, 1.0], [10.0, 0.0], [11.0, 0.0], [10.5, 1.0]]
        )
        values = np.array([10.0, 10.0, 10.0, 1.0, 1.0, 1.0])
        local = local_moran(values, create_knn_weights(coords, k=2))
        labels = classify_hotspots(
            local.standardized, local.spatial_lag, local.lisa, threshold=0.5
        )
        assert [str(label) for label in labels] == ["High-High"] * 3 + ["Low-Low"] * 3


class TestHotspotLabel:
    """Tests for HotspotLabel."""

    def test_values(self):
        """Test label strings."""
        assert [label.value for label in HotspotLabel] == [
            "High-High",
            "Low-Low",
            "High-Low",
            "Low-High",
            "Not Significant",
        ]

    def test_cluster_and_outlier(self):
        """Test cluster and outlier flags."""
        assert HotspotLabel.HIGH_HIGH.is_cluster
        assert HotspotLabel.LOW_HIGH.is_outlier
        assert not HotspotLabel.NOT_SIGNIFICANT.is_cluster
        assert not HotspotLabel.NOT_SIGNIFICANT.is_outlier


class TestSummarizeLabels:
    """Tests for summarize_labels."""

    def test_counts_all_labels(self):
        """Test every label appears in fixed order, zero counts included."""
        summary = summarize_labels([HotspotLabel.HIGH_HIGH, HotspotLabel.HIGH_HIGH])
        assert list(summary) == [label.value for label in HotspotLabel]
        assert summary["High-High"] == 2
        assert summary["Low-Low"] == 0
        assert UNDEFINED_LABEL not in summary

    def test_undefined_counted(self):
        """Test None labels are counted as Undefined."""
        summary = summarize_labels([None, HotspotLabel.LOW_LOW, "Low-Low"])
        assert summary["Low-Low"] == 2
        assert summary[UNDEFINED_LABEL] == 1
