"""Tests for spatial weights construction."""

import numpy as np
import pytest

from mobspatial.objects.zoneset import ZoneSet
from mobspatial.primitives.weights import (
    DistanceBandRule,
    KNearestRule,
    SpatialWeights,
    build_spatial_weights,
    create_distance_weights,
    create_knn_weights,
    zone_distance_matrix,
)
from mobspatial.utils.errors import (
    InsufficientDataError,
    InvalidInputError,
    IsolatedZoneWarning,
)

UNIT_SQUARE = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])


def _grid(size: int) -> np.ndarray:
    xs, ys = np.meshgrid(np.arange(size), np.arange(size))
    return np.column_stack([xs.ravel(), ys.ravel()]).astype(float)


class TestDistanceMatrix:
    """Tests for zone_distance_matrix."""

    def test_symmetric_zero_diagonal(self):
        """Test distances are symmetric with zero diagonal."""
        d = zone_distance_matrix(UNIT_SQUARE)
        assert d.shape == (4, 4)
        np.testing.assert_allclose(d, d.T)
        np.testing.assert_allclose(np.diag(d), 0.0)
        assert d[0, 3] == pytest.approx(np.sqrt(2))

    def test_accepts_zoneset(self):
        """Test a ZoneSet is accepted in place of an array."""
        zones = ZoneSet(ids=np.array(["a", "b", "c", "d"]), centroids=UNIT_SQUARE)
        np.testing.assert_allclose(zone_distance_matrix(zones), zone_distance_matrix(UNIT_SQUARE))


class TestKNearestWeights:
    """Tests for the k-nearest rule."""

    def test_unit_square_neighbors(self):
        """Test each square corner pairs with its two adjacent corners."""
        w = build_spatial_weights(UNIT_SQUARE, KNearestRule(k=2))
        assert w.neighbors == {0: [1, 2], 1: [0, 3], 2: [0, 3], 3: [1, 2]}
        np.testing.assert_allclose(w.weights[0], [0.0, 0.5, 0.5, 0.0])
        assert w.weights_type == "knn_2"
        assert not w.isolated.any()

    def test_row_stochastic(self):
        """Test every row sums to one."""
        rng = np.random.default_rng(0)
        coords = rng.random((40, 2)) * 1000
        w = create_knn_weights(coords, k=5)
        np.testing.assert_allclose(w.weights.sum(axis=1), 1.0, atol=1e-9)
        np.testing.assert_allclose(np.diag(w.weights), 0.0)
        assert all(len(v) == 5 for v in w.neighbors.values())

    def test_inverse_distance_weighting(self):
        """Test inverse-distance kNN weights favour the closer neighbor."""
        coords = np.array([[0.0, 0.0], [1.0, 0.0], [3.0, 0.0], [10.0, 0.0]])
        w = create_knn_weights(coords, k=2, weighting="inverse_distance")
        # neighbors of zone 0 are at distances 1 and 3
        np.testing.assert_allclose(w.weights[0], [0.0, 0.75, 0.25, 0.0])

    def test_k_too_large(self):
        """Test k >= n raises."""
        with pytest.raises(InvalidInputError, match="at most"):
            create_knn_weights(UNIT_SQUARE, k=4)

    @pytest.mark.parametrize("k", [0, -1])
    def test_non_positive_k(self, k):
        """Test k <= 0 raises."""
        with pytest.raises(InvalidInputError):
            KNearestRule(k=k)

    def test_unknown_weighting(self):
        """Test an unknown weighting scheme raises."""
        with pytest.raises(InvalidInputError, match="Valid values"):
            KNearestRule(k=2, weighting="gaussian")


class TestDistanceBandWeights:
    """Tests for the distance-band rule."""

    def test_rook_neighbors_on_grid(self):
        """Test a unit threshold on a grid gives rook contiguity."""
        w = create_distance_weights(_grid(3), threshold=1.0)
        assert sorted(w.neighbors[4]) == [1, 3, 5, 7]
        assert sorted(w.neighbors[0]) == [1, 3]
        np.testing.assert_allclose(w.weights[4, [1, 3, 5, 7]], 0.25)

    def test_inverse_distance_rows(self):
        """Test raw weights are 1/d before row standardization."""
        coords = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 2.0]])
        w = build_spatial_weights(coords, DistanceBandRule(threshold=2.5))
        # zone 0: 1/1 and 1/2 -> 2/3 and 1/3
        np.testing.assert_allclose(w.weights[0], [0.0, 2.0 / 3.0, 1.0 / 3.0])
        np.testing.assert_allclose(w.weights.sum(axis=1), 1.0, atol=1e-9)

    def test_asymmetric_after_standardization(self):
        """Test row standardization can break symmetry."""
        coords = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 2.0]])
        w = build_spatial_weights(coords, DistanceBandRule(threshold=2.5))
        assert w.weights[0, 1] != pytest.approx(w.weights[1, 0])

    def test_isolated_zone_flagged(self):
        """Test a zone beyond the threshold stays all-zero and is flagged."""
        coords = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [100.0, 100.0]])
        with pytest.warns(IsolatedZoneWarning):
            w = create_distance_weights(coords, threshold=2.0)
        assert w.isolated.tolist() == [False, False, False, True]
        assert w.n_isolated == 1
        np.testing.assert_allclose(w.weights[3], 0.0)
        np.testing.assert_allclose(w.weights[:3].sum(axis=1), 1.0, atol=1e-9)
        assert w.neighbors[3] == []

    @pytest.mark.parametrize("threshold", [0.0, -5.0, np.nan])
    def test_invalid_threshold(self, threshold):
        """Test zero, negative or NaN thresholds raise."""
        with pytest.raises(InvalidInputError):
            DistanceBandRule(threshold=threshold)

    def test_coincident_centroids(self):
        """Test coincident centroids cannot get inverse-distance weights."""
        coords = np.array([[0.0, 0.0], [0.0, 0.0], [1.0, 0.0]])
        with pytest.raises(InvalidInputError, match="Coincident"):
            create_distance_weights(coords, threshold=5.0)


class TestInputValidation:
    """Tests for centroid validation."""

    def test_single_zone(self):
        """Test n < 2 raises InsufficientDataError."""
        with pytest.raises(InsufficientDataError):
            create_knn_weights(np.array([[0.0, 0.0]]), k=1)

    def test_non_finite_coordinates(self):
        """Test NaN coordinates raise."""
        coords = UNIT_SQUARE.copy()
        coords[2, 1] = np.nan
        with pytest.raises(InvalidInputError, match="non-finite"):
            create_knn_weights(coords, k=2)

    def test_wrong_shape(self):
        """Test centroids that are not (n, 2) raise."""
        with pytest.raises(InvalidInputError):
            create_knn_weights(np.zeros((4, 3)), k=2)

    def test_unknown_rule(self):
        """Test an unsupported rule type raises TypeError."""
        with pytest.raises(TypeError):
            build_spatial_weights(UNIT_SQUARE, "queen")


class TestFromArray:
    """Tests for SpatialWeights.from_array."""

    def test_row_standardizes(self):
        """Test custom matrices are row standardized."""
        m = np.array([[0.0, 2.0, 2.0], [1.0, 0.0, 0.0], [3.0, 1.0, 0.0]])
        w = SpatialWeights.from_array(m)
        np.testing.assert_allclose(w.weights.sum(axis=1), 1.0)
        np.testing.assert_allclose(w.weights[2], [0.75, 0.25, 0.0])
        assert w.weights_type == "custom"
        assert w.s0 == pytest.approx(3.0)

    def test_keeps_raw_when_requested(self):
        """Test row_standardize=False keeps the matrix."""
        m = np.array([[0.0, 2.0], [1.0, 0.0]])
        w = SpatialWeights.from_array(m, row_standardize=False)
        np.testing.assert_allclose(w.weights, m)

    def test_non_zero_diagonal(self):
        """Test self-neighbors are rejected."""
        with pytest.raises(InvalidInputError, match="diagonal"):
            SpatialWeights.from_array(np.eye(3))

    def test_negative_entries(self):
        """Test negative weights are rejected."""
        with pytest.raises(InvalidInputError, match="negative"):
            SpatialWeights.from_array(np.array([[0.0, -1.0], [1.0, 0.0]]))

    def test_not_square(self):
        """Test non-square matrices are rejected."""
        with pytest.raises(InvalidInputError, match="square"):
            SpatialWeights.from_array(np.zeros((2, 3)))
