"""Tests for selecting a spatial statistic by name."""

import numpy as np
import pytest

from mobspatial.primitives.autocorrelation import GearyResult, MoranResult
from mobspatial.primitives.local import GetisOrdResult, LocalMoranResult
from mobspatial.primitives.weights import create_knn_weights
from mobspatial.tasks.statistictask import (
    STATISTIC_REGISTRY,
    SpatialStatistic,
    compute_spatial_statistic,
)
from mobspatial.utils.errors import InvalidInputError


@pytest.fixture
def clustered():
    coords = np.array(
        [[0.0, 0.0], [1.0, 0.0], [0.5, 1.0], [10.0, 0.0], [11.0, 0.0], [10.5, 1.0]]
    )
    return np.array([10.0, 10.0, 10.0, 1.0, 1.0, 1.0]), create_knn_weights(coords, k=2)


class TestSpatialStatistic:
    """Tests for SpatialStatistic."""

    @pytest.mark.parametrize(
        "name, member",
        [
            ("moran", SpatialStatistic.MORAN),
            ("Geary", SpatialStatistic.GEARY),
            (" LOCAL_MORAN ", SpatialStatistic.LOCAL_MORAN),
            (SpatialStatistic.GETIS_ORD, SpatialStatistic.GETIS_ORD),
        ],
    )
    def test_from_name(self, name, member):
        """Test names resolve case-insensitively."""
        assert SpatialStatistic.from_name(name) is member

    def test_unknown_name(self):
        """Test an unknown name lists the valid ones."""
        with pytest.raises(InvalidInputError, match="local_moran"):
            SpatialStatistic.from_name("join_count")

    def test_is_local(self):
        """Test local statistics are flagged."""
        assert SpatialStatistic.GETIS_ORD.is_local
        assert not SpatialStatistic.MORAN.is_local

    def test_registry_complete(self):
        """Test every statistic has an implementation."""
        assert set(STATISTIC_REGISTRY) == set(SpatialStatistic)


class TestComputeSpatialStatistic:
    """Tests for compute_spatial_statistic."""

    @pytest.mark.parametrize(
        "method, result_type",
        [
            ("moran", MoranResult),
            ("geary", GearyResult),
            ("local_moran", LocalMoranResult),
            ("getis_ord", GetisOrdResult),
        ],
    )
    def test_dispatch(self, clustered, method, result_type):
        """Test each method returns its own result type."""
        values, weights = clustered
        assert isinstance(compute_spatial_statistic(method, values, weights), result_type)

    def test_options_forwarded(self, clustered):
        """Test keyword options reach the statistic."""
        values, weights = clustered
        result = compute_spatial_statistic("moran", values, weights, assumption="normality")
        assert result.assumption == "normality"

        local = compute_spatial_statistic(
            SpatialStatistic.LOCAL_MORAN, values, weights, permutations=49, seed=3
        )
        assert local.p_values is not None


class TestSelfNeighborDispatch:
    """Tests for dispatching with an invalid raw weights matrix."""

    @pytest.mark.parametrize("method", [member.value for member in SpatialStatistic])
    def test_diagonal_rejected(self, method):
        """Test every statistic refuses a matrix with self-neighbors."""
        values = np.array([1.0, 4.0, 2.0, 8.0, 3.0])
        with pytest.raises(InvalidInputError, match="diagonal"):
            compute_spatial_statistic(method, values, np.ones((5, 5)))
