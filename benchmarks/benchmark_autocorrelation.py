"""Performance benchmarks for spatial weights and autocorrelation."""

import time
from typing import Dict

import numpy as np

from mobspatial.primitives.autocorrelation import morans_i
from mobspatial.primitives.local import local_moran
from mobspatial.primitives.weights import create_distance_weights, create_knn_weights


def benchmark_weights(n_zones: int = 1000, k: int = 8) -> Dict[str, float]:
    """Benchmark kNN and distance-band weights construction.

    Args:
        n_zones: Number of zones.
        k: Number of nearest neighbors.

    Returns:
        Dictionary with timing results.
    """
    rng = np.random.default_rng(42)
    coords = rng.random((n_zones, 2)) * 100000

    start = time.perf_counter()
    create_knn_weights(coords, k=k)
    knn_time = time.perf_counter() - start

    start = time.perf_counter()
    create_distance_weights(coords, threshold=20000.0)
    band_time = time.perf_counter() - start

    return {
        "n_zones": n_zones,
        "knn_time_seconds": knn_time,
        "distance_time_seconds": band_time,
    }


def benchmark_moran(n_zones: int = 1000) -> Dict[str, float]:
    """Benchmark global Moran's I with its analytic variance."""
    rng = np.random.default_rng(42)
    coords = rng.random((n_zones, 2)) * 100000
    values = rng.random(n_zones) * 100
    weights = create_knn_weights(coords, k=8)

    start = time.perf_counter()
    morans_i(values, weights)
    elapsed = time.perf_counter() - start

    return {
        "n_zones": n_zones,
        "total_time_seconds": elapsed,
        "zones_per_second": n_zones / elapsed if elapsed > 0 else 0,
    }


def benchmark_permutation_lisa(
    n_zones: int = 1000,
    permutations: int = 999,
) -> Dict[str, float]:
    """Benchmark local Moran's I with conditional permutation p-values.

    The first call compiles the numba kernel and is reported separately.
    """
    rng = np.random.default_rng(42)
    coords = rng.random((n_zones, 2)) * 100000
    values = rng.random(n_zones) * 100
    weights = create_knn_weights(coords, k=8)

    start = time.perf_counter()
    local_moran(values, weights, permutations=permutations, seed=0)
    first_time = time.perf_counter() - start

    start = time.perf_counter()
    local_moran(values, weights, permutations=permutations, seed=1)
    warm_time = time.perf_counter() - start

    return {
        "n_zones": n_zones,
        "permutations": permutations,
        "first_call_seconds": first_time,
        "total_time_seconds": warm_time,
    }


def run_all_autocorrelation_benchmarks() -> Dict[str, Dict]:
    """Run all autocorrelation benchmarks."""
    results = {}

    print("Benchmarking spatial weights...")
    results["weights_scalability"] = {
        "small": benchmark_weights(n_zones=200),
        "medium": benchmark_weights(n_zones=1000),
        "large": benchmark_weights(n_zones=3000),
    }

    print("Benchmarking Moran's I...")
    results["moran_scalability"] = {
        "small": benchmark_moran(n_zones=200),
        "medium": benchmark_moran(n_zones=1000),
        "large": benchmark_moran(n_zones=3000),
    }

    print("Benchmarking permutation LISA...")
    results["lisa_scalability"] = {
        "small": benchmark_permutation_lisa(n_zones=200),
        "large": benchmark_permutation_lisa(n_zones=3000),
    }

    for name, sizes in results.items():
        print(f"\n{name}:")
        for size, timing in sizes.items():
            print(f"  {size:7s} {timing}")

    return results


if __name__ == "__main__":
    run_all_autocorrelation_benchmarks()
