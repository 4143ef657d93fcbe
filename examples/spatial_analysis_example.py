"""Example: Spatial autocorrelation and hotspot detection on trip counts.

Demonstrates Moran's I, Geary's C, LISA hotspot classification, Getis-Ord
Gi* and accessibility using mobspatial's spatial analysis tools.
"""

import numpy as np
import pandas as pd

from mobspatial import (
    SpatialAnalysisConfig,
    ZoneSet,
    analyze_spatial_patterns,
    classify_hotspots,
    compute_spatial_statistic,
    gearys_c,
    getis_ord_gi_star,
    local_moran,
    morans_i,
)
from mobspatial.primitives.hotspots import summarize_labels
from mobspatial.primitives.weights import create_knn_weights


def main():
    """Run spatial analysis example."""
    print("=" * 60)
    print("Mobility Hotspot Detection Example")
    print("=" * 60)

    # Zones on a projected grid (metres) with two trip-generating centres
    print("\n1. Creating synthetic zones and trip counts...")
    rng = np.random.default_rng(42)
    n_zones = 100

    centroids = rng.random((n_zones, 2)) * 50000
    zones = ZoneSet(ids=np.array([f"Z{i:03d}" for i in range(n_zones)]), centroids=centroids)

    centres = np.array([[10000, 10000], [40000, 40000]])
    dist = np.linalg.norm(centroids[:, np.newaxis, :] - centres[np.newaxis, :, :], axis=2)
    trips = 1000 * np.exp(-dist / 5000).sum(axis=1) + rng.normal(0, 20, n_zones)
    trips = np.maximum(trips, 0)

    print(f"Created {n_zones} zones")
    print(f"Trips per zone: mean={trips.mean():.1f}, std={trips.std():.1f}")

    # Spatial weights (K-nearest neighbors)
    print("\n2. Creating spatial weights matrix...")
    weights = create_knn_weights(zones, k=8)
    print(f"Spatial weights: {weights}")

    # Global statistics
    print("\n3. Computing Moran's I (spatial autocorrelation)...")
    moran = morans_i(trips, weights)
    print(f"Moran's I: {moran}")
    print(f"  → {moran.interpretation}")

    print("\n4. Computing Geary's C...")
    geary = gearys_c(trips, weights)
    print(f"Geary's C: {geary.statistic:.4f} ({geary.interpretation})")

    # Local statistics with permutation inference
    print("\n5. Classifying LISA hotspots (999 conditional permutations)...")
    local = local_moran(trips, weights, permutations=999, seed=42)
    labels = classify_hotspots(
        local.standardized, local.spatial_lag, local.lisa, p_values=local.p_values
    )
    for label, count in summarize_labels(labels).items():
        print(f"  {label}: {count}")

    print("\n6. Detecting hotspots and coldspots (Getis-Ord Gi*)...")
    gi = getis_ord_gi_star(trips, weights)
    print(f"Hotspot detection: {gi}")
    for idx in np.flatnonzero(gi.hotspots)[:5]:
        x, y = centroids[idx]
        print(f"    {zones.ids[idx]}: ({x:.0f}, {y:.0f}), trips={trips[idx]:.0f}, "
              f"Gi*={gi.gi_star[idx]:.2f}")

    # Same statistic through the dispatch entry point
    same = compute_spatial_statistic("moran", trips, weights, assumption="normality")
    print(f"\nMoran's I under normality: z={same.z_score:.2f}")

    # Full workflow over an origin-destination table
    print("\n7. Running the accessibility workflow on an OD table...")
    od = pd.DataFrame(
        {
            "date": pd.Timestamp("2023-03-01"),
            "id_origin": zones.ids,
            "id_destination": np.roll(zones.ids, 1),
            "n_trips": trips,
        }
    )
    result = analyze_spatial_patterns(
        od, zones, SpatialAnalysisConfig(analysis_type="accessibility")
    )
    print(result.report())

    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
