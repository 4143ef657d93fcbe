"""Run all performance benchmarks and generate report."""

import json
from pathlib import Path

from benchmark_autocorrelation import run_all_autocorrelation_benchmarks


def main():
    """Run all benchmarks and save results."""
    print("=" * 60)
    print("MOBSPATIAL PERFORMANCE BENCHMARK SUITE")
    print("=" * 60)
    print()

    all_results = {}

    print("\n[1/1] Autocorrelation Benchmarks")
    print("-" * 60)
    all_results["autocorrelation"] = run_all_autocorrelation_benchmarks()

    output_file = Path("benchmarks/results.json")
    output_file.parent.mkdir(exist_ok=True)

    # Convert numpy types to native Python types for JSON serialization
    def convert_to_native(obj):
        """Convert numpy types to native Python types."""
        if isinstance(obj, dict):
            return {k: convert_to_native(v) for k, v in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [convert_to_native(item) for item in obj]
        elif hasattr(obj, "item"):  # numpy scalar
            return obj.item()
        else:
            return obj

    with open(output_file, "w") as f:
        json.dump(convert_to_native(all_results), f, indent=2)

    print(f"\n✓ Results saved to {output_file}")

    print("\n" + "=" * 60)
    print("BENCHMARK SUMMARY")
    print("=" * 60)

    moran = all_results["autocorrelation"]["moran_scalability"]
    print("\nMoran's I:")
    print(f"  Small (200 zones):   {moran['small']['total_time_seconds']*1000:6.2f} ms")
    print(f"  Large (3000 zones):  {moran['large']['total_time_seconds']*1000:6.2f} ms")

    lisa = all_results["autocorrelation"]["lisa_scalability"]
    print("\nPermutation LISA (999 permutations):")
    print(f"  Small (200 zones):   {lisa['small']['total_time_seconds']:6.2f} s")
    print(f"  Large (3000 zones):  {lisa['large']['total_time_seconds']:6.2f} s")

    print("\n✓ All benchmarks completed successfully!")


if __name__ == "__main__":
    main()
