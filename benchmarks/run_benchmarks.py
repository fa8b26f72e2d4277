#!/usr/bin/env python3
"""Run the qshelper microbenchmarks and print a summary table.

Usage:
    python -m benchmarks.run_benchmarks
    # or
    python benchmarks/run_benchmarks.py
"""

import sys
import os

# Ensure project root is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))


def run_all():
    results = []

    print("=" * 70)
    print("  qshelper Microbenchmark Suite")
    print("=" * 70)
    print()

    print("[1/2] Construction")
    print("-" * 70)
    from benchmarks.microbenchmarks.bench_querystring import (
        bench_construction,
        bench_operation,
        bench_stdlib_round_trip,
        print_result,
    )

    for result in (bench_construction(), bench_stdlib_round_trip()):
        print_result(result)
        results.append(result)
    print()

    print("[2/2] Operations")
    print("-" * 70)
    for operation, args in (
        ("replace_first", ("page", "3")),
        ("replace_nth", ({"sort": {1: "address,desc"}},)),
        ("remove_many_nth", ("sort", [0, 1])),
        ("remove_any_key_matching_value", ("asc",)),
        ("add", ("filter", "active")),
        ("add_all", ([("filter", "active"), ("view", "grid")],)),
    ):
        result = bench_operation(operation, *args)
        print_result(result)
        results.append(result)
    print()

    print("=" * 70)
    print("  Summary")
    print("=" * 70)
    print()
    print(f"  {'Benchmark':<30s} {'Median (s)':>12s} {'Ops/sec':>14s}")
    print(f"  {'-' * 30} {'-' * 12} {'-' * 14}")

    for r in results:
        print(f"  {r['name']:<30s} {r['median_s']:>12.4f} {r['ops_per_sec']:>14,.0f}")

    print()
    print("Done.")


if __name__ == "__main__":
    run_all()
