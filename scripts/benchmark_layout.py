#!/usr/bin/env python3
"""Benchmark LayoutSolver.generate() across grid sizes."""

from __future__ import annotations

import argparse
import json
import random
from pathlib import Path

from layoutwfc.seeding import grass_pre_constraints, voronoi_grass_map
from layoutwfc.solver import LayoutSolver

GRID_SIZES: tuple[tuple[int, int], ...] = (
    (20, 20),
    (50, 50),
    (80, 60),
    (100, 100),
)


class LayoutBenchmark:
    """Runs each grid size several times and reports timing percentiles."""

    def __init__(self, iterations: int, voronoi: bool) -> None:
        self.iterations = iterations
        self.voronoi = voronoi
        self.results: dict[str, dict[str, float]] = {}

    def _run_case(self, width: int, height: int) -> LayoutSolver:
        solver = LayoutSolver(width, height)
        fallbacks = 0

        for i in range(self.iterations):
            rng = random.Random((width * 1_000_000) + (height * 1_000) + i)
            solver.rng = rng
            solver.clear_pre_constraints()
            if self.voronoi:
                grass = voronoi_grass_map(width, height, rng)
                solver.apply_pre_constraints(grass_pre_constraints(grass))
            solver.generate()
            fallbacks += solver.stats.fallbacks

        self.results[f"{width}x{height}"] = {
            "p50_ms": solver.stats.elapsed_ms.p50,
            "p95_ms": solver.stats.elapsed_ms.p95,
            "p99_ms": solver.stats.elapsed_ms.p99,
            "mean_fallbacks": fallbacks / self.iterations,
        }
        return solver

    def run(self) -> None:
        mode = "voronoi grass" if self.voronoi else "unconstrained"
        print(f"Layout WFC Benchmark ({mode})")
        print("=" * 60)
        print(f"Iterations per size: {self.iterations}")
        print()
        print(f"{'Size':>10} {'p50 (ms)':>10} {'p95 (ms)':>10} {'fallbacks':>12}")
        print("-" * 60)

        for width, height in GRID_SIZES:
            self._run_case(width, height)
            result = self.results[f"{width}x{height}"]
            print(
                f"{width}x{height:<6} {result['p50_ms']:10.2f} "
                f"{result['p95_ms']:10.2f} {result['mean_fallbacks']:12.1f}"
            )

    def save_results(self, filename: str) -> None:
        with Path(filename).open("w") as f:
            json.dump(self.results, f, indent=2)
        print(f"\nSaved benchmark results to {filename}")

    def compare_with_baseline(self, baseline_file: str) -> None:
        try:
            with Path(baseline_file).open() as f:
                baseline: dict[str, dict[str, float]] = json.load(f)
        except FileNotFoundError:
            print(f"\nBaseline file not found: {baseline_file}")
            return

        print(f"\nComparison vs baseline: {baseline_file}")
        print("=" * 64)

        for size_key, current in self.results.items():
            if size_key not in baseline:
                continue

            old_ms = baseline[size_key].get("p50_ms", 0.0)
            new_ms = current["p50_ms"]
            if old_ms <= 0:
                continue

            delta_pct = ((new_ms - old_ms) / old_ms) * 100.0
            speed_ratio = old_ms / new_ms if new_ms > 0 else 0.0
            trend = "faster" if speed_ratio > 1.0 else "slower"

            print(
                f"{size_key:>10}: {new_ms:8.2f}ms vs {old_ms:8.2f}ms | "
                f"{speed_ratio:5.2f}x {trend} ({delta_pct:+6.1f}%)"
            )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Benchmark layout generation")
    parser.add_argument(
        "--iterations",
        type=int,
        default=5,
        help="Number of runs per grid size (default: 5)",
    )
    parser.add_argument(
        "--voronoi",
        action="store_true",
        help="Seed Voronoi grass before each run",
    )
    parser.add_argument("--save", type=str, help="Save current results to JSON")
    parser.add_argument(
        "--compare",
        type=str,
        help="Compare current results against baseline JSON",
    )
    args = parser.parse_args(argv)

    benchmark = LayoutBenchmark(iterations=args.iterations, voronoi=args.voronoi)
    benchmark.run()

    if args.save:
        benchmark.save_results(args.save)

    if args.compare:
        benchmark.compare_with_baseline(args.compare)


if __name__ == "__main__":
    main()
