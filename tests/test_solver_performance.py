"""Performance smoke tests for LayoutSolver.

Limits are loose; they catch an accidental return to per-candidate
propagation, not small regressions. Use scripts/benchmark_layout.py for
real numbers.
"""

from __future__ import annotations

import random
import time

from layoutwfc.seeding import grass_pre_constraints, voronoi_grass_map
from layoutwfc.solver import LayoutSolver


class TestLayoutSolverPerformance:
    def test_50x50_under_5s(self) -> None:
        solver = LayoutSolver(50, 50, random.Random(42))

        start = time.perf_counter()
        solver.generate()
        elapsed = time.perf_counter() - start

        assert solver.is_resolved
        assert elapsed < 5.0, f"generate took {elapsed:.2f}s, expected <5s"

    def test_seeded_50x50_under_5s(self) -> None:
        rng = random.Random(7)
        solver = LayoutSolver(50, 50, rng)
        solver.apply_pre_constraints(
            grass_pre_constraints(voronoi_grass_map(50, 50, rng))
        )

        start = time.perf_counter()
        solver.generate()
        elapsed = time.perf_counter() - start

        assert elapsed < 5.0, f"generate took {elapsed:.2f}s, expected <5s"
