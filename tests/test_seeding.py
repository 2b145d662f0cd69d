"""Tests for Voronoi grass seeding and constraint-driven pre-constraints."""

from __future__ import annotations

import random
import tracemalloc

import numpy as np
import pytest

from layoutwfc import config
from layoutwfc.constraints import LayoutConstraints
from layoutwfc.seeding import (
    constraints_to_pre_constraints,
    grass_pre_constraints,
    voronoi_grass_map,
)
from layoutwfc.solver import LayoutSolver
from layoutwfc.tiles import TileType
from layoutwfc.util import rng

# =============================================================================
# Voronoi grass map
# =============================================================================


class TestVoronoiGrassMap:
    def test_shape_and_dtype(self) -> None:
        grass = voronoi_grass_map(30, 20, random.Random(1))

        assert grass.shape == (30, 20)
        assert grass.dtype == np.bool_

    def test_same_seed_same_map(self) -> None:
        a = voronoi_grass_map(25, 25, random.Random(9))
        b = voronoi_grass_map(25, 25, random.Random(9))

        assert np.array_equal(a, b)

    def test_default_stream_is_reproducible(self) -> None:
        first = voronoi_grass_map(25, 25)
        rng.init("layoutwfc-tests")
        second = voronoi_grass_map(25, 25)

        assert np.array_equal(first, second)

    def test_no_seeds_means_no_grass(self) -> None:
        assert not voronoi_grass_map(10, 10, random.Random(0), num_seeds=0).any()

    @pytest.mark.parametrize(("probability", "expected"), [(0.0, False), (1.0, True)])
    def test_probability_extremes(self, probability: float, expected: bool) -> None:
        grass = voronoi_grass_map(
            15, 15, random.Random(4), grass_probability=probability
        )

        assert (grass == expected).all()

    def test_single_seed_floods_the_grid(self) -> None:
        """Every cell shares the lone site's flag."""
        grass = voronoi_grass_map(12, 8, random.Random(5), num_seeds=1)

        assert grass.all() or not grass.any()

    def test_regions_are_patches_not_noise(self) -> None:
        """Most cells agree with their east neighbour."""
        grass = voronoi_grass_map(40, 40, random.Random(2), num_seeds=8)

        agree = (grass[:-1, :] == grass[1:, :]).mean()
        assert agree > 0.7

    def test_grass_pre_constraints(self) -> None:
        grass = np.zeros((4, 3), dtype=bool)
        grass[1, 2] = True
        grass[3, 0] = True

        assert sorted(grass_pre_constraints(grass)) == [
            (1, 2, TileType.GRASS),
            (3, 0, TileType.GRASS),
        ]


# =============================================================================
# Constraints to pre-constraints
# =============================================================================


def split(
    triples: list[tuple[int, int, TileType]],
) -> tuple[set[tuple[int, int]], set[tuple[int, int]]]:
    grass = {(x, y) for x, y, tile in triples if tile is TileType.GRASS}
    floors = {(x, y) for x, y, tile in triples if tile is TileType.FLOOR}
    return grass, floors


class TestConstraintsToPreConstraints:
    def test_only_grass_and_floor(self) -> None:
        triples = constraints_to_pre_constraints(
            LayoutConstraints(), 50, 50, random.Random(0)
        )

        assert {tile for _, _, tile in triples} <= {TileType.GRASS, TileType.FLOOR}

    def test_no_grass_when_ratio_is_zero(self) -> None:
        constraints = LayoutConstraints(grass_ratio=0.0)

        grass, floors = split(
            constraints_to_pre_constraints(constraints, 50, 50, random.Random(0))
        )

        assert grass == set()
        assert floors

    def test_more_grass_with_higher_ratio(self) -> None:
        low, _ = split(
            constraints_to_pre_constraints(
                LayoutConstraints(grass_ratio=0.1), 50, 50, random.Random(3)
            )
        )
        high, _ = split(
            constraints_to_pre_constraints(
                LayoutConstraints(grass_ratio=0.9), 50, 50, random.Random(3)
            )
        )

        assert len(high) > len(low)
        assert len(low) < 0.5 * 50 * 50

    @pytest.mark.parametrize("seed", range(6))
    def test_floors_never_cover_grass(self, seed: int) -> None:
        triples = constraints_to_pre_constraints(
            LayoutConstraints(
                building_density="dense", grass_ratio=0.6, building_size_hint="large"
            ),
            40,
            40,
            random.Random(seed),
        )

        grass, floors = split(triples)
        assert not grass & floors
        assert len(triples) == len(grass) + len(floors)

    def test_grass_comes_first(self) -> None:
        triples = constraints_to_pre_constraints(
            LayoutConstraints(grass_ratio=0.2), 50, 50, random.Random(1)
        )

        tiles = [tile for _, _, tile in triples]
        first_floor = tiles.index(TileType.FLOOR)
        assert TileType.GRASS not in tiles[first_floor:]

    @pytest.mark.parametrize("clustering", ["clustered", "distributed", "random"])
    def test_footprints_stay_in_bounds(self, clustering: str) -> None:
        constraints = LayoutConstraints(
            building_density="dense",
            clustering=clustering,  # type: ignore[arg-type]
            grass_ratio=0.0,
            building_size_hint="large",
        )

        for seed in range(5):
            triples = constraints_to_pre_constraints(
                constraints, 4, 3, random.Random(seed)
            )
            for x, y, _ in triples:
                assert 0 <= x < 4 and 0 <= y < 3

    def test_footprint_size_follows_hint(self) -> None:
        small = LayoutConstraints(
            building_density="sparse", grass_ratio=0.0, building_size_hint="small"
        )

        _, floors = split(
            constraints_to_pre_constraints(small, 50, 50, random.Random(2))
        )

        assert 1 <= len(floors) <= config.BUILDING_COUNTS["sparse"]

    def test_clustered_buildings_keep_off_the_edge(self) -> None:
        constraints = LayoutConstraints(
            building_density="dense",
            clustering="clustered",
            grass_ratio=0.0,
            building_size_hint="small",
        )
        low = config.CLUSTER_EDGE_MARGIN - config.CLUSTER_SPREAD // 2
        high = 50 - config.CLUSTER_EDGE_MARGIN + config.CLUSTER_SPREAD // 2

        for seed in range(5):
            _, floors = split(
                constraints_to_pre_constraints(constraints, 50, 50, random.Random(seed))
            )
            assert floors
            for x, y in floors:
                assert low <= x < high
                assert low <= y < high

    def test_same_seed_same_triples(self) -> None:
        constraints = LayoutConstraints(clustering="clustered", grass_ratio=0.4)

        a = constraints_to_pre_constraints(constraints, 30, 30, random.Random(7))
        b = constraints_to_pre_constraints(constraints, 30, 30, random.Random(7))

        assert a == b

    def test_solver_honours_seeded_cells(self) -> None:
        triples = constraints_to_pre_constraints(
            LayoutConstraints(grass_ratio=0.3), 30, 30, random.Random(4)
        )
        solver = LayoutSolver(30, 30, random.Random(4))
        solver.apply_pre_constraints(triples)

        solver.generate()

        for x, y, tile in triples:
            assert solver.get_tile_at(x, y) is tile

    def test_large_grid_memory_stays_flat(self) -> None:
        """Full grass on 200x200 places 400 seeds without a per-seed buffer."""
        constraints = LayoutConstraints(grass_ratio=1.0)

        tracemalloc.start()
        try:
            triples = constraints_to_pre_constraints(
                constraints, 200, 200, random.Random(6)
            )
            _, peak = tracemalloc.get_traced_memory()
        finally:
            tracemalloc.stop()

        grass, _ = split(triples)
        assert len(grass) > 0.5 * 200 * 200
        assert peak < 32 * 1024 * 1024, f"peak {peak / 2**20:.1f} MiB"
