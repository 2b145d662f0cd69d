"""Turn layout hints into pre-constraints for the solver.

Two producers live here:

- voronoi_grass_map(): scatter a handful of Voronoi sites, flag some of them
  as grass, and give every cell the flag of its nearest site. This breaks
  open ground into irregular patches instead of large uniform quadrants.
- constraints_to_pre_constraints(): expand a LayoutConstraints record into
  grass cells (around randomly placed grass seeds) and square Floor footprints
  at building seeds.

Both return plain data; nothing here touches a solver. Stage the result with
LayoutSolver.apply_pre_constraints().

Grass reach: each grass seed claims a disc of about GRASS_SEED_CELLS cells.
A reach that shrinks with the ratio instead, hypot(width, height) *
(1 - grass_ratio), is wider than the grid for most ratios and turns nearly
every cell into grass; with fixed discs the grass share follows grass_ratio.
"""

from __future__ import annotations

import math
from typing import TypeAlias

import numpy as np

from layoutwfc import config
from layoutwfc.constraints import LayoutConstraints
from layoutwfc.tiles import TileType
from layoutwfc.types import GridPos
from layoutwfc.util import rng as rng_module
from layoutwfc.util.rng import RNG

PreConstraint: TypeAlias = tuple[int, int, TileType]

_seeding_rng = rng_module.get("layout.seeding")


def voronoi_grass_map(
    width: int,
    height: int,
    rng: RNG | None = None,
    num_seeds: int = config.VORONOI_SEED_COUNT,
    grass_probability: float = config.VORONOI_GRASS_PROBABILITY,
) -> np.ndarray:
    """Return a boolean (width, height) array, True where the cell is grass.

    Args:
        width: Grid width in cells.
        height: Grid height in cells.
        rng: Random source. Defaults to the "layout.seeding" stream.
        num_seeds: Number of Voronoi sites.
        grass_probability: Chance that each site's region is grass.
    """
    rng = rng if rng is not None else _seeding_rng
    if num_seeds <= 0:
        return np.zeros((width, height), dtype=bool)

    sites = np.empty((num_seeds, 2), dtype=np.float64)
    is_grass = np.empty(num_seeds, dtype=bool)
    for i in range(num_seeds):
        sites[i] = (rng.random() * width, rng.random() * height)
        is_grass[i] = rng.random() < grass_probability

    xs, ys = np.meshgrid(np.arange(width), np.arange(height), indexing="ij")
    # Squared distances, shape (width, height, num_seeds)
    dist = (xs[..., None] - sites[:, 0]) ** 2 + (ys[..., None] - sites[:, 1]) ** 2
    nearest = dist.argmin(axis=2)
    return is_grass[nearest]


def grass_pre_constraints(grass_map: np.ndarray) -> list[PreConstraint]:
    """One (x, y, GRASS) triple per True cell of ``grass_map``."""
    return [(int(x), int(y), TileType.GRASS) for x, y in np.argwhere(grass_map)]


def constraints_to_pre_constraints(
    constraints: LayoutConstraints,
    width: int = config.GRID_WIDTH,
    height: int = config.GRID_HEIGHT,
    rng: RNG | None = None,
) -> list[PreConstraint]:
    """Expand layout hints into pre-constraint triples.

    Grass cells come first, then building floors. Floors never overwrite grass.
    """
    rng = rng if rng is not None else _seeding_rng

    grass = _grass_cells(constraints.grass_ratio, width, height, rng)
    pre_constraints: list[PreConstraint] = [
        (x, y, TileType.GRASS) for x, y in sorted(grass)
    ]

    side = config.BUILDING_FOOTPRINTS[constraints.building_size_hint]
    floors: set[GridPos] = set()
    for sx, sy in _building_seeds(constraints, width, height, rng):
        if not (0 <= sx < width and 0 <= sy < height) or (sx, sy) in grass:
            continue
        for x in range(sx, min(sx + side, width)):
            for y in range(sy, min(sy + side, height)):
                if (x, y) in grass or (x, y) in floors:
                    continue
                floors.add((x, y))
                pre_constraints.append((x, y, TileType.FLOOR))

    return pre_constraints


def _grass_cells(
    grass_ratio: float, width: int, height: int, rng: RNG
) -> set[GridPos]:
    """Cells within reach of a randomly placed grass seed.

    One seed per GRASS_SEED_CELLS cells of grass wanted, each claiming a disc
    of about GRASS_SEED_CELLS cells, so coverage tracks grass_ratio until the
    discs start to overlap.
    """
    num_seeds = math.floor(width * height * grass_ratio / config.GRASS_SEED_CELLS)
    if num_seeds <= 0:
        return set()

    max_dist_sq = config.GRASS_SEED_CELLS / math.pi

    xs, ys = np.meshgrid(np.arange(width), np.arange(height), indexing="ij")
    # Running squared distance to the nearest seed so far; one (w, h) buffer
    # no matter how many seeds there are
    dist_sq = np.full((width, height), np.inf)
    for _ in range(num_seeds):
        sx, sy = rng.randrange(width), rng.randrange(height)
        np.minimum(dist_sq, (xs - sx) ** 2 + (ys - sy) ** 2, out=dist_sq)

    return {(int(x), int(y)) for x, y in np.argwhere(dist_sq <= max_dist_sq)}


def _building_seeds(
    constraints: LayoutConstraints, width: int, height: int, rng: RNG
) -> list[GridPos]:
    count = config.BUILDING_COUNTS[constraints.building_density]

    if constraints.clustering != "clustered":
        return [(rng.randrange(width), rng.randrange(height)) for _ in range(count)]

    margin = config.CLUSTER_EDGE_MARGIN
    num_clusters = max(1, count // 3)
    per_cluster = count // num_clusters
    seeds: list[GridPos] = []
    for _ in range(num_clusters):
        # Grids too small for the margin fall back to the full range
        cx = _randrange_within(rng, margin, width - margin, width)
        cy = _randrange_within(rng, margin, height - margin, height)
        for _ in range(per_cluster):
            seeds.append(
                (
                    cx + math.floor((rng.random() - 0.5) * config.CLUSTER_SPREAD),
                    cy + math.floor((rng.random() - 0.5) * config.CLUSTER_SPREAD),
                )
            )
    return seeds


def _randrange_within(rng: RNG, start: int, stop: int, size: int) -> int:
    if stop > start:
        return rng.randrange(start, stop)
    return rng.randrange(size)
