from __future__ import annotations

from collections.abc import Iterator

from layoutwfc.solver import LayoutSolver
from layoutwfc.tiles import DIR_OFFSETS, TileType, can_neighbor
from layoutwfc.types import GridPos


def adjacent_pairs(width: int, height: int) -> Iterator[tuple[GridPos, str, GridPos]]:
    """Yield every (cell, direction, neighbor) for east and south neighbours.

    Each unordered pair of adjacent cells appears exactly once.
    """
    for x in range(width):
        for y in range(height):
            for direction in ("E", "S"):
                dx, dy = DIR_OFFSETS[direction]
                nx, ny = x + dx, y + dy
                if nx < width and ny < height:
                    yield (x, y), direction, (nx, ny)


def incompatible_pairs(
    solver: LayoutSolver, exempt: set[GridPos] | frozenset[GridPos] = frozenset()
) -> list[str]:
    """Describe every adjacent pair whose shared edges do not match.

    Pairs touching a fallback cell are skipped, as are pairs where both cells
    are in ``exempt`` (e.g. two pre-constraints the caller forced together).
    """
    problems = []
    fallback = solver.fallback_cells
    for (x, y), direction, (nx, ny) in adjacent_pairs(solver.width, solver.height):
        if (x, y) in fallback or (nx, ny) in fallback:
            continue
        if (x, y) in exempt and (nx, ny) in exempt:
            continue
        tile = solver.get_tile_at(x, y)
        neighbor = solver.get_tile_at(nx, ny)
        assert tile is not None and neighbor is not None
        if not can_neighbor(tile, neighbor, direction):
            problems.append(
                f"{tile.name}@({x},{y}) -{direction}-> {neighbor.name}@({nx},{ny})"
            )
    return problems


def assert_fully_resolved(solver: LayoutSolver) -> None:
    for x in range(solver.width):
        for y in range(solver.height):
            tile = solver.get_tile_at(x, y)
            assert isinstance(tile, TileType), f"Unresolved cell at ({x},{y})"
