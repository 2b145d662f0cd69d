"""Plain-text rendering of a solver's grid, one glyph per cell."""

from __future__ import annotations

from layoutwfc.solver import LayoutSolver
from layoutwfc.tiles import TileType

TILE_GLYPHS: dict[TileType, str] = {
    TileType.GRASS: '"',
    TileType.FLOOR: ".",
    TileType.WALL_NORTH: "-",
    TileType.WALL_SOUTH: "-",
    TileType.WALL_EAST: "|",
    TileType.WALL_WEST: "|",
    TileType.CORNER_NE: "+",
    TileType.CORNER_NW: "+",
    TileType.CORNER_SE: "+",
    TileType.CORNER_SW: "+",
    TileType.DOOR: "D",
}

UNRESOLVED_GLYPH = "?"


def render_text(solver: LayoutSolver) -> str:
    """Return the grid as text, row y=0 first, no trailing newline."""
    rows = []
    for y in range(solver.height):
        row = []
        for x in range(solver.width):
            tile = solver.get_tile_at(x, y)
            row.append(UNRESOLVED_GLYPH if tile is None else TILE_GLYPHS[tile])
        rows.append("".join(row))
    return "\n".join(rows)
