"""Integer-coded entry points over a single LayoutSolver.

This is the surface an embedding host talks to: tile types travel as integer
codes (0=Grass ... 10=Door, see TileType) and failures come back as ``False``
or ``-1`` rather than exceptions. There is no process-wide instance; whoever
creates a LayoutHandle owns it and is responsible for not sharing it across
threads without their own coordination beyond the solver's lock.
"""

from __future__ import annotations

from layoutwfc import config
from layoutwfc.solver import LayoutSolver
from layoutwfc.tiles import TileType
from layoutwfc.types import TileCode
from layoutwfc.util.rng import RNG

# Returned by get_tile_at for out-of-bounds or unresolved cells
INVALID_TILE: TileCode = -1


class LayoutHandle:
    """Explicit, single-owner handle wrapping one solver."""

    def __init__(
        self,
        width: int = config.GRID_WIDTH,
        height: int = config.GRID_HEIGHT,
        rng: RNG | None = None,
    ) -> None:
        self.solver = LayoutSolver(width, height, rng)

    def clear_layout(self) -> None:
        self.solver.clear_layout()

    def set_pre_constraint(self, x: int, y: int, tile_type: TileCode) -> bool:
        """Stage a forced tile by code.

        Returns False for an out-of-bounds cell or a code outside 0-10.
        """
        tile = TileType.from_code(tile_type)
        if tile is None:
            return False
        return self.solver.set_pre_constraint(x, y, tile)

    def clear_pre_constraints(self) -> None:
        self.solver.clear_pre_constraints()

    def generate_layout(self) -> None:
        self.solver.generate()

    def get_tile_at(self, x: int, y: int) -> TileCode:
        """Return the tile code at (x, y), or INVALID_TILE."""
        tile = self.solver.get_tile_at(x, y)
        return INVALID_TILE if tile is None else int(tile)
