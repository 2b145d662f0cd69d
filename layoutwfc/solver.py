"""Wave Function Collapse solver for building layouts.

The solver fills a width x height grid with TileType values so that every pair
of neighbouring tiles shares compatible edges (see layoutwfc.tiles). Callers
can pin tiles at specific cells beforehand (pre-constraints); those act as
seeds the rest of the grid has to respect.

Usage:
    from layoutwfc.solver import LayoutSolver
    from layoutwfc.tiles import TileType

    solver = LayoutSolver(50, 50, random.Random(7))
    solver.set_pre_constraint(10, 10, TileType.DOOR)
    solver.generate()
    tile = solver.get_tile_at(10, 11)

Algorithm (one generate() call):
    1. Reset every cell to full superposition (all 11 tile types).
    2. Commit each pre-constraint and propagate it to its neighbours.
    3. Repeatedly pick an uncollapsed cell of globally minimum entropy,
       breaking ties uniformly at random, collapse it to a random remaining
       candidate and propagate to a fixpoint.
    4. Fill anything left unresolved with Floor.

Representation:
    The wave is a numpy uint16 array of shape (width, height); bit i of a cell
    is set while tile code i is still possible. Propagation intersects a
    neighbour's mask with a precomputed support mask (tiles.SUPPORT_MASKS), so
    one step costs one lookup and one AND regardless of how many candidates
    remain.

Contradictions:
    A cell whose mask empties during propagation is left empty; it has
    entropy 0, so the main loop selects it next and forces it to Floor without
    propagating from it. Floor is not re-checked against neighbours that are
    already collapsed, and neighbours collapsed afterwards are not filtered by
    it either. Both kinds of cell end up in ``fallback_cells``.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum, auto
from typing import TypeAlias

import numpy as np

from layoutwfc import config
from layoutwfc.errors import ReentrantGenerationError
from layoutwfc.tiles import (
    ALL_TILES_MASK,
    DIR_OFFSETS,
    DIRECTIONS,
    FALLBACK_TILE,
    POPCOUNT_TABLE,
    SUPPORT_MASKS,
    TileType,
    tiles_in_mask,
)
from layoutwfc.types import GridPos
from layoutwfc.util import rng as rng_module
from layoutwfc.util.metrics import GenerationStats
from layoutwfc.util.rng import RNG

logger = logging.getLogger(__name__)

# Marks a grid cell that has not been collapsed yet
UNRESOLVED = -1

# Entropy reported for collapsed cells when scanning for the minimum
_COLLAPSED_ENTROPY = np.iinfo(np.uint8).max


class SolverState(Enum):
    """Lifecycle of a solver's grid."""

    IDLE = auto()  # Cleared; nothing collapsed
    GENERATING = auto()  # Inside generate()
    RESOLVED = auto()  # Every cell holds exactly one tile


@dataclass(frozen=True)
class CollapseStep:
    """One main-loop selection, reported to the solver's observer.

    Attributes:
        x: Selected cell x coordinate.
        y: Selected cell y coordinate.
        entropy: Number of candidates the cell had when selected.
        tile: Tile the cell is about to be committed to.
        contradiction: True if the cell had no candidates left and is being
            forced to the fallback tile.
    """

    x: int
    y: int
    entropy: int
    tile: TileType
    contradiction: bool


CollapseObserver: TypeAlias = Callable[[CollapseStep], None]


class LayoutSolver:
    """Owns one grid, its wave and its pre-constraint overlay.

    A solver is not re-entrant. Each public operation holds the solver's lock;
    calls from other threads wait, and calls from the thread already inside an
    operation raise ReentrantGenerationError.

    The read accessors (get_tile_at, candidates, entropy, entropy_map, tiles,
    pre_constraints, fallback_cells, is_resolved) do not take the lock. They
    are safe to call from the observer; from another thread during generate()
    they may see a partly collapsed grid.
    """

    def __init__(
        self,
        width: int = config.GRID_WIDTH,
        height: int = config.GRID_HEIGHT,
        rng: RNG | None = None,
        observer: CollapseObserver | None = None,
    ) -> None:
        """Initialize an idle solver.

        Args:
            width: Grid width in cells.
            height: Grid height in cells.
            rng: Random source for tie-breaks and tile picks. Defaults to the
                "layout.wfc" stream.
            observer: Optional callback invoked for every main-loop selection
                before the cell is committed.

        Raises:
            ValueError: If either dimension is smaller than 1.
        """
        if width < 1 or height < 1:
            raise ValueError(f"Grid must be at least 1x1, got {width}x{height}")

        self.width = width
        self.height = height
        self.rng: RNG = rng if rng is not None else rng_module.get("layout.wfc")
        self.observer = observer

        self.wave = np.full((width, height), ALL_TILES_MASK, dtype=np.uint16)
        self.grid = np.full((width, height), UNRESOLVED, dtype=np.int8)
        self.collapsed = np.zeros((width, height), dtype=bool)

        self._pre_constraints: dict[GridPos, TileType] = {}
        self._fallback_cells: set[GridPos] = set()

        self.state = SolverState.IDLE
        self.stats = GenerationStats()

        self._lock = threading.Lock()
        self._owner: int | None = None

    # ------------------------------------------------------------------
    # Locking
    # ------------------------------------------------------------------

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        if self._owner == threading.get_ident():
            raise ReentrantGenerationError(
                "LayoutSolver operation called from inside another operation"
            )
        with self._lock:
            self._owner = threading.get_ident()
            try:
                yield
            finally:
                self._owner = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def clear_layout(self) -> None:
        """Reset the grid to unresolved and the wave to full superposition.

        Cells covered by a pre-constraint show only their forced tile in the
        wave. Nothing is collapsed or propagated; the overlay is kept.
        """
        with self._exclusive():
            self._reset()
            for (x, y), tile in self._pre_constraints.items():
                self.wave[x, y] = 1 << tile
            self.state = SolverState.IDLE

    def set_pre_constraint(self, x: int, y: int, tile_type: TileType) -> bool:
        """Force ``tile_type`` at (x, y) for subsequent generate() calls.

        A later call for the same cell replaces the earlier one.

        Returns:
            False (with no effect) if (x, y) is outside the grid, else True.
        """
        if not self.in_bounds(x, y):
            return False
        with self._exclusive():
            self._pre_constraints[(x, y)] = TileType(tile_type)
        return True

    def apply_pre_constraints(
        self, triples: Iterable[tuple[int, int, TileType]]
    ) -> int:
        """Stage a batch of (x, y, tile) pre-constraints in order.

        Returns:
            How many were accepted; out-of-bounds triples are skipped.
        """
        accepted = 0
        for x, y, tile in triples:
            if self.set_pre_constraint(x, y, tile):
                accepted += 1
        return accepted

    def clear_pre_constraints(self) -> None:
        """Drop the pre-constraint overlay. Grid and wave are untouched."""
        with self._exclusive():
            self._pre_constraints.clear()

    def generate(self) -> None:
        """Fill the whole grid. Always terminates with every cell resolved."""
        with self._exclusive():
            self.state = SolverState.GENERATING
            self.stats.begin_run()
            start = time.perf_counter()

            self._reset()
            self._seed_pre_constraints()

            while (pos := self._select_cell()) is not None:
                self._collapse(*pos)

            self._fill_gaps()

            elapsed_ms = (time.perf_counter() - start) * 1000.0
            self.stats.end_run(elapsed_ms)
            self.state = SolverState.RESOLVED

        logger.debug(
            "Generated %dx%d layout: %d pre-constraints, %d contradictions, "
            "%d fallback cells, %.1fms",
            self.width,
            self.height,
            len(self._pre_constraints),
            self.stats.contradictions,
            self.stats.fallbacks,
            elapsed_ms,
        )

    def get_tile_at(self, x: int, y: int) -> TileType | None:
        """Return the resolved tile at (x, y).

        Returns None for coordinates outside the grid and for cells that have
        not been collapsed (before the first generate()).
        """
        if not self.in_bounds(x, y):
            return None
        code = int(self.grid[x, y])
        if code == UNRESOLVED:
            return None
        return TileType(code)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def pre_constraints(self) -> dict[GridPos, TileType]:
        return dict(self._pre_constraints)

    @property
    def fallback_cells(self) -> frozenset[GridPos]:
        """Cells forced to Floor by a contradiction or the final gap fill."""
        return frozenset(self._fallback_cells)

    @property
    def is_resolved(self) -> bool:
        return bool((self.grid != UNRESOLVED).all())

    def candidates(self, x: int, y: int) -> list[TileType]:
        """Tiles still possible at (x, y); empty outside the grid."""
        if not self.in_bounds(x, y):
            return []
        return tiles_in_mask(int(self.wave[x, y]))

    def entropy(self, x: int, y: int) -> int:
        """Number of tiles still possible at (x, y); 0 outside the grid."""
        if not self.in_bounds(x, y):
            return 0
        return int(POPCOUNT_TABLE[self.wave[x, y]])

    def entropy_map(self) -> np.ndarray:
        """Entropy of every cell, shape (width, height). Includes collapsed cells."""
        return POPCOUNT_TABLE[self.wave]

    def is_collapsed(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and bool(self.collapsed[x, y])

    def tiles(self) -> list[list[TileType | None]]:
        """Copy of the grid as columns: ``result[x][y]``."""
        return [
            [self.get_tile_at(x, y) for y in range(self.height)]
            for x in range(self.width)
        ]

    # ------------------------------------------------------------------
    # Algorithm
    # ------------------------------------------------------------------

    def _reset(self) -> None:
        self.wave.fill(ALL_TILES_MASK)
        self.grid.fill(UNRESOLVED)
        self.collapsed.fill(False)
        self._fallback_cells.clear()

    def _commit(self, x: int, y: int, tile: TileType) -> None:
        self.grid[x, y] = tile
        self.wave[x, y] = 1 << tile
        self.collapsed[x, y] = True

    def _seed_pre_constraints(self) -> None:
        """Commit every pre-constraint, then propagate from all of them."""
        seeded = list(self._pre_constraints)
        for x, y in seeded:
            self._commit(x, y, self._pre_constraints[(x, y)])
        self._propagate(seeded)

    def _select_cell(self) -> GridPos | None:
        """Pick an uncollapsed cell of minimum entropy, or None when done.

        Ties are broken uniformly at random; a fixed scan order would bias
        the layout along the grid axes.
        """
        open_cells = ~self.collapsed
        if not open_cells.any():
            return None

        entropy = np.where(open_cells, POPCOUNT_TABLE[self.wave], _COLLAPSED_ENTROPY)
        min_entropy = entropy.min()
        ties = np.flatnonzero(entropy == min_entropy)

        flat_index = int(ties[self.rng.randrange(len(ties))])
        x, y = divmod(flat_index, self.height)
        return x, y

    def _collapse(self, x: int, y: int) -> None:
        mask = int(self.wave[x, y])

        if mask == 0:
            step = CollapseStep(x, y, 0, FALLBACK_TILE, contradiction=True)
            if self.observer is not None:
                self.observer(step)
            self._commit(x, y, FALLBACK_TILE)
            self._fallback_cells.add((x, y))
            self.stats.fallbacks += 1
            logger.debug(
                "Contradiction at (%d, %d): forced to %s", x, y, step.tile.name
            )
            return

        options = tiles_in_mask(mask)
        tile = options[self.rng.randrange(len(options))]
        if self.observer is not None:
            self.observer(CollapseStep(x, y, len(options), tile, contradiction=False))
        self._commit(x, y, tile)
        self._propagate([(x, y)])

    def _propagate(self, cells: list[GridPos]) -> None:
        """Remove unsupported candidates outward from ``cells`` until stable.

        Breadth-first worklist of cells whose wave changed. Collapsed cells are
        never modified. A neighbour whose wave empties is recorded as a
        contradiction and not propagated from.
        """
        queue = deque(cells)
        queued = set(cells)

        while queue:
            x, y = queue.popleft()
            queued.discard((x, y))

            current_mask = int(self.wave[x, y])
            if current_mask == 0:
                # Emptied while queued; it supports nothing
                continue

            for d, direction in enumerate(DIRECTIONS):
                dx, dy = DIR_OFFSETS[direction]
                nx, ny = x + dx, y + dy

                if not (0 <= nx < self.width and 0 <= ny < self.height):
                    continue
                if self.collapsed[nx, ny]:
                    continue

                neighbor_mask = int(self.wave[nx, ny])
                if neighbor_mask == 0:
                    continue

                new_mask = neighbor_mask & int(SUPPORT_MASKS[d, current_mask])
                if new_mask == neighbor_mask:
                    continue

                self.wave[nx, ny] = new_mask

                if new_mask == 0:
                    self.stats.contradictions += 1
                    logger.debug("No candidates left at (%d, %d)", nx, ny)
                    continue

                if (nx, ny) not in queued:
                    queue.append((nx, ny))
                    queued.add((nx, ny))

    def _fill_gaps(self) -> None:
        for x, y in np.argwhere(self.grid == UNRESOLVED):
            self._commit(int(x), int(y), FALLBACK_TILE)
            self._fallback_cells.add((int(x), int(y)))
            self.stats.fallbacks += 1
