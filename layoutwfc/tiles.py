"""Tile types, edge types and the adjacency rules between them.

Every tile type has one edge type per compass direction. Two tiles may sit
next to each other when the edges they share are compatible:

    Empty <-> Empty, Grass     (exterior side of walls, open ground)
    Wall  <-> Wall             (a wall run continuing sideways)
    Floor <-> Floor, Door      (room interior)
    Door  <-> Floor            (a door opens onto floor, never onto a door)
    Grass <-> Grass, Empty

Wall tiles carry Empty on their exterior side and Floor on their interior side,
so stacking two same-facing walls (a WallNorth directly north of another
WallNorth) fails the ordinary south/north comparison: Floor against Empty.

All lookups are fixed numpy tables indexed by the integer codes of the enums,
including the per-direction support masks the solver's propagation uses:
SUPPORT_MASKS[d][wave] is the set of tiles that can sit in direction d of a
cell whose remaining candidates are ``wave``.
"""

from __future__ import annotations

import re
from enum import IntEnum

import numpy as np

from layoutwfc.types import GridOffset, TileMask


class TileType(IntEnum):
    """The fixed set of tile types. Values are the public integer codes."""

    GRASS = 0
    FLOOR = 1
    WALL_NORTH = 2
    WALL_SOUTH = 3
    WALL_EAST = 4
    WALL_WEST = 5
    CORNER_NE = 6
    CORNER_NW = 7
    CORNER_SE = 8
    CORNER_SW = 9
    DOOR = 10

    @classmethod
    def from_code(cls, code: int) -> TileType | None:
        """Return the tile type for an integer code, or None if out of range."""
        try:
            return cls(code)
        except ValueError:
            return None

    @classmethod
    def from_name(cls, name: str) -> TileType:
        """Look up a tile by name, accepting ``WallNorth``, ``wall_north`` etc.

        Raises:
            KeyError: If no tile type has that name.
        """
        key = name.strip().replace("-", "_")
        if key.upper() in cls.__members__:
            return cls[key.upper()]
        # CamelCase -> SNAKE_CASE; "CornerNE" -> "CORNER_NE"
        return cls[re.sub(r"(?<=[a-z])(?=[A-Z])", "_", key).upper()]


class EdgeType(IntEnum):
    """What lies along one side of a tile."""

    EMPTY = 0
    WALL = 1
    FLOOR = 2
    GRASS = 3
    DOOR = 4


NUM_TILE_TYPES = len(TileType)
NUM_EDGE_TYPES = len(EdgeType)

# Mask with every tile type possible (0b111_1111_1111 for 11 tiles)
ALL_TILES_MASK: TileMask = (1 << NUM_TILE_TYPES) - 1

# The tile a cell is forced to when its candidates run out
FALLBACK_TILE = TileType.FLOOR

# Direction utilities
DIRECTIONS = ["N", "E", "S", "W"]
OPPOSITE_DIR = {"N": "S", "E": "W", "S": "N", "W": "E"}
DIR_OFFSETS: dict[str, GridOffset] = {
    "N": (0, -1),
    "E": (1, 0),
    "S": (0, 1),
    "W": (-1, 0),
}
DIR_INDEX = {direction: i for i, direction in enumerate(DIRECTIONS)}

_E = EdgeType.EMPTY
_W = EdgeType.WALL
_F = EdgeType.FLOOR
_G = EdgeType.GRASS
_D = EdgeType.DOOR

# Edge table in DIRECTIONS order: (N, E, S, W)
TILE_EDGES = np.array(
    [
        (_G, _G, _G, _G),  # GRASS
        (_F, _F, _F, _F),  # FLOOR
        (_E, _W, _F, _W),  # WALL_NORTH: exterior north, room to the south
        (_F, _W, _E, _W),  # WALL_SOUTH: room to the north, exterior south
        (_W, _E, _W, _F),  # WALL_EAST: room to the west, exterior east
        (_W, _F, _W, _E),  # WALL_WEST: exterior west, room to the east
        (_E, _E, _W, _W),  # CORNER_NE
        (_E, _W, _W, _E),  # CORNER_NW
        (_W, _E, _E, _W),  # CORNER_SE
        (_W, _W, _E, _E),  # CORNER_SW
        (_D, _D, _D, _D),  # DOOR
    ],
    dtype=np.uint8,
)
TILE_EDGES.setflags(write=False)

EDGE_COMPATIBILITY = np.zeros((NUM_EDGE_TYPES, NUM_EDGE_TYPES), dtype=bool)
for _a, _b in (
    (_E, _E),
    (_E, _G),
    (_W, _W),
    (_F, _F),
    (_F, _D),
    (_G, _G),
):
    EDGE_COMPATIBILITY[_a, _b] = True
    EDGE_COMPATIBILITY[_b, _a] = True
EDGE_COMPATIBILITY.setflags(write=False)


def edge_of(tile: TileType, direction: str) -> EdgeType:
    """Return the edge type ``tile`` presents toward ``direction``."""
    return EdgeType(int(TILE_EDGES[tile, DIR_INDEX[direction]]))


def is_compatible(edge_a: EdgeType, edge_b: EdgeType) -> bool:
    """Return True if two edges may share a boundary. Symmetric."""
    return bool(EDGE_COMPATIBILITY[edge_a, edge_b])


def can_neighbor(tile: TileType, neighbor: TileType, direction: str) -> bool:
    """Return True if ``neighbor`` may sit immediately ``direction`` of ``tile``.

    For direction "N" this compares tile's north edge with neighbor's south
    edge, and so on.
    """
    return is_compatible(
        edge_of(tile, direction), edge_of(neighbor, OPPOSITE_DIR[direction])
    )


def tiles_in_mask(mask: TileMask) -> list[TileType]:
    """Expand a candidate bitmask into tile types, in code order."""
    return [tile for tile in TileType if mask & (1 << tile)]


def mask_of(tiles: list[TileType] | set[TileType]) -> TileMask:
    mask = 0
    for tile in tiles:
        mask |= 1 << tile
    return mask


# Precomputed popcount lookup table for every possible wave mask
POPCOUNT_TABLE = np.array(
    [bin(i).count("1") for i in range(ALL_TILES_MASK + 1)], dtype=np.uint8
)
POPCOUNT_TABLE.setflags(write=False)


def _build_neighbor_masks() -> np.ndarray:
    """NEIGHBOR_MASKS[d, t]: tiles allowed immediately direction d of tile t."""
    masks = np.zeros((len(DIRECTIONS), NUM_TILE_TYPES), dtype=np.uint16)
    for d, direction in enumerate(DIRECTIONS):
        for tile in TileType:
            allowed = 0
            for neighbor in TileType:
                if can_neighbor(tile, neighbor, direction):
                    allowed |= 1 << neighbor
            masks[d, tile] = allowed
    return masks


def _build_support_masks(neighbor_masks: np.ndarray) -> np.ndarray:
    """SUPPORT_MASKS[d, wave]: union of NEIGHBOR_MASKS[d, t] over t in wave.

    Built incrementally: the support of a mask is the support of the mask
    without its lowest bit, OR the lowest bit's own neighbor mask.
    """
    support = np.zeros((len(DIRECTIONS), ALL_TILES_MASK + 1), dtype=np.uint16)
    for mask in range(1, ALL_TILES_MASK + 1):
        lowest = (mask & -mask).bit_length() - 1
        support[:, mask] = support[:, mask & (mask - 1)] | neighbor_masks[:, lowest]
    return support


NEIGHBOR_MASKS = _build_neighbor_masks()
NEIGHBOR_MASKS.setflags(write=False)

SUPPORT_MASKS = _build_support_masks(NEIGHBOR_MASKS)
SUPPORT_MASKS.setflags(write=False)
