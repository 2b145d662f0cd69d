"""Wave Function Collapse layout generator.

Fills a grid with room tiles (walls, corners, floor, doors) and open grass so
that every neighbouring pair of tiles has compatible edges:

- LayoutSolver: owns a grid, runs collapse and propagation
- LayoutHandle: the same operations with integer tile codes and sentinels
- TileType / EdgeType: the tile set and its adjacency rules

And the helpers that feed it:

- parse_layout_constraints / LayoutConstraints: structured layout hints
- constraints_to_pre_constraints / voronoi_grass_map: hints to seeded cells
- render_text: a glyph preview of a resolved grid
"""

from .constraints import LayoutConstraints, parse_layout_constraints
from .errors import InvalidConstraintsError, LayoutError, ReentrantGenerationError
from .handle import INVALID_TILE, LayoutHandle
from .preview import render_text
from .seeding import (
    constraints_to_pre_constraints,
    grass_pre_constraints,
    voronoi_grass_map,
)
from .solver import CollapseStep, LayoutSolver, SolverState
from .tiles import EdgeType, TileType, can_neighbor, edge_of, is_compatible

__all__ = [
    "INVALID_TILE",
    "CollapseStep",
    "EdgeType",
    "InvalidConstraintsError",
    "LayoutConstraints",
    "LayoutError",
    "LayoutHandle",
    "LayoutSolver",
    "ReentrantGenerationError",
    "SolverState",
    "TileType",
    "can_neighbor",
    "constraints_to_pre_constraints",
    "edge_of",
    "grass_pre_constraints",
    "is_compatible",
    "parse_layout_constraints",
    "render_text",
    "voronoi_grass_map",
]
