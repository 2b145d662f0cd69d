from __future__ import annotations

from typing import TypeAlias

# =============================================================================
# SPATIAL TYPES
# =============================================================================

GridCoord: TypeAlias = int  # Always integer cell position

# Grid positions - (x, y) with x growing east and y growing south
GridPos: TypeAlias = tuple[GridCoord, GridCoord]  # Example: (2, 3) = column 2, row 3

# Grid offsets for a single cardinal step
GridOffset: TypeAlias = tuple[int, int]  # Example: (0, -1) = one step north

# =============================================================================
# WAVE TYPES
# =============================================================================

# Bitmask over tile codes: bit i set means tile code i is still possible.
TileMask: TypeAlias = int

# Integer tile code at the handle boundary (0-10, or -1 as the sentinel).
TileCode: TypeAlias = int

# =============================================================================
# RANDOMNESS
# =============================================================================

RandomSeed: TypeAlias = int | float | str | bytes | bytearray | None
