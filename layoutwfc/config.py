"""
Configuration constants.

Centralizes the magic numbers used by the layout generator, organized by
functional area.
"""

# =============================================================================
# GENERAL
# =============================================================================

# None gives a fresh layout every run; set a value for reproducible output.
RANDOM_SEED = None

# =============================================================================
# GRID
# =============================================================================

GRID_WIDTH = 50
GRID_HEIGHT = 50

# =============================================================================
# SEEDING
# =============================================================================

# Plain Voronoi grass noise (no layout record)
VORONOI_SEED_COUNT = 10
VORONOI_GRASS_PROBABILITY = 0.4

# Defaults used when a layout record field cannot be recovered
DEFAULT_BUILDING_DENSITY = "medium"
DEFAULT_CLUSTERING = "random"
DEFAULT_GRASS_RATIO = 0.3
DEFAULT_BUILDING_SIZE_HINT = "medium"

# Number of building seeds per density level
BUILDING_COUNTS = {
    "sparse": 3,
    "medium": 6,
    "dense": 10,
}

# Side length of the square floor footprint stamped at each building seed
BUILDING_FOOTPRINTS = {
    "small": 1,
    "medium": 2,
    "large": 3,
}

# Clustered placement: cluster centers stay this far from the grid edge,
# and members scatter within +/- half the spread around the center.
CLUSTER_EDGE_MARGIN = 5
CLUSTER_SPREAD = 8

# One grass seed per this many cells of wanted grass; each seed claims a
# disc of roughly this area
GRASS_SEED_CELLS = 100

# =============================================================================
# METRICS & LOGGING
# =============================================================================

STATS_SAMPLE_SIZE = 256  # Number of generation timings to keep

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DEFAULT_LOG_LEVEL = "WARNING"
