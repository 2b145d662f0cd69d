"""Command-line entry point: generate one layout and print it."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from layoutwfc import config
from layoutwfc.constraints import parse_layout_constraints
from layoutwfc.preview import render_text
from layoutwfc.seeding import (
    constraints_to_pre_constraints,
    grass_pre_constraints,
    voronoi_grass_map,
)
from layoutwfc.solver import LayoutSolver
from layoutwfc.tiles import TileType
from layoutwfc.util import rng

logger = logging.getLogger(__name__)


def _pre_constraint_arg(value: str) -> tuple[int, int, TileType]:
    """Parse ``X,Y,TILE`` where TILE is a name (``Door``) or a code (``10``)."""
    parts = [part.strip() for part in value.split(",")]
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"expected X,Y,TILE, got {value!r}")
    try:
        x, y = int(parts[0]), int(parts[1])
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"bad coordinates in {value!r}") from exc

    tile_name = parts[2]
    if tile_name.lstrip("-").isdigit():
        tile = TileType.from_code(int(tile_name))
        if tile is None:
            raise argparse.ArgumentTypeError(f"unknown tile code {tile_name}")
        return x, y, tile
    try:
        return x, y, TileType.from_name(tile_name)
    except KeyError as exc:
        raise argparse.ArgumentTypeError(f"unknown tile {tile_name!r}") from exc


def _constraints_arg(value: str) -> str:
    """Inline record text, or ``@path`` to read it from a file."""
    if not value.startswith("@"):
        return value
    path = Path(value[1:])
    try:
        return path.read_text()
    except OSError as exc:
        raise argparse.ArgumentTypeError(f"cannot read {path}: {exc}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="layoutwfc",
        description="Generate a tile layout with Wave Function Collapse",
    )
    parser.add_argument("--width", type=int, default=config.GRID_WIDTH)
    parser.add_argument("--height", type=int, default=config.GRID_HEIGHT)
    parser.add_argument(
        "--seed",
        type=str,
        default=None,
        help="Master random seed (default: config.RANDOM_SEED)",
    )
    parser.add_argument(
        "--voronoi",
        action="store_true",
        help="Seed grass regions from Voronoi noise before generating",
    )
    parser.add_argument(
        "--constraints",
        type=_constraints_arg,
        help="Layout record (JSON or model output), or @FILE to read one",
    )
    parser.add_argument(
        "--pre",
        type=_pre_constraint_arg,
        action="append",
        default=[],
        metavar="X,Y,TILE",
        help="Force a tile at a cell; repeatable, last one wins",
    )
    parser.add_argument(
        "--log-level",
        default=config.DEFAULT_LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.width < 1 or args.height < 1:
        parser.error("--width and --height must be at least 1")

    logging.basicConfig(level=args.log_level, format=config.LOG_FORMAT)
    rng.init(args.seed if args.seed is not None else config.RANDOM_SEED)

    solver = LayoutSolver(args.width, args.height)

    if args.voronoi:
        grass_map = voronoi_grass_map(args.width, args.height)
        solver.apply_pre_constraints(grass_pre_constraints(grass_map))

    if args.constraints is not None:
        constraints = parse_layout_constraints(args.constraints)
        logger.info("Layout constraints: %s", constraints.to_record())
        solver.apply_pre_constraints(
            constraints_to_pre_constraints(constraints, args.width, args.height)
        )

    for x, y, tile in args.pre:
        if not solver.set_pre_constraint(x, y, tile):
            logger.warning("Ignoring out-of-bounds pre-constraint (%d, %d)", x, y)

    solver.generate()

    print(render_text(solver))
    print(
        f"{args.width}x{args.height} layout, "
        f"{len(solver.pre_constraints)} pre-constraints, "
        f"{solver.stats.fallbacks} fallback cells, "
        f"{solver.stats.elapsed_ms.last:.1f}ms"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
