"""High-level layout hints and a tolerant parser for them.

A language model (or any other producer) describes the wanted layout as a small
record:

    {"buildingDensity": "sparse" | "medium" | "dense",
     "clustering": "clustered" | "distributed" | "random",
     "grassRatio": 0.0 - 1.0,
     "buildingSizeHint": "small" | "medium" | "large"}

Model output is rarely clean JSON, so parse_layout_constraints() first tries
the outermost ``{...}`` span as JSON and, failing strict validation, falls back
to pulling each field out with a regular expression and filling the gaps with
defaults from config. layoutwfc.seeding turns the result into pre-constraints.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, TypeAlias, cast, get_args

from layoutwfc import config
from layoutwfc.errors import InvalidConstraintsError

logger = logging.getLogger(__name__)

BuildingDensity: TypeAlias = Literal["sparse", "medium", "dense"]
Clustering: TypeAlias = Literal["clustered", "distributed", "random"]
BuildingSize: TypeAlias = Literal["small", "medium", "large"]

DENSITIES: tuple[str, ...] = get_args(BuildingDensity)
CLUSTERINGS: tuple[str, ...] = get_args(Clustering)
SIZES: tuple[str, ...] = get_args(BuildingSize)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
_DENSITY_FIELD = re.compile(r"buildingDensity[\"\s:]+(sparse|medium|dense)", re.I)
_CLUSTERING_FIELD = re.compile(
    r"clustering[\"\s:]+(clustered|distributed|random)", re.I
)
_GRASS_RATIO_FIELD = re.compile(r"grassRatio[\"\s:]+([\d.]+)", re.I)
_SIZE_FIELD = re.compile(r"buildingSizeHint[\"\s:]+(small|medium|large)", re.I)


@dataclass(frozen=True)
class LayoutConstraints:
    """Structured layout hints.

    Attributes:
        building_density: How many buildings to seed.
        clustering: Whether buildings bunch up ("clustered") or spread out.
        grass_ratio: Share of open ground, 0.0 to 1.0.
        building_size_hint: Footprint of each seeded building.
    """

    building_density: BuildingDensity = cast(
        BuildingDensity, config.DEFAULT_BUILDING_DENSITY
    )
    clustering: Clustering = cast(Clustering, config.DEFAULT_CLUSTERING)
    grass_ratio: float = config.DEFAULT_GRASS_RATIO
    building_size_hint: BuildingSize = cast(
        BuildingSize, config.DEFAULT_BUILDING_SIZE_HINT
    )

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> LayoutConstraints:
        """Build from a camelCase record, validating every field.

        Raises:
            InvalidConstraintsError: If a field is missing, has the wrong type
                or is out of range.
        """
        density = record.get("buildingDensity")
        clustering = record.get("clustering")
        grass_ratio = record.get("grassRatio")
        size = record.get("buildingSizeHint")

        if density not in DENSITIES:
            raise InvalidConstraintsError(f"Invalid buildingDensity: {density!r}")
        if clustering not in CLUSTERINGS:
            raise InvalidConstraintsError(f"Invalid clustering: {clustering!r}")
        # bool is an int subclass; True is not a ratio
        if isinstance(grass_ratio, bool) or not isinstance(grass_ratio, int | float):
            raise InvalidConstraintsError(f"Invalid grassRatio: {grass_ratio!r}")
        if not 0.0 <= grass_ratio <= 1.0:
            raise InvalidConstraintsError(
                f"grassRatio must be between 0 and 1, got {grass_ratio}"
            )
        if size not in SIZES:
            raise InvalidConstraintsError(f"Invalid buildingSizeHint: {size!r}")

        return cls(
            building_density=density,
            clustering=clustering,
            grass_ratio=float(grass_ratio),
            building_size_hint=size,
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "buildingDensity": self.building_density,
            "clustering": self.clustering,
            "grassRatio": self.grass_ratio,
            "buildingSizeHint": self.building_size_hint,
        }


def parse_layout_constraints(text: str) -> LayoutConstraints:
    """Recover layout constraints from free-form model output. Never raises."""
    match = _JSON_OBJECT.search(text)
    if match:
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError as exc:
            logger.debug("Layout record is not valid JSON: %s", exc)
        else:
            if isinstance(parsed, dict):
                try:
                    return LayoutConstraints.from_record(parsed)
                except InvalidConstraintsError as exc:
                    logger.debug("Layout record failed validation: %s", exc)

    logger.debug("Falling back to field-by-field layout parsing")
    return _parse_fields(text)


def _parse_fields(text: str) -> LayoutConstraints:
    defaults = LayoutConstraints()

    density = _DENSITY_FIELD.search(text)
    clustering = _CLUSTERING_FIELD.search(text)
    grass_ratio = _GRASS_RATIO_FIELD.search(text)
    size = _SIZE_FIELD.search(text)

    ratio = defaults.grass_ratio
    if grass_ratio:
        try:
            ratio = float(grass_ratio.group(1))
        except ValueError:
            # "1.2.3" and friends
            logger.debug("Unreadable grassRatio %r", grass_ratio.group(1))

    return LayoutConstraints(
        building_density=cast(BuildingDensity, density.group(1).lower())
        if density
        else defaults.building_density,
        clustering=cast(Clustering, clustering.group(1).lower())
        if clustering
        else defaults.clustering,
        grass_ratio=max(0.0, min(1.0, ratio)),
        building_size_hint=cast(BuildingSize, size.group(1).lower())
        if size
        else defaults.building_size_hint,
    )
