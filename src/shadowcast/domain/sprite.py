"""Sprite placement and contour identity types.

This module defines how a sprite sits on the map and how its traced outline
is identified:
- Footprint: Size of a sprite in map cells
- ContourKey: Identity of one traced outline (sprite variant + trace settings)
- PlacedInstance: A sprite placed on the map with a pose

Rotation is expressed in clockwise quarter turns (0-3). Odd quarter turns swap
the footprint axes.
"""

import re
from dataclasses import dataclass, field
from typing import Any

from shadowcast.domain.geometry import Point
from shadowcast.exceptions import PoseError

# Sprite file names carry their cell size as "_<W>X<H>_", e.g. "table_2X1_oak.png"
_SIZE_TOKEN = re.compile(r"_(\d+)X(\d+)_", re.IGNORECASE)


def _check_rotation(rotation: int) -> None:
    if rotation not in (0, 1, 2, 3):
        raise PoseError("rotation", rotation)


@dataclass(frozen=True, slots=True)
class Footprint:
    """Size of a sprite in map cells.

    Attributes:
        width: Width in cells
        height: Height in cells
    """

    width: float = 1.0
    height: float = 1.0

    def oriented(self, rotation: int) -> "Footprint":
        """Footprint after rotating by the given number of quarter turns."""
        if rotation % 2:
            return Footprint(self.height, self.width)
        return self

    def scaled(self, factor: float) -> "Footprint":
        """Footprint with both axes multiplied by factor."""
        return Footprint(self.width * factor, self.height * factor)

    @property
    def longest_side(self) -> float:
        return max(self.width, self.height)


def footprint_from_sprite_id(sprite_id: str) -> Footprint:
    """Derive a sprite's cell footprint from its identifier.

    Args:
        sprite_id: Sprite identifier, usually its source path

    Returns:
        Footprint parsed from the "_<W>X<H>_" size token, or 1x1 when absent

    Examples:
        >>> footprint_from_sprite_id("tiles/wall_3X1_stone.png")
        Footprint(width=3.0, height=1.0)
        >>> footprint_from_sprite_id("tiles/barrel.png")
        Footprint(width=1.0, height=1.0)
    """
    match = _SIZE_TOKEN.search(sprite_id)
    if match:
        return Footprint(float(match.group(1)), float(match.group(2)))
    return Footprint()


@dataclass(frozen=True, slots=True)
class ContourKey:
    """Identity of one traced sprite outline.

    The traced outline is a pure function of this key, which makes it the
    cache key for contour extraction.

    Attributes:
        sprite_id: Sprite identifier
        rotation: Clockwise quarter turns (0-3)
        mirror_x: Horizontal flip (applied before rotation)
        mirror_y: Vertical flip (applied before rotation)
        alpha_threshold: Alpha value (0-255) above which a pixel is solid
        simplify_epsilon: Douglas-Peucker tolerance in normalized units
    """

    sprite_id: str
    rotation: int = 0
    mirror_x: bool = False
    mirror_y: bool = False
    alpha_threshold: int = 128
    simplify_epsilon: float = 0.01

    def __post_init__(self) -> None:
        _check_rotation(self.rotation)
        if not 0 <= self.alpha_threshold <= 255:
            raise PoseError("alpha_threshold", self.alpha_threshold)
        if self.simplify_epsilon < 0:
            raise PoseError("simplify_epsilon", self.simplify_epsilon)


@dataclass(frozen=True)
class PlacedInstance:
    """A sprite placed on the map.

    The instance occupies its footprint starting at (cell_x, cell_y) unless an
    explicit center is given (free placement). Whether it blocks light is
    decided elsewhere and handed in through is_occluder.

    Attributes:
        sprite_id: Sprite identifier
        cell_x: Left cell of the footprint
        cell_y: Top cell of the footprint
        rotation: Clockwise quarter turns (0-3)
        mirror_x: Horizontal flip
        mirror_y: Vertical flip
        scale: Uniform scale of the drawn sprite around its center
        center: Explicit world center in cells (overrides the cell position)
        footprint: Unrotated footprint in cells (derived from sprite_id if None)
        is_occluder: Whether this instance blocks light
    """

    sprite_id: str
    cell_x: int = 0
    cell_y: int = 0
    rotation: int = 0
    mirror_x: bool = False
    mirror_y: bool = False
    scale: float = 1.0
    center: Point | None = None
    footprint: Footprint | None = field(default=None)
    is_occluder: bool = True

    def __post_init__(self) -> None:
        _check_rotation(self.rotation)
        if self.footprint is None:
            object.__setattr__(self, "footprint", footprint_from_sprite_id(self.sprite_id))

    @property
    def oriented_footprint(self) -> Footprint:
        """Footprint in cells after rotation (axes swapped for odd quarter turns)."""
        assert self.footprint is not None
        return self.footprint.oriented(self.rotation)

    def world_center(self) -> Point:
        """Center of the instance in world cells."""
        if self.center is not None:
            return self.center
        oriented = self.oriented_footprint
        return Point(self.cell_x + oriented.width / 2, self.cell_y + oriented.height / 2)

    def signature_entry(self) -> str:
        """Stable text describing the identity and pose of this instance."""
        center = self.world_center()
        oriented = self.oriented_footprint
        return ":".join(
            [
                self.sprite_id,
                str(self.cell_x),
                str(self.cell_y),
                f"{center.x:.4f}",
                f"{center.y:.4f}",
                str(self.rotation),
                "1" if self.mirror_x else "0",
                "1" if self.mirror_y else "0",
                f"{self.scale:.3f}",
                f"{oriented.width:g}x{oriented.height:g}",
            ]
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary representation of the instance
        """
        assert self.footprint is not None
        return {
            "sprite_id": self.sprite_id,
            "cell_x": self.cell_x,
            "cell_y": self.cell_y,
            "rotation": self.rotation,
            "mirror_x": self.mirror_x,
            "mirror_y": self.mirror_y,
            "scale": self.scale,
            "center": self.center.to_tuple() if self.center else None,
            "footprint": (self.footprint.width, self.footprint.height),
            "is_occluder": self.is_occluder,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlacedInstance":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of an instance

        Returns:
            PlacedInstance instance
        """
        center = data.get("center")
        footprint = data.get("footprint")
        return cls(
            sprite_id=data["sprite_id"],
            cell_x=data.get("cell_x", 0),
            cell_y=data.get("cell_y", 0),
            rotation=data.get("rotation", 0),
            mirror_x=data.get("mirror_x", False),
            mirror_y=data.get("mirror_y", False),
            scale=data.get("scale", 1.0),
            center=Point(*center) if center is not None else None,
            footprint=Footprint(*footprint) if footprint is not None else None,
            is_occluder=data.get("is_occluder", True),
        )
