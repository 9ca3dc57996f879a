"""Occluder set and light source types.

This module defines the world-space inputs of the visibility stage:
- OccluderSet: Every light-blocking segment on the map, versioned
- LightSource: A point light with a radius
"""

from dataclasses import dataclass, field

from shadowcast.domain.geometry import Bounds, Point, Segment


@dataclass(frozen=True)
class OccluderSet:
    """World-space occluding segments of one map state.

    An occluder set always reflects exactly the occluding instances present
    when it was built. A new build gets a higher version; an unchanged map
    keeps the previous set and version.

    Attributes:
        segments: Occluding segments in world cells
        version: Build counter, incremented on every rebuild
        bounds: Bounding box of all segment endpoints
        signature: Digest of the instances and settings the set was built from
    """

    segments: tuple[Segment, ...] = ()
    version: int = 0
    bounds: Bounds = field(default_factory=Bounds)
    signature: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.segments

    def __len__(self) -> int:
        return len(self.segments)


@dataclass(frozen=True, slots=True)
class LightSource:
    """A point light.

    Attributes:
        x: Light center X in world cells
        y: Light center Y in world cells
        radius: Reach of the light in cells
    """

    x: float
    y: float
    radius: float

    @classmethod
    def at_cell(cls, cell_x: int, cell_y: int, radius: float) -> "LightSource":
        """Create a light centered in the given map cell."""
        return cls(cell_x + 0.5, cell_y + 0.5, radius)

    @property
    def origin(self) -> Point:
        return Point(self.x, self.y)
