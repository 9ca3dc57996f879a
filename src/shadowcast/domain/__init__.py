"""Domain models for shadowcast.

This module contains the value types flowing through the lighting pipeline.
All models are designed to be:

- Immutable (frozen dataclasses), so cached results can be shared safely
- Free of rendering or image-loading details

Key classes:
- Point, Segment, Bounds: Plain 2D geometry
- Footprint: Sprite size in map cells
- ContourKey: Identity of a traced sprite outline
- PlacedInstance: A sprite placed on the map with a pose
- AlphaGrid: Transparency channel of an oriented sprite variant
- OccluderSet: Versioned world-space occluding segments
- LightSource: A point light with a radius
"""

from shadowcast.domain.alpha import AlphaGrid
from shadowcast.domain.geometry import Bounds, Point, Segment
from shadowcast.domain.occluder import LightSource, OccluderSet
from shadowcast.domain.sprite import (
    ContourKey,
    Footprint,
    PlacedInstance,
    footprint_from_sprite_id,
)

__all__: list[str] = [
    # Geometry
    "Point",
    "Segment",
    "Bounds",
    # Sprites
    "Footprint",
    "ContourKey",
    "PlacedInstance",
    "AlphaGrid",
    "footprint_from_sprite_id",
    # Lighting
    "OccluderSet",
    "LightSource",
]
