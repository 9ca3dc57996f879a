"""Shadowcast - occluder-aware 2D lighting geometry for tile maps.

Shadowcast computes, for every point light on a tile map, the polygon of the
area it actually lights. Sprites block light through the exact silhouette of
their opaque pixels: alpha masks are traced into outlines, the outlines are
placed in world space for every occluding instance, and an adaptive ray caster
builds the visibility polygon around each light.

Example:
    >>> engine = LightingEngine(sampler)
    >>> occluders = engine.occluders_for(instances)
    >>> polygon = engine.visibility_for_light(LightSource(4.5, 4.5, 6.0), occluders)

The resulting polygon is handed to whatever compositor draws the light.
"""

from shadowcast.core.engine import LightingEngine
from shadowcast.domain import LightSource, PlacedInstance

__version__ = "0.1.0"

__all__ = ["LightSource", "LightingEngine", "PlacedInstance", "__version__"]
