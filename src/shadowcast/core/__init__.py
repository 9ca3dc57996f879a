"""Core lighting algorithms for shadowcast.

This module contains the core algorithms for:

- Outline tracing (marching squares, edge chaining, Douglas-Peucker)
- World placement of occluding sprite instances
- Broad-phase spatial indexing of occluder segments
- Adaptive ray casting of visibility polygons
- Caching of outlines, occluder sets and polygons

Everything except the caches and the engine is stateless and pure.

Key functions:
- extract_contour: Trace the normalized outline of an alpha grid
- build_occluder_set: Place occluding instances into world segments
- compute_visibility_polygon: Lit region of a point light
- intersect_ray_segment: Analytic ray/segment intersection
- cast_ray: Closest hit of a ray against segments

Key classes:
- SpatialIndex: Uniform bucket grid over segments
- ContourCache, OccluderCache, PolygonCache: Engine-owned caches
- LightingEngine: Cache-owning facade
"""

from shadowcast.core.cache import (
    CacheStats,
    ContourCache,
    OccluderCache,
    PolygonCache,
    PolygonCacheKey,
)
from shadowcast.core.contour import (
    chain_edges,
    extract_contour,
    marching_squares,
    simplify_polyline,
)
from shadowcast.core.engine import LightingEngine
from shadowcast.core.geometry import (
    cast_ray,
    intersect_ray_segment,
    normalize_angle,
    perpendicular_distance,
)
from shadowcast.core.occluders import (
    build_occluder_set,
    contour_key_for,
    instance_segments,
    occluder_signature,
)
from shadowcast.core.spatial import SpatialIndex
from shadowcast.core.visibility import (
    VisibilityPolygon,
    circle_polygon,
    compute_visibility_polygon,
)

__all__ = [
    # Cache classes
    "CacheStats",
    "ContourCache",
    # Engine
    "LightingEngine",
    "OccluderCache",
    "PolygonCache",
    "PolygonCacheKey",
    # Spatial index
    "SpatialIndex",
    "VisibilityPolygon",
    # Geometry functions
    "build_occluder_set",
    "cast_ray",
    "chain_edges",
    "circle_polygon",
    "compute_visibility_polygon",
    "contour_key_for",
    "extract_contour",
    "instance_segments",
    "intersect_ray_segment",
    "marching_squares",
    "normalize_angle",
    "occluder_signature",
    "perpendicular_distance",
    "simplify_polyline",
]
