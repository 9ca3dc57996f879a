"""Visibility polygon generation by adaptive ray casting.

A light sees the region bounded by the closest occluder hit along every ray
from its center, capped at its radius. The polygon is sampled in stages:

1. Base rays at uniform angles
2. Refinement rays inside every base interval whose distances jump
3. Rays aimed at (and just beside) every occluder vertex within reach
4. Merge, sort and de-duplicate the angles, then thin them to the ray limit
5. Cast the final rays and emit their hit points

Vertex rays pin shadow corners exactly; refinement rays catch silhouette
edges that fall between base rays.
"""

import math
import time
from collections.abc import Callable, Iterable, Sequence

from shadowcast.config import VisibilityConfig
from shadowcast.core.geometry import TWO_PI, cast_ray, normalize_angle, ray_point
from shadowcast.core.spatial import SpatialIndex
from shadowcast.domain import OccluderSet, Point, Segment
from shadowcast.utils import LightingLogger

VisibilityPolygon = tuple[Point, ...]


def circle_polygon(origin: Point, radius: float, points: int = 32) -> VisibilityPolygon:
    """Regular polygon approximating the full light circle."""
    return tuple(ray_point(origin, (i / points) * TWO_PI, radius) for i in range(points))


def base_angles(count: int) -> list[float]:
    """Uniformly spaced angles starting at 0."""
    step = TWO_PI / count
    return [i * step for i in range(count)]


def edge_intervals(distances: Sequence[float], radius: float, ratio: float = 0.05) -> list[int]:
    """Find base intervals that straddle a shadow edge.

    Interval i spans base rays i and i + 1 (wrapping around).

    Args:
        distances: Hit distances of the base rays
        radius: Light radius
        ratio: Distance jump, as a fraction of the radius, that marks an edge

    Returns:
        Indices of the flagged intervals in increasing order
    """
    threshold = ratio * radius
    count = len(distances)
    return [
        i
        for i in range(count)
        if abs(distances[i] - distances[(i + 1) % count]) > threshold
    ]


def refinement_angles(intervals: Sequence[int], step: float, budget: int) -> list[float]:
    """Interpolate extra rays strictly inside flagged base intervals.

    The budget is shared evenly; intervals get no rays when it is smaller than
    the number of intervals.

    Args:
        intervals: Flagged interval indices
        step: Angular width of one base interval
        budget: Total refinement rays allowed

    Returns:
        Refinement angles (not normalized)
    """
    if not intervals or budget <= 0:
        return []

    per_interval = budget // len(intervals)
    angles: list[float] = []
    for i in intervals:
        start = i * step
        for j in range(1, per_interval + 1):
            angles.append(start + (j / (per_interval + 1)) * step)
    return angles


def vertex_angles(
    origin: Point,
    radius: float,
    segments: Iterable[Segment],
    epsilon: float = 3e-4,
) -> list[float]:
    """Angles aimed at occluder endpoints within reach of the light.

    Every endpoint yields its bearing and the bearings epsilon to either side,
    so the rays just past a corner escape it and the shadow edge starts
    exactly at the vertex.

    Args:
        origin: Light center
        radius: Light radius
        segments: Occluder segments
        epsilon: Angular offset of the flanking rays

    Returns:
        Vertex angles (not normalized, may contain duplicates)
    """
    angles: list[float] = []
    for seg in segments:
        for x, y in ((seg.x1, seg.y1), (seg.x2, seg.y2)):
            dx = x - origin.x
            dy = y - origin.y
            if math.hypot(dx, dy) > radius:
                continue
            bearing = math.atan2(dy, dx)
            angles.extend((bearing, bearing - epsilon, bearing + epsilon))
    return angles


def merge_angles(*groups: Iterable[float], dedup_epsilon: float = 1e-9) -> list[float]:
    """Normalize, sort and de-duplicate angle groups.

    Angles closer than dedup_epsilon are cast once, including pairs on either
    side of the 0 / 2*pi seam.

    Returns:
        Sorted angles in [0, 2*pi)
    """
    ordered = sorted(normalize_angle(angle) for group in groups for angle in group)

    merged: list[float] = []
    for angle in ordered:
        if merged and angle - merged[-1] <= dedup_epsilon:
            continue
        merged.append(angle)

    if len(merged) > 1 and merged[0] + TWO_PI - merged[-1] <= dedup_epsilon:
        merged.pop()

    return merged


def downsample_angles(angles: Sequence[float], limit: int) -> list[float]:
    """Keep every n-th angle so that at most limit angles remain."""
    if len(angles) <= limit:
        return list(angles)
    stride = math.ceil(len(angles) / limit)
    return list(angles[::stride])


def _distance_caster(
    origin: Point,
    radius: float,
    segments: Sequence[Segment],
    index: SpatialIndex | None,
) -> Callable[[float], float]:
    """Ray caster over either all segments or spatial index candidates."""
    if index is None:
        return lambda angle: cast_ray(origin, angle, radius, segments)

    def cast(angle: float) -> float:
        candidates = index.candidates_along_ray(
            origin.x, origin.y, math.cos(angle), math.sin(angle), radius
        )
        return cast_ray(origin, angle, radius, segments, candidates)

    return cast


def compute_visibility_polygon(
    origin: Point,
    radius: float,
    occluders: OccluderSet | Sequence[Segment],
    min_rays: int = 72,
    max_rays: int = 360,
    *,
    index: SpatialIndex | None = None,
    config: VisibilityConfig | None = None,
    logger: LightingLogger | None = None,
) -> VisibilityPolygon:
    """Compute the lit region of a point light.

    Args:
        origin: Light center in world cells
        radius: Light radius in cells
        occluders: Occluder set or plain segments
        min_rays: Uniform base rays
        max_rays: Upper bound on the final ray count
        index: Optional spatial index over the same occluder set; ignored
            when it was built from a different version
        config: Fine tuning of the pipeline (defaults if None)
        logger: Optional lighting logger

    Returns:
        Polygon vertices ordered by increasing angle around the origin.
        Empty for a non-positive radius; a regular circle polygon when there
        are no segments.
    """
    if radius <= 0:
        return ()

    config = config or VisibilityConfig()
    start_time = time.perf_counter()

    if isinstance(occluders, OccluderSet):
        segments: Sequence[Segment] = occluders.segments
        if index is not None and not index.matches(occluders):
            index = None
    else:
        segments = occluders

    if not segments:
        polygon = circle_polygon(origin, radius, config.circle_points)
    else:
        cast = _distance_caster(origin, radius, segments, index)
        min_rays = max(1, min_rays)
        limit = max(max_rays, min_rays)

        base = base_angles(min_rays)
        distances = [cast(angle) for angle in base]

        vertices = vertex_angles(origin, radius, segments, config.vertex_angle_epsilon)
        budget = max(0, limit - min_rays - len(vertices))
        intervals = edge_intervals(distances, radius, config.edge_threshold_ratio)
        refined = refinement_angles(intervals, TWO_PI / min_rays, budget)

        angles = downsample_angles(
            merge_angles(base, refined, vertices, dedup_epsilon=config.angle_dedup_epsilon),
            limit,
        )
        polygon = tuple(ray_point(origin, angle, cast(angle)) for angle in angles)

    if logger is not None:
        logger.log_polygon_generated(
            x=origin.x,
            y=origin.y,
            radius=radius,
            vertices=len(polygon),
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )

    return polygon
