"""Geometric operations for outline simplification and ray casting.

This module provides the numerical primitives of the lighting pipeline:
- Perpendicular distance (Douglas-Peucker)
- Analytic ray/segment intersection
- Closest-hit ray casting against a segment list
- Angle normalization

All functions are pure and stateless.
"""

import math
from collections.abc import Iterable, Sequence

from shadowcast.domain import Point, Segment

TWO_PI = 2.0 * math.pi

# Below this |cross| a ray and a segment are treated as parallel
PARALLEL_EPSILON = 1e-8
# Slack on the ray parameter and the segment parameter
HIT_EPSILON = 1e-6


def perpendicular_distance(point: Point, line_start: Point, line_end: Point) -> float:
    """Distance from a point to the infinite line through two points.

    Falls back to the point-to-point distance when the line is degenerate,
    which is what closed outlines (first point == last point) need.

    Args:
        point: The point to measure
        line_start: First point on the line
        line_end: Second point on the line

    Returns:
        Perpendicular distance to the line

    Examples:
        >>> perpendicular_distance(Point(1.0, 1.0), Point(0.0, 0.0), Point(2.0, 0.0))
        1.0
    """
    dx = line_end.x - line_start.x
    dy = line_end.y - line_start.y
    length = math.hypot(dx, dy)

    if length == 0.0:
        return math.hypot(point.x - line_start.x, point.y - line_start.y)

    cross = dx * (point.y - line_start.y) - dy * (point.x - line_start.x)
    return abs(cross) / length


def intersect_ray_segment(
    origin_x: float,
    origin_y: float,
    dir_x: float,
    dir_y: float,
    segment: Segment,
) -> float | None:
    """Intersect a ray with a line segment.

    Ray: P = origin + t * direction, t >= 0
    Segment: Q = (x1, y1) + s * ((x2, y2) - (x1, y1)), s in [0, 1]

    Zero-length segments produce a zero cross product and are therefore
    rejected as parallel.

    Args:
        origin_x: Ray origin X
        origin_y: Ray origin Y
        dir_x: Ray direction X (unit length)
        dir_y: Ray direction Y (unit length)
        segment: Segment to test

    Returns:
        Distance along the ray to the hit (never negative), or None if the
        ray misses the segment

    Examples:
        >>> intersect_ray_segment(0.0, 0.0, 1.0, 0.0, Segment(2.0, -1.0, 2.0, 1.0))
        2.0
    """
    seg_dx = segment.x2 - segment.x1
    seg_dy = segment.y2 - segment.y1

    cross = dir_x * seg_dy - dir_y * seg_dx
    if abs(cross) < PARALLEL_EPSILON:
        return None

    dx = segment.x1 - origin_x
    dy = segment.y1 - origin_y

    t = (dx * seg_dy - dy * seg_dx) / cross
    s = (dx * dir_y - dy * dir_x) / cross

    if t >= -HIT_EPSILON and -HIT_EPSILON <= s <= 1.0 + HIT_EPSILON:
        return max(0.0, t)

    return None


def cast_ray(
    origin: Point,
    angle: float,
    max_distance: float,
    segments: Sequence[Segment],
    candidates: Iterable[int] | None = None,
) -> float:
    """Cast a ray and find the closest segment hit.

    Args:
        origin: Ray origin
        angle: Ray angle in radians
        max_distance: Reach of the ray (light radius)
        segments: Segments to test
        candidates: Optional indices into segments to restrict the test to

    Returns:
        Distance to the closest hit, or max_distance if nothing is hit
    """
    dir_x = math.cos(angle)
    dir_y = math.sin(angle)

    pool: Iterable[Segment]
    if candidates is None:
        pool = segments
    else:
        pool = (segments[idx] for idx in candidates)

    closest = max_distance
    for segment in pool:
        dist = intersect_ray_segment(origin.x, origin.y, dir_x, dir_y, segment)
        if dist is not None and dist < closest:
            closest = dist

    return closest


def ray_point(origin: Point, angle: float, distance: float) -> Point:
    """Point at the given distance along a ray."""
    return Point(origin.x + math.cos(angle) * distance, origin.y + math.sin(angle) * distance)


def normalize_angle(angle: float) -> float:
    """Wrap an angle into [0, 2*pi)."""
    wrapped = math.fmod(angle, TWO_PI)
    if wrapped < 0.0:
        wrapped += TWO_PI
    # fmod of a tiny negative angle can round up to exactly 2*pi
    if wrapped >= TWO_PI:
        wrapped = 0.0
    return wrapped
