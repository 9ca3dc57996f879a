"""Sprite outline extraction.

This module turns the alpha grid of one oriented sprite variant into the
simplified outline segments that block light:

1. Binarize: a sample is solid when its alpha exceeds the threshold
2. Marching squares: 2x2 windows emit edges between cell-side midpoints
3. Chaining: the unordered edges are linked into polylines
4. Douglas-Peucker: every polyline is simplified independently
5. Segments: consecutive polyline points become normalized segments

The grid is padded with one ring of empty samples so that shapes touching the
sprite border still get closed outlines. Sample (i, j) stands for the pixel
center (i + 0.5, j + 0.5), so the outline of a fully opaque sprite runs along
the sprite border, with half-pixel bevels at the corners.

Output segments are in the normalized frame: (0, 0) is the top-left corner of
the oriented sprite and (1, 1) its bottom-right corner.
"""

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

from shadowcast.core.geometry import perpendicular_distance
from shadowcast.domain import AlphaGrid, Point, Segment

# Lattice points are stored doubled so every cell-side midpoint is an integer
LatticePoint = tuple[int, int]
Edge = tuple[LatticePoint, LatticePoint]

# Simplification tolerances below this are float noise
DISTANCE_FLOOR = 1e-9

_TOP, _RIGHT, _BOTTOM, _LEFT = range(4)

# Case index = tl << 3 | tr << 2 | br << 1 | bl.
# Saddles 5 and 10 always split the same way; thin diagonal features can be
# joined or separated differently than a center-sampled split would.
EDGE_TABLE: dict[int, tuple[tuple[int, int], ...]] = {
    1: ((_LEFT, _BOTTOM),),
    2: ((_BOTTOM, _RIGHT),),
    3: ((_LEFT, _RIGHT),),
    4: ((_RIGHT, _TOP),),
    5: ((_LEFT, _TOP), (_BOTTOM, _RIGHT)),
    6: ((_BOTTOM, _TOP),),
    7: ((_LEFT, _TOP),),
    8: ((_TOP, _LEFT),),
    9: ((_TOP, _BOTTOM),),
    10: ((_TOP, _RIGHT), (_LEFT, _BOTTOM)),
    11: ((_TOP, _RIGHT),),
    12: ((_RIGHT, _LEFT),),
    13: ((_BOTTOM, _RIGHT),),
    14: ((_LEFT, _BOTTOM),),
}


def _side_midpoint(x: int, y: int, side: int) -> LatticePoint:
    """Doubled padded-grid coordinates of a window side's midpoint."""
    if side == _TOP:
        return (2 * x + 1, 2 * y)
    if side == _RIGHT:
        return (2 * x + 2, 2 * y + 1)
    if side == _BOTTOM:
        return (2 * x + 1, 2 * y + 2)
    return (2 * x, 2 * y + 1)


def marching_cases(solid: npt.NDArray[np.bool_]) -> npt.NDArray[np.uint8]:
    """Compute the marching squares case of every 2x2 window.

    Args:
        solid: Boolean grid of shape (height, width)

    Returns:
        Case indices of shape (height + 1, width + 1) over the padded grid
    """
    padded = np.zeros((solid.shape[0] + 2, solid.shape[1] + 2), dtype=np.uint8)
    padded[1:-1, 1:-1] = solid

    tl = padded[:-1, :-1]
    tr = padded[:-1, 1:]
    br = padded[1:, 1:]
    bl = padded[1:, :-1]

    return (tl << 3) | (tr << 2) | (br << 1) | bl


def marching_squares(solid: npt.NDArray[np.bool_]) -> list[Edge]:
    """Extract boundary edges between solid and empty samples.

    Windows are visited in row-major order, so the edge list is deterministic.

    Args:
        solid: Boolean grid of shape (height, width)

    Returns:
        Edges between doubled padded-grid lattice points
    """
    cases = marching_cases(solid)
    rows, cols = np.nonzero((cases != 0) & (cases != 15))

    edges: list[Edge] = []
    for y, x, case in zip(rows.tolist(), cols.tolist(), cases[rows, cols].tolist(), strict=True):
        for side_a, side_b in EDGE_TABLE[case]:
            edges.append((_side_midpoint(x, y, side_a), _side_midpoint(x, y, side_b)))

    return edges


def chain_edges(edges: Sequence[Edge]) -> list[list[LatticePoint]]:
    """Link unordered edges into polylines.

    Each chain starts at the lowest-index unused edge and is extended from its
    tail through the lowest-index unused edge sharing that endpoint, until no
    continuation exists. Closed outlines end on their starting point.

    Args:
        edges: Edges between lattice points

    Returns:
        Polylines with at least two points each
    """
    by_endpoint: dict[LatticePoint, list[int]] = {}
    for idx, (a, b) in enumerate(edges):
        by_endpoint.setdefault(a, []).append(idx)
        by_endpoint.setdefault(b, []).append(idx)

    used = [False] * len(edges)

    def find_connected(point: LatticePoint) -> int | None:
        for idx in by_endpoint.get(point, ()):
            if not used[idx]:
                return idx
        return None

    polylines: list[list[LatticePoint]] = []
    for start_idx in range(len(edges)):
        if used[start_idx]:
            continue

        polyline: list[LatticePoint] = []
        current: int | None = start_idx

        while current is not None:
            used[current] = True
            a, b = edges[current]

            if not polyline:
                polyline.extend((a, b))
            else:
                polyline.append(b if a == polyline[-1] else a)

            current = find_connected(polyline[-1])

        if len(polyline) >= 2:
            polylines.append(polyline)

    return polylines


def simplify_polyline(points: Sequence[Point], epsilon: float) -> list[Point]:
    """Simplify a polyline with the Douglas-Peucker algorithm.

    The point farthest from the chord between the endpoints is kept when its
    distance exceeds epsilon, and both halves are simplified in turn;
    otherwise the span collapses to its endpoints. Raising epsilon never keeps
    more points.

    Args:
        points: Polyline points
        epsilon: Maximum allowed deviation from the input polyline

    Returns:
        Simplified polyline (first and last points always kept)

    Examples:
        >>> line = [Point(0.0, 0.0), Point(1.0, 0.1), Point(2.0, 0.0)]
        >>> len(simplify_polyline(line, 0.5))
        2
        >>> len(simplify_polyline(line, 0.05))
        3
    """
    if len(points) <= 2:
        return list(points)

    tolerance = max(epsilon, DISTANCE_FLOOR)
    keep = [False] * len(points)
    keep[0] = keep[-1] = True

    # Explicit stack keeps long outlines clear of the recursion limit
    spans = [(0, len(points) - 1)]
    while spans:
        first, last = spans.pop()
        if last - first < 2:
            continue

        max_dist = 0.0
        max_idx = first
        for idx in range(first + 1, last):
            dist = perpendicular_distance(points[idx], points[first], points[last])
            if dist > max_dist:
                max_dist = dist
                max_idx = idx

        if max_dist > tolerance:
            keep[max_idx] = True
            spans.append((max_idx, last))
            spans.append((first, max_idx))

    return [point for point, kept in zip(points, keep, strict=True) if kept]


def _normalize(polyline: list[LatticePoint], width: int, height: int) -> list[Point]:
    # Doubled padded coordinate k maps to pixel-space (k - 1) / 2
    return [
        Point((px - 1) / 2.0 / width, (py - 1) / 2.0 / height)
        for px, py in polyline
    ]


def extract_contour(
    grid: AlphaGrid | None,
    alpha_threshold: int = 128,
    simplify_epsilon: float = 0.01,
) -> tuple[Segment, ...]:
    """Trace the simplified outline of every solid region of a sprite.

    Marching squares cuts each outer corner of a region with a half-pixel
    bevel. A tolerance of 0 keeps those bevels, so a fully opaque square
    traces to 8 segments; a tolerance of one pixel (1 / width) folds them
    back into the 4 sides.

    Args:
        grid: Alpha grid of the oriented sprite variant
        alpha_threshold: Alpha value (0-255) above which a sample is solid
        simplify_epsilon: Douglas-Peucker tolerance in normalized units

    Returns:
        Outline segments in the normalized frame. Empty when the grid is
        missing, degenerate (a single row or column) or has no solid sample.
    """
    if grid is None or grid.width < 2 or grid.height < 2:
        return ()

    solid = grid.solid_mask(alpha_threshold)
    if not solid.any():
        return ()

    segments: list[Segment] = []
    for polyline in chain_edges(marching_squares(solid)):
        simplified = simplify_polyline(_normalize(polyline, grid.width, grid.height), simplify_epsilon)
        for start, end in zip(simplified, simplified[1:]):
            segments.append(Segment.from_points(start, end))

    return tuple(segments)
