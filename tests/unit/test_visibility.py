"""Unit tests for visibility polygon generation.

Tests cover:
- Angle pipeline stages (base, edge intervals, refinement, vertices, merge)
- Degenerate lights and empty occluder sets
- Polygon bounds, ordering and shadow corners
- Identical results with and without the spatial index
"""

import math

import pytest

from shadowcast.config import VisibilityConfig
from shadowcast.core.geometry import TWO_PI
from shadowcast.core.spatial import SpatialIndex
from shadowcast.core.visibility import (
    base_angles,
    circle_polygon,
    compute_visibility_polygon,
    downsample_angles,
    edge_intervals,
    merge_angles,
    refinement_angles,
    vertex_angles,
)
from shadowcast.domain import Bounds, OccluderSet, Point, Segment


def _occluder_set(*segments: Segment) -> OccluderSet:
    return OccluderSet(segments=segments, version=1, bounds=Bounds.of_segments(segments))


def _angle(origin: Point, point: Point) -> float:
    return math.atan2(point.y - origin.y, point.x - origin.x) % TWO_PI


@pytest.fixture(params=[False, True], ids=["brute-force", "indexed"])
def polygon_for(request):
    """Compute polygons with or without a spatial index over the occluders."""

    def compute(origin, radius, occluders, min_rays=72, max_rays=360, config=None):
        index = SpatialIndex.build(occluders, bucket_size=1.0) if request.param else None
        return compute_visibility_polygon(
            origin, radius, occluders, min_rays, max_rays, index=index, config=config
        )

    return compute


class TestAngleStages:
    """Tests for the standalone angle pipeline stages."""

    def test_base_angles(self):
        angles = base_angles(4)
        assert angles == pytest.approx([0.0, math.pi / 2, math.pi, 1.5 * math.pi])

    def test_edge_intervals_wrap(self):
        distances = [5.0, 5.0, 1.0, 5.0]
        assert edge_intervals(distances, radius=5.0, ratio=0.05) == [1, 2]
        assert edge_intervals([1.0, 5.0, 5.0, 5.0], radius=5.0) == [0, 3]

    def test_edge_intervals_ignore_small_changes(self):
        assert edge_intervals([5.0, 4.9, 5.0], radius=5.0, ratio=0.05) == []

    def test_refinement_strictly_inside_interval(self):
        step = TWO_PI / 8
        angles = refinement_angles([2], step, budget=3)
        assert len(angles) == 3
        assert all(2 * step < a < 3 * step for a in angles)

    def test_refinement_budget_shared(self):
        assert len(refinement_angles([0, 3, 5], 0.1, budget=10)) == 9
        assert refinement_angles([0, 3, 5], 0.1, budget=2) == []
        assert refinement_angles([], 0.1, budget=10) == []

    def test_vertex_angles_flank_endpoints(self):
        angles = vertex_angles(Point(0.0, 0.0), 5.0, [Segment(1.0, 0.0, 0.0, 1.0)], epsilon=0.001)
        assert sorted(angles) == pytest.approx(
            sorted([0.0, -0.001, 0.001, math.pi / 2, math.pi / 2 - 0.001, math.pi / 2 + 0.001])
        )

    def test_vertex_angles_skip_far_endpoints(self):
        angles = vertex_angles(Point(0.0, 0.0), 2.0, [Segment(1.0, 0.0, 9.0, 0.0)])
        assert len(angles) == 3

    def test_merge_normalizes_sorts_and_dedups(self):
        merged = merge_angles([0.5, -0.5], [0.5 + 1e-12, TWO_PI + 0.25])
        assert merged == pytest.approx([0.25, 0.5, TWO_PI - 0.5])
        assert len(merged) == 3

    def test_merge_dedups_across_seam(self):
        merged = merge_angles([0.0, TWO_PI - 1e-12, 1.0])
        assert merged == pytest.approx([0.0, 1.0])

    def test_downsample(self):
        angles = [i * 0.01 for i in range(10)]
        assert downsample_angles(angles, 20) == angles
        assert downsample_angles(angles, 4) == angles[::3]
        assert len(downsample_angles(angles, 4)) <= 4


class TestDegenerateLights:
    """Tests for lights without occluders or without reach."""

    @pytest.mark.parametrize("radius", [0.0, -1.0])
    def test_non_positive_radius(self, radius):
        occluders = _occluder_set(Segment(1.0, -1.0, 1.0, 1.0))
        assert compute_visibility_polygon(Point(0.0, 0.0), radius, occluders) == ()

    def test_no_occluders_gives_circle(self, polygon_for):
        origin = Point(2.0, 3.0)
        polygon = polygon_for(origin, 5.0, OccluderSet())
        assert len(polygon) == 32
        assert polygon == circle_polygon(origin, 5.0, 32)
        for point in polygon:
            assert origin.distance_to(point) == pytest.approx(5.0)

    def test_plain_segment_list(self):
        polygon = compute_visibility_polygon(Point(0.0, 0.0), 5.0, [])
        assert len(polygon) == 32

    def test_circle_resolution_configurable(self):
        config = VisibilityConfig(circle_points=12)
        polygon = compute_visibility_polygon(Point(0.0, 0.0), 5.0, OccluderSet(), config=config)
        assert len(polygon) == 12


class TestVisibilityPolygon:
    """Tests for occluded visibility polygons."""

    @pytest.fixture
    def wall(self) -> OccluderSet:
        return _occluder_set(Segment(2.0, -1.0, 2.0, 1.0))

    def test_points_within_radius(self, polygon_for, wall):
        origin = Point(0.0, 0.0)
        for point in polygon_for(origin, 5.0, wall):
            assert origin.distance_to(point) <= 5.0 + 1e-9

    def test_ordered_by_angle(self, polygon_for, wall):
        origin = Point(0.0, 0.0)
        angles = [_angle(origin, p) for p in polygon_for(origin, 5.0, wall)]
        assert angles == sorted(angles)

    def test_ray_count_bounded(self, polygon_for, wall):
        polygon = polygon_for(Point(0.0, 0.0), 5.0, wall, min_rays=72, max_rays=360)
        assert 72 <= len(polygon) <= 360

    def test_wall_blocks_light(self, polygon_for, wall):
        origin = Point(0.0, 0.0)
        polygon = polygon_for(origin, 5.0, wall)
        behind = [p for p in polygon if abs(_angle(origin, p)) < 0.3 or _angle(origin, p) > TWO_PI - 0.3]
        assert behind
        assert all(p.x <= 2.0 + 1e-6 for p in behind)

    def test_shadow_corner_is_exact(self, polygon_for, wall):
        """Vertex rays land on the wall ends and slip past them."""
        origin = Point(0.0, 0.0)
        polygon = polygon_for(origin, 5.0, wall)

        for corner in (Point(2.0, 1.0), Point(2.0, -1.0)):
            assert min(corner.distance_to(p) for p in polygon) == pytest.approx(0.0, abs=1e-6)

            bearing = _angle(origin, corner)
            outside = [p for p in polygon if 0.0 < abs(_angle(origin, p) - bearing) <= 4e-4 and origin.distance_to(p) > 4.9]
            assert outside

    def test_rays_clipped_only_inside_wall_span(self, polygon_for, wall):
        origin = Point(0.0, 0.0)
        half_span = math.atan2(1.0, 2.0)

        for point in polygon_for(origin, 5.0, wall):
            bearing = math.remainder(_angle(origin, point), TWO_PI)
            if abs(bearing) < half_span - 1e-5:
                assert point.x == pytest.approx(2.0, abs=1e-9)
            elif abs(bearing) > half_span + 1e-5:
                assert origin.distance_to(point) == pytest.approx(5.0)

    def test_light_on_segment_endpoint(self, polygon_for):
        origin = Point(1.0, 1.0)
        occluders = _occluder_set(Segment(1.0, 1.0, 3.0, 1.0), Segment(3.0, 1.0, 3.0, 3.0))
        polygon = polygon_for(origin, 4.0, occluders)
        assert polygon
        for point in polygon:
            assert origin.distance_to(point) <= 4.0 + 1e-9

    def test_enclosed_light(self, polygon_for):
        """A light inside a closed room never escapes it."""
        room = _occluder_set(
            Segment(0.0, 0.0, 4.0, 0.0),
            Segment(4.0, 0.0, 4.0, 4.0),
            Segment(4.0, 4.0, 0.0, 4.0),
            Segment(0.0, 4.0, 0.0, 0.0),
        )
        for point in polygon_for(Point(2.0, 2.0), 10.0, room):
            assert -1e-6 <= point.x <= 4.0 + 1e-6
            assert -1e-6 <= point.y <= 4.0 + 1e-6

    def test_deterministic(self, polygon_for, wall):
        origin = Point(0.3, -0.2)
        assert polygon_for(origin, 5.0, wall) == polygon_for(origin, 5.0, wall)

    def test_index_matches_brute_force(self):
        occluders = _occluder_set(
            Segment(2.0, -1.0, 2.0, 1.0),
            Segment(-3.0, 2.0, -1.0, 3.5),
            Segment(0.5, -4.0, 1.5, -2.5),
            Segment(6.0, 6.0, 7.0, 6.0),
        )
        origin = Point(0.25, 0.5)
        index = SpatialIndex.build(occluders, bucket_size=1.5)
        assert compute_visibility_polygon(origin, 6.0, occluders, index=index) == compute_visibility_polygon(
            origin, 6.0, occluders
        )

    def test_stale_index_ignored(self):
        occluders = _occluder_set(Segment(2.0, -1.0, 2.0, 1.0))
        stale = SpatialIndex.build(OccluderSet(version=7))
        origin = Point(0.0, 0.0)
        assert compute_visibility_polygon(origin, 5.0, occluders, index=stale) == compute_visibility_polygon(
            origin, 5.0, occluders
        )
