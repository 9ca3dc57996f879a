"""Unit tests for geometric primitives.

Tests cover:
- Perpendicular distance (including degenerate chords)
- Ray/segment intersection tolerances
- Closest-hit ray casting with and without candidate lists
- Angle normalization
"""

import math

import pytest

from shadowcast.core.geometry import (
    TWO_PI,
    cast_ray,
    intersect_ray_segment,
    normalize_angle,
    perpendicular_distance,
    ray_point,
)
from shadowcast.domain import Point, Segment


class TestPerpendicularDistance:
    """Tests for point-to-line distance."""

    def test_point_above_line(self):
        assert perpendicular_distance(Point(1.0, 1.0), Point(0.0, 0.0), Point(2.0, 0.0)) == pytest.approx(1.0)

    def test_point_beyond_segment_uses_infinite_line(self):
        assert perpendicular_distance(Point(5.0, -2.0), Point(0.0, 0.0), Point(1.0, 0.0)) == pytest.approx(2.0)

    def test_degenerate_line_falls_back_to_point_distance(self):
        """Closed outlines have a zero-length chord."""
        assert perpendicular_distance(Point(3.0, 4.0), Point(0.0, 0.0), Point(0.0, 0.0)) == pytest.approx(5.0)


class TestIntersectRaySegment:
    """Tests for analytic ray/segment intersection."""

    def test_head_on_hit(self):
        dist = intersect_ray_segment(0.0, 0.0, 1.0, 0.0, Segment(2.0, -1.0, 2.0, 1.0))
        assert dist == pytest.approx(2.0)

    def test_miss_beside_segment(self):
        assert intersect_ray_segment(0.0, 0.0, 1.0, 0.0, Segment(2.0, 1.0, 2.0, 3.0)) is None

    def test_segment_behind_origin(self):
        assert intersect_ray_segment(0.0, 0.0, 1.0, 0.0, Segment(-2.0, -1.0, -2.0, 1.0)) is None

    def test_parallel_segment(self):
        assert intersect_ray_segment(0.0, 0.0, 1.0, 0.0, Segment(1.0, 0.0, 3.0, 0.0)) is None

    def test_zero_length_segment_is_parallel(self):
        assert intersect_ray_segment(0.0, 0.0, 1.0, 0.0, Segment(2.0, 0.0, 2.0, 0.0)) is None

    def test_endpoint_hit_within_tolerance(self):
        """A ray grazing the segment end is still a hit."""
        dist = intersect_ray_segment(0.0, 0.0, 1.0, 0.0, Segment(2.0, 0.0, 2.0, 1.0))
        assert dist == pytest.approx(2.0)

    def test_origin_on_segment_clamps_to_zero(self):
        dist = intersect_ray_segment(2.0, 0.0, 1.0, 0.0, Segment(2.0, -1.0, 2.0, 1.0))
        assert dist == 0.0


class TestCastRay:
    """Tests for closest-hit ray casting."""

    @pytest.fixture
    def walls(self) -> list[Segment]:
        return [
            Segment(4.0, -1.0, 4.0, 1.0),
            Segment(2.0, -1.0, 2.0, 1.0),
            Segment(0.0, 3.0, 1.0, 3.0),
        ]

    def test_closest_hit_wins(self, walls):
        assert cast_ray(Point(0.0, 0.0), 0.0, 10.0, walls) == pytest.approx(2.0)

    def test_no_hit_returns_reach(self, walls):
        assert cast_ray(Point(0.0, 0.0), math.pi, 10.0, walls) == 10.0

    def test_hit_beyond_reach_is_ignored(self, walls):
        assert cast_ray(Point(0.0, 0.0), 0.0, 1.5, walls) == 1.5

    def test_candidates_restrict_tests(self, walls):
        assert cast_ray(Point(0.0, 0.0), 0.0, 10.0, walls, candidates=[0]) == pytest.approx(4.0)
        assert cast_ray(Point(0.0, 0.0), 0.0, 10.0, walls, candidates=[]) == 10.0

    def test_ray_point(self):
        p = ray_point(Point(1.0, 1.0), math.pi / 2, 2.0)
        assert p.x == pytest.approx(1.0)
        assert p.y == pytest.approx(3.0)


class TestNormalizeAngle:
    """Tests for angle wrapping."""

    @pytest.mark.parametrize(
        ("angle", "expected"),
        [
            (0.0, 0.0),
            (math.pi, math.pi),
            (-math.pi / 2, 1.5 * math.pi),
            (TWO_PI + 0.25, 0.25),
            (-TWO_PI - 0.25, TWO_PI - 0.25),
        ],
    )
    def test_wraps_into_range(self, angle, expected):
        assert normalize_angle(angle) == pytest.approx(expected)

    def test_tiny_negative_angle_stays_below_two_pi(self):
        wrapped = normalize_angle(-1e-20)
        assert 0.0 <= wrapped < TWO_PI
