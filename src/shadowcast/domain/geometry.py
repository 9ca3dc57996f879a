"""Core geometric value types.

This module defines the plain geometry shared by every stage of the lighting
pipeline:
- Point: A 2D point
- Segment: A straight occluding edge between two points
- Bounds: An axis-aligned bounding box

Segments live in one of two coordinate frames. Contour extraction produces
segments in the *normalized* frame (the unit square of one sprite variant);
the world segment builder maps them into the *world* frame (map cells). The
types do not tag their frame, so functions document which one they expect.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.hypot(other.x - self.x, other.y - self.y)


@dataclass(frozen=True, slots=True)
class Segment:
    """A line segment from (x1, y1) to (x2, y2).

    Attributes:
        x1: X coordinate of the first endpoint
        y1: Y coordinate of the first endpoint
        x2: X coordinate of the second endpoint
        y2: Y coordinate of the second endpoint
    """

    x1: float
    y1: float
    x2: float
    y2: float

    @classmethod
    def from_points(cls, start: Point, end: Point) -> "Segment":
        """Create a segment between two points."""
        return cls(start.x, start.y, end.x, end.y)

    @property
    def start(self) -> Point:
        return Point(self.x1, self.y1)

    @property
    def end(self) -> Point:
        return Point(self.x2, self.y2)

    @property
    def length(self) -> float:
        return math.hypot(self.x2 - self.x1, self.y2 - self.y1)

    def extent(self) -> tuple[float, float, float, float]:
        """Bounding extent of the segment.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        return (
            min(self.x1, self.x2),
            min(self.y1, self.y2),
            max(self.x1, self.x2),
            max(self.y1, self.y2),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with x1, y1, x2 and y2 fields
        """
        return {"x1": self.x1, "y1": self.y1, "x2": self.x2, "y2": self.y2}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Segment":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x1, y1, x2 and y2 fields

        Returns:
            Segment instance
        """
        return cls(x1=data["x1"], y1=data["y1"], x2=data["x2"], y2=data["y2"])


@dataclass(frozen=True, slots=True)
class Bounds:
    """Axis-aligned bounding box.

    An empty collection of segments has the degenerate bounds (0, 0, 0, 0).

    Attributes:
        min_x: Smallest X coordinate
        min_y: Smallest Y coordinate
        max_x: Largest X coordinate
        max_y: Largest Y coordinate
    """

    min_x: float = 0.0
    min_y: float = 0.0
    max_x: float = 0.0
    max_y: float = 0.0

    @classmethod
    def of_segments(cls, segments: Sequence[Segment]) -> "Bounds":
        """Calculate the bounds enclosing every segment endpoint.

        Args:
            segments: Segments to enclose

        Returns:
            Enclosing bounds, or the degenerate bounds when there are no segments
        """
        if not segments:
            return cls()

        min_x = min_y = math.inf
        max_x = max_y = -math.inf
        for seg in segments:
            sx0, sy0, sx1, sy1 = seg.extent()
            min_x = min(min_x, sx0)
            min_y = min(min_y, sy0)
            max_x = max(max_x, sx1)
            max_y = max(max_y, sy1)

        return cls(min_x, min_y, max_x, max_y)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def to_tuple(self) -> tuple[float, float, float, float]:
        """Convert to (min_x, min_y, max_x, max_y) tuple."""
        return (self.min_x, self.min_y, self.max_x, self.max_y)
