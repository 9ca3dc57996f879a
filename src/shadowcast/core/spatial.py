"""Uniform bucket grid over occluder segments.

The index is a broad phase for ray casting: it narrows the segments a ray has
to be tested against but never decides visibility itself. Every segment that a
ray could hit within its reach is among the candidates, so casting against the
candidates gives exactly the same result as casting against all segments.
"""

import math
from collections import defaultdict

from shadowcast.domain import Bounds, OccluderSet, Segment
from shadowcast.exceptions import GeometryError

Bucket = tuple[int, int]


class SpatialIndex:
    """Buckets of segment indices over world space.

    Each segment index is stored in every bucket its bounding extent overlaps.

    Example:
        index = SpatialIndex.build(occluders, bucket_size=2.0)
        candidates = index.candidates_along_ray(4.5, 4.5, 1.0, 0.0, 6.0)
    """

    def __init__(
        self,
        segments: tuple[Segment, ...],
        bucket_size: float = 2.0,
        bounds: Bounds | None = None,
        version: int = 0,
        signature: str = "",
    ) -> None:
        """Index segments into buckets.

        Args:
            segments: Segments in world cells
            bucket_size: Bucket edge length in cells
            bounds: Bounds of the segments (computed if None)
            version: Version of the occluder set the segments come from
            signature: Signature of the occluder set the segments come from

        Raises:
            GeometryError: If bucket_size is not positive
        """
        if bucket_size <= 0:
            raise GeometryError(f"Bucket size must be positive, got {bucket_size}")

        self.bucket_size = bucket_size
        self.bounds = bounds if bounds is not None else Bounds.of_segments(segments)
        self.version = version
        self.signature = signature
        self.segment_count = len(segments)
        self.buckets: dict[Bucket, list[int]] = defaultdict(list)

        for idx, seg in enumerate(segments):
            min_x, min_y, max_x, max_y = seg.extent()
            bx0, by0 = self._bucket(min_x, min_y)
            bx1, by1 = self._bucket(max_x, max_y)
            for bx in range(bx0, bx1 + 1):
                for by in range(by0, by1 + 1):
                    self.buckets[(bx, by)].append(idx)

    @classmethod
    def build(cls, occluders: OccluderSet, bucket_size: float = 2.0) -> "SpatialIndex":
        """Index the segments of an occluder set."""
        return cls(
            occluders.segments,
            bucket_size=bucket_size,
            bounds=occluders.bounds,
            version=occluders.version,
            signature=occluders.signature,
        )

    def _bucket(self, x: float, y: float) -> Bucket:
        """Converts world coordinates to bucket coordinates."""
        return math.floor(x / self.bucket_size), math.floor(y / self.bucket_size)

    def matches(self, occluders: OccluderSet) -> bool:
        """Whether this index was built from the given occluder set."""
        return (
            self.version == occluders.version
            and self.signature == occluders.signature
            and self.segment_count == len(occluders.segments)
        )

    def candidates_along_ray(
        self,
        origin_x: float,
        origin_y: float,
        dir_x: float,
        dir_y: float,
        max_distance: float,
    ) -> list[int]:
        """Collect segment indices a ray may hit within its reach.

        The ray is sampled every half bucket; each sample contributes its
        bucket and the ring of eight neighbours, which covers grazing rays.

        Args:
            origin_x: Ray origin X
            origin_y: Ray origin Y
            dir_x: Ray direction X (unit length)
            dir_y: Ray direction Y (unit length)
            max_distance: Reach of the ray

        Returns:
            Sorted candidate segment indices
        """
        step = self.bucket_size / 2
        steps = max(1, math.ceil(max_distance / step))

        visited: set[Bucket] = set()
        for i in range(steps + 1):
            t = (i / steps) * max_distance
            bx, by = self._bucket(origin_x + dir_x * t, origin_y + dir_y * t)
            for dx in (-1, 0, 1):
                for dy in (-1, 0, 1):
                    visited.add((bx + dx, by + dy))

        result: set[int] = set()
        for bucket in visited:
            indices = self.buckets.get(bucket)
            if indices:
                result.update(indices)

        return sorted(result)

    def __len__(self) -> int:
        return len(self.buckets)
