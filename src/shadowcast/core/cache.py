"""Caches owned by a lighting engine.

Three caches keep repeated lighting work cheap:
- ContourCache: normalized outlines per oriented sprite variant
- OccluderCache: the current occluder set (and spatial index) of a map
- PolygonCache: visibility polygons per light and occluder version

Each cache is an explicit object with its own hit/miss statistics and an
invalidate() method. None of them is thread-safe; hosts that share a cache
across threads must serialize access themselves.
"""

from collections import OrderedDict
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from shadowcast.config import ContourConfig, SpatialIndexConfig
from shadowcast.core.contour import extract_contour
from shadowcast.core.occluders import ContourSource, build_occluder_set
from shadowcast.core.spatial import SpatialIndex
from shadowcast.core.visibility import VisibilityPolygon
from shadowcast.domain import ContourKey, LightSource, OccluderSet, PlacedInstance, Segment
from shadowcast.io import AlphaSampler
from shadowcast.utils import LightingLogger


@dataclass
class CacheStats:
    """Hit and miss counters of a cache."""

    hits: int = 0
    misses: int = 0

    @property
    def total_lookups(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        if self.total_lookups == 0:
            return 0.0
        return (self.hits / self.total_lookups) * 100.0

    def __repr__(self) -> str:
        return f"{self.hits} hits, {self.misses} misses ({self.hit_rate:.1f}% hit rate)"


class ContourCache:
    """Normalized outlines keyed by ContourKey.

    Entries live until invalidate() is called, typically after the host
    reloads its sprite assets.
    """

    def __init__(self) -> None:
        self._cache: dict[ContourKey, tuple[Segment, ...]] = {}
        self.stats = CacheStats()

    def get(self, key: ContourKey) -> tuple[Segment, ...] | None:
        """Cached outline for a key, or None."""
        segments = self._cache.get(key)
        if segments is None:
            self.stats.misses += 1
        else:
            self.stats.hits += 1
        return segments

    def store(self, key: ContourKey, segments: Sequence[Segment]) -> None:
        self._cache[key] = tuple(segments)

    def get_or_extract(
        self,
        key: ContourKey,
        sampler: AlphaSampler,
        logger: LightingLogger | None = None,
    ) -> tuple[Segment, ...]:
        """Return the cached outline for a key, tracing it on a miss.

        A sprite the sampler cannot provide yet yields no segments and is not
        cached, so it is traced once its asset becomes available.

        Raises:
            AlphaGridError: If the sampler returns a malformed grid
        """
        cached = self.get(key)
        if cached is not None:
            if logger is not None:
                logger.log_contour_hit()
            return cached

        grid = sampler.sample(key.sprite_id, key.rotation, key.mirror_x, key.mirror_y)
        if grid is None:
            return ()

        segments = extract_contour(grid, key.alpha_threshold, key.simplify_epsilon)
        self.store(key, segments)

        if logger is not None:
            logger.log_contour_traced(key.sprite_id, key.rotation, len(segments), key.simplify_epsilon)

        return segments

    def invalidate(self) -> int:
        """Drop every outline. Returns the number of dropped entries."""
        count = len(self._cache)
        self._cache.clear()
        return count

    def __contains__(self, key: object) -> bool:
        return key in self._cache

    def __len__(self) -> int:
        return len(self._cache)


class OccluderCache:
    """The current occluder set of one map.

    The set is rebuilt only when the signature of the occluding instances
    changes. Versions keep increasing across invalidate(), so anything keyed
    by an older version can never match a later build.
    """

    def __init__(self, index_config: SpatialIndexConfig | None = None) -> None:
        self.index_config = index_config or SpatialIndexConfig()
        self._current: OccluderSet | None = None
        self._index: SpatialIndex | None = None
        self._last_version = 0
        self.stats = CacheStats()

    @property
    def current(self) -> OccluderSet | None:
        return self._current

    @property
    def index(self) -> SpatialIndex | None:
        """Spatial index of the current set (None unless enabled)."""
        return self._index

    def next_version(self) -> int:
        """Claim the next occluder set version of this map."""
        self._last_version += 1
        return self._last_version

    def get(
        self,
        instances: Sequence[PlacedInstance],
        contours: ContourSource,
        config: ContourConfig | None = None,
        logger: LightingLogger | None = None,
    ) -> OccluderSet:
        """Return the occluder set for the given instances.

        Args:
            instances: All placed instances of the map
            contours: Source of normalized outlines by ContourKey
            config: Outline tracing settings
            logger: Optional lighting logger

        Returns:
            The cached set when nothing changed, otherwise a new version
        """
        occluders = build_occluder_set(
            instances, self._current, contours, config, logger, next_version=self.next_version
        )

        if occluders is self._current:
            self.stats.hits += 1
            return occluders

        self.stats.misses += 1
        self._current = occluders
        self._index = (
            SpatialIndex.build(occluders, self.index_config.bucket_size)
            if self.index_config.enabled
            else None
        )
        return occluders

    def invalidate(self) -> int:
        """Drop the current set. Returns 1 if a set was dropped, else 0."""
        dropped = 1 if self._current is not None else 0
        self._current = None
        self._index = None
        return dropped


@dataclass(frozen=True, slots=True)
class PolygonCacheKey:
    """Identity of a visibility polygon.

    Light position and radius are rounded so that sub-precision jitter of the
    same light reuses one polygon.
    """

    light_x: float
    light_y: float
    radius: float
    occluder_version: int

    @classmethod
    def for_light(cls, light: LightSource, occluder_version: int, precision: int = 2) -> "PolygonCacheKey":
        return cls(
            light_x=round(light.x, precision),
            light_y=round(light.y, precision),
            radius=round(light.radius, precision),
            occluder_version=occluder_version,
        )


class PolygonCache:
    """Least recently used cache of visibility polygons.

    Example:
        cache = PolygonCache(max_entries=256)
        polygon = cache.get_or_compute(key, lambda: compute(light))
    """

    def __init__(self, max_entries: int | None = 256) -> None:
        if max_entries is not None and max_entries <= 0:
            raise ValueError("Polygon cache max_entries must be a positive integer or None.")
        self.max_entries = max_entries
        self._cache: OrderedDict[PolygonCacheKey, VisibilityPolygon] = OrderedDict()
        self.stats = CacheStats()

    def get(self, key: PolygonCacheKey) -> VisibilityPolygon | None:
        """Cached polygon for a key, marked as recently used, or None."""
        if key not in self._cache:
            self.stats.misses += 1
            return None

        self._cache.move_to_end(key)
        self.stats.hits += 1
        return self._cache[key]

    def store(self, key: PolygonCacheKey, polygon: VisibilityPolygon) -> None:
        """Store a polygon, evicting the least recently used ones when full."""
        self._cache[key] = polygon
        self._cache.move_to_end(key)

        if self.max_entries is None:
            return
        while len(self._cache) > self.max_entries:
            self._cache.popitem(last=False)

    def get_or_compute(
        self,
        key: PolygonCacheKey,
        compute: Callable[[], VisibilityPolygon],
    ) -> tuple[VisibilityPolygon, bool]:
        """Return the polygon for a key, computing and storing it on a miss.

        Returns:
            Tuple of (polygon, whether it came from the cache)
        """
        cached = self.get(key)
        if cached is not None:
            return cached, True

        polygon = compute()
        self.store(key, polygon)
        return polygon, False

    def invalidate(self) -> int:
        """Drop every polygon. Returns the number of dropped entries."""
        count = len(self._cache)
        self._cache.clear()
        return count

    def __contains__(self, key: object) -> bool:
        return key in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} size={len(self)}/{self.max_entries}, stats={self.stats!r}>"
