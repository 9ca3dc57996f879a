"""Lighting engine orchestration.

This module ties the lighting pipeline together behind one object that owns
the caches of a map:

1. Outlines are traced per oriented sprite variant and cached
2. Occluding instances are placed into a versioned occluder set, rebuilt only
   when the occluders change
3. Visibility polygons are computed per light and cached per occluder version

Key components:
- LightingEngine: Cache-owning facade used by a renderer
"""

from collections.abc import Sequence

import structlog

from shadowcast.config import ShadowcastSettings
from shadowcast.core.cache import ContourCache, OccluderCache, PolygonCache, PolygonCacheKey
from shadowcast.core.occluders import build_occluder_set
from shadowcast.core.spatial import SpatialIndex
from shadowcast.core.visibility import VisibilityPolygon, compute_visibility_polygon
from shadowcast.domain import ContourKey, LightSource, OccluderSet, PlacedInstance, Point, Segment
from shadowcast.exceptions import AlphaGridError
from shadowcast.io import AlphaSampler
from shadowcast.utils import LightingLogger, LightingStats, configure_logging


class LightingEngine:
    """Shadow geometry for one tile map.

    The engine decides nothing about which instances block light or which
    lights exist; the host passes those in every frame and gets back polygons
    to composite.

    Example:
        engine = LightingEngine(sampler)
        occluders = engine.occluders_for(instances)
        polygons = engine.visibility_for_lights(lights, occluders)
    """

    def __init__(
        self,
        sampler: AlphaSampler,
        settings: ShadowcastSettings | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            sampler: Source of oriented sprite alpha grids
            settings: Engine settings (defaults if None)
            logger: Structured logger; when None, logging is configured from
                settings if a log file is set, else the shared logger is used
        """
        self.sampler = sampler
        self.settings = settings or ShadowcastSettings()

        if logger is None:
            log_config = self.settings.logging
            if log_config.log_file is not None:
                logger = configure_logging(
                    log_file=log_config.log_file,
                    console_level=log_config.log_level,
                    file_level=log_config.file_log_level,
                )
            else:
                logger = structlog.get_logger("shadowcast")

        self.logger = logger
        self.lighting_logger = LightingLogger(logger)

        self.contour_cache = ContourCache()
        self.occluder_cache = OccluderCache(self.settings.spatial_index)
        self.polygon_cache = PolygonCache(self.settings.polygon_cache.max_entries)

    def _trace(self, key: ContourKey) -> tuple[Segment, ...]:
        return self.contour_cache.get_or_extract(key, self.sampler, self.lighting_logger)

    def extract_contour(self, key: ContourKey) -> tuple[Segment, ...]:
        """Normalized outline of an oriented sprite variant.

        Malformed alpha grids yield no segments.
        """
        try:
            return self._trace(key)
        except AlphaGridError as e:
            self.logger.debug("Malformed alpha grid", sprite=key.sprite_id, reason=e.reason)
            return ()

    def build_occluder_set(
        self,
        instances: Sequence[PlacedInstance],
        previous: OccluderSet | None = None,
    ) -> OccluderSet:
        """Build an occluder set, reusing previous when nothing changed.

        This bypasses the occluder cache; use occluders_for() for the map's
        current set. New sets take their version from the same counter as the
        cached sets, so no two sets of one engine share a version.
        """
        return build_occluder_set(
            instances,
            previous,
            self._trace,
            self.settings.contour,
            self.lighting_logger,
            next_version=self.occluder_cache.next_version,
        )

    def occluders_for(self, instances: Sequence[PlacedInstance]) -> OccluderSet:
        """Current occluder set of the map, rebuilt only on change."""
        return self.occluder_cache.get(
            instances,
            self._trace,
            self.settings.contour,
            self.lighting_logger,
        )

    @property
    def spatial_index(self) -> SpatialIndex | None:
        """Spatial index of the current occluder set, if enabled."""
        return self.occluder_cache.index

    def compute_visibility_polygon(
        self,
        origin: Point,
        radius: float,
        occluders: OccluderSet | Sequence[Segment],
        min_rays: int | None = None,
        max_rays: int | None = None,
    ) -> VisibilityPolygon:
        """Compute a visibility polygon without the polygon cache.

        Args:
            origin: Light center in world cells
            radius: Light radius in cells
            occluders: Occluder set or plain segments
            min_rays: Base rays (settings if None)
            max_rays: Ray limit (settings if None)

        Returns:
            Polygon vertices ordered by angle
        """
        config = self.settings.visibility
        return compute_visibility_polygon(
            origin,
            radius,
            occluders,
            min_rays if min_rays is not None else config.min_rays,
            max_rays if max_rays is not None else config.max_rays,
            index=self.occluder_cache.index if isinstance(occluders, OccluderSet) else None,
            config=config,
            logger=self.lighting_logger,
        )

    def visibility_for_light(self, light: LightSource, occluders: OccluderSet) -> VisibilityPolygon:
        """Visibility polygon of a light, served from the polygon cache.

        Several passes over the same light (for example an unshaded pass and a
        tinted pass) share one computation while the occluders are unchanged.
        """
        key = PolygonCacheKey.for_light(
            light,
            occluders.version,
            self.settings.polygon_cache.key_precision,
        )
        polygon, hit = self.polygon_cache.get_or_compute(
            key,
            lambda: self.compute_visibility_polygon(light.origin, light.radius, occluders),
        )
        if hit:
            self.lighting_logger.log_polygon_hit()
        return polygon

    def visibility_for_lights(
        self,
        lights: Sequence[LightSource],
        occluders: OccluderSet,
    ) -> list[VisibilityPolygon]:
        """Visibility polygons of several lights, in the order given."""
        return [self.visibility_for_light(light, occluders) for light in lights]

    def invalidate_contour_cache(self) -> int:
        """Drop every cached outline (after sprite assets change)."""
        count = self.contour_cache.invalidate()
        self.lighting_logger.log_cache_invalidated("contour", count)
        return count

    def invalidate_occluder_cache(self) -> int:
        """Force the next occluders_for() call to rebuild."""
        count = self.occluder_cache.invalidate()
        self.lighting_logger.log_cache_invalidated("occluder", count)
        return count

    def invalidate_polygon_cache(self) -> int:
        """Drop every cached visibility polygon."""
        count = self.polygon_cache.invalidate()
        self.lighting_logger.log_cache_invalidated("polygon", count)
        return count

    @property
    def stats(self) -> LightingStats:
        """Counters collected since the engine was created."""
        return self.lighting_logger.stats
