"""Configuration settings for Shadowcast."""

from pathlib import Path

from pydantic import BaseModel, Field


class ContourConfig(BaseModel):
    """Configuration for sprite outline tracing.

    The simplification tolerance is given in map cells and converted per
    instance to the normalized frame of the sprite, so outlines keep the same
    on-screen fidelity regardless of sprite size.
    """

    alpha_threshold: int = Field(
        default=128,
        ge=0,
        le=255,
        description="Alpha value above which a sprite pixel blocks light",
    )
    simplify_epsilon: float = Field(
        default=0.02,
        ge=0.0,
        le=1.0,
        description="Douglas-Peucker tolerance for outlines (in cells)",
    )

    def normalized_epsilon(self, extent_cells: float) -> float:
        """Convert the cell tolerance to the normalized frame of a sprite.

        Args:
            extent_cells: Longest side of the placed sprite in cells

        Returns:
            Tolerance relative to the sprite's unit square
        """
        if extent_cells <= 0:
            return self.simplify_epsilon
        return self.simplify_epsilon / extent_cells


class VisibilityConfig(BaseModel):
    """Configuration for visibility polygon generation."""

    min_rays: int = Field(
        default=540,
        ge=4,
        le=20000,
        description="Uniformly spaced base rays per light",
    )
    max_rays: int = Field(
        default=1080,
        ge=4,
        le=40000,
        description="Upper bound on rays per light after refinement",
    )
    edge_threshold_ratio: float = Field(
        default=0.05,
        gt=0.0,
        le=1.0,
        description="Distance jump between neighbouring base rays (fraction of radius) that marks a shadow edge",
    )
    vertex_angle_epsilon: float = Field(
        default=0.0003,
        gt=0.0,
        le=0.01,
        description="Angular offset (radians) of the rays flanking each occluder vertex",
    )
    circle_points: int = Field(
        default=32,
        ge=3,
        le=1024,
        description="Vertices of the polygon returned when nothing occludes the light",
    )
    angle_dedup_epsilon: float = Field(
        default=1e-9,
        gt=0.0,
        le=1e-5,
        description="Angles closer than this are cast once",
    )


class SpatialIndexConfig(BaseModel):
    """Configuration for the bucket grid over occluder segments."""

    enabled: bool = Field(
        default=False,
        description="Build a spatial index with every occluder set",
    )
    bucket_size: float = Field(
        default=2.0,
        gt=0.0,
        description="Bucket edge length in cells",
    )


class PolygonCacheConfig(BaseModel):
    """Configuration for the per-light polygon cache."""

    max_entries: int | None = Field(
        default=256,
        ge=1,
        description="Most polygons kept before least recently used ones are evicted (None = unbounded)",
    )
    key_precision: int = Field(
        default=2,
        ge=0,
        le=8,
        description="Decimals of light position and radius that distinguish cache entries",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class ShadowcastSettings(BaseModel):
    """Main application settings."""

    contour: ContourConfig = Field(default_factory=ContourConfig)
    visibility: VisibilityConfig = Field(default_factory=VisibilityConfig)
    spatial_index: SpatialIndexConfig = Field(default_factory=SpatialIndexConfig)
    polygon_cache: PolygonCacheConfig = Field(default_factory=PolygonCacheConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> ShadowcastSettings:
    """Get default application settings."""
    return ShadowcastSettings()
