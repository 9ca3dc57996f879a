"""Configuration management for shadowcast.

This module provides configuration management using Pydantic models.

Key classes:
- ContourConfig: Outline tracing settings
- VisibilityConfig: Ray budget and shadow-edge refinement settings
- SpatialIndexConfig: Occluder bucket grid settings
- PolygonCacheConfig: Per-light polygon cache settings
- LoggingConfig: Logging settings
- ShadowcastSettings: Main settings
"""

from shadowcast.config.settings import (
    ContourConfig,
    LoggingConfig,
    PolygonCacheConfig,
    ShadowcastSettings,
    SpatialIndexConfig,
    VisibilityConfig,
    get_default_settings,
)

__all__ = [
    "ContourConfig",
    "LoggingConfig",
    "PolygonCacheConfig",
    "ShadowcastSettings",
    "SpatialIndexConfig",
    "VisibilityConfig",
    "get_default_settings",
]
