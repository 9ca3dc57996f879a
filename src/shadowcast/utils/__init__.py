"""Utility functions for shadowcast.

This module provides:

- Logging setup and configuration
- Lighting statistics collection
"""

from shadowcast.utils.logging import (
    LightingLogger,
    LightingStats,
    configure_logging,
)

__all__ = [
    "LightingLogger",
    "LightingStats",
    "configure_logging",
]
