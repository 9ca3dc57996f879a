"""Logging utilities for Shadowcast."""

import logging
from dataclasses import dataclass
from pathlib import Path

import structlog


@dataclass
class LightingStats:
    """Counters collected by a lighting engine."""

    contours_traced: int = 0
    contour_cache_hits: int = 0
    instances_skipped: int = 0
    occluder_builds: int = 0
    occluder_reuses: int = 0
    polygons_generated: int = 0
    polygon_cache_hits: int = 0
    last_build_ms: float = 0.0

    @property
    def polygon_hit_rate(self) -> float:
        """Share of polygon lookups served from the cache, in percent."""
        lookups = self.polygons_generated + self.polygon_cache_hits
        if lookups == 0:
            return 0.0
        return self.polygon_cache_hits / lookups * 100.0


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("shadowcast")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=console_level,
    )

    return logger


class LightingLogger:
    """Logger for tracking lighting work and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = LightingStats()

    def log_contour_traced(self, sprite_id: str, rotation: int, segments: int, epsilon: float) -> None:
        """Log a freshly traced outline."""
        self._logger.debug(
            "Contour traced",
            sprite=sprite_id,
            rotation=rotation,
            segments=segments,
            epsilon=round(epsilon, 6),
        )
        self._stats.contours_traced += 1

    def log_contour_hit(self) -> None:
        """Count an outline served from the cache."""
        self._stats.contour_cache_hits += 1

    def log_instance_skipped(self, sprite_id: str, reason: str) -> None:
        """Log an occluding instance that contributes no geometry."""
        self._logger.debug("Instance skipped", sprite=sprite_id, reason=reason)
        self._stats.instances_skipped += 1

    def log_occluders_built(
        self,
        segments: int,
        instances: int,
        version: int,
        duration_ms: float,
    ) -> None:
        """Log a rebuilt occluder set."""
        self._logger.info(
            "Occluder set built",
            segments=segments,
            instances=instances,
            version=version,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.occluder_builds += 1
        self._stats.last_build_ms = duration_ms

    def log_occluders_reused(self, version: int) -> None:
        """Log an occluder set kept because nothing changed."""
        self._logger.debug("Occluder set unchanged", version=version)
        self._stats.occluder_reuses += 1

    def log_polygon_generated(
        self,
        x: float,
        y: float,
        radius: float,
        vertices: int,
        duration_ms: float,
    ) -> None:
        """Log a computed visibility polygon."""
        self._logger.debug(
            "Visibility polygon generated",
            x=round(x, 2),
            y=round(y, 2),
            radius=radius,
            vertices=vertices,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.polygons_generated += 1

    def log_polygon_hit(self) -> None:
        """Count a polygon served from the cache."""
        self._stats.polygon_cache_hits += 1

    def log_cache_invalidated(self, cache: str, entries: int) -> None:
        """Log an explicit cache reset."""
        self._logger.info("Cache invalidated", cache=cache, entries=entries)

    @property
    def stats(self) -> LightingStats:
        """Get current statistics."""
        return self._stats
