"""World-space occluder construction.

This module places the normalized outline of every occluding sprite instance
into world cells and aggregates the result into a versioned OccluderSet.

Key functions:
- occluder_signature: Order-independent digest of the occluding instances
- contour_key_for: Outline identity of one placed instance
- instance_segments: World segments of one placed instance
- build_occluder_set: Build (or keep) the occluder set of a map state
"""

import hashlib
import time
from collections.abc import Callable, Sequence

from shadowcast.config import ContourConfig
from shadowcast.domain import Bounds, ContourKey, OccluderSet, PlacedInstance, Segment
from shadowcast.exceptions import AlphaGridError
from shadowcast.utils import LightingLogger

ContourSource = Callable[[ContourKey], Sequence[Segment]]


def occluder_signature(instances: Sequence[PlacedInstance], config: ContourConfig) -> str:
    """Digest the identity and pose of every occluding instance.

    The digest ignores instance order and covers the tracing settings, so a
    changed threshold or tolerance also invalidates the occluder set.

    Args:
        instances: Placed instances (non-occluders are ignored)
        config: Outline tracing settings

    Returns:
        Hex digest
    """
    entries = sorted(inst.signature_entry() for inst in instances if inst.is_occluder)
    digest = hashlib.sha1()
    digest.update(f"{config.alpha_threshold}|{config.simplify_epsilon!r}".encode())
    for entry in entries:
        digest.update(b"\n")
        digest.update(entry.encode("utf-8"))
    return digest.hexdigest()


def contour_key_for(instance: PlacedInstance, config: ContourConfig) -> ContourKey:
    """Outline identity of a placed instance.

    The tolerance is divided by the longest side of the placed sprite so that
    outlines deviate by the same number of cells whatever the sprite size.
    """
    extent = instance.oriented_footprint.scaled(instance.scale)
    return ContourKey(
        sprite_id=instance.sprite_id,
        rotation=instance.rotation,
        mirror_x=instance.mirror_x,
        mirror_y=instance.mirror_y,
        alpha_threshold=config.alpha_threshold,
        simplify_epsilon=config.normalized_epsilon(extent.longest_side),
    )


def instance_segments(
    instance: PlacedInstance,
    normalized: Sequence[Segment],
) -> list[Segment]:
    """Map normalized outline segments of an instance into world cells.

    The oriented footprint decides the center (unless an explicit center is
    set); the drawn extent is the oriented footprint times the instance scale,
    centered on that point.

    Args:
        instance: The placed instance
        normalized: Outline segments in the instance's normalized frame

    Returns:
        Outline segments in world cells
    """
    center = instance.world_center()
    extent = instance.oriented_footprint.scaled(instance.scale)
    left = center.x - extent.width / 2
    top = center.y - extent.height / 2

    return [
        Segment(
            left + seg.x1 * extent.width,
            top + seg.y1 * extent.height,
            left + seg.x2 * extent.width,
            top + seg.y2 * extent.height,
        )
        for seg in normalized
    ]


def build_occluder_set(
    instances: Sequence[PlacedInstance],
    previous: OccluderSet | None,
    contours: ContourSource,
    config: ContourConfig | None = None,
    logger: LightingLogger | None = None,
    next_version: Callable[[], int] | None = None,
) -> OccluderSet:
    """Build the occluder set of a map state.

    If the signature of the occluding instances matches the previous set, the
    previous set is returned unchanged (same version). Otherwise every
    occluding instance is traced and placed, and the new set gets the next
    version. Instances without a usable alpha grid contribute nothing.

    Args:
        instances: All placed instances of the map
        previous: The last occluder set built for this map, if any
        contours: Source of normalized outlines by ContourKey
        config: Outline tracing settings (defaults if None)
        logger: Optional lighting logger for build events
        next_version: Source of the version for a rebuilt set; defaults to
            one past the previous version

    Returns:
        The up-to-date occluder set
    """
    config = config or ContourConfig()
    signature = occluder_signature(instances, config)

    if previous is not None and previous.signature == signature:
        if logger is not None:
            logger.log_occluders_reused(previous.version)
        return previous

    start_time = time.perf_counter()
    occluding = sorted(
        (inst for inst in instances if inst.is_occluder),
        key=lambda inst: inst.signature_entry(),
    )

    segments: list[Segment] = []
    for instance in occluding:
        try:
            normalized = contours(contour_key_for(instance, config))
        except AlphaGridError as e:
            if logger is not None:
                logger.log_instance_skipped(instance.sprite_id, e.reason)
            continue

        if not normalized:
            if logger is not None:
                logger.log_instance_skipped(instance.sprite_id, "no outline")
            continue

        segments.extend(instance_segments(instance, normalized))

    if next_version is not None:
        version = next_version()
    else:
        version = (previous.version if previous is not None else 0) + 1
    occluders = OccluderSet(
        segments=tuple(segments),
        version=version,
        bounds=Bounds.of_segments(segments),
        signature=signature,
    )

    if logger is not None:
        logger.log_occluders_built(
            segments=len(segments),
            instances=len(occluding),
            version=version,
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )

    return occluders
