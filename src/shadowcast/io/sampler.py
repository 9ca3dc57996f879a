"""Alpha sampling for oriented sprite variants.

The lighting core never reads image files. It asks an AlphaSampler for the
transparency channel of a sprite variant and works from there. Hosts that
rasterize sprites themselves implement the protocol directly; hosts that
already hold raw alpha arrays register them with ArrayAlphaSampler, which
applies the rotation and mirroring.
"""

from typing import Protocol

import numpy as np
import numpy.typing as npt

from shadowcast.domain import AlphaGrid
from shadowcast.exceptions import PoseError


class AlphaSampler(Protocol):
    """Source of alpha grids for oriented sprite variants."""

    def sample(
        self,
        sprite_id: str,
        rotation: int,
        mirror_x: bool,
        mirror_y: bool,
    ) -> AlphaGrid | None:
        """Return the alpha grid of a sprite variant, or None if unavailable."""
        ...


def orient_alpha(
    alpha: npt.NDArray[np.uint8],
    rotation: int,
    mirror_x: bool,
    mirror_y: bool,
) -> npt.NDArray[np.uint8]:
    """Mirror and rotate an alpha array the way the sprite is drawn.

    Mirroring is applied first, then the clockwise quarter turns, matching
    how a renderer composes the draw transform around the sprite center.

    Args:
        alpha: Array of shape (height, width)
        rotation: Clockwise quarter turns (0-3)
        mirror_x: Flip columns
        mirror_y: Flip rows

    Returns:
        Oriented array (width and height swapped for odd quarter turns)
    """
    if rotation not in (0, 1, 2, 3):
        raise PoseError("rotation", rotation)

    oriented = alpha
    if mirror_x:
        oriented = oriented[:, ::-1]
    if mirror_y:
        oriented = oriented[::-1, :]
    # np.rot90 turns counter-clockwise for positive k in row/column order
    return np.ascontiguousarray(np.rot90(oriented, k=-rotation))


class ArrayAlphaSampler:
    """In-memory sampler over registered base alpha arrays.

    Example:
        sampler = ArrayAlphaSampler()
        sampler.register("crate_1X1_.png", alpha_array)
        grid = sampler.sample("crate_1X1_.png", rotation=1, mirror_x=False, mirror_y=False)
    """

    def __init__(self, max_dim: int | None = None) -> None:
        """Initialize the sampler.

        Args:
            max_dim: Downsample registered arrays so their longest side is at
                most this many samples (None keeps full resolution)
        """
        self._max_dim = max_dim
        self._sprites: dict[str, npt.NDArray[np.uint8]] = {}

    def register(self, sprite_id: str, alpha: npt.ArrayLike) -> None:
        """Register the unrotated alpha channel of a sprite.

        Args:
            sprite_id: Sprite identifier
            alpha: Array-like of shape (height, width) with values 0-255
        """
        array = np.clip(np.asarray(alpha), 0, 255).astype(np.uint8)
        if self._max_dim is not None and array.ndim == 2 and array.size:
            longest = max(array.shape)
            if longest > self._max_dim:
                step = -(-longest // self._max_dim)
                array = array[::step, ::step]
        self._sprites[sprite_id] = array

    def unregister(self, sprite_id: str) -> None:
        """Forget a sprite; later samples of it return None."""
        self._sprites.pop(sprite_id, None)

    def __contains__(self, sprite_id: object) -> bool:
        return sprite_id in self._sprites

    def sample(
        self,
        sprite_id: str,
        rotation: int,
        mirror_x: bool,
        mirror_y: bool,
    ) -> AlphaGrid | None:
        """Return the oriented alpha grid of a registered sprite.

        Args:
            sprite_id: Sprite identifier
            rotation: Clockwise quarter turns (0-3)
            mirror_x: Horizontal flip
            mirror_y: Vertical flip

        Returns:
            AlphaGrid, or None when the sprite is unknown

        Raises:
            AlphaGridError: If the registered array is not a usable grid
        """
        alpha = self._sprites.get(sprite_id)
        if alpha is None:
            return None
        if alpha.ndim != 2:
            return AlphaGrid.from_array(alpha)
        return AlphaGrid(orient_alpha(alpha, rotation, mirror_x, mirror_y))
