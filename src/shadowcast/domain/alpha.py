"""Alpha grid for one oriented sprite variant."""

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from shadowcast.exceptions import AlphaGridError


@dataclass(frozen=True, eq=False)
class AlphaGrid:
    """Transparency channel of a sprite after rotation and mirroring.

    Attributes:
        alpha: uint8 array of shape (height, width), row-major from the top
    """

    alpha: npt.NDArray[np.uint8]

    def __post_init__(self) -> None:
        if self.alpha.ndim != 2:
            raise AlphaGridError(f"expected a 2-D array, got {self.alpha.ndim}-D")
        if self.alpha.size == 0:
            raise AlphaGridError("grid has zero width or height")

    @classmethod
    def from_array(cls, values: npt.ArrayLike) -> "AlphaGrid":
        """Create a grid from any 2-D array-like of alpha values (0-255).

        Args:
            values: Nested sequences or an array of shape (height, width)

        Returns:
            AlphaGrid holding a uint8 copy of the values

        Raises:
            AlphaGridError: If the values are not a non-empty 2-D grid
        """
        array = np.asarray(values)
        if array.ndim != 2:
            raise AlphaGridError(f"expected a 2-D array, got {array.ndim}-D")
        return cls(np.clip(array, 0, 255).astype(np.uint8))

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes) -> "AlphaGrid":
        """Create a grid from a row-major byte buffer.

        Args:
            width: Grid width in samples
            height: Grid height in samples
            data: width * height alpha bytes

        Returns:
            AlphaGrid instance

        Raises:
            AlphaGridError: If the buffer does not match the declared size
        """
        if width <= 0 or height <= 0:
            raise AlphaGridError(f"non-positive size {width}x{height}")
        if len(data) != width * height:
            raise AlphaGridError(
                f"expected {width * height} bytes for {width}x{height}, got {len(data)}"
            )
        return cls(np.frombuffer(data, dtype=np.uint8).reshape(height, width).copy())

    @property
    def width(self) -> int:
        return int(self.alpha.shape[1])

    @property
    def height(self) -> int:
        return int(self.alpha.shape[0])

    def solid_mask(self, threshold: int) -> npt.NDArray[np.bool_]:
        """Binarize the grid: a sample is solid when its alpha exceeds threshold."""
        return self.alpha > threshold
