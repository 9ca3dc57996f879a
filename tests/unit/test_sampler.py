"""Unit tests for alpha sampling.

Tests cover:
- Orientation of alpha arrays (mirroring, then clockwise quarter turns)
- Registration, downsampling and lookup in ArrayAlphaSampler
"""

import numpy as np
import pytest

from shadowcast.exceptions import AlphaGridError, PoseError
from shadowcast.io import ArrayAlphaSampler, orient_alpha

# Row-major, 2 rows x 3 columns
BASE = np.array([[1, 2, 3], [4, 5, 6]], dtype=np.uint8)


class TestOrientAlpha:
    """Tests for orienting alpha arrays."""

    def test_identity(self):
        assert orient_alpha(BASE, 0, False, False).tolist() == BASE.tolist()

    def test_quarter_turn_clockwise(self):
        turned = orient_alpha(BASE, 1, False, False)
        assert turned.tolist() == [[4, 1], [5, 2], [6, 3]]

    def test_half_turn(self):
        assert orient_alpha(BASE, 2, False, False).tolist() == [[6, 5, 4], [3, 2, 1]]

    def test_three_quarter_turn(self):
        assert orient_alpha(BASE, 3, False, False).tolist() == [[3, 6], [2, 5], [1, 4]]

    def test_mirror_x(self):
        assert orient_alpha(BASE, 0, True, False).tolist() == [[3, 2, 1], [6, 5, 4]]

    def test_mirror_y(self):
        assert orient_alpha(BASE, 0, False, True).tolist() == [[4, 5, 6], [1, 2, 3]]

    def test_mirror_before_rotation(self):
        assert orient_alpha(BASE, 1, True, False).tolist() == [[6, 3], [5, 2], [4, 1]]

    def test_result_is_contiguous(self):
        assert orient_alpha(BASE, 1, True, True).flags["C_CONTIGUOUS"]

    def test_invalid_rotation(self):
        with pytest.raises(PoseError):
            orient_alpha(BASE, 4, False, False)


class TestArrayAlphaSampler:
    """Tests for the in-memory sampler."""

    def test_unknown_sprite(self):
        assert ArrayAlphaSampler().sample("missing", 0, False, False) is None

    def test_sample_orients(self):
        sampler = ArrayAlphaSampler()
        sampler.register("bench", BASE)
        grid = sampler.sample("bench", 1, False, False)
        assert grid is not None
        assert (grid.width, grid.height) == (2, 3)

    def test_register_clips_values(self):
        sampler = ArrayAlphaSampler()
        sampler.register("hot", [[-10, 300], [10, 20]])
        grid = sampler.sample("hot", 0, False, False)
        assert grid is not None
        assert grid.alpha.tolist() == [[0, 255], [10, 20]]

    def test_downsampling(self):
        sampler = ArrayAlphaSampler(max_dim=16)
        sampler.register("large", np.full((64, 32), 255))
        grid = sampler.sample("large", 0, False, False)
        assert grid is not None
        assert max(grid.width, grid.height) <= 16

    def test_unregister(self):
        sampler = ArrayAlphaSampler()
        sampler.register("crate", BASE)
        assert "crate" in sampler
        sampler.unregister("crate")
        assert "crate" not in sampler
        assert sampler.sample("crate", 0, False, False) is None

    def test_malformed_array(self):
        sampler = ArrayAlphaSampler()
        sampler.register("cube", np.zeros((2, 2, 2)))
        with pytest.raises(AlphaGridError):
            sampler.sample("cube", 0, False, False)
