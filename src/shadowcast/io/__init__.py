"""Alpha sampling layer for shadowcast.

This module is the seam between the lighting core and whatever rasterizes
sprites. It provides a clean abstraction over "give me the alpha grid for this
oriented sprite variant".

Key classes:
- AlphaSampler: Protocol implemented by sprite rasterizers
- ArrayAlphaSampler: In-memory sampler over registered alpha arrays
"""

from shadowcast.io.sampler import AlphaSampler, ArrayAlphaSampler, orient_alpha

__all__ = [
    "AlphaSampler",
    "ArrayAlphaSampler",
    "orient_alpha",
]
