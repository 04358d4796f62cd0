# PixelBuffer - immutable RGB pixel grid shared by every stage

"""
PixelBuffer: width, height and an (H,W,3) integer array.
The array is made read-only at construction; to_array() hands out a copy,
so every transform or reconstruction produces a new buffer.
"""

from dataclasses import dataclass

import numpy as np

from errors import InvalidParameter

CHANNELS = 3


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise InvalidParameter("Width and height must be positive.")
        try:
            arr = np.array(self.pixels, dtype=np.int64)
        except (TypeError, ValueError) as exc:
            raise InvalidParameter("Pixel data is not a rectangular grid.") from exc
        if arr.ndim != 3 or arr.size == 0:
            raise InvalidParameter("Pixel data must be a non-empty HxWx3 grid.")
        if arr.shape != (self.height, self.width, CHANNELS):
            raise InvalidParameter(
                f"Pixel grid shape {arr.shape} does not match "
                f"{self.height}x{self.width}x{CHANNELS}.")
        arr.setflags(write=False)
        # frozen dataclass: bypass __setattr__ to store the private copy
        object.__setattr__(self, 'pixels', arr)

    @classmethod
    def from_grid(cls, grid, width, height):
        """Build from nested lists or an array in [row][column][channel] order."""
        if grid is None or len(grid) == 0 or len(grid[0]) == 0:
            raise InvalidParameter("Pixel data is empty.")
        return cls(width=width, height=height, pixels=grid)

    @classmethod
    def from_array(cls, arr):
        try:
            arr = np.asarray(arr, dtype=np.int64)
        except (TypeError, ValueError) as exc:
            raise InvalidParameter("Pixel data is not a rectangular grid.") from exc
        if arr.ndim != 3:
            raise InvalidParameter("Expected an HxWx3 array.")
        return cls(width=arr.shape[1], height=arr.shape[0], pixels=arr)

    @classmethod
    def blank(cls, width, height):
        """All-black buffer of the given size."""
        if width <= 0 or height <= 0:
            raise InvalidParameter("Width and height must be positive.")
        return cls(width=width, height=height,
                   pixels=np.zeros((height, width, CHANNELS), dtype=np.int64))

    @property
    def shape(self):
        return (self.height, self.width)

    def channel(self, ch):
        """Return one channel (0=R, 1=G, 2=B) as an HxW copy."""
        return self.pixels[:, :, ch].copy()

    def to_array(self):
        return self.pixels.copy()

    def to_uint8(self):
        """Array ready for Pillow; values are clipped to [0,255]."""
        return np.uint8(np.clip(self.pixels, 0, 255))

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return (self.width == other.width and self.height == other.height
                and np.array_equal(self.pixels, other.pixels))
