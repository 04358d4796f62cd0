# Reconstructor class - coefficients back to an in-range PixelBuffer

"""
Reconstructor: inverse 2D Haar per channel, round half up, crop to the
original size, then repair the value range if anything left [0,255].
"""

import numpy as np

from haar import inverse_haar_2d
from pixel_buffer import PixelBuffer


def round_half_up(values):
    """Nearest integer, ties go to the larger one (-0.5 -> 0, 2.5 -> 3)."""
    x = np.asarray(values, dtype=np.float64)
    # x + 0.5 can itself round up (0.49999999999999994 + 0.5 == 1.0)
    f = np.floor(x)
    return (f + (x - f >= 0.5)).astype(np.int64)


def needs_normalize(arr):
    return bool(np.any(arr < 0) or np.any(arr > 255))


def normalize(arr):
    """
    Global linear rescale of the whole HxWx3 array (all channels together)
    from [min,max] to [0,255]. A flat array maps to all zeros.
    """
    arr = np.asarray(arr, dtype=np.int64)
    mn = int(arr.min())
    mx = int(arr.max())
    if mx == mn:
        return np.zeros_like(arr)
    scaled = (arr - mn) * 255.0 / (mx - mn)
    return round_half_up(scaled)


class Reconstructor:
    def __init__(self, width, height):
        self.width = width
        self.height = height

    def reconstruct(self, channels):
        """channels: three NxN coefficient matrices (R, G, B)."""
        planes = []
        for coeffs in channels:
            values = inverse_haar_2d(coeffs)
            planes.append(round_half_up(values[:self.height, :self.width]))
        pixels = np.stack(planes, axis=-1)
        if needs_normalize(pixels):
            pixels = normalize(pixels)
        return PixelBuffer(width=self.width, height=self.height, pixels=pixels)
