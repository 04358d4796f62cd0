# Compressor class - orchestrates Haar compression (single ratio + progressive)


"""
Compressor - orchestrates the compression pipeline:
 - pads the image into a square, power-of-two sized matrix per channel
 - forward 2D Haar on R, G and B
 - single mode: ThresholdSelector zeroes the small coefficients
 - progressive mode: keeps only a shrinking top-left (low frequency) quadrant
 - Reconstructor turns each result back into a PixelBuffer
"""

import numpy as np

from haar import haar_2d
from pixel_buffer import CHANNELS
from reconstructor import Reconstructor
from threshold import ThresholdSelector, validate_ratio


def square_length(max_dim):
    """Smallest power of two >= max_dim; 1 and 2 map to themselves."""
    if max_dim == 1 or max_dim == 2:
        return max_dim
    side = 1
    while side * 2 < max_dim:
        side *= 2
    return side * 2


def split_channels(buffer, side):
    """Three side x side float matrices, image in the top-left, zeros elsewhere."""
    channels = []
    for ch in range(CHANNELS):
        m = np.zeros((side, side), dtype=np.float64)
        m[:buffer.height, :buffer.width] = buffer.pixels[:, :, ch]
        channels.append(m)
    return channels


def keep_quadrant(coeffs, size):
    """Copy of coeffs with every entry at row or column >= size set to zero."""
    out = np.zeros_like(coeffs)
    out[:size, :size] = coeffs[:size, :size]
    return out


class Compressor:
    def __init__(self, ratio=0.0, trace=None):
        self.ratio = validate_ratio(ratio)
        self.trace = trace

    def decompose(self, buffer):
        """Pad, split and forward-transform. Returns (side, [R, G, B] coefficients)."""
        side = square_length(max(buffer.width, buffer.height))
        return side, [haar_2d(m) for m in split_channels(buffer, side)]

    def compress(self, buffer):
        """
        buffer: PixelBuffer
        Returns metadata dict containing:
          - 'shape': (H, W) of the input (and output)
          - 'side': padded square side length
          - 'ratio', 'threshold' (None when ratio is 0 or 1)
          - 'coefficients': total coefficient count over the 3 channels
          - 'zeroed': how many of them are zero after thresholding
          - 'image': the reconstructed PixelBuffer
        """
        side, coeffs = self.decompose(buffer)

        selector = ThresholdSelector(self.ratio, trace=self.trace)
        kept, threshold = selector.apply(coeffs)

        zeroed = sum(int(np.count_nonzero(ch == 0)) for ch in kept)
        image = Reconstructor(buffer.width, buffer.height).reconstruct(kept)

        return {
            'shape': (buffer.height, buffer.width),
            'side': side,
            'ratio': self.ratio,
            'threshold': threshold,
            'coefficients': CHANNELS * side * side,
            'zeroed': zeroed,
            'image': image,
        }

    def progressive(self, buffer):
        """
        One decomposition, one independent reconstruction per level.
        The active size starts at 2*side and halves while > 1; each stage keeps
        the top-left active/2 quadrant. Finest (lossless) first, DC-only last,
        log2(side) + 1 images in total.
        """
        side, coeffs = self.decompose(buffer)
        recon = Reconstructor(buffer.width, buffer.height)

        stages = []
        active = side * 2
        while active > 1:
            kept = [keep_quadrant(ch, active // 2) for ch in coeffs]
            stages.append(recon.reconstruct(kept))
            active //= 2
        return stages


def compress_single(buffer, ratio, trace=None):
    """Compress `buffer` at `ratio` in [0, 1]; returns a new PixelBuffer."""
    return Compressor(ratio, trace=trace).compress(buffer)['image']


def compress_progressive(buffer):
    return Compressor().progressive(buffer)

