# helper functions (coefficient counts, discarded fraction, PSNR)

"""
Helper utilities: how much of the decomposition was discarded and how close
the reconstruction is to the original.
"""

import numpy as np


def discarded_fraction(meta):
    """Share of coefficients that are zero after thresholding (0..1)."""
    total = meta['coefficients']
    return meta['zeroed'] / total if total > 0 else 0.0


def retained_coefficients(side, active):
    """Coefficients kept per channel by a progressive stage of `active` size."""
    keep = min(side, active // 2)
    return keep * keep


def psnr(original, approx):
    """Peak signal-to-noise ratio in dB between two PixelBuffers (inf if identical)."""
    a = original.pixels.astype(np.float64)
    b = approx.pixels.astype(np.float64)
    mse = float(np.mean((a - b) ** 2))
    if mse == 0:
        return float('inf')
    return 10.0 * np.log10(255.0 ** 2 / mse)
