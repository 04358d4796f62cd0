# ThresholdSelector class - percentile cutoff over pooled coefficients

"""
ThresholdSelector: picks one magnitude cutoff for a compression ratio and
applies it to all three channel matrices.
 - pool: |c| for every coefficient above NEGLIGIBLE, across R, G and B
 - select: sorted ascending, value at floor(n * ratio) (clamped to n-1)
 - apply: zero every coefficient with |c| <= threshold, channel by channel
Ratio 0 keeps everything, ratio 1 zeroes everything without sorting.
"""

import math

import numpy as np

from errors import InvalidParameter

NEGLIGIBLE = 1e-6


def validate_ratio(ratio):
    try:
        ratio = float(ratio)
    except (TypeError, ValueError) as exc:
        raise InvalidParameter(f"Compression ratio must be a number, got {ratio!r}") from exc
    if math.isnan(ratio) or ratio < 0 or ratio > 1:
        raise InvalidParameter("Compression ratio should be in [0, 1].")
    return ratio


class ThresholdSelector:
    def __init__(self, ratio, trace=None):
        self.ratio = validate_ratio(ratio)
        # optional callback, called with the threshold once it is known
        self.trace = trace
        self.threshold = None

    @staticmethod
    def pool(channels):
        """Absolute values of the non-negligible coefficients of all channels."""
        mags = [np.abs(ch).ravel() for ch in channels]
        mags = np.concatenate(mags) if mags else np.zeros(0)
        return mags[mags > NEGLIGIBLE]

    def select(self, pool):
        pool = np.sort(np.asarray(pool, dtype=np.float64))
        n = pool.size
        if n == 0:
            # nothing above NEGLIGIBLE: nothing left to discard
            threshold = 0.0
        else:
            pos = min(int(math.floor(n * self.ratio)), n - 1)
            threshold = float(pool[pos])
        self.threshold = threshold
        if self.trace is not None:
            self.trace(threshold)
        return threshold

    def apply(self, channels):
        """
        Returns (new_channels, threshold). threshold is None when no
        percentile was computed (ratio 0 or 1).
        """
        channels = [np.array(ch, dtype=np.float64) for ch in channels]
        if self.ratio == 0:
            return channels, None
        if self.ratio == 1:
            return [np.zeros_like(ch) for ch in channels], None
        threshold = self.select(self.pool(channels))
        out = [np.where(np.abs(ch) <= threshold, 0.0, ch) for ch in channels]
        return out, threshold
