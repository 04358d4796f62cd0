# Haar wavelet transform - 1D pyramid and 2D row/column decomposition

"""
Orthonormal Haar transform on power-of-two lengths.

haar_1d / inverse_haar_1d work on the last axis, so a 2D array is treated as
a stack of rows. haar_2d transforms rows, transposes, transforms rows again
and transposes back; inverse_haar_2d mirrors that order exactly.
All functions return new arrays and leave their input untouched.
"""

import numpy as np

# shared by forward and inverse so the pair stays an exact inverse
SQRT2 = np.sqrt(2.0)


def is_power_of_two(n):
    return n >= 1 and (n & (n - 1)) == 0


def _check_length(n):
    if not is_power_of_two(n):
        raise ValueError(f"Haar transform needs a power-of-two length, got {n}")


def haar_1d(seq):
    """
    Full multi-level Haar decomposition along the last axis.
    At each level the active prefix of length `size` is replaced with
    size/2 averages followed by size/2 differences, then `size` halves.
    """
    out = np.array(seq, dtype=np.float64)
    n = out.shape[-1]
    _check_length(n)
    size = n
    while size >= 2:
        active = out[..., :size]
        avg = (active[..., 0::2] + active[..., 1::2]) / SQRT2
        diff = (active[..., 0::2] - active[..., 1::2]) / SQRT2
        out[..., :size] = np.concatenate([avg, diff], axis=-1)
        size //= 2
    return out


def inverse_haar_1d(seq):
    """Exact inverse of haar_1d: grows the active prefix from 2 up to N."""
    out = np.array(seq, dtype=np.float64)
    n = out.shape[-1]
    _check_length(n)
    size = 2
    while size <= n:
        half = size // 2
        avg = out[..., :half]
        diff = out[..., half:size]
        recon = np.empty(out.shape[:-1] + (size,), dtype=np.float64)
        recon[..., 0::2] = (avg + diff) / SQRT2
        recon[..., 1::2] = (avg - diff) / SQRT2
        out[..., :size] = recon
        size *= 2
    return out


def _check_square(matrix):
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError(f"Expected a square matrix, got shape {matrix.shape}")


def haar_2d(matrix):
    """Rows, transpose, rows (i.e. columns), transpose back."""
    m = np.asarray(matrix, dtype=np.float64)
    _check_square(m)
    rows = haar_1d(m)
    return haar_1d(rows.T).T


def inverse_haar_2d(matrix):
    """Transpose, inverse rows, transpose, inverse rows."""
    m = np.asarray(matrix, dtype=np.float64)
    _check_square(m)
    cols = inverse_haar_1d(m.T)
    return inverse_haar_1d(cols.T)
