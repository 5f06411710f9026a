"""Similarity and distance measures used as fit criteria.

``uncentered_correlation`` is the cosine of the angle between two signals;
no mean is subtracted.  The weighted cross-correlation (WCC) score applies it
to triangle-smoothed copies of both signals so that small misalignments are
still rewarded.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from scipy.ndimage import correlate1d


def uncentered_correlation(x: Sequence[float] | np.ndarray, y: Sequence[float] | np.ndarray) -> float:
    """Return ``sum(x*y) / sqrt(sum(x**2) * sum(y**2))``.

    Only the overlapping prefix of length ``min(len(x), len(y))`` is used.
    ``0.0`` is returned when either signal has zero energy or the overlap is
    empty.
    """

    a = np.asarray(x, dtype=float)
    b = np.asarray(y, dtype=float)
    n = min(a.size, b.size)
    if n == 0:
        return 0.0
    a = a[:n]
    b = b[:n]
    denom = np.sqrt(np.dot(a, a) * np.dot(b, b))
    if denom == 0.0:
        return 0.0
    return float(np.dot(a, b) / denom)


def triangle_weights(width: int) -> np.ndarray:
    """Weights ``1 - |k| / (width + 1)`` for offsets ``-width..width``."""

    k = np.arange(-width, width + 1, dtype=float)
    return 1.0 - np.abs(k) / (width + 1.0)


def triangle_smooth(signal: Sequence[float] | np.ndarray, width: int) -> np.ndarray:
    """Smooth ``signal`` with a symmetric triangular moving average.

    Near the boundaries the window is truncated and the result is divided by
    the sum of the weights that fell inside the signal.  Where that sum is
    zero the original sample is passed through.
    """

    if width < 0:
        raise ValueError("width must be non-negative")
    sig = np.asarray(signal, dtype=float)
    if sig.size == 0:
        return sig.copy()
    weights = triangle_weights(width)
    total = correlate1d(sig, weights, mode="constant", cval=0.0)
    norm = correlate1d(np.ones_like(sig), weights, mode="constant", cval=0.0)
    out = sig.copy()
    nz = norm > 0.0
    out[nz] = total[nz] / norm[nz]
    return out


def wcc(ref: Sequence[float] | np.ndarray, samp: Sequence[float] | np.ndarray, width: int) -> float:
    """Weighted cross-correlation between ``ref`` and ``samp``.

    With ``width == 0`` this is :func:`uncentered_correlation` of the raw
    signals, otherwise both signals are first passed through
    :func:`triangle_smooth`.
    """

    if width == 0:
        return uncentered_correlation(ref, samp)
    return uncentered_correlation(triangle_smooth(ref, width), triangle_smooth(samp, width))


def rms_error(ref: Sequence[float] | np.ndarray, warped: Sequence[float] | np.ndarray) -> float:
    """Root-mean-square difference over the overlapping length.

    An empty overlap gives ``0.0``.
    """

    a = np.asarray(ref, dtype=float)
    b = np.asarray(warped, dtype=float)
    n = min(a.size, b.size)
    if n == 0:
        return 0.0
    diff = a[:n] - b[:n]
    return float(np.sqrt(np.mean(diff * diff)))


__all__ = [
    "uncentered_correlation",
    "triangle_weights",
    "triangle_smooth",
    "wcc",
    "rms_error",
]
