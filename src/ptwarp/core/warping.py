"""Polynomial time warping of sampled signals.

The warp maps each output position ``i`` to a (fractional) position in the
input signal.  The polynomial is evaluated over normalised time
``t = i / (n - 1)`` using ``b`` coefficients (see
:mod:`ptwarp.core.scaling`) and the result is mapped back to index units.
The input signal is then resampled at the warped positions by linear
interpolation, clamping to the first and last sample outside the signal.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.polynomial import polynomial as P


def warp_time(n: int, coeffs: Sequence[float] | np.ndarray) -> np.ndarray:
    """Return the warped index for every position ``0..n-1``.

    Parameters
    ----------
    n:
        Number of samples in the signal.
    coeffs:
        Normalised (``b``) polynomial coefficients ``[c0, c1, ..., cd]``.

    Returns
    -------
    numpy.ndarray
        Array of ``n`` warped positions in index units.
    """

    m = float(n - 1) if n > 1 else 1.0
    t = np.arange(n, dtype=float) / m
    c = np.asarray(coeffs, dtype=float)
    if c.size == 0:
        return np.zeros(n, dtype=float)
    return P.polyval(t, c) * m


def interpolate(signal: Sequence[float] | np.ndarray, index):
    """Linearly interpolate ``signal`` at fractional ``index``.

    ``index`` may be a scalar or an array.  Positions at or below ``0`` return
    the first sample and positions at or beyond ``len(signal) - 1`` return the
    last one; both are exact copies of the boundary sample.  A ``NaN`` position
    yields ``NaN``.
    """

    sig = np.asarray(signal, dtype=float)
    if sig.ndim != 1 or sig.size == 0:
        raise ValueError("signal must be a non-empty one-dimensional sequence")
    idx = np.asarray(index, dtype=float)
    n = sig.size

    if n == 1:
        out = np.where(np.isnan(idx), np.nan, sig[0])
    else:
        out = np.interp(idx, np.arange(n, dtype=float), sig)

    if np.ndim(out) == 0:
        return float(out)
    return out


def warp_signal(signal: Sequence[float] | np.ndarray, coeffs: Sequence[float] | np.ndarray) -> np.ndarray:
    """Resample ``signal`` through the warp defined by ``coeffs``.

    The output has the same length as ``signal``.  Empty signals are returned
    as empty arrays.
    """

    sig = np.asarray(signal, dtype=float)
    if sig.size == 0:
        return np.zeros(0, dtype=float)
    return np.asarray(interpolate(sig, warp_time(sig.size, coeffs)), dtype=float)


__all__ = ["warp_time", "interpolate", "warp_signal"]
