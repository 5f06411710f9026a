r"""Conversion between raw and normalised warp coefficients.

A warp polynomial can be written over raw sample indices,

.. math::

   w(i) = \sum_k a_k i^k,

or over normalised time :math:`t = i / m` with :math:`m = n - 1`,

.. math::

   w(i) = m \sum_k b_k t^k.

The ``b`` representation keeps every coefficient on a comparable scale
regardless of the signal length, which is what the simplex optimizer works
on.  Callers only ever see ``a`` coefficients.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np


def _powers(m: float, count: int, sign: int) -> np.ndarray:
    exponents = sign * (np.arange(count, dtype=float) - 1.0)
    return np.power(m, exponents)


def scale_coeffs(coeffs: Sequence[float] | np.ndarray, n: int) -> np.ndarray:
    """Convert raw ``a`` coefficients into normalised ``b`` coefficients.

    ``b[0] = a[0] / m`` and ``b[k] = a[k] * m**(k - 1)`` for ``k >= 1`` with
    ``m = n - 1``.  For ``n <= 1`` the coefficients are returned unchanged.
    """

    arr = np.array(coeffs, dtype=float)
    if n <= 1:
        return arr
    return arr * _powers(float(n - 1), arr.size, 1)


def unscale_coeffs(coeffs: Sequence[float] | np.ndarray, n: int) -> np.ndarray:
    """Inverse of :func:`scale_coeffs`."""

    arr = np.array(coeffs, dtype=float)
    if n <= 1:
        return arr
    return arr * _powers(float(n - 1), arr.size, -1)


__all__ = ["scale_coeffs", "unscale_coeffs"]
