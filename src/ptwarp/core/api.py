"""Convenience entry points around :class:`~ptwarp.core.model.PtwModel`."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..config import Settings
from ..types import OptimCrit, SignalBatch, WarpType
from .model import PtwModel, PtwResult, as_signal_batch, check_equal_lengths
from .scaling import scale_coeffs
from .warping import warp_signal


def ptw(
    ref: SignalBatch,
    samp: SignalBatch,
    init_coeff: Sequence[float] | np.ndarray | None = None,
    warp_type: WarpType | str | None = None,
    optim_crit: OptimCrit | str | None = None,
    trwdth: int | None = None,
    try_restart: bool | None = None,
    *,
    settings: Settings | None = None,
) -> PtwResult | None:
    """Align ``samp`` onto ``ref`` with a freshly created :class:`PtwModel`.

    Arguments left as ``None`` fall back to ``settings.fit``.  ``None`` is
    returned when ``samp`` holds no signals.

    Examples
    --------
    >>> import numpy as np
    >>> x = np.arange(100.0)
    >>> ref = np.exp(-0.5 * (x - 50) ** 2 / 10)
    >>> samp = np.exp(-0.5 * (x - 52) ** 2 / 10)
    >>> res = ptw(ref, samp, warp_type="global", optim_crit="RMS")
    >>> round(float(res.coeffs[0, 0]))
    2
    """

    model = PtwModel(warp_type, optim_crit, trwdth, settings=settings)
    return model.fit(ref, samp, init_coeffs=init_coeff, try_restart=try_restart)


def warp_samples(samp: SignalBatch, coeffs: Sequence[float] | Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
    """Apply raw (``a``) coefficients to ``samp`` without fitting.

    ``coeffs`` is either one coefficient vector, applied to every sample, or a
    2-D array with one row per sample.
    """

    batch = as_signal_batch(samp, "samp")
    if not batch:
        raise ValueError("samp must contain at least one signal")
    n = batch[0].size
    check_equal_lengths(n, batch, "samp")

    rows = np.atleast_2d(np.asarray(coeffs, dtype=float))
    if rows.ndim != 2 or rows.shape[1] == 0:
        raise ValueError("coeffs must be a coefficient vector or a 2-D array of coefficient rows")
    if rows.shape[0] != 1 and rows.shape[0] != len(batch):
        raise ValueError(f"got {rows.shape[0]} coefficient rows for {len(batch)} samples")

    scaled = [scale_coeffs(row, n) for row in rows]
    if len(scaled) == 1:
        return np.vstack([warp_signal(s, scaled[0]) for s in batch])
    return np.vstack([warp_signal(s, c) for s, c in zip(batch, scaled)])


__all__ = ["ptw", "warp_samples"]
