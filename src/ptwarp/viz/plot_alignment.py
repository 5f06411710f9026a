"""Plot a reference, the raw sample and its warped version."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
import numpy as np

from ..config import Settings

# Shared rcParams for every ptwarp figure.
BASE_STYLE = {
    "figure.figsize": (10, 6),
    "axes.grid": True,
    "grid.linestyle": "--",
    "grid.alpha": 0.5,
    "lines.linewidth": 1.5,
}


def apply_style(extra: dict | None = None) -> None:
    """Update matplotlib rcParams with :data:`BASE_STYLE` plus ``extra``."""
    style = dict(BASE_STYLE, **(extra or {}))
    plt.rcParams.update(style)


def plot_series(ax: plt.Axes, series: Sequence[float], label: str | None = None, **kwargs) -> None:
    """Plot a 1D series on ``ax`` with an optional label."""
    ax.plot(series, label=label, **kwargs)
    if label:
        ax.legend()


def plot_alignment(
    ref: Sequence[float],
    samp: Sequence[float],
    warped: Sequence[float],
    *,
    settings: Settings | None = None,
    title: str | None = None,
    save: str | Path | None = None,
) -> plt.Figure:
    """Draw the alignment of one sample against its reference.

    The upper panel shows the reference, the original sample and the warped
    sample; the lower panel the residual ``warped - ref`` over the overlapping
    length.  The figure is saved when ``save`` (or ``settings.viz.save``) is
    set and returned in every case.
    """

    if settings is None:
        settings = Settings()
    title = title or settings.viz.title
    save = save or settings.viz.save

    ref = np.asarray(ref, dtype=float)
    warped = np.asarray(warped, dtype=float)
    n = min(ref.size, warped.size)

    apply_style()
    fig, (ax1, ax2) = plt.subplots(2, 1, sharex=True)

    plot_series(ax1, ref, label="reference")
    plot_series(ax1, samp, label="sample", linestyle=":")
    plot_series(ax1, warped, label="warped")
    ax1.set_ylabel("Amplitude")
    ax1.set_title(title)

    plot_series(ax2, warped[:n] - ref[:n], label="residual")
    ax2.set_xlabel("Sample")
    ax2.set_ylabel("Delta")

    if save:
        fig.savefig(save, bbox_inches="tight")
    return fig


__all__ = ["plot_series", "plot_alignment"]
