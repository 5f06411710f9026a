"""Parametric time warping: align sampled signals with polynomial warps."""

from .config import Settings, load_settings
from .core import NotFittedError, PtwModel, PtwResult, ptw, warp_samples
from .types import OptimCrit, WarpType

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "load_settings",
    "NotFittedError",
    "PtwModel",
    "PtwResult",
    "ptw",
    "warp_samples",
    "OptimCrit",
    "WarpType",
]
