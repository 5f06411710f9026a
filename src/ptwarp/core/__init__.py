"""Core algorithms and data structures for ptwarp."""

from .scaling import scale_coeffs, unscale_coeffs
from .warping import interpolate, warp_signal, warp_time
from .similarity import rms_error, triangle_smooth, uncentered_correlation, wcc
from .optim import SimplexResult, minimize
from .model import NotFittedError, PtwModel, PtwResult
from .api import ptw, warp_samples

__all__ = [
    "scale_coeffs",
    "unscale_coeffs",
    "interpolate",
    "warp_signal",
    "warp_time",
    "rms_error",
    "triangle_smooth",
    "uncentered_correlation",
    "wcc",
    "SimplexResult",
    "minimize",
    "NotFittedError",
    "PtwModel",
    "PtwResult",
    "ptw",
    "warp_samples",
]
