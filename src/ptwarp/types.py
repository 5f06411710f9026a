"""Common type helpers for ptwarp.

The fit engine is configured through two closed enumerations.  Both accept
either a member or a case-insensitive string so that values coming from
configuration files, environment variables or the command line can be
validated in one place.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence, Union

import numpy as np

Signal = Union[Sequence[float], np.ndarray]
SignalBatch = Union[Sequence[Sequence[float]], np.ndarray]


class _ParseableEnum(str, Enum):
    @classmethod
    def parse(cls, value: "str | _ParseableEnum"):
        """Return the member matching ``value``.

        ``ValueError`` is raised for anything that is not a known value.
        """

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value.lower() == key:
                    return member
        accepted = ", ".join(repr(m.value) for m in cls)
        raise ValueError(f"unknown {cls.__name__} {value!r}; expected one of {accepted}")


class WarpType(_ParseableEnum):
    """Whether one warp is shared by all samples or fitted per sample."""

    GLOBAL = "global"
    INDIVIDUAL = "individual"


class OptimCrit(_ParseableEnum):
    """Criterion minimised during the fit."""

    RMS = "RMS"
    WCC = "WCC"


__all__ = ["Signal", "SignalBatch", "WarpType", "OptimCrit"]
