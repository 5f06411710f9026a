from __future__ import annotations

"""Parametric time warping fit engine.

:class:`PtwModel` owns the configuration of one fit request (warp type,
criterion, smoothing width) together with the fitted coefficients.  It builds
the objective for the simplex optimizer from :mod:`ptwarp.core.warping` and
:mod:`ptwarp.core.similarity`, keeps the best coefficients in normalised
(``b``) space and exposes them to callers in raw (``a``) space.
"""

from dataclasses import dataclass, field
import logging
from typing import Any, Callable, Dict, List, Sequence

import numpy as np

from ..config import Settings
from ..types import OptimCrit, SignalBatch, WarpType
from .optim import SimplexResult, minimize
from .scaling import scale_coeffs, unscale_coeffs
from .similarity import rms_error, wcc
from .warping import warp_signal

logger = logging.getLogger(__name__)


class NotFittedError(RuntimeError):
    """Raised when :meth:`PtwModel.predict` is called before a fit."""


@dataclass
class PtwResult:
    """Result of :meth:`PtwModel.fit`.

    Attributes
    ----------
    coeffs:
        Raw (``a``) warp coefficients with one row per fit: a single row in
        global mode, one row per sample in individual mode.
    warped:
        Warped samples, one row per input sample.
    crit_values:
        Final criterion value of every fit (lower is better).
    warp_type, optim_crit:
        Configuration used for the fit.
    diagnostics:
        Per-fit optimizer statistics (``nit``, ``nfev``, ``converged``) and the
        seed that produced the kept coefficients.
    """

    coeffs: np.ndarray
    warped: np.ndarray
    crit_values: np.ndarray
    warp_type: WarpType
    optim_crit: OptimCrit
    diagnostics: Dict[str, Any] = field(default_factory=dict)


def as_signal_batch(signals: SignalBatch, name: str) -> List[np.ndarray]:
    """Return ``signals`` as a list of one-dimensional float arrays.

    A single one-dimensional signal is promoted to a batch of one and an
    empty one-dimensional array becomes an empty batch.  The arrays are not
    required to share a length here; see :func:`check_equal_lengths`.
    """

    if isinstance(signals, np.ndarray):
        arr = np.asarray(signals, dtype=float)
        if arr.ndim == 1:
            return [arr] if arr.size else []
        if arr.ndim != 2:
            raise ValueError(f"{name} must be a 1-D signal or a 2-D batch, got {arr.ndim} dimensions")
        return [row for row in arr]

    rows = list(signals)
    if rows and np.ndim(rows[0]) == 0:
        return [np.asarray(rows, dtype=float)]
    batch = []
    for i, row in enumerate(rows):
        arr = np.asarray(row, dtype=float)
        if arr.ndim != 1:
            raise ValueError(f"{name}[{i}] must be one-dimensional, got {arr.ndim} dimensions")
        batch.append(arr)
    return batch


def check_equal_lengths(n: int, signals: Sequence[np.ndarray], name: str) -> None:
    """Raise ``ValueError`` unless every signal has ``n`` samples."""

    for i, sig in enumerate(signals):
        if sig.size != n:
            raise ValueError(f"{name}[{i}] has {sig.size} samples, expected {n}")


class PtwModel:
    """Fit and apply polynomial time warps.

    Parameters
    ----------
    warp_type:
        ``"global"`` for one warp shared by all samples or ``"individual"``
        for one warp per sample.
    optim_crit:
        ``"RMS"`` or ``"WCC"``.
    trwdth:
        Half-width of the triangular smoothing window used by WCC.
    settings:
        Optional :class:`~ptwarp.config.Settings` providing defaults for the
        arguments above, the restart seeds and the optimizer parameters.
    """

    def __init__(
        self,
        warp_type: WarpType | str | None = None,
        optim_crit: OptimCrit | str | None = None,
        trwdth: int | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        if settings is None:
            settings = Settings()
        self.settings = settings
        fit_cfg = settings.fit

        self.warp_type = WarpType.parse(fit_cfg.warp_type if warp_type is None else warp_type)
        self.optim_crit = OptimCrit.parse(fit_cfg.optim_crit if optim_crit is None else optim_crit)
        trwdth = fit_cfg.trwdth if trwdth is None else trwdth
        if int(trwdth) != trwdth or trwdth < 0:
            raise ValueError(f"trwdth must be a non-negative integer, got {trwdth!r}")
        self.trwdth = int(trwdth)

        self.coeffs: List[np.ndarray] = []
        self.crit_values: List[float] = []
        self.n_points: int | None = None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(warp_type={self.warp_type.value!r}, "
            f"optim_crit={self.optim_crit.value!r}, trwdth={self.trwdth})"
        )

    @property
    def is_fitted(self) -> bool:
        return bool(self.coeffs)

    @property
    def coefficients(self) -> np.ndarray:
        """Fitted coefficients in raw (``a``) space, one row per fit."""

        self._check_fitted()
        return np.vstack([unscale_coeffs(c, self.n_points) for c in self.coeffs])

    # ------------------------------------------------------------------
    # Objective
    # ------------------------------------------------------------------

    def calculate_error(self, ref: np.ndarray, samp: np.ndarray, coeffs: np.ndarray) -> float:
        """Criterion value of ``samp`` warped by ``b`` coefficients against ``ref``."""

        warped = warp_signal(samp, coeffs)
        if self.optim_crit is OptimCrit.WCC:
            return 1.0 - wcc(ref, warped, self.trwdth)
        return rms_error(ref, warped)

    def _global_objective(self, refs: List[np.ndarray], samps: List[np.ndarray]) -> Callable[[np.ndarray], float]:
        pairs = [(refs[0] if len(refs) == 1 else refs[i], samp) for i, samp in enumerate(samps)]

        def objective(coeffs: np.ndarray) -> float:
            return sum(self.calculate_error(ref, samp, coeffs) for ref, samp in pairs)

        return objective

    def _pair_objective(self, ref: np.ndarray, samp: np.ndarray) -> Callable[[np.ndarray], float]:
        def objective(coeffs: np.ndarray) -> float:
            return self.calculate_error(ref, samp, coeffs)

        return objective

    def _optimize(
        self, init_b: np.ndarray, objective: Callable[[np.ndarray], float], try_restart: bool
    ) -> tuple[SimplexResult, str]:
        best = minimize(init_b, objective, settings=self.settings)
        origin = "init"
        if not try_restart:
            return best, origin

        for seed in self.settings.fit.restart_seeds:
            seed_arr = np.asarray(seed, dtype=float)
            if seed_arr.size != init_b.size or np.array_equal(seed_arr, init_b):
                continue
            candidate = minimize(seed_arr, objective, settings=self.settings)
            logger.debug(
                "restart from %s scored %g (current best %g)", seed_arr.tolist(), candidate.fun, best.fun
            )
            if candidate.fun < best.fun:
                best = candidate
                origin = f"restart:{seed_arr.tolist()}"
        return best, origin

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def fit(
        self,
        refs: SignalBatch,
        samps: SignalBatch,
        init_coeffs: Sequence[float] | np.ndarray | None = None,
        try_restart: bool | None = None,
    ) -> PtwResult | None:
        """Fit warp coefficients aligning ``samps`` onto ``refs``.

        Parameters
        ----------
        refs:
            Reference signals.  Either a single reference used for every
            sample or one reference per sample.
        samps:
            Sample signals to be warped.  All signals in ``refs`` and
            ``samps`` must share the same length.
        init_coeffs:
            Initial guess in raw (``a``) space.  Defaults to
            ``settings.fit.init_coeffs``.
        try_restart:
            Re-run the optimizer from the configured restart seeds and keep
            the best result.

        Returns
        -------
        PtwResult or None
            ``None`` when ``samps`` is empty; the model then stays unfitted.
        """

        fit_cfg = self.settings.fit
        try_restart = fit_cfg.try_restart if try_restart is None else bool(try_restart)

        samp_batch = as_signal_batch(samps, "samps")
        if not samp_batch:
            logger.warning("fit called with an empty sample set; model left unfitted")
            return None
        ref_batch = as_signal_batch(refs, "refs")
        if not ref_batch:
            raise ValueError("refs must contain at least one reference signal")
        if len(ref_batch) != 1 and len(ref_batch) != len(samp_batch):
            raise ValueError(
                f"got {len(ref_batch)} references for {len(samp_batch)} samples; "
                "supply one reference or one per sample"
            )

        n = samp_batch[0].size
        check_equal_lengths(n, samp_batch, "samps")
        check_equal_lengths(n, ref_batch, "refs")

        init_a = np.array(fit_cfg.init_coeffs if init_coeffs is None else init_coeffs, dtype=float).reshape(-1)
        if init_a.size == 0:
            raise ValueError("init_coeffs must contain at least one coefficient")
        if not np.all(np.isfinite(init_a)):
            raise ValueError("init_coeffs must be finite")
        init_b = scale_coeffs(init_a, n)

        logger.info(
            "fitting %d sample(s) of length %d: warp_type=%s optim_crit=%s degree=%d",
            len(samp_batch),
            n,
            self.warp_type.value,
            self.optim_crit.value,
            init_b.size - 1,
        )

        if self.warp_type is WarpType.GLOBAL:
            runs = [self._optimize(init_b, self._global_objective(ref_batch, samp_batch), try_restart)]
        else:
            runs = []
            for i, samp in enumerate(samp_batch):
                ref = ref_batch[0] if len(ref_batch) == 1 else ref_batch[i]
                runs.append(self._optimize(init_b, self._pair_objective(ref, samp), try_restart))

        self.n_points = n
        self.coeffs = [res.x for res, _ in runs]
        self.crit_values = [res.fun for res, _ in runs]

        diagnostics = {
            "n_points": n,
            "nit": [res.nit for res, _ in runs],
            "nfev": [res.nfev for res, _ in runs],
            "converged": [res.converged for res, _ in runs],
            "origin": [origin for _, origin in runs],
        }
        if not all(diagnostics["converged"]):
            logger.info("iteration cap reached for %d fit(s)", diagnostics["converged"].count(False))

        return PtwResult(
            coeffs=self.coefficients,
            warped=self.predict(samp_batch),
            crit_values=np.asarray(self.crit_values, dtype=float),
            warp_type=self.warp_type,
            optim_crit=self.optim_crit,
            diagnostics=diagnostics,
        )

    def predict(self, samples: SignalBatch) -> np.ndarray:
        """Warp ``samples`` with the fitted coefficients.

        In global mode the single coefficient vector is applied to every
        sample; in individual mode sample ``i`` uses coefficient row ``i`` and
        the sample count must match the number of fits.
        """

        self._check_fitted()
        batch = as_signal_batch(samples, "samples")
        if not batch:
            raise ValueError("samples must contain at least one signal")
        check_equal_lengths(batch[0].size, batch, "samples")

        if self.warp_type is WarpType.GLOBAL:
            return np.vstack([warp_signal(samp, self.coeffs[0]) for samp in batch])

        if len(self.coeffs) != len(batch):
            raise ValueError(
                f"individual model holds {len(self.coeffs)} coefficient vectors "
                f"but {len(batch)} samples were given"
            )
        return np.vstack([warp_signal(samp, coeffs) for samp, coeffs in zip(batch, self.coeffs)])

    def _check_fitted(self) -> None:
        if not self.is_fitted:
            raise NotFittedError(f"{type(self).__name__} has not been fitted")


__all__ = ["NotFittedError", "PtwResult", "PtwModel", "as_signal_batch", "check_equal_lengths"]
