"""Nelder-Mead simplex minimisation.

A derivative-free direct search over ``R^d``.  The search is fully
deterministic: the initial simplex is built from fixed per-coordinate steps
and ties between vertices are broken by their position in the simplex.

The iteration stops when the spread between the best and worst vertex score
drops below ``tol`` or after ``max_iter`` iterations.  Reaching the iteration
cap is not an error; the best vertex found so far is returned.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, NamedTuple, Sequence

import numpy as np

from ..config import Settings

logger = logging.getLogger(__name__)

Objective = Callable[[np.ndarray], float]


class SimplexResult(NamedTuple):
    """Outcome of :func:`minimize`.

    Attributes
    ----------
    x:
        Best vertex of the final simplex.
    fun:
        Objective value at ``x``.
    nit:
        Number of iterations performed.
    nfev:
        Number of objective evaluations.
    converged:
        ``True`` when the score spread fell below the tolerance before the
        iteration cap was reached.
    """

    x: np.ndarray
    fun: float
    nit: int
    nfev: int
    converged: bool


def _score(value: float) -> float:
    # NaN scores rank last so that vertex ordering stays total.
    value = float(value)
    return math.inf if math.isnan(value) else value


def initial_simplex(
    x0: np.ndarray,
    rel_step: float = 0.05,
    zero_step: float = 0.01,
    zero_threshold: float = 1e-4,
) -> list[np.ndarray]:
    """Return ``x0`` followed by one perturbed copy per dimension."""

    simplex = [x0.copy()]
    for i in range(x0.size):
        p = x0.copy()
        p[i] += p[i] * rel_step if abs(p[i]) > zero_threshold else zero_step
        simplex.append(p)
    return simplex


def minimize(
    x0: Sequence[float] | np.ndarray,
    objective: Objective,
    *,
    settings: Settings | None = None,
    alpha: float | None = None,
    gamma: float | None = None,
    rho: float | None = None,
    sigma: float | None = None,
    max_iter: int | None = None,
    tol: float | None = None,
) -> SimplexResult:
    """Minimise ``objective`` starting from ``x0``.

    Parameters
    ----------
    x0:
        Initial point; its length fixes the dimension of the search.
    objective:
        Callable mapping a coefficient vector to a scalar score.
    settings:
        Optional :class:`~ptwarp.config.Settings` providing the simplex
        parameters.
    alpha, gamma, rho, sigma:
        Reflection, expansion, contraction and shrink coefficients.
    max_iter, tol:
        Iteration cap and convergence tolerance on ``|worst - best|``.
    """

    if settings is None:
        settings = Settings()
    cfg = settings.optimizer

    alpha = cfg.alpha if alpha is None else alpha
    gamma = cfg.gamma if gamma is None else gamma
    rho = cfg.rho if rho is None else rho
    sigma = cfg.sigma if sigma is None else sigma
    max_iter = cfg.max_iter if max_iter is None else max_iter
    tol = cfg.tol if tol is None else tol

    start = np.array(x0, dtype=float).reshape(-1)
    dim = start.size
    if dim == 0:
        raise ValueError("x0 must contain at least one coordinate")

    nfev = 0

    def evaluate(point: np.ndarray) -> float:
        nonlocal nfev
        nfev += 1
        return _score(objective(point))

    simplex = initial_simplex(start, cfg.rel_step, cfg.zero_step, cfg.zero_threshold)
    scores = [evaluate(p) for p in simplex]

    converged = False
    nit = 0
    for nit in range(1, max_iter + 1):
        order = np.argsort(scores, kind="stable")
        best, worst, second_worst = order[0], order[-1], order[-2]

        if abs(scores[worst] - scores[best]) < tol:
            converged = True
            nit -= 1
            break

        centroid = np.mean([simplex[j] for j in order[:-1]], axis=0)

        xr = centroid + alpha * (centroid - simplex[worst])
        fr = evaluate(xr)
        if scores[best] <= fr < scores[second_worst]:
            simplex[worst], scores[worst] = xr, fr
            continue

        if fr < scores[best]:
            xe = centroid + gamma * (xr - centroid)
            fe = evaluate(xe)
            if fe < fr:
                simplex[worst], scores[worst] = xe, fe
            else:
                simplex[worst], scores[worst] = xr, fr
            continue

        xc = centroid + rho * (simplex[worst] - centroid)
        fc = evaluate(xc)
        if fc < scores[worst]:
            simplex[worst], scores[worst] = xc, fc
            continue

        for j in order[1:]:
            simplex[j] = simplex[best] + sigma * (simplex[j] - simplex[best])
            scores[j] = evaluate(simplex[j])

    best = int(np.argmin(scores))
    logger.debug(
        "simplex finished after %d iterations (%d evaluations, converged=%s, score=%g)",
        nit,
        nfev,
        converged,
        scores[best],
    )
    return SimplexResult(simplex[best].copy(), scores[best], nit, nfev, converged)


__all__ = ["SimplexResult", "initial_simplex", "minimize"]
