"""Relaxation steps that move points towards satisfying their constraints."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np
from scipy.optimize import least_squares

from .assembler import assemble, objective
from .config import get_relaxation_config
from .linalg import gauss_seidel
from .model import Constraint, RelaxOptions, RelaxResult, StepReport
from .points import PointStore

logger = logging.getLogger(__name__)


def _max_abs(values: np.ndarray) -> float:
    return float(np.max(np.abs(values))) if values.size else 0.0


def relaxation_step(
    points: PointStore,
    constraints: Sequence[Constraint],
    *,
    eps: Optional[float] = None,
) -> StepReport:
    """Apply one steepest-descent move to every point.

    Minimizes ``f = ||C||^2`` along ``-g`` with ``g = 2 J^T C`` and the
    self-scaling step length ``alpha = f / ||g||^2``. All points move
    simultaneously. Nothing moves when ``f`` is exactly zero or when
    ``||g||^2 / f <= eps``.
    """

    if eps is None:
        eps = get_relaxation_config().degeneracy_eps

    residuals, jacobian = assemble(points, constraints)
    f = float(np.dot(residuals, residuals))
    if f == 0.0:
        logger.debug("Relaxation step: system already satisfied")
        return StepReport(status="satisfied", objective=f)

    gradient = 2.0 * (jacobian.T @ residuals)
    grad_norm_sq = float(np.dot(gradient, gradient))
    if grad_norm_sq / f <= eps:
        logger.debug(
            "Relaxation step: degenerate configuration f=%.6g ||g||^2=%.6g", f, grad_norm_sq
        )
        return StepReport(status="degenerate", objective=f, gradient_norm_sq=grad_norm_sq)

    alpha = f / grad_norm_sq
    points.shift(-alpha * gradient)
    logger.debug("Relaxation step: f=%.6g alpha=%.6g ||g||^2=%.6g", f, alpha, grad_norm_sq)
    return StepReport(status="moved", objective=f, step_length=alpha, gradient_norm_sq=grad_norm_sq)


def gauss_newton_step(
    points: PointStore,
    constraints: Sequence[Constraint],
    *,
    damping: Optional[float] = None,
    sweeps: Optional[int] = None,
    max_backtracks: Optional[int] = None,
    eps: Optional[float] = None,
) -> StepReport:
    """Apply one damped Gauss-Newton move with a backtracking line search.

    The normal equations ``(J^T J + damping I) delta = -J^T C`` are relaxed
    with :func:`~geosketch.linalg.gauss_seidel`. The step is halved until
    the objective strictly decreases; if no trial does, the points are left
    untouched and the report status is ``"stalled"``.
    """

    config = get_relaxation_config()
    damping = config.gauss_newton_damping if damping is None else damping
    sweeps = config.gauss_seidel_sweeps if sweeps is None else sweeps
    max_backtracks = config.max_backtracks if max_backtracks is None else max_backtracks
    eps = config.degeneracy_eps if eps is None else eps

    residuals, jacobian = assemble(points, constraints)
    f = float(np.dot(residuals, residuals))
    if f == 0.0:
        return StepReport(status="satisfied", objective=f)

    jtc = jacobian.T @ residuals
    grad_norm_sq = 4.0 * float(np.dot(jtc, jtc))
    if grad_norm_sq / f <= eps:
        return StepReport(status="degenerate", objective=f, gradient_norm_sq=grad_norm_sq)

    normal = jacobian.T @ jacobian + damping * np.eye(jacobian.shape[1])
    delta = np.zeros(jacobian.shape[1], dtype=float)
    gauss_seidel(normal, delta, -jtc, sweeps)

    base = points.flat()
    scale = 1.0
    for attempt in range(max_backtracks + 1):
        trial = base + scale * delta
        f_trial = objective(trial, constraints)
        if f_trial < f:
            points.shift(scale * delta)
            logger.debug(
                "Gauss-Newton step: f=%.6g -> %.6g scale=%.6g after %d backtrack(s)",
                f,
                f_trial,
                scale,
                attempt,
            )
            return StepReport(status="moved", objective=f, step_length=scale, gradient_norm_sq=grad_norm_sq)
        scale *= 0.5

    logger.debug("Gauss-Newton step stalled at f=%.6g", f)
    return StepReport(status="stalled", objective=f, gradient_norm_sq=grad_norm_sq)


_STEPS = {
    "steepest": relaxation_step,
    "gauss-newton": gauss_newton_step,
}


def relax(
    points: PointStore,
    constraints: Sequence[Constraint],
    options: RelaxOptions = RelaxOptions(),
) -> RelaxResult:
    """Run relaxation steps until ``options`` says to stop.

    Stops after ``max_iterations`` moves, when the largest absolute
    residual drops to ``tol`` or below (only checked for ``tol > 0``), or
    when a step declines to move the points.
    """

    try:
        step = _STEPS[options.method]
    except KeyError as exc:
        raise ValueError(f"unsupported relaxation method '{options.method}'") from exc

    logger.info(
        "Relaxing %d point(s) under %d constraint(s): method=%s max_iterations=%d tol=%g",
        len(points),
        len(constraints),
        options.method,
        options.max_iterations,
        options.tol,
    )

    history = []
    status = None
    iterations = 0
    for _ in range(max(0, int(options.max_iterations))):
        if options.tol > 0.0:
            residuals, _ = assemble(points, constraints)
            if _max_abs(residuals) <= options.tol:
                break
        report = step(points, constraints)
        history.append(report.objective)
        status = report.status
        if not report.moved:
            break
        iterations += 1

    residuals, _ = assemble(points, constraints)
    max_residual = _max_abs(residuals)
    converged = max_residual <= max(options.tol, 0.0)
    logger.info(
        "Relaxation finished after %d iteration(s): converged=%s max_residual=%.3e last_status=%s",
        iterations,
        converged,
        max_residual,
        status,
    )
    return RelaxResult(
        point_coords=points.to_list(),
        iterations=iterations,
        converged=converged,
        max_residual=max_residual,
        objective_history=history,
        last_status=status,
    )


def solve_least_squares(
    points: PointStore,
    constraints: Sequence[Constraint],
    *,
    tol: float = 1e-12,
    max_nfev: Optional[int] = None,
) -> RelaxResult:
    """Solve the whole system with ``scipy.optimize.least_squares``.

    Uses a finite-difference Jacobian and writes the optimum back into
    ``points``. Intended as a reference to compare relaxation runs against.
    """

    x0 = points.flat()
    if x0.size == 0 or not constraints:
        return RelaxResult(
            point_coords=points.to_list(),
            iterations=0,
            converged=True,
            max_residual=0.0,
        )

    def fun(vec: np.ndarray) -> np.ndarray:
        values, _ = assemble(vec, constraints)
        return values

    initial = fun(x0)
    if initial.size < x0.size:
        method = "trf"
    else:
        method = "lm"
    logger.info(
        "Least-squares solve: %d variable(s), %d residual(s), method=%s",
        x0.size,
        initial.size,
        method,
    )
    result = least_squares(fun, x0, method=method, ftol=tol, xtol=tol, gtol=tol, max_nfev=max_nfev)
    points.shift(result.x - x0)

    final = fun(points.flat())
    max_residual = _max_abs(final)
    logger.info(
        "Least-squares solve finished: success=%s nfev=%d max_residual=%.3e",
        result.success,
        result.nfev,
        max_residual,
    )
    return RelaxResult(
        point_coords=points.to_list(),
        iterations=int(result.nfev),
        converged=bool(result.success),
        max_residual=max_residual,
        objective_history=[float(np.dot(initial, initial)), float(np.dot(final, final))],
        last_status="moved",
    )


__all__ = ["gauss_newton_step", "relax", "relaxation_step", "solve_least_squares"]
