"""Weighted nonlinear least-squares registration of planar point sets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np
from loguru import logger
from numpy.typing import ArrayLike
from scipy.optimize import least_squares

from point_aligner.errors import InvalidInputError, NumericalDegeneracyError
from point_aligner.geometry import Pose2D, rotation_matrix_2d

from .base import RigidAligner

_METHOD_NAMES = {
    "lm": "Levenberg-Marquardt",
    "trf": "Trust Region Reflective",
    "dogbox": "Dogbox",
}


@dataclass(slots=True)
class SolverSummary:
    method: str
    initial_cost: float  # sum of w * |R p + t - q|^2 at the initial pose
    final_cost: float
    evaluations: int
    jacobian_evaluations: int
    converged: bool
    termination: str

    def brief_report(self) -> str:
        status = "CONVERGENCE" if self.converged else "NO_CONVERGENCE"
        return (
            f"{_METHOD_NAMES.get(self.method, self.method)}, "
            f"Initial cost: {self.initial_cost:.6e}, Final cost: {self.final_cost:.6e}, "
            f"Evaluations: {self.evaluations}, Termination: {status} ({self.termination})"
        )


@dataclass(slots=True)
class WeightedAlignmentResult:
    pose: Pose2D
    summary: SolverSummary
    correspondences: int  # pairs with non-zero weight
    latency_ms: float


def _to_centered_params(params: np.ndarray, centroid: np.ndarray) -> np.ndarray:
    # R p + t == R (p - c) + (t + R c)
    theta = params[0]
    return np.concatenate([[theta], params[1:] + rotation_matrix_2d(theta) @ centroid])


def _from_centered_params(params: np.ndarray, centroid: np.ndarray) -> np.ndarray:
    theta = params[0]
    return np.concatenate([[theta], params[1:] - rotation_matrix_2d(theta) @ centroid])


class _RegistrationCost:
    """Residuals sqrt(w) * (R(theta) p + t - q) and their partial derivatives.

    Source points are expected relative to their weighted centroid, which keeps
    the angle column of the Jacobian orthogonal to the translation columns.
    """

    def __init__(self, source: np.ndarray, target: np.ndarray, weights: np.ndarray) -> None:
        self._source = source
        self._target = target
        self._sqrt_w = np.sqrt(weights)

    def residuals(self, params: np.ndarray) -> np.ndarray:
        theta, tx, ty = params
        cos_t, sin_t = np.cos(theta), np.sin(theta)
        px, py = self._source[:, 0], self._source[:, 1]
        rx = cos_t * px - sin_t * py + tx - self._target[:, 0]
        ry = sin_t * px + cos_t * py + ty - self._target[:, 1]
        residual = np.column_stack([self._sqrt_w * rx, self._sqrt_w * ry]).reshape(-1)
        logger.opt(lazy=True).debug(
            "Cost evaluation: angle={:.8f}, cost={:.6e}",
            lambda: theta,
            lambda: float(residual @ residual),
        )
        return residual

    def jacobian(self, params: np.ndarray) -> np.ndarray:
        theta = params[0]
        cos_t, sin_t = np.cos(theta), np.sin(theta)
        px, py = self._source[:, 0], self._source[:, 1]
        count = len(px)
        jac = np.zeros((2 * count, 3), dtype=np.float64)
        jac[0::2, 0] = self._sqrt_w * (-sin_t * px - cos_t * py)
        jac[1::2, 0] = self._sqrt_w * (cos_t * px - sin_t * py)
        jac[0::2, 1] = self._sqrt_w
        jac[1::2, 2] = self._sqrt_w
        return jac

    def cost(self, params: np.ndarray) -> float:
        residual = self.residuals(params)
        return float(residual @ residual)


class WeightedRigidAligner2D(RigidAligner):
    """Refines (angle, tx, ty) so that rotated and shifted source points meet their targets."""

    dimension = 2

    def __init__(
        self,
        method: str = "lm",
        max_iterations: int = 50,
        convergence_tolerance: float = 1e-10,
        parameter_tolerance: float = 1e-10,
        gradient_tolerance: float = 1e-10,
    ) -> None:
        """
        Args:
            method: scipy least_squares method (lm, trf or dogbox)
            max_iterations: Upper bound on objective evaluations, rejected steps included
            convergence_tolerance: Stop when the relative objective change falls below this
            parameter_tolerance: Stop when the relative parameter step falls below this
            gradient_tolerance: Stop when the scaled gradient falls below this
        """
        if method not in _METHOD_NAMES:
            raise ValueError(f"Unsupported least-squares method: {method}")
        self._method = method
        self._max_iterations = max_iterations
        self._ftol = convergence_tolerance
        self._xtol = parameter_tolerance
        self._gtol = gradient_tolerance

    def estimate_pose_2d(
        self,
        source: ArrayLike,
        target: ArrayLike,
        weights: Optional[ArrayLike] = None,
        initial: Optional[Sequence[float]] = None,
    ) -> Pose2D:
        return self.align(source, target, weights, initial).pose

    def align(
        self,
        source: ArrayLike,
        target: ArrayLike,
        weights: Optional[ArrayLike] = None,
        initial: Optional[Sequence[float]] = None,
    ) -> WeightedAlignmentResult:
        start_time = self._start_timer()
        source_pts = self._as_points(source, "source")
        target_pts = self._as_points(target, "target")
        self._check_correspondences(source_pts, target_pts, min_points=1)
        weight_arr = self._as_weights(weights, len(source_pts))
        x0 = self._as_initial(initial)
        self._check_finite(source_pts, target_pts, weight_arr, x0)

        # Zero-weight pairs carry no information; dropping them keeps the
        # solver's convergence tests identical to omitting those pairs.
        active = weight_arr > 0.0
        if not np.any(active):
            raise InvalidInputError("All correspondence weights are zero; the objective has no terms")
        active_source = source_pts[active]
        active_weights = weight_arr[active]
        centroid = active_weights @ active_source / active_weights.sum()
        cost_fn = _RegistrationCost(active_source - centroid, target_pts[active], active_weights)
        active_count = int(active.sum())
        shifted_x0 = _to_centered_params(x0, centroid)

        method = self._method
        if method == "lm" and 2 * active_count < 3:
            logger.debug("Too few residuals for Levenberg-Marquardt, falling back to trf")
            method = "trf"

        initial_cost = cost_fn.cost(shifted_x0)
        if initial_cost == 0.0:
            summary = SolverSummary(
                method=method,
                initial_cost=0.0,
                final_cost=0.0,
                evaluations=1,
                jacobian_evaluations=0,
                converged=True,
                termination="objective is zero at the initial pose",
            )
            return WeightedAlignmentResult(
                pose=Pose2D(*(float(v) for v in x0)),
                summary=summary,
                correspondences=active_count,
                latency_ms=self._elapsed_ms(start_time),
            )

        solution = least_squares(
            cost_fn.residuals,
            shifted_x0,
            jac=cost_fn.jacobian,
            method=method,
            ftol=self._ftol,
            xtol=self._xtol,
            gtol=self._gtol,
            max_nfev=self._max_iterations,
        )
        if not np.all(np.isfinite(solution.x)):
            raise NumericalDegeneracyError("Least-squares solve produced non-finite parameters")

        final_cost = cost_fn.cost(solution.x)
        summary = SolverSummary(
            method=method,
            initial_cost=initial_cost,
            final_cost=final_cost,
            evaluations=int(solution.nfev),
            jacobian_evaluations=int(solution.njev or 0),
            converged=bool(solution.status > 0),
            termination=str(solution.message),
        )
        if not summary.converged:
            logger.warning(f"Weighted 2D alignment hit the evaluation cap: {summary.brief_report()}")

        elapsed_ms = self._elapsed_ms(start_time)
        logger.debug(f"Weighted 2D alignment of {active_count} pairs in {elapsed_ms:.2f}ms")
        angle, tx, ty = (float(v) for v in _from_centered_params(solution.x, centroid))
        return WeightedAlignmentResult(
            pose=Pose2D(angle, tx, ty),
            summary=summary,
            correspondences=active_count,
            latency_ms=elapsed_ms,
        )

    def _as_weights(self, weights: Optional[ArrayLike], count: int) -> np.ndarray:
        if weights is None:
            return np.ones(count, dtype=np.float64)
        try:
            arr = np.array(weights, dtype=np.float64).reshape(-1)
        except (TypeError, ValueError) as exc:
            raise InvalidInputError(f"Weights are not a flat numeric sequence: {exc}") from exc
        if len(arr) != count:
            raise InvalidInputError(f"Expected {count} weights, got {len(arr)}")
        if np.any(arr < 0.0):
            raise InvalidInputError("Correspondence weights must be non-negative")
        return arr

    @staticmethod
    def _as_initial(initial: Optional[Sequence[float]]) -> np.ndarray:
        if initial is None:
            return np.zeros(3, dtype=np.float64)
        arr = np.array(initial, dtype=np.float64).reshape(-1)
        if arr.shape != (3,):
            raise InvalidInputError(f"Initial pose must be (angle, tx, ty), got {arr.shape[0]} values")
        return arr


def estimate_pose_2d(
    pairs: Iterable[Tuple[ArrayLike, ArrayLike, float]],
    initial: Sequence[float] = (0.0, 0.0, 0.0),
    max_iterations: int = 50,
    convergence_tolerance: float = 1e-10,
) -> Pose2D:
    """Estimate (angle, tx, ty) from (source point, target point, weight) triples."""
    pairs = list(pairs)
    if not pairs:
        raise InvalidInputError("At least one weighted correspondence is required")
    source = [p for p, _, _ in pairs]
    target = [q for _, q, _ in pairs]
    weights = [w for _, _, w in pairs]
    aligner = WeightedRigidAligner2D(
        max_iterations=max_iterations,
        convergence_tolerance=convergence_tolerance,
    )
    return aligner.estimate_pose_2d(source, target, weights, initial)
