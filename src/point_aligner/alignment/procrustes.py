"""Closed-form rigid registration of corresponding 3D point sets."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from loguru import logger
from numpy.typing import ArrayLike

from point_aligner.errors import NumericalDegeneracyError
from point_aligner.geometry import apply_pose, compose_pose, rms_distance

from .base import RigidAligner


@dataclass(slots=True)
class ProcrustesResult:
    """Result of a closed-form alignment."""

    pose: np.ndarray  # 4x4 homogeneous transform, source -> target
    rotation: np.ndarray  # 3x3, det +1
    translation: np.ndarray  # (3,)
    rms_error: float  # RMS distance between transformed source and target
    singular_values: np.ndarray  # of the cross-covariance matrix
    reflection_corrected: bool  # True when the raw SVD solution was a reflection
    degenerate: bool  # collinear or coincident source points, rotation not unique
    latency_ms: float


class ProcrustesAligner(RigidAligner):
    """Estimates rotation and translation between matched point sets via SVD.

    Both sets are assumed to share a scale, so no scale factor is estimated.
    """

    dimension = 3

    def __init__(self, min_points: int = 3, collinearity_tolerance: float = 1e-9) -> None:
        """
        Args:
            min_points: Smallest accepted correspondence count (never below 3)
            collinearity_tolerance: Relative singular value threshold under which the
                centered source set is treated as collinear
        """
        self._min_points = max(3, min_points)
        self._collinearity_tolerance = collinearity_tolerance

    def estimate_pose(self, source: ArrayLike, target: ArrayLike) -> np.ndarray:
        """Return the 4x4 pose taking each source point onto its target."""
        return self.align(source, target).pose

    def align(self, source: ArrayLike, target: ArrayLike) -> ProcrustesResult:
        start_time = self._start_timer()
        source_pts = self._as_points(source, "source")
        target_pts = self._as_points(target, "target")
        self._check_correspondences(source_pts, target_pts, self._min_points)
        self._check_finite(source_pts, target_pts)

        source_mean = source_pts.mean(axis=0)
        target_mean = target_pts.mean(axis=0)
        source_centered = source_pts - source_mean
        target_centered = target_pts - target_mean

        degenerate = self._is_collinear(source_centered)
        if degenerate:
            logger.warning("Source points are collinear; rotation about their common axis is not unique")

        rotation, singular_values, reflection_corrected = self._estimate_rotation(
            source_centered, target_centered
        )
        translation = target_mean - rotation @ source_mean
        if not (np.all(np.isfinite(rotation)) and np.all(np.isfinite(translation))):
            raise NumericalDegeneracyError("Procrustes solution contains non-finite values")

        pose = compose_pose(rotation, translation)
        rms_error = rms_distance(apply_pose(pose, source_pts), target_pts)
        elapsed_ms = self._elapsed_ms(start_time)
        logger.debug(
            f"Procrustes alignment of {len(source_pts)} points in {elapsed_ms:.2f}ms: "
            f"rms={rms_error:.6f}, reflection_corrected={reflection_corrected}"
        )
        return ProcrustesResult(
            pose=pose,
            rotation=rotation,
            translation=translation,
            rms_error=rms_error,
            singular_values=singular_values,
            reflection_corrected=reflection_corrected,
            degenerate=degenerate,
            latency_ms=elapsed_ms,
        )

    def _estimate_rotation(
        self,
        source_centered: np.ndarray,
        target_centered: np.ndarray,
    ) -> tuple[np.ndarray, np.ndarray, bool]:
        cross_covariance = source_centered.T @ target_centered
        try:
            u, singular_values, vt = np.linalg.svd(cross_covariance)
        except np.linalg.LinAlgError as exc:
            raise NumericalDegeneracyError(f"SVD of the cross-covariance failed: {exc}") from exc

        v = vt.T
        rotation = v @ u.T
        reflection_corrected = False
        if np.linalg.det(rotation) < 0:
            v[:, -1] *= -1
            rotation = v @ u.T
            reflection_corrected = True
        return rotation, singular_values, reflection_corrected

    def _is_collinear(self, centered: np.ndarray) -> bool:
        spread = np.linalg.svd(centered, compute_uv=False)
        scale = float(spread[0])
        if scale == 0.0:
            return True
        return bool(spread[1] <= self._collinearity_tolerance * scale)


def estimate_pose(source: ArrayLike, target: ArrayLike) -> np.ndarray:
    """Closed-form 4x4 pose from index-aligned 3D correspondences."""
    return ProcrustesAligner().estimate_pose(source, target)
