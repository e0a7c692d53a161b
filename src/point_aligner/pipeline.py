"""High-level orchestration of the registration solvers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from loguru import logger
from numpy.typing import ArrayLike

from point_aligner.alignment import (
    ProcrustesAligner,
    ProcrustesResult,
    WeightedAlignmentResult,
    WeightedRigidAligner2D,
)
from point_aligner.config import AlignerConfig
from point_aligner.errors import AlignmentError
from point_aligner.geometry import angle_to_degrees, pose2d_to_matrix


@dataclass(slots=True)
class Registration2DOutput:
    result: WeightedAlignmentResult
    angle_degrees: float  # solver angle wrapped into [0, 360)

    @property
    def pose_matrix(self) -> np.ndarray:
        return pose2d_to_matrix(self.result.pose)


class RegistrationPipeline:
    """Runs closed-form 3D and weighted 2D registration with configured solver settings."""

    def __init__(
        self,
        config: AlignerConfig,
        procrustes_aligner: ProcrustesAligner,
        weighted_aligner: WeightedRigidAligner2D,
    ) -> None:
        self._config = config
        self._procrustes = procrustes_aligner
        self._weighted = weighted_aligner
        self._initial_pose = tuple(config.iterative.initial_pose)

    @classmethod
    def from_config(cls, config: AlignerConfig) -> "RegistrationPipeline":
        procrustes_cfg = config.procrustes
        procrustes_aligner = ProcrustesAligner(
            min_points=procrustes_cfg.min_points,
            collinearity_tolerance=procrustes_cfg.collinearity_tolerance,
        )
        iterative_cfg = config.iterative
        weighted_aligner = WeightedRigidAligner2D(
            method=iterative_cfg.method,
            max_iterations=iterative_cfg.max_iterations,
            convergence_tolerance=iterative_cfg.convergence_tolerance,
            parameter_tolerance=iterative_cfg.parameter_tolerance,
            gradient_tolerance=iterative_cfg.gradient_tolerance,
        )
        logger.info(f"Registration pipeline initialized for project '{config.project.name}'")
        return cls(
            config=config,
            procrustes_aligner=procrustes_aligner,
            weighted_aligner=weighted_aligner,
        )

    def register_3d(self, source: ArrayLike, target: ArrayLike) -> ProcrustesResult:
        """Closed-form registration of index-aligned 3D point sets."""
        try:
            result = self._procrustes.align(source, target)
        except AlignmentError as exc:
            logger.warning(f"3D registration failed: {exc}")
            raise
        logger.info(
            f"3D registration: rms={result.rms_error:.6f}, "
            f"translation={np.array2string(result.translation, precision=6)}"
        )
        if result.degenerate:
            logger.warning("3D registration input is collinear; the returned rotation is one of many optima")
        return result

    def register_2d(
        self,
        source: ArrayLike,
        target: ArrayLike,
        weights: Optional[ArrayLike] = None,
        initial: Optional[Sequence[float]] = None,
    ) -> Registration2DOutput:
        """Weighted iterative registration of index-aligned 2D point sets."""
        start = self._initial_pose if initial is None else tuple(initial)
        try:
            result = self._weighted.align(source, target, weights, start)
        except AlignmentError as exc:
            logger.warning(f"2D registration failed: {exc}")
            raise
        logger.info(result.summary.brief_report())
        return Registration2DOutput(result=result, angle_degrees=angle_to_degrees(result.pose.angle))
