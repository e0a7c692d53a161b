"""Closed-form and iterative rigid registration solvers."""

from .base import RigidAligner
from .procrustes import ProcrustesAligner, ProcrustesResult, estimate_pose
from .weighted_rigid_2d import (
    SolverSummary,
    WeightedAlignmentResult,
    WeightedRigidAligner2D,
    estimate_pose_2d,
)

__all__ = [
    "RigidAligner",
    "ProcrustesAligner",
    "ProcrustesResult",
    "estimate_pose",
    "SolverSummary",
    "WeightedAlignmentResult",
    "WeightedRigidAligner2D",
    "estimate_pose_2d",
]
