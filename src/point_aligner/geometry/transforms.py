"""Rigid transform utilities shared by the solvers and their callers."""

from __future__ import annotations

import math
from typing import NamedTuple, Tuple

import numpy as np


class Pose2D(NamedTuple):
    """Planar rigid transform: rotation angle in radians plus translation."""

    angle: float
    tx: float
    ty: float


def rotation_matrix_2d(angle: float) -> np.ndarray:
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return np.array([[cos_a, -sin_a], [sin_a, cos_a]], dtype=np.float64)


def compose_pose(rotation: np.ndarray, translation: np.ndarray) -> np.ndarray:
    """Build a homogeneous matrix with rotation upper-left and translation in the last column.

    Args:
        rotation: Array of shape (D, D).
        translation: Array of shape (D,).

    Returns:
        (D + 1) x (D + 1) matrix whose bottom row is (0, ..., 0, 1).
    """
    rotation = np.asarray(rotation, dtype=np.float64)
    translation = np.asarray(translation, dtype=np.float64).reshape(-1)
    dim = rotation.shape[0]
    pose = np.eye(dim + 1, dtype=np.float64)
    pose[:dim, :dim] = rotation
    pose[:dim, dim] = translation
    return pose


def decompose_pose(pose: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    pose = np.asarray(pose, dtype=np.float64)
    dim = pose.shape[0] - 1
    return pose[:dim, :dim].copy(), pose[:dim, dim].copy()


def pose2d_to_matrix(pose: Pose2D) -> np.ndarray:
    return compose_pose(rotation_matrix_2d(pose.angle), np.array([pose.tx, pose.ty]))


def apply_pose(pose: np.ndarray, points: np.ndarray) -> np.ndarray:
    """Apply a homogeneous pose to an (N, D) array of points."""
    rotation, translation = decompose_pose(pose)
    pts = np.asarray(points, dtype=np.float64)
    return pts @ rotation.T + translation


def apply_pose_2d(pose: Pose2D, points: np.ndarray) -> np.ndarray:
    pts = np.asarray(points, dtype=np.float64)
    return pts @ rotation_matrix_2d(pose.angle).T + np.array([pose.tx, pose.ty])


def wrap_angle(angle: float) -> float:
    """Map an angle in radians into (-pi, pi]."""
    wrapped = math.remainder(angle, 2.0 * math.pi)
    if wrapped <= -math.pi:
        return math.pi
    return wrapped


def angle_to_degrees(angle: float) -> float:
    """Convert radians to degrees in [0, 360)."""
    degrees = math.degrees(angle) % 360.0
    # Tiny negative angles round up to exactly 360.0 under the modulo.
    return 0.0 if degrees == 360.0 else degrees


def rms_distance(points_a: np.ndarray, points_b: np.ndarray) -> float:
    a = np.asarray(points_a, dtype=np.float64)
    b = np.asarray(points_b, dtype=np.float64)
    if len(a) == 0:
        return 0.0
    return float(np.sqrt(np.mean(np.sum((a - b) ** 2, axis=1))))


def rotation_angle_between(rotation_a: np.ndarray, rotation_b: np.ndarray) -> float:
    """Geodesic angle in radians of the relative rotation between two 3x3 rotations."""
    relative = np.asarray(rotation_a).T @ np.asarray(rotation_b)
    cos_theta = (np.trace(relative) - 1.0) / 2.0
    return float(np.arccos(np.clip(cos_theta, -1.0, 1.0)))
