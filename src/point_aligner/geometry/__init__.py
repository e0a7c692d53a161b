"""Rigid transform helpers."""

from .transforms import (  # noqa: F401
    Pose2D,
    angle_to_degrees,
    apply_pose,
    apply_pose_2d,
    compose_pose,
    decompose_pose,
    pose2d_to_matrix,
    rms_distance,
    rotation_angle_between,
    rotation_matrix_2d,
    wrap_angle,
)
