"""Tests for rigid transform helpers."""

from __future__ import annotations

import math

import numpy as np
import pytest

from point_aligner.geometry import (
    Pose2D,
    angle_to_degrees,
    apply_pose,
    apply_pose_2d,
    compose_pose,
    decompose_pose,
    pose2d_to_matrix,
    rms_distance,
    rotation_matrix_2d,
    wrap_angle,
)


def test_compose_and_decompose_pose() -> None:
    rotation = np.array([[0.0, -1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
    translation = np.array([2.0, 3.0, 0.0])

    pose = compose_pose(rotation, translation)

    assert pose.shape == (4, 4)
    np.testing.assert_array_equal(pose[3], [0.0, 0.0, 0.0, 1.0])
    r, t = decompose_pose(pose)
    np.testing.assert_array_equal(r, rotation)
    np.testing.assert_array_equal(t, translation)
    np.testing.assert_allclose(apply_pose(pose, [[1.0, 0.0, 0.0]]), [[2.0, 4.0, 0.0]])


def test_pose2d_matrix_agrees_with_direct_application() -> None:
    pose = Pose2D(math.pi / 3, 1.5, -0.5)
    points = np.array([[1.0, 2.0], [-3.0, 0.5]])
    homogeneous = np.hstack([points, np.ones((2, 1))])

    via_matrix = (pose2d_to_matrix(pose) @ homogeneous.T).T[:, :2]

    np.testing.assert_allclose(via_matrix, apply_pose_2d(pose, points), atol=1e-12)


def test_rotation_matrix_2d_is_orthonormal() -> None:
    rotation = rotation_matrix_2d(0.7)
    np.testing.assert_allclose(rotation @ rotation.T, np.eye(2), atol=1e-12)
    assert np.linalg.det(rotation) == pytest.approx(1.0)


@pytest.mark.parametrize(
    "angle, expected",
    [
        (0.0, 0.0),
        (math.pi, math.pi),
        (-math.pi, math.pi),
        (5.0, 5.0 - 2.0 * math.pi),
        (2.0 * math.pi + 0.25, 0.25),
        (-0.25, -0.25),
    ],
)
def test_wrap_angle(angle: float, expected: float) -> None:
    assert wrap_angle(angle) == pytest.approx(expected, abs=1e-12)


@pytest.mark.parametrize(
    "angle, expected",
    [
        (math.pi / 2, 90.0),
        (-math.pi / 2, 270.0),
        (2.0 * math.pi, 0.0),
        (-1e-18, 0.0),
    ],
)
def test_angle_to_degrees(angle: float, expected: float) -> None:
    degrees = angle_to_degrees(angle)
    assert 0.0 <= degrees < 360.0
    assert degrees == pytest.approx(expected, abs=1e-9)


def test_rms_distance() -> None:
    a = np.array([[0.0, 0.0], [0.0, 0.0]])
    b = np.array([[3.0, 4.0], [0.0, 0.0]])
    assert rms_distance(a, b) == pytest.approx(math.sqrt(12.5))
    assert rms_distance(np.empty((0, 2)), np.empty((0, 2))) == 0.0
