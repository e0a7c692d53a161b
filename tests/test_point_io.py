"""Tests for correspondence and pose file helpers."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from point_aligner.errors import InvalidInputError
from point_aligner.utils import load_points, load_weights, save_pose


def test_load_points_reads_one_point_per_line(tmp_path: Path) -> None:
    path = tmp_path / "points.txt"
    path.write_text("# x y\n0.5 1.0\n-2.0 3.25\n", encoding="utf-8")

    points = load_points(path, dimension=2)

    np.testing.assert_array_equal(points, [[0.5, 1.0], [-2.0, 3.25]])


def test_load_points_single_row_keeps_two_dimensions(tmp_path: Path) -> None:
    path = tmp_path / "single.txt"
    path.write_text("1 2 3\n", encoding="utf-8")

    assert load_points(path, dimension=3).shape == (1, 3)


def test_load_points_rejects_wrong_dimension(tmp_path: Path) -> None:
    path = tmp_path / "points.txt"
    path.write_text("1 2 3\n4 5 6\n", encoding="utf-8")

    with pytest.raises(InvalidInputError):
        load_points(path, dimension=2)


def test_missing_files_raise(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_points(tmp_path / "absent.txt", dimension=2)
    with pytest.raises(FileNotFoundError):
        load_weights(tmp_path / "absent.txt")


def test_load_weights_flattens_column(tmp_path: Path) -> None:
    path = tmp_path / "weights.txt"
    path.write_text("1.0\n0.5\n0\n", encoding="utf-8")

    np.testing.assert_array_equal(load_weights(path), [1.0, 0.5, 0.0])


def test_save_pose_writes_loadable_matrix(tmp_path: Path) -> None:
    pose = np.eye(4)
    pose[:3, 3] = [1.0, -2.0, 0.5]

    path = save_pose(tmp_path / "nested" / "pose.txt", pose)

    np.testing.assert_allclose(np.loadtxt(path), pose)


def test_save_pose_rejects_non_square(tmp_path: Path) -> None:
    with pytest.raises(InvalidInputError):
        save_pose(tmp_path / "pose.txt", np.zeros((3, 4)))


def test_helpers_accept_string_paths(tmp_path: Path) -> None:
    points_path = tmp_path / "points.txt"
    points_path.write_text("1 2\n3 4\n", encoding="utf-8")
    weights_path = tmp_path / "weights.txt"
    weights_path.write_text("0.5\n1.0\n", encoding="utf-8")

    np.testing.assert_array_equal(load_points(str(points_path), dimension=2), [[1.0, 2.0], [3.0, 4.0]])
    np.testing.assert_array_equal(load_weights(str(weights_path)), [0.5, 1.0])
    saved = save_pose(str(tmp_path / "out" / "pose.txt"), np.eye(3))
    assert saved == tmp_path / "out" / "pose.txt"
    with pytest.raises(FileNotFoundError):
        load_points(str(tmp_path / "absent.txt"), dimension=2)
