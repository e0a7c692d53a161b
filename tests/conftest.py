"""pytest configuration and fixtures for the point_aligner test suite."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict

import numpy as np
import pytest
import yaml
from loguru import logger


@pytest.fixture(autouse=True)
def reset_logger():
    """Put loguru back on stderr so sinks bound to captured streams do not leak across tests."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def config_data(tmp_path: Path) -> Dict[str, object]:
    return {
        "project": {"name": "test", "output_dir": str(tmp_path / "output")},
        "logging": {"level": "debug", "output": "stderr"},
        "procrustes": {"min_points": 3, "collinearity_tolerance": 1e-9},
        "iterative": {
            "method": "lm",
            "max_iterations": 50,
            "convergence_tolerance": 1e-10,
            "parameter_tolerance": 1e-10,
            "gradient_tolerance": 1e-10,
            "initial_pose": [0.0, 0.0, 0.0],
        },
    }


@pytest.fixture
def config_path(tmp_path: Path, config_data: Dict[str, object]) -> Path:
    path = tmp_path / "config.yaml"
    with path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(config_data, handle)
    return path


def rotate_2d(points: np.ndarray, angle: float, tx: float, ty: float) -> np.ndarray:
    cos_a, sin_a = np.cos(angle), np.sin(angle)
    rotation = np.array([[cos_a, -sin_a], [sin_a, cos_a]])
    return points @ rotation.T + np.array([tx, ty])
