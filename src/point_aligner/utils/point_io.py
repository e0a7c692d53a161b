"""Text file helpers for correspondence sets, weights and poses."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from loguru import logger

from point_aligner.errors import InvalidInputError


def load_points(path: str | Path, dimension: int) -> np.ndarray:
    """Read one whitespace-separated point per line into an (N, dimension) array."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Point file missing: {path}")
    data = np.loadtxt(path, dtype=np.float64, ndmin=2, comments="#")
    if data.size == 0:
        return np.empty((0, dimension), dtype=np.float64)
    if data.shape[1] != dimension:
        raise InvalidInputError(f"{path} holds {data.shape[1]}-column rows, expected {dimension}")
    logger.debug(f"Loaded {len(data)} points from {path}")
    return data


def load_weights(path: str | Path) -> np.ndarray:
    """Read one weight per line."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Weight file missing: {path}")
    data = np.loadtxt(path, dtype=np.float64, ndmin=2, comments="#")
    if data.size and data.shape[1] != 1:
        raise InvalidInputError(f"{path} holds {data.shape[1]} columns per line, expected a single weight")
    logger.debug(f"Loaded {data.size} weights from {path}")
    return data.reshape(-1)


def save_pose(path: str | Path, pose: np.ndarray) -> Path:
    """Persist a homogeneous pose matrix as text."""
    path = Path(path)
    matrix = np.asarray(pose, dtype=np.float64)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1] or matrix.shape[0] not in (3, 4):
        raise InvalidInputError(f"Expected a 3x3 or 4x4 pose matrix, got shape {matrix.shape}")
    path.parent.mkdir(parents=True, exist_ok=True)
    np.savetxt(path, matrix, fmt="%.10f")
    logger.info(f"Pose saved to {path}")
    return path
