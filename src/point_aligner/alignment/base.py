"""Shared interfaces for correspondence-based rigid aligners."""

from __future__ import annotations

import abc
import time
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike

from point_aligner.errors import InvalidInputError, NumericalDegeneracyError


class RigidAligner(abc.ABC):
    """Base class for solvers mapping a source point set onto an index-aligned target."""

    dimension: int

    @abc.abstractmethod
    def align(self, source: ArrayLike, target: ArrayLike, *args, **kwargs):
        """Estimate the rigid transform taking ``source[i]`` onto ``target[i]``."""

    def _as_points(self, points: ArrayLike, name: str) -> np.ndarray:
        try:
            array = np.array(points, dtype=np.float64)
        except (TypeError, ValueError) as exc:
            raise InvalidInputError(f"{name} points are not a numeric (N, {self.dimension}) array: {exc}") from exc
        if array.size == 0:
            return np.empty((0, self.dimension), dtype=np.float64)
        if array.ndim != 2 or array.shape[1] != self.dimension:
            raise InvalidInputError(
                f"{name} points must have shape (N, {self.dimension}), got {array.shape}"
            )
        array.setflags(write=False)
        return array

    def _check_correspondences(self, source: np.ndarray, target: np.ndarray, min_points: int) -> None:
        if len(source) != len(target):
            raise InvalidInputError(
                f"Source and target must pair up one-to-one: {len(source)} vs {len(target)} points"
            )
        if len(source) < min_points:
            raise InvalidInputError(f"Need at least {min_points} correspondences, got {len(source)}")

    def _check_finite(self, *arrays: Optional[np.ndarray]) -> None:
        for array in arrays:
            if array is not None and not np.all(np.isfinite(array)):
                raise NumericalDegeneracyError("Input contains NaN or infinite coordinates")

    def _start_timer(self) -> float:
        return time.perf_counter()

    def _elapsed_ms(self, start_time: float) -> float:
        return (time.perf_counter() - start_time) * 1_000
