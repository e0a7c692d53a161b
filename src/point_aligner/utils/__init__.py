"""File and logging helpers."""

from .logger_config import configure_logging  # noqa: F401
from .point_io import load_points, load_weights, save_pose  # noqa: F401
