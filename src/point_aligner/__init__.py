"""Rigid point-set registration package."""

from .alignment import ProcrustesAligner, WeightedRigidAligner2D, estimate_pose, estimate_pose_2d  # noqa: F401
from .config import AlignerConfig, default_config, load_config  # noqa: F401
from .errors import AlignmentError, InvalidInputError, NumericalDegeneracyError  # noqa: F401
from .geometry import Pose2D  # noqa: F401
from .pipeline import RegistrationPipeline  # noqa: F401
