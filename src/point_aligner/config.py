"""Configuration schema and loader for the point registration solvers."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Literal

import yaml
from pydantic import BaseModel, Field, field_validator

# scipy's Levenberg-Marquardt refuses tolerances at or below machine epsilon.
_MIN_TOLERANCE = 1e-15


class ProjectMetadata(BaseModel):
    name: str
    output_dir: Path

    @field_validator("output_dir", mode="before")
    @classmethod
    def ensure_output_dir(cls, value: str | Path) -> Path:
        path = Path(value)
        path.mkdir(parents=True, exist_ok=True)
        return path


class LoggingConfig(BaseModel):
    level: str = Field("INFO")
    output: str = Field("stdout")

    @field_validator("level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        return value.upper()


class ProcrustesConfig(BaseModel):
    min_points: int = Field(3, ge=3)
    collinearity_tolerance: float = Field(1e-9, gt=0.0)


class IterativeConfig(BaseModel):
    method: Literal["lm", "trf", "dogbox"] = "lm"
    max_iterations: int = Field(50, ge=1)
    convergence_tolerance: float = Field(1e-10, ge=_MIN_TOLERANCE)
    parameter_tolerance: float = Field(1e-10, ge=_MIN_TOLERANCE)
    gradient_tolerance: float = Field(1e-10, ge=_MIN_TOLERANCE)
    initial_pose: List[float] = Field(default_factory=lambda: [0.0, 0.0, 0.0], min_length=3, max_length=3)


class AlignerConfig(BaseModel):
    project: ProjectMetadata
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    procrustes: ProcrustesConfig = Field(default_factory=ProcrustesConfig)
    iterative: IterativeConfig = Field(default_factory=IterativeConfig)


def load_config(path: str | Path) -> AlignerConfig:
    """Load configuration from YAML file."""
    with open(path, "r", encoding="utf-8") as handle:
        raw: Dict[str, object] = yaml.safe_load(handle)
    return AlignerConfig.model_validate(raw)


def default_config(output_dir: str | Path = "output") -> AlignerConfig:
    return AlignerConfig.model_validate({"project": {"name": "point-aligner", "output_dir": str(output_dir)}})
