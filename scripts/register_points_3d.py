"""Register two corresponding 3D point files with the closed-form Procrustes solver."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

import numpy as np

from point_aligner.config import load_config
from point_aligner.pipeline import RegistrationPipeline
from point_aligner.utils import configure_logging, load_points, save_pose


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Closed-form rigid registration of 3D point correspondences")
    parser.add_argument("--config", type=Path, required=True, help="Path to aligner YAML configuration")
    parser.add_argument("--source", type=Path, required=True, help="Source points, one 'x y z' per line")
    parser.add_argument("--target", type=Path, required=True, help="Target points, one 'x y z' per line")
    parser.add_argument("--save", action="store_true", help="Write the pose into the project output directory")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    cfg = load_config(args.config)
    configure_logging(cfg.logging)
    pipeline = RegistrationPipeline.from_config(cfg)

    source = load_points(args.source, dimension=3)
    target = load_points(args.target, dimension=3)
    result = pipeline.register_3d(source, target)

    print(np.array2string(result.pose, precision=6, suppress_small=True))
    print(f"RMS error: {result.rms_error:.6f}")
    if args.save:
        save_pose(cfg.project.output_dir / f"{args.source.stem}_to_{args.target.stem}_pose.txt", result.pose)


if __name__ == "__main__":
    main()
