"""Register two weighted 2D point files with the iterative least-squares solver."""

from __future__ import annotations

import argparse
import math
from pathlib import Path
from typing import List, Optional

from loguru import logger

from point_aligner.config import load_config
from point_aligner.pipeline import RegistrationPipeline
from point_aligner.utils import configure_logging, load_points, load_weights


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Weighted rigid registration of 2D point correspondences")
    parser.add_argument("--config", type=Path, required=True, help="Path to aligner YAML configuration")
    parser.add_argument("--source", type=Path, required=True, help="Source points, one 'x y' per line")
    parser.add_argument("--target", type=Path, required=True, help="Target points, one 'x y' per line")
    parser.add_argument("--weights", type=Path, help="Optional weights, one per line (default: all 1.0)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    cfg = load_config(args.config)
    configure_logging(cfg.logging)
    pipeline = RegistrationPipeline.from_config(cfg)

    source = load_points(args.source, dimension=2)
    target = load_points(args.target, dimension=2)
    weights = load_weights(args.weights) if args.weights else None

    output = pipeline.register_2d(source, target, weights)
    initial_angle, initial_tx, initial_ty = cfg.iterative.initial_pose
    pose = output.result.pose

    print(output.result.summary.brief_report())
    print(f"Initial angle: {math.degrees(initial_angle):.6f}\ttx: {initial_tx:.6f}\tty: {initial_ty:.6f}")
    print(f"Final angle: {output.angle_degrees:.6f}\ttx: {pose.tx:.6f}\tty: {pose.ty:.6f}")
    logger.info("2D registration finished")


if __name__ == "__main__":
    main()
