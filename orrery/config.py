#!/usr/bin/env python3
"""
Runtime configuration for the orrery application.

Defaults come from constants.py; the command line can override them.
"""
import argparse
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from .catalog_loader import DEFAULT_CATALOG
from .constants import (
    DEFAULT_TIME_SCALE,
    MAX_ANGULAR_SPEED,
    MAX_ORBIT_RADIUS,
    MAX_TIME_SCALE,
    MAX_VISUAL_SIZE,
    MIN_ANGULAR_SPEED,
    BELT_SEED,
)
from .parameters import ParameterLimits


@dataclass
class SimulationConfig:
    catalog_path: str = DEFAULT_CATALOG
    texture_dir: Optional[str] = None
    time_scale: float = DEFAULT_TIME_SCALE
    speed_min: float = MIN_ANGULAR_SPEED
    speed_max: float = MAX_ANGULAR_SPEED
    max_radius: float = MAX_ORBIT_RADIUS
    max_visual_size: float = MAX_VISUAL_SIZE
    show_belt: bool = True
    show_comet: bool = True
    belt_seed: int = BELT_SEED
    log_level: str = "INFO"

    def __post_init__(self):
        if not 0.0 <= self.time_scale <= MAX_TIME_SCALE:
            raise ValueError(f"time_scale must be within [0, {MAX_TIME_SCALE}]")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"unknown log level {self.log_level!r}")
        self.limits  # raises ValueError for inconsistent limits

    @property
    def limits(self) -> ParameterLimits:
        return ParameterLimits(
            speed_min=self.speed_min,
            speed_max=self.speed_max,
            max_radius=self.max_radius,
            max_visual_size=self.max_visual_size,
        )

    @classmethod
    def from_args(cls, argv: Optional[Sequence[str]] = None) -> "SimulationConfig":
        parser = build_parser()
        args = parser.parse_args(argv)
        try:
            return cls(
                catalog_path=args.catalog,
                texture_dir=args.textures,
                time_scale=args.time_scale,
                speed_min=args.speed_min,
                speed_max=args.speed_max,
                show_belt=not args.no_belt,
                show_comet=not args.no_comet,
                belt_seed=args.belt_seed,
                log_level=args.log_level,
            )
        except ValueError as exc:
            parser.error(str(exc))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Interactive solar system orrery")
    parser.add_argument("--catalog", default=DEFAULT_CATALOG,
                        help="Path to a body catalog JSON (default: bundled solar system).")
    parser.add_argument("--textures", default=None,
                        help="Directory that texture references in the catalog are relative to.")
    parser.add_argument("--time-scale", type=float, default=DEFAULT_TIME_SCALE,
                        help="Simulated seconds per real second.")
    parser.add_argument("--speed-min", type=float, default=MIN_ANGULAR_SPEED,
                        help="Lowest angular speed an edit may set (rad/s).")
    parser.add_argument("--speed-max", type=float, default=MAX_ANGULAR_SPEED,
                        help="Highest angular speed an edit may set (rad/s).")
    parser.add_argument("--no-belt", action="store_true", help="Hide the asteroid belt.")
    parser.add_argument("--no-comet", action="store_true", help="Hide the comet.")
    parser.add_argument("--belt-seed", type=int, default=BELT_SEED,
                        help="Random seed for the asteroid belt layout.")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging verbosity.")
    return parser
