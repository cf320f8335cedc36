#!/usr/bin/env python3
"""
Data models for the orrery.

This module defines the dataclasses shared between the registry, the parameter
store, the kinematics engine, the focus controller and the view layer.

Units and usage
- Positions are 3-tuples (x, y, z) in scene units; the orbital plane is y = 0.
- Angles and angular speeds are in radians and radians per second.
- Colours are hex strings ("#rrggbb"); the view layer converts them to RGB.
- CelestialBody is immutable catalog data. OrbitalParameters is mutated only by
  ParameterStore, which hands out copies to everyone else.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .constants import KIND_MOON, KIND_PLANET, KIND_STAR, MOON_SPIN_RATE, PLANET_SPIN_RATE, STAR_SPIN_RATE
from .vector_utils import Vec3

ORIGIN: Vec3 = (0.0, 0.0, 0.0)


class BodyKind(str, Enum):
    STAR = KIND_STAR
    PLANET = KIND_PLANET
    MOON = KIND_MOON

    @property
    def depth(self) -> int:
        """Hierarchy depth: star 0, planet 1, moon 2."""
        return _KIND_DEPTH[self]

    @property
    def default_spin_rate(self) -> float:
        return _KIND_SPIN[self]


_KIND_DEPTH = {BodyKind.STAR: 0, BodyKind.PLANET: 1, BodyKind.MOON: 2}
_KIND_SPIN = {BodyKind.STAR: STAR_SPIN_RATE, BodyKind.PLANET: PLANET_SPIN_RATE, BodyKind.MOON: MOON_SPIN_RATE}


@dataclass(frozen=True)
class CelestialBody:
    """
    Static catalog entry for a star, planet or moon.

    Fields:
    - id: Unique name, also used as the display name
    - kind: BodyKind
    - base_radius: Nominal visual size of the sphere
    - base_orbit_radius: Nominal orbit radius around the parent (0 for the star)
    - base_angular_speed: Nominal angular speed in rad/s
    - fallback_color: Tint used when no texture is bound
    - texture_ref: Opaque handle passed through to the view layer
    - parent_id: None for the star, the star id for planets, a planet id for moons
    - spin_rate: Visual rolling rate in rad/s; None means the kind's default
    - orbit_color: Orbit ring / label colour for the view layer
    - ring: Optional (inner, outer) planetary ring extents, in multiples of the body size
    """
    id: str
    kind: BodyKind
    base_radius: float
    base_orbit_radius: float
    base_angular_speed: float
    fallback_color: str
    texture_ref: Optional[str] = None
    parent_id: Optional[str] = None
    spin_rate: Optional[float] = None
    orbit_color: Optional[str] = None
    ring: Optional[Tuple[float, float]] = None

    @property
    def effective_spin_rate(self) -> float:
        if self.spin_rate is None:
            return self.kind.default_spin_rate
        return self.spin_rate


@dataclass
class OrbitalParameters:
    """Live, editable parameters for one body."""
    radius: float
    angular_speed: float
    phase_offset: float
    visual_size: float
    tint_color: str


@dataclass(frozen=True)
class BodyState:
    """Kinematic output for one body in one frame."""
    position: Vec3
    spin_angle: float


@dataclass(frozen=True)
class FocusState:
    """
    Camera target published by the focus controller.

    target_id is the star's id while nothing has been explicitly selected;
    `selected` tells the two cases apart.
    """
    target_id: str
    world_position: Vec3 = ORIGIN
    selected: bool = False
