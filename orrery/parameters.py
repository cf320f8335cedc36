#!/usr/bin/env python3
"""
Parameter store: live, editable orbital and visual parameters per body.

Responsibilities
- Seed one OrbitalParameters per body from the registry's base values.
- Validate edits against declared ranges; reject (never clamp) bad values.
- Hand out copies and whole-frame snapshots so nothing outside the store can
  mutate parameters behind its back.

Threading
- The Dear PyGui thread calls update() while the render thread takes snapshots.
  A re-entrant lock guards the map; a snapshot is taken in one critical section,
  so a frame sees either the old or the new value of every field.
"""
import logging
import threading
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional

from .constants import (
    MAX_ANGULAR_SPEED,
    MAX_ORBIT_RADIUS,
    MAX_VISUAL_SIZE,
    MIN_ANGULAR_SPEED,
    MOON_PHASE_STEP,
    PLANET_PHASE_STEP,
)
from .data_models import BodyKind, CelestialBody, OrbitalParameters
from .errors import ParameterRangeError, UnknownBodyError
from .utils import is_finite_number, is_hex_color, normalize_hex_color

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("radius", "angular_speed", "visual_size", "tint_color")
# The star is pinned to the origin; only its look can change
STAR_EDITABLE_FIELDS = ("visual_size", "tint_color")


@dataclass(frozen=True)
class ParameterLimits:
    """Declared ranges for editable fields."""
    speed_min: float = MIN_ANGULAR_SPEED
    speed_max: float = MAX_ANGULAR_SPEED
    max_radius: float = MAX_ORBIT_RADIUS
    max_visual_size: float = MAX_VISUAL_SIZE

    def __post_init__(self):
        if self.speed_min > self.speed_max:
            raise ValueError("speed_min must not exceed speed_max")
        if self.max_radius <= 0 or self.max_visual_size <= 0:
            raise ValueError("maximum radius and visual size must be positive")


def phase_offsets(bodies: Iterable[CelestialBody]) -> Dict[str, float]:
    """
    Deterministic phase offset per body.

    Planets are spread by their ordinal among planets, moons by their ordinal
    among siblings; the star gets 0.
    """
    offsets: Dict[str, float] = {}
    planet_index = 0
    moon_counts: Dict[str, int] = {}
    for b in bodies:
        if b.kind is BodyKind.PLANET:
            offsets[b.id] = planet_index * PLANET_PHASE_STEP
            planet_index += 1
        elif b.kind is BodyKind.MOON:
            n = moon_counts.get(b.parent_id, 0)
            offsets[b.id] = n * MOON_PHASE_STEP
            moon_counts[b.parent_id] = n + 1
        else:
            offsets[b.id] = 0.0
    return offsets


def initialize(bodies: Iterable[CelestialBody]) -> Dict[str, OrbitalParameters]:
    """Build fresh parameters for every body from its base values."""
    bodies = list(bodies)
    offsets = phase_offsets(bodies)
    return {
        b.id: OrbitalParameters(
            radius=float(b.base_orbit_radius),
            angular_speed=float(b.base_angular_speed),
            phase_offset=offsets[b.id],
            visual_size=float(b.base_radius),
            tint_color=normalize_hex_color(b.fallback_color),
        )
        for b in bodies
    }


class ParameterStore:
    """
    Single owner of mutable orbital parameters.

    All writes go through update(); reads return copies.
    """

    def __init__(self, bodies: Iterable[CelestialBody], limits: Optional[ParameterLimits] = None):
        self.lock = threading.RLock()
        self.limits = limits or ParameterLimits()
        self._bodies: Dict[str, CelestialBody] = {b.id: b for b in bodies}
        self._params: Dict[str, OrbitalParameters] = initialize(self._bodies.values())

    def ids(self) -> List[str]:
        return list(self._bodies)

    def get(self, body_id: str) -> OrbitalParameters:
        with self.lock:
            try:
                return replace(self._params[body_id])
            except KeyError:
                raise UnknownBodyError(body_id) from None

    def snapshot(self) -> Dict[str, OrbitalParameters]:
        """Consistent copy of every body's parameters for one frame."""
        with self.lock:
            return {bid: replace(p) for bid, p in self._params.items()}

    def update(self, body_id: str, field: str, value) -> None:
        """
        Set one field of one body.

        Raises UnknownBodyError for a missing id and ParameterRangeError for a
        non-editable field or an out-of-range value; the store is untouched on error.
        """
        body = self._bodies.get(body_id)
        if body is None:
            raise UnknownBodyError(body_id)
        new_value = self._validate(body, field, value)
        with self.lock:
            old_value = getattr(self._params[body_id], field)
            setattr(self._params[body_id], field, new_value)
        logger.debug("%s.%s: %r -> %r", body_id, field, old_value, new_value)

    def reset(self, body_id: Optional[str] = None) -> None:
        """Restore base values for one body, or for all bodies when body_id is None."""
        if body_id is not None and body_id not in self._bodies:
            raise UnknownBodyError(body_id)
        fresh = initialize(self._bodies.values())
        with self.lock:
            if body_id is None:
                self._params = fresh
            else:
                self._params[body_id] = fresh[body_id]
        logger.info("Parameters reset for %s", body_id or "all bodies")

    # -----------------------
    # Validation
    # -----------------------

    def _validate(self, body: CelestialBody, field: str, value):
        allowed = STAR_EDITABLE_FIELDS if body.kind is BodyKind.STAR else EDITABLE_FIELDS
        if field not in allowed:
            raise ParameterRangeError(body.id, field, value, "field is not editable")

        if field == "tint_color":
            if not is_hex_color(value):
                raise ParameterRangeError(body.id, field, value, "expected a #rrggbb colour")
            return normalize_hex_color(value)

        if not is_finite_number(value):
            raise ParameterRangeError(body.id, field, value, "expected a finite number")
        value = float(value)
        lim = self.limits
        if field == "radius":
            if not 0.0 < value <= lim.max_radius:
                raise ParameterRangeError(body.id, field, value, f"must be in (0, {lim.max_radius}]")
        elif field == "visual_size":
            if not 0.0 < value <= lim.max_visual_size:
                raise ParameterRangeError(body.id, field, value, f"must be in (0, {lim.max_visual_size}]")
        elif field == "angular_speed":
            if not lim.speed_min <= value <= lim.speed_max:
                raise ParameterRangeError(body.id, field, value, f"must be in [{lim.speed_min}, {lim.speed_max}]")
        return value
