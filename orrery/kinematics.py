#!/usr/bin/env python3
"""
Orbital Kinematics Engine for the orrery

Responsibilities
- Derive every body's world position and spin angle from elapsed time, the
  registry's hierarchy and a snapshot of the live parameters.
- Provide a small helper for orbit ring polylines used by the view layer.

Units and conventions
- World space positions are in scene units; the orbital plane is y = 0.
- Time is elapsed simulation time in seconds (>= 0).
- Angles are radians; angular speeds are radians per second.

Model
- Orbits are prescribed, not integrated: a planet at time t sits at
      (r cos(w t + phi), 0, r sin(w t + phi))
  around the star, and a moon sits at the same formula around its planet's
  position *for the same frame*, with an orbit radius of
      parent.visual_size + moon.radius
  so moons always clear the parent's surface.
- Spin is spin_rate * t, a purely visual roll that never feeds back into orbits.

Ordering
- Moons depend on their parent's position within the same evaluation, so bodies
  are evaluated in depth order: star, then planets, then moons. A moon whose
  parent is missing from the partial output is a construction defect and raises
  HierarchyResolutionError rather than silently sitting at the origin.

Threading
- This module is pure compute with no hidden time state. Given the same time
  and parameters it returns identical output.
"""
import math
from typing import Dict, List, Mapping, Sequence

from .constants import ORBIT_SEGMENTS
from .data_models import BodyKind, BodyState, CelestialBody, OrbitalParameters, ORIGIN
from .errors import HierarchyResolutionError, UnknownBodyError
from .registry import BodyRegistry
from .vector_utils import Vec3, planar, vec_add


def _check_time(time: float) -> float:
    t = float(time)
    if not math.isfinite(t) or t < 0.0:
        raise ValueError(f"time must be a finite, non-negative number of seconds, got {time!r}")
    return t


def compute_positions(time: float,
                      bodies: Sequence[CelestialBody],
                      params: Mapping[str, OrbitalParameters]) -> Dict[str, BodyState]:
    """
    Compute world positions and spin angles for all bodies at `time`.

    `bodies` may be in any order; they are evaluated star -> planets -> moons.
    The returned dict preserves that evaluation order.

    Args:
        time: Elapsed simulation time in seconds (finite, >= 0).
        bodies: Catalog entries (a BodyRegistry works too).
        params: Parameters keyed by body id, normally ParameterStore.snapshot().

    Returns:
        Mapping body id -> BodyState.
    """
    t = _check_time(time)
    ordered = sorted(bodies, key=lambda b: b.kind.depth)
    out: Dict[str, BodyState] = {}

    for body in ordered:
        try:
            p = params[body.id]
        except KeyError:
            raise UnknownBodyError(body.id) from None
        spin = body.effective_spin_rate * t

        if body.kind is BodyKind.STAR:
            out[body.id] = BodyState(ORIGIN, spin)

        elif body.kind is BodyKind.PLANET:
            angle = p.angular_speed * t + p.phase_offset
            out[body.id] = BodyState(planar(p.radius, angle), spin)

        else:
            parent_state = out.get(body.parent_id)
            parent_params = params.get(body.parent_id)
            if parent_state is None or parent_params is None:
                raise HierarchyResolutionError(
                    f"moon {body.id!r}: parent {body.parent_id!r} not resolved in this frame"
                )
            offset = parent_params.visual_size + p.radius
            angle = p.angular_speed * t + p.phase_offset
            out[body.id] = BodyState(vec_add(parent_state.position, planar(offset, angle)), spin)

    return out


class KinematicsEngine:
    """
    Kinematics bound to one registry.

    Caches the registry's depth-ordered evaluation list so each frame is a
    single pass over the bodies.
    """

    def __init__(self, registry: BodyRegistry):
        self.registry = registry
        self._order = registry.evaluation_order()

    def compute_positions(self, time: float, params: Mapping[str, OrbitalParameters]) -> Dict[str, BodyState]:
        return compute_positions(time, self._order, params)

    def orbit_radius(self, body_id: str, params: Mapping[str, OrbitalParameters]) -> float:
        """Radius of the ring a body traces around its parent (0 for the star)."""
        body = self.registry.get(body_id)
        p = params[body_id]
        if body.kind is BodyKind.STAR:
            return 0.0
        if body.kind is BodyKind.MOON:
            return params[body.parent_id].visual_size + p.radius
        return p.radius


def orbit_ring_points(center: Vec3, radius: float, segments: int = ORBIT_SEGMENTS) -> List[Vec3]:
    """
    Closed polyline approximating a circle in the y = 0 plane around `center`.
    The first and last points coincide.
    """
    if segments < 3:
        raise ValueError("an orbit ring needs at least 3 segments")
    step = 2.0 * math.pi / segments
    return [vec_add(center, planar(radius, i * step)) for i in range(segments + 1)]
