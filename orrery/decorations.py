#!/usr/bin/env python3
"""
Decorative bodies: the asteroid belt and a comet.

Neither takes part in focus or parameter editing. Like the kinematics engine,
both are pure functions of elapsed time; the belt's particles are generated
once from a fixed seed so every run looks the same.
"""
import math
import random
from dataclasses import dataclass
from typing import List, Tuple

from .constants import (
    BELT_ASTEROID_COUNT,
    BELT_BASE_SPEED,
    BELT_INNER_RADIUS,
    BELT_OUTER_RADIUS,
    BELT_SEED,
    COMET_ANGULAR_SPEED,
    COMET_APHELION,
    COMET_MAX_TAIL,
    COMET_PERIHELION,
    COMET_PHASE,
)
from .vector_utils import Vec3, vec_len, vec_norm


@dataclass(frozen=True)
class Asteroid:
    radius: float
    phase: float
    height: float
    size: float
    angular_speed: float


class AsteroidBelt:
    """
    Ring of small rocks between `inner` and `outer`.

    Angular speed falls off as (inner / r) ** 1.5 so the inner edge laps the outer one.
    """

    def __init__(self, inner: float = BELT_INNER_RADIUS, outer: float = BELT_OUTER_RADIUS,
                 count: int = BELT_ASTEROID_COUNT, seed: int = BELT_SEED,
                 base_speed: float = BELT_BASE_SPEED):
        if not 0 < inner < outer:
            raise ValueError("belt radii must satisfy 0 < inner < outer")
        if count < 0:
            raise ValueError("asteroid count must be >= 0")
        self.inner = inner
        self.outer = outer
        rng = random.Random(seed)
        self.asteroids: List[Asteroid] = []
        for _ in range(count):
            r = rng.uniform(inner, outer)
            self.asteroids.append(Asteroid(
                radius=r,
                phase=rng.uniform(0.0, 2.0 * math.pi),
                height=rng.uniform(-0.3, 0.3),
                size=rng.uniform(0.05, 0.18),
                angular_speed=base_speed * (inner / r) ** 1.5,
            ))

    def positions(self, time: float) -> List[Tuple[Vec3, float]]:
        """(position, size) for every asteroid at `time`."""
        out = []
        for a in self.asteroids:
            angle = a.angular_speed * time + a.phase
            out.append(((a.radius * math.cos(angle), a.height, a.radius * math.sin(angle)), a.size))
        return out

    def __len__(self) -> int:
        return len(self.asteroids)


def solve_kepler(M: float, e: float, tol: float = 1e-10, max_iter: int = 50) -> float:
    """
    Solve Kepler's equation M = E - e*sin(E) for the eccentric anomaly E (radians).
    """
    M = M % (2.0 * math.pi)
    E = M + e * math.sin(M) * (1.0 + e * math.cos(M))
    for _ in range(max_iter):
        dE = (M - E + e * math.sin(E)) / (1.0 - e * math.cos(E))
        E += dE
        if abs(dE) < tol:
            break
    return E


class Comet:
    """
    Comet on an elliptical orbit in the y = 0 plane with the star at one focus.

    Perihelion lies on the +x axis. The tail always points away from the star
    and grows as the comet approaches perihelion.
    """

    def __init__(self, perihelion: float = COMET_PERIHELION, aphelion: float = COMET_APHELION,
                 angular_speed: float = COMET_ANGULAR_SPEED, phase: float = COMET_PHASE,
                 max_tail: float = COMET_MAX_TAIL):
        if not 0 < perihelion <= aphelion:
            raise ValueError("comet orbit must satisfy 0 < perihelion <= aphelion")
        self.perihelion = perihelion
        self.aphelion = aphelion
        self.semi_major = (perihelion + aphelion) / 2.0
        self.eccentricity = (aphelion - perihelion) / (aphelion + perihelion)
        self.semi_minor = self.semi_major * math.sqrt(1.0 - self.eccentricity ** 2)
        self.angular_speed = angular_speed  # mean motion, rad/s
        self.phase = phase
        self.max_tail = max_tail

    def position(self, time: float) -> Vec3:
        E = solve_kepler(self.angular_speed * time + self.phase, self.eccentricity)
        x = self.semi_major * (math.cos(E) - self.eccentricity)
        z = self.semi_minor * math.sin(E)
        return (x, 0.0, z)

    def tail_direction(self, time: float) -> Vec3:
        return vec_norm(self.position(time))

    def tail_length(self, time: float) -> float:
        r = vec_len(self.position(time))
        return self.max_tail * self.perihelion / max(r, self.perihelion)

    def path_points(self, segments: int = 180) -> List[Vec3]:
        """Closed polyline of the full orbit."""
        pts = []
        for i in range(segments + 1):
            E = 2.0 * math.pi * i / segments
            pts.append((self.semi_major * (math.cos(E) - self.eccentricity), 0.0, self.semi_minor * math.sin(E)))
        return pts
