#!/usr/bin/env python3
"""
Body registry: the immutable catalog of celestial bodies.

The registry validates the Star -> Planet -> Moon hierarchy once at construction
and fails fast with RegistryInvalidError if anything is off. After that it is
pure, read-only data shared by every other component.
"""
import logging
from typing import Dict, Iterable, Iterator, List, Tuple

from .data_models import BodyKind, CelestialBody
from .errors import RegistryInvalidError, UnknownBodyError
from .utils import is_finite_number, is_hex_color

logger = logging.getLogger(__name__)

MAX_DEPTH = 2

# Allowed parent kind for each body kind
_PARENT_KIND = {
    BodyKind.PLANET: BodyKind.STAR,
    BodyKind.MOON: BodyKind.PLANET,
}


class BodyRegistry:
    """
    Validated, ordered collection of CelestialBody entries.

    Iteration and list_bodies() keep catalog order; evaluation_order() sorts by
    hierarchy depth so parents always precede their children.
    """

    def __init__(self, bodies: Iterable[CelestialBody], name: str = "system"):
        self.name = name
        self._bodies: Tuple[CelestialBody, ...] = tuple(bodies)
        self._by_id: Dict[str, CelestialBody] = {}
        for b in self._bodies:
            if not isinstance(b, CelestialBody):
                raise RegistryInvalidError(f"not a CelestialBody: {b!r}")
            if b.id in self._by_id:
                raise RegistryInvalidError(f"duplicate body id {b.id!r}")
            self._by_id[b.id] = b

        self._validate()

        self._children: Dict[str, List[str]] = {b.id: [] for b in self._bodies}
        for b in self._bodies:
            if b.parent_id is not None:
                self._children[b.parent_id].append(b.id)
        self._order: Tuple[CelestialBody, ...] = tuple(
            sorted(self._bodies, key=lambda b: b.kind.depth)
        )
        logger.debug("Registry %r validated with %d bodies", name, len(self._bodies))

    # -----------------------
    # Validation
    # -----------------------

    def _validate(self) -> None:
        stars = [b for b in self._bodies if b.kind is BodyKind.STAR]
        if len(stars) != 1:
            raise RegistryInvalidError(f"expected exactly one star, found {len(stars)}")
        self._star = stars[0]

        for b in self._bodies:
            if not isinstance(b.kind, BodyKind):
                raise RegistryInvalidError(f"{b.id}: unknown kind {b.kind!r}")
            self._validate_values(b)
            if b.kind is BodyKind.STAR:
                if b.parent_id is not None:
                    raise RegistryInvalidError(f"star {b.id!r} must not have a parent")
                continue
            parent = self._by_id.get(b.parent_id) if b.parent_id is not None else None
            if parent is None:
                raise RegistryInvalidError(f"{b.id}: parent {b.parent_id!r} does not exist")
            expected = _PARENT_KIND[b.kind]
            if parent.kind is not expected:
                raise RegistryInvalidError(
                    f"{b.id}: a {b.kind.value} must orbit a {expected.value}, not {parent.kind.value} {parent.id!r}"
                )

        # Parent chains must terminate at the star within MAX_DEPTH hops
        for b in self._bodies:
            seen = {b.id}
            node = b
            hops = 0
            while node.parent_id is not None:
                hops += 1
                if node.parent_id in seen or hops > MAX_DEPTH:
                    raise RegistryInvalidError(f"{b.id}: hierarchy cycle or depth > {MAX_DEPTH}")
                seen.add(node.parent_id)
                node = self._by_id[node.parent_id]

    @staticmethod
    def _validate_values(b: CelestialBody) -> None:
        if not isinstance(b.id, str) or not b.id.strip():
            raise RegistryInvalidError(f"body id must be a non-empty string, got {b.id!r}")
        for attr in ("base_radius", "base_orbit_radius", "base_angular_speed"):
            if not is_finite_number(getattr(b, attr)):
                raise RegistryInvalidError(f"{b.id}: {attr} must be a finite number")
        if b.base_radius <= 0:
            raise RegistryInvalidError(f"{b.id}: base_radius must be > 0")
        if b.kind is BodyKind.STAR:
            if b.base_orbit_radius != 0:
                raise RegistryInvalidError(f"star {b.id!r} sits at the origin; base_orbit_radius must be 0")
        elif b.base_orbit_radius <= 0:
            raise RegistryInvalidError(f"{b.id}: base_orbit_radius must be > 0")
        if b.spin_rate is not None and not is_finite_number(b.spin_rate):
            raise RegistryInvalidError(f"{b.id}: spin_rate must be a finite number")
        if not is_hex_color(b.fallback_color):
            raise RegistryInvalidError(f"{b.id}: malformed fallback_color {b.fallback_color!r}")
        if b.orbit_color is not None and not is_hex_color(b.orbit_color):
            raise RegistryInvalidError(f"{b.id}: malformed orbit_color {b.orbit_color!r}")
        if b.ring is not None:
            inner, outer = b.ring
            if not (0 < inner < outer):
                raise RegistryInvalidError(f"{b.id}: ring must satisfy 0 < inner < outer")

    # -----------------------
    # Queries
    # -----------------------

    def list_bodies(self) -> Tuple[CelestialBody, ...]:
        return self._bodies

    def get(self, body_id: str) -> CelestialBody:
        try:
            return self._by_id[body_id]
        except KeyError:
            raise UnknownBodyError(body_id) from None

    @property
    def star(self) -> CelestialBody:
        return self._star

    def planets(self) -> List[CelestialBody]:
        return [b for b in self._bodies if b.kind is BodyKind.PLANET]

    def moons_of(self, planet_id: str) -> List[CelestialBody]:
        self.get(planet_id)
        return [self._by_id[i] for i in self._children[planet_id] if self._by_id[i].kind is BodyKind.MOON]

    def sibling_index(self, body_id: str) -> int:
        """Ordinal of a body among the children of its parent (0 for the star)."""
        b = self.get(body_id)
        if b.parent_id is None:
            return 0
        return self._children[b.parent_id].index(body_id)

    def depth(self, body_id: str) -> int:
        return self.get(body_id).kind.depth

    def evaluation_order(self) -> Tuple[CelestialBody, ...]:
        """Star, then planets, then moons; catalog order within each level."""
        return self._order

    def __contains__(self, body_id) -> bool:
        return body_id in self._by_id

    def __len__(self) -> int:
        return len(self._bodies)

    def __iter__(self) -> Iterator[CelestialBody]:
        return iter(self._bodies)
