#!/usr/bin/env python3
"""
Body catalog JSON loading.

Schema
======
Catalog JSON (catalogs/*.json):
{
  "name": "Human-friendly system name",
  "star": {
    "name": "Sun",
    "size": 3.2,
    "color": "#fff26b",
    "texture": "textures/sun.jpg"          # optional
  },
  "planets": [
    {
      "name": "Earth",
      "size": 1.0,                          # visual size
      "orbit": 20.0,                        # orbit radius around the star
      "speed": 0.15,                        # angular speed, rad/s
      "color": "#4a90e2",
      "texture": "textures/earth.jpg",      # optional
      "orbit_color": "#4a90e2",             # optional
      "ring": [1.2, 2.0],                   # optional, multiples of size
      "moons": [
        {"name": "Moon", "size": 0.27, "orbit": 2.0, "speed": 1.5, "color": "#cccccc"}
      ]
    }
  ]
}

Unlike scene presets, a catalog is never partially loaded: any malformed entry
raises RegistryInvalidError so startup aborts with a clear message.
"""
import json
import logging
import os
from typing import List, Optional

from .constants import DEFAULT_MOON_COLOR, DEFAULT_PLANET_COLOR
from .data_models import BodyKind, CelestialBody
from .errors import RegistryInvalidError
from .registry import BodyRegistry

logger = logging.getLogger(__name__)

CATALOGS_DIR = os.path.join(os.path.dirname(__file__), "catalogs")
DEFAULT_CATALOG = os.path.join(CATALOGS_DIR, "solar_system.json")


def _read_json(path: str) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise RegistryInvalidError(f"cannot read catalog {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise RegistryInvalidError(f"catalog {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise RegistryInvalidError(f"catalog {path} must be a JSON object")
    return data


def _number(entry: dict, key: str, where: str, default: Optional[float] = None) -> float:
    raw = entry.get(key, default)
    if raw is None:
        raise RegistryInvalidError(f"{where}: missing '{key}'")
    if isinstance(raw, bool):
        raise RegistryInvalidError(f"{where}: '{key}' must be a number")
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise RegistryInvalidError(f"{where}: '{key}' must be a number, got {raw!r}") from None


def _name(entry, where: str) -> str:
    if not isinstance(entry, dict):
        raise RegistryInvalidError(f"{where}: entry must be an object")
    name = entry.get("name")
    if not isinstance(name, str) or not name.strip():
        raise RegistryInvalidError(f"{where}: missing 'name'")
    return name


def _ring(entry: dict, where: str):
    ring = entry.get("ring")
    if ring is None:
        return None
    if not isinstance(ring, (list, tuple)) or len(ring) != 2:
        raise RegistryInvalidError(f"{where}: 'ring' must be [inner, outer]")
    return (_number({"v": ring[0]}, "v", where), _number({"v": ring[1]}, "v", where))


def _spin(entry: dict, where: str) -> Optional[float]:
    if entry.get("spin") is None:
        return None
    return _number(entry, "spin", where)


def bodies_from_dict(data: dict) -> List[CelestialBody]:
    """Flatten a catalog dict into CelestialBody entries (star, then each planet followed by its moons)."""
    star_raw = data.get("star")
    star_name = _name(star_raw, "star")
    bodies: List[CelestialBody] = [
        CelestialBody(
            id=star_name,
            kind=BodyKind.STAR,
            base_radius=_number(star_raw, "size", star_name),
            base_orbit_radius=0.0,
            base_angular_speed=0.0,
            fallback_color=star_raw.get("color", "#fff26b"),
            texture_ref=star_raw.get("texture"),
            spin_rate=_spin(star_raw, star_name),
        )
    ]

    planets = data.get("planets", [])
    if not isinstance(planets, list):
        raise RegistryInvalidError("'planets' must be a list")
    for pi, p in enumerate(planets):
        pname = _name(p, f"planets[{pi}]")
        bodies.append(CelestialBody(
            id=pname,
            kind=BodyKind.PLANET,
            base_radius=_number(p, "size", pname),
            base_orbit_radius=_number(p, "orbit", pname),
            base_angular_speed=_number(p, "speed", pname),
            fallback_color=p.get("color") or DEFAULT_PLANET_COLOR,
            texture_ref=p.get("texture"),
            parent_id=star_name,
            spin_rate=_spin(p, pname),
            orbit_color=p.get("orbit_color"),
            ring=_ring(p, pname),
        ))
        moons = p.get("moons", [])
        if not isinstance(moons, list):
            raise RegistryInvalidError(f"{pname}: 'moons' must be a list")
        for mi, m in enumerate(moons):
            mname = _name(m, f"{pname}.moons[{mi}]")
            bodies.append(CelestialBody(
                id=mname,
                kind=BodyKind.MOON,
                base_radius=_number(m, "size", mname),
                base_orbit_radius=_number(m, "orbit", mname),
                base_angular_speed=_number(m, "speed", mname),
                fallback_color=m.get("color") or DEFAULT_MOON_COLOR,
                texture_ref=m.get("texture"),
                parent_id=pname,
                spin_rate=_spin(m, mname),
            ))
    return bodies


def list_catalogs() -> List[str]:
    """List JSON files available in the bundled catalogs directory."""
    if not os.path.isdir(CATALOGS_DIR):
        return []
    return sorted(fn for fn in os.listdir(CATALOGS_DIR) if fn.lower().endswith(".json"))


def load_catalog(path: Optional[str] = None) -> BodyRegistry:
    """
    Load and validate a catalog file.
    Returns a BodyRegistry; raises RegistryInvalidError on any defect.
    """
    path = path or DEFAULT_CATALOG
    data = _read_json(path)
    display_name = data.get("name") or os.path.splitext(os.path.basename(path))[0]
    registry = BodyRegistry(bodies_from_dict(data), name=display_name)
    logger.info("Loaded catalog %r (%d bodies) from %s", display_name, len(registry), path)
    return registry
