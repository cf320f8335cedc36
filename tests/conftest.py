import pytest

from orrery.catalog_loader import load_catalog
from orrery.data_models import BodyKind, CelestialBody
from orrery.parameters import ParameterStore
from orrery.registry import BodyRegistry


def star(name="Sun", size=3.2):
    return CelestialBody(name, BodyKind.STAR, size, 0.0, 0.0, "#fff26b")


def planet(name, orbit, speed, size=1.0, parent="Sun", texture=None):
    return CelestialBody(name, BodyKind.PLANET, size, orbit, speed, "#4a90e2", texture_ref=texture, parent_id=parent)


def moon(name, parent, orbit, speed, size=0.2):
    return CelestialBody(name, BodyKind.MOON, size, orbit, speed, "#cccccc", parent_id=parent)


@pytest.fixture
def solar_registry():
    return load_catalog()


@pytest.fixture
def simple_registry():
    """Sun plus one planet at radius 10, speed 1, phase 0."""
    return BodyRegistry([star(), planet("Terra", 10.0, 1.0)])


@pytest.fixture
def moon_registry():
    """Sun, one planet with two moons, and a second moonless planet."""
    return BodyRegistry([
        star(),
        planet("Gaia", 20.0, 0.5, size=2.0),
        moon("Luna", "Gaia", 1.5, 2.0),
        moon("Selene", "Gaia", 3.0, -1.0),
        planet("Ares", 30.0, 0.25),
    ])


@pytest.fixture
def store(moon_registry):
    return ParameterStore(moon_registry.list_bodies())
