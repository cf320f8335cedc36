import pytest

from orrery.data_models import BodyKind, CelestialBody
from orrery.errors import RegistryInvalidError, UnknownBodyError
from orrery.registry import BodyRegistry

from conftest import moon, planet, star


def test_list_bodies_keeps_catalog_order(moon_registry):
    assert [b.id for b in moon_registry.list_bodies()] == ["Sun", "Gaia", "Luna", "Selene", "Ares"]


def test_evaluation_order_is_depth_first_by_level(moon_registry):
    order = [b.id for b in moon_registry.evaluation_order()]
    assert order == ["Sun", "Gaia", "Ares", "Luna", "Selene"]


def test_queries(moon_registry):
    assert moon_registry.star.id == "Sun"
    assert [p.id for p in moon_registry.planets()] == ["Gaia", "Ares"]
    assert [m.id for m in moon_registry.moons_of("Gaia")] == ["Luna", "Selene"]
    assert moon_registry.moons_of("Ares") == []
    assert moon_registry.sibling_index("Selene") == 1
    assert moon_registry.depth("Luna") == 2
    assert "Luna" in moon_registry
    assert "Atlantis" not in moon_registry
    assert len(moon_registry) == 5


def test_get_unknown_raises(moon_registry):
    with pytest.raises(UnknownBodyError):
        moon_registry.get("Atlantis")


@pytest.mark.parametrize("bodies", [
    # no star
    [planet("A", 5.0, 1.0)],
    # two stars
    [star("Sun"), star("Sol")],
    # duplicate ids
    [star(), planet("A", 5.0, 1.0), planet("A", 6.0, 1.0)],
    # orphaned planet
    [star(), planet("A", 5.0, 1.0, parent="Vega")],
    # moon orbiting the star directly
    [star(), moon("M", "Sun", 1.0, 1.0)],
    # moon orbiting another moon (depth 3)
    [star(), planet("A", 5.0, 1.0), moon("M", "A", 1.0, 1.0), moon("N", "M", 1.0, 1.0)],
    # planet orbiting a planet
    [star(), planet("A", 5.0, 1.0), planet("B", 1.0, 1.0, parent="A")],
    # non-positive sizes / orbits
    [star(size=0.0)],
    [star(), planet("A", 0.0, 1.0)],
    [star(), planet("A", 5.0, 1.0, size=-1.0)],
])
def test_invalid_hierarchies_fail_fast(bodies):
    with pytest.raises(RegistryInvalidError):
        BodyRegistry(bodies)


def test_star_with_parent_is_invalid():
    sun = CelestialBody("Sun", BodyKind.STAR, 1.0, 0.0, 0.0, "#ffffff", parent_id="Sun")
    with pytest.raises(RegistryInvalidError):
        BodyRegistry([sun])


def test_malformed_colour_is_invalid():
    bad = CelestialBody("A", BodyKind.PLANET, 1.0, 5.0, 1.0, "blue-ish", parent_id="Sun")
    with pytest.raises(RegistryInvalidError):
        BodyRegistry([star(), bad])


def test_non_finite_speed_is_invalid():
    bad = CelestialBody("A", BodyKind.PLANET, 1.0, 5.0, float("nan"), "#123456", parent_id="Sun")
    with pytest.raises(RegistryInvalidError):
        BodyRegistry([star(), bad])
