import pytest

from orrery.bridge import ControlPanelBridge
from orrery.constants import MOON_SLIDER_RANGES, PLANET_SLIDER_RANGES
from orrery.parameters import ParameterStore
from orrery.registry import BodyRegistry

from conftest import moon, planet, star


@pytest.fixture
def bridge(moon_registry, store):
    return ControlPanelBridge(store, moon_registry)


def test_valid_edit_is_applied(bridge, store):
    result = bridge.apply("Gaia", "radius", 22.0)
    assert result.ok
    assert result.value == 22.0
    assert store.get("Gaia").radius == 22.0


def test_rejected_edit_returns_prior_value(bridge, store):
    result = bridge.apply("Gaia", "radius", -5.0)
    assert not result.ok
    assert result.value == 20.0
    assert "radius" in result.message
    assert store.get("Gaia").radius == 20.0


def test_unknown_body_does_not_raise(bridge):
    result = bridge.apply("Atlantis", "radius", 5.0)
    assert not result.ok
    assert result.value is None
    assert "Atlantis" in result.message


def test_colour_edit_is_normalized(bridge):
    result = bridge.apply("Ares", "tint_color", "#FF8800")
    assert result.ok
    assert result.value == "#ff8800"
    assert bridge.current_value("Ares", "tint_color") == "#ff8800"


def test_panel_layout_nests_moons_under_planets(bridge):
    layout = bridge.panel_layout()
    assert [f.body_id for f in layout] == ["Sun", "Gaia", "Ares"]
    assert [c.body_id for c in layout[1].children] == ["Luna", "Selene"]
    assert layout[2].children == []
    assert [s.field for s in layout[0].sliders] == ["visual_size"]


def test_slider_ranges_follow_body_kind(bridge):
    gaia = bridge.panel_layout()[1]
    luna = gaia.children[0]
    speed = next(s for s in luna.sliders if s.field == "angular_speed")
    assert (speed.min_value, speed.max_value) == MOON_SLIDER_RANGES["angular_speed"]
    orbit = next(s for s in gaia.sliders if s.field == "radius")
    assert (orbit.min_value, orbit.max_value) == PLANET_SLIDER_RANGES["radius"]
    assert orbit.label == "orbit"


def test_slider_range_widens_to_fit_current_value(bridge):
    selene = bridge.panel_layout()[1].children[1]
    speed = next(s for s in selene.sliders if s.field == "angular_speed")
    assert speed.value == -1.0
    assert speed.min_value == -1.0


def test_colour_only_offered_for_untextured_bodies():
    registry = BodyRegistry([
        star(),
        planet("Painted", 10.0, 1.0, texture="textures/painted.jpg"),
        planet("Plain", 20.0, 1.0),
        moon("Pebble", "Plain", 1.0, 1.0),
    ])
    layout = ControlPanelBridge(ParameterStore(registry.list_bodies()), registry).panel_layout()
    painted, plain = layout[1], layout[2]
    assert painted.color is None
    assert plain.color == "#4a90e2"
    assert plain.children[0].color == "#cccccc"


def test_reset(bridge, store):
    bridge.apply("Gaia", "radius", 40.0)
    ok, _ = bridge.reset("Gaia")
    assert ok
    assert store.get("Gaia").radius == 20.0
    ok, message = bridge.reset("Atlantis")
    assert not ok
    assert "Atlantis" in message
