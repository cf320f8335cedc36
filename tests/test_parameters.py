import math
import threading

import pytest

from orrery.constants import MOON_PHASE_STEP, PLANET_PHASE_STEP
from orrery.errors import ParameterRangeError, UnknownBodyError
from orrery.parameters import ParameterLimits, ParameterStore, initialize


def test_initialize_seeds_from_base_values(moon_registry):
    params = initialize(moon_registry.list_bodies())
    gaia = params["Gaia"]
    assert gaia.radius == 20.0
    assert gaia.angular_speed == 0.5
    assert gaia.visual_size == 2.0
    assert gaia.tint_color == "#4a90e2"


def test_phase_offsets_are_deterministic_and_spread(moon_registry):
    first = initialize(moon_registry.list_bodies())
    second = initialize(moon_registry.list_bodies())
    assert first == second
    assert first["Sun"].phase_offset == 0.0
    assert first["Gaia"].phase_offset == 0.0
    assert first["Ares"].phase_offset == pytest.approx(PLANET_PHASE_STEP)
    assert first["Luna"].phase_offset == 0.0
    assert first["Selene"].phase_offset == pytest.approx(MOON_PHASE_STEP)


def test_get_returns_a_copy(store):
    p = store.get("Gaia")
    p.radius = 999.0
    assert store.get("Gaia").radius == 20.0


def test_get_unknown(store):
    with pytest.raises(UnknownBodyError):
        store.get("Atlantis")


def test_update_changes_exactly_one_field(store):
    before = store.snapshot()
    store.update("Gaia", "radius", 25.0)
    after = store.snapshot()
    assert after["Gaia"].radius == 25.0
    assert after["Gaia"].angular_speed == before["Gaia"].angular_speed
    assert after["Gaia"].visual_size == before["Gaia"].visual_size
    for body_id in ("Sun", "Luna", "Selene", "Ares"):
        assert after[body_id] == before[body_id]


def test_out_of_range_radius_is_rejected_not_clamped(store):
    with pytest.raises(ParameterRangeError) as info:
        store.update("Gaia", "radius", -1)
    assert info.value.body_id == "Gaia"
    assert info.value.field == "radius"
    assert store.get("Gaia").radius == 20.0


@pytest.mark.parametrize("field,value", [
    ("radius", 0),
    ("radius", 10_000.0),
    ("visual_size", 0.0),
    ("visual_size", -0.5),
    ("angular_speed", 1e6),
    ("angular_speed", -1e6),
    ("angular_speed", math.nan),
    ("radius", math.inf),
    ("radius", "12"),
    ("radius", True),
    ("tint_color", "#12345"),
    ("tint_color", "red"),
    ("tint_color", 0xFF0000),
    ("phase_offset", 1.0),
    ("mass", 1.0),
])
def test_invalid_updates_leave_store_unchanged(store, field, value):
    before = store.snapshot()
    with pytest.raises(ParameterRangeError):
        store.update("Gaia", field, value)
    assert store.snapshot() == before


def test_zero_and_retrograde_speeds_are_allowed(store):
    store.update("Gaia", "angular_speed", 0)
    assert store.get("Gaia").angular_speed == 0.0
    store.update("Luna", "angular_speed", -3.0)
    assert store.get("Luna").angular_speed == -3.0


def test_colour_is_normalized(store):
    store.update("Ares", "tint_color", "#ABC")
    assert store.get("Ares").tint_color == "#aabbcc"


def test_star_orbit_fields_are_not_editable(store):
    with pytest.raises(ParameterRangeError):
        store.update("Sun", "radius", 5.0)
    with pytest.raises(ParameterRangeError):
        store.update("Sun", "angular_speed", 1.0)
    store.update("Sun", "visual_size", 4.0)
    assert store.get("Sun").visual_size == 4.0


def test_update_unknown_body(store):
    with pytest.raises(UnknownBodyError):
        store.update("Atlantis", "radius", 5.0)


def test_configured_speed_limits(moon_registry):
    store = ParameterStore(moon_registry.list_bodies(), ParameterLimits(speed_min=0.0, speed_max=1.0))
    with pytest.raises(ParameterRangeError):
        store.update("Gaia", "angular_speed", -0.1)
    store.update("Gaia", "angular_speed", 1.0)
    assert store.get("Gaia").angular_speed == 1.0


def test_inconsistent_limits_rejected():
    with pytest.raises(ValueError):
        ParameterLimits(speed_min=2.0, speed_max=1.0)


def test_reset_one_and_all(store):
    store.update("Gaia", "radius", 30.0)
    store.update("Ares", "radius", 40.0)
    store.reset("Gaia")
    assert store.get("Gaia").radius == 20.0
    assert store.get("Ares").radius == 40.0
    store.reset()
    assert store.get("Ares").radius == 30.0
    with pytest.raises(UnknownBodyError):
        store.reset("Atlantis")


def test_concurrent_updates_to_different_bodies_are_independent(store):
    targets = {"Gaia": 21.0, "Ares": 31.0, "Luna": 2.5, "Selene": 3.5}

    def worker(body_id, final):
        for i in range(200):
            store.update(body_id, "radius", final + (i % 3))
        store.update(body_id, "radius", final)

    threads = [threading.Thread(target=worker, args=item) for item in targets.items()]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    for body_id, final in targets.items():
        assert store.get(body_id).radius == final


def test_snapshots_taken_during_updates_see_old_or_new_values(store):
    radii = {"Gaia": (20.0, 21.0, 22.0), "Ares": (30.0, 31.0, 32.0)}
    speeds = {"Gaia": (0.5, 0.6), "Ares": (0.25, 0.35)}
    untouched = {body_id: store.get(body_id) for body_id in ("Sun", "Luna", "Selene")}
    done = threading.Event()
    bad = []

    def writer(body_id):
        for i in range(300):
            store.update(body_id, "radius", radii[body_id][1 + i % 2])
            store.update(body_id, "angular_speed", speeds[body_id][i % 2])

    def reader():
        while not done.is_set():
            snap = store.snapshot()
            for body_id in radii:
                p = snap[body_id]
                if p.radius not in radii[body_id] or p.angular_speed not in speeds[body_id]:
                    bad.append((body_id, p))
            for body_id, expected in untouched.items():
                if snap[body_id] != expected:
                    bad.append((body_id, snap[body_id]))
            snap["Gaia"].radius = -1.0

    writers = [threading.Thread(target=writer, args=(body_id,)) for body_id in radii]
    watcher = threading.Thread(target=reader)
    watcher.start()
    for t in writers:
        t.start()
    for t in writers:
        t.join()
    done.set()
    watcher.join()

    assert bad == []
    assert store.get("Gaia").radius in radii["Gaia"]
