import math

import pytest

from orrery.decorations import AsteroidBelt, Comet, solve_kepler
from orrery.vector_utils import vec_len


def test_belt_is_reproducible_from_seed():
    a = AsteroidBelt(count=50, seed=3)
    b = AsteroidBelt(count=50, seed=3)
    c = AsteroidBelt(count=50, seed=4)
    assert a.positions(12.0) == b.positions(12.0)
    assert a.positions(12.0) != c.positions(12.0)
    assert len(a) == 50


def test_belt_stays_between_its_radii():
    belt = AsteroidBelt(inner=10.0, outer=12.0, count=100)
    for t in (0.0, 5.0, 500.0):
        for (x, _, z), size in belt.positions(t):
            assert 10.0 - 1e-9 <= math.hypot(x, z) <= 12.0 + 1e-9
            assert size > 0


def test_inner_asteroids_move_faster():
    belt = AsteroidBelt(inner=10.0, outer=20.0, count=200)
    inner = min(belt.asteroids, key=lambda a: a.radius)
    outer = max(belt.asteroids, key=lambda a: a.radius)
    assert inner.angular_speed > outer.angular_speed


def test_belt_rejects_bad_radii():
    with pytest.raises(ValueError):
        AsteroidBelt(inner=5.0, outer=5.0)


@pytest.mark.parametrize("M", [0.0, 0.5, 2.0, 4.0, 6.0])
@pytest.mark.parametrize("e", [0.0, 0.3, 0.8])
def test_solve_kepler_satisfies_equation(M, e):
    E = solve_kepler(M, e)
    assert E - e * math.sin(E) == pytest.approx(M % (2 * math.pi), abs=1e-9)


def test_comet_distance_bounded_by_apsides():
    comet = Comet(perihelion=8.0, aphelion=130.0, angular_speed=0.05, phase=0.0)
    assert comet.position(0.0) == pytest.approx((8.0, 0.0, 0.0))
    for t in range(0, 200, 7):
        assert 8.0 - 1e-6 <= vec_len(comet.position(float(t))) <= 130.0 + 1e-6


def test_comet_tail_longest_at_perihelion():
    comet = Comet(perihelion=8.0, aphelion=130.0, angular_speed=0.05, phase=0.0, max_tail=12.0)
    assert comet.tail_length(0.0) == pytest.approx(12.0)
    aphelion_time = math.pi / 0.05
    assert comet.tail_length(aphelion_time) == pytest.approx(12.0 * 8.0 / 130.0)
    assert comet.tail_direction(0.0) == pytest.approx((1.0, 0.0, 0.0))


def test_comet_path_is_closed():
    pts = Comet().path_points(segments=60)
    assert len(pts) == 61
    assert pts[0] == pytest.approx(pts[-1])
