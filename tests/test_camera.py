import math

import pytest

from orrery.camera import OrbitCamera
from orrery.constants import DEFAULT_PITCH, MAX_UNITS_PER_PIXEL, MIN_UNITS_PER_PIXEL, TOP_DOWN_PITCH
from orrery.data_models import FocusState


@pytest.fixture
def camera():
    cam = OrbitCamera(units_per_pixel=0.1, pitch=TOP_DOWN_PITCH)
    cam.set_viewport_size(800, 600)
    return cam


def test_target_projects_to_screen_centre(camera):
    camera.look_at((5.0, 0.0, -3.0))
    assert camera.world_to_screen((5.0, 0.0, -3.0)) == (400, 300)


def test_top_down_projection(camera):
    assert camera.world_to_screen((10.0, 0.0, 0.0)) == (500, 300)
    assert camera.world_to_screen((0.0, 0.0, 10.0)) == (400, 400)


def test_screen_to_ground_inverts_projection(camera):
    camera.pitch = DEFAULT_PITCH
    camera.look_at((3.0, 0.0, 4.0))
    ground = camera.screen_to_ground(camera.world_to_screen((13.0, 0.0, -6.0)))
    assert ground[0] == pytest.approx(13.0, abs=0.2)
    assert ground[2] == pytest.approx(-6.0, abs=0.2)


def test_focus_listener_follows_and_drops_pan(camera):
    camera.on_focus(FocusState("Mars", (10.0, 0.0, 0.0), True))
    camera.pan_pixels(50, 0)
    assert camera.offset != (0.0, 0.0, 0.0)

    camera.on_focus(FocusState("Mars", (11.0, 0.0, 1.0), True))
    assert camera.offset != (0.0, 0.0, 0.0)
    assert camera.target == (11.0, 0.0, 1.0)

    camera.on_focus(FocusState("Venus", (-4.0, 0.0, 2.0), True))
    assert camera.offset == (0.0, 0.0, 0.0)
    assert camera.world_to_screen((-4.0, 0.0, 2.0)) == (400, 300)


def test_zoom_is_clamped(camera):
    for _ in range(50):
        camera.zoom(10.0)
    assert camera.upp == MIN_UNITS_PER_PIXEL
    for _ in range(50):
        camera.zoom(0.1)
    assert camera.upp == MAX_UNITS_PER_PIXEL


def test_toggle_view(camera):
    camera.toggle_view()
    assert camera.pitch == DEFAULT_PITCH
    camera.toggle_view()
    assert camera.pitch == TOP_DOWN_PITCH


def test_depth_orders_near_bodies_last():
    cam = OrbitCamera(pitch=math.radians(35))
    assert cam.depth((0.0, 0.0, 5.0)) > cam.depth((0.0, 0.0, -5.0))
