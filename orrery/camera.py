#!/usr/bin/env python3
"""
Camera utilities for world-to-screen transforms.

The camera looks at a target point from above the orbital plane, tilted by
`pitch` (90 degrees is straight down). Projection is orthographic, so zoom is
a plain units-per-pixel scale.
"""
import math
from typing import Optional, Tuple

from .constants import (
    DEFAULT_PITCH,
    DEFAULT_UNITS_PER_PIXEL,
    MAX_UNITS_PER_PIXEL,
    MIN_UNITS_PER_PIXEL,
    TOP_DOWN_PITCH,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from .data_models import FocusState
from .vector_utils import Vec3, clamp, vec_add, vec_sub


class OrbitCamera:
    """
    Tilted orthographic camera that follows the published focus target.

    Attributes:
        target: world-space point at the centre of the screen.
        offset: user pan on top of the target, reset when the focus changes body.
        upp: scene units per pixel (smaller means zoomed-in).
        pitch: tilt above the orbital plane in radians.
        viewport_size: (width, height) in pixels.
    """

    def __init__(self, target: Vec3 = (0.0, 0.0, 0.0), units_per_pixel=DEFAULT_UNITS_PER_PIXEL,
                 pitch: float = DEFAULT_PITCH):
        self.target = target
        self.offset: Vec3 = (0.0, 0.0, 0.0)
        self.upp = units_per_pixel
        self.pitch = pitch
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)
        self._target_id: Optional[str] = None

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    @property
    def center(self) -> Vec3:
        return vec_add(self.target, self.offset)

    def look_at(self, position: Vec3) -> None:
        """Re-aim instantly at `position`."""
        self.target = position

    def on_focus(self, state: FocusState) -> None:
        """Follow a published focus state, dropping any pan when the body changes."""
        if state.target_id != self._target_id:
            self.offset = (0.0, 0.0, 0.0)
            self._target_id = state.target_id
        self.look_at(state.world_position)

    def world_to_screen(self, pos: Vec3) -> Tuple[int, int]:
        dx, dy, dz = vec_sub(pos, self.center)
        px = dx / self.upp + self.viewport_size[0] / 2
        py = (dz * math.sin(self.pitch) - dy * math.cos(self.pitch)) / self.upp + self.viewport_size[1] / 2
        return (int(px), int(py))

    def depth(self, pos: Vec3) -> float:
        """Distance toward the viewer; draw in ascending order."""
        _, dy, dz = vec_sub(pos, self.center)
        return dz * math.cos(self.pitch) + dy * math.sin(self.pitch)

    def screen_to_ground(self, screen: Tuple[int, int]) -> Vec3:
        """Point on the y = 0 plane under a screen pixel."""
        cx, cy, cz = self.center
        wx = (screen[0] - self.viewport_size[0] / 2) * self.upp + cx
        wz = (screen[1] - self.viewport_size[1] / 2) * self.upp / math.sin(self.pitch) + cz
        return (wx, 0.0, wz)

    def pixels(self, world_length: float) -> float:
        return world_length / self.upp

    def zoom(self, factor: float) -> None:
        factor = clamp(factor, 0.05, 20.0)
        self.upp = clamp(self.upp * (1.0 / factor), MIN_UNITS_PER_PIXEL, MAX_UNITS_PER_PIXEL)

    def pan_pixels(self, dx_pixels: float, dy_pixels: float) -> None:
        ox, oy, oz = self.offset
        self.offset = (ox - dx_pixels * self.upp, oy, oz - dy_pixels * self.upp / math.sin(self.pitch))

    def toggle_view(self) -> None:
        """Switch between the tilted view and straight top-down."""
        self.pitch = DEFAULT_PITCH if self.pitch == TOP_DOWN_PITCH else TOP_DOWN_PITCH
