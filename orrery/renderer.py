#!/usr/bin/env python3
"""
Pygame scene renderer: draws each frame produced by the simulation engine.

Runs in a background thread. Each tick it handles input, advances the engine's
clock, asks for a frame and draws it: starfield, orbit rings, asteroid belt,
comet, bodies (textured when a texture can be loaded, tinted otherwise),
labels, the focus halo and the HUD.

Clicks are resolved to the nearest body under the cursor and forwarded to the
focus controller. The camera follows the focus state carried by each frame,
so it is only ever touched on the render thread.
"""
import logging
import math
import os
import random
import threading
import time
from typing import Dict, List, Optional, Tuple

import pygame
from pygame import gfxdraw

from .camera import OrbitCamera
from .constants import (
    ASTEROID_COLOR,
    BACKGROUND_COLOR,
    COMET_COLOR,
    DEFAULT_ORBIT_COLOR,
    HUD_COLOR,
    LABEL_COLOR,
    MOON_ORBIT_COLOR,
    SAFE_COORD_LIMIT,
    SELECTION_COLOR,
    STARFIELD_COUNT,
    TARGET_FPS,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from .data_models import BodyKind
from .errors import UnknownBodyError
from .kinematics import orbit_ring_points
from .simulation import Frame, SimulationEngine
from .utils import hex_to_rgb
from .vector_utils import vec_add, vec_scale

logger = logging.getLogger(__name__)

MIN_PICK_RADIUS_PX = 6


def _safe_point(pt):
    try:
        x, y = int(pt[0]), int(pt[1])
    except (TypeError, ValueError, OverflowError):
        return None
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None


def body_pixel_radius(camera: OrbitCamera, visual_size: float) -> int:
    return max(2, min(400, int(camera.pixels(visual_size))))


def pick_body(camera: OrbitCamera, frame: Frame, screen_pos: Tuple[int, int]) -> Optional[str]:
    """
    Body id under `screen_pos`, or None.
    When several overlap, the one drawn on top (closest to the viewer) wins.
    """
    best_id = None
    best_depth = -math.inf
    for body_id, state in frame.bodies.items():
        sx, sy = camera.world_to_screen(state.position)
        r = max(MIN_PICK_RADIUS_PX, body_pixel_radius(camera, frame.params[body_id].visual_size) + 4)
        dx = sx - screen_pos[0]
        dy = sy - screen_pos[1]
        if dx * dx + dy * dy <= r * r:
            depth = camera.depth(state.position)
            if depth > best_depth:
                best_depth = depth
                best_id = body_id
    return best_id


class TextureCache:
    """
    Loads texture references relative to `texture_dir`.

    A reference that cannot be loaded is remembered as missing and the body is
    drawn with its tint colour instead.
    """

    def __init__(self, texture_dir: Optional[str]):
        self.texture_dir = texture_dir
        self._images: Dict[str, Optional[pygame.Surface]] = {}
        self._scaled: Dict[Tuple[str, int], pygame.Surface] = {}

    def get(self, ref: Optional[str]) -> Optional[pygame.Surface]:
        if ref is None or self.texture_dir is None:
            return None
        if ref not in self._images:
            path = os.path.join(self.texture_dir, ref)
            try:
                self._images[ref] = pygame.image.load(path).convert()
            except (pygame.error, FileNotFoundError) as exc:
                logger.warning("Texture %s unavailable (%s); using tint colour", path, exc)
                self._images[ref] = None
        return self._images[ref]

    def scaled(self, ref: str, diameter: int) -> Optional[pygame.Surface]:
        image = self.get(ref)
        if image is None:
            return None
        key = (ref, diameter)
        if key not in self._scaled:
            if len(self._scaled) > 256:
                self._scaled.clear()
            self._scaled[key] = pygame.transform.smoothscale(image, (diameter * 2, diameter))
        return self._scaled[key]


class SceneRenderer(threading.Thread):
    """
    Pygame loop: draws bodies, orbits, belt, comet, labels and HUD.
    Handles click-to-focus, panning, zoom and view toggling.
    """

    def __init__(self, engine: SimulationEngine, texture_dir: Optional[str] = None):
        super().__init__(daemon=True)
        self.engine = engine
        self.camera = OrbitCamera()
        self.textures = TextureCache(texture_dir)
        self.surface = None
        self.clock = None
        self.font = None
        self.small_font = None
        self.dragging_background = False
        self.drag_start_screen = (0, 0)
        self.stars: List[Tuple[int, int, int]] = []
        self.show_labels = True
        self.running = True

    def run(self):
        pygame.init()
        pygame.display.set_caption("Orrery - Viewport")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.camera.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("consolas", 16)
        self.small_font = pygame.font.SysFont("consolas", 12)
        self._build_starfield(VIEW_WIDTH, VIEW_HEIGHT)

        last_time = time.perf_counter()
        try:
            while self.running and self.engine.running:
                now = time.perf_counter()
                real_dt = now - last_time
                last_time = now

                self.handle_events()
                if not (self.running and self.engine.running):
                    break
                self.engine.advance(real_dt)
                frame = self.engine.frame()
                self.follow_focus(frame)
                self.draw(frame)

                self.clock.tick(TARGET_FPS)
        finally:
            self.engine.running = False
            pygame.quit()

    def _build_starfield(self, w: int, h: int):
        rng = random.Random(1)
        self.stars = [(rng.randrange(w), rng.randrange(h), rng.randrange(60, 200)) for _ in range(STARFIELD_COUNT)]

    # -----------------------
    # Input
    # -----------------------

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.engine.running = False
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.set_viewport_size(event.w, event.h)
                self._build_starfield(event.w, event.h)

            elif event.type == pygame.MOUSEWHEEL:
                self.camera.zoom(1.1 if event.y > 0 else 1.0 / 1.1)

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1:
                    self.handle_click(event.pos)
                elif event.button in (2, 3):
                    self.dragging_background = True
                    self.drag_start_screen = event.pos

            elif event.type == pygame.MOUSEBUTTONUP:
                if event.button in (1, 2, 3):
                    self.dragging_background = False

            elif event.type == pygame.MOUSEMOTION and self.dragging_background:
                dx = event.pos[0] - self.drag_start_screen[0]
                dy = event.pos[1] - self.drag_start_screen[1]
                self.camera.pan_pixels(dx, dy)
                self.drag_start_screen = event.pos

            elif event.type == pygame.KEYDOWN:
                self.handle_keydown(event.key)

    def handle_keydown(self, key):
        if key == pygame.K_SPACE:
            self.engine.toggle_play()
        elif key == pygame.K_TAB:
            self.engine.focus.cycle(-1 if pygame.key.get_mods() & pygame.KMOD_SHIFT else 1)
        elif key == pygame.K_ESCAPE:
            self.engine.focus.clear()
        elif key == pygame.K_v:
            self.camera.toggle_view()
        elif key == pygame.K_l:
            self.show_labels = not self.show_labels
        elif key in (pygame.K_EQUALS, pygame.K_PLUS, pygame.K_KP_PLUS):
            self.camera.zoom(1.1)
        elif key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            self.camera.zoom(1.0 / 1.1)

    def handle_click(self, pos):
        frame = self.engine.last_frame
        if frame is None:
            return
        body_id = pick_body(self.camera, frame, pos)
        if body_id is None:
            self.dragging_background = True
            self.drag_start_screen = pos
            return
        try:
            self.engine.select(body_id)
        except UnknownBodyError as exc:
            logger.warning("Pick ignored: %s", exc)

    # -----------------------
    # Drawing
    # -----------------------

    def _polyline(self, surf, color, points, closed=False):
        pts = [p for p in (_safe_point(self.camera.world_to_screen(w)) for w in points) if p]
        if len(pts) > 1:
            pygame.draw.aalines(surf, color, closed, pts)

    def draw_orbits(self, surf, frame: Frame):
        registry = self.engine.registry
        for body in registry.list_bodies():
            if body.kind is BodyKind.STAR:
                continue
            if body.kind is BodyKind.PLANET:
                center = frame.bodies[registry.star.id].position
                radius = frame.params[body.id].radius
                color = hex_to_rgb(body.orbit_color or DEFAULT_ORBIT_COLOR)
            else:
                center = frame.bodies[body.parent_id].position
                radius = frame.params[body.parent_id].visual_size + frame.params[body.id].radius
                color = hex_to_rgb(MOON_ORBIT_COLOR)
            color = tuple(int(c * 0.6) for c in color)
            self._polyline(surf, color, orbit_ring_points(center, radius))

    def draw_belt_and_comet(self, surf, frame: Frame):
        for pos, size in frame.asteroids:
            p = _safe_point(self.camera.world_to_screen(pos))
            if p:
                r = max(1, int(self.camera.pixels(size)))
                if r <= 1:
                    surf.set_at(p, ASTEROID_COLOR)
                else:
                    gfxdraw.filled_circle(surf, p[0], p[1], r, ASTEROID_COLOR)

        comet = self.engine.comet
        if comet is None or frame.comet is None:
            return
        self._polyline(surf, (40, 50, 70), comet.path_points(), closed=True)
        head = _safe_point(self.camera.world_to_screen(frame.comet))
        tail_end = vec_add(frame.comet, vec_scale(comet.tail_direction(frame.time), comet.tail_length(frame.time)))
        tail = _safe_point(self.camera.world_to_screen(tail_end))
        if head and tail:
            pygame.draw.line(surf, (120, 150, 190), head, tail, 2)
        if head:
            gfxdraw.filled_circle(surf, head[0], head[1], 3, COMET_COLOR)

    def draw_body(self, surf, body, state, params, focused: bool):
        center = _safe_point(self.camera.world_to_screen(state.position))
        if center is None:
            return
        r = body_pixel_radius(self.camera, params.visual_size)

        if body.ring is not None:
            inner, outer = body.ring
            for k in range(4):
                rr = params.visual_size * (inner + (outer - inner) * k / 3.0)
                self._polyline(surf, (200, 190, 160), orbit_ring_points(state.position, rr, 64))

        texture = self.textures.scaled(body.texture_ref, 2 * r) if body.texture_ref else None
        if texture is not None:
            # Scroll the wrapped texture sideways to show spin
            d = 2 * r
            shift = int((state.spin_angle % (2.0 * math.pi)) / (2.0 * math.pi) * 2 * d)
            sphere = pygame.Surface((d, d), pygame.SRCALPHA)
            sphere.blit(texture, (-shift, 0))
            sphere.blit(texture, (d * 2 - shift, 0))
            mask = pygame.Surface((d, d), pygame.SRCALPHA)
            pygame.draw.circle(mask, (255, 255, 255, 255), (r, r), r)
            sphere.blit(mask, (0, 0), special_flags=pygame.BLEND_RGBA_MIN)
            surf.blit(sphere, (center[0] - r, center[1] - r))
        else:
            gfxdraw.filled_circle(surf, center[0], center[1], r, hex_to_rgb(params.tint_color))
            gfxdraw.aacircle(surf, center[0], center[1], r, (0, 0, 0))

        if focused:
            gfxdraw.aacircle(surf, center[0], center[1], r + 4, SELECTION_COLOR)

        if (self.show_labels and body.kind is not BodyKind.MOON) or focused:
            color = hex_to_rgb(body.orbit_color) if body.orbit_color else LABEL_COLOR
            draw_text(surf, self.small_font, body.id, center[0] - 4 * len(body.id), center[1] - r - 16, color)

    def follow_focus(self, frame: Frame):
        """Re-aim the camera at the frame's published focus target."""
        self.camera.on_focus(frame.focus)

    def draw(self, frame: Frame):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)
        for x, y, b in self.stars:
            surf.set_at((x, y), (b, b, b))

        self.draw_orbits(surf, frame)
        self.draw_belt_and_comet(surf, frame)

        registry = self.engine.registry
        order = sorted(frame.bodies.items(), key=lambda kv: self.camera.depth(kv[1].position))
        focus = frame.focus
        for body_id, state in order:
            self.draw_body(surf, registry.get(body_id), state, frame.params[body_id],
                           focus.selected and focus.target_id == body_id)

        # HUD text
        draw_text(surf, self.font, f"Focused: {focus.target_id}", 10, 10, (255, 255, 255))
        with self.engine.lock:
            ts = self.engine.time_scale
            playing = self.engine.playing
        draw_text(surf, self.font, f"t = {frame.time:8.1f} s   Speed: {ts:.2f}x  [{'Playing' if playing else 'Paused'}]",
                  10, 30, HUD_COLOR)
        draw_text(surf, self.small_font,
                  "Click: focus | Tab: next body | Esc: Sun | Right-drag: pan | Wheel: zoom | V: view | L: labels | Space: pause",
                  10, self.camera.viewport_size[1] - 20, (150, 150, 150))

        pygame.display.flip()


def draw_text(surface, font, text, x, y, color):
    img = font.render(text, True, color)
    surface.blit(img, (x, y))
