#!/usr/bin/env python3
"""
Shared constants for the orrery (scene units and seconds unless stated otherwise).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier.
"""
import math

# Body kinds (also the "kind" strings accepted by the catalog JSON)
KIND_STAR = "star"
KIND_PLANET = "planet"
KIND_MOON = "moon"

# Phase spacing so bodies sharing a speed formula don't start on top of each other
PLANET_PHASE_STEP = 0.55  # radians per planet ordinal
MOON_PHASE_STEP = 0.7  # radians per moon ordinal among its siblings

# Visual rolling (radians per second of elapsed time); ~0.0015 / 0.0025 rad per frame at 60 FPS
STAR_SPIN_RATE = 0.03
PLANET_SPIN_RATE = 0.09
MOON_SPIN_RATE = 0.15

# Parameter limits enforced by the parameter store
MIN_ANGULAR_SPEED = -20.0  # rad/s; negative is retrograde
MAX_ANGULAR_SPEED = 20.0
MAX_ORBIT_RADIUS = 500.0
MAX_VISUAL_SIZE = 50.0

# Control panel slider ranges (min, max) per kind and field, as in the original GUI
PLANET_SLIDER_RANGES = {
    "visual_size": (0.1, 12.0),
    "radius": (5.0, 120.0),
    "angular_speed": (0.001, 1.0),
}
MOON_SLIDER_RANGES = {
    "visual_size": (0.01, 2.0),
    "radius": (0.6, 10.0),
    "angular_speed": (0.1, 5.0),
}
STAR_SLIDER_RANGES = {
    "visual_size": (0.5, 10.0),
}

# Default tints
DEFAULT_PLANET_COLOR = "#888888"
DEFAULT_MOON_COLOR = "#bbbbbb"
DEFAULT_ORBIT_COLOR = "#00ffe7"
MOON_ORBIT_COLOR = "#ff00fa"

# Simulation clock
DEFAULT_TIME_SCALE = 1.0  # simulated seconds per real second
MIN_TIME_SCALE = 0.0
MAX_TIME_SCALE = 50.0
TARGET_FPS = 60

# Decorations
BELT_INNER_RADIUS = 31.0
BELT_OUTER_RADIUS = 36.0
BELT_ASTEROID_COUNT = 400
BELT_SEED = 7
BELT_BASE_SPEED = 0.1  # rad/s at the inner edge
COMET_PERIHELION = 8.0
COMET_APHELION = 130.0
COMET_ANGULAR_SPEED = 0.05
COMET_PHASE = math.pi / 3
COMET_MAX_TAIL = 12.0

# Rendering (viewport, pixels)
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
BACKGROUND_COLOR = (4, 6, 14)
STARFIELD_COUNT = 350
SELECTION_COLOR = (255, 255, 0)
ASTEROID_COLOR = (140, 130, 120)
COMET_COLOR = (210, 235, 255)
LABEL_COLOR = (235, 235, 235)
HUD_COLOR = (200, 200, 200)
ORBIT_SEGMENTS = 128

# Camera zoom bounds (scene units per pixel)
DEFAULT_UNITS_PER_PIXEL = 0.16
MIN_UNITS_PER_PIXEL = 0.005
MAX_UNITS_PER_PIXEL = 2.0
DEFAULT_PITCH = math.radians(35.0)  # tilt above the orbital plane
TOP_DOWN_PITCH = math.pi / 2

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
