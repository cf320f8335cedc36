#!/usr/bin/env python3
"""
Simulation engine: the process-scoped owner of the orrery's state.

What this module does
- Wires the body registry, parameter store, kinematics engine, focus controller
  and decorations together.
- Owns the single elapsed-time clock. The render loop advances it with advance()
  and asks for a frame with frame(); kinematics itself stays a pure function of
  (time, parameters, hierarchy).

Lifecycle
- Create one SimulationEngine at startup, call close() at shutdown (or use it as
  a context manager). Using a closed engine raises RuntimeError.

Threading
- The render thread calls advance()/frame(); the control panel thread calls
  update_parameter()/select()/set_time_scale(). Clock and playback flags are
  guarded by a re-entrant lock; parameters are guarded by the store's own lock.
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .config import SimulationConfig
from .constants import MAX_TIME_SCALE, MIN_TIME_SCALE
from .data_models import BodyState, FocusState, OrbitalParameters
from .decorations import AsteroidBelt, Comet
from .focus import FocusController
from .kinematics import KinematicsEngine
from .parameters import ParameterStore
from .registry import BodyRegistry
from .vector_utils import Vec3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Frame:
    """Everything the view layer needs to draw one frame."""
    time: float
    bodies: Dict[str, BodyState]
    params: Dict[str, OrbitalParameters]
    focus: FocusState
    asteroids: List[Tuple[Vec3, float]] = field(default_factory=list)
    comet: Optional[Vec3] = None


class SimulationEngine:

    def __init__(self, registry: BodyRegistry, config: Optional[SimulationConfig] = None):
        self.lock = threading.RLock()
        self.config = config or SimulationConfig()
        self.registry = registry
        self.params = ParameterStore(registry.list_bodies(), self.config.limits)
        self.kinematics = KinematicsEngine(registry)
        self.focus = FocusController(registry)
        self.belt: Optional[AsteroidBelt] = AsteroidBelt(seed=self.config.belt_seed) if self.config.show_belt else None
        self.comet: Optional[Comet] = Comet() if self.config.show_comet else None

        self.sim_time = 0.0
        self.time_scale = self.config.time_scale
        self.playing = True
        self.running = True
        self._last_frame: Optional[Frame] = None
        self._closed = False
        logger.info("Simulation engine started for %r (%d bodies)", registry.name, len(registry))

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("simulation engine has been closed")

    # -----------------------
    # Clock
    # -----------------------

    def advance(self, dt_real_seconds: float) -> float:
        """Advance the clock by dt * time_scale while playing; returns the new time."""
        if dt_real_seconds < 0:
            raise ValueError("the clock cannot run backwards")
        with self.lock:
            self._check_open()
            if self.playing:
                self.sim_time += dt_real_seconds * self.time_scale
            return self.sim_time

    def set_time_scale(self, s: float) -> None:
        s = float(s)
        if not MIN_TIME_SCALE <= s <= MAX_TIME_SCALE:
            raise ValueError(f"time scale must be within [{MIN_TIME_SCALE}, {MAX_TIME_SCALE}]")
        with self.lock:
            self.time_scale = s

    def toggle_play(self) -> bool:
        with self.lock:
            self.playing = not self.playing
            return self.playing

    # -----------------------
    # Frames
    # -----------------------

    def frame(self) -> Frame:
        """Evaluate every body at the current clock value against one parameter snapshot."""
        with self.lock:
            self._check_open()
            t = self.sim_time
        params = self.params.snapshot()
        bodies = self.kinematics.compute_positions(t, params)
        focus = self.focus.on_frame(bodies)
        result = Frame(
            time=t,
            bodies=bodies,
            params=params,
            focus=focus,
            asteroids=self.belt.positions(t) if self.belt else [],
            comet=self.comet.position(t) if self.comet else None,
        )
        with self.lock:
            self._last_frame = result
        return result

    @property
    def last_frame(self) -> Optional[Frame]:
        with self.lock:
            return self._last_frame

    # -----------------------
    # Collaborator entry points
    # -----------------------

    def select(self, body_id: str) -> FocusState:
        self._check_open()
        last = self.last_frame
        return self.focus.select(body_id, last.bodies if last else None)

    def update_parameter(self, body_id: str, field_name: str, value: Any) -> None:
        self._check_open()
        self.params.update(body_id, field_name, value)

    # -----------------------
    # Teardown
    # -----------------------

    def close(self) -> None:
        with self.lock:
            if self._closed:
                return
            self._closed = True
            self.running = False
            self._last_frame = None
        logger.info("Simulation engine closed")

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "SimulationEngine":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
