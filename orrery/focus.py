#!/usr/bin/env python3
"""
Focus controller: which body the camera looks at.

States are NoSelection (the star at the origin) and Selected(body_id). Only
select(), cycle() and clear() change state; selection persists until replaced.
Every frame on_frame() refreshes the selected body's world position from that
frame's kinematic output, so the published target never lags a frame behind.

A published FocusState always carries a position taken from kinematic output.
When select() has no frame that contains the body, the id is held as pending
and the previous target stays published until on_frame() resolves it.

The controller does not move any camera. Collaborators subscribe with
add_listener() and re-aim whenever a new FocusState is published. Listeners
are called outside the lock, on the thread that caused the change.
"""
import logging
import threading
from typing import Callable, List, Mapping, Optional

from .data_models import BodyKind, BodyState, FocusState, ORIGIN
from .errors import HierarchyResolutionError, UnknownBodyError
from .registry import BodyRegistry

logger = logging.getLogger(__name__)

FocusListener = Callable[[FocusState], None]


class FocusController:

    def __init__(self, registry: BodyRegistry):
        self.lock = threading.RLock()
        self.registry = registry
        self._default = FocusState(target_id=registry.star.id, world_position=ORIGIN, selected=False)
        self._state = self._default
        self._pending: Optional[str] = None
        self._positions: Mapping[str, BodyState] = {}
        self._listeners: List[FocusListener] = []
        self._focusables = self._build_focus_order()

    def _build_focus_order(self) -> List[str]:
        """Star first, then planets by base orbit radius, each followed by its moons."""
        order = [self.registry.star.id]
        for planet in sorted(self.registry.planets(), key=lambda b: b.base_orbit_radius):
            order.append(planet.id)
            order.extend(m.id for m in self.registry.moons_of(planet.id))
        return order

    # -----------------------
    # Listeners
    # -----------------------

    def add_listener(self, callback: FocusListener) -> None:
        with self.lock:
            self._listeners.append(callback)

    def remove_listener(self, callback: FocusListener) -> None:
        with self.lock:
            self._listeners.remove(callback)

    def _swap(self, state: FocusState) -> List[FocusListener]:
        """Install `state`; returns the listeners to notify. Caller holds the lock."""
        changed = state != self._state
        self._state = state
        return list(self._listeners) if changed else []

    @staticmethod
    def _notify(listeners: List[FocusListener], state: FocusState) -> None:
        for callback in listeners:
            callback(state)

    # -----------------------
    # State machine
    # -----------------------

    def current(self) -> FocusState:
        with self.lock:
            return self._state

    def pending(self) -> Optional[str]:
        """Id selected but not yet published because no frame has placed it."""
        with self.lock:
            return self._pending

    def _target_id(self) -> str:
        return self._pending or self._state.target_id

    def select(self, body_id: str, positions: Optional[Mapping[str, BodyState]] = None) -> FocusState:
        """
        Focus on `body_id` and return the published state. Unknown ids raise
        UnknownBodyError and leave the previous selection untouched.

        The target position comes from `positions` when given, otherwise from
        the last frame seen. If neither places the body, the selection waits
        for the next on_frame() and the previous state stays published.
        """
        if body_id not in self.registry:
            raise UnknownBodyError(body_id)
        with self.lock:
            if positions is not None:
                self._positions = positions
            frame = self._positions
            if body_id in frame:
                position = frame[body_id].position
            elif self.registry.get(body_id).kind is BodyKind.STAR:
                position = ORIGIN
            else:
                self._pending = body_id
                logger.debug("Focus -> %s (waiting for next frame)", body_id)
                return self._state
            self._pending = None
            state = FocusState(target_id=body_id, world_position=position, selected=True)
            listeners = self._swap(state)
        logger.info("Focus -> %s", body_id)
        self._notify(listeners, state)
        return state

    def clear(self) -> FocusState:
        """Back to NoSelection (the star at the origin)."""
        with self.lock:
            self._pending = None
            listeners = self._swap(self._default)
        self._notify(listeners, self._default)
        return self._default

    def cycle(self, direction: int = 1) -> FocusState:
        """Step forwards (1) or backwards (-1) through the focusable bodies."""
        with self.lock:
            current = self._target_id()
        idx = self._focusables.index(current) if current in self._focusables else 0
        return self.select(self._focusables[(idx + direction) % len(self._focusables)])

    def on_frame(self, positions: Mapping[str, BodyState]) -> FocusState:
        """Recompute the target position from this frame's kinematic output."""
        with self.lock:
            state = self._state
            if self._pending is None and not state.selected:
                self._positions = positions
                return state
            target = self._target_id()
        try:
            position = positions[target].position
        except KeyError:
            raise HierarchyResolutionError(
                f"focused body {target!r} missing from frame output"
            ) from None
        with self.lock:
            self._positions = positions
            if self._target_id() != target:
                # A select() landed while this frame was being read; it wins
                return self._state
            self._pending = None
            state = FocusState(target_id=target, world_position=position, selected=True)
            listeners = self._swap(state)
        self._notify(listeners, state)
        return state

    def display_name(self) -> str:
        return self.current().target_id

    def focusables(self) -> List[str]:
        return list(self._focusables)
