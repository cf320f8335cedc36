#!/usr/bin/env python3
"""
Control panel bridge: the only path from widgets into the parameter store.

The widget layer never mutates parameters directly. It asks the bridge for the
panel layout, and forwards every edit through apply(), which recovers
ParameterRangeError / UnknownBodyError at the call site and hands back the value
the widget should display (the new one on success, the prior one on rejection).
"""
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from .constants import MOON_SLIDER_RANGES, PLANET_SLIDER_RANGES, STAR_SLIDER_RANGES
from .data_models import BodyKind, CelestialBody
from .errors import ParameterRangeError, UnknownBodyError
from .parameters import ParameterStore
from .registry import BodyRegistry

logger = logging.getLogger(__name__)

FIELD_LABELS = {
    "visual_size": "size",
    "radius": "orbit",
    "angular_speed": "speed",
    "tint_color": "color",
}


@dataclass(frozen=True)
class EditResult:
    ok: bool
    body_id: str
    field: str
    value: Any
    message: str = ""


@dataclass(frozen=True)
class SliderSpec:
    body_id: str
    field: str
    label: str
    min_value: float
    max_value: float
    value: float


@dataclass
class PanelFolder:
    """One collapsible section of the panel: a body plus its child folders."""
    body_id: str
    sliders: List[SliderSpec] = field(default_factory=list)
    color: Optional[str] = None  # current tint when the body has no texture
    children: List["PanelFolder"] = field(default_factory=list)


def _slider_ranges(body: CelestialBody):
    if body.kind is BodyKind.STAR:
        return STAR_SLIDER_RANGES
    if body.kind is BodyKind.MOON:
        return MOON_SLIDER_RANGES
    return PLANET_SLIDER_RANGES


class ControlPanelBridge:

    def __init__(self, store: ParameterStore, registry: BodyRegistry):
        self.store = store
        self.registry = registry

    def apply(self, body_id: str, field_name: str, value: Any) -> EditResult:
        """Forward one widget edit; never raises for bad input."""
        try:
            prior = getattr(self.store.get(body_id), field_name, None)
        except UnknownBodyError as exc:
            logger.warning("Edit rejected: %s", exc)
            return EditResult(False, body_id, field_name, None, str(exc))
        try:
            self.store.update(body_id, field_name, value)
        except ParameterRangeError as exc:
            logger.warning("Edit rejected: %s", exc)
            return EditResult(False, body_id, field_name, prior, str(exc))
        return EditResult(True, body_id, field_name, getattr(self.store.get(body_id), field_name))

    def current_value(self, body_id: str, field_name: str) -> Any:
        return getattr(self.store.get(body_id), field_name)

    def folder_for(self, body: CelestialBody) -> PanelFolder:
        p = self.store.get(body.id)
        folder = PanelFolder(body_id=body.id)
        for fname, (lo, hi) in _slider_ranges(body).items():
            current = getattr(p, fname)
            # Widen the slider when the catalog value sits outside the default range
            folder.sliders.append(SliderSpec(
                body_id=body.id,
                field=fname,
                label=FIELD_LABELS[fname],
                min_value=min(lo, current),
                max_value=max(hi, current),
                value=current,
            ))
        if body.texture_ref is None:
            folder.color = p.tint_color
        return folder

    def panel_layout(self) -> List[PanelFolder]:
        """Star folder, then one folder per planet with nested moon folders."""
        layout = [self.folder_for(self.registry.star)]
        for planet in self.registry.planets():
            folder = self.folder_for(planet)
            folder.children = [self.folder_for(m) for m in self.registry.moons_of(planet.id)]
            layout.append(folder)
        return layout

    def reset(self, body_id: Optional[str] = None) -> Tuple[bool, str]:
        try:
            self.store.reset(body_id)
        except UnknownBodyError as exc:
            logger.warning("Reset rejected: %s", exc)
            return False, str(exc)
        return True, f"Reset {body_id or 'all bodies'}."
