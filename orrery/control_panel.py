#!/usr/bin/env python3
"""
Dear PyGui control panel: per-body parameter sliders, focus list and playback.

Every widget edit goes through ControlPanelBridge.apply(); when an edit is
rejected the widget snaps back to the value still held by the store and the
status line shows the reason.
"""
import logging
from typing import Dict, Tuple

import dearpygui.dearpygui as dpg

from .bridge import ControlPanelBridge, PanelFolder
from .constants import MAX_TIME_SCALE, MIN_TIME_SCALE
from .errors import UnknownBodyError
from .simulation import SimulationEngine
from .utils import hex_to_rgb, rgb_to_hex

logger = logging.getLogger(__name__)

SYNC_EVERY_FRAMES = 6  # ~10 Hz at 60 FPS


class ControlPanel:
    """
    Dear PyGui interface: one collapsing header per planet (moons nested),
    focus selection, play/pause, time scale and reset.
    """

    def __init__(self, engine: SimulationEngine, bridge: ControlPanelBridge):
        self.engine = engine
        self.bridge = bridge

        # (body_id, field) -> widget id
        self.widgets: Dict[Tuple[str, str], int] = {}
        self.status_msg_id = None
        self.focus_text_id = None
        self.time_text_id = None
        self.focus_list_id = None

        self._build_ui()
        self._schedule_sync()

    # -----------------------
    # UI Construction
    # -----------------------

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title="Orrery - Controls", width=420, height=820)

        with dpg.window(label="Controls", width=400, height=800, pos=(10, 10), tag="main_window"):
            self.focus_text_id = dpg.add_text(f"Focused: {self.engine.focus.display_name()}")
            self.time_text_id = dpg.add_text("t = 0.0 s")
            with dpg.group(horizontal=True):
                dpg.add_button(label="Play/Pause", callback=self._toggle_play)
                dpg.add_button(label="Reset all", callback=lambda: self._reset(None))
                dpg.add_button(label="Focus Sun", callback=self._clear_focus)
            dpg.add_slider_float(label="Time scale", min_value=MIN_TIME_SCALE, max_value=MAX_TIME_SCALE,
                                 default_value=self.engine.time_scale, width=220,
                                 callback=lambda s, a, u: self._set_time_scale(a), tag="time_scale_slider")
            self.focus_list_id = dpg.add_listbox(items=self.engine.focus.focusables(), width=380, num_items=6,
                                                 default_value=self.engine.focus.current().target_id,
                                                 callback=self._on_select_body)
            self.status_msg_id = dpg.add_text("")
            dpg.add_separator()

            for folder in self.bridge.panel_layout():
                with dpg.collapsing_header(label=folder.body_id, default_open=False):
                    self._add_folder_widgets(folder)
                    for child in folder.children:
                        with dpg.tree_node(label=child.body_id, default_open=False):
                            self._add_folder_widgets(child)

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    def _add_folder_widgets(self, folder: PanelFolder):
        for spec in folder.sliders:
            wid = dpg.add_slider_float(label=spec.label, min_value=spec.min_value, max_value=spec.max_value,
                                       default_value=spec.value, width=220,
                                       callback=self._on_slider, user_data=(spec.body_id, spec.field))
            self.widgets[(spec.body_id, spec.field)] = wid
        if folder.color is not None:
            r, g, b = hex_to_rgb(folder.color)
            wid = dpg.add_color_edit(default_value=(r, g, b, 255), label="color", no_alpha=True, width=220,
                                     callback=self._on_color, user_data=(folder.body_id, "tint_color"))
            self.widgets[(folder.body_id, "tint_color")] = wid
        dpg.add_button(label=f"Reset {folder.body_id}", user_data=folder.body_id,
                       callback=lambda s, a, u: self._reset(u))

    # -----------------------
    # UI Callbacks
    # -----------------------

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=(255, 120, 120))

    def _apply(self, sender, body_id: str, field_name: str, value):
        result = self.bridge.apply(body_id, field_name, value)
        if result.ok:
            self._set_status(f"{body_id} {field_name} = {result.value}")
            return
        self._set_error(result.message)
        # Put the widget back on the value the store kept
        if result.value is not None:
            if field_name == "tint_color":
                r, g, b = hex_to_rgb(result.value)
                dpg.set_value(sender, (r, g, b, 255))
            else:
                dpg.set_value(sender, result.value)

    def _on_slider(self, sender, app_data, user_data):
        body_id, field_name = user_data
        self._apply(sender, body_id, field_name, float(app_data))

    def _on_color(self, sender, app_data, user_data):
        body_id, field_name = user_data
        # get_value reports 0..255 channels regardless of the callback's format
        self._apply(sender, body_id, field_name, rgb_to_hex(dpg.get_value(sender)))

    def _on_select_body(self, sender, app_data, user_data):
        try:
            self.engine.select(app_data)
        except UnknownBodyError as exc:
            self._set_error(str(exc))
            return
        self._set_status(f"Focused {app_data}.")

    def _clear_focus(self):
        state = self.engine.focus.clear()
        self._set_status(f"Focused {state.target_id}.")

    def _toggle_play(self):
        playing = self.engine.toggle_play()
        self._set_status(f"Simulation {'Playing' if playing else 'Paused'}.")

    def _set_time_scale(self, value):
        try:
            self.engine.set_time_scale(value)
        except ValueError as exc:
            self._set_error(str(exc))

    def _reset(self, body_id):
        ok, msg = self.bridge.reset(body_id)
        if not ok:
            self._set_error(msg)
            return
        self._refresh_widgets()
        self._set_status(msg)

    def _refresh_widgets(self):
        for (body_id, field_name), wid in self.widgets.items():
            value = self.bridge.current_value(body_id, field_name)
            if field_name == "tint_color":
                r, g, b = hex_to_rgb(value)
                dpg.set_value(wid, (r, g, b, 255))
            else:
                dpg.set_value(wid, value)

    # -----------------------
    # Periodic sync
    # -----------------------

    def _schedule_sync(self):
        """Reschedule the periodic sync callback using frame callbacks."""
        dpg.set_frame_callback(dpg.get_frame_count() + SYNC_EVERY_FRAMES, self._sync_ui_with_sim)

    def _sync_ui_with_sim(self):
        state = self.engine.focus.current()
        dpg.set_value(self.focus_text_id, f"Focused: {state.target_id}")
        dpg.set_value(self.focus_list_id, self.engine.focus.pending() or state.target_id)
        with self.engine.lock:
            t = self.engine.sim_time
            playing = self.engine.playing
        dpg.set_value(self.time_text_id, f"t = {t:.1f} s  [{'Playing' if playing else 'Paused'}]")
        if not self.engine.running:
            dpg.stop_dearpygui()
            return
        self._schedule_sync()

    def run(self):
        try:
            dpg.start_dearpygui()
        finally:
            dpg.destroy_context()
