#!/usr/bin/env python3
"""
Orrery application entry point and UI/renderer coordination.

What this module does
- Loads and validates the body catalog, then builds one SimulationEngine for the
  lifetime of the process.
- Starts two event loops: a pygame rendering thread (viewport) and the Dear PyGui
  control panel (running on the main thread).
- Tears everything down when either window closes.

Threading model
- SceneRenderer runs in a background thread: input handling for the viewport,
  advancing the clock, evaluating a frame and drawing it.
- ControlPanel runs on the main thread via Dear PyGui. Its callbacks go through
  ControlPanelBridge into the lock-protected parameter store.

Running
1) Install: `pip install -e .`
2) Run: `python solar_system.py [--textures DIR] [--catalog FILE]`

A malformed catalog aborts startup with exit status 2.
"""
import logging
import sys
from typing import Optional, Sequence

from orrery.bridge import ControlPanelBridge
from orrery.catalog_loader import load_catalog
from orrery.config import SimulationConfig
from orrery.errors import RegistryInvalidError

logger = logging.getLogger(__name__)


def setup_logging(level):
    """Setup logging with specified level"""
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        force=True,
        stream=sys.stdout,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    config = SimulationConfig.from_args(argv)
    setup_logging(config.log_level)

    try:
        registry = load_catalog(config.catalog_path)
    except RegistryInvalidError as exc:
        logger.error("Invalid body catalog: %s", exc)
        return 2

    # Imported late so --help and catalog errors don't need a display
    from orrery.control_panel import ControlPanel
    from orrery.renderer import SceneRenderer
    from orrery.simulation import SimulationEngine

    with SimulationEngine(registry, config) as engine:
        renderer = SceneRenderer(engine, texture_dir=config.texture_dir)
        renderer.start()

        ui = ControlPanel(engine, ControlPanelBridge(engine.params, registry))
        try:
            ui.run()
        finally:
            engine.running = False
            renderer.running = False
            renderer.join(timeout=2.0)
    return 0


if __name__ == "__main__":
    sys.exit(main())
