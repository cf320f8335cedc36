"""
Orrery: an interactive solar system with live-editable orbits and click-to-focus.
"""
from .catalog_loader import load_catalog
from .data_models import BodyKind, BodyState, CelestialBody, FocusState, OrbitalParameters
from .errors import (
    HierarchyResolutionError,
    OrreryError,
    ParameterRangeError,
    RegistryInvalidError,
    UnknownBodyError,
)
from .focus import FocusController
from .kinematics import KinematicsEngine, compute_positions
from .parameters import ParameterStore
from .registry import BodyRegistry
from .simulation import SimulationEngine
