"""
Photon random-walk simulation core.

A photon starts at the centre of a sphere and takes small randomly oriented
steps until it crosses the escape radius. This package provides:
- Walker: single-photon state and the macro/micro step update
- WalkerEngine: batched stepping of many walkers plus geometry snapshots
- Angle sources: the reference (pole-biased) sampler and an isotropic one
- geometry: transforms for drawing path segments and markers
"""

from .engine import Marker, WalkerEngine, run_model
from .params import PRESETS, InvalidParameterError, WalkParams, from_preset
from .sampling import (
    IsotropicAngleSource,
    SequenceAngleSource,
    UniformAngleSource,
    make_source,
)
from .walker import StepOutcome, StepStatus, Walker
from . import geometry, utils

__all__ = [
    # Simulation
    "WalkerEngine",
    "Walker",
    "run_model",
    "Marker",
    "StepOutcome",
    "StepStatus",
    # Configuration
    "WalkParams",
    "PRESETS",
    "from_preset",
    "InvalidParameterError",
    # Randomness
    "UniformAngleSource",
    "IsotropicAngleSource",
    "SequenceAngleSource",
    "make_source",
    # Utilities
    "geometry",
    "utils",
]
