from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional


###############################################################################
# Constants
###############################################################################

DEFAULT_STEP_LENGTH = 0.5
DEFAULT_ESCAPE_RADIUS = 100.0
DEFAULT_MACRO_STEPS_PER_CALL = 5  # macro-steps per frame
DEFAULT_MICRO_STEPS_PER_MACRO = 2  # "steps at once"
DEFAULT_SEGMENT_RADIUS = 0.03
DEFAULT_MARKER_SCALE = 2.0


class InvalidParameterError(ValueError):
    """Raised when a simulation parameter is outside its valid range."""


@dataclass
class WalkParams:
    step_length: float = DEFAULT_STEP_LENGTH
    escape_radius: float = DEFAULT_ESCAPE_RADIUS
    macro_steps_per_call: int = DEFAULT_MACRO_STEPS_PER_CALL
    micro_steps_per_macro: int = DEFAULT_MICRO_STEPS_PER_MACRO
    num_walkers: int = 1
    max_calls: Optional[int] = None
    isotropic: bool = False  # unbiased directions instead of the reference sampler
    segment_radius: float = DEFAULT_SEGMENT_RADIUS
    marker_scale: float = DEFAULT_MARKER_SCALE
    seed: Optional[int] = None
    verbose: bool = False

    def validate(self) -> "WalkParams":
        check_length("step_length", self.step_length)
        check_length("escape_radius", self.escape_radius)
        check_length("segment_radius", self.segment_radius)
        check_length("marker_scale", self.marker_scale)
        check_batch("macro_steps_per_call", self.macro_steps_per_call)
        check_batch("micro_steps_per_macro", self.micro_steps_per_macro)
        if not isinstance(self.num_walkers, numbers.Integral) or self.num_walkers < 0:
            raise InvalidParameterError(
                f"num_walkers must be a non-negative integer, got {self.num_walkers!r}"
            )
        if self.max_calls is not None:
            check_batch("max_calls", self.max_calls)
        return self


# Named step-length variants; the viewer shipped coarse and fine builds.
PRESETS: Dict[str, Dict[str, Any]] = {
    "coarse": {"step_length": 0.5, "escape_radius": 100.0},
    "fine": {"step_length": 0.01, "escape_radius": 100.0},
}


def from_preset(name: str, **overrides: Any) -> WalkParams:
    """Build validated params from a named preset plus keyword overrides."""
    if name not in PRESETS:
        raise KeyError(f"Unknown preset: {name!r} (choose from {sorted(PRESETS)})")
    params = replace(WalkParams(), **PRESETS[name])
    return replace(params, **overrides).validate()


def coerce_params(params: WalkParams | dict | None) -> WalkParams:
    """Accept a WalkParams, a plain dict of fields, or None for defaults."""
    if params is None:
        params = WalkParams()
    elif isinstance(params, dict):
        params = WalkParams(**params)
    return params.validate()


def check_batch(name: str, value: Any) -> int:
    """Batch sizes are integers >= 1; anything else is rejected, not clamped."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidParameterError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidParameterError(f"{name} must be >= 1, got {value!r}")
    return int(value)


def check_length(name: str, value: Any) -> float:
    """Lengths are finite numbers > 0; bools are not numbers here."""
    if isinstance(value, bool):
        raise InvalidParameterError(f"{name} must be a number, got {value!r}")
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(v) or v <= 0.0:
        raise InvalidParameterError(f"{name} must be finite and > 0, got {value!r}")
    return v


__all__ = [
    "WalkParams",
    "InvalidParameterError",
    "PRESETS",
    "from_preset",
    "coerce_params",
    "check_batch",
    "check_length",
]
