"""
Single-photon random walk state and the per-macro-step update.

A macro-step is up to N micro-steps of fixed length. Each completed
macro-step is recorded as one (start, end) path segment. The walk ends the
first time a micro-step lands beyond the escape radius; the partial path of
that last macro-step is not recorded.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple

import numpy as np
from numba import njit

from .params import InvalidParameterError, WalkParams, check_batch, check_length
from .sampling import AngleSource

###############################################################################
# Micro-step kernel
###############################################################################


@njit(cache=True)
def _walk_micro_steps(
    position: np.ndarray,
    theta: np.ndarray,
    phi: np.ndarray,
    step_length: float,
    escape_radius: float,
) -> Tuple[int, bool]:
    """
    Apply the displacements for (theta[i], phi[i]) to position in place.

    Stops right after the first micro-step whose end point is farther than
    escape_radius from the origin.

    Returns:
        (taken, escaped): micro-steps applied and whether the walk escaped
    """
    x = position[0]
    y = position[1]
    z = position[2]

    taken = 0
    escaped = False
    for i in range(theta.shape[0]):
        st = math.sin(theta[i])
        x += step_length * st * math.cos(phi[i])
        y += step_length * st * math.sin(phi[i])
        z += step_length * math.cos(theta[i])
        taken += 1
        if math.sqrt(x * x + y * y + z * z) > escape_radius:
            escaped = True
            break

    position[0] = x
    position[1] = y
    position[2] = z
    return taken, escaped


###############################################################################
# Walker
###############################################################################


class StepStatus(Enum):
    CONTINUED = "continued"
    ESCAPED = "escaped"
    ALREADY_ESCAPED = "already_escaped"


@dataclass(frozen=True)
class StepOutcome:
    status: StepStatus
    start: Optional[np.ndarray] = None
    end: Optional[np.ndarray] = None

    @property
    def continued(self) -> bool:
        return self.status is StepStatus.CONTINUED


ALREADY_ESCAPED = StepOutcome(StepStatus.ALREADY_ESCAPED)


class Walker:
    """
    One photon walking out from the origin.

    The walker owns its random stream, so its trajectory depends only on
    that stream and the step parameters.
    """

    def __init__(
        self,
        source: AngleSource,
        step_length: float,
        escape_radius: float,
        tag: Any = None,
    ) -> None:
        self.source = source
        self.step_length = check_length("step_length", step_length)
        self.escape_radius = check_length("escape_radius", escape_radius)
        self.tag = tag

        self.position = np.zeros(3, dtype=np.float64)
        self.escaped = False
        self.step_count = 0
        self._segments: List[np.ndarray] = []

    @classmethod
    def from_params(cls, params: WalkParams, source: AngleSource, tag: Any = None) -> "Walker":
        return cls(source, params.step_length, params.escape_radius, tag=tag)

    @property
    def segments(self) -> List[Tuple[np.ndarray, np.ndarray]]:
        return [(seg[0].copy(), seg[1].copy()) for seg in self._segments]

    @property
    def num_segments(self) -> int:
        return len(self._segments)

    @property
    def marker_position(self) -> np.ndarray:
        """End of the last recorded segment, or the origin."""
        if not self._segments:
            return np.zeros(3, dtype=np.float64)
        return self._segments[-1][1].copy()

    def segments_array(self) -> np.ndarray:
        """Recorded segments as an (N, 2, 3) array copy."""
        if not self._segments:
            return np.empty((0, 2, 3), dtype=np.float64)
        return np.stack(self._segments)

    def step(self, micro_steps_per_macro: int) -> StepOutcome:
        """Advance by one macro-step of up to micro_steps_per_macro micro-steps."""
        if self.escaped:
            return ALREADY_ESCAPED
        n = check_batch("micro_steps_per_macro", micro_steps_per_macro)

        theta, phi = self.source.sample(n)
        theta = np.ascontiguousarray(theta, dtype=np.float64)
        phi = np.ascontiguousarray(phi, dtype=np.float64)
        if theta.shape != (n,) or phi.shape != (n,):
            raise InvalidParameterError(
                f"angle source returned shapes {theta.shape}/{phi.shape}, expected ({n},)"
            )

        start = self.position.copy()
        taken, escaped = _walk_micro_steps(
            self.position, theta, phi, self.step_length, self.escape_radius
        )
        self.step_count += int(taken)

        if escaped:
            self.escaped = True
            return StepOutcome(StepStatus.ESCAPED)

        end = self.position.copy()
        self._segments.append(np.stack([start, end]))
        return StepOutcome(StepStatus.CONTINUED, start, end.copy())

    def __repr__(self) -> str:
        state = "escaped" if self.escaped else "active"
        return f"Walker(tag={self.tag!r}, steps={self.step_count}, {state})"


__all__ = ["Walker", "StepStatus", "StepOutcome"]
