"""
Angle samplers feeding the walker's step direction.

Every source returns (theta, phi) arrays which are mapped to a displacement
with the reference formula

    (L sin(theta) cos(phi), L sin(theta) sin(phi), L cos(theta))

UniformAngleSource is the reference sampler: theta ~ U[0, 2pi) and
phi ~ U[0, pi). Those directions are not uniform on the sphere, they pile
up near the +/-z poles. IsotropicAngleSource samples cos(theta) uniformly
instead and gives a properly uniform direction; it is opt-in.
"""

from __future__ import annotations

import math
from typing import Optional, Protocol, Sequence, Tuple

import numpy as np

from .params import WalkParams

TWO_PI = 2.0 * math.pi


class AngleSource(Protocol):
    def sample(self, n: int) -> Tuple[np.ndarray, np.ndarray]:
        ...


class UniformAngleSource:
    """Reference sampler: theta ~ U[0, 2pi), phi ~ U[0, pi)."""

    def __init__(self, rng: np.random.Generator) -> None:
        self.rng = rng

    def sample(self, n: int) -> Tuple[np.ndarray, np.ndarray]:
        theta = self.rng.uniform(0.0, TWO_PI, size=n)
        phi = self.rng.uniform(0.0, math.pi, size=n)
        return theta, phi


class IsotropicAngleSource:
    """Uniform directions on the unit sphere: cos(theta) ~ U[-1, 1], phi ~ U[0, 2pi)."""

    def __init__(self, rng: np.random.Generator) -> None:
        self.rng = rng

    def sample(self, n: int) -> Tuple[np.ndarray, np.ndarray]:
        theta = np.arccos(self.rng.uniform(-1.0, 1.0, size=n))
        phi = self.rng.uniform(0.0, TWO_PI, size=n)
        return theta, phi


class SequenceAngleSource:
    """
    Replays a fixed list of (theta, phi) pairs, wrapping around at the end.

    Handy for tests and for replaying a recorded walk.
    """

    def __init__(self, pairs: Sequence[Tuple[float, float]]) -> None:
        arr = np.asarray(pairs, dtype=np.float64).reshape(-1, 2)
        if arr.shape[0] == 0:
            raise ValueError("SequenceAngleSource needs at least one (theta, phi) pair")
        self._theta = arr[:, 0].copy()
        self._phi = arr[:, 1].copy()
        self.cursor = 0

    def sample(self, n: int) -> Tuple[np.ndarray, np.ndarray]:
        idx = np.arange(self.cursor, self.cursor + n)
        self.cursor += n
        return (
            np.take(self._theta, idx, mode="wrap"),
            np.take(self._phi, idx, mode="wrap"),
        )


def direction_from_angles(theta, phi, length: float = 1.0) -> np.ndarray:
    """Displacement vectors for angle arrays; shape (..., 3)."""
    theta = np.asarray(theta, dtype=np.float64)
    phi = np.asarray(phi, dtype=np.float64)
    st = np.sin(theta)
    return length * np.stack([st * np.cos(phi), st * np.sin(phi), np.cos(theta)], axis=-1)


def make_source(
    params: WalkParams, seed: Optional[int | np.random.SeedSequence] = None
) -> AngleSource:
    """Build the sampler selected by params for the given seed."""
    rng = np.random.default_rng(seed)
    if params.isotropic:
        return IsotropicAngleSource(rng)
    return UniformAngleSource(rng)


__all__ = [
    "AngleSource",
    "UniformAngleSource",
    "IsotropicAngleSource",
    "SequenceAngleSource",
    "direction_from_angles",
    "make_source",
]
