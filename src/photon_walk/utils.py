# src/photon_walk/utils.py
from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    tomllib = None  # type: ignore


@dataclass
class WalkResult:
    """Common container for random-walk outputs."""

    segments: Optional[np.ndarray] = None
    positions: Optional[np.ndarray] = None
    escaped: Optional[np.ndarray] = None
    step_counts: Optional[np.ndarray] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def num_walkers(self) -> int:
        return 0 if self.positions is None else int(self.positions.shape[0])


def make_seed_sequence(seed: int | np.random.SeedSequence | None = None) -> np.random.SeedSequence:
    """Root seed sequence; passing an existing SeedSequence returns it unchanged."""
    if isinstance(seed, np.random.SeedSequence):
        return seed
    return np.random.SeedSequence(seed)


def random_color(rng: np.random.Generator, alpha: int = 200) -> tuple:
    """Random RGBA tag with fixed alpha, channels in [0, 255)."""
    r, g, b = (int(c) for c in rng.integers(0, 255, size=3))
    return (r, g, b, alpha)


def now_str() -> str:
    return time.strftime("%Y%m%d-%H%M%S")


def load_params(path: str | os.PathLike[str]) -> Dict[str, Any]:
    """
    Read WalkParams fields from a .json or .toml walk config.

    The top level must be a table of field names; feed the result to
    coerce_params() or merge it with a preset.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix == ".json":
        fields = json.loads(text)
    elif suffix == ".toml":
        if tomllib is None:
            raise RuntimeError(f"Reading {path.name} needs tomllib (Python 3.11+)")
        fields = tomllib.loads(text)
    else:
        raise ValueError(f"Walk config must be .json or .toml, got {path.name!r}")
    if not isinstance(fields, dict):
        raise ValueError(f"Walk config {path.name!r} must hold a table of WalkParams fields")
    return fields


def format_summary(rows: List[Dict[str, Any]]) -> str:
    """One line per walker, e.g. "#0 (235, 201, 52, 200): 1234 steps, escaped"."""
    lines = []
    for row in rows:
        state = "escaped" if row["escaped"] else "active"
        lines.append(f"#{row['id']} {row['tag']}: {row['steps']} steps, {state}")
    return "\n".join(lines)
