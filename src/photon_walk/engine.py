"""
Multi-photon random walk engine.

The engine owns every walker. A presentation layer calls advance() once per
frame and then reads geometry back through the snapshot methods, which
always return copies.
"""

from __future__ import annotations

import time
from typing import Any, Dict, List, NamedTuple, Optional

import numpy as np

from . import geometry, utils
from .params import WalkParams, check_batch, coerce_params
from .sampling import AngleSource, make_source
from .walker import StepStatus, Walker

# Colour of the first photon.
DEFAULT_TAG = (235, 201, 52, 200)


class Marker(NamedTuple):
    position: np.ndarray
    escaped: bool


class WalkerEngine:
    """
    Owns a growing list of walkers and steps the active ones in batches.

    Each walker gets its own generator spawned from one root SeedSequence,
    so a walker's path depends only on the seed and its spawn index.
    """

    def __init__(self, params: WalkParams | dict | None = None) -> None:
        self.params = coerce_params(params)
        self._seed_seq = utils.make_seed_sequence(self.params.seed)
        # Cosmetic stream first so walker streams keep their spawn index.
        self._tag_rng = np.random.default_rng(self._seed_seq.spawn(1)[0])
        self._walkers: List[Walker] = []

    ###########################################################################
    # Mutation
    ###########################################################################

    def spawn_walker(self, tag: Any = None, source: Optional[AngleSource] = None) -> int:
        """Add a fresh walker at the origin and return its id."""
        # params is a plain dataclass and may have been edited since __init__.
        self.params.validate()
        if tag is None:
            tag = DEFAULT_TAG if not self._walkers else utils.random_color(self._tag_rng)
        if source is None:
            source = make_source(self.params, self._seed_seq.spawn(1)[0])
        self._walkers.append(Walker.from_params(self.params, source, tag=tag))
        return len(self._walkers) - 1

    def advance(
        self,
        macro_steps_per_call: Optional[int] = None,
        micro_steps_per_macro: Optional[int] = None,
    ) -> int:
        """
        Step every active walker up to macro_steps_per_call macro-steps.

        None falls back to the configured defaults. Escaped walkers are
        skipped, so this is safe to call unconditionally every frame.

        Returns:
            Number of walkers that escaped during this call.
        """
        if macro_steps_per_call is None:
            macro_steps_per_call = self.params.macro_steps_per_call
        if micro_steps_per_macro is None:
            micro_steps_per_macro = self.params.micro_steps_per_macro
        n_macro = check_batch("macro_steps_per_call", macro_steps_per_call)
        n_micro = check_batch("micro_steps_per_macro", micro_steps_per_macro)

        newly_escaped = 0
        for walker in self._walkers:
            if walker.escaped:
                continue
            for _ in range(n_macro):
                status = walker.step(n_micro).status
                if status is StepStatus.ESCAPED:
                    newly_escaped += 1
                    break
                if status is StepStatus.ALREADY_ESCAPED:
                    break
        return newly_escaped

    def run_until_escaped(self, max_calls: Optional[int] = None) -> int:
        """
        Call advance() until every walker has escaped or max_calls is reached.

        Returns the number of advance() calls made.
        """
        if max_calls is not None:
            max_calls = check_batch("max_calls", max_calls)
        t_start = time.perf_counter()
        report_every = 1000
        calls = 0
        while not self.all_escaped and (max_calls is None or calls < max_calls):
            self.advance()
            calls += 1
            if self.params.verbose and calls % report_every == 0:
                elapsed = time.perf_counter() - t_start
                steps = sum(w.step_count for w in self._walkers)
                print(
                    f"[walk] calls={calls}, active={self.active_count}/{len(self)}, "
                    f"steps={steps}, elapsed={elapsed:.1f}s"
                )

        if self.params.verbose:
            elapsed = time.perf_counter() - t_start
            print(
                f"[walk] finished after {calls} calls: "
                f"{len(self) - self.active_count}/{len(self)} escaped in {elapsed:.2f}s"
            )
        return calls

    ###########################################################################
    # Read-only views
    ###########################################################################

    def __len__(self) -> int:
        return len(self._walkers)

    @property
    def active_count(self) -> int:
        return sum(1 for w in self._walkers if not w.escaped)

    @property
    def all_escaped(self) -> bool:
        return self.active_count == 0

    def walker_ids(self) -> range:
        return range(len(self._walkers))

    def _get(self, walker_id: int) -> Walker:
        if not 0 <= walker_id < len(self._walkers):
            raise KeyError(f"Unknown walker id: {walker_id!r}")
        return self._walkers[walker_id]

    def step_count(self, walker_id: int) -> int:
        return self._get(walker_id).step_count

    def is_escaped(self, walker_id: int) -> bool:
        return self._get(walker_id).escaped

    def position(self, walker_id: int) -> np.ndarray:
        return self._get(walker_id).position.copy()

    def tag(self, walker_id: int) -> Any:
        return self._get(walker_id).tag

    def walker_segments(self, walker_id: int) -> np.ndarray:
        return self._get(walker_id).segments_array()

    def segments_snapshot(self) -> np.ndarray:
        """All segments as (N, 2, 3): walker insertion order, then chronological."""
        parts = [w.segments_array() for w in self._walkers if w.num_segments]
        if not parts:
            return np.empty((0, 2, 3), dtype=np.float64)
        return np.concatenate(parts, axis=0)

    def markers_snapshot(self) -> List[Marker]:
        return [Marker(w.marker_position, w.escaped) for w in self._walkers]

    def segment_transforms(self) -> np.ndarray:
        return geometry.segment_transforms(self.segments_snapshot(), self.params.segment_radius)

    def marker_transforms(self) -> np.ndarray:
        if not self._walkers:
            return np.empty((0, 4, 4), dtype=np.float64)
        return np.stack(
            [geometry.sphere_transform(m.position, self.params.marker_scale) for m in self.markers_snapshot()]
        )

    def boundary_transform(self) -> np.ndarray:
        return geometry.sphere_transform((0.0, 0.0, 0.0), self.params.escape_radius)

    def summary(self) -> List[Dict[str, Any]]:
        """Per-walker rows for a status panel."""
        return [
            {
                "id": i,
                "tag": w.tag,
                "steps": w.step_count,
                "escaped": w.escaped,
                "segments": w.num_segments,
            }
            for i, w in enumerate(self._walkers)
        ]


def run_model(params: WalkParams | dict | None = None) -> utils.WalkResult:
    """
    Spawn num_walkers photons, run them to escape and return a WalkResult.
    """
    params = coerce_params(params)
    start_time = time.time()

    engine = WalkerEngine(params)
    for _ in range(params.num_walkers):
        engine.spawn_walker()
    calls = engine.run_until_escaped(params.max_calls)

    ids = engine.walker_ids()
    meta = {
        "model": "photon_walk",
        "num": int(params.num_walkers),
        "step_length": float(params.step_length),
        "escape_radius": float(params.escape_radius),
        "macro_steps_per_call": int(params.macro_steps_per_call),
        "micro_steps_per_macro": int(params.micro_steps_per_macro),
        "isotropic": bool(params.isotropic),
        "seed": params.seed,
        "calls": int(calls),
        "tags": [engine.tag(i) for i in ids],
        "time_elapsed": time.time() - start_time,
    }

    return utils.WalkResult(
        segments=engine.segments_snapshot(),
        positions=np.array([engine.position(i) for i in ids], dtype=np.float64).reshape(-1, 3),
        escaped=np.array([engine.is_escaped(i) for i in ids], dtype=bool),
        step_counts=np.array([engine.step_count(i) for i in ids], dtype=np.int64),
        meta=meta,
    )


__all__ = ["WalkerEngine", "Marker", "run_model", "DEFAULT_TAG"]
