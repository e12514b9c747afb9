#!/usr/bin/env python3
"""
Single Photon Walk Runner

Runs one or more photons from the centre of the sphere until they escape
and prints per-photon step counts.
"""

import argparse
import sys
import time
from pathlib import Path

# Add src/ to path
SRC = Path(__file__).resolve().parents[1]
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from photon_walk import (  # noqa: E402
    PRESETS,
    WalkParams,
    from_preset,
    run_model,
    utils,
)


def build_params(args) -> WalkParams:
    """Merge preset, optional parameter file and explicit CLI flags."""
    overrides = {}
    if args.config:
        overrides.update(utils.load_params(args.config))
    for key in (
        "step_length",
        "escape_radius",
        "macro_steps_per_call",
        "micro_steps_per_macro",
        "max_calls",
        "num_walkers",
        "seed",
    ):
        value = getattr(args, key)
        if value is not None:
            overrides[key] = value
    overrides.setdefault("seed", 42)
    if args.isotropic:
        overrides["isotropic"] = True
    overrides["verbose"] = not args.quiet
    return from_preset(args.preset, **overrides)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Run photon random walks until they leave the sphere",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default="coarse",
        help="Base parameter set (default: coarse)",
    )
    parser.add_argument("--config", default=None, help="JSON or TOML parameter file")
    parser.add_argument(
        "--walkers", dest="num_walkers", type=int, default=None,
        help="Number of photons (default: 1)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: 42)")
    parser.add_argument("--step-length", dest="step_length", type=float, default=None)
    parser.add_argument("--escape-radius", dest="escape_radius", type=float, default=None)
    parser.add_argument(
        "--macro", dest="macro_steps_per_call", type=int, default=None,
        help="Macro-steps per advance call",
    )
    parser.add_argument(
        "--micro", dest="micro_steps_per_macro", type=int, default=None,
        help="Micro-steps per macro-step (steps at once)",
    )
    parser.add_argument(
        "--max-calls", dest="max_calls", type=int, default=None,
        help="Stop after this many advance calls even if photons remain",
    )
    parser.add_argument(
        "--isotropic", action="store_true",
        help="Sample directions uniformly on the sphere instead of the reference sampler",
    )
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")

    args = parser.parse_args(argv)
    params = build_params(args)

    print(
        f"Running photon walk: walkers={params.num_walkers}, step={params.step_length}, "
        f"R={params.escape_radius}, seed={params.seed}"
    )
    start_time = time.time()
    result = run_model(params)
    elapsed_time = time.time() - start_time

    rows = [
        {
            "id": i,
            "tag": result.meta["tags"][i],
            "steps": int(result.step_counts[i]),
            "escaped": bool(result.escaped[i]),
        }
        for i in range(result.num_walkers)
    ]
    print(utils.format_summary(rows))
    print(f"\nTime elapsed: {elapsed_time:.2f} seconds")
    print(f"Segments recorded: {result.segments.shape[0]}")
    print(f"Escaped: {int(result.escaped.sum())}/{result.num_walkers}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
