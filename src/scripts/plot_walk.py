# src/scripts/plot_walk.py
import argparse
import os
import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
from mpl_toolkits.mplot3d.art3d import Line3DCollection  # noqa: E402

SRC = Path(__file__).resolve().parents[1]
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from photon_walk import WalkerEngine, from_preset, utils  # noqa: E402


def format_title(params, engine):
    parts = [
        f"N={len(engine)}",
        f"step={params.step_length:g}",
        f"R={params.escape_radius:g}",
        f"seed={params.seed if params.seed is not None else '?'}",
    ]
    if params.isotropic:
        parts.append("isotropic")
    return " | ".join(parts)


def tag_to_rgba(tag):
    """RGBA 0-255 tuple to matplotlib 0-1 floats; anything else falls back to grey."""
    if isinstance(tag, tuple) and len(tag) == 4:
        return tuple(c / 255.0 for c in tag)
    return (0.4, 0.4, 0.4, 0.8)


def render(engine, title=None, output=None, dpi=200, max_segments=200_000):
    """
    Draw every walker's recorded path, its marker and the escape sphere.

    Only reads the engine's snapshots; long walks are thinned to max_segments.
    """
    fig = plt.figure(figsize=(7, 7))
    ax = fig.add_subplot(projection="3d")

    radius = engine.params.escape_radius
    for walker_id in engine.walker_ids():
        segs = engine.walker_segments(walker_id)
        if segs.shape[0] > max_segments:
            stride = int(np.ceil(segs.shape[0] / max_segments))
            segs = segs[::stride]
        color = tag_to_rgba(engine.tag(walker_id))
        if segs.shape[0]:
            ax.add_collection3d(Line3DCollection(segs, colors=[color], linewidths=0.4))

    markers = engine.markers_snapshot()
    if markers:
        pos = np.array([m.position for m in markers])
        colors = [tag_to_rgba(engine.tag(i)) for i in engine.walker_ids()]
        ax.scatter(pos[:, 0], pos[:, 1], pos[:, 2], c=colors, s=20, depthshade=False)

    u, v = np.mgrid[0 : 2 * np.pi : 40j, 0 : np.pi : 20j]
    ax.plot_wireframe(
        radius * np.cos(u) * np.sin(v),
        radius * np.sin(u) * np.sin(v),
        radius * np.cos(v),
        color="0.7",
        linewidth=0.3,
    )

    ax.set_xlim(-radius, radius)
    ax.set_ylim(-radius, radius)
    ax.set_zlim(-radius, radius)
    ax.set_box_aspect((1, 1, 1))
    if title:
        ax.set_title(title, pad=10)

    if output:
        os.makedirs(os.path.dirname(output) if os.path.dirname(output) else ".", exist_ok=True)
        plt.savefig(output, dpi=dpi, bbox_inches="tight")
        print(f"Saved figure to {output}")

    plt.close(fig)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run photon walks and plot their paths in 3D")
    parser.add_argument("--preset", default="coarse", help="Parameter preset (default: coarse)")
    parser.add_argument("--walkers", type=int, default=3, help="Number of photons (default: 3)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--max-calls", type=int, default=None, help="Cap on advance calls")
    parser.add_argument("--isotropic", action="store_true", help="Use the isotropic sampler")
    parser.add_argument("--out", default=None, help="Output PNG path (auto-generated if omitted)")
    parser.add_argument("--dpi", type=int, default=200, help="DPI for output file (default: 200)")
    args = parser.parse_args(argv)

    params = from_preset(
        args.preset,
        seed=args.seed,
        num_walkers=args.walkers,
        max_calls=args.max_calls,
        isotropic=args.isotropic,
        verbose=True,
    )
    engine = WalkerEngine(params)
    for _ in range(params.num_walkers):
        engine.spawn_walker()
    engine.run_until_escaped(params.max_calls)

    if args.out is None:
        args.out = str(Path("results") / f"walk_{args.preset}_N{args.walkers}_S{args.seed}_{utils.now_str()}.png")

    render(engine, title=format_title(params, engine), output=args.out, dpi=args.dpi)
    return 0


if __name__ == "__main__":
    sys.exit(main())
