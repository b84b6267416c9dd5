"""Render cube, sphere and variant drapes side by side on one page.

Builds each frame with :func:`drape.build_drape` and draws the admitted
segments with matplotlib's 3-D axes.  Opacity runs linearly along every
segment; this is approximated by splitting each segment into ``--steps``
pieces with interpolated alpha.

Usage::

    python scripts/gallery_drape.py                      # saves gallery_drape.png
    python scripts/gallery_drape.py --out my_file.png
    python scripts/gallery_drape.py --points             # point-cloud mode
    python scripts/gallery_drape.py --config drape.json  # start from saved settings
    python scripts/gallery_drape.py --npz out/           # also dump segment arrays

Requirements: numpy, matplotlib
"""
from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys

# Ensure the repo root (parent of scripts/) is importable regardless of cwd
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import matplotlib.pyplot as plt
import numpy as np
from mpl_toolkits.mplot3d.art3d import Line3DCollection

from drape import (
    ConfigError,
    DrapeConfig,
    ShapeKind,
    build_drape,
    build_point_cloud,
    load_config,
    save_npz,
)
from drape.logging_config import setup_logging

logger = logging.getLogger("drape.gallery")

_LINE_RGB = np.array([0.2, 0.2, 0.2])
_FACE     = "#f4f4f4"


# ---------------------------------------------------------------------------
# Panel catalogue  (label, config)
# ---------------------------------------------------------------------------

def _make_panels(base: DrapeConfig) -> list[tuple[str, DrapeConfig]]:
    def with_shape(**changes):
        return dataclasses.replace(base, shape=dataclasses.replace(base.shape, **changes))

    return [
        ("cube",         with_shape(kind=ShapeKind.CUBE)),
        ("sphere",       with_shape(kind=ShapeKind.SPHERE)),
        ("rounded cube", with_shape(kind=ShapeKind.ROUNDED_CUBE)),
        ("sharp cutoff", with_shape(falloff_extent=0.0)),
    ]


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _gradient_pieces(starts, ends, alphas, steps: int):
    """Split ``(N, 3)`` segments into ``N * steps`` pieces with interpolated alpha."""
    t = np.linspace(0.0, 1.0, steps + 1)
    pts = starts[:, None, :] + (ends - starts)[:, None, :] * t[None, :, None]
    pieces = np.stack([pts[:, :-1], pts[:, 1:]], axis=2).reshape(-1, 2, 3)
    mid = 0.5 * (t[:-1] + t[1:])
    a = alphas[:, :1] + (alphas[:, 1:] - alphas[:, :1]) * mid[None, :]
    return pieces, a.reshape(-1)


def _rgba(alphas):
    return np.column_stack([np.tile(_LINE_RGB, (len(alphas), 1)), np.clip(alphas, 0.0, 1.0)])


def _draw_lines(ax, config: DrapeConfig, steps: int, npz_dir: str | None, label: str) -> None:
    geometry = build_drape(config)
    starts, ends, alphas, _ = geometry.arrays()
    pieces, a = _gradient_pieces(starts, ends, alphas, steps)
    ax.add_collection3d(Line3DCollection(pieces, colors=_rgba(a), linewidths=0.6))
    if npz_dir:
        path = os.path.join(npz_dir, label.replace(" ", "_") + ".npz")
        save_npz(path, geometry)
        logger.info("Saved segments: %s", path)


def _draw_points(ax, config: DrapeConfig) -> None:
    cloud = build_point_cloud(config)
    p = cloud.positions
    ax.scatter(p[:, 0], p[:, 1], p[:, 2], c=_rgba(cloud.alphas), s=2.0,
               depthshade=False, linewidths=0)


def render_gallery(panels, out_path: str, points: bool = False, steps: int = 4,
                   npz_dir: str | None = None) -> None:
    ncols = len(panels)
    fig = plt.figure(figsize=(ncols * 4.0, 4.2), facecolor=_FACE)

    for idx, (label, config) in enumerate(panels):
        ax = fig.add_subplot(1, ncols, idx + 1, projection="3d")
        ax.set_facecolor(_FACE)
        ax.set_axis_off()
        ax.set_title(label, fontsize=9, pad=1)

        if points:
            _draw_points(ax, config)
        else:
            _draw_lines(ax, config, steps, npz_dir, label)

        half = config.extent / 2.0
        top = config.back_z + config.shape.max_displacement
        ax.set_xlim(-half, half); ax.set_ylim(-half, half)
        ax.set_zlim(min(config.back_z, top), max(config.back_z, top))
        ax.set_box_aspect([1, 1, 0.45])
        ax.view_init(elev=28, azim=-60)

    mode = "points" if points else "lines"
    fig.suptitle(f"drape — grid draping ({mode})", fontsize=12, y=1.0)
    plt.tight_layout(pad=0.3)
    fig.savefig(out_path, dpi=160, bbox_inches="tight", facecolor=fig.get_facecolor())
    plt.close(fig)
    print(f"Saved: {out_path}")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Render cube and sphere grid drapes to a single PNG gallery."
    )
    parser.add_argument("--out",    default="gallery_drape.png", help="Output PNG path")
    parser.add_argument("--config", default=None,
                        help="JSON settings file to start from (defaults if omitted)")
    parser.add_argument("--points", action="store_true", help="Point-cloud render mode")
    parser.add_argument("--steps",  type=int, default=4,
                        help="Pieces per segment for the alpha gradient (default 4)")
    parser.add_argument("--npz",    default=None, help="Directory to save segment arrays to")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        base = load_config(args.config) if args.config else DrapeConfig()
    except ConfigError as exc:
        parser.error(str(exc))

    render_gallery(_make_panels(base), args.out, points=args.points,
                   steps=max(args.steps, 1), npz_dir=args.npz)


if __name__ == "__main__":
    main()
