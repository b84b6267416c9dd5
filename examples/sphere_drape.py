"""Cloth draped over a sphere, in both render modes.

Demonstrates: ShapeKind.SPHERE, is_on_shell, build_drape, build_point_cloud
Output:       examples/sphere_drape.png

Properties verified (size 5 at (10, 10), 200 units, falloff 12, density 20):
    the shell is the band |d - 4| <= 0.7, so (14, 11) and (13, 13) are Shell
    (15, 10) at distance 5 is Cloth, displaced 200 * (cos(pi/12) + 1) / 2
    every slice edge has both endpoints displaced beyond the slice height
"""
import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import math

import numpy as np
from drape import (
    DrapeConfig, Region, SegmentLayer, ShapeConfig, ShapeKind,
    build_drape, build_point_cloud, classify, displacement, displacement_field,
)

_OUT = os.path.join(os.path.dirname(__file__), "sphere_drape.png")


def _render_png(geometry, cloud, out_path):
    import matplotlib.pyplot as plt
    from mpl_toolkits.mplot3d.art3d import Line3DCollection

    cfg  = geometry.config
    half = cfg.extent / 2.0
    fig = plt.figure(figsize=(9, 4.5), facecolor="#f4f4f4")

    starts, ends, alphas, _ = geometry.arrays()
    ax = fig.add_subplot(121, projection="3d")
    rgba = np.column_stack([np.full((len(starts), 3), 0.2), alphas.mean(axis=1)])
    ax.add_collection3d(Line3DCollection(np.stack([starts, ends], axis=1), colors=rgba,
                                         linewidths=0.6))
    ax.set_title("lines", fontsize=10)

    bx = fig.add_subplot(122, projection="3d")
    p = cloud.positions
    rgba = np.column_stack([np.full((len(cloud), 3), 0.2), cloud.alphas])
    bx.scatter(p[:, 0], p[:, 1], p[:, 2], c=rgba, s=2.0, depthshade=False, linewidths=0)
    bx.set_title("points", fontsize=10)

    for a in (ax, bx):
        a.set_facecolor("#f4f4f4"); a.set_axis_off(); a.set_box_aspect([1, 1, 0.45])
        a.set_xlim(-half, half); a.set_ylim(-half, half)
        a.set_zlim(cfg.back_z, cfg.back_z + cfg.shape.max_displacement)
        a.view_init(elev=28, azim=-60)

    plt.savefig(out_path, dpi=150, bbox_inches="tight", facecolor="#f4f4f4")
    plt.close()
    print(f"  Saved: {out_path}")


def main():
    print("=" * 60)
    print("SPHERE DRAPE: size 5 at (10, 10), 200 units, falloff 12")
    print("=" * 60)

    config = DrapeConfig(
        shape=ShapeConfig(kind=ShapeKind.SPHERE, size=5, center_x=10, center_y=10,
                          max_displacement=200.0, falloff_extent=12.0),
        density=20,
    )

    checks = {(14, 11): Region.SHELL, (13, 13): Region.SHELL, (15, 10): Region.CLOTH}
    ok = True
    for ij, want in checks.items():
        got = classify(*ij, config)
        d = math.hypot(ij[0] - 10, ij[1] - 10)
        print(f"  {ij}: d={d:.3f}  {got.name:<8s} (expected {want.name})")
        ok &= got is want

    expected = 200.0 * (math.cos(math.pi / 12.0) + 1.0) / 2.0
    got = displacement(15, 10, config)
    print(f"\ndisplacement(15, 10) = {got:.4f}  (expected {expected:.4f})")
    ok &= abs(got - expected) < 1e-9

    geometry = build_drape(config)
    field = displacement_field(config)
    spacing = config.spacing
    bad = 0
    for s in geometry.by_layer(SegmentLayer.SLICE):
        h = s.start[2] - config.back_z
        for pos in (s.start, s.end):
            i = int(round(pos[0] / spacing + config.density / 2))
            j = int(round(pos[1] / spacing + config.density / 2))
            bad += field[i, j] <= h
    print(f"Slice edges: {len(geometry.by_layer(SegmentLayer.SLICE))}   "
          f"endpoints below their slice: {bad}  (should be 0)")
    ok &= bad == 0

    cloud = build_point_cloud(config)
    print(f"Point cloud: {len(cloud)} points")

    print("\n" + ("PASSED PASSED" if ok else "FAILED FAILED"))

    _render_png(geometry, cloud, _OUT)


if __name__ == "__main__":
    main()
