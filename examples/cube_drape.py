"""Cloth draped over a cube.

Demonstrates: DrapeConfig, classify, displacement, build_drape
Output:       examples/cube_drape.png

Properties verified (size 5 at (10, 10), 200 units, falloff 12, density 20):
    (10, 10) is Interior, (14, 10) is Shell, (16, 10) is Cloth
    displacement(16, 10) == 200 * (cos(pi/6) + 1) / 2  (~186.6)
    no front edge has an Interior endpoint
"""
import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import math

import numpy as np
from drape import (
    DrapeConfig, Region, SegmentLayer, ShapeConfig, ShapeKind,
    build_drape, classify, displacement,
)

_OUT = os.path.join(os.path.dirname(__file__), "cube_drape.png")


def _render_png(geometry, out_path, title=""):
    import matplotlib.pyplot as plt
    from mpl_toolkits.mplot3d.art3d import Line3DCollection

    starts, ends, alphas, _ = geometry.arrays()
    # one alpha per segment: mean of its two endpoints
    rgba = np.column_stack([np.full((len(starts), 3), 0.2), alphas.mean(axis=1)])

    cfg  = geometry.config
    half = cfg.extent / 2.0
    fig = plt.figure(figsize=(5, 5), facecolor="#f4f4f4")
    ax  = fig.add_subplot(111, projection="3d")
    ax.set_facecolor("#f4f4f4"); ax.set_axis_off(); ax.set_box_aspect([1, 1, 0.45])
    ax.add_collection3d(Line3DCollection(np.stack([starts, ends], axis=1), colors=rgba,
                                         linewidths=0.6))
    ax.set_xlim(-half, half); ax.set_ylim(-half, half)
    ax.set_zlim(cfg.back_z, cfg.back_z + cfg.shape.max_displacement)
    ax.view_init(elev=28, azim=-60)
    ax.set_title(title, fontsize=10)
    plt.savefig(out_path, dpi=150, bbox_inches="tight", facecolor="#f4f4f4")
    plt.close()
    print(f"  Saved: {out_path}")


def main():
    print("=" * 60)
    print("CUBE DRAPE: size 5 at (10, 10), 200 units, falloff 12")
    print("=" * 60)

    config = DrapeConfig(
        shape=ShapeConfig(kind=ShapeKind.CUBE, size=5, center_x=10, center_y=10,
                          max_displacement=200.0, falloff_extent=12.0),
        density=20,
    )

    regions = {ij: classify(*ij, config) for ij in [(10, 10), (14, 10), (16, 10)]}
    for ij, region in regions.items():
        print(f"  {ij}: {region.name:<8s} displacement {displacement(*ij, config):8.3f}")

    expected = 200.0 * (math.cos(math.pi / 6.0) + 1.0) / 2.0
    got = displacement(16, 10, config)
    print(f"\ndisplacement(16, 10) = {got:.4f}  (expected {expected:.4f})")

    geometry = build_drape(config)
    front = geometry.by_layer(SegmentLayer.FRONT)
    interior = {p.position for p in geometry.points if p.region is Region.INTERIOR}
    touching = sum(1 for s in front if s.start in interior or s.end in interior)
    print(f"Front edges: {len(front)}   touching Interior: {touching}  (should be 0)")
    for layer in SegmentLayer:
        print(f"  {layer.name:<5s}: {len(geometry.by_layer(layer))}")

    ok = (
        regions[(10, 10)] is Region.INTERIOR
        and regions[(14, 10)] is Region.SHELL
        and regions[(16, 10)] is Region.CLOTH
        and abs(got - expected) < 1e-9
        and touching == 0
    )
    print("\n" + ("PASSED PASSED" if ok else "FAILED FAILED"))

    _render_png(geometry, _OUT, "Cube drape")


if __name__ == "__main__":
    main()
