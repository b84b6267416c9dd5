"""Grid and slice generation.

Builds the full set of positioned nodes and admitted edges for one
:class:`~drape.config.DrapeConfig`.  Everything is recomputed from scratch
on each call; there is no incremental update.

World layout
------------
Node ``(i, j)`` sits at ``x = (i - density/2) * spacing``,
``y = (j - density/2) * spacing`` where ``spacing = extent / density``.
The flat reference layer is at ``z = back_z`` and the displaced layer at
``z = back_z + displacement(i, j)``.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
import os
from typing import Iterator, List, Tuple

import numpy as np
import numpy.typing as npt

from .admission import admit_lateral, admit_wall, alpha_table, in_slice, slice_heights
from .classify import Region, classify_grid, is_visible
from .config import DrapeConfig
from .displacement import displacement_field

logger = logging.getLogger(__name__)

_Array = npt.NDArray[np.floating]
_Vec3 = Tuple[float, float, float]
_Index = Tuple[int, int]

__all__ = [
    "DisplacedPoint",
    "Segment",
    "SegmentLayer",
    "DrapeGeometry",
    "PointCloud",
    "build_points",
    "build_drape",
    "build_point_cloud",
    "save_npz",
]


# ===========================================================================
# Output types
# ===========================================================================

class SegmentLayer(enum.IntEnum):
    BACK = 0
    FRONT = 1
    WALL = 2
    SLICE = 3


@dataclasses.dataclass(frozen=True)
class DisplacedPoint:
    """A grid node of the displaced layer."""

    coord: _Index
    position: _Vec3
    displacement: float
    region: Region


@dataclasses.dataclass(frozen=True)
class Segment:
    """An admitted edge; opacity runs linearly from *alpha_start* to *alpha_end*."""

    start: _Vec3
    end: _Vec3
    alpha_start: float
    alpha_end: float
    layer: SegmentLayer


@dataclasses.dataclass(frozen=True)
class DrapeGeometry:
    """Nodes and edges of one frame."""

    config: DrapeConfig
    points: List[DisplacedPoint]
    segments: List[Segment]

    def by_layer(self, layer: SegmentLayer) -> List[Segment]:
        return [s for s in self.segments if s.layer == layer]

    def arrays(self) -> Tuple[_Array, _Array, _Array, np.ndarray]:
        """``(starts, ends, alphas, layers)`` with shapes ``(N,3), (N,3), (N,2), (N,)``."""
        n = len(self.segments)
        starts = np.array([s.start for s in self.segments], dtype=float).reshape(n, 3)
        ends = np.array([s.end for s in self.segments], dtype=float).reshape(n, 3)
        alphas = np.array(
            [(s.alpha_start, s.alpha_end) for s in self.segments], dtype=float
        ).reshape(n, 2)
        layers = np.array([int(s.layer) for s in self.segments], dtype=np.int8)
        return starts, ends, alphas, layers


@dataclasses.dataclass(frozen=True)
class PointCloud:
    """Point-only rendering: ``(N, 3)`` positions and ``(N,)`` opacities."""

    positions: _Array
    alphas: _Array

    def __len__(self) -> int:
        return len(self.alphas)


# ===========================================================================
# Internal helpers
# ===========================================================================

class _Layout:
    """World coordinates of the grid nodes for one configuration."""

    def __init__(self, config: DrapeConfig) -> None:
        if config.density < 1:
            raise ValueError(f"grid density must be at least 1, got {config.density}")
        self.density = config.density
        self.spacing = config.spacing
        self.back_z = config.back_z
        self.axis = (np.arange(config.density + 1) - config.density / 2.0) * self.spacing

    def at(self, i: int, j: int, height: float = 0.0) -> _Vec3:
        """World position of node ``(i, j)`` at *height* above the flat layer."""
        return (float(self.axis[i]), float(self.axis[j]), float(self.back_z + height))


def _pairs(mask_i: np.ndarray, mask_j: np.ndarray) -> Iterator[Tuple[_Index, _Index]]:
    """Index pairs of admitted edges along ``i`` then along ``j``."""
    for i, j in np.argwhere(mask_i):
        yield (int(i), int(j)), (int(i) + 1, int(j))
    for i, j in np.argwhere(mask_j):
        yield (int(i), int(j)), (int(i), int(j) + 1)


def _full(shape: Tuple[int, int]) -> np.ndarray:
    return np.ones(shape, dtype=bool)


# ===========================================================================
# Builders
# ===========================================================================

def build_points(config: DrapeConfig) -> List[DisplacedPoint]:
    """Every node of the displaced layer with its displacement and region."""
    layout = _Layout(config)
    disp = displacement_field(config)
    codes = classify_grid(config)
    n = config.density + 1
    return [
        DisplacedPoint(
            coord=(i, j),
            position=layout.at(i, j, disp[i, j]),
            displacement=float(disp[i, j]),
            region=Region(int(codes[i, j])),
        )
        for i in range(n)
        for j in range(n)
    ]


def build_drape(config: DrapeConfig) -> DrapeGeometry:
    """Build the nodes and every admitted edge for *config*.

    Layers, in output order:

    * ``BACK``  the complete flat reference grid, background opacity.
    * ``FRONT`` admitted lateral edges of the displaced layer.
    * ``WALL``  connectors from flat to displaced node.
    * ``SLICE`` admitted edges of each intermediate slice.
    """
    layout = _Layout(config)
    disp = displacement_field(config)
    codes = classify_grid(config)
    alpha = alpha_table(config.opacities)
    bg = float(alpha[Region.BACKGROUND])
    d = config.density
    segments: List[Segment] = []

    for a, b in _pairs(_full((d, d + 1)), _full((d + 1, d))):
        segments.append(Segment(layout.at(*a), layout.at(*b), bg, bg, SegmentLayer.BACK))

    front_i = admit_lateral(codes[:-1, :], disp[:-1, :], codes[1:, :], disp[1:, :])
    front_j = admit_lateral(codes[:, :-1], disp[:, :-1], codes[:, 1:], disp[:, 1:])
    for a, b in _pairs(front_i, front_j):
        segments.append(
            Segment(
                layout.at(*a, disp[a]),
                layout.at(*b, disp[b]),
                float(alpha[codes[a]]),
                float(alpha[codes[b]]),
                SegmentLayer.FRONT,
            )
        )

    for i, j in np.argwhere(admit_wall(codes, disp)):
        segments.append(
            Segment(
                layout.at(i, j),
                layout.at(i, j, disp[i, j]),
                bg,
                float(alpha[codes[i, j]]),
                SegmentLayer.WALL,
            )
        )

    heights = slice_heights(config.shape.max_displacement, config.spacing)
    for h in heights:
        member = in_slice(h, disp)
        for a, b in _pairs(member[:-1, :] & member[1:, :], member[:, :-1] & member[:, 1:]):
            segments.append(
                Segment(
                    layout.at(*a, h),
                    layout.at(*b, h),
                    float(alpha[codes[a]]),
                    float(alpha[codes[b]]),
                    SegmentLayer.SLICE,
                )
            )

    points = build_points(config)
    logger.debug(
        "Built drape: density=%d, %d points, %d segments, %d slices",
        d, len(points), len(segments), len(heights),
    )
    return DrapeGeometry(config=config, points=points, segments=segments)


def build_point_cloud(config: DrapeConfig) -> PointCloud:
    """Point-only rendering of the flat layer, displaced layer and slices.

    Every flat node is emitted at background opacity, every visibly
    displaced node and every slice member at its region opacity.
    """
    layout = _Layout(config)
    disp = displacement_field(config)
    codes = classify_grid(config)
    alpha = alpha_table(config.opacities)
    n = config.density + 1

    positions: List[_Vec3] = []
    alphas: List[float] = []

    for i in range(n):
        for j in range(n):
            positions.append(layout.at(i, j))
            alphas.append(float(alpha[Region.BACKGROUND]))

    for i, j in np.argwhere(is_visible(disp)):
        positions.append(layout.at(i, j, disp[i, j]))
        alphas.append(float(alpha[codes[i, j]]))

    for h in slice_heights(config.shape.max_displacement, config.spacing):
        for i, j in np.argwhere(in_slice(h, disp)):
            positions.append(layout.at(i, j, h))
            alphas.append(float(alpha[codes[i, j]]))

    logger.debug("Built point cloud: %d points", len(alphas))
    return PointCloud(
        positions=np.array(positions, dtype=float).reshape(-1, 3),
        alphas=np.array(alphas, dtype=float),
    )


def save_npz(path: str, geometry: DrapeGeometry) -> None:
    """Save segment arrays of *geometry* to *path* (creates parent directories if needed).

    Keys: ``starts``, ``ends``, ``alphas``, ``layers``.
    """
    out_dir = os.path.dirname(path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    starts, ends, alphas, layers = geometry.arrays()
    np.savez(path, starts=starts, ends=ends, alphas=alphas, layers=layers)
