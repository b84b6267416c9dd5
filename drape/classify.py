"""Region labels for grid nodes.

Every node is exactly one of:

``SHELL``     on the shape boundary; always drawn.
``INTERIOR``  strictly enclosed by the shape; never drawn as surface lines.
``CLOTH``     outside the shape; drawn only where it was actually pulled.

The shell test runs first, so shell and interior never overlap even though
"inside" includes the boundary.  ``BACKGROUND`` labels the flat reference
layer for opacity lookup and is never returned by :func:`classify`.
"""

from __future__ import annotations

import enum
from typing import Union

import numpy as np

from ._common import _Scalar, as_array, unwrap
from .config import DrapeConfig, ShapeConfig, shape_of
from .displacement import displacement, grid_indices

__all__ = [
    "Region",
    "VISIBLE_EPSILON",
    "classify",
    "classify_grid",
    "has_visible_displacement",
    "is_visible",
]

# world units; absorbs floating-point noise around zero
VISIBLE_EPSILON = 0.1

_AnyConfig = Union[ShapeConfig, DrapeConfig]


class Region(enum.IntEnum):
    CLOTH = 0
    SHELL = 1
    INTERIOR = 2
    BACKGROUND = 3


def _region_codes(i: _Scalar, j: _Scalar, shape: ShapeConfig) -> np.ndarray:
    fp = shape.footprint
    shell = as_array(fp.is_on_shell(i, j))
    inside = as_array(fp.is_inside(i, j))
    return np.where(
        shell, int(Region.SHELL), np.where(inside, int(Region.INTERIOR), int(Region.CLOTH))
    ).astype(np.int8)


def classify(i: int, j: int, config: _AnyConfig) -> Region:
    """Region of the single node ``(i, j)``."""
    return Region(int(_region_codes(i, j, shape_of(config))))


def classify_grid(config: _AnyConfig, density: int = None) -> np.ndarray:
    """Region codes of every node, ``(density+1, density+1)`` ``int8`` indexed ``[i, j]``."""
    if density is None:
        density = config.density
    I, J = grid_indices(density)
    return _region_codes(I, J, shape_of(config))


def is_visible(disp: _Scalar):
    """True where a displacement value is distinguishable from zero."""
    return unwrap(np.abs(as_array(disp)) > VISIBLE_EPSILON)


def has_visible_displacement(i: _Scalar, j: _Scalar, config: _AnyConfig):
    """True where node ``(i, j)`` is displaced by more than :data:`VISIBLE_EPSILON`."""
    return is_visible(displacement(i, j, config))
