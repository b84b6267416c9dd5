"""Two-zone displacement profile.

For a node at distance ``d`` from the shape centre, with shell radius
``r = size - 1`` and falloff extent ``F``:

* ``d <= r``            full displacement (interior and shell; for size 1 the
                         single shell node)
* ``r < d <= r + F``    ``max_displacement * curve((d - r) / F)``
* otherwise             0

``F == 0`` removes the middle zone: the grid drops from full displacement
to zero at the shell with no intermediate values.  The sign of
``max_displacement`` passes through unchanged.
"""

from __future__ import annotations

from typing import Union

import numpy as np

from ._common import _F, _Scalar, as_array, unwrap
from .config import DrapeConfig, ShapeConfig, shape_of
from .falloff import falloff_curve

__all__ = ["displacement", "displacement_field", "grid_indices"]

_AnyConfig = Union[ShapeConfig, DrapeConfig]


def displacement(i: _Scalar, j: _Scalar, config: _AnyConfig) -> _Scalar:
    """Signed displacement of node ``(i, j)``; broadcasts over arrays."""
    shape = shape_of(config)
    d = as_array(shape.footprint.distance(i, j))
    r = shape.size - 1
    extent = shape.falloff_extent

    full = as_array(shape.footprint.is_inside(i, j))
    out = np.where(full, float(shape.max_displacement), 0.0)
    if extent > 0:
        zone = ~full & (d <= r + extent)
        # outside the zone t is pinned to 1 so the curve never sees t > 1
        t = np.where(zone, (d - r) / extent, 1.0)
        weight = as_array(falloff_curve(shape.falloff, shape.stiffness)(t))
        out = np.where(zone, shape.max_displacement * weight, out)
    return unwrap(out)


def grid_indices(density: int):
    """Integer index arrays ``(I, J)`` of shape ``(density+1, density+1)``, indexed ``[i, j]``."""
    n = np.arange(density + 1)
    return np.meshgrid(n, n, indexing="ij")


def displacement_field(config: _AnyConfig, density: int = None) -> _F:
    """Displacement of every grid node as a ``(density+1, density+1)`` array.

    *density* defaults to ``config.density`` when a :class:`DrapeConfig` is
    given.
    """
    if density is None:
        density = config.density
    I, J = grid_indices(density)
    return np.asarray(displacement(I, J, config), dtype=float)
