"""Grid distance metrics.

A metric maps a grid coordinate ``(i, j)`` and a centre ``(cx, cy)`` to a
non-negative distance in grid units.  The metric decides the footprint
outline of the shape: Chebyshev (L-infinity) gives a square, Euclidean (L2)
a circle.

All metrics accept Python scalars or numpy arrays and broadcast.  Scalar
input returns a Python scalar; Chebyshev distance of integer input stays an
integer so shell tests can compare with ``==``.

Metrics are looked up by :class:`ShapeKind` through a small registry.
Footprints, displacement and classification all go through
:func:`distance`, so replacing the outline of a kind only needs
:func:`register_metric`::

    register_metric(ShapeKind.CUBE, my_metric)
"""

from __future__ import annotations

import enum
from typing import Callable, Dict

import numpy as np

from ._common import _Scalar, as_array, unwrap

# (i, j, cx, cy, size) -> distance
MetricFunc = Callable[[_Scalar, _Scalar, float, float, float], _Scalar]


class ShapeKind(str, enum.Enum):
    """Supported solid primitives; the value is the persisted name."""

    CUBE = "cube"
    SPHERE = "sphere"
    ROUNDED_CUBE = "rounded_cube"

    @classmethod
    def parse(cls, name) -> "ShapeKind":
        """Accept a :class:`ShapeKind` or its case-insensitive name."""
        if isinstance(name, cls):
            return name
        return cls(str(name).strip().lower())


# ===========================================================================
# Metrics
# ===========================================================================

def chebyshev(i: _Scalar, j: _Scalar, cx: float, cy: float) -> _Scalar:
    """L-infinity distance ``max(|i - cx|, |j - cy|)``."""
    dx = np.abs(as_array(i) - cx)
    dy = np.abs(as_array(j) - cy)
    return unwrap(np.maximum(dx, dy))


def euclidean(i: _Scalar, j: _Scalar, cx: float, cy: float) -> _Scalar:
    """L2 distance ``sqrt((i - cx)**2 + (j - cy)**2)``."""
    dx = as_array(i) - cx
    dy = as_array(j) - cy
    return unwrap(np.hypot(dx, dy))


def rounded_chebyshev(
    i: _Scalar, j: _Scalar, cx: float, cy: float, half_extent: float
) -> _Scalar:
    """Chebyshev distance with Euclidean corners beyond a square of *half_extent*.

    Inside the square and in the four face strips this is exactly
    :func:`chebyshev`.  In the corner regions, where both ``|dx|`` and
    ``|dy|`` exceed *half_extent*, the distance is
    ``half_extent + hypot(|dx| - half_extent, |dy| - half_extent)``, i.e.
    the 2-D box signed distance offset by the half extent.
    Iso-lines outside the square are therefore rounded squares instead of
    sharp ones, which keeps the falloff free of diagonal seams.
    """
    h = max(float(half_extent), 0.0)
    dx = np.abs(as_array(i) - cx)
    dy = np.abs(as_array(j) - cy)
    qx = dx - h
    qy = dy - h
    corner = (qx > 0) & (qy > 0)
    rounded = h + np.hypot(np.maximum(qx, 0.0), np.maximum(qy, 0.0))
    return unwrap(np.where(corner, rounded, np.maximum(dx, dy)))


# ===========================================================================
# Registry
# ===========================================================================

_METRICS: Dict[ShapeKind, MetricFunc] = {
    ShapeKind.CUBE: lambda i, j, cx, cy, size: chebyshev(i, j, cx, cy),
    ShapeKind.SPHERE: lambda i, j, cx, cy, size: euclidean(i, j, cx, cy),
    ShapeKind.ROUNDED_CUBE: lambda i, j, cx, cy, size: rounded_chebyshev(i, j, cx, cy, size - 1),
}


def register_metric(kind: ShapeKind, func: MetricFunc) -> None:
    """Install *func* as the metric for *kind* (replacing any previous one)."""
    _METRICS[ShapeKind.parse(kind)] = func


def get_metric(kind: ShapeKind) -> MetricFunc:
    """Return the metric registered for *kind*."""
    return _METRICS[ShapeKind.parse(kind)]


def distance(
    i: _Scalar,
    j: _Scalar,
    cx: float,
    cy: float,
    kind: ShapeKind,
    size: float = 1.0,
) -> _Scalar:
    """Distance of ``(i, j)`` from ``(cx, cy)`` under the metric for *kind*.

    *size* is only consulted by metrics that depend on the shape extent
    (the rounded cube).
    """
    return get_metric(kind)(i, j, cx, cy, size)
