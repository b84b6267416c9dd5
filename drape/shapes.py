"""Shape footprints: inside / on-shell tests for the supported solids.

A :class:`Footprint` is the 2-D projection of a solid onto the grid.  It
wraps a distance metric (see :mod:`drape.metrics`) together with the rule
that decides which grid nodes form the visible boundary ("shell").

The shell radius of a shape of *size* ``s`` is ``s - 1`` grid units:

* **inside**   ``distance <= s - 1``
* **on shell** cube: ``distance == s - 1`` (Chebyshev distance of integer
  nodes is an integer, so exact equality is safe); sphere:
  ``|distance - (s - 1)| <= 0.7``, a band wide enough to give a closed
  ring on a discrete grid.

A shape of size 1 is a single node: the grid node nearest the centre is its
shell and nothing is interior.  Sizes below 1 give an empty footprint.
"""

from __future__ import annotations

from typing import Dict, Type

import numpy as np

from ._common import _Scalar, as_array, unwrap
from .metrics import ShapeKind, distance

__all__ = [
    "SPHERE_SHELL_TOLERANCE",
    "Footprint",
    "CubeFootprint",
    "SphereFootprint",
    "RoundedCubeFootprint",
    "footprint",
    "is_inside",
    "is_on_shell",
]

SPHERE_SHELL_TOLERANCE = 0.7


# ===========================================================================
# Base class
# ===========================================================================

class Footprint:
    """Base class for shape footprints centred at ``(center_x, center_y)``.

    Subclasses set :attr:`kind` and override :meth:`_shell_mask`.
    """

    kind: ShapeKind = ShapeKind.CUBE

    def __init__(self, size: float, center_x: float, center_y: float) -> None:
        self.size = size
        self.center_x = center_x
        self.center_y = center_y

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(size={self.size!r}, "
            f"center_x={self.center_x!r}, center_y={self.center_y!r})"
        )

    @property
    def radius(self) -> float:
        """Shell radius in grid units (``size - 1``)."""
        return self.size - 1

    def distance(self, i: _Scalar, j: _Scalar) -> _Scalar:
        """Distance of ``(i, j)`` from the centre under this shape's metric."""
        return distance(i, j, self.center_x, self.center_y, self.kind, self.size)

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    def is_inside(self, i: _Scalar, j: _Scalar):
        """True where ``(i, j)`` lies within the solid (shell included)."""
        if self.size < 1:
            return self._empty_mask(i, j)
        if self.size == 1:
            return self._center_mask(i, j)
        return unwrap(as_array(self.distance(i, j)) <= self.radius)

    def is_on_shell(self, i: _Scalar, j: _Scalar):
        """True where ``(i, j)`` lies on the solid's visible boundary."""
        if self.size < 1:
            return self._empty_mask(i, j)
        if self.size == 1:
            return self._center_mask(i, j)
        return unwrap(self._shell_mask(as_array(self.distance(i, j))))

    def _shell_mask(self, d: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def _center_mask(self, i: _Scalar, j: _Scalar):
        ci = np.floor(self.center_x + 0.5)
        cj = np.floor(self.center_y + 0.5)
        return unwrap((as_array(i) == ci) & (as_array(j) == cj))

    def _empty_mask(self, i: _Scalar, j: _Scalar):
        shape = np.broadcast(as_array(i), as_array(j)).shape
        return unwrap(np.zeros(shape, dtype=bool))


# ===========================================================================
# Concrete footprints
# ===========================================================================

class CubeFootprint(Footprint):
    """Square footprint (Chebyshev metric)."""

    kind = ShapeKind.CUBE

    def _shell_mask(self, d: np.ndarray) -> np.ndarray:
        return d == self.radius


class SphereFootprint(Footprint):
    """Circular footprint (Euclidean metric) with a tolerance band shell."""

    kind = ShapeKind.SPHERE

    def __init__(
        self,
        size: float,
        center_x: float,
        center_y: float,
        tolerance: float = SPHERE_SHELL_TOLERANCE,
    ) -> None:
        super().__init__(size, center_x, center_y)
        self.tolerance = tolerance

    def _shell_mask(self, d: np.ndarray) -> np.ndarray:
        return np.abs(d - self.radius) <= self.tolerance


class RoundedCubeFootprint(CubeFootprint):
    """Square footprint whose falloff iso-lines have rounded corners.

    Within the square the rounded metric equals Chebyshev, so inside and
    shell tests match :class:`CubeFootprint`; only distances in the corner
    regions outside the square differ.
    """

    kind = ShapeKind.ROUNDED_CUBE


_FOOTPRINTS: Dict[ShapeKind, Type[Footprint]] = {
    ShapeKind.CUBE: CubeFootprint,
    ShapeKind.SPHERE: SphereFootprint,
    ShapeKind.ROUNDED_CUBE: RoundedCubeFootprint,
}


def footprint(kind: ShapeKind, size: float, center_x: float, center_y: float) -> Footprint:
    """Return the footprint instance for *kind*."""
    return _FOOTPRINTS[ShapeKind.parse(kind)](size, center_x, center_y)


# ===========================================================================
# Functional interface
# ===========================================================================

def is_inside(i, j, kind, size, center_x, center_y):
    """True where ``(i, j)`` is within a *kind* shape of *size*."""
    return footprint(kind, size, center_x, center_y).is_inside(i, j)


def is_on_shell(i, j, kind, size, center_x, center_y):
    """True where ``(i, j)`` is on the shell of a *kind* shape of *size*."""
    return footprint(kind, size, center_x, center_y).is_on_shell(i, j)
