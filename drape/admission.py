"""Which grid edges are drawn, and with what endpoint opacities.

Three kinds of edge are decided here:

**Lateral** edges join neighbouring nodes of the displaced layer.  An edge
is drawn only if neither end is ``INTERIOR`` and at least one end is
*renderable* (``SHELL``, or ``CLOTH`` displaced visibly).  Interior nodes
therefore never carry surface lines, which is what makes the shape read as
a solid rather than a raised grid block.

**Wall** edges join a displaced node to its flat reference node.  They are
drawn for renderable nodes only.

**Slice** edges join neighbouring nodes of an intermediate horizontal
cross-section.  Slices are spaced one grid step apart in the displacement
direction, and a node belongs to a slice only while the slice height lies
strictly between the flat layer and the node's own displaced height.  An
edge needs both ends in the slice.

Heights passed to the slice functions are relative to the flat reference
layer, i.e. they are comparable with displacement values.

All predicates take scalars or numpy arrays of :class:`~drape.classify.Region`
codes and displacements and broadcast.
"""

from __future__ import annotations

import math
from typing import List

import numpy as np

from ._common import _Scalar, as_array, unwrap
from .classify import Region, is_visible
from .config import Opacities

__all__ = [
    "is_renderable",
    "admit_lateral",
    "admit_wall",
    "slice_count",
    "slice_heights",
    "in_slice",
    "admit_slice",
    "alpha_table",
    "alpha_for",
]


# ===========================================================================
# Displaced layer
# ===========================================================================

def is_renderable(region, disp: _Scalar):
    """True for shell nodes and for cloth nodes with visible displacement."""
    region = as_array(region)
    visible = as_array(is_visible(disp))
    return unwrap((region == Region.SHELL) | ((region == Region.CLOTH) & visible))


def admit_lateral(region_a, disp_a: _Scalar, region_b, disp_b: _Scalar):
    """True where the edge between two neighbouring displaced nodes is drawn."""
    ra = as_array(region_a)
    rb = as_array(region_b)
    solid = (ra != Region.INTERIOR) & (rb != Region.INTERIOR)
    pulled = as_array(is_renderable(ra, disp_a)) | as_array(is_renderable(rb, disp_b))
    return unwrap(solid & pulled)


def admit_wall(region, disp: _Scalar):
    """True where a node is joined to its flat reference node."""
    return is_renderable(region, disp)


# ===========================================================================
# Intermediate slices
# ===========================================================================

def slice_count(max_displacement: float, spacing: float) -> int:
    """Number of intermediate slices; zero unless displacement exceeds one step."""
    reach = abs(max_displacement)
    if spacing <= 0 or reach <= spacing:
        return 0
    return int(math.floor(reach / spacing))


def slice_heights(max_displacement: float, spacing: float) -> List[float]:
    """Slice heights ``s * spacing * sign(max_displacement)`` for ``s = 1 .. n``."""
    sign = math.copysign(1.0, max_displacement)
    return [s * spacing * sign for s in range(1, slice_count(max_displacement, spacing) + 1)]


def in_slice(height: float, disp: _Scalar):
    """True where *height* lies strictly between 0 and the node's displacement."""
    d = as_array(disp)
    return unwrap(((height > 0) & (d > height)) | ((height < 0) & (d < height)))


def admit_slice(height: float, disp_a: _Scalar, disp_b: _Scalar):
    """True where both ends of a slice edge reach *height*."""
    return unwrap(as_array(in_slice(height, disp_a)) & as_array(in_slice(height, disp_b)))


# ===========================================================================
# Opacity
# ===========================================================================

def alpha_table(opacities: Opacities) -> np.ndarray:
    """Opacities indexed by :class:`~drape.classify.Region` code."""
    table = np.empty(len(Region), dtype=float)
    table[Region.CLOTH] = opacities.cloth
    table[Region.SHELL] = opacities.shell
    table[Region.INTERIOR] = opacities.interior
    table[Region.BACKGROUND] = opacities.background
    return table


def alpha_for(region, opacities: Opacities):
    """Opacity of *region* (a code, :class:`Region` or array of codes)."""
    return unwrap(alpha_table(opacities)[as_array(region)])
