"""Falloff curves for the cloth region.

A curve maps the normalised distance ``t`` beyond the shell (0 at the shell,
1 at the edge of the falloff zone) to a weight in ``[0, 1]``.

``cosine`` is the canonical curve.  ``stiffness`` is the alternative
``1 - t**(1 + 4 * stiffness)`` profile, where stiffness 0 is a linear ramp
and larger values hold the cloth up longer before it drops.
"""

from __future__ import annotations

import enum
from typing import Callable

import numpy as np

from ._common import _Scalar, as_array, unwrap

FalloffFunc = Callable[[_Scalar], _Scalar]


class FalloffKind(str, enum.Enum):
    COSINE = "cosine"
    STIFFNESS = "stiffness"

    @classmethod
    def parse(cls, name) -> "FalloffKind":
        if isinstance(name, cls):
            return name
        return cls(str(name).strip().lower())


def cosine_falloff(t: _Scalar) -> _Scalar:
    """Cosine ease ``(cos(pi * t) + 1) / 2``: 1 at ``t = 0``, 0 at ``t = 1``."""
    return unwrap((np.cos(as_array(t) * np.pi) + 1.0) / 2.0)


def stiffness_falloff(t: _Scalar, stiffness: float = 0.0) -> _Scalar:
    """Power ease ``1 - t**(1 + 4 * stiffness)``, clipped at 0."""
    exponent = 1.0 + 4.0 * stiffness
    return unwrap(np.maximum(1.0 - np.power(as_array(t), exponent), 0.0))


def falloff_curve(kind: FalloffKind, stiffness: float = 0.0) -> FalloffFunc:
    """Return the single-argument curve for *kind*."""
    kind = FalloffKind.parse(kind)
    if kind is FalloffKind.STIFFNESS:
        return lambda t: stiffness_falloff(t, stiffness)
    return cosine_falloff
