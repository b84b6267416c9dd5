"""Shared array helpers used across the drape package.

This module provides:

* **Type aliases**: :data:`_F`, :data:`_Scalar`
* **Math helpers**: :func:`clamp`, :func:`as_array`, :func:`unwrap`

Not meant to be imported directly by end users — import from
``drape`` instead.
"""

from __future__ import annotations

from typing import Union

import numpy as np
import numpy.typing as npt

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------
_F = npt.NDArray[np.floating]
_Scalar = Union[float, int, np.ndarray]

__all__ = ["_F", "_Scalar", "clamp", "as_array", "unwrap"]


# ===========================================================================
# Math helpers
# ===========================================================================

def clamp(x: _Scalar, lo: float, hi: float) -> _Scalar:
    """Clamp *x* element-wise to ``[lo, hi]``."""
    return np.minimum(np.maximum(x, lo), hi)


def as_array(x: _Scalar) -> np.ndarray:
    """Return *x* as an ndarray without copying integer input to float."""
    return np.asarray(x)


def unwrap(x: np.ndarray):
    """Return a Python scalar for 0-d results, the array otherwise."""
    if np.ndim(x) == 0:
        return x.item()
    return x
