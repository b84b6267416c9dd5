"""Configuration values for the drape engine.

Every function in the core receives its configuration explicitly as one of
the frozen dataclasses below; nothing reads a module-level "current"
configuration.  Derive a changed configuration with
:func:`dataclasses.replace`.

Persisted form
--------------
The interactive front-end stores its parameters as a flat JSON mapping
(``gridDensity``, ``cubeSize``, ``influenceRadius`` ...).  The influence
radius there is a percentage of the grid density, whereas
:attr:`ShapeConfig.falloff_extent` is in grid units.
:meth:`DrapeConfig.from_settings` and :meth:`DrapeConfig.to_settings`
convert between the two, and :func:`load_config` / :func:`store_config`
read and write the mapping as a JSON file.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import numbers
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from ._common import clamp
from .falloff import FalloffKind
from .metrics import ShapeKind
from .shapes import Footprint, footprint

logger = logging.getLogger(__name__)

__all__ = [
    "ConfigError",
    "ShapeConfig",
    "Opacities",
    "DrapeConfig",
    "DEFAULT_SETTINGS",
    "DENSITY_RANGE",
    "clamp_settings",
    "load_config",
    "store_config",
    "shape_of",
]

DENSITY_RANGE = (10, 40)
INFLUENCE_RANGE = (0.0, 100.0)

DEFAULT_SETTINGS: Dict[str, Any] = {
    "gridDensity": 20,
    "selectedPointX": 10,
    "selectedPointY": 10,
    "zSeparation": 200,
    "cubeSize": 5,
    "influenceRadius": 60,
    "clothAlpha": 0.5,
    "shapeShellAlpha": 0.8,
    "insideShapeAlpha": 0.6,
    "backGridAlpha": 0.5,
    "shapeType": "cube",
    "falloffType": "cosine",
    "clothStiffness": 0.0,
}

_ALPHA_KEYS = ("clothAlpha", "shapeShellAlpha", "insideShapeAlpha", "backGridAlpha")


class ConfigError(ValueError):
    """Raised for persisted configuration that cannot be interpreted."""


# ===========================================================================
# Value types
# ===========================================================================

@dataclasses.dataclass(frozen=True)
class ShapeConfig:
    """Shape placement and displacement profile.

    Attributes
    ----------
    kind:
        Solid primitive; selects the distance metric.
    size:
        Half edge count (cube) or radius (sphere) in grid units.
    center_x, center_y:
        Shape centre in grid coordinates.
    max_displacement:
        Signed displacement applied inside the shape.
    falloff_extent:
        Width in grid units of the cloth zone beyond the shell; ``0`` gives
        a sharp edge.
    falloff:
        Curve used across the cloth zone.
    stiffness:
        Only used by :attr:`FalloffKind.STIFFNESS`.
    """

    kind: ShapeKind = ShapeKind.CUBE
    size: float = 5
    center_x: float = 10
    center_y: float = 10
    max_displacement: float = 200.0
    falloff_extent: float = 12.0
    falloff: FalloffKind = FalloffKind.COSINE
    stiffness: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", ShapeKind.parse(self.kind))
        object.__setattr__(self, "falloff", FalloffKind.parse(self.falloff))

    @property
    def footprint(self) -> Footprint:
        return footprint(self.kind, self.size, self.center_x, self.center_y)


@dataclasses.dataclass(frozen=True)
class Opacities:
    """Per-region line/point opacity."""

    shell: float = 0.8
    cloth: float = 0.5
    interior: float = 0.6
    background: float = 0.5


@dataclasses.dataclass(frozen=True)
class DrapeConfig:
    """Everything needed to build one frame of geometry.

    The grid has ``density + 1`` nodes per axis spanning *extent* world
    units, centred on the origin.  The flat reference layer sits at
    *back_z*; displaced nodes sit at ``back_z + displacement``.
    """

    shape: ShapeConfig = dataclasses.field(default_factory=ShapeConfig)
    density: int = 20
    opacities: Opacities = dataclasses.field(default_factory=Opacities)
    extent: float = 700.0
    back_z: float = -400.0

    @property
    def spacing(self) -> float:
        """World distance between neighbouring grid nodes."""
        return self.extent / self.density

    # ------------------------------------------------------------------
    # Persisted settings
    # ------------------------------------------------------------------

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "DrapeConfig":
        """Build from a flat settings mapping, filling gaps from the defaults."""
        merged = {**DEFAULT_SETTINGS, **settings}
        try:
            density = int(merged["gridDensity"])
            shape = ShapeConfig(
                kind=ShapeKind.parse(merged["shapeType"]),
                size=merged["cubeSize"],
                center_x=merged["selectedPointX"],
                center_y=merged["selectedPointY"],
                max_displacement=float(merged["zSeparation"]),
                falloff_extent=density * float(merged["influenceRadius"]) / 100.0,
                falloff=FalloffKind.parse(merged["falloffType"]),
                stiffness=float(merged["clothStiffness"]),
            )
            opacities = Opacities(
                shell=float(merged["shapeShellAlpha"]),
                cloth=float(merged["clothAlpha"]),
                interior=float(merged["insideShapeAlpha"]),
                background=float(merged["backGridAlpha"]),
            )
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"invalid drape settings: {exc}") from exc
        return cls(shape=shape, density=density, opacities=opacities)

    def to_settings(self) -> Dict[str, Any]:
        """Inverse of :meth:`from_settings`."""
        s = self.shape
        return {
            "gridDensity": self.density,
            "selectedPointX": s.center_x,
            "selectedPointY": s.center_y,
            "zSeparation": s.max_displacement,
            "cubeSize": s.size,
            "influenceRadius": (
                s.falloff_extent * 100.0 / self.density if self.density > 0 else 0.0
            ),
            "clothAlpha": self.opacities.cloth,
            "shapeShellAlpha": self.opacities.shell,
            "insideShapeAlpha": self.opacities.interior,
            "backGridAlpha": self.opacities.background,
            "shapeType": s.kind.value,
            "falloffType": s.falloff.value,
            "clothStiffness": s.stiffness,
        }

    def clamped(self) -> "DrapeConfig":
        """Return a copy with every parameter inside its supported range."""
        return DrapeConfig.from_settings(clamp_settings(self.to_settings()))


# ===========================================================================
# Validation
# ===========================================================================

def _clamp_key(settings: Dict[str, Any], key: str, lo: float, hi: float) -> None:
    value = settings[key]
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ConfigError(f"{key} must be a number, got {value!r}")
    fixed = clamp(value, lo, hi)
    if fixed != value:
        fixed = int(fixed) if isinstance(value, int) else float(fixed)
        logger.warning("Clamped %s from %r to %r", key, value, fixed)
        settings[key] = fixed


def clamp_settings(settings: Mapping[str, Any]) -> Dict[str, Any]:
    """Clamp a flat settings mapping to the ranges the front-end allows.

    Density is kept within :data:`DENSITY_RANGE`, the size is at least 1,
    the centre lies on the grid, the influence radius is a percentage and
    every opacity is in ``[0, 1]``.  Each change is logged.
    """
    out = {**DEFAULT_SETTINGS, **settings}
    _clamp_key(out, "gridDensity", *DENSITY_RANGE)
    density = out["gridDensity"]
    _clamp_key(out, "cubeSize", 1, float("inf"))
    _clamp_key(out, "selectedPointX", 0, density)
    _clamp_key(out, "selectedPointY", 0, density)
    _clamp_key(out, "influenceRadius", *INFLUENCE_RANGE)
    _clamp_key(out, "clothStiffness", 0.0, 1.0)
    for key in _ALPHA_KEYS:
        _clamp_key(out, key, 0.0, 1.0)
    return out


# ===========================================================================
# JSON persistence
# ===========================================================================

def load_config(path: Union[str, Path]) -> DrapeConfig:
    """Load a :class:`DrapeConfig` from a JSON settings file.

    A missing file gives the defaults.  Values are clamped to their
    supported ranges.
    """
    path = Path(path)
    if not path.exists():
        logger.info("No saved configuration at %s, using defaults", path)
        return DrapeConfig.from_settings(DEFAULT_SETTINGS)
    try:
        settings = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: not valid JSON ({exc})") from exc
    if not isinstance(settings, dict):
        raise ConfigError(f"{path}: expected a JSON object, got {type(settings).__name__}")
    logger.info("Loaded configuration from %s", path)
    try:
        return DrapeConfig.from_settings(clamp_settings(settings))
    except TypeError as exc:
        raise ConfigError(f"{path}: invalid drape settings ({exc})") from exc


def store_config(config: DrapeConfig, path: Union[str, Path]) -> None:
    """Write *config* to *path* as JSON (creates parent directories if needed)."""
    out_dir = os.path.dirname(str(path))
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    Path(path).write_text(json.dumps(config.to_settings(), indent=2), encoding="utf-8")
    logger.info("Stored configuration to %s", path)


def shape_of(config: Union[ShapeConfig, DrapeConfig]) -> ShapeConfig:
    """Return the :class:`ShapeConfig` of *config* (which may be either type)."""
    if isinstance(config, DrapeConfig):
        return config.shape
    return config
