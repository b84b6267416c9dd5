"""
drape — Grid Draping Geometry Engine
====================================

Displaces a flat grid toward the viewer so that it takes on the silhouette
of a solid (cube or sphere), with a sharp shell boundary and a smooth
"cloth" falloff outside it.  The package computes positions, region labels
and the edges a renderer should draw; it does no drawing itself.

Implemented features
--------------------
- Distance metrics: Chebyshev (cube), Euclidean (sphere), rounded
  Chebyshev (cube with smooth corners), pluggable via :func:`register_metric`
- Shape footprints: inside / on-shell tests
- Displacement: full inside the shell, cosine (or stiffness) falloff beyond
- Region labels: :class:`Region` ``SHELL`` / ``INTERIOR`` / ``CLOTH``
- Edge admission: lateral, wall and intermediate-slice edges with
  per-endpoint opacity
- Grid building: :func:`build_drape`, :func:`build_point_cloud`
- Configuration: frozen :class:`DrapeConfig`, JSON :func:`load_config` /
  :func:`store_config`

Quick start
-----------

::

    from drape import DrapeConfig, ShapeConfig, ShapeKind, build_drape

    config = DrapeConfig(
        shape=ShapeConfig(kind=ShapeKind.SPHERE, size=5, center_x=10, center_y=10,
                          max_displacement=200, falloff_extent=12),
        density=20,
    )
    geometry = build_drape(config)
    starts, ends, alphas, layers = geometry.arrays()
"""

from .metrics import (
    ShapeKind,
    chebyshev,
    euclidean,
    rounded_chebyshev,
    distance,
    register_metric,
    get_metric,
)

from .shapes import (
    SPHERE_SHELL_TOLERANCE,
    Footprint,
    CubeFootprint,
    SphereFootprint,
    RoundedCubeFootprint,
    footprint,
    is_inside,
    is_on_shell,
)

from .falloff import (
    FalloffKind,
    cosine_falloff,
    stiffness_falloff,
    falloff_curve,
)

from .config import (
    ConfigError,
    ShapeConfig,
    Opacities,
    DrapeConfig,
    DEFAULT_SETTINGS,
    clamp_settings,
    load_config,
    store_config,
)

from .displacement import displacement, displacement_field

from .classify import (
    Region,
    VISIBLE_EPSILON,
    classify,
    classify_grid,
    has_visible_displacement,
)

from .admission import (
    is_renderable,
    admit_lateral,
    admit_wall,
    slice_count,
    slice_heights,
    in_slice,
    admit_slice,
    alpha_for,
)

from .grid import (
    DisplacedPoint,
    Segment,
    SegmentLayer,
    DrapeGeometry,
    PointCloud,
    build_points,
    build_drape,
    build_point_cloud,
    save_npz,
)

__version__ = "0.1.0"

__all__ = [
    # Metrics
    "ShapeKind",
    "chebyshev",
    "euclidean",
    "rounded_chebyshev",
    "distance",
    "register_metric",
    "get_metric",

    # Footprints
    "SPHERE_SHELL_TOLERANCE",
    "Footprint",
    "CubeFootprint",
    "SphereFootprint",
    "RoundedCubeFootprint",
    "footprint",
    "is_inside",
    "is_on_shell",

    # Falloff
    "FalloffKind",
    "cosine_falloff",
    "stiffness_falloff",
    "falloff_curve",

    # Configuration
    "ConfigError",
    "ShapeConfig",
    "Opacities",
    "DrapeConfig",
    "DEFAULT_SETTINGS",
    "clamp_settings",
    "load_config",
    "store_config",

    # Displacement and classification
    "displacement",
    "displacement_field",
    "Region",
    "VISIBLE_EPSILON",
    "classify",
    "classify_grid",
    "has_visible_displacement",

    # Edge admission
    "is_renderable",
    "admit_lateral",
    "admit_wall",
    "slice_count",
    "slice_heights",
    "in_slice",
    "admit_slice",
    "alpha_for",

    # Grid building
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
