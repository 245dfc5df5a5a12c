"""Public package API for the bimgeom geometry query toolkit.

This facade provides a flat import surface on top of the internal
implementation package ``bimgeom.core`` while deferring the matplotlib
import (plotting) until first use to keep ``import bimgeom`` fast.

Example
-------
    from bimgeom import Polyline, Point, is_containing

    square = Polyline([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)])
    is_containing(square, Point(0.5, 0.5))   # True

The deeper modules (``bimgeom.core.*``) are considered internal and may
change; rely on this layer for public symbols.
"""
from importlib import import_module as _imp
import logging as _logging

try:  # runtime version export
    from importlib.metadata import version as _pkg_version, PackageNotFoundError as _NotFound
    __version__ = _pkg_version("bimgeom")  # populated when installed
except _NotFound:  # pragma: no cover - source checkout
    __version__ = "0.0.0+dev"

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

# Eager light-weight submodules
_const = _imp('bimgeom.core.constants')
_prim = _imp('bimgeom.core.primitives')
_curves = _imp('bimgeom.core.curves')
_matrix = _imp('bimgeom.core.matrix')
_fitting = _imp('bimgeom.core.fitting')
_inter = _imp('bimgeom.core.intersections')
_param = _imp('bimgeom.core.parameter')
_contain = _imp('bimgeom.core.containment')
_transform = _imp('bimgeom.core.transform')
_measure = _imp('bimgeom.core.measure')
_config = _imp('bimgeom.core.config')
_errors = _imp('bimgeom.core.errors')
_log = _imp('bimgeom.core.logging_utils')


def plot_containment(*args, **kwargs):
    """Lazy wrapper around :func:`bimgeom.core.visualization.plot_containment`."""
    return _imp('bimgeom.core.visualization').plot_containment(*args, **kwargs)


# Tolerances
DISTANCE_TOL = _const.DISTANCE_TOL
ANGLE_TOL = _const.ANGLE_TOL
MICRO_DISTANCE_TOL = _const.MICRO_DISTANCE_TOL
NOT_ON_CURVE = _const.NOT_ON_CURVE

# Value types
Point = _prim.Point
Vector = _prim.Vector
Plane = _prim.Plane
Cartesian = _prim.Cartesian
BoundingBox = _prim.BoundingBox
Line = _curves.Line
Arc = _curves.Arc
Circle = _curves.Circle
Polyline = _curves.Polyline
PolyCurve = _curves.PolyCurve
NurbsCurve = _curves.NurbsCurve

# Core operations
row_echelon_form = _matrix.row_echelon_form
count_nonzero_rows = _matrix.count_nonzero_rows
ref_tolerance = _matrix.ref_tolerance
parameter_at_point = _param.parameter_at_point
point_at_parameter = _curves.point_at_parameter
is_containing = _contain.is_containing

# Kernel queries
fit_plane = _fitting.fit_plane
is_planar = _fitting.is_planar
is_closed = _curves.is_closed
length = _curves.length
bounds = _curves.bounds
closest_point = _curves.closest_point
curve_planar_intersections = _inter.curve_planar_intersections
rotate = _transform.rotate
distance_to_curve = _measure.distance_to_curve

# Configuration, errors, logging
ContainmentConfig = _config.ContainmentConfig
UnsupportedCurveError = _errors.UnsupportedCurveError
get_logger = _log.get_logger
configure_logging = _log.configure_logging

__all__ = [
    '__version__',
    # tolerances
    'DISTANCE_TOL', 'ANGLE_TOL', 'MICRO_DISTANCE_TOL', 'NOT_ON_CURVE',
    # value types
    'Point', 'Vector', 'Plane', 'Cartesian', 'BoundingBox',
    'Line', 'Arc', 'Circle', 'Polyline', 'PolyCurve', 'NurbsCurve',
    # core
    'row_echelon_form', 'count_nonzero_rows', 'ref_tolerance',
    'parameter_at_point', 'point_at_parameter', 'is_containing',
    # kernel
    'fit_plane', 'is_planar', 'is_closed', 'length', 'bounds', 'closest_point',
    'curve_planar_intersections', 'rotate', 'distance_to_curve',
    # plumbing
    'ContainmentConfig', 'UnsupportedCurveError', 'get_logger', 'configure_logging',
    'plot_containment',
]
