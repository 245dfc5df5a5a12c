"""Best-fit planes and collinearity/coplanarity predicates for point sets and curves."""
from __future__ import annotations

from functools import singledispatch
from typing import List, Optional, Sequence

import numpy as np

from .constants import DISTANCE_TOL
from .curves import (
    Line, Arc, Circle, Polyline, PolyCurve, NurbsCurve,
    control_points, end_point, is_closed, point_at_parameter, start_point, sub_parts,
)
from .errors import UnsupportedCurveError
from .matrix import matrix_rank
from .primitives import Point, Vector, Plane, points_to_array, distance_to_plane

__all__ = ['is_collinear', 'is_coplanar', 'fit_plane', 'is_planar']


def _difference_matrix(points: Sequence[Point]) -> np.ndarray:
    arr = points_to_array(points)
    return arr[1:] - arr[0]


def is_collinear(points: Sequence[Point], tolerance: float = DISTANCE_TOL) -> bool:
    """True when the points span at most a line (rank of differences < 2)."""
    if len(points) < 3:
        return True
    return matrix_rank(_difference_matrix(points), tolerance) < 2


def is_coplanar(points: Sequence[Point], tolerance: float = DISTANCE_TOL) -> bool:
    """True when the points span at most a plane (rank of differences < 3)."""
    if len(points) < 4:
        return True
    return matrix_rank(_difference_matrix(points), tolerance) < 3


def _fit_points(points: Sequence[Point], tolerance: float) -> Optional[Plane]:
    if len(points) < 3:
        return None
    arr = points_to_array(points)
    centroid = arr.mean(axis=0)
    spread = np.sqrt(np.max(np.sum((arr - centroid) ** 2, axis=1)))
    if spread <= tolerance or is_collinear(points, tolerance):
        return None
    # least-squares normal: direction of least variance
    _, _, vt = np.linalg.svd(arr - centroid)
    return Plane(Point.from_array(centroid), Vector.from_array(vt[-1]).normalise())


def _plane_points(curve, tolerance: float) -> List[Point]:
    """Points that pin down the plane of a compound curve.

    Arcs and circles contribute their quarter-sweep points, so a single
    closed arc still spans its plane; straight parts contribute their start.
    """
    if isinstance(curve, Polyline):
        return control_points(curve, tolerance)
    pts: List[Point] = []
    for part in sub_parts(curve):
        if isinstance(part, (Arc, Circle)):
            pts.extend(point_at_parameter(part, k / 4.0) for k in range(4))
        else:
            pts.append(start_point(part))
    if pts and not is_closed(curve, tolerance):
        pts.append(end_point(curve))
    return pts


@singledispatch
def fit_plane(geometry, tolerance: float = DISTANCE_TOL) -> Optional[Plane]:
    """Least-squares plane through a curve or point sequence.

    Returns None when no stable plane exists (too few, coincident or
    collinear points). The result is not a planarity guarantee; see
    :func:`is_planar`.
    """
    raise UnsupportedCurveError('fit_plane', geometry)


@fit_plane.register(list)
@fit_plane.register(tuple)
def _(geometry, tolerance: float = DISTANCE_TOL) -> Optional[Plane]:
    return _fit_points(list(geometry), tolerance)


@fit_plane.register
def _(geometry: Line, tolerance: float = DISTANCE_TOL) -> Optional[Plane]:
    return None


@fit_plane.register
def _(geometry: Arc, tolerance: float = DISTANCE_TOL) -> Optional[Plane]:
    return Plane(geometry.centre, geometry.normal.normalise())


@fit_plane.register
def _(geometry: Circle, tolerance: float = DISTANCE_TOL) -> Optional[Plane]:
    return Plane(geometry.centre, geometry.normal.normalise())


@fit_plane.register(Polyline)
@fit_plane.register(PolyCurve)
def _(geometry, tolerance: float = DISTANCE_TOL) -> Optional[Plane]:
    return _fit_points(_plane_points(geometry, tolerance), tolerance)


@fit_plane.register
def _(geometry: NurbsCurve, tolerance: float = DISTANCE_TOL) -> Optional[Plane]:
    raise UnsupportedCurveError('fit_plane', geometry)


def is_planar(curve, tolerance: float = DISTANCE_TOL) -> bool:
    """True when the curve's defining points lie within ``tolerance`` of its fitted plane.

    Curves with no fittable plane (lines, collinear point runs) count as planar.
    """
    if isinstance(curve, (Arc, Circle)):
        return True
    plane = fit_plane(curve, tolerance)
    if plane is None:
        return True
    return all(distance_to_plane(p, plane) <= tolerance for p in _plane_points(curve, tolerance))
