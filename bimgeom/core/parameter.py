"""Curve parameterization: map a point on a curve back to its parameter.

``parameter_at_point`` is the inverse of
:func:`bimgeom.core.curves.point_at_parameter`: parameters are normalised to
[0, 1] along arclength (lines, polylines, polycurves) or angle (arcs,
circles). Points further than ``tolerance`` from the curve yield
:data:`NOT_ON_CURVE`. On closed curves the seam maps to 0.
"""
from __future__ import annotations

import math
from functools import singledispatch

from .constants import DISTANCE_TOL, ANGLE_TOL, NOT_ON_CURVE
from .curves import (
    Line, Arc, Circle, Polyline, PolyCurve, NurbsCurve, TWO_PI,
    closest_point, length, sub_parts, start_point,
)
from .errors import UnsupportedCurveError
from .primitives import Point, square_distance, distance

__all__ = ['parameter_at_point', 'is_on_curve']


def _off_curve(curve, point: Point, tolerance: float) -> bool:
    return square_distance(closest_point(curve, point), point) > tolerance * tolerance


@singledispatch
def parameter_at_point(curve, point: Point, tolerance: float = DISTANCE_TOL) -> float:
    """Normalised parameter of ``point`` on ``curve`` or ``NOT_ON_CURVE``.

    Raises
    ------
    UnsupportedCurveError
        For NurbsCurve and for objects that are not curves.
    """
    raise UnsupportedCurveError('parameter_at_point', curve)


@parameter_at_point.register
def _(curve: Line, point: Point, tolerance: float = DISTANCE_TOL) -> float:
    if _off_curve(curve, point, tolerance):
        return NOT_ON_CURVE
    l = length(curve)
    if l == 0.0:
        return 0.0
    return distance(point, curve.start) / l


@parameter_at_point.register
def _(curve: Circle, point: Point, tolerance: float = DISTANCE_TOL) -> float:
    if _off_curve(curve, point, tolerance):
        return NOT_ON_CURVE
    v1 = start_point(curve) - curve.centre
    v2 = point - curve.centre
    return ((v1.signed_angle(v2, curve.normal) + TWO_PI) % TWO_PI) / TWO_PI


@parameter_at_point.register
def _(curve: Arc, point: Point, tolerance: float = DISTANCE_TOL) -> float:
    if _off_curve(curve, point, tolerance):
        return NOT_ON_CURVE
    if curve.sweep == 0.0:
        return 0.0
    cs = curve.coordinate_system
    angle = cs.x.signed_angle(point - cs.origin, cs.z) - curve.start_angle
    # tiny negative angles at the seam would wrap to ~2*pi
    if abs(angle) < ANGLE_TOL or abs(angle - TWO_PI) < ANGLE_TOL:
        angle = 0.0
    return ((angle + TWO_PI) % TWO_PI) / curve.sweep


@parameter_at_point.register(Polyline)
@parameter_at_point.register(PolyCurve)
def _(curve, point: Point, tolerance: float = DISTANCE_TOL) -> float:
    sq_tol = tolerance * tolerance
    total = length(curve)
    walked = 0.0
    # first matching sub-part wins, also at shared vertices
    for part in sub_parts(curve):
        part_length = length(part)
        if square_distance(closest_point(part, point), point) <= sq_tol:
            if total == 0.0:
                return 0.0
            return (walked + parameter_at_point(part, point, tolerance) * part_length) / total
        walked += part_length
    return NOT_ON_CURVE


@parameter_at_point.register
def _(curve: NurbsCurve, point: Point, tolerance: float = DISTANCE_TOL) -> float:
    raise UnsupportedCurveError('parameter_at_point', curve)


def is_on_curve(curve, point: Point, tolerance: float = DISTANCE_TOL) -> bool:
    return not math.isclose(parameter_at_point(curve, point, tolerance), NOT_ON_CURVE)
