"""Rigid rotations of geometry about an axis through a point."""
from __future__ import annotations

import math
from functools import singledispatch

from .curves import Line, Arc, Circle, Polyline, PolyCurve, NurbsCurve
from .errors import UnsupportedCurveError
from .primitives import Point, Vector, Plane, Cartesian

__all__ = ['rotate_vector', 'rotate']


def rotate_vector(vector: Vector, rad: float, axis: Vector) -> Vector:
    """Rodrigues' rotation of ``vector`` by ``rad`` about ``axis``."""
    k = axis.normalise()
    c, s = math.cos(rad), math.sin(rad)
    return vector * c + k.cross(vector) * s + k * (k.dot(vector) * (1.0 - c))


@singledispatch
def rotate(geometry, origin: Point, axis: Vector, rad: float):
    """Rotate ``geometry`` by ``rad`` radians about ``axis`` through ``origin``."""
    raise UnsupportedCurveError('rotate', geometry)


@rotate.register
def _(geometry: Point, origin: Point, axis: Vector, rad: float) -> Point:
    return origin + rotate_vector(geometry - origin, rad, axis)


@rotate.register
def _(geometry: Vector, origin: Point, axis: Vector, rad: float) -> Vector:
    return rotate_vector(geometry, rad, axis)


@rotate.register
def _(geometry: Plane, origin: Point, axis: Vector, rad: float) -> Plane:
    return Plane(rotate(geometry.origin, origin, axis, rad), rotate_vector(geometry.normal, rad, axis))


@rotate.register
def _(geometry: Cartesian, origin: Point, axis: Vector, rad: float) -> Cartesian:
    return Cartesian(
        rotate(geometry.origin, origin, axis, rad),
        rotate_vector(geometry.x, rad, axis),
        rotate_vector(geometry.y, rad, axis),
        rotate_vector(geometry.z, rad, axis),
    )


@rotate.register
def _(geometry: Line, origin: Point, axis: Vector, rad: float) -> Line:
    return Line(rotate(geometry.start, origin, axis, rad), rotate(geometry.end, origin, axis, rad), geometry.infinite)


@rotate.register
def _(geometry: Arc, origin: Point, axis: Vector, rad: float) -> Arc:
    return Arc(rotate(geometry.coordinate_system, origin, axis, rad), geometry.radius,
               geometry.start_angle, geometry.end_angle)


@rotate.register
def _(geometry: Circle, origin: Point, axis: Vector, rad: float) -> Circle:
    return Circle(rotate(geometry.centre, origin, axis, rad), rotate_vector(geometry.normal, rad, axis), geometry.radius)


@rotate.register
def _(geometry: Polyline, origin: Point, axis: Vector, rad: float) -> Polyline:
    return Polyline(tuple(rotate(p, origin, axis, rad) for p in geometry.control_points))


@rotate.register
def _(geometry: PolyCurve, origin: Point, axis: Vector, rad: float) -> PolyCurve:
    return PolyCurve(tuple(rotate(c, origin, axis, rad) for c in geometry.curves))


@rotate.register
def _(geometry: NurbsCurve, origin: Point, axis: Vector, rad: float):
    raise UnsupportedCurveError('rotate', geometry)
