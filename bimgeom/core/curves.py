"""Curve value types and the per-type queries the geometry core relies on.

Curves form a closed set of variants: Line, Arc, Circle, Polyline, PolyCurve
and NurbsCurve. Queries dispatch on the variant with ``functools.singledispatch``;
NurbsCurve (and anything that is not a curve) is registered explicitly and
raises :class:`UnsupportedCurveError` so an unsupported type can never be
mistaken for a ``False`` answer.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from functools import singledispatch
from typing import List, Tuple, Union

import numpy as np

from .constants import DISTANCE_TOL, ANGLE_TOL, MICRO_DISTANCE_TOL
from .errors import UnsupportedCurveError
from .primitives import (
    Point, Vector, Cartesian, BoundingBox, X_AXIS, Y_AXIS, Z_AXIS,
    square_distance, distance, project, Plane, as_points,
)

TWO_PI = 2.0 * math.pi

__all__ = [
    'Line', 'Arc', 'Circle', 'Polyline', 'PolyCurve', 'NurbsCurve', 'Curve',
    'start_point', 'end_point', 'length', 'is_closed', 'sub_parts', 'control_points',
    'point_at_parameter', 'tangent_at_point', 'closest_point', 'bounds',
    'direction', 'circle_frame', 'sample', 'TWO_PI',
]


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Line:
    start: Point
    end: Point
    infinite: bool = False


@dataclass(frozen=True)
class Arc:
    """Counter-clockwise arc about ``coordinate_system.z`` from start to end angle."""
    coordinate_system: Cartesian
    radius: float
    start_angle: float = 0.0
    end_angle: float = TWO_PI

    def __post_init__(self):
        if self.radius < 0:
            raise ValueError(f"radius must be non-negative, got {self.radius}")
        if self.end_angle < self.start_angle:
            raise ValueError("end_angle must not be smaller than start_angle")

    @property
    def centre(self) -> Point:
        return self.coordinate_system.origin

    @property
    def normal(self) -> Vector:
        return self.coordinate_system.z

    @property
    def sweep(self) -> float:
        return self.end_angle - self.start_angle

    def point_at_angle(self, theta: float) -> Point:
        cs = self.coordinate_system
        return cs.origin + cs.x * (self.radius * math.cos(theta)) + cs.y * (self.radius * math.sin(theta))

    @classmethod
    def by_centre(cls, centre: Point, radius: float, start_angle: float, end_angle: float,
                  normal: Vector = Z_AXIS, reference: Vector = X_AXIS) -> 'Arc':
        return cls(Cartesian.from_plane(centre, reference, normal), radius, start_angle, end_angle)

    @classmethod
    def from_points(cls, start: Point, middle: Point, end: Point) -> 'Arc':
        """Arc through three points, running from ``start`` via ``middle`` to ``end``."""
        u = middle - start
        v = end - start
        w = u.cross(v)
        w_sq = w.square_length()
        if w_sq <= MICRO_DISTANCE_TOL * MICRO_DISTANCE_TOL:
            raise ValueError("cannot build an arc through collinear points")
        offset = (v.cross(w) * u.square_length() + w.cross(u) * v.square_length()) / (2.0 * w_sq)
        centre = start + offset
        cs = Cartesian.from_plane(centre, start - centre, w)
        rel = end - centre
        end_angle = math.atan2(rel.dot(cs.y), rel.dot(cs.x)) % TWO_PI
        if end_angle <= ANGLE_TOL:
            end_angle = TWO_PI
        return cls(cs, offset.length(), 0.0, end_angle)


@dataclass(frozen=True)
class Circle:
    centre: Point
    normal: Vector = Z_AXIS
    radius: float = 1.0

    def __post_init__(self):
        if self.radius < 0:
            raise ValueError(f"radius must be non-negative, got {self.radius}")


@dataclass(frozen=True)
class Polyline:
    control_points: Tuple[Point, ...]

    def __post_init__(self):
        pts = tuple(as_points(self.control_points))
        if len(pts) < 2:
            raise ValueError("a polyline needs at least two points")
        object.__setattr__(self, 'control_points', pts)


@dataclass(frozen=True)
class PolyCurve:
    curves: Tuple['Curve', ...]

    def __post_init__(self):
        object.__setattr__(self, 'curves', tuple(self.curves))


@dataclass(frozen=True)
class NurbsCurve:
    """Carried for completeness; no query is implemented for it."""
    control_points: Tuple[Point, ...] = ()
    weights: Tuple[float, ...] = ()
    knots: Tuple[float, ...] = field(default_factory=tuple)


Curve = Union[Line, Arc, Circle, Polyline, PolyCurve, NurbsCurve]


def circle_frame(circle: Circle) -> Cartesian:
    """Local frame of a circle; its x axis is the start (seam) direction.

    The seam is the global X axis projected onto the circle plane, or global Y
    when the normal is parallel to X.
    """
    ref = X_AXIS if not circle.normal.is_parallel(X_AXIS, ANGLE_TOL) else Y_AXIS
    return Cartesian.from_plane(circle.centre, ref, circle.normal)


def _as_arc(circle: Circle) -> Arc:
    return Arc(circle_frame(circle), circle.radius, 0.0, TWO_PI)


def direction(line: Line) -> Vector:
    return (line.end - line.start).normalise()


def _unsupported(operation):
    def _raise(curve, *args, **kwargs):
        raise UnsupportedCurveError(operation, curve)
    return _raise


# ---------------------------------------------------------------------------
# End points and length
# ---------------------------------------------------------------------------

@singledispatch
def start_point(curve) -> Point:
    raise UnsupportedCurveError('start_point', curve)


@start_point.register
def _(curve: Line) -> Point:
    return curve.start


@start_point.register
def _(curve: Arc) -> Point:
    return curve.point_at_angle(curve.start_angle)


@start_point.register
def _(curve: Circle) -> Point:
    return _as_arc(curve).point_at_angle(0.0)


@start_point.register
def _(curve: Polyline) -> Point:
    return curve.control_points[0]


@start_point.register
def _(curve: PolyCurve) -> Point:
    if not curve.curves:
        raise ValueError("empty polycurve has no start point")
    return start_point(curve.curves[0])


@singledispatch
def end_point(curve) -> Point:
    raise UnsupportedCurveError('end_point', curve)


@end_point.register
def _(curve: Line) -> Point:
    return curve.end


@end_point.register
def _(curve: Arc) -> Point:
    return curve.point_at_angle(curve.end_angle)


@end_point.register
def _(curve: Circle) -> Point:
    return start_point(curve)


@end_point.register
def _(curve: Polyline) -> Point:
    return curve.control_points[-1]


@end_point.register
def _(curve: PolyCurve) -> Point:
    if not curve.curves:
        raise ValueError("empty polycurve has no end point")
    return end_point(curve.curves[-1])


@singledispatch
def length(curve) -> float:
    raise UnsupportedCurveError('length', curve)


@length.register
def _(curve: Line) -> float:
    return distance(curve.start, curve.end)


@length.register
def _(curve: Arc) -> float:
    return curve.radius * curve.sweep


@length.register
def _(curve: Circle) -> float:
    return TWO_PI * curve.radius


@length.register(Polyline)
@length.register(PolyCurve)
def _(curve) -> float:
    return sum(length(c) for c in sub_parts(curve))


# ---------------------------------------------------------------------------
# Topology
# ---------------------------------------------------------------------------

@singledispatch
def sub_parts(curve) -> List:
    """Ordered simple segments (Line, Arc or Circle) composing the curve."""
    raise UnsupportedCurveError('sub_parts', curve)


@sub_parts.register(Line)
@sub_parts.register(Arc)
@sub_parts.register(Circle)
def _(curve) -> List:
    return [curve]


@sub_parts.register
def _(curve: Polyline) -> List[Line]:
    pts = curve.control_points
    return [Line(pts[i], pts[i + 1]) for i in range(len(pts) - 1)]


@sub_parts.register
def _(curve: PolyCurve) -> List:
    parts = []
    for c in curve.curves:
        parts.extend(sub_parts(c))
    return parts


@singledispatch
def is_closed(curve, tolerance: float = DISTANCE_TOL) -> bool:
    raise UnsupportedCurveError('is_closed', curve)


@is_closed.register
def _(curve: Line, tolerance: float = DISTANCE_TOL) -> bool:
    return False


@is_closed.register
def _(curve: Arc, tolerance: float = DISTANCE_TOL) -> bool:
    if curve.sweep >= TWO_PI - ANGLE_TOL:
        return True
    return square_distance(start_point(curve), end_point(curve)) <= tolerance * tolerance


@is_closed.register
def _(curve: Circle, tolerance: float = DISTANCE_TOL) -> bool:
    return True


@is_closed.register
def _(curve: Polyline, tolerance: float = DISTANCE_TOL) -> bool:
    pts = curve.control_points
    return len(pts) > 2 and square_distance(pts[0], pts[-1]) <= tolerance * tolerance


@is_closed.register
def _(curve: PolyCurve, tolerance: float = DISTANCE_TOL) -> bool:
    parts = sub_parts(curve)
    if not parts:
        return False
    sq_tol = tolerance * tolerance
    for prev, nxt in zip(parts, parts[1:]):
        if square_distance(end_point(prev), start_point(nxt)) > sq_tol:
            return False
    if len(parts) == 1:
        return is_closed(parts[0], tolerance)
    return square_distance(end_point(parts[-1]), start_point(parts[0])) <= sq_tol


@singledispatch
def control_points(curve, tolerance: float = DISTANCE_TOL) -> List[Point]:
    """Defining points of a curve, in order.

    Polycurves drop the start of a sub-part that coincides, within
    ``tolerance``, with the end of the previous one.
    """
    raise UnsupportedCurveError('control_points', curve)


@control_points.register
def _(curve: Line, tolerance: float = DISTANCE_TOL) -> List[Point]:
    return [curve.start, curve.end]


@control_points.register
def _(curve: Arc, tolerance: float = DISTANCE_TOL) -> List[Point]:
    mid = 0.5 * (curve.start_angle + curve.end_angle)
    return [start_point(curve), curve.point_at_angle(mid), end_point(curve)]


@control_points.register
def _(curve: Circle, tolerance: float = DISTANCE_TOL) -> List[Point]:
    arc = _as_arc(curve)
    return [arc.point_at_angle(k * math.pi / 2.0) for k in range(5)]


@control_points.register
def _(curve: Polyline, tolerance: float = DISTANCE_TOL) -> List[Point]:
    return list(curve.control_points)


@control_points.register
def _(curve: PolyCurve, tolerance: float = DISTANCE_TOL) -> List[Point]:
    sq_tol = tolerance * tolerance
    pts: List[Point] = []
    for c in curve.curves:
        cps = control_points(c, tolerance)
        if pts and cps and square_distance(pts[-1], cps[0]) <= sq_tol:
            cps = cps[1:]
        pts.extend(cps)
    return pts


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

@singledispatch
def point_at_parameter(curve, t: float) -> Point:
    """Point at normalised (arclength / angle) parameter ``t`` in [0, 1]."""
    raise UnsupportedCurveError('point_at_parameter', curve)


@point_at_parameter.register
def _(curve: Line, t: float) -> Point:
    return curve.start + (curve.end - curve.start) * float(t)


@point_at_parameter.register
def _(curve: Arc, t: float) -> Point:
    t = min(1.0, max(0.0, t))
    return curve.point_at_angle(curve.start_angle + t * curve.sweep)


@point_at_parameter.register
def _(curve: Circle, t: float) -> Point:
    t = min(1.0, max(0.0, t))
    return _as_arc(curve).point_at_angle(t * TWO_PI)


@point_at_parameter.register(Polyline)
@point_at_parameter.register(PolyCurve)
def _(curve, t: float) -> Point:
    t = min(1.0, max(0.0, t))
    parts = sub_parts(curve)
    lengths = [length(c) for c in parts]
    total = sum(lengths)
    if total <= 0.0:
        return start_point(curve)
    target = t * total
    walked = 0.0
    for part, l in zip(parts, lengths):
        if l > 0.0 and walked + l >= target:
            return point_at_parameter(part, (target - walked) / l)
        walked += l
    return end_point(curve)


def _angle_in_frame(cs: Cartesian, point: Point) -> float:
    v = point - cs.origin
    return math.atan2(v.dot(cs.y), v.dot(cs.x))


@singledispatch
def tangent_at_point(curve, point: Point, tolerance: float = DISTANCE_TOL) -> Vector:
    """Unit tangent in the direction of travel at a point lying on the curve."""
    raise UnsupportedCurveError('tangent_at_point', curve)


@tangent_at_point.register
def _(curve: Line, point: Point, tolerance: float = DISTANCE_TOL) -> Vector:
    return direction(curve)


@tangent_at_point.register
def _(curve: Arc, point: Point, tolerance: float = DISTANCE_TOL) -> Vector:
    cs = curve.coordinate_system
    theta = _angle_in_frame(cs, point)
    return (cs.y * math.cos(theta) - cs.x * math.sin(theta)).normalise()


@tangent_at_point.register
def _(curve: Circle, point: Point, tolerance: float = DISTANCE_TOL) -> Vector:
    return tangent_at_point(_as_arc(curve), point, tolerance)


@tangent_at_point.register(Polyline)
@tangent_at_point.register(PolyCurve)
def _(curve, point: Point, tolerance: float = DISTANCE_TOL) -> Vector:
    sq_tol = tolerance * tolerance
    for part in sub_parts(curve):
        if square_distance(closest_point(part, point), point) <= sq_tol:
            return tangent_at_point(part, point, tolerance)
    raise ValueError("point does not lie on the curve")


@singledispatch
def closest_point(curve, point: Point) -> Point:
    raise UnsupportedCurveError('closest_point', curve)


@closest_point.register
def _(curve: Line, point: Point) -> Point:
    d = curve.end - curve.start
    d_sq = d.square_length()
    if d_sq == 0.0:
        return curve.start
    t = (point - curve.start).dot(d) / d_sq
    if not curve.infinite:
        t = min(1.0, max(0.0, t))
    return curve.start + d * t


@closest_point.register
def _(curve: Arc, point: Point) -> Point:
    cs = curve.coordinate_system
    on_plane = project(point, Plane(cs.origin, cs.z))
    if square_distance(on_plane, cs.origin) == 0.0:
        return start_point(curve)
    theta = _angle_in_frame(cs, on_plane)
    rel = (theta - curve.start_angle) % TWO_PI
    if rel <= curve.sweep:
        return curve.point_at_angle(curve.start_angle + rel)
    s = start_point(curve); e = end_point(curve)
    return s if square_distance(s, point) <= square_distance(e, point) else e


@closest_point.register
def _(curve: Circle, point: Point) -> Point:
    return closest_point(_as_arc(curve), point)


@closest_point.register(Polyline)
@closest_point.register(PolyCurve)
def _(curve, point: Point) -> Point:
    best = None
    best_d = math.inf
    for part in sub_parts(curve):
        cp = closest_point(part, point)
        d = square_distance(cp, point)
        if d < best_d:
            best, best_d = cp, d
    if best is None:
        raise ValueError("curve has no segments")
    return best


for _fn in (start_point, end_point, length, sub_parts, is_closed, control_points,
            point_at_parameter, tangent_at_point, closest_point):
    _fn.register(NurbsCurve, _unsupported(_fn.__name__))


# ---------------------------------------------------------------------------
# Bounds
# ---------------------------------------------------------------------------

@singledispatch
def bounds(geometry) -> BoundingBox:
    """Axis-aligned bounding box of a point, point list, box or curve."""
    raise UnsupportedCurveError('bounds', geometry)


@bounds.register
def _(geometry: Point) -> BoundingBox:
    return BoundingBox(geometry, geometry)


@bounds.register
def _(geometry: BoundingBox) -> BoundingBox:
    return geometry


@bounds.register(list)
@bounds.register(tuple)
def _(geometry) -> BoundingBox:
    boxes = [bounds(g) for g in geometry]
    if not boxes:
        raise ValueError("cannot bound an empty collection")
    box = boxes[0]
    for b in boxes[1:]:
        box = box.union(b)
    return box


@bounds.register
def _(geometry: Line) -> BoundingBox:
    return BoundingBox.from_points([geometry.start, geometry.end])


@bounds.register
def _(geometry: Arc) -> BoundingBox:
    cs = geometry.coordinate_system
    angles = [geometry.start_angle, geometry.end_angle]
    xs = cs.x.to_array(); ys = cs.y.to_array()
    for k in range(3):
        base = math.atan2(ys[k], xs[k])
        for candidate in (base, base + math.pi):
            rel = (candidate - geometry.start_angle) % TWO_PI
            if rel <= geometry.sweep:
                angles.append(geometry.start_angle + rel)
    return BoundingBox.from_points([geometry.point_at_angle(a) for a in angles])


@bounds.register
def _(geometry: Circle) -> BoundingBox:
    return bounds(_as_arc(geometry))


@bounds.register
def _(geometry: Polyline) -> BoundingBox:
    return BoundingBox.from_points(geometry.control_points)


@bounds.register
def _(geometry: PolyCurve) -> BoundingBox:
    return bounds(sub_parts(geometry))


bounds.register(NurbsCurve, _unsupported('bounds'))


def sample(curve, count: int) -> np.ndarray:
    """(count, 3) array of points evenly spaced in parameter along ``curve``."""
    ts = np.linspace(0.0, 1.0, max(2, int(count)))
    return np.asarray([point_at_parameter(curve, float(t)).to_array() for t in ts])
