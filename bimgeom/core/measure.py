"""Distances between points, planes and curves."""
from __future__ import annotations

from .constants import DISTANCE_TOL, ANGLE_TOL
from .curves import Line, closest_point
from .intersections import line_intersection
from .primitives import Point, distance

__all__ = ['distance_to_curve', 'line_distance']


def distance_to_curve(point: Point, curve) -> float:
    return distance(point, closest_point(curve, point))


def _clamp(t: float) -> float:
    return min(1.0, max(0.0, t))


def line_distance(line: Line, other: Line, tolerance: float = DISTANCE_TOL) -> float:
    """Shortest distance between two finite lines (0 when they intersect).

    Minimises ``|line(s) - other(t)|`` over ``s, t`` in [0, 1]: the
    unconstrained closest pair is clamped to the first segment, the second
    parameter recomputed and clamped, then the first recomputed once more.
    Zero-length lines reduce to point/segment distance.
    """
    if line_intersection(line, other, False, tolerance) is not None:
        return 0.0
    d1 = line.end - line.start
    d2 = other.end - other.start
    r = line.start - other.start
    a = d1.dot(d1); e = d2.dot(d2); f = d2.dot(r)
    sq_tol = tolerance * tolerance
    if a <= sq_tol and e <= sq_tol:
        return r.length()
    if a <= sq_tol:
        s, t = 0.0, _clamp(f / e)
    else:
        c = d1.dot(r)
        if e <= sq_tol:
            s, t = _clamp(-c / a), 0.0
        else:
            b = d1.dot(d2)
            denom = a * e - b * b
            # parallel lines: any s works, start from the first end point
            s = _clamp((b * f - c * e) / denom) if denom > ANGLE_TOL * ANGLE_TOL * a * e else 0.0
            t = (b * s + f) / e
            if t < 0.0:
                s, t = _clamp(-c / a), 0.0
            elif t > 1.0:
                s, t = _clamp((b - c) / a), 1.0
    return distance(line.start + d1 * s, other.start + d2 * t)
