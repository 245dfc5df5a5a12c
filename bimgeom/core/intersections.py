"""Planar intersections between lines, arcs and compound curves.

Only coplanar configurations are resolved; curves in different planes are
treated as non-intersecting, and overlapping (collinear / concentric equal)
segments report no discrete intersection point.
"""
from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

import numpy as np
from scipy.spatial import cKDTree

from .constants import DISTANCE_TOL, ANGLE_TOL
from .curves import Line, Arc, Circle, sub_parts, circle_frame, TWO_PI
from .primitives import Point, points_to_array, square_distance

__all__ = [
    'line_intersection', 'line_intersections', 'arc_arc_intersections',
    'curve_planar_intersections', 'cull_duplicates', 'sort_collinear',
]


def _range_slack(line: Line, tolerance: float) -> float:
    l = (line.end - line.start).length()
    return tolerance / l if l > 0 else 0.0


def line_intersection(line1: Line, line2: Line, use_infinite_lines: bool = False,
                      tolerance: float = DISTANCE_TOL) -> Optional[Point]:
    """Single intersection point of two coplanar lines, or None.

    A line with ``infinite=True`` (or both, when ``use_infinite_lines``) is
    extended past its end points. Parallel lines return None. The returned
    point lies on the first finite line, snapped to its end points.
    """
    d1 = line1.end - line1.start
    d2 = line2.end - line2.start
    a = d1.dot(d1); c = d2.dot(d2)
    if a == 0.0 or c == 0.0:
        return None
    if d1.is_parallel(d2, ANGLE_TOL):
        return None
    w = line1.start - line2.start
    b = d1.dot(d2); d = d1.dot(w); e = d2.dot(w)
    denom = a * c - b * b
    t1 = (b * e - c * d) / denom
    t2 = (a * e - b * d) / denom
    p1 = line1.start + d1 * t1
    p2 = line2.start + d2 * t2
    if square_distance(p1, p2) > tolerance * tolerance:
        return None
    finite1 = not (line1.infinite or use_infinite_lines)
    finite2 = not (line2.infinite or use_infinite_lines)
    s1 = _range_slack(line1, tolerance); s2 = _range_slack(line2, tolerance)
    if finite1 and not (-s1 <= t1 <= 1.0 + s1):
        return None
    if finite2 and not (-s2 <= t2 <= 1.0 + s2):
        return None
    if finite1:
        return line1.start + d1 * min(1.0, max(0.0, t1))
    if finite2:
        return line2.start + d2 * min(1.0, max(0.0, t2))
    return p1


def _in_arc_range(arc: Arc, point: Point, tolerance: float) -> bool:
    if arc.sweep >= TWO_PI - ANGLE_TOL:
        return True
    cs = arc.coordinate_system
    v = point - cs.origin
    theta = math.atan2(v.dot(cs.y), v.dot(cs.x))
    rel = (theta - arc.start_angle) % TWO_PI
    slack = tolerance / arc.radius if arc.radius > 0 else 0.0
    return rel <= arc.sweep + slack or rel >= TWO_PI - slack


def _as_arc(curve) -> Arc:
    if isinstance(curve, Circle):
        return Arc(circle_frame(curve), curve.radius, 0.0, TWO_PI)
    return curve


def _line_arc_intersections(line: Line, arc: Arc, tolerance: float) -> List[Point]:
    cs = arc.coordinate_system
    n = cs.z
    d = line.end - line.start
    if d.square_length() == 0.0:
        return []
    sn = (line.start - cs.origin).dot(n)
    dn = d.dot(n)
    candidates: List[float] = []
    if abs(d.normalise().dot(n)) > ANGLE_TOL:
        # line pierces the arc plane: at most one point, on the circle or not
        t = -sn / dn
        p = line.start + d * t
        if abs((p - cs.origin).length() - arc.radius) <= tolerance:
            candidates.append(t)
    else:
        if abs(sn) > tolerance:
            return []
        rel = line.start - cs.origin
        px, py = rel.dot(cs.x), rel.dot(cs.y)
        dx, dy = d.dot(cs.x), d.dot(cs.y)
        A = dx * dx + dy * dy
        t0 = -(px * dx + py * dy) / A
        cx, cy = px + dx * t0, py + dy * t0
        dist0 = math.hypot(cx, cy)
        h_sq = arc.radius * arc.radius - dist0 * dist0
        if h_sq < 0.0:
            if dist0 - arc.radius <= tolerance:
                candidates.append(t0)
        else:
            h = math.sqrt(h_sq)
            if h <= tolerance:
                candidates.append(t0)
            else:
                dt = h / math.sqrt(A)
                candidates.extend([t0 - dt, t0 + dt])
    finite = not line.infinite
    slack = _range_slack(line, tolerance)
    out = []
    for t in candidates:
        if finite and not (-slack <= t <= 1.0 + slack):
            continue
        if finite:
            t = min(1.0, max(0.0, t))
        p = line.start + d * t
        if _in_arc_range(arc, p, tolerance):
            out.append(p)
    return out


def line_intersections(curve, line: Line, tolerance: float = DISTANCE_TOL) -> List[Point]:
    """Intersections of a simple curve (Line, Arc, Circle) with a line."""
    if isinstance(curve, Line):
        p = line_intersection(curve, line, False, tolerance)
        return [] if p is None else [p]
    return _line_arc_intersections(line, _as_arc(curve), tolerance)


def arc_arc_intersections(arc1, arc2, tolerance: float = DISTANCE_TOL) -> List[Point]:
    """Intersections of two coplanar arcs or circles."""
    a1 = _as_arc(arc1); a2 = _as_arc(arc2)
    cs = a1.coordinate_system
    if not a1.normal.is_parallel(a2.normal, ANGLE_TOL):
        return []
    offset = a2.centre - cs.origin
    if abs(offset.dot(cs.z)) > tolerance:
        return []
    cx, cy = offset.dot(cs.x), offset.dot(cs.y)
    d = math.hypot(cx, cy)
    r1, r2 = a1.radius, a2.radius
    if d <= tolerance:
        # concentric: either disjoint or overlapping, no discrete points
        return []
    if d > r1 + r2 + tolerance or d < abs(r1 - r2) - tolerance:
        return []
    a = (r1 * r1 - r2 * r2 + d * d) / (2.0 * d)
    h = math.sqrt(max(0.0, r1 * r1 - a * a))
    ux, uy = cx / d, cy / d
    bx, by = a * ux, a * uy
    coords: List[Tuple[float, float]] = [(bx - h * uy, by + h * ux)]
    if h > tolerance:
        coords.append((bx + h * uy, by - h * ux))
    out = []
    for x, y in coords:
        p = cs.origin + cs.x * x + cs.y * y
        if _in_arc_range(a1, p, tolerance) and _in_arc_range(a2, p, tolerance):
            out.append(p)
    return out


def _simple_intersections(c1, c2, tolerance: float) -> List[Point]:
    if isinstance(c1, Line) and isinstance(c2, Line):
        p = line_intersection(c1, c2, False, tolerance)
        return [] if p is None else [p]
    if isinstance(c1, Line):
        return _line_arc_intersections(c1, _as_arc(c2), tolerance)
    if isinstance(c2, Line):
        return _line_arc_intersections(c2, _as_arc(c1), tolerance)
    return arc_arc_intersections(c1, c2, tolerance)


def curve_planar_intersections(curve1, curve2, tolerance: float = DISTANCE_TOL) -> List[Point]:
    """Discrete intersection points between two coplanar curves, without duplicates."""
    points: List[Point] = []
    parts2 = sub_parts(curve2)
    for p1 in sub_parts(curve1):
        for p2 in parts2:
            points.extend(_simple_intersections(p1, p2, tolerance))
    return cull_duplicates(points, tolerance)


def cull_duplicates(points: Sequence[Point], tolerance: float = DISTANCE_TOL) -> List[Point]:
    """Drop points within ``tolerance`` of an earlier kept point (order preserved)."""
    if len(points) < 2:
        return list(points)
    arr = points_to_array(points)
    tree = cKDTree(arr)
    removed = np.zeros(len(points), dtype=bool)
    kept = []
    for i, p in enumerate(points):
        if removed[i]:
            continue
        kept.append(p)
        for j in tree.query_ball_point(arr[i], r=tolerance):
            if j > i:
                removed[j] = True
    return kept


def sort_collinear(points: Sequence[Point], tolerance: float = DISTANCE_TOL) -> List[Point]:
    """Order (nearly) collinear points along their common line.

    The line is the principal axis of the point set; the orientation of the
    result along that axis is arbitrary but deterministic.
    """
    pts = list(points)
    if len(pts) < 2:
        return pts
    arr = points_to_array(pts)
    centred = arr - arr.mean(axis=0)
    if np.max(np.abs(centred)) <= tolerance:
        return pts
    _, _, vt = np.linalg.svd(centred)
    axis = vt[0]
    keys = centred @ axis
    order = np.argsort(keys, kind='stable')
    return [pts[int(i)] for i in order]
