"""Containment queries: bounding boxes, and points or curves inside closed planar curves.

Polylines and polycurves are tested by ray casting in their fitted plane.
For each point the engine:

1. rejects points off the plane, and honours ``accept_on_edge`` for points
   on the boundary;
2. casts an infinite ray from the point towards the plane origin, randomly
   perturbed while it is degenerate or parallel to a straight sub-part;
3. classifies every ray/sub-part hit as a crossing or an extra hit. A hit at
   a sub-part end point is a crossing only when the sub-part lies on the
   positive side of the ray (counter-clockwise about the plane normal) next
   to that vertex, so a vertex shared by two sub-parts is counted once when
   the boundary passes through the ray and zero or two times when it only
   touches it. Interior tangent hits are extra hits;
4. applies the even-odd rule on the crossings sorted along the ray.

Circles and closed arcs are tested algebraically.
"""
from __future__ import annotations

import math
from functools import singledispatch
from typing import List, Optional, Sequence

import numpy as np

from .config import ContainmentConfig, DEFAULT_CONFIG
from .constants import ANGLE_TOL
from .curves import (
    Line, Arc, Circle, Polyline, PolyCurve, NurbsCurve,
    is_closed, sub_parts, closest_point, control_points, start_point, end_point,
    tangent_at_point, point_at_parameter, bounds, direction,
)
from .errors import UnsupportedCurveError
from .fitting import fit_plane, is_planar
from .intersections import line_intersections, curve_planar_intersections, sort_collinear
from .logging_utils import get_logger
from .parameter import parameter_at_point
from .primitives import (
    Point, Vector, Plane, BoundingBox, as_points, project, signed_angle,
    square_distance, distance, distance_to_plane, random_vector_in_plane,
)

logger = get_logger('bimgeom.containment')

__all__ = ['is_containing', 'curve_contains_points', 'curve_contains_curve', 'box_contains']

_CURVE_TYPES = (Line, Arc, Circle, Polyline, PolyCurve, NurbsCurve)


def is_containing(container, contents, accept_on_edge: Optional[bool] = None,
                  tolerance: Optional[float] = None,
                  config: Optional[ContainmentConfig] = None) -> bool:
    """True iff ``contents`` lies inside ``container``.

    Parameters
    ----------
    container : BoundingBox or curve
        Curves must be closed (and, for polylines/polycurves, planar) to
        contain anything; open curves give False.
    contents : Point, sequence of points, BoundingBox or curve
        A box accepts any geometry (compared through its bounds); a curve
        container accepts points or another curve.
    accept_on_edge : bool, optional
        Whether points on the boundary count as contained. Defaults to
        ``config.accept_on_edge``.
    tolerance : float, optional
        Distance tolerance. Defaults to ``config.tolerance``.
    config : ContainmentConfig, optional

    Raises
    ------
    UnsupportedCurveError
        When either side is a NurbsCurve or is not a known geometry type.
    """
    cfg = (config or DEFAULT_CONFIG).with_overrides(accept_on_edge=accept_on_edge, tolerance=tolerance)
    if isinstance(container, BoundingBox):
        return box_contains(container, contents, cfg.accept_on_edge, cfg.tolerance)
    if isinstance(contents, _CURVE_TYPES):
        return curve_contains_curve(container, contents, cfg.accept_on_edge, cfg.tolerance, cfg)
    points = [contents] if isinstance(contents, Point) else as_points(contents)
    return curve_contains_points(container, points, cfg.accept_on_edge, cfg.tolerance, cfg)


# ---------------------------------------------------------------------------
# Bounding boxes
# ---------------------------------------------------------------------------

def _box_contains_box(box1: BoundingBox, box2: BoundingBox, accept_on_edge: bool, tolerance: float) -> bool:
    min1, max1, min2, max2 = box1.min, box1.max, box2.min, box2.max
    if accept_on_edge:
        return (min2.x >= min1.x - tolerance and max2.x <= max1.x + tolerance and
                min2.y >= min1.y - tolerance and max2.y <= max1.y + tolerance and
                min2.z >= min1.z - tolerance and max2.z <= max1.z + tolerance)
    return (min2.x > min1.x + tolerance and max2.x < max1.x - tolerance and
            min2.y > min1.y + tolerance and max2.y < max1.y - tolerance and
            min2.z > min1.z + tolerance and max2.z < max1.z - tolerance)


def _box_contains_point(box: BoundingBox, pt: Point, accept_on_edge: bool, tolerance: float) -> bool:
    lo, hi = box.min, box.max
    if accept_on_edge:
        return (lo.x - tolerance <= pt.x <= hi.x + tolerance and
                lo.y - tolerance <= pt.y <= hi.y + tolerance and
                lo.z - tolerance <= pt.z <= hi.z + tolerance)
    return (lo.x + tolerance < pt.x < hi.x - tolerance and
            lo.y + tolerance < pt.y < hi.y - tolerance and
            lo.z + tolerance < pt.z < hi.z - tolerance)


def box_contains(box: BoundingBox, contents, accept_on_edge: bool, tolerance: float) -> bool:
    if isinstance(contents, BoundingBox):
        return _box_contains_box(box, contents, accept_on_edge, tolerance)
    if isinstance(contents, Point):
        return _box_contains_point(box, contents, accept_on_edge, tolerance)
    if isinstance(contents, (list, tuple)) and not any(isinstance(c, _CURVE_TYPES) for c in contents):
        points = as_points(contents)
        if not points:
            return False
        return all([_box_contains_point(box, p, accept_on_edge, tolerance) for p in points])
    return _box_contains_box(box, bounds(contents), accept_on_edge, tolerance)


# ---------------------------------------------------------------------------
# Curves containing points
# ---------------------------------------------------------------------------

@singledispatch
def curve_contains_points(curve, points: Sequence[Point], accept_on_edge: bool,
                          tolerance: float, config: ContainmentConfig = DEFAULT_CONFIG) -> bool:
    raise UnsupportedCurveError('is_containing', curve)


@curve_contains_points.register
def _(curve: Line, points, accept_on_edge, tolerance, config=DEFAULT_CONFIG) -> bool:
    return False


@curve_contains_points.register
def _(curve: NurbsCurve, points, accept_on_edge, tolerance, config=DEFAULT_CONFIG) -> bool:
    raise UnsupportedCurveError('is_containing', curve)


@curve_contains_points.register
def _(curve: Circle, points, accept_on_edge, tolerance, config=DEFAULT_CONFIG) -> bool:
    plane = Plane(curve.centre, curve.normal)
    for pt in points:
        if distance_to_plane(pt, plane) > tolerance:
            return False
        gap = distance(pt, curve.centre) - curve.radius
        if accept_on_edge and gap - tolerance > 0:
            return False
        if not accept_on_edge and gap + tolerance >= 0:
            return False
    return True


def _circle_of(arc: Arc) -> Circle:
    return Circle(arc.centre, fit_plane(arc).normal, arc.radius)


@curve_contains_points.register
def _(curve: Arc, points, accept_on_edge, tolerance, config=DEFAULT_CONFIG) -> bool:
    if not is_closed(curve, tolerance):
        return False
    return curve_contains_points(_circle_of(curve), points, accept_on_edge, tolerance, config)


@curve_contains_points.register(Polyline)
@curve_contains_points.register(PolyCurve)
def _(curve, points, accept_on_edge, tolerance, config=DEFAULT_CONFIG) -> bool:
    if not is_closed(curve, tolerance):
        return False
    sq_tol = tolerance * tolerance
    plane = fit_plane(curve, tolerance)
    if plane is None:
        # degenerate boundary: only points on the curve itself can qualify
        logger.debug("no plane through %s, falling back to distance-to-curve", type(curve).__name__)
        if not accept_on_edge:
            return False
        return all(square_distance(closest_point(curve, pt), pt) <= sq_tol for pt in points)
    if not is_planar(curve, tolerance):
        logger.debug("%s is not planar within %g", type(curve).__name__, tolerance)
        return False

    parts = sub_parts(curve)
    edge_directions = [direction(p) for p in parts if isinstance(p, Line)]
    rng = np.random.default_rng(config.seed)
    for pt in points:
        projected = project(pt, plane)
        if square_distance(projected, pt) > sq_tol:
            return False
        if square_distance(closest_point(curve, projected), projected) <= sq_tol:
            if accept_on_edge:
                continue
            return False
        ray_dir = _ray_direction(projected, plane, edge_directions, rng, config.max_ray_attempts, tolerance)
        if ray_dir is None:
            logger.warning("no usable ray direction from %s after %d attempts", projected, config.max_ray_attempts)
            return False
        if not _is_inside(projected, ray_dir, parts, plane.normal, tolerance):
            return False
    return True


def _ray_direction(origin: Point, plane: Plane, edge_directions: List[Vector],
                   rng: np.random.Generator, max_attempts: int, tolerance: float) -> Optional[Vector]:
    """Direction from ``origin`` towards the plane origin, perturbed off degenerate cases."""
    target = plane.origin
    for _ in range(max_attempts):
        ray_dir = (target - origin).normalise()
        if ray_dir.square_length() > tolerance * tolerance and \
                not any(e.is_parallel(ray_dir, ANGLE_TOL) for e in edge_directions):
            return ray_dir
        target = target + random_vector_in_plane(plane, rng, True)
    return None


def _is_inside(pt: Point, ray_dir: Vector, parts: list, normal: Vector, tolerance: float) -> bool:
    ray = Line(pt, pt + ray_dir, infinite=True)
    crossings: List[Point] = []
    extra: List[Point] = []
    for part in parts:
        for hit in line_intersections(part, ray, tolerance):
            if _is_crossing(part, hit, ray_dir, normal, tolerance):
                crossings.append(hit)
            else:
                extra.append(hit)
    if not crossings:
        return False
    ordered = sort_collinear(crossings + [pt], tolerance)
    index = next(i for i, p in enumerate(ordered) if p is pt)
    return index % 2 == 1


def _is_crossing(part, hit: Point, ray_dir: Vector, normal: Vector, tolerance: float) -> bool:
    sq_tol = tolerance * tolerance
    angle = signed_angle(ray_dir, tangent_at_point(part, hit, tolerance), normal)
    grazing = abs(angle) <= ANGLE_TOL or math.pi - abs(angle) <= ANGLE_TOL
    if is_closed(part, tolerance):
        return not grazing
    at_start = square_distance(start_point(part), hit) <= sq_tol
    at_end = not at_start and square_distance(end_point(part), hit) <= sq_tol
    if not (at_start or at_end):
        return not grazing
    if grazing:
        return _lies_on_positive_side(part, hit, ray_dir, normal)
    # leaving to the left at the start, arriving from the left at the end
    return angle > ANGLE_TOL if at_start else angle < -ANGLE_TOL


def _lies_on_positive_side(part, hit: Point, ray_dir: Vector, normal: Vector) -> bool:
    # an arc stays on one side of any of its tangent lines
    probe = point_at_parameter(part, 0.5)
    return ray_dir.cross(probe - hit).dot(normal) > 0


# ---------------------------------------------------------------------------
# Curves containing curves
# ---------------------------------------------------------------------------

@singledispatch
def curve_contains_curve(curve1, curve2, accept_on_edge: bool, tolerance: float,
                         config: ContainmentConfig = DEFAULT_CONFIG) -> bool:
    raise UnsupportedCurveError('is_containing', curve1)


@curve_contains_curve.register
def _(curve1: Line, curve2, accept_on_edge, tolerance, config=DEFAULT_CONFIG) -> bool:
    return False


@curve_contains_curve.register
def _(curve1: NurbsCurve, curve2, accept_on_edge, tolerance, config=DEFAULT_CONFIG) -> bool:
    raise UnsupportedCurveError('is_containing', curve1)


@curve_contains_curve.register
def _(curve1: Circle, curve2, accept_on_edge, tolerance, config=DEFAULT_CONFIG) -> bool:
    if isinstance(curve2, (Line, Polyline)):
        # a disc is convex: the control polygon decides
        return curve_contains_points(curve1, control_points(curve2, tolerance), accept_on_edge, tolerance, config)
    return _contains_by_sampling(curve1, curve2, accept_on_edge, tolerance, config)


@curve_contains_curve.register
def _(curve1: Arc, curve2, accept_on_edge, tolerance, config=DEFAULT_CONFIG) -> bool:
    if not is_closed(curve1, tolerance):
        return False
    return curve_contains_curve(_circle_of(curve1), curve2, accept_on_edge, tolerance, config)


@curve_contains_curve.register(Polyline)
@curve_contains_curve.register(PolyCurve)
def _(curve1, curve2, accept_on_edge, tolerance, config=DEFAULT_CONFIG) -> bool:
    if not is_closed(curve1, tolerance):
        return False
    return _contains_by_sampling(curve1, curve2, accept_on_edge, tolerance, config)


def _contains_by_sampling(container, curve, accept_on_edge, tolerance, config) -> bool:
    """Test one point of ``curve`` between each pair of consecutive boundary crossings."""
    hits = curve_planar_intersections(container, curve, tolerance)
    if hits and not accept_on_edge:
        return False
    params = [0.0, 1.0]
    for hit in hits:
        t = parameter_at_point(curve, hit, tolerance)
        if t >= 0.0:
            params.append(t)
    params.sort()
    samples = list(hits)
    for a, b in zip(params, params[1:]):
        samples.append(point_at_parameter(curve, 0.5 * (a + b)))
    return curve_contains_points(container, samples, accept_on_edge, tolerance, config)
