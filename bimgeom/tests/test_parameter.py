"""Tests for mapping points on curves back to normalised parameters."""
import math

import pytest

from bimgeom.core.constants import NOT_ON_CURVE
from bimgeom.core.curves import Arc, Circle, Line, NurbsCurve, PolyCurve, Polyline, point_at_parameter
from bimgeom.core.errors import UnsupportedCurveError
from bimgeom.core.parameter import is_on_curve, parameter_at_point
from bimgeom.core.primitives import ORIGIN, Point, Vector, Z_AXIS


class TestLine:

    def test_midpoints(self):
        line = Line(Point(0, 0), Point(10, 0))
        assert parameter_at_point(line, Point(2.5, 0)) == pytest.approx(0.25)
        assert parameter_at_point(line, Point(0, 0)) == pytest.approx(0.0)
        assert parameter_at_point(line, Point(10, 0)) == pytest.approx(1.0)

    def test_off_line(self):
        line = Line(Point(0, 0), Point(10, 0))
        assert parameter_at_point(line, Point(2.5, 1)) == NOT_ON_CURVE
        assert parameter_at_point(line, Point(11, 0)) == NOT_ON_CURVE

    def test_tolerance_widens_the_curve(self):
        line = Line(Point(0, 0), Point(10, 0))
        assert parameter_at_point(line, Point(5, 0.01), tolerance=0.1) == pytest.approx(0.5, abs=1e-4)


class TestCircle:

    def test_seam_maps_to_zero(self):
        circle = Circle(ORIGIN, Z_AXIS, 1.0)
        assert parameter_at_point(circle, Point(1, 0)) == pytest.approx(0.0)

    def test_quarters(self):
        circle = Circle(ORIGIN, Z_AXIS, 1.0)
        assert parameter_at_point(circle, Point(0, 1)) == pytest.approx(0.25)
        assert parameter_at_point(circle, Point(-1, 0)) == pytest.approx(0.5)
        assert parameter_at_point(circle, Point(0, -1)) == pytest.approx(0.75)

    def test_off_circle(self):
        circle = Circle(ORIGIN, Z_AXIS, 1.0)
        assert parameter_at_point(circle, Point(0, 0)) == NOT_ON_CURVE
        assert parameter_at_point(circle, Point(1, 0, 0.5)) == NOT_ON_CURVE

    def test_tilted_circle_round_trip(self):
        circle = Circle(Point(1, 2, 3), Vector(1, 1, 1), 2.0)
        for t in (0.1, 0.4, 0.8):
            assert parameter_at_point(circle, point_at_parameter(circle, t)) == pytest.approx(t, abs=1e-6)


class TestArc:

    def test_half_arc(self):
        arc = Arc.by_centre(ORIGIN, 1.0, 0.0, math.pi)
        assert parameter_at_point(arc, Point(0, 1)) == pytest.approx(0.5)
        assert parameter_at_point(arc, Point(1, 0)) == pytest.approx(0.0)
        assert parameter_at_point(arc, Point(-1, 0)) == pytest.approx(1.0)

    def test_offset_start_angle(self):
        arc = Arc.by_centre(ORIGIN, 2.0, math.pi / 2, math.pi)
        p = Point(2 * math.cos(3 * math.pi / 4), 2 * math.sin(3 * math.pi / 4))
        assert parameter_at_point(arc, p) == pytest.approx(0.5)

    def test_point_outside_sweep(self):
        arc = Arc.by_centre(ORIGIN, 1.0, 0.0, math.pi)
        assert parameter_at_point(arc, Point(0, -1)) == NOT_ON_CURVE

    def test_round_trip(self):
        arc = Arc.from_points(Point(3, 0, 1), Point(0, 3, 1), Point(-3, 0, 1))
        for t in (0.0, 0.25, 0.6, 0.9):
            assert parameter_at_point(arc, point_at_parameter(arc, t)) == pytest.approx(t, abs=1e-6)


class TestCompound:

    def test_polyline_arclength(self):
        pl = Polyline([(0, 0), (1, 0), (1, 1)])
        assert parameter_at_point(pl, Point(1, 0.5)) == pytest.approx(0.75)
        assert parameter_at_point(pl, Point(0.5, 0)) == pytest.approx(0.25)

    def test_shared_vertex_first_sub_part_wins(self):
        pl = Polyline([(0, 0), (1, 0), (1, 1)])
        assert parameter_at_point(pl, Point(1, 0)) == pytest.approx(0.5)

    def test_closed_polyline_start_is_zero(self):
        square = Polyline([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)])
        assert parameter_at_point(square, Point(0, 0)) == pytest.approx(0.0)
        assert parameter_at_point(square, Point(0, 0.5)) == pytest.approx(0.875)

    def test_polycurve_with_arc(self):
        arc = Arc.from_points(Point(1, 0), Point(0, 1), Point(-1, 0))
        pc = PolyCurve([Line(Point(-1, 0), Point(1, 0)), arc])
        total = 2.0 + math.pi
        assert parameter_at_point(pc, Point(0, 0)) == pytest.approx(1.0 / total)
        assert parameter_at_point(pc, Point(0, 1)) == pytest.approx((2.0 + math.pi / 2) / total)

    def test_off_polyline(self):
        pl = Polyline([(0, 0), (1, 0), (1, 1)])
        assert parameter_at_point(pl, Point(0, 1)) == NOT_ON_CURVE

    def test_round_trip(self):
        pl = Polyline([(0, 0), (2, 0), (2, 3), (5, 3)])
        for t in (0.1, 0.3, 0.55, 0.95):
            assert parameter_at_point(pl, point_at_parameter(pl, t)) == pytest.approx(t)

    def test_open_polyline_end_points_round_trip(self):
        pl = Polyline([(0, 0), (2, 0), (2, 3), (5, 3)])
        assert parameter_at_point(pl, point_at_parameter(pl, 0.0)) == 0.0
        assert parameter_at_point(pl, point_at_parameter(pl, 1.0)) == pytest.approx(1.0)

    def test_open_polycurve_end_points_round_trip(self):
        pc = PolyCurve([Line(Point(0, 0), Point(1, 0)), Arc.by_centre(Point(1, 1), 1.0, -math.pi / 2, 0.0)])
        assert point_at_parameter(pc, 1.0) == Point(2, 1)
        assert parameter_at_point(pc, point_at_parameter(pc, 0.0)) == 0.0
        assert parameter_at_point(pc, point_at_parameter(pc, 1.0)) == pytest.approx(1.0)


def test_is_on_curve():
    line = Line(Point(0, 0), Point(1, 1))
    assert is_on_curve(line, Point(0.5, 0.5))
    assert not is_on_curve(line, Point(0.5, 0.6))


def test_nurbs_raises():
    with pytest.raises(UnsupportedCurveError) as exc:
        parameter_at_point(NurbsCurve(), Point(0, 0))
    assert exc.value.type_name == 'NurbsCurve'
    assert isinstance(exc.value, NotImplementedError)


def test_non_curve_raises():
    with pytest.raises(UnsupportedCurveError):
        parameter_at_point("not a curve", Point(0, 0))


def test_parameters_increase_along_curve():
    arc = Arc.from_points(Point(1, 0), Point(0, 1), Point(-1, 0))
    pc = PolyCurve([Line(Point(-1, 0), Point(1, 0)), arc])
    params = [parameter_at_point(pc, point_at_parameter(pc, t / 10.0)) for t in range(10)]
    assert all(b > a for a, b in zip(params, params[1:]))
