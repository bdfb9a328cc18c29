"""Tests for quadratic Bezier helpers."""

import pytest

from slabgeom.geometry.bezier import (
    point_quad_distance, quad_point, quad_split, quad_subsegment, sample_quad,
)

CURVE = ((0.0, 0.0), (5.0, 10.0), (10.0, 0.0))


class TestEvaluation:
    """Tests for point evaluation and sampling."""

    def test_endpoints(self):
        assert quad_point(0, *CURVE) == pytest.approx((0.0, 0.0))
        assert quad_point(1, *CURVE) == pytest.approx((10.0, 0.0))

    def test_midpoint_is_half_the_control_offset(self):
        assert quad_point(0.5, *CURVE) == pytest.approx((5.0, 5.0))

    def test_parameter_is_clamped(self):
        assert quad_point(2.0, *CURVE) == pytest.approx((10.0, 0.0))

    def test_sample_shape(self):
        samples = sample_quad(*CURVE, samples=8)
        assert samples.shape == (9, 2)
        assert tuple(samples[-1]) == pytest.approx((10.0, 0.0))


class TestSplitting:
    """Tests for De Casteljau splitting and subsegments."""

    def test_split_meets_at_curve_point(self):
        left, right = quad_split(*CURVE, 0.3)
        assert left[2] == pytest.approx(quad_point(0.3, *CURVE))
        assert right[0] == pytest.approx(left[2])
        assert right[2] == CURVE[2]

    def test_subsegment_follows_curve(self):
        start, control, end = quad_subsegment(*CURVE, 0.25, 0.75)
        assert start == pytest.approx(quad_point(0.25, *CURVE))
        assert end == pytest.approx(quad_point(0.75, *CURVE))
        mid = quad_point(0.5, start, control, end)
        assert mid == pytest.approx(quad_point(0.5, *CURVE))

    def test_full_range_returns_curve(self):
        assert quad_subsegment(*CURVE, 0.0, 1.0) == CURVE

    def test_degenerate_range_collapses_to_start(self):
        start, _, end = quad_subsegment(*CURVE, 0.0, 0.0)
        assert start == end == CURVE[0]

    def test_parameters_are_sorted(self):
        flipped = [v for p in quad_subsegment(*CURVE, 0.8, 0.2) for v in p]
        ordered = [v for p in quad_subsegment(*CURVE, 0.2, 0.8) for v in p]
        assert flipped == pytest.approx(ordered)


class TestDistance:
    """Tests for point-to-curve distance."""

    def test_point_on_curve(self):
        assert point_quad_distance((5.0, 5.0), *CURVE) == pytest.approx(0.0, abs=1e-6)

    def test_point_above_apex(self):
        assert point_quad_distance((5.0, 8.0), *CURVE, samples=64) == pytest.approx(3.0, abs=0.01)
