"""Tests for polygon helpers."""

import pytest

from slabgeom.geometry.polygon import (
    dedupe_points, drop_collinear_points, nearest_point_index, point_in_polygon, polygon_bounds,
    polygon_is_clockwise, reorder_corners_clockwise, segment_center_on_line,
    segment_indices_between, segment_length_on_line, signed_area,
)

SQUARE_CW = [(0, 0), (10, 0), (10, 10), (0, 10)]


class TestDedupe:
    """Tests for near-duplicate removal."""

    def test_consecutive_duplicates_removed(self):
        points = [(0, 0), (0, 0.00001), (5, 0), (5, 5)]
        assert dedupe_points(points) == [(0, 0), (5, 0), (5, 5)]

    def test_closing_duplicate_removed(self):
        points = [(0, 0), (5, 0), (5, 5), (0, 0)]
        assert dedupe_points(points) == [(0, 0), (5, 0), (5, 5)]

    def test_pass_through_vertex_removed(self):
        points = [(0, 0), (5, 0), (10, 0), (10, 10), (0, 10)]
        assert drop_collinear_points(points) == [(0, 0), (10, 0), (10, 10), (0, 10)]

    def test_spike_removed(self):
        """(4, 0) doubles back along x = 4 and adds no area."""
        points = [(4, 4), (4, 0), (4, 2), (8, 2), (8, 0), (10, 0), (10, 10), (0, 10), (0, 4)]
        result = drop_collinear_points(points)
        assert (4, 0) not in result
        assert signed_area(result) == pytest.approx(signed_area(points))

    def test_triangle_kept(self):
        assert drop_collinear_points([(0, 0), (5, 0), (0, 5)]) == [(0, 0), (5, 0), (0, 5)]


class TestWinding:
    """Tests for winding and canonical ordering."""

    def test_screen_clockwise_is_positive(self):
        assert signed_area(SQUARE_CW) == pytest.approx(100.0)
        assert polygon_is_clockwise(SQUARE_CW)
        assert not polygon_is_clockwise(list(reversed(SQUARE_CW)))

    def test_reorder_reverses_counter_clockwise(self):
        ordered = reorder_corners_clockwise(list(reversed(SQUARE_CW)))
        assert ordered == SQUARE_CW

    def test_reorder_picks_canonical_start(self):
        rotated = SQUARE_CW[2:] + SQUARE_CW[:2]
        assert reorder_corners_clockwise(rotated)[0] == (0, 0)

    def test_reorder_is_idempotent(self):
        points = [(4, 10), (0, 3), (2, 0), (9, 1), (10, 8)]
        once = reorder_corners_clockwise(points)
        assert reorder_corners_clockwise(once) == once
        assert polygon_is_clockwise(once)


class TestQueries:
    """Tests for bounds, containment and nearest points."""

    def test_bounds(self):
        bounds = polygon_bounds([(1, 2), (5, -1), (3, 7)])
        assert bounds == (1, -1, 5, 7)
        assert bounds.width == 4
        assert bounds.height == 8

    def test_point_in_polygon(self):
        assert point_in_polygon((5, 5), SQUARE_CW)
        assert not point_in_polygon((15, 5), SQUARE_CW)

    def test_nearest_point_index(self):
        assert nearest_point_index((9, 9), SQUARE_CW) == 2


class TestSegmentWalks:
    """Tests for index walks and on-line measurements."""

    def test_forward_walk(self):
        assert segment_indices_between(1, 3, 5) == [1, 2]

    def test_wrapping_walk(self):
        assert segment_indices_between(3, 1, 5) == [3, 4, 0]

    def test_empty_walk(self):
        assert segment_indices_between(2, 2, 5) == []

    def test_length_and_center_on_line(self):
        """A notched top edge leaves two pieces on the line y = 0."""
        points = [(0, 0), (4, 0), (4, 2), (6, 2), (6, 0), (10, 0), (10, 10), (0, 10)]
        assert segment_length_on_line(points, False, 0.0, 0.0, 10.0) == pytest.approx(8.0)
        assert segment_center_on_line(points, False, 0.0, 0.0, 10.0) == pytest.approx(5.0)
