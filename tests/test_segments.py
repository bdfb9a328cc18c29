"""Tests for boundary segmentation."""

import pytest

from slabgeom.geometry.polygon import dedupe_points
from slabgeom.geometry.vectors import distance
from slabgeom.models import AngleCut, Cutout, EdgePosition, Piece, ShapeKind
from slabgeom.outline.segments import boundary_segments as segment_polygon
from slabgeom.pipeline import boundary_segments, corner_points

E = EdgePosition


def labels(segments):
    return [(s.edge, s.index) for s in segments]


class TestRectangleSegments:
    """Tests for rectangle edge numbering."""

    def test_plain_rectangle(self, rectangle_piece):
        segments = boundary_segments(rectangle_piece)
        assert labels(segments) == [(E.TOP, 0), (E.RIGHT, 0), (E.BOTTOM, 0), (E.LEFT, 0)]
        assert segments[0].start == (0, 0)
        assert segments[0].end == (18, 0)
        assert segments[1].length == pytest.approx(24.0)

    def test_notch_splits_edge(self, notched_piece):
        segments = boundary_segments(notched_piece)
        assert labels(segments) == [(E.TOP, 0), (E.RIGHT, 0), (E.BOTTOM, 0), (E.LEFT, 0), (E.LEFT, 1)]
        left = [s for s in segments if s.edge == E.LEFT]
        assert (left[0].start_index, left[0].end_index) == (7, 0)
        assert (left[1].start_index, left[1].end_index) == (3, 4)
        assert left[0].start == (0, 10)
        assert left[1].end == (0, 14)

    def test_chamfer_segment_untagged(self, rectangle_piece):
        cut = AngleCut(anchor_corner_index=0, anchor_offset=2, secondary_offset=2)
        piece = rectangle_piece.model_copy(update={"angle_cuts": [cut]})
        segments = boundary_segments(piece)
        assert len(segments) == 4
        top = segments[0]
        assert top.edge == E.TOP
        assert top.start == pytest.approx((2.0, 0.0))

    def test_shapes_without_corners(self, rectangle_piece):
        circle = rectangle_piece.model_copy(update={"shape": ShapeKind.CIRCLE})
        assert boundary_segments(circle) == []


class TestTriangleSegments:
    """Tests for right-triangle segments."""

    def test_plain_triangle(self, triangle_piece):
        segments = boundary_segments(triangle_piece)
        assert labels(segments) == [(E.LEG_A, 0), (E.HYPOTENUSE, 0), (E.LEG_B, 0)]
        assert segments[1].start == (18, 0)
        assert segments[1].end == (0, 24)

    def test_hypotenuse_fallback(self):
        """A polygon whose diagonal was cut away still names its closest segment."""
        points = [(0, 0), (18, 0), (18, 2), (2, 24), (0, 24)]
        segments = segment_polygon(points, ShapeKind.RIGHT_TRIANGLE, None)
        hypotenuse = [s for s in segments if s.edge == E.HYPOTENUSE]
        assert len(hypotenuse) == 1
        assert hypotenuse[0].start_index == 2


class TestClosure:
    """Tests for the closed corner chain behind the segments."""

    @pytest.mark.parametrize("cutouts", [
        [Cutout(width=4, height=2, center_x=12, center_y=1, is_notch=True)],
        [Cutout(width=4, height=4, center_x=2, center_y=2), Cutout(width=5, height=2, center_x=5.5, center_y=1)],
        [Cutout(width=3, height=3, center_x=22.5, center_y=16.5)],
    ])
    def test_chain_closes_within_tolerance(self, cutouts):
        piece = Piece(width=24, height=18, cutouts=cutouts)
        points = corner_points(piece)
        count = len(points)
        for i in range(count):
            assert distance(points[i], points[(i + 1) % count]) >= 1e-4
        for segment in boundary_segments(piece):
            assert distance(segment.start, points[segment.start_index]) < 1e-4
            assert distance(segment.end, points[segment.end_index]) < 1e-4

    def test_near_closing_point_dropped(self):
        """A last vertex 5e-5 from the first is the closing vertex and goes away."""
        points = [(0, 0), (18, 0), (18, 24), (0, 24), (0.00005, 0)]
        segments = segment_polygon(dedupe_points(points), ShapeKind.RECTANGLE, None)
        assert labels(segments) == [(E.TOP, 0), (E.RIGHT, 0), (E.BOTTOM, 0), (E.LEFT, 0)]
        assert segments[-1].end == (0, 0)
