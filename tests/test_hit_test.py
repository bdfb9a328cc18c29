"""Tests for point queries on piece geometry."""

from slabgeom.models import AngleCut, CurvedEdge, EdgePosition
from slabgeom.outline.hit_test import nearest_angle_segment, nearest_boundary_segment, point_in_outline
from slabgeom.pipeline import build_geometry


class TestBoundaryHits:
    """Tests for boundary segment lookup."""

    def test_straight_edge(self, rectangle_piece):
        geometry = build_geometry(rectangle_piece)
        assert nearest_boundary_segment(geometry, (18.2, 10)).edge == EdgePosition.RIGHT
        assert nearest_boundary_segment(geometry, (9, 12)) is None

    def test_notched_left_edge(self, notched_piece):
        geometry = build_geometry(notched_piece)
        hit = nearest_boundary_segment(geometry, (0.1, 20))
        assert (hit.edge, hit.index) == (EdgePosition.LEFT, 1)
        assert nearest_boundary_segment(geometry, (1, 12)) is None

    def test_curved_edge_uses_curve(self, rectangle_piece):
        curve = CurvedEdge(edge=EdgePosition.TOP, radius=2, start_corner_index=0, end_corner_index=1)
        geometry = build_geometry(rectangle_piece.model_copy(update={"curved_edges": [curve]}))
        assert nearest_boundary_segment(geometry, (9, -2)).edge == EdgePosition.TOP
        assert nearest_boundary_segment(geometry, (9, 0.1)) is None


class TestAngleHits:
    """Tests for chamfer lookup."""

    def test_chamfer_segment(self, rectangle_piece):
        cut = AngleCut(id="a1", anchor_corner_index=0, anchor_offset=2, secondary_offset=2)
        geometry = build_geometry(rectangle_piece.model_copy(update={"angle_cuts": [cut]}))
        assert nearest_angle_segment(geometry, (1, 1)).id == "a1"
        assert nearest_angle_segment(geometry, (5, 5)) is None


class TestContainment:
    """Tests for point-in-outline queries."""

    def test_inside_and_notch(self, notched_piece):
        outline = build_geometry(notched_piece).outline
        assert point_in_outline((9, 5), outline)
        assert not point_in_outline((1, 12), outline)
        assert not point_in_outline((20, 5), outline)
