"""Tests for corner fillets and polygon commands."""

import math

import pytest

from slabgeom.models import CornerRadius, CurvedEdge, EdgePosition, PathCommandKind
from slabgeom.outline.fillets import fillet_corner, map_corner_radii, max_fillet_radius, polygon_commands
from slabgeom.pipeline import outline_commands

RECT = [(0, 0), (18, 0), (18, 24), (0, 24)]
K = PathCommandKind


class TestFilletCorner:
    """Tests for single-corner fillets."""

    def test_right_angle_tangent_points(self):
        fillet = fillet_corner((0, 24), (0, 0), (18, 0), 1)
        assert fillet.start == pytest.approx((0.0, 1.0))
        assert fillet.end == pytest.approx((1.0, 0.0))
        assert fillet.center == pytest.approx((1.0, 1.0))
        assert fillet.sweep == pytest.approx(math.pi / 2)

    def test_radius_clamped_to_shorter_edge(self):
        fillet = fillet_corner((0, 24), (0, 0), (18, 0), 100)
        assert fillet.radius == pytest.approx(18.0)

    def test_triangle_acute_corner_limit(self):
        assert max_fillet_radius((0, 0), (18, 0), (0, 24)) == pytest.approx(9.0)

    def test_degenerate_corner(self):
        assert fillet_corner((10, 0), (0, 0), (5, 0), 1) is None
        assert max_fillet_radius((10, 0), (0, 0), (5, 0)) == 0.0


class TestPolygonCommands:
    """Tests for outline command emission."""

    def test_plain_polygon(self):
        commands = polygon_commands(RECT)
        assert [c.kind for c in commands] == [K.MOVE, K.LINE, K.LINE, K.LINE, K.CLOSE]
        assert commands[0].to == (0, 0)

    def test_fillet_on_first_corner(self):
        commands = polygon_commands(RECT, {0: 1})
        assert [c.kind for c in commands] == [K.MOVE, K.ARC, K.LINE, K.LINE, K.LINE, K.CLOSE]
        assert commands[0].to == pytest.approx((0.0, 1.0))
        assert commands[1].to == pytest.approx((1.0, 0.0))
        assert commands[1].center == pytest.approx((1.0, 1.0))
        assert commands[1].sweep == pytest.approx(math.pi / 2)
        assert [c.to for c in commands[2:5]] == [(18, 0), (18, 24), (0, 24)]

    def test_fillet_on_inner_corner(self):
        commands = polygon_commands(RECT, {2: 2})
        kinds = [c.kind for c in commands]
        assert kinds == [K.MOVE, K.LINE, K.LINE, K.ARC, K.LINE, K.CLOSE]
        assert commands[2].to == pytest.approx((18.0, 22.0))
        assert commands[3].to == pytest.approx((16.0, 24.0))

    def test_curved_last_segment_is_explicit(self):
        commands = polygon_commands(RECT, controls={3: (-2.0, 12.0)})
        assert commands[-2].kind == K.QUAD
        assert commands[-2].to == (0, 0)
        assert commands[-1].kind == K.CLOSE


class TestRadiusMapping:
    """Tests for piece radius resolution."""

    def test_radius_follows_base_corner(self):
        chamfered = [(0, 2), (2, 0), (18, 0), (18, 24), (0, 24)]
        radii = [CornerRadius(corner_index=2, radius=1)]
        assert map_corner_radii(radii, chamfered, RECT) == {3: 1}

    def test_excluded_corner_skipped(self):
        radii = [CornerRadius(corner_index=0, radius=1)]
        assert map_corner_radii(radii, RECT, RECT, excluded={0, 1}) == {}

    def test_non_positive_radius_inert(self, rectangle_piece):
        piece = rectangle_piece.model_copy(update={"corner_radii": [CornerRadius(corner_index=0, radius=0)]})
        assert outline_commands(piece) == outline_commands(rectangle_piece)

    def test_curve_wins_over_radius(self, rectangle_piece):
        piece = rectangle_piece.model_copy(update={
            "corner_radii": [CornerRadius(corner_index=0, radius=1)],
            "curved_edges": [CurvedEdge(edge=EdgePosition.TOP, radius=1)],
        })
        kinds = [c.kind for c in outline_commands(piece)]
        assert K.ARC not in kinds
        assert K.QUAD in kinds

    def test_piece_fillet(self, rectangle_piece):
        piece = rectangle_piece.model_copy(update={"corner_radii": [CornerRadius(corner_index=0, radius=1)]})
        commands = outline_commands(piece)
        assert commands[0].to == pytest.approx((0.0, 1.0))
        assert commands[1].kind == K.ARC
