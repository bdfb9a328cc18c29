"""
Outline pipeline for slab pieces.

Stages:
1. Base outline and notch carving (raw coordinates)
2. Display conversion and clockwise normalization
3. Chamfers
4. Curves and fillets (curves win on shared corners)
5. Boundary segmentation, interior cutouts, virtual corners and notch walls

Every entry point recomputes from the immutable piece description.
"""

from shapely.geometry import Polygon

from slabgeom.geometry.polygon import Bounds, reorder_corners_clockwise
from slabgeom.geometry.vectors import display_point
from slabgeom.models import CutoutCornerPosition, Outline, PieceGeometry, ShapeKind
from slabgeom.outline.base import (
    display_size, ellipse_commands, interior_cutouts, is_effective_notch, notch_candidates,
    piece_size, quarter_circle_commands,
)
from slabgeom.outline.chamfers import apply_angle_cuts, cut_angle_degrees, cut_secondary_point
from slabgeom.outline.curves import curve_controls
from slabgeom.outline.cutouts import cutout_corner_points, cutout_outline, notch_edge_metrics, rebase_modifiers
from slabgeom.outline.fillets import map_corner_radii, polygon_commands
from slabgeom.outline.notches import notch_right_triangle_points, notch_rectangle_points
from slabgeom.outline.segments import boundary_segments as segment_polygon
from slabgeom.tracer import get_tracer, trace


def carved_raw_points(piece):
    """Raw outline with notches carved; empty for shapes without corners."""
    size = piece_size(piece)
    notches = notch_candidates(piece, size)
    if piece.shape == ShapeKind.RECTANGLE:
        return notch_rectangle_points(size, notches)
    if piece.shape == ShapeKind.RIGHT_TRIANGLE:
        return notch_right_triangle_points(size, notches)
    return []


def base_corner_points(piece):
    """Carved corners in display coordinates, clockwise, before any chamfer."""
    return reorder_corners_clockwise([display_point(p) for p in carved_raw_points(piece)])


def piece_corner_count(piece):
    return len(base_corner_points(piece))


def boundary_angle_cuts(piece):
    """Angle cuts anchored on an existing boundary corner, in declaration order."""
    count = piece_corner_count(piece)
    return [cut for cut in piece.angle_cuts if 0 <= cut.anchor_corner_index < count]


def piece_corner_radii(piece):
    """Active corner radii on existing boundary corners."""
    count = piece_corner_count(piece)
    return [r for r in piece.corner_radii if r.radius > 0 and 0 <= r.corner_index < count]


def _selected_angle_cuts(piece, include_angles, angle_cut_limit):
    if angle_cut_limit is not None:
        return boundary_angle_cuts(piece)[:max(0, angle_cut_limit)]
    return boundary_angle_cuts(piece) if include_angles else []


def _chamfered(piece, include_angles=True, angle_cut_limit=None):
    base = base_corner_points(piece)
    cuts = _selected_angle_cuts(piece, include_angles, angle_cut_limit)
    if not cuts:
        return base, []
    return apply_angle_cuts(base, cuts)


def corner_points(piece, include_angles=True, angle_cut_limit=None):
    """
    Ordered display corners of the piece.

    `angle_cut_limit` applies only the first N boundary angle cuts and
    overrides `include_angles`.
    """
    points, _ = _chamfered(piece, include_angles, angle_cut_limit)
    return points


def angle_segments(piece):
    """Segments created by the applied chamfers, in display coordinates."""
    _, segments = _chamfered(piece)
    return segments


def hypotenuse_bounds(piece):
    """Nominal display bounds of an uncut right triangle, else None."""
    if piece.shape != ShapeKind.RIGHT_TRIANGLE:
        return None
    width, height = display_size(piece)
    return Bounds(0.0, 0.0, width, height)


def _segment_controls(piece, points):
    return curve_controls(points, piece.shape, piece.curved_edges, hypotenuse_bounds(piece))


def _fillet_radii(piece, points, controls):
    curved_corners = set()
    for index in controls:
        curved_corners.add(index)
        curved_corners.add((index + 1) % len(points))
    return map_corner_radii(piece_corner_radii(piece), points, base_corner_points(piece), curved_corners)


def outline_commands(piece, points=None, controls=None):
    """Draw commands of the piece's outer boundary."""
    if piece.shape == ShapeKind.CIRCLE:
        width, height = display_size(piece)
        return ellipse_commands((width / 2, height / 2), width / 2, height / 2)
    if piece.shape == ShapeKind.QUARTER_CIRCLE:
        return quarter_circle_commands(piece_size(piece)[0])

    if points is None:
        points = corner_points(piece)
    if len(points) < 3:
        return []
    if controls is None:
        controls = _segment_controls(piece, points)
    return polygon_commands(points, _fillet_radii(piece, points, controls), controls)


def outline_for_piece(piece):
    return Outline(commands=outline_commands(piece))


def display_polygon_points(piece, include_angles=True, angle_cut_limit=None, samples=24):
    """
    Polygon approximating the drawn boundary.

    Corner shapes return their ordered corners; circles and quarter circles
    return their flattened outline.
    """
    if piece.shape.has_corners:
        return corner_points(piece, include_angles, angle_cut_limit)
    return outline_for_piece(piece).flatten(samples)


def outline_polygon(piece, samples=24):
    """Shapely polygon of the flattened outer outline."""
    points = outline_for_piece(piece).flatten(samples)
    if len(points) < 3:
        return Polygon()
    return Polygon(points)


def boundary_segments(piece):
    """Tagged boundary segments of the final corner polygon."""
    if not piece.shape.has_corners:
        return []
    return segment_polygon(corner_points(piece), piece.shape, hypotenuse_bounds(piece))


def cutout_corner_ranges(piece):
    """(cutout, range) pairs of virtual corner indices, four per interior cutout."""
    next_index = piece_corner_count(piece)
    ranges = []
    for cutout in interior_cutouts(piece):
        ranges.append((cutout, range(next_index, next_index + 4)))
        next_index += 4
    return ranges


def cutout_corner_info(piece, index):
    """(cutout, corner position, local index) of a virtual corner, or None."""
    for cutout, indices in cutout_corner_ranges(piece):
        if index in indices:
            local_index = index - indices.start
            return cutout, CutoutCornerPosition(local_index), local_index
    return None


def corner_label_count(piece):
    return piece_corner_count(piece) + 4 * len(interior_cutouts(piece))


def corner_label_points(piece):
    """Positions of every labeled corner: boundary corners, then virtual cutout corners."""
    points = list(corner_points(piece))
    for cutout, _ in cutout_corner_ranges(piece):
        points.extend(cutout_corner_points(cutout))
    return points


def cutout_outlines(piece):
    """Outlines of every placed cutout drawn as a separate hole."""
    ranges = {cutout.id: indices for cutout, indices in cutout_corner_ranges(piece)}
    size = piece_size(piece)
    outlines = []
    for cutout in piece.cutouts:
        if not cutout.is_placed or is_effective_notch(cutout, piece, size):
            continue
        indices = ranges.get(cutout.id)
        if indices is None:
            outlines.append(cutout_outline(cutout))
            continue
        local_cuts = rebase_modifiers(piece.angle_cuts, "anchor_corner_index", indices.start)
        local_radii = [
            r for r in rebase_modifiers(piece.corner_radii, "corner_index", indices.start) if r.radius > 0
        ]
        outlines.append(cutout_outline(cutout, local_cuts, local_radii))
    return outlines


def notch_metrics(piece, points=None):
    """Visible wall measurements of every notch on a piece with corners."""
    if not piece.shape.has_corners:
        return []
    if points is None:
        points = corner_points(piece)
    size = display_size(piece)
    metrics = []
    for cutout in notch_candidates(piece):
        measured = notch_edge_metrics(cutout, size, points)
        if measured is not None:
            metrics.append(measured)
    return metrics


def angle_degrees(piece, anchor_corner_index, anchor_offset, secondary_corner_index, secondary_offset,
                  angle_cut_limit=None):
    """Acute chamfer angle for two perimeter points, measured on un-chamfered corners."""
    points = corner_points(piece, include_angles=False, angle_cut_limit=angle_cut_limit)
    return cut_angle_degrees(points, anchor_corner_index, anchor_offset, secondary_corner_index, secondary_offset)


def secondary_point(piece, anchor_corner_index, anchor_offset, angle_degrees, angle_cut_limit=None):
    """(corner_index, offset) of the secondary chamfer point for a given angle."""
    points = corner_points(piece, include_angles=False, angle_cut_limit=angle_cut_limit)
    return cut_secondary_point(points, anchor_corner_index, anchor_offset, angle_degrees)


@trace(label="build_geometry")
def build_geometry(piece):
    """
    Compute the full display geometry of a piece.

    Args:
        piece: Piece description

    Returns:
        PieceGeometry
    """
    tracer = get_tracer()
    tracer.event("Piece", piece=piece, shape=piece.shape)

    with tracer.span("corners", module="pipeline"):
        base = base_corner_points(piece)
        skipped = [cut.id for cut in piece.angle_cuts if not 0 <= cut.anchor_corner_index < len(base)]
        if skipped:
            tracer.event("Angle cuts off the boundary corners, ignored", level="WARN", cuts=skipped)
        points, chamfers = _chamfered(piece)
        tracer.event("Corners", base=len(base), chamfered=len(points), angle_segments=len(chamfers))

    with tracer.span("curves", module="pipeline"):
        controls = _segment_controls(piece, points) if piece.shape.has_corners else {}
        tracer.event("Curved segments", count=len(controls))

    with tracer.span("outline", module="pipeline"):
        commands = outline_commands(piece, points, controls)

    with tracer.span("segments", module="pipeline"):
        segments = segment_polygon(points, piece.shape, hypotenuse_bounds(piece)) if piece.shape.has_corners else []
        tracer.event("Boundary segments", count=len(segments))

    with tracer.span("cutouts", module="pipeline"):
        holes = cutout_outlines(piece)
        labels = corner_label_points(piece)
        notches = notch_metrics(piece, points)
        tracer.event("Cutout outlines", count=len(holes), notches=len(notches), labels=len(labels))

    return PieceGeometry(
        piece_id=piece.id,
        shape=piece.shape,
        display_size=display_size(piece),
        outline=Outline(commands=commands),
        corner_points=points,
        angle_segments=chamfers,
        boundary_segments=segments,
        segment_controls=controls,
        cutout_outlines=holes,
        notch_metrics=notches,
        corner_label_points=labels,
    )
