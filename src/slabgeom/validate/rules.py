"""
Validation rules for slab pieces.

Checks modifier combinations that the outline engine tolerates silently
(it skips, clamps or lets one modifier win) but that a fabricator should
hear about. All geometry is compared in display coordinates.
"""

from shapely import affinity
from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon

from slabgeom.geometry.polygon import nearest_point_index
from slabgeom.geometry.vectors import display_point, distance, offset, unit_vector
from slabgeom.models import CheckResult, CutoutKind, EdgePosition, Severity, ShapeKind, ValidationReport
from slabgeom.outline.base import display_cutout_corners, display_size, notch_candidates, touches_hypotenuse
from slabgeom.outline.fillets import max_fillet_radius
from slabgeom import pipeline
from slabgeom.tracer import get_tracer, trace

TOUCH_EPSILON = 0.01
NOTCH_TOUCH_EPSILON = 0.5
AREA_EPSILON = 1e-6


@trace(label="validate_piece")
def validate_piece(piece):
    """
    Run all validation checks on a piece.

    Returns ValidationReport with all check results.
    """
    tracer = get_tracer()

    checks = []
    checks.extend(check_cutouts_inside(piece))
    checks.extend(check_cutouts_overlap(piece))
    checks.extend(check_radius_angle_conflicts(piece))
    checks.extend(check_cutouts_on_curved_edges(piece))
    checks.extend(check_curves_on_notched_edges(piece))
    checks.extend(check_radii_on_curved_edges(piece))
    checks.extend(check_radii_too_large(piece))
    checks.extend(check_cutouts_overlap_radii(piece))
    checks.extend(check_cutouts_overlap_angle_cuts(piece))

    report = ValidationReport(checks=checks)
    tracer.event(f"Validation complete: {report.error_count} errors, {report.warning_count} warnings")
    return report


def _passed(rule_id, severity, message):
    return [CheckResult(rule_id=rule_id, severity=severity, passed=True, message=message)]


# Geometry helpers

def cutout_geometry(cutout):
    """Shapely shape of a cutout in display coordinates."""
    if cutout.kind == CutoutKind.CIRCLE:
        center = display_point((cutout.center_x, cutout.center_y))
        radius_x = (cutout.height if cutout.height > 0 else cutout.width) / 2
        radius_y = cutout.width / 2
        circle = ShapelyPoint(center).buffer(1.0, quad_segs=16)
        return affinity.scale(circle, radius_x, radius_y, origin=center)
    corners = display_cutout_corners(cutout)
    return Polygon(corners)


def base_shape_geometry(piece):
    """The piece outline without any modifier."""
    bare = piece.model_copy(update={"cutouts": [], "curved_edges": [], "corner_radii": [], "angle_cuts": []})
    return pipeline.outline_polygon(bare)


def touched_edges(cutout, piece, eps=TOUCH_EPSILON):
    """Canonical edges (display orientation) a cutout's bounding box reaches."""
    width, height = display_size(piece)
    shape = cutout_geometry(cutout)
    min_x, min_y, max_x, max_y = shape.bounds
    edges = set()
    if piece.shape == ShapeKind.RIGHT_TRIANGLE:
        if min_y <= eps:
            edges.add(EdgePosition.LEG_A)
        if min_x <= eps:
            edges.add(EdgePosition.LEG_B)
        if touches_hypotenuse(min_x, max_x, min_y, max_y, (width, height), eps):
            edges.add(EdgePosition.HYPOTENUSE)
        return edges
    if piece.shape != ShapeKind.RECTANGLE:
        return edges
    if min_y <= eps:
        edges.add(EdgePosition.TOP)
    if max_y >= height - eps:
        edges.add(EdgePosition.BOTTOM)
    if min_x <= eps:
        edges.add(EdgePosition.LEFT)
    if max_x >= width - eps:
        edges.add(EdgePosition.RIGHT)
    return edges


def curved_edge_set(piece):
    return {curve.edge for curve in piece.curved_edges if curve.is_active}


def _corner_neighbors(points, index):
    count = len(points)
    return points[(index - 1) % count], points[index], points[(index + 1) % count]


def fillet_region(prev, curr, nxt, radius):
    """Square spanned by the radius along both edges of a corner."""
    to_prev = unit_vector(curr, prev)
    to_next = unit_vector(curr, nxt)
    a = offset(curr, to_prev, radius)
    c = offset(curr, to_next, radius)
    b = offset(a, to_next, radius)
    return Polygon([curr, a, b, c])


def _resolved_radii(piece):
    """(corner radius, current polygon index) for every active boundary radius."""
    base = pipeline.base_corner_points(piece)
    points = pipeline.corner_points(piece)
    return points, [
        (radius, nearest_point_index(base[radius.corner_index], points))
        for radius in pipeline.piece_corner_radii(piece)
    ]


def _overlaps(a, b):
    return a.intersects(b) and a.intersection(b).area > AREA_EPSILON


# Rules

def check_cutouts_inside(piece):
    """
    Check that placed cutouts lie inside the piece.

    Notches only need their center inside, since they cut the boundary.
    """
    rule = "cutout_outside_bounds"
    outline = base_shape_geometry(piece).buffer(TOUCH_EPSILON)
    results = []
    for cutout in piece.cutouts:
        if not cutout.is_placed:
            continue
        if cutout.is_notch:
            center = ShapelyPoint(display_point((cutout.center_x, cutout.center_y)))
            inside = outline.covers(center)
        else:
            inside = outline.covers(cutout_geometry(cutout))
        if not inside:
            results.append(CheckResult(
                rule_id=rule,
                severity=Severity.ERROR,
                passed=False,
                message=f"Cutout {cutout.id} extends outside the piece",
                evidence={"cutout_id": cutout.id, "center": [cutout.center_x, cutout.center_y]},
            ))
    return results or _passed(rule, Severity.ERROR, "All cutouts lie inside the piece")


def check_cutouts_overlap(piece):
    """Check that no two placed cutouts overlap."""
    rule = "cutouts_overlap"
    placed = [c for c in piece.cutouts if c.is_placed]
    results = []
    for i, first in enumerate(placed):
        for second in placed[i + 1:]:
            if _overlaps(cutout_geometry(first), cutout_geometry(second)):
                results.append(CheckResult(
                    rule_id=rule,
                    severity=Severity.ERROR,
                    passed=False,
                    message=f"Cutouts {first.id} and {second.id} overlap",
                    evidence={"cutout_ids": [first.id, second.id]},
                ))
    return results or _passed(rule, Severity.ERROR, "No overlapping cutouts")


def check_radius_angle_conflicts(piece):
    """Check that no corner carries both an applied chamfer and a radius."""
    rule = "corner_radius_conflicts_with_angle"
    applied = {segment.id for segment in pipeline.angle_segments(piece)}
    chamfered = {
        cut.anchor_corner_index for cut in pipeline.boundary_angle_cuts(piece) if cut.id in applied
    }
    results = []
    for radius in pipeline.piece_corner_radii(piece):
        if radius.corner_index in chamfered:
            results.append(CheckResult(
                rule_id=rule,
                severity=Severity.ERROR,
                passed=False,
                message=f"Corner {radius.corner_index} has both a radius and an angle cut",
                evidence={"corner_index": radius.corner_index, "radius_id": radius.id},
            ))
    return results or _passed(rule, Severity.ERROR, "No corner combines a radius and an angle cut")


def check_cutouts_on_curved_edges(piece):
    rule = "cutout_on_curved_edge"
    curved = curved_edge_set(piece)
    results = []
    for cutout in piece.cutouts:
        if not cutout.is_placed or not curved:
            continue
        shared = sorted(edge.value for edge in touched_edges(cutout, piece) & curved)
        if shared:
            results.append(CheckResult(
                rule_id=rule,
                severity=Severity.WARN,
                passed=False,
                message=f"Cutout {cutout.id} touches curved edge(s): {', '.join(shared)}",
                evidence={"cutout_id": cutout.id, "edges": shared},
            ))
    return results or _passed(rule, Severity.WARN, "No cutout touches a curved edge")


def check_curves_on_notched_edges(piece):
    rule = "curve_on_notched_edge"
    notched = set()
    for notch in notch_candidates(piece):
        notched |= touched_edges(notch, piece, NOTCH_TOUCH_EPSILON)
    results = []
    for curve in piece.curved_edges:
        if curve.is_active and curve.edge in notched:
            results.append(CheckResult(
                rule_id=rule,
                severity=Severity.WARN,
                passed=False,
                message=f"Curve on {curve.edge.value} edge also carries a notch",
                evidence={"curve_id": curve.id, "edge": curve.edge.value},
            ))
    return results or _passed(rule, Severity.WARN, "No curve shares an edge with a notch")


def check_radii_on_curved_edges(piece):
    """
    Check for radii next to curved edges; the curve wins and the radius is
    not drawn.
    """
    rule = "corner_radius_on_curved_edge"
    curved = curved_edge_set(piece)
    results = []
    if curved:
        points, resolved = _resolved_radii(piece)
        segments = pipeline.boundary_segments(piece)
        for radius, index in resolved:
            corner = points[index]
            edges = {
                s.edge for s in segments
                if distance(s.start, corner) < 0.001 or distance(s.end, corner) < 0.001
            }
            shared = sorted(edge.value for edge in edges & curved)
            if shared:
                results.append(CheckResult(
                    rule_id=rule,
                    severity=Severity.WARN,
                    passed=False,
                    message=f"Corner {radius.corner_index} radius is next to curved edge(s): {', '.join(shared)}",
                    evidence={"corner_index": radius.corner_index, "edges": shared},
                ))
    return results or _passed(rule, Severity.WARN, "No radius sits next to a curved edge")


def check_radii_too_large(piece):
    """Check for radii larger than the fillet that fits their corner."""
    rule = "corner_radius_too_large"
    points, resolved = _resolved_radii(piece)
    results = []
    for radius, index in resolved:
        limit = max_fillet_radius(*_corner_neighbors(points, index))
        if radius.radius > limit + AREA_EPSILON:
            results.append(CheckResult(
                rule_id=rule,
                severity=Severity.WARN,
                passed=False,
                message=f"Corner {radius.corner_index} radius {radius.radius:g} exceeds {limit:.3f}",
                evidence={"corner_index": radius.corner_index, "radius": radius.radius, "max_radius": limit},
            ))
    return results or _passed(rule, Severity.WARN, "All radii fit their corners")


def check_cutouts_overlap_radii(piece):
    rule = "cutout_overlaps_corner_radius"
    points, resolved = _resolved_radii(piece)
    placed = [c for c in piece.cutouts if c.is_placed]
    results = []
    for radius, index in resolved:
        region = fillet_region(*_corner_neighbors(points, index), radius.radius)
        for cutout in placed:
            if _overlaps(region, cutout_geometry(cutout)):
                results.append(CheckResult(
                    rule_id=rule,
                    severity=Severity.WARN,
                    passed=False,
                    message=f"Cutout {cutout.id} overlaps the radius on corner {radius.corner_index}",
                    evidence={"cutout_id": cutout.id, "corner_index": radius.corner_index},
                ))
    return results or _passed(rule, Severity.WARN, "No cutout overlaps a corner radius")


def check_cutouts_overlap_angle_cuts(piece):
    rule = "cutout_overlaps_angle_cut"
    base = pipeline.base_corner_points(piece)
    anchors = {cut.id: cut.anchor_corner_index for cut in pipeline.boundary_angle_cuts(piece)}
    placed = [c for c in piece.cutouts if c.is_placed]
    results = []
    for segment in pipeline.angle_segments(piece):
        corner = base[anchors[segment.id]]
        removed = Polygon([corner, segment.end, segment.start])
        for cutout in placed:
            if _overlaps(removed, cutout_geometry(cutout)):
                results.append(CheckResult(
                    rule_id=rule,
                    severity=Severity.WARN,
                    passed=False,
                    message=f"Cutout {cutout.id} overlaps angle cut {segment.id}",
                    evidence={"cutout_id": cutout.id, "angle_cut_id": segment.id},
                ))
    return results or _passed(rule, Severity.WARN, "No cutout overlaps an angle cut")
