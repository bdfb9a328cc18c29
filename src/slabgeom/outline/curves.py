"""
Curved edges.

Every polygon segment is tagged with the canonical edge it lies on (or
none). A whole-edge curve bends each tagged segment by the matching piece of
one bezier spanning the full canonical edge; a span curve bends only the
segments walked between two corners, on a bezier over their chord.
Curve endpoints are always polygon vertices.
"""

from collections import namedtuple

from slabgeom.geometry.bezier import quad_subsegment
from slabgeom.geometry.polygon import polygon_bounds, segment_indices_between
from slabgeom.geometry.vectors import (
    distance, edge_direction_normal, midpoint, offset, point_line_distance, project_onto_segment,
)
from slabgeom.models import EdgePosition, ShapeKind
from slabgeom.tracer import get_tracer

AXIS_EPSILON = 0.01
EDGE_TOLERANCE = 0.5
HYPOTENUSE_TOLERANCE = 1.0
DIAGONAL_LINE_TOLERANCE = 0.01
CHORD_EPSILON = 0.001

EdgeGeometry = namedtuple("EdgeGeometry", ["start", "end", "normal"])


def full_edge_geometry(edge, bounds, shape, hypotenuse_bounds=None):
    """
    Start, end and outward normal of a full canonical edge, walked clockwise.

    Rectangle edges come from the polygon bounds; right-triangle edges from
    the nominal bounds of the uncut triangle.
    """
    if shape == ShapeKind.RIGHT_TRIANGLE:
        hb = hypotenuse_bounds or bounds
        if edge == EdgePosition.LEG_A:
            return EdgeGeometry((hb.min_x, hb.min_y), (hb.max_x, hb.min_y), (0.0, -1.0))
        if edge == EdgePosition.LEG_B:
            return EdgeGeometry((hb.min_x, hb.max_y), (hb.min_x, hb.min_y), (-1.0, 0.0))
        if edge == EdgePosition.HYPOTENUSE:
            start = (hb.max_x, hb.min_y)
            end = (hb.min_x, hb.max_y)
            return EdgeGeometry(start, end, edge_direction_normal(start, end))
        return None

    if edge == EdgePosition.TOP:
        return EdgeGeometry((bounds.min_x, bounds.min_y), (bounds.max_x, bounds.min_y), (0.0, -1.0))
    if edge == EdgePosition.RIGHT:
        return EdgeGeometry((bounds.max_x, bounds.min_y), (bounds.max_x, bounds.max_y), (1.0, 0.0))
    if edge == EdgePosition.BOTTOM:
        return EdgeGeometry((bounds.max_x, bounds.max_y), (bounds.min_x, bounds.max_y), (0.0, 1.0))
    if edge == EdgePosition.LEFT:
        return EdgeGeometry((bounds.min_x, bounds.max_y), (bounds.min_x, bounds.min_y), (-1.0, 0.0))
    return None


def t_for_edge(point, geometry, edge):
    """
    Parameter of a point along a full canonical edge.

    Horizontal edges use the x fraction, vertical edges the y fraction and
    the hypotenuse the distance fraction.
    """
    start, end, _ = geometry
    if edge in (EdgePosition.TOP, EdgePosition.BOTTOM, EdgePosition.LEG_A):
        denom = end[0] - start[0]
        if abs(denom) < 0.0001:
            return 0.0
        return (point[0] - start[0]) / denom
    if edge in (EdgePosition.LEFT, EdgePosition.RIGHT, EdgePosition.LEG_B):
        denom = end[1] - start[1]
        if abs(denom) < 0.0001:
            return 0.0
        return (point[1] - start[1]) / denom
    total = distance(start, end)
    if total < 0.0001:
        return 0.0
    return distance(start, point) / total


def _diagonal(bounds):
    return (bounds.max_x, bounds.min_y), (bounds.min_x, bounds.max_y)


def segment_is_on_hypotenuse(start, end, bounds, tolerance=HYPOTENUSE_TOLERANCE):
    a, b = _diagonal(bounds)
    return point_line_distance(start, a, b) <= tolerance and point_line_distance(end, a, b) <= tolerance


def edge_for_segment(start, end, bounds, shape, hypotenuse_bounds=None):
    """Canonical edge a polygon segment lies on, or None for notch walls and chamfers."""
    dx = end[0] - start[0]
    dy = end[1] - start[1]

    if shape == ShapeKind.RIGHT_TRIANGLE:
        hb = hypotenuse_bounds or bounds
        if abs(dy) < AXIS_EPSILON and abs((start[1] + end[1]) / 2 - hb.min_y) < EDGE_TOLERANCE:
            return EdgePosition.LEG_A
        if abs(dx) < AXIS_EPSILON and abs((start[0] + end[0]) / 2 - hb.min_x) < EDGE_TOLERANCE:
            return EdgePosition.LEG_B
        if segment_is_on_hypotenuse(start, end, hb):
            return EdgePosition.HYPOTENUSE
        return None

    if abs(dy) < AXIS_EPSILON:
        y = (start[1] + end[1]) / 2
        if abs(y - bounds.min_y) < EDGE_TOLERANCE:
            return EdgePosition.TOP
        if abs(y - bounds.max_y) < EDGE_TOLERANCE:
            return EdgePosition.BOTTOM
    if abs(dx) < AXIS_EPSILON:
        x = (start[0] + end[0]) / 2
        if abs(x - bounds.min_x) < EDGE_TOLERANCE:
            return EdgePosition.LEFT
        if abs(x - bounds.max_x) < EDGE_TOLERANCE:
            return EdgePosition.RIGHT
    return None


def nearest_hypotenuse_segment(points, bounds):
    """
    Index of the non-axis segment closest to the diagonal, the longer one on
    ties; None when every segment is axis-aligned.
    """
    a, b = _diagonal(bounds)
    best_index = None
    best_distance = float("inf")
    best_length = 0.0
    count = len(points)
    for index in range(count):
        start = points[index]
        end = points[(index + 1) % count]
        if abs(end[0] - start[0]) < AXIS_EPSILON or abs(end[1] - start[1]) < AXIS_EPSILON:
            continue
        line_distance = (point_line_distance(start, a, b) + point_line_distance(end, a, b)) / 2
        length = distance(start, end)
        if line_distance < best_distance or (abs(line_distance - best_distance) < 0.001 and length > best_length):
            best_distance = line_distance
            best_length = length
            best_index = index
    return best_index


def segment_edges(points, shape, hypotenuse_bounds=None):
    """
    Canonical edge of every polygon segment (segment k joins corner k and k + 1).

    A right triangle whose diagonal was cut away entirely still gets one
    hypotenuse segment: the nearest non-axis segment.
    """
    count = len(points)
    if count < 2:
        return []
    bounds = polygon_bounds(points)
    edges = [
        edge_for_segment(points[i], points[(i + 1) % count], bounds, shape, hypotenuse_bounds)
        for i in range(count)
    ]
    if shape == ShapeKind.RIGHT_TRIANGLE and EdgePosition.HYPOTENUSE not in edges:
        fallback = nearest_hypotenuse_segment(points, hypotenuse_bounds or bounds)
        if fallback is not None and edges[fallback] is None:
            edges[fallback] = EdgePosition.HYPOTENUSE
    return edges


def curve_lookup(curves):
    """Active whole-edge curves by edge; the last one declared for an edge wins."""
    lookup = {}
    for curve in curves:
        if curve.is_active and not curve.has_span:
            lookup[curve.edge] = curve
    return lookup


def curve_control(start, end, normal, radius, is_concave):
    """Control point 2r off the chord midpoint, inward when concave."""
    direction = -1.0 if is_concave else 1.0
    return offset(midpoint(start, end), normal, radius * 2 * direction)


def whole_edge_controls(points, edges, shape, curves, hypotenuse_bounds=None):
    """Control points for segments on edges that carry a whole-edge curve."""
    lookup = curve_lookup(curves)
    if not lookup:
        return {}
    bounds = polygon_bounds(points)
    count = len(points)
    controls = {}
    for edge, curve in lookup.items():
        geometry = full_edge_geometry(edge, bounds, shape, hypotenuse_bounds)
        if geometry is None:
            get_tracer().event("Curve edge does not belong to shape, ignored", level="WARN", curve=curve.id)
            continue
        base_control = curve_control(geometry.start, geometry.end, geometry.normal, curve.radius, curve.is_concave)
        for index, segment_edge in enumerate(edges):
            if segment_edge != edge:
                continue
            t0 = t_for_edge(points[index], geometry, edge)
            t1 = t_for_edge(points[(index + 1) % count], geometry, edge)
            _, control, _ = quad_subsegment(geometry.start, base_control, geometry.end, t0, t1)
            controls[index] = control
    return controls


def _on_edge_line(point, geometry, edge):
    tolerance = DIAGONAL_LINE_TOLERANCE if edge == EdgePosition.HYPOTENUSE else EDGE_TOLERANCE
    return point_line_distance(point, geometry.start, geometry.end) <= tolerance


def span_path_is_valid(points, edges, walk, chord_start, chord_end, edge, geometry):
    """
    Whether a corner walk stays on one canonical edge.

    Both chord ends must lie on the edge line, every walked vertex must
    project inside the chord, at least one walked segment must be tagged
    with the edge and none with another edge.
    """
    if not walk:
        return False
    if not (_on_edge_line(chord_start, geometry, edge) and _on_edge_line(chord_end, geometry, edge)):
        return False
    count = len(points)
    tagged = False
    for index in walk:
        segment_edge = edges[index]
        if segment_edge is not None and segment_edge != edge:
            return False
        if segment_edge == edge:
            tagged = True
        for vertex in (points[index], points[(index + 1) % count]):
            t = project_onto_segment(vertex, chord_start, chord_end)
            if t < -CHORD_EPSILON or t > 1 + CHORD_EPSILON:
                return False
    return tagged


def resolve_span_walk(points, edges, curve, shape, hypotenuse_bounds=None):
    """
    Segment indices a span curve covers, trying start to end and then the
    reverse. Returns None when neither walk stays on the curve's edge.
    """
    count = len(points)
    start = curve.start_corner_index
    end = curve.end_corner_index
    if start >= count or end >= count:
        return None
    geometry = full_edge_geometry(curve.edge, polygon_bounds(points), shape, hypotenuse_bounds)
    if geometry is None:
        return None
    for a, b in ((start, end), (end, start)):
        walk = segment_indices_between(a, b, count)
        if span_path_is_valid(points, edges, walk, points[a], points[b], curve.edge, geometry):
            return walk
    return None


def span_controls(points, edges, curve, walk):
    """Control points for the edge-tagged segments of an accepted span walk."""
    count = len(points)
    chord_start = points[walk[0]]
    chord_end = points[(walk[-1] + 1) % count]
    normal = edge_direction_normal(chord_start, chord_end)
    base_control = curve_control(chord_start, chord_end, normal, curve.radius, curve.is_concave)
    controls = {}
    for index in walk:
        if edges[index] != curve.edge:
            continue
        t0 = project_onto_segment(points[index], chord_start, chord_end)
        t1 = project_onto_segment(points[(index + 1) % count], chord_start, chord_end)
        _, control, _ = quad_subsegment(chord_start, base_control, chord_end, t0, t1)
        controls[index] = control
    return controls


def curve_controls(points, shape, curves, hypotenuse_bounds=None, edges=None):
    """
    Control point for every curved polygon segment, keyed by segment index.

    Span curves override whole-edge curves on the segments they cover.
    """
    if len(points) < 2 or not curves:
        return {}
    tracer = get_tracer()
    if edges is None:
        edges = segment_edges(points, shape, hypotenuse_bounds)

    controls = whole_edge_controls(points, edges, shape, curves, hypotenuse_bounds)
    for curve in curves:
        if not curve.is_active:
            tracer.event("Curve radius is not positive, inert", level="DEBUG", curve=curve.id)
            continue
        if not curve.has_span:
            continue
        walk = resolve_span_walk(points, edges, curve, shape, hypotenuse_bounds)
        if walk is None:
            tracer.event(
                "Span curve does not follow its edge, inert", level="WARN",
                curve=curve.id, start=curve.start_corner_index, end=curve.end_corner_index,
            )
            continue
        controls.update(span_controls(points, edges, curve, walk))
    return controls
