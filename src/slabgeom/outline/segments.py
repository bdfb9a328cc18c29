"""
Boundary segmenter.

Splits the final corner polygon into physical sub-edges, each tagged with
the canonical edge it lies on and numbered along that edge.
"""

from slabgeom.geometry.polygon import polygon_bounds
from slabgeom.geometry.vectors import midpoint
from slabgeom.models import BoundarySegment, EdgePosition, ShapeKind, edges_for_shape
from slabgeom.outline.curves import nearest_hypotenuse_segment, segment_is_on_hypotenuse

SEGMENT_EPSILON = 0.001


def classify_boundary_segment(a, b, bounds, shape, hypotenuse_bounds=None):
    """Canonical edge of a segment lying exactly on a boundary line, else None."""
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    if shape == ShapeKind.RIGHT_TRIANGLE:
        if abs(dy) < SEGMENT_EPSILON and abs(a[1] - bounds.min_y) < SEGMENT_EPSILON:
            return EdgePosition.LEG_A
        if abs(dx) < SEGMENT_EPSILON and abs(a[0] - bounds.min_x) < SEGMENT_EPSILON:
            return EdgePosition.LEG_B
        if segment_is_on_hypotenuse(a, b, hypotenuse_bounds or bounds):
            return EdgePosition.HYPOTENUSE
        return None

    if abs(dy) < SEGMENT_EPSILON:
        if abs(a[1] - bounds.min_y) < SEGMENT_EPSILON:
            return EdgePosition.TOP
        if abs(a[1] - bounds.max_y) < SEGMENT_EPSILON:
            return EdgePosition.BOTTOM
    elif abs(dx) < SEGMENT_EPSILON:
        if abs(a[0] - bounds.min_x) < SEGMENT_EPSILON:
            return EdgePosition.LEFT
        if abs(a[0] - bounds.max_x) < SEGMENT_EPSILON:
            return EdgePosition.RIGHT
    return None


def _sort_key(edge, start, end, bounds):
    if edge in (EdgePosition.TOP, EdgePosition.BOTTOM, EdgePosition.LEG_A):
        return min(start[0], end[0])
    if edge in (EdgePosition.LEFT, EdgePosition.RIGHT, EdgePosition.LEG_B):
        return min(start[1], end[1])
    mid = midpoint(start, end)
    return (bounds.max_x - mid[0]) / max(bounds.width, 0.0001)


def boundary_segments(points, shape, hypotenuse_bounds=None):
    """
    Tagged boundary segments of an ordered corner polygon.

    Segments are grouped by edge in walking order (top, right, bottom, left
    or leg A, hypotenuse, leg B) and sorted along their edge. Notch walls and
    floors off the boundary lines, and chamfer segments, are left out.
    """
    count = len(points)
    if count < 2 or not shape.has_corners:
        return []
    bounds = polygon_bounds(points)

    tagged = []
    for i in range(count):
        j = (i + 1) % count
        edge = classify_boundary_segment(points[i], points[j], bounds, shape, hypotenuse_bounds)
        if edge is not None:
            tagged.append((edge, i, j))

    if shape == ShapeKind.RIGHT_TRIANGLE and not any(t[0] == EdgePosition.HYPOTENUSE for t in tagged):
        fallback = nearest_hypotenuse_segment(points, hypotenuse_bounds or bounds)
        if fallback is not None and all(t[1] != fallback for t in tagged):
            tagged.append((EdgePosition.HYPOTENUSE, fallback, (fallback + 1) % count))

    segments = []
    for edge in edges_for_shape(shape):
        on_edge = sorted(
            (t for t in tagged if t[0] == edge),
            key=lambda t: _sort_key(edge, points[t[1]], points[t[2]], bounds),
        )
        for index, (_, i, j) in enumerate(on_edge):
            segments.append(BoundarySegment(
                edge=edge, index=index, start=points[i], end=points[j], start_index=i, end_index=j,
            ))
    return segments
