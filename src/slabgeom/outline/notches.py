"""
Notch carving.

Notches touching one boundary line become rectangular step-ins along that
edge; notches touching two lines at a corner become L-shaped corner cuts.
Rectangles carve those cuts inline while walking the sides; right triangles
apply them to the clockwise display outline afterwards.
"""

from collections import namedtuple

from slabgeom.geometry.polygon import (
    dedupe_points, drop_collinear_points, nearest_point_index, reorder_corners_clockwise,
)
from slabgeom.geometry.vectors import (
    display_point, distance, lerp, normalized, offset, raw_point, unit_vector,
)
from slabgeom.outline.base import rectangle_points, right_triangle_points, touches_hypotenuse
from slabgeom.tracer import get_tracer, trace

EDGE_SNAP = 0.5
EDGE_MERGE_GAP = 0.01
HYPOTENUSE_MERGE_GAP = 0.0001
CORNER_NOTCH_LIMIT = 0.98

EdgeSpan = namedtuple("EdgeSpan", ["start", "end", "depth"])


def carve_extent(notch, size, eps=EDGE_SNAP):
    """Notch rectangle clamped to the piece, with sides near a boundary snapped onto it."""
    width, height = size
    min_x, max_x, min_y, max_y = notch.raw_extent()
    min_x = max(0.0, min_x)
    max_x = min(width, max_x)
    min_y = max(0.0, min_y)
    max_y = min(height, max_y)
    if min_x <= eps:
        min_x = 0.0
    if max_x >= width - eps:
        max_x = width
    if min_y <= eps:
        min_y = 0.0
    if max_y >= height - eps:
        max_y = height
    return min_x, max_x, min_y, max_y


def _merge_spans(spans, gap):
    merged = []
    for span in sorted(spans, key=lambda s: s.start):
        if merged and span.start <= merged[-1].end + gap:
            last = merged[-1]
            merged[-1] = EdgeSpan(last.start, max(last.end, span.end), max(last.depth, span.depth))
        else:
            merged.append(EdgeSpan(*span))
    return merged


def merge_edge_spans(spans):
    """
    Union of overlapping or touching spans on one edge.

    Merged spans keep the larger end and the deeper depth:
    [0, 5]@2 and [4, 10]@3 become [0, 10]@3.
    """
    return _merge_spans(spans, EDGE_MERGE_GAP)


def merge_hypotenuse_spans(spans):
    """Union of spans parameterized along the diagonal (t in [0, 1])."""
    return _merge_spans(spans, HYPOTENUSE_MERGE_GAP)


def hypotenuse_inward_normal(size):
    width = max(size[0], 0.0001)
    height = max(size[1], 0.0001)
    return normalized((-(1 / width), -(1 / height)))


def max_hypotenuse_depth(min_x, max_x, min_y, max_y, size):
    """Deepest inward distance from the diagonal reached by a rectangle corner."""
    width = max(size[0], 0.0001)
    height = max(size[1], 0.0001)
    denom = max(((1 / width) ** 2 + (1 / height) ** 2) ** 0.5, 0.0001)
    depth = 0.0
    for x, y in ((min_x, min_y), (max_x, min_y), (max_x, max_y), (min_x, max_y)):
        signed = (x / width + y / height - 1) / denom
        if signed <= 0:
            depth = max(depth, -signed)
    return depth


def hypotenuse_span(min_x, max_x, min_y, max_y, size):
    """
    Span of a rectangle along the diagonal from (w, 0) to (0, h).

    Returns an EdgeSpan in diagonal parameters, or None when the rectangle
    meets the diagonal in fewer than two places or has no inward depth.
    """
    width = max(size[0], 0.0001)
    height = max(size[1], 0.0001)
    t_values = []
    for x in (min_x, max_x):
        t = (width - x) / width
        if 0 <= t <= 1 and min_y - 0.01 <= height * t <= max_y + 0.01:
            t_values.append(t)
    for y in (min_y, max_y):
        t = y / height
        if 0 <= t <= 1 and min_x - 0.01 <= width * (1 - t) <= max_x + 0.01:
            t_values.append(t)
    if len(t_values) < 2:
        return None
    depth = max_hypotenuse_depth(min_x, max_x, min_y, max_y, size)
    if depth <= 0:
        return None
    return EdgeSpan(min(t_values), max(t_values), depth)


def _classify_rectangle_notches(size, notches):
    """
    Edge spans per side and the corner cut extents.

    A corner cut is the (x, y) of its inner vertex, widened over every notch
    reaching that corner, or None when no notch does.
    """
    width, height = size
    spans = {"top": [], "right": [], "bottom": [], "left": []}
    top_left = [0.0, 0.0]
    top_right = [width, 0.0]
    bottom_right = [width, height]
    bottom_left = [0.0, height]
    for notch in notches:
        min_x, max_x, min_y, max_y = carve_extent(notch, size)
        top = min_y <= EDGE_SNAP
        bottom = max_y >= height - EDGE_SNAP
        left = min_x <= EDGE_SNAP
        right = max_x >= width - EDGE_SNAP

        if top and left:
            top_left = [max(top_left[0], max_x), max(top_left[1], max_y)]
        if top and right:
            top_right = [min(top_right[0], min_x), max(top_right[1], max_y)]
        if bottom and right:
            bottom_right = [min(bottom_right[0], min_x), min(bottom_right[1], min_y)]
        if bottom and left:
            bottom_left = [max(bottom_left[0], max_x), min(bottom_left[1], min_y)]

        touched = top + bottom + left + right
        if touched == 1:
            if top:
                spans["top"].append(EdgeSpan(min_x, max_x, max_y))
            elif bottom:
                spans["bottom"].append(EdgeSpan(min_x, max_x, height - min_y))
            elif left:
                spans["left"].append(EdgeSpan(min_y, max_y, max_x))
            else:
                spans["right"].append(EdgeSpan(min_y, max_y, width - min_x))
        elif not ((top or bottom) and (left or right)):
            get_tracer().event("Notch does not reach a single edge, ignored", level="WARN", notch=notch.id)

    corners = {
        "top_left": tuple(top_left) if top_left[0] > 0 and top_left[1] > 0 else None,
        "top_right": tuple(top_right) if top_right[0] < width and top_right[1] > 0 else None,
        "bottom_right": tuple(bottom_right) if bottom_right[0] < width and bottom_right[1] < height else None,
        "bottom_left": tuple(bottom_left) if bottom_left[0] > 0 and bottom_left[1] < height else None,
    }
    return {edge: merge_edge_spans(items) for edge, items in spans.items()}, corners


@trace(label="carve_rectangle")
def notch_rectangle_points(size, notches):
    """
    Raw rectangle outline with every notch carved in.

    Walks top, right, bottom and left. Corner notches move the start and end
    of each side to an L-shaped cut; edge spans are clamped between them and
    each inserts a step-in.
    """
    if not notches:
        return rectangle_points(size)
    width, height = size
    spans, corners = _classify_rectangle_notches(size, notches)
    top_left = corners["top_left"]
    top_right = corners["top_right"]
    bottom_right = corners["bottom_right"]
    bottom_left = corners["bottom_left"]

    left_x = top_left[0] if top_left else 0.0
    right_x = top_right[0] if top_right else width
    points = [(left_x, 0.0)]
    for span in spans["top"]:
        start, end = max(span.start, left_x), min(span.end, right_x)
        if end <= start:
            continue
        if points[-1][0] < start:
            points.append((start, 0.0))
        points.extend([(start, span.depth), (end, span.depth), (end, 0.0)])
    points.append((right_x, 0.0))
    if top_right:
        points.extend([top_right, (width, top_right[1])])
    else:
        points.append((width, 0.0))

    upper_y = top_right[1] if top_right else 0.0
    lower_y = bottom_right[1] if bottom_right else height
    for span in spans["right"]:
        start, end = max(span.start, upper_y), min(span.end, lower_y)
        if end <= start:
            continue
        if points[-1][1] < start:
            points.append((width, start))
        points.extend([(width - span.depth, start), (width - span.depth, end), (width, end)])
    points.append((width, lower_y))
    if bottom_right:
        points.extend([bottom_right, (bottom_right[0], height)])
    else:
        points.append((width, height))

    left_x = bottom_left[0] if bottom_left else 0.0
    right_x = bottom_right[0] if bottom_right else width
    for span in reversed(spans["bottom"]):
        start, end = max(span.start, left_x), min(span.end, right_x)
        if end <= start:
            continue
        if points[-1][0] > end:
            points.append((end, height))
        points.extend([(end, height - span.depth), (start, height - span.depth), (start, height)])
    points.append((left_x, height))
    if bottom_left:
        points.extend([bottom_left, (0.0, bottom_left[1])])
    else:
        points.append((0.0, height))

    upper_y = top_left[1] if top_left else 0.0
    lower_y = bottom_left[1] if bottom_left else height
    for span in reversed(spans["left"]):
        start, end = max(span.start, upper_y), min(span.end, lower_y)
        if end <= start:
            continue
        if points[-1][1] > end:
            points.append((0.0, end))
        points.extend([(span.depth, end), (span.depth, start), (0.0, start)])
    points.append((0.0, upper_y))
    if top_left:
        points.extend([top_left, (top_left[0], 0.0)])
    else:
        points.append((0.0, 0.0))

    # A step-in flush with a corner cut leaves its wall doubled back on the cut.
    return drop_collinear_points(points)


@trace(label="carve_right_triangle")
def notch_right_triangle_points(size, notches):
    """
    Raw right-triangle outline with every notch carved in.

    Hypotenuse step-ins are placed by diagonal parameter and pushed inward
    along the diagonal's normal.
    """
    if not notches:
        return right_triangle_points(size)
    width, height = size
    top_spans = []
    left_spans = []
    hyp_spans = []
    corner_notches = []

    for notch in notches:
        min_x, max_x, min_y, max_y = carve_extent(notch, size)
        top = min_y <= EDGE_SNAP
        left = min_x <= EDGE_SNAP
        hyp = touches_hypotenuse(min_x, max_x, min_y, max_y, size, EDGE_SNAP)
        if top + left + hyp >= 2:
            corner_notches.append(notch)
            continue
        if top:
            top_spans.append(EdgeSpan(min_x, max_x, max_y))
        elif left:
            left_spans.append(EdgeSpan(min_y, max_y, max_x))
        elif hyp:
            span = hypotenuse_span(min_x, max_x, min_y, max_y, size)
            if span is not None:
                hyp_spans.append(span)

    points = [(0.0, 0.0)]
    for span in merge_edge_spans(top_spans):
        start, end = max(span.start, 0.0), min(span.end, width)
        if end <= start:
            continue
        if points[-1][0] < start:
            points.append((start, 0.0))
        points.extend([(start, span.depth), (end, span.depth), (end, 0.0)])
    points.append((width, 0.0))

    hyp_start = (width, 0.0)
    hyp_end = (0.0, height)
    inward = hypotenuse_inward_normal(size)
    current_t = 0.0
    for span in merge_hypotenuse_spans(hyp_spans):
        start_t = max(0.0, min(1.0, span.start))
        end_t = max(0.0, min(1.0, span.end))
        if end_t <= start_t:
            continue
        start = lerp(hyp_start, hyp_end, start_t)
        end = lerp(hyp_start, hyp_end, end_t)
        if current_t < start_t:
            points.append(start)
        points.append(offset(start, inward, span.depth))
        points.append(offset(end, inward, span.depth))
        points.append(end)
        current_t = end_t
    points.append((0.0, height))

    for span in reversed(merge_edge_spans(left_spans)):
        start, end = max(span.start, 0.0), min(span.end, height)
        if end <= start:
            continue
        if points[-1][1] > end:
            points.append((0.0, end))
        points.extend([(span.depth, end), (span.depth, start), (0.0, start)])
    points.append((0.0, 0.0))

    raw_points = dedupe_points(points)
    if corner_notches:
        raw_points = apply_corner_notches(raw_points, corner_notches)
    return raw_points


def resolve_notch_corner_index(notch, points):
    """
    Corner a corner notch belongs to, as an index into display points.

    Anchor coordinates win, then a stored in-range corner index, then the
    corner nearest the notch center. Returns -1 when nothing resolves.
    """
    if notch.has_anchor:
        return nearest_point_index((notch.corner_anchor_x, notch.corner_anchor_y), points)
    if 0 <= notch.corner_index < len(points):
        return notch.corner_index
    if notch.is_placed:
        return nearest_point_index(display_point((notch.center_x, notch.center_y)), points)
    return -1


def sort_notches_by_corner(notches, points):
    """Order corner notches by resolved corner, larger notches first, then id."""
    def key(notch):
        return (
            resolve_notch_corner_index(notch, points),
            -max(notch.width, notch.effective_height),
            notch.id,
        )
    return sorted(notches, key=key)


def cut_corner_notch(points, index, notch):
    """
    Replace one display corner with an L-shaped cut.

    The cut runs notch-height along the edge toward the previous corner and
    notch-width toward the next one (axes are swapped in display space), each
    limited to 98% of that edge.
    """
    if len(points) < 3:
        return list(points)
    cut_width = max(notch.effective_height, 0.0)
    cut_height = max(notch.width, 0.0)
    if cut_width <= 0 or cut_height <= 0:
        return list(points)

    count = len(points)
    corner = points[index]
    prev = points[(index - 1) % count]
    nxt = points[(index + 1) % count]
    to_prev = unit_vector(corner, prev)
    to_next = unit_vector(corner, nxt)
    cut_width = min(cut_width, max(distance(corner, prev) * CORNER_NOTCH_LIMIT, 0.0))
    cut_height = min(cut_height, max(distance(corner, nxt) * CORNER_NOTCH_LIMIT, 0.0))

    p1 = offset(corner, to_prev, cut_width)
    p2 = offset(p1, to_next, cut_height)
    p3 = offset(corner, to_next, cut_height)
    return dedupe_points(list(points[:index]) + [p1, p2, p3] + list(points[index + 1:]))


def apply_corner_notches(raw_points, notches):
    """
    Apply corner notches to a raw outline and return raw points.

    The order comes from the corners before any cut. Each notch then
    resolves its corner in the outline as already cut by the notches before
    it, so a stored index may land on an earlier cut's vertex.
    """
    if not notches or len(raw_points) < 3:
        return list(raw_points)
    tracer = get_tracer()

    display = reorder_corners_clockwise([display_point(p) for p in raw_points])
    for notch in sort_notches_by_corner(notches, display):
        index = resolve_notch_corner_index(notch, display)
        if index < 0:
            tracer.event("Corner notch has no corner, skipped", level="WARN", notch=notch.id)
            continue
        display = cut_corner_notch(display, index, notch)

    return [raw_point(p) for p in display]
