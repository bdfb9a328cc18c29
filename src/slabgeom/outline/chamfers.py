"""
Chamfer (angle cut) application and angle helpers.

Cuts operate on display-oriented, clockwise corner lists. Each cut finds
its corner again by nearest vertex to the un-chamfered base corner, so
earlier cuts never shift the corner a later cut refers to.
"""

import math
from collections import namedtuple

from slabgeom.geometry.polygon import dedupe_points, nearest_point_index, reorder_corners_clockwise
from slabgeom.geometry.vectors import (
    distance, dot, lerp, normalized_index, offset, ray_segment_intersection, rotate, unit_vector,
)
from slabgeom.models import AngleSegment
from slabgeom.tracer import get_tracer

# Location of a point on a polygon perimeter: the segment it lies on
# (segment k runs from corner k to corner k + 1) and its parameter there.
PerimeterPoint = namedtuple("PerimeterPoint", ["point", "segment_start_index", "t"])


def interior_angle(corner, prev, nxt):
    """Angle at a corner between its two adjacent edges, in radians."""
    a = unit_vector(corner, prev)
    b = unit_vector(corner, nxt)
    cos_v = max(min(dot(a, b), 1.0), -1.0)
    return math.acos(cos_v)


def secondary_offset_for_angle(anchor_offset, angle_degrees, corner_angle):
    """
    Offset along the previous edge that gives a chamfer of the requested angle.

    The angle is measured at the anchor point between the edge and the cut
    line; with the corner angle the triangle is solved by the law of sines.
    Returns None when the two angles leave no room for a third.
    """
    theta = math.radians(angle_degrees)
    third = math.pi - corner_angle - theta
    if theta <= 0 or math.sin(third) <= 0.0001:
        return None
    return abs(anchor_offset) * math.sin(theta) / math.sin(third)


def apply_angle_cut(cut, ordered, base_ordered):
    """
    Apply one cut to an ordered corner list.

    Returns (points, segment); segment is None when the cut was skipped.
    """
    if len(ordered) < 3 or len(base_ordered) < 3:
        return list(ordered), None

    base_corner = base_ordered[normalized_index(cut.anchor_corner_index, len(base_ordered))]
    anchor_index = nearest_point_index(base_corner, ordered)
    count = len(ordered)
    corner = ordered[anchor_index]
    prev = ordered[(anchor_index - 1) % count]
    nxt = ordered[(anchor_index + 1) % count]

    along_next = abs(cut.anchor_offset)
    if cut.uses_second_point:
        along_prev = abs(cut.secondary_offset)
    else:
        along_prev = secondary_offset_for_angle(
            cut.anchor_offset, cut.angle_degrees, interior_angle(corner, prev, nxt)
        )
        if along_prev is None:
            get_tracer().event("Angle cut angle does not close, skipped", level="WARN", cut=cut.id)
            return list(ordered), None

    if along_next > distance(corner, nxt) or along_prev > distance(corner, prev):
        get_tracer().event(
            "Angle cut longer than its edges, skipped", level="WARN",
            cut=cut.id, anchor=along_next, secondary=along_prev,
        )
        return list(ordered), None

    p1 = offset(corner, unit_vector(corner, nxt), along_next)
    p2 = offset(corner, unit_vector(corner, prev), along_prev)
    points = list(ordered[:anchor_index]) + [p2, p1] + list(ordered[anchor_index + 1:])
    return dedupe_points(points), AngleSegment(id=cut.id, start=p2, end=p1)


def apply_angle_cuts(display_points, angle_cuts):
    """
    Apply cuts in order to a display corner list.

    Returns the clockwise-ordered points and the AngleSegment of every
    applied cut. Cuts with a negative anchor are ignored.
    """
    points = reorder_corners_clockwise(display_points)
    if not angle_cuts:
        return points, []
    base_ordered = list(points)
    segments = []
    for cut in angle_cuts:
        if cut.anchor_corner_index < 0:
            continue
        ordered = reorder_corners_clockwise(points)
        points, segment = apply_angle_cut(cut, ordered, base_ordered)
        if segment is not None:
            segments.append(segment)
    return reorder_corners_clockwise(points), segments


def point_along_perimeter(points, start_index, distance_along):
    """
    Walk the perimeter from a corner.

    Positive distances walk forward (clockwise), negative ones backward.
    The returned segment index and parameter are always expressed in the
    forward direction. Returns None for fewer than two points or an empty
    perimeter.
    """
    count = len(points)
    if count < 2:
        return None
    perimeter = sum(distance(points[i], points[(i + 1) % count]) for i in range(count))
    if perimeter <= 0:
        return None

    remaining = abs(distance_along)
    forward = distance_along >= 0
    index = normalized_index(start_index, count)
    while remaining >= 0:
        step = (index + (1 if forward else -1)) % count
        start = points[index]
        end = points[step]
        seg_len = distance(start, end)
        if seg_len == 0:
            index = step
            continue
        if remaining <= seg_len:
            t = remaining / seg_len
            point = lerp(start, end, t)
            if forward:
                return PerimeterPoint(point, index, t)
            return PerimeterPoint(point, step, 1 - t)
        remaining -= seg_len
        index = step
    return None


def tangent_direction(points, segment_start_index):
    """Unit direction of the forward segment starting at a corner."""
    count = len(points)
    start = points[segment_start_index]
    end = points[(segment_start_index + 1) % count]
    return unit_vector(start, end)


def secondary_point_info(points, anchor, angle_degrees):
    """
    Nearest perimeter hit of rays cast from the anchor at plus and minus the
    angle from its tangent. The anchor's own segment is never hit.
    """
    tangent = tangent_direction(points, anchor.segment_start_index)
    radians = math.radians(angle_degrees)
    best = None
    best_distance = float("inf")
    count = len(points)
    for direction in (rotate(tangent, radians), rotate(tangent, -radians)):
        for i in range(count):
            if i == anchor.segment_start_index:
                continue
            start = points[i]
            end = points[(i + 1) % count]
            seg_len = distance(start, end)
            if seg_len == 0:
                continue
            hit = ray_segment_intersection(anchor.point, direction, (start, end))
            if hit is None:
                continue
            d = distance(anchor.point, hit)
            if d < best_distance:
                best_distance = d
                t = max(min(distance(start, hit) / seg_len, 1.0), 0.0)
                best = PerimeterPoint(hit, i, t)
    return best


def cut_angle_degrees(points, anchor_corner_index, anchor_offset, secondary_corner_index, secondary_offset):
    """Acute angle between the tangent at the anchor point and the line to the secondary point."""
    if len(points) < 3:
        return None
    anchor = point_along_perimeter(points, normalized_index(anchor_corner_index, len(points)), anchor_offset)
    secondary = point_along_perimeter(
        points, normalized_index(secondary_corner_index, len(points)), secondary_offset
    )
    if anchor is None or secondary is None:
        return None

    tangent = tangent_direction(points, anchor.segment_start_index)
    to_secondary = unit_vector(anchor.point, secondary.point)
    cos_v = max(min(dot(tangent, to_secondary), 1.0), -1.0)
    radians = math.acos(cos_v)
    return math.degrees(min(radians, math.pi - radians))


def cut_secondary_point(points, anchor_corner_index, anchor_offset, angle_degrees):
    """(corner_index, offset) where a cut at the given angle meets the perimeter."""
    if len(points) < 3:
        return None
    anchor = point_along_perimeter(points, normalized_index(anchor_corner_index, len(points)), anchor_offset)
    if anchor is None:
        return None
    secondary = secondary_point_info(points, anchor, angle_degrees)
    if secondary is None:
        return None
    corner = points[secondary.segment_start_index]
    return secondary.segment_start_index, distance(corner, secondary.point)
