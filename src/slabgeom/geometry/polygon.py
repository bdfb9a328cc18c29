"""
Polygon helpers: dedupe, winding, bounds, ordering and containment.
"""

from collections import namedtuple

import numpy as np

from slabgeom.geometry.vectors import distance, normalized_index, point_line_distance

DEDUPE_TOLERANCE = 0.0001


class Bounds(namedtuple("Bounds", ["min_x", "min_y", "max_x", "max_y"])):
    """Axis-aligned bounding box."""
    __slots__ = ()

    @property
    def width(self):
        return self.max_x - self.min_x

    @property
    def height(self):
        return self.max_y - self.min_y


def dedupe_points(points, tolerance=DEDUPE_TOLERANCE):
    """
    Remove consecutive near-duplicate points.

    A last point coinciding with the first is dropped as well, so the
    result never repeats its closing vertex.
    """
    result = []
    for point in points:
        if result and distance(point, result[-1]) < tolerance:
            continue
        result.append(tuple(point))
    if len(result) > 1 and distance(result[0], result[-1]) < tolerance:
        result.pop()
    return result


def drop_collinear_points(points, tolerance=DEDUPE_TOLERANCE):
    """
    Remove vertices lying on the line through their two neighbours.

    Catches straight pass-through vertices and zero-width spikes where the
    outline doubles back along itself. Repeats until nothing changes.
    """
    result = dedupe_points(points, tolerance)
    changed = True
    while changed and len(result) > 3:
        changed = False
        count = len(result)
        for i in range(count):
            prev = result[i - 1]
            nxt = result[(i + 1) % count]
            if point_line_distance(result[i], prev, nxt) < tolerance:
                result = dedupe_points(result[:i] + result[i + 1:], tolerance)
                changed = True
                break
    return result


def signed_area(points):
    """Shoelace sum; positive means clockwise with y pointing down."""
    if len(points) < 3:
        return 0.0
    arr = np.asarray(points, dtype=float)
    x = arr[:, 0]
    y = arr[:, 1]
    return float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y)) / 2


def polygon_is_clockwise(points):
    """Whether a polygon winds clockwise in screen coordinates."""
    if len(points) < 3:
        return True
    return signed_area(points) > 0


def polygon_bounds(points):
    """Axis-aligned bounds of a point list."""
    if not points:
        return Bounds(0.0, 0.0, 0.0, 0.0)
    arr = np.asarray(points, dtype=float)
    min_x, min_y = arr.min(axis=0)
    max_x, max_y = arr.max(axis=0)
    return Bounds(float(min_x), float(min_y), float(max_x), float(max_y))


def nearest_point_index(point, points):
    """Index of the point closest to `point`; 0 for an empty list."""
    best_index = 0
    best_distance = float("inf")
    for index, candidate in enumerate(points):
        d = distance(point, candidate)
        if d < best_distance:
            best_distance = d
            best_index = index
    return best_index


def point_in_polygon(point, polygon):
    """Ray casting containment test; points on the boundary may go either way."""
    if len(polygon) < 3:
        return False
    px, py = point
    inside = False
    j = len(polygon) - 1
    for i in range(len(polygon)):
        xi, yi = polygon[i]
        xj, yj = polygon[j]
        if (yi > py) != (yj > py):
            cross_x = (xj - xi) * (py - yi) / (yj - yi) + xi
            if px < cross_x:
                inside = not inside
        j = i
    return inside


def reorder_corners_clockwise(points):
    """
    Normalize a polygon to clockwise winding with a canonical start vertex.

    The start is the left-most vertex among those at or above the vertical
    midline, the upper one on ties. Applying this twice changes nothing.
    """
    if len(points) <= 2:
        return list(points)
    ordered = [tuple(p) for p in points]
    if signed_area(ordered) < 0:
        ordered.reverse()

    bounds = polygon_bounds(ordered)
    mid_y = bounds.min_y + bounds.height / 2
    candidates = [(p[0], p[1], i) for i, p in enumerate(ordered) if p[1] <= mid_y]
    if not candidates:
        return ordered
    start_index = min(candidates)[2]
    return ordered[start_index:] + ordered[:start_index]


def segment_indices_between(start, end, count):
    """
    Segment indices walked forward from corner `start` to corner `end`.

    Segment k joins corner k and corner k + 1. The walk wraps around and
    excludes `end`; equal corners give an empty walk.
    """
    if count <= 0:
        return []
    start = normalized_index(start, count)
    end = normalized_index(end, count)
    indices = []
    index = start
    while index != end:
        indices.append(index)
        index = (index + 1) % count
    return indices


def polygon_edges(points):
    """Yield (index, start, end) for each closing edge of a polygon."""
    count = len(points)
    for i in range(count):
        yield i, points[i], points[(i + 1) % count]


def _line_overlaps(points, is_vertical, value, range_min, range_max, eps=0.01):
    low = min(range_min, range_max)
    high = max(range_min, range_max)
    for _, a, b in polygon_edges(points):
        axis = 0 if is_vertical else 1
        along = 1 if is_vertical else 0
        if abs(a[axis] - value) >= eps or abs(b[axis] - value) >= eps:
            continue
        overlap_min = max(min(a[along], b[along]), low)
        overlap_max = min(max(a[along], b[along]), high)
        if overlap_max > overlap_min:
            yield overlap_min, overlap_max


def segment_length_on_line(points, is_vertical, value, range_min, range_max):
    """Total polygon edge length lying on an axis line within a range."""
    return sum(hi - lo for lo, hi in _line_overlaps(points, is_vertical, value, range_min, range_max))


def segment_center_on_line(points, is_vertical, value, range_min, range_max):
    """Length-weighted center of the polygon edges on an axis line within a range."""
    weighted = 0.0
    total = 0.0
    for lo, hi in _line_overlaps(points, is_vertical, value, range_min, range_max):
        weighted += (lo + hi) / 2 * (hi - lo)
        total += hi - lo
    if total <= 0:
        return (range_min + range_max) / 2
    return weighted / total
