"""
Vector and line helpers on (x, y) tuples.

All functions are pure; angles are in radians.
"""

import math

MIN_LENGTH = 0.0001


def distance(a, b):
    """Euclidean distance between two points."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def unit_vector(start, end):
    """
    Unit vector pointing from start to end.

    Coincident points give the zero vector.
    """
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    length = max(math.hypot(dx, dy), MIN_LENGTH)
    return (dx / length, dy / length)


def normalized(vector):
    """Scale a vector to unit length."""
    length = max(math.hypot(vector[0], vector[1]), MIN_LENGTH)
    return (vector[0] / length, vector[1] / length)


def rotate(vector, radians):
    """Rotate a vector about the origin."""
    cos_v = math.cos(radians)
    sin_v = math.sin(radians)
    return (vector[0] * cos_v - vector[1] * sin_v, vector[0] * sin_v + vector[1] * cos_v)


def lerp(a, b, t):
    """Linear interpolation between two points."""
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def offset(point, direction, amount):
    """Move a point along a direction."""
    return (point[0] + direction[0] * amount, point[1] + direction[1] * amount)


def dot(a, b):
    return a[0] * b[0] + a[1] * b[1]


def cross(a, b):
    return a[0] * b[1] - a[1] * b[0]


def midpoint(a, b):
    return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)


def normalized_index(index, count):
    """Wrap an index into [0, count); negative indices count from the end."""
    if count <= 0:
        return 0
    return index % count


def point_line_distance(point, a, b):
    """Perpendicular distance from a point to the infinite line through a and b."""
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    denom = max(math.hypot(dx, dy), MIN_LENGTH)
    return abs(dy * point[0] - dx * point[1] + b[0] * a[1] - b[1] * a[0]) / denom


def point_segment_distance(point, a, b):
    """Distance from a point to the segment a-b."""
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    denom = dx * dx + dy * dy
    if denom < MIN_LENGTH:
        return distance(point, a)
    t = max(0.0, min(1.0, ((point[0] - a[0]) * dx + (point[1] - a[1]) * dy) / denom))
    return distance(point, (a[0] + t * dx, a[1] + t * dy))


def project_onto_segment(point, a, b):
    """Parameter of the orthogonal projection of point onto a-b (unclamped)."""
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    denom = dx * dx + dy * dy
    if denom < MIN_LENGTH:
        return 0.0
    return ((point[0] - a[0]) * dx + (point[1] - a[1]) * dy) / denom


def outward_normal(start, end, clockwise):
    """
    Normal of an edge chosen by winding.

    `clockwise` picks (-u.y, u.x), otherwise (u.y, -u.x), where u is the
    edge direction.
    """
    ux, uy = unit_vector(start, end)
    if clockwise:
        return (-uy, ux)
    return (uy, -ux)


def edge_direction_normal(start, end):
    """Direction rotated by 90 degrees, (dir.y, -dir.x)."""
    ux, uy = unit_vector(start, end)
    return (uy, -ux)


def ray_segment_intersection(origin, direction, segment):
    """
    Intersection of a ray with a segment, or None.

    Parallel rays (cross product below 1e-4) never intersect.
    """
    q, q_end = segment
    r = direction
    s = (q_end[0] - q[0], q_end[1] - q[1])
    rxs = cross(r, s)
    if abs(rxs) < MIN_LENGTH:
        return None
    qmp = (q[0] - origin[0], q[1] - origin[1])
    t = cross(qmp, s) / rxs
    u = cross(qmp, r) / rxs
    if t >= 0 and 0 <= u <= 1:
        return (origin[0] + r[0] * t, origin[1] + r[1] * t)
    return None


def display_point(raw):
    """Raw piece coordinates to display coordinates (axes swapped)."""
    return (raw[1], raw[0])


def raw_point(display):
    """Display coordinates back to raw piece coordinates."""
    return (display[1], display[0])
