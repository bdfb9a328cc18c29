"""
Corner fillets and outline command emission for corner polygons.
"""

import math
from collections import namedtuple

from slabgeom.geometry.polygon import nearest_point_index
from slabgeom.geometry.vectors import distance, dot, normalized, offset, unit_vector
from slabgeom.models import PathCommand, PathCommandKind
from slabgeom.tracer import get_tracer

DEGENERATE = 0.0001

Fillet = namedtuple("Fillet", ["start", "end", "center", "radius", "start_angle", "sweep"])


def _half_angle(prev, curr, nxt):
    v1 = unit_vector(curr, prev)
    v2 = unit_vector(curr, nxt)
    cos_v = max(min(dot(v1, v2), 1.0), -1.0)
    return math.acos(cos_v) / 2, v1, v2


def max_fillet_radius(prev, curr, nxt):
    """Largest radius whose tangent points stay on both adjacent edges."""
    half, _, _ = _half_angle(prev, curr, nxt)
    if half * 2 < DEGENERATE:
        return 0.0
    tan_half = abs(math.tan(half))
    if tan_half <= DEGENERATE:
        return 0.0
    return min(distance(curr, prev), distance(curr, nxt)) * tan_half


def fillet_corner(prev, curr, nxt, radius):
    """
    Tangent arc replacing the corner `curr`.

    The radius is clamped to max_fillet_radius. Returns None when the corner
    is degenerate or the clamped radius vanishes.
    """
    half, v1, v2 = _half_angle(prev, curr, nxt)
    if half * 2 < DEGENERATE:
        return None
    tan_half = abs(math.tan(half))
    if tan_half <= DEGENERATE:
        return None

    limit = min(distance(curr, prev), distance(curr, nxt)) * tan_half
    r = min(radius, limit)
    if r <= DEGENERATE:
        return None
    if r < radius:
        get_tracer().event("Corner radius clamped", level="DEBUG", requested=radius, radius=r)

    tangent = r / tan_half
    start = offset(curr, v1, tangent)
    end = offset(curr, v2, tangent)

    sin_half = math.sin(half)
    if sin_half <= DEGENERATE:
        return None
    bisector = normalized((v1[0] + v2[0], v1[1] + v2[1]))
    center = offset(curr, bisector, r / sin_half)

    start_angle = math.atan2(start[1] - center[1], start[0] - center[0])
    end_angle = math.atan2(end[1] - center[1], end[0] - center[0])
    sweep = end_angle - start_angle
    while sweep <= -math.pi:
        sweep += 2 * math.pi
    while sweep > math.pi:
        sweep -= 2 * math.pi
    return Fillet(start, end, center, r, start_angle, sweep)


def map_corner_radii(corner_radii, points, base_corners, excluded=()):
    """
    Radius per current polygon index.

    Each radius finds its corner by nearest point to the base corner at its
    index; corners in `excluded` keep their plain vertex.
    """
    radius_map = {}
    for corner in corner_radii:
        if corner.radius <= 0 or not 0 <= corner.corner_index < len(base_corners):
            continue
        index = nearest_point_index(base_corners[corner.corner_index], points)
        if index in excluded:
            get_tracer().event("Corner radius on curved corner, skipped", level="WARN", radius=corner.id)
            continue
        radius_map[index] = corner.radius
    return radius_map


def polygon_commands(points, radius_map=None, controls=None):
    """
    Draw commands for a closed corner polygon.

    `radius_map` maps corner indices to fillet radii and `controls` maps
    segment indices to quadratic control points. The outline starts at
    corner 0 (or its fillet's first tangent point) and ends with CLOSE.
    """
    count = len(points)
    if count < 2:
        return []
    radius_map = radius_map or {}
    controls = controls or {}

    fillets = {}
    for index, radius in radius_map.items():
        fillet = fillet_corner(points[index - 1], points[index], points[(index + 1) % count], radius)
        if fillet is not None:
            fillets[index] = fillet

    def entry(index):
        return fillets[index].start if index in fillets else points[index]

    def arc(index):
        f = fillets[index]
        return PathCommand(
            kind=PathCommandKind.ARC, to=f.end, center=f.center,
            radius_x=f.radius, radius_y=f.radius, start_angle=f.start_angle, sweep=f.sweep,
        )

    commands = [PathCommand(kind=PathCommandKind.MOVE, to=entry(0))]
    if 0 in fillets:
        commands.append(arc(0))
    for index in range(count):
        nxt = (index + 1) % count
        target = entry(nxt)
        if index in controls:
            commands.append(PathCommand(kind=PathCommandKind.QUAD, to=target, control=controls[index]))
        elif nxt != 0:
            commands.append(PathCommand(kind=PathCommandKind.LINE, to=target))
        if nxt != 0 and nxt in fillets:
            commands.append(arc(nxt))
    commands.append(PathCommand(kind=PathCommandKind.CLOSE))
    return commands
