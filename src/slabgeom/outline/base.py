"""
Base outlines and cutout classification.

Sizes and cutouts are raw piece coordinates here; display conversion happens
in the pipeline once the raw outline is carved.
"""

import math

from slabgeom.models import CutoutKind, PathCommand, PathCommandKind, ShapeKind

TOUCH_EPSILON = 0.01
MIN_DIMENSION = 1.0


def piece_size(piece):
    """Raw (width, height) of a piece; a quarter circle is square."""
    width = max(piece.width, MIN_DIMENSION)
    height = max(piece.height, MIN_DIMENSION)
    if piece.shape == ShapeKind.QUARTER_CIRCLE:
        return (width, width)
    return (width, height)


def display_size(piece):
    width, height = piece_size(piece)
    return (height, width)


def rectangle_points(size):
    width, height = size
    return [(0.0, 0.0), (width, 0.0), (width, height), (0.0, height)]


def right_triangle_points(size):
    """Right-angle corner first, then the end of leg A, then the end of leg B."""
    width, height = size
    return [(0.0, 0.0), (width, 0.0), (0.0, height)]


def _rect_corners(min_x, max_x, min_y, max_y):
    return [(min_x, min_y), (max_x, min_y), (max_x, max_y), (min_x, max_y)]


def touches_hypotenuse(min_x, max_x, min_y, max_y, size, eps):
    """
    Whether a rectangle touches or crosses the diagonal x/w + y/h = 1.

    True when a corner lies within eps of the line or corners fall on both
    sides of it.
    """
    width = max(size[0], 0.0001)
    height = max(size[1], 0.0001)
    values = [x / width + y / height - 1 for x, y in _rect_corners(min_x, max_x, min_y, max_y)]
    low = min(values)
    high = max(values)
    if abs(low) <= eps or abs(high) <= eps:
        return True
    return low < -eps and high > eps


def cutout_touches_boundary(cutout, size, shape, eps=TOUCH_EPSILON):
    """Whether a cutout rectangle reaches one of the shape's boundary lines."""
    min_x, max_x, min_y, max_y = cutout.raw_extent()
    if shape == ShapeKind.RIGHT_TRIANGLE:
        return (
            min_y <= eps
            or min_x <= eps
            or touches_hypotenuse(min_x, max_x, min_y, max_y, size, eps)
        )
    return min_x <= eps or min_y <= eps or max_x >= size[0] - eps or max_y >= size[1] - eps


def cutout_is_inside_triangle(cutout, size):
    """Whether all four cutout corners lie inside the right triangle."""
    width = max(size[0], 0.0001)
    height = max(size[1], 0.0001)
    for x, y in _rect_corners(*cutout.raw_extent()):
        if x < -TOUCH_EPSILON or y < -TOUCH_EPSILON:
            return False
        if x / width + y / height > 1.0 + TOUCH_EPSILON:
            return False
    return True


def notch_candidates(piece, size=None):
    """Placed, non-circular cutouts that carve the outer boundary."""
    size = size or piece_size(piece)
    return [
        cutout for cutout in piece.cutouts
        if cutout.kind != CutoutKind.CIRCLE
        and cutout.is_placed
        and (cutout.is_notch or cutout_touches_boundary(cutout, size, piece.shape))
    ]


def is_effective_notch(cutout, piece, size=None):
    """Whether a cutout is drawn as part of the boundary rather than as a hole."""
    if cutout.is_notch:
        return True
    if cutout.kind == CutoutKind.CIRCLE:
        return False
    return cutout_touches_boundary(cutout, size or piece_size(piece), piece.shape)


def interior_cutouts(piece):
    """
    Cutouts that are separate holes with their own four virtual corners.

    Circles never get corners; right triangles also require the cutout to be
    fully inside the triangle.
    """
    size = piece_size(piece)
    result = []
    for cutout in piece.cutouts:
        if not cutout.is_placed or cutout.kind == CutoutKind.CIRCLE or cutout.is_notch:
            continue
        if cutout_touches_boundary(cutout, size, piece.shape):
            continue
        if piece.shape == ShapeKind.RIGHT_TRIANGLE and not cutout_is_inside_triangle(cutout, size):
            continue
        result.append(cutout)
    return result


def display_cutout_corners(cutout):
    """Cutout rectangle in display coordinates: top-left, top-right, bottom-right, bottom-left."""
    cx, cy = cutout.center_y, cutout.center_x
    half_w = cutout.effective_height / 2
    half_h = cutout.width / 2
    return [
        (cx - half_w, cy - half_h),
        (cx + half_w, cy - half_h),
        (cx + half_w, cy + half_h),
        (cx - half_w, cy + half_h),
    ]


def ellipse_commands(center, radius_x, radius_y):
    """Closed ellipse as four quarter arcs, starting at angle 0."""
    cx, cy = center
    commands = [PathCommand(kind=PathCommandKind.MOVE, to=(cx + radius_x, cy))]
    for quarter in range(4):
        start = quarter * math.pi / 2
        end = start + math.pi / 2
        commands.append(PathCommand(
            kind=PathCommandKind.ARC,
            to=(cx + radius_x * math.cos(end), cy + radius_y * math.sin(end)),
            center=(cx, cy),
            radius_x=radius_x,
            radius_y=radius_y,
            start_angle=start,
            sweep=math.pi / 2,
        ))
    commands.append(PathCommand(kind=PathCommandKind.CLOSE))
    return commands


def quarter_circle_commands(radius):
    """Origin, along the x axis to the radius, quarter arc to (0, radius)."""
    return [
        PathCommand(kind=PathCommandKind.MOVE, to=(0.0, 0.0)),
        PathCommand(kind=PathCommandKind.LINE, to=(radius, 0.0)),
        PathCommand(
            kind=PathCommandKind.ARC,
            to=(0.0, radius),
            center=(0.0, 0.0),
            radius_x=radius,
            radius_y=radius,
            start_angle=0.0,
            sweep=math.pi / 2,
        ),
        PathCommand(kind=PathCommandKind.CLOSE),
    ]
