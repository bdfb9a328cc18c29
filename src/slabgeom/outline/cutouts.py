"""
Interior cutout outlines in display coordinates.

Rectangular cutouts carry four virtual corners (top-left, top-right,
bottom-right, bottom-left) that chamfers and fillets address with local
indices 0-3. Notches get wall measurements taken from the drawn outline.
"""

from slabgeom.geometry.polygon import (
    reorder_corners_clockwise, segment_center_on_line, segment_length_on_line,
)
from slabgeom.geometry.vectors import display_point
from slabgeom.models import CutoutKind, CutoutOutline, NotchMetrics, Outline
from slabgeom.outline.base import display_cutout_corners, ellipse_commands
from slabgeom.outline.chamfers import apply_angle_cuts
from slabgeom.outline.fillets import map_corner_radii, polygon_commands

NOTCH_EDGE_EPSILON = 0.01


def rebase_modifiers(modifiers, index_field, start, count=4):
    """
    Modifiers whose corner index falls in [start, start + count), with the
    index shifted to start at 0.
    """
    local = []
    for modifier in modifiers:
        index = getattr(modifier, index_field)
        if start <= index < start + count:
            local.append(modifier.model_copy(update={index_field: index - start}))
    return local


def cutout_corner_points(cutout):
    """Clockwise display corners of a rectangular cutout, top-left first."""
    if cutout.kind == CutoutKind.CIRCLE:
        return []
    return reorder_corners_clockwise(display_cutout_corners(cutout))


def cutout_outline(cutout, angle_cuts=(), corner_radii=()):
    """
    Outline of one placed cutout.

    Circles become ellipses inscribed in the rotated bounding box. Squares
    and rectangles apply local chamfers first, then local fillets mapped to
    their un-chamfered corners.
    """
    if cutout.kind == CutoutKind.CIRCLE:
        center = display_point((cutout.center_x, cutout.center_y))
        diameter_x = cutout.height if cutout.height > 0 else cutout.width
        commands = ellipse_commands(center, diameter_x / 2, cutout.width / 2)
        return CutoutOutline(cutout_id=cutout.id, outline=Outline(commands=commands))

    base_corners = cutout_corner_points(cutout)
    points, _ = apply_angle_cuts(base_corners, list(angle_cuts))
    radius_map = map_corner_radii(corner_radii, points, base_corners)
    return CutoutOutline(
        cutout_id=cutout.id,
        outline=Outline(commands=polygon_commands(points, radius_map)),
        corner_points=base_corners,
    )


def notch_edge_metrics(cutout, size, polygon, eps=NOTCH_EDGE_EPSILON):
    """
    Measure the inner walls a notch leaves on the drawn outline.

    The width wall is the vertical line on the notch side facing into the
    piece and the length wall the horizontal one; their visible length is
    what remains on the polygon after neighbouring notches and chamfers.

    Args:
        cutout: Notch cutout in raw coordinates
        size: Display (width, height) of the piece
        polygon: Display outline points

    Returns:
        NotchMetrics, or None when neither wall is on the outline
    """
    if len(polygon) < 2:
        return None
    (min_x, min_y), _, (max_x, max_y), _ = display_cutout_corners(cutout)
    width, height = size

    interior_x = None
    if min_x <= eps:
        interior_x = max_x
    elif max_x >= width - eps:
        interior_x = min_x
    interior_y = None
    if min_y <= eps:
        interior_y = max_y
    elif max_y >= height - eps:
        interior_y = min_y

    vertical = 0.0
    center_y = (min_y + max_y) / 2
    if interior_x is not None:
        vertical = segment_length_on_line(polygon, True, interior_x, min_y, max_y)
        if vertical > 0:
            center_y = segment_center_on_line(polygon, True, interior_x, min_y, max_y)
    horizontal = 0.0
    center_x = (min_x + max_x) / 2
    if interior_y is not None:
        horizontal = segment_length_on_line(polygon, False, interior_y, min_x, max_x)
        if horizontal > 0:
            center_x = segment_center_on_line(polygon, False, interior_y, min_x, max_x)

    if vertical <= 0 and horizontal <= 0:
        return None
    return NotchMetrics(
        cutout_id=cutout.id,
        width=vertical if vertical > 0 else max_y - min_y,
        length=horizontal if horizontal > 0 else max_x - min_x,
        width_center_y=center_y,
        length_center_x=center_x,
        wall_x=max_x if interior_x is None else interior_x,
        wall_y=max_y if interior_y is None else interior_y,
    )
