"""
SVG emission for slab pieces.

Draws a PieceGeometry: outer outline, cutout holes, chamfer segments and
optional corner, segment and notch dimension labels.
"""

import svgwrite

from slabgeom.geometry.vectors import midpoint, offset, outward_normal
from slabgeom.measurement import format_inches
from slabgeom.tracer import get_tracer, trace


def _to_px(point, render):
    return (
        (point[0] + render.margin) * render.scale,
        (point[1] + render.margin) * render.scale,
    )


@trace(label="emit_piece_svg")
def emit_piece_svg(geometry, render):
    """
    Create an SVG document for computed piece geometry.

    Args:
        geometry: PieceGeometry in display coordinates (inches)
        render: RenderConfig

    Returns:
        svgwrite.Drawing object
    """
    tracer = get_tracer()

    width_in, height_in = geometry.display_size
    width = (width_in + 2 * render.margin) * render.scale
    height = (height_in + 2 * render.margin) * render.scale

    dwg = svgwrite.Drawing(size=(f"{width:.0f}px", f"{height:.0f}px"))
    dwg.viewbox(0, 0, width, height)
    dwg.defs.add(dwg.style("""
        .piece { stroke-linecap: round; stroke-linejoin: round; vector-effect: non-scaling-stroke; }
        .label { font-family: sans-serif; }
    """))

    transform = f"translate({render.margin * render.scale},{render.margin * render.scale}) scale({render.scale})"
    shape_group = dwg.g(id="piece", fill="none", transform=transform)

    outline = dwg.path(d=geometry.outline.to_svg_path(), id="outline", class_="piece",
                       stroke=render.stroke_color, stroke_width=render.stroke_width)
    shape_group.add(outline)

    cutouts = dwg.g(id="cutouts", stroke=render.cutout_color, stroke_width=render.stroke_width)
    for hole in geometry.cutout_outlines:
        cutouts.add(dwg.path(d=hole.outline.to_svg_path(), id=f"cutout-{hole.cutout_id}", class_="piece"))
    shape_group.add(cutouts)

    angles = dwg.g(id="angle-cuts", stroke=render.angle_color, stroke_width=render.stroke_width)
    for segment in geometry.angle_segments:
        angles.add(dwg.line(start=segment.start, end=segment.end, id=f"angle-{segment.id}", class_="piece"))
    shape_group.add(angles)

    dwg.add(shape_group)

    if render.show_corner_labels and geometry.corner_label_points:
        labels = dwg.g(id="corner-labels", font_size=render.label_font_size, fill=render.stroke_color,
                       class_="label")
        for index, point in enumerate(geometry.corner_label_points):
            x, y = _to_px(point, render)
            labels.add(dwg.text(str(index), insert=(x + 3, y - 3)))
        dwg.add(labels)

    if render.show_segment_labels and geometry.boundary_segments:
        labels = dwg.g(id="segment-labels", font_size=render.label_font_size, fill=render.angle_color,
                       class_="label", text_anchor="middle")
        pad = render.label_font_size / render.scale
        for segment in geometry.boundary_segments:
            # Display y points down, so the y-up counter-clockwise normal faces out.
            normal = outward_normal(segment.start, segment.end, clockwise=False)
            x, y = _to_px(offset(midpoint(segment.start, segment.end), normal, pad), render)
            labels.add(dwg.text(f"{segment.edge.value}{segment.index}", insert=(x, y)))
        dwg.add(labels)

    if render.show_notch_labels and geometry.notch_metrics:
        labels = dwg.g(id="notch-labels", font_size=render.label_font_size, fill=render.cutout_color,
                       class_="label", text_anchor="middle")
        pad = render.label_font_size / render.scale
        for metrics in geometry.notch_metrics:
            side_x = 1 if metrics.wall_x >= metrics.length_center_x else -1
            side_y = 1 if metrics.wall_y >= metrics.width_center_y else -1
            x, y = _to_px((metrics.wall_x + side_x * pad, metrics.width_center_y), render)
            labels.add(dwg.text(f"{format_inches(metrics.width)} in", insert=(x, y)))
            x, y = _to_px((metrics.length_center_x, metrics.wall_y + side_y * pad), render)
            labels.add(dwg.text(f"{format_inches(metrics.length)} in", insert=(x, y)))
        dwg.add(labels)

    tracer.event(
        f"SVG emitted with {len(geometry.cutout_outlines)} cutouts and {len(geometry.angle_segments)} angle cuts"
    )
    return dwg
