"""
Pydantic data models for slab piece geometry.

Piece descriptions are immutable value inputs; every derived structure
(outline commands, corner lists, segments) is rebuilt from them on demand.
"""

import math
import uuid
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

Point = Tuple[float, float]


class ShapeKind(str, Enum):
    """Base outline shapes supported by the engine."""
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    QUARTER_CIRCLE = "quarter_circle"
    RIGHT_TRIANGLE = "right_triangle"

    @property
    def has_corners(self):
        return self in (ShapeKind.RECTANGLE, ShapeKind.RIGHT_TRIANGLE)


class EdgePosition(str, Enum):
    """Canonical edges of a rectangle or right triangle."""
    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"
    LEG_A = "leg_a"
    HYPOTENUSE = "hypotenuse"
    LEG_B = "leg_b"


RECTANGLE_EDGES = (EdgePosition.TOP, EdgePosition.RIGHT, EdgePosition.BOTTOM, EdgePosition.LEFT)
TRIANGLE_EDGES = (EdgePosition.LEG_A, EdgePosition.HYPOTENUSE, EdgePosition.LEG_B)


def edges_for_shape(shape):
    """Canonical edges of a shape in walking order."""
    if shape == ShapeKind.RIGHT_TRIANGLE:
        return TRIANGLE_EDGES
    if shape == ShapeKind.RECTANGLE:
        return RECTANGLE_EDGES
    return ()


class CutoutKind(str, Enum):
    """Cutout shapes."""
    CIRCLE = "circle"
    SQUARE = "square"
    RECTANGLE = "rectangle"


class CutoutCornerPosition(int, Enum):
    """Local corner positions of an interior cutout, clockwise from top-left."""
    TOP_LEFT = 0
    TOP_RIGHT = 1
    BOTTOM_RIGHT = 2
    BOTTOM_LEFT = 3


class PathCommandKind(str, Enum):
    """Draw command kinds of an outline."""
    MOVE = "move"
    LINE = "line"
    QUAD = "quad"
    ARC = "arc"
    CLOSE = "close"


class Severity(str, Enum):
    """Severity levels for validation checks."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"


def new_id(prefix):
    """Random identifier for a modifier, stable for the lifetime of the model."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


# Piece description

class Cutout(BaseModel):
    """A hole or notch in the piece, in raw piece coordinates."""
    id: str = Field(default_factory=lambda: new_id("cutout"))
    kind: CutoutKind = CutoutKind.RECTANGLE
    width: float = 0.0
    height: float = 0.0
    center_x: float = -1.0  # negative: not placed yet
    center_y: float = -1.0
    is_notch: bool = False
    corner_anchor_x: float = -1.0  # display coordinates of the corner a corner notch belongs to
    corner_anchor_y: float = -1.0
    corner_index: int = -1

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def effective_height(self):
        """Squares use the width for both sides."""
        if self.kind == CutoutKind.SQUARE:
            return self.width
        return self.height

    @property
    def is_placed(self):
        return self.center_x >= 0 and self.center_y >= 0

    @property
    def has_anchor(self):
        return self.corner_anchor_x >= 0 and self.corner_anchor_y >= 0

    def raw_extent(self):
        """Return (min_x, max_x, min_y, max_y) of the cutout rectangle."""
        half_w = self.width / 2
        half_h = self.effective_height / 2
        return (
            self.center_x - half_w,
            self.center_x + half_w,
            self.center_y - half_h,
            self.center_y + half_h,
        )


class CurvedEdge(BaseModel):
    """A convex or concave arc replacing a canonical edge or a corner span of it."""
    id: str = Field(default_factory=lambda: new_id("curve"))
    edge: EdgePosition
    radius: float = 0.0
    is_concave: bool = False
    start_corner_index: int = -1
    end_corner_index: int = -1

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def has_span(self):
        return (
            self.start_corner_index >= 0
            and self.end_corner_index >= 0
            and self.start_corner_index != self.end_corner_index
        )

    @property
    def is_active(self):
        return self.radius > 0


class CornerRadius(BaseModel):
    """A fillet on one corner."""
    id: str = Field(default_factory=lambda: new_id("radius"))
    corner_index: int = 0
    radius: float = 1.0
    is_inside: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)


class AngleCut(BaseModel):
    """A chamfer anchored on a corner, given by offsets along both adjacent edges."""
    id: str = Field(default_factory=lambda: new_id("angle"))
    anchor_corner_index: int = 0
    anchor_offset: float = 2.0
    secondary_corner_index: int = 0
    secondary_offset: float = 2.0
    uses_second_point: bool = True
    angle_degrees: float = 45.0

    model_config = ConfigDict(extra="forbid", frozen=True)


class Piece(BaseModel):
    """A slab piece: base shape, nominal size and boundary modifiers."""
    id: str = Field(default_factory=lambda: new_id("piece"))
    name: str = "Piece"
    shape: ShapeKind = ShapeKind.RECTANGLE
    width: float = 24.0
    height: float = 18.0
    cutouts: List[Cutout] = Field(default_factory=list)
    curved_edges: List[CurvedEdge] = Field(default_factory=list)
    corner_radii: List[CornerRadius] = Field(default_factory=list)
    angle_cuts: List[AngleCut] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)


# Derived geometry

class AngleSegment(BaseModel):
    """Boundary segment created by an applied chamfer."""
    id: str
    start: Point
    end: Point

    model_config = ConfigDict(extra="forbid", frozen=True)


class BoundarySegment(BaseModel):
    """One physical sub-edge of the outline tagged with its canonical edge."""
    edge: EdgePosition
    index: int
    start: Point
    end: Point
    start_index: int = -1
    end_index: int = -1

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def length(self):
        return math.hypot(self.end[0] - self.start[0], self.end[1] - self.start[1])


class PathCommand(BaseModel):
    """
    A single draw command.

    Arcs carry their center, radii, start angle and signed sweep in radians;
    a positive sweep runs toward increasing angle (clockwise on screen).
    """
    kind: PathCommandKind
    to: Optional[Point] = None
    control: Optional[Point] = None
    center: Optional[Point] = None
    radius_x: float = 0.0
    radius_y: float = 0.0
    start_angle: float = 0.0
    sweep: float = 0.0

    model_config = ConfigDict(extra="forbid", frozen=True)


class Outline(BaseModel):
    """A closed outline expressed as draw commands."""
    commands: List[PathCommand] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def is_empty(self):
        return not self.commands

    def to_svg_path(self, precision=3):
        """Render the commands as an SVG path `d` attribute."""
        def fmt(value):
            text = f"{value:.{precision}f}".rstrip("0").rstrip(".")
            return "0" if text in ("-0", "") else text

        parts = []
        for cmd in self.commands:
            if cmd.kind == PathCommandKind.MOVE:
                parts.append(f"M {fmt(cmd.to[0])} {fmt(cmd.to[1])}")
            elif cmd.kind == PathCommandKind.LINE:
                parts.append(f"L {fmt(cmd.to[0])} {fmt(cmd.to[1])}")
            elif cmd.kind == PathCommandKind.QUAD:
                parts.append(
                    f"Q {fmt(cmd.control[0])} {fmt(cmd.control[1])} {fmt(cmd.to[0])} {fmt(cmd.to[1])}"
                )
            elif cmd.kind == PathCommandKind.ARC:
                large_arc = 1 if abs(cmd.sweep) > math.pi else 0
                sweep_flag = 1 if cmd.sweep > 0 else 0
                parts.append(
                    f"A {fmt(cmd.radius_x)} {fmt(cmd.radius_y)} 0 {large_arc} {sweep_flag} "
                    f"{fmt(cmd.to[0])} {fmt(cmd.to[1])}"
                )
            elif cmd.kind == PathCommandKind.CLOSE:
                parts.append("Z")
        return " ".join(parts)

    def flatten(self, samples=24):
        """
        Approximate the outline with a polygon.

        Curves and arcs are sampled with `samples` steps each; straight
        segments keep only their endpoints.
        """
        points = []
        current = None
        for cmd in self.commands:
            if cmd.kind in (PathCommandKind.MOVE, PathCommandKind.LINE):
                points.append(cmd.to)
                current = cmd.to
            elif cmd.kind == PathCommandKind.QUAD:
                for step in range(1, samples + 1):
                    t = step / samples
                    inv = 1 - t
                    x = inv * inv * current[0] + 2 * inv * t * cmd.control[0] + t * t * cmd.to[0]
                    y = inv * inv * current[1] + 2 * inv * t * cmd.control[1] + t * t * cmd.to[1]
                    points.append((x, y))
                current = cmd.to
            elif cmd.kind == PathCommandKind.ARC:
                for step in range(1, samples):
                    angle = cmd.start_angle + cmd.sweep * step / samples
                    points.append((
                        cmd.center[0] + cmd.radius_x * math.cos(angle),
                        cmd.center[1] + cmd.radius_y * math.sin(angle),
                    ))
                points.append(cmd.to)
                current = cmd.to
        if len(points) > 1 and math.dist(points[0], points[-1]) < 1e-4:
            points.pop()
        return points


class CutoutOutline(BaseModel):
    """Drawn outline of an interior (non-notch) cutout in display coordinates."""
    cutout_id: str
    outline: Outline
    corner_points: List[Point] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)


class NotchMetrics(BaseModel):
    """
    Visible inner walls of a notch on the drawn outline, in display inches.

    `width` runs along display y on the vertical wall at `wall_x`, `length`
    along display x on the horizontal wall at `wall_y`. Each falls back to
    the notch size when that wall is not on the outline.
    """
    cutout_id: str
    width: float
    length: float
    width_center_y: float
    length_center_x: float
    wall_x: float
    wall_y: float

    model_config = ConfigDict(extra="forbid", frozen=True)


class PieceGeometry(BaseModel):
    """All geometry derived from one piece description, in display coordinates."""
    piece_id: str
    shape: ShapeKind
    display_size: Tuple[float, float]
    outline: Outline
    corner_points: List[Point] = Field(default_factory=list)
    angle_segments: List[AngleSegment] = Field(default_factory=list)
    boundary_segments: List[BoundarySegment] = Field(default_factory=list)
    segment_controls: Dict[int, Point] = Field(default_factory=dict)
    cutout_outlines: List[CutoutOutline] = Field(default_factory=list)
    notch_metrics: List[NotchMetrics] = Field(default_factory=list)
    corner_label_points: List[Point] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def corner_count(self):
        return len(self.corner_points)

    @property
    def curved_segment_indices(self):
        """Polygon segment indices drawn as quadratic curves."""
        return sorted(self.segment_controls)


# Validation

class CheckResult(BaseModel):
    """Result of a single validation check."""
    rule_id: str
    severity: Severity
    passed: bool
    message: str
    evidence: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class ValidationReport(BaseModel):
    """Collection of validation check results."""
    checks: List[CheckResult] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @property
    def issues(self):
        return [c for c in self.checks if not c.passed]

    @property
    def has_errors(self):
        """Check if any errors exist."""
        return any(c.severity == Severity.ERROR and not c.passed for c in self.checks)

    @property
    def error_count(self):
        """Count of failed error-level checks."""
        return sum(1 for c in self.checks if c.severity == Severity.ERROR and not c.passed)

    @property
    def warning_count(self):
        """Count of failed warning-level checks."""
        return sum(1 for c in self.checks if c.severity == Severity.WARN and not c.passed)

    def failed(self, rule_id):
        """Failed results of one rule."""
        return [c for c in self.checks if c.rule_id == rule_id and not c.passed]
