"""
Artifact saving and piece loading for slabgeom.

Handles writing JSON and SVG files and reading piece descriptions.
"""

import json
import os

from slabgeom.measurement import parse_inches
from slabgeom.models import Piece
from slabgeom.tracer import get_tracer


def ensure_dir(path):
    """Create directory if it does not exist."""
    if path:
        os.makedirs(path, exist_ok=True)


def save_json(data, path, indent=2):
    """
    Save a dictionary or Pydantic model to JSON.
    """
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))

    if hasattr(data, "model_dump"):
        data = data.model_dump(mode="json")

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, default=str)

    tracer.event(f"Saved JSON: {path}")


def save_svg(svg_content, path):
    """
    Save SVG content to file.
    """
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))

    if hasattr(svg_content, "tostring"):
        content = svg_content.tostring()
    else:
        content = str(svg_content)

    with open(path, "w", encoding="utf-8") as f:
        f.write(content)

    tracer.event(f"Saved SVG: {path}")


def _dimension(value, default):
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    parsed = parse_inches(value)
    if parsed is None:
        get_tracer().event("Unparseable dimension, using default", level="WARN", value=value, default=default)
        return default
    return parsed


def piece_from_dict(data, defaults=None):
    """
    Build a Piece from decoded JSON.

    `width` and `height` may be numbers or measurement strings such as
    "25 1/2"; unparseable values fall back to the configured defaults.
    """
    if not isinstance(data, dict):
        raise ValueError("Piece JSON must be an object")
    default_width = defaults.default_width if defaults else 24.0
    default_height = defaults.default_height if defaults else 18.0

    values = dict(data)
    if "width" in values:
        values["width"] = _dimension(values["width"], default_width)
    if "height" in values:
        values["height"] = _dimension(values["height"], default_height)
    return Piece.model_validate(values)


def load_piece(path, defaults=None):
    """
    Load a piece description from a JSON file.

    Raises FileNotFoundError for a missing file and ValueError for JSON that
    is not an object; pydantic's ValidationError for malformed fields.
    """
    tracer = get_tracer()

    if not os.path.exists(path):
        raise FileNotFoundError(f"Piece file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    piece = piece_from_dict(data, defaults)
    tracer.event(f"Loaded piece {piece.name}", piece=piece)
    return piece
