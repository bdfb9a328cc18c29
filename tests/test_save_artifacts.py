"""Tests for piece loading and artifact writing."""

import json
import os

import pytest
from pydantic import ValidationError

from slabgeom.config import PieceDefaultsConfig
from slabgeom.io.save_artifacts import load_piece, piece_from_dict, save_json
from slabgeom.models import ShapeKind


def write_json(temp_dir, data, name="piece.json"):
    path = os.path.join(temp_dir, name)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f)
    return path


class TestLoadPiece:
    """Tests for reading piece descriptions."""

    def test_measurement_strings(self, temp_dir):
        path = write_json(temp_dir, {"name": "Vanity", "width": "25 1/2", "height": "18-3/4"})
        piece = load_piece(path)
        assert piece.name == "Vanity"
        assert piece.width == 25.5
        assert piece.height == 18.75
        assert piece.shape == ShapeKind.RECTANGLE

    def test_unparseable_dimension_uses_default(self, temp_dir):
        path = write_json(temp_dir, {"width": "wide", "height": 12})
        piece = load_piece(path, PieceDefaultsConfig(default_width=30.0))
        assert piece.width == 30.0
        assert piece.height == 12.0

    def test_nested_modifiers(self, temp_dir):
        path = write_json(temp_dir, {
            "shape": "right_triangle",
            "curved_edges": [{"edge": "hypotenuse", "radius": 2}],
            "angle_cuts": [{"anchor_corner_index": 0}],
        })
        piece = load_piece(path)
        assert piece.curved_edges[0].radius == 2
        assert piece.angle_cuts[0].anchor_offset == 2.0

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            load_piece(os.path.join(temp_dir, "missing.json"))

    def test_non_object(self):
        with pytest.raises(ValueError):
            piece_from_dict([1, 2])

    def test_extra_fields_rejected(self):
        with pytest.raises(ValidationError):
            piece_from_dict({"width": 10, "colour": "grey"})


class TestSaveJson:
    """Tests for JSON output."""

    def test_model_dump(self, temp_dir, rectangle_piece):
        path = os.path.join(temp_dir, "out", "piece.json")
        save_json(rectangle_piece, path)
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        assert data["shape"] == "rectangle"
        assert data["width"] == 24.0
