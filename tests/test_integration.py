"""Integration tests for the command line."""

import json
import os

import pytest

from slabgeom.cli import main


@pytest.fixture
def piece_path(temp_dir):
    """A notched rectangle with a chamfer and a fillet."""
    data = {
        "id": "p1",
        "name": "Island",
        "width": "24",
        "height": "18",
        "cutouts": [{"id": "n1", "width": 4, "height": 2, "center_x": 12, "center_y": 1, "is_notch": True}],
        "angle_cuts": [{"id": "a1", "anchor_corner_index": 1}],
        "corner_radii": [{"corner_index": 2, "radius": 1}],
    }
    path = os.path.join(temp_dir, "piece.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f)
    return path


class TestRender:
    """Tests for the render command."""

    def test_writes_artifacts(self, temp_dir, piece_path, capsys):
        out_dir = os.path.join(temp_dir, "output")
        assert main(["render", piece_path, "--out", out_dir]) == 0

        for name in ["outline.svg", "geometry.json", "validation_report.json", "validation_summary.txt"]:
            assert os.path.exists(os.path.join(out_dir, name)), f"Missing {name}"

        with open(os.path.join(out_dir, "geometry.json"), encoding="utf-8") as f:
            geometry = json.load(f)
        assert geometry["piece_id"] == "p1"
        assert len(geometry["angle_segments"]) == 1
        assert "Rendered piece: Island" in capsys.readouterr().out

    def test_missing_piece_fails(self, temp_dir, capsys):
        code = main(["render", os.path.join(temp_dir, "missing.json"), "--out", temp_dir])
        assert code == 1
        assert "Piece file not found" in capsys.readouterr().err

    def test_trace_file(self, temp_dir, piece_path):
        trace_path = os.path.join(temp_dir, "trace.log")
        main(["render", piece_path, "--out", temp_dir, "--trace", "--trace-file", trace_path])
        with open(trace_path, encoding="utf-8") as f:
            text = f.read()
        assert "build_geometry" in text
        assert "validate_piece" in text


class TestValidate:
    """Tests for the validate command."""

    def test_clean_piece(self, piece_path, capsys):
        assert main(["validate", piece_path]) == 0
        out = capsys.readouterr().out
        assert "[PASS][ERROR] cutout_outside_bounds" in out
        assert "0 errors" in out

    def test_errors_exit_nonzero(self, temp_dir, capsys):
        path = os.path.join(temp_dir, "bad.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"angle_cuts": [{"anchor_corner_index": 0}], "corner_radii": [{"corner_index": 0}]}, f)
        assert main(["validate", path, "--out", temp_dir]) == 1
        assert "[FAIL][ERROR] corner_radius_conflicts_with_angle" in capsys.readouterr().out
        assert os.path.exists(os.path.join(temp_dir, "validation_summary.txt"))


class TestHit:
    """Tests for the hit command."""

    def test_boundary_hit(self, piece_path, capsys):
        assert main(["hit", piece_path, "0.1", "20"]) == 0
        out = capsys.readouterr().out
        assert "inside the piece" in out
        assert "Boundary segment: left1" in out

    def test_miss(self, piece_path, capsys):
        assert main(["hit", piece_path, "9", "12", "--tolerance", "0.25"]) == 0
        assert "No segment within 0.25 in" in capsys.readouterr().out


class TestMeasureAndConfig:
    """Tests for the measurement and config commands."""

    def test_measure(self, capsys):
        assert main(["measure", "12 1/2", "3/8"]) == 0
        out = capsys.readouterr().out
        assert "12 1/2 = 12.5 in (12 1/2)" in out
        assert "3/8 = 0.375 in (3/8)" in out

    def test_measure_rejects_text(self, capsys):
        assert main(["measure", "wide"]) == 1
        assert "not a measurement" in capsys.readouterr().err

    def test_init_config(self, temp_dir, capsys):
        path = os.path.join(temp_dir, "config.yaml")
        assert main(["init-config", "--out", path]) == 0
        assert os.path.exists(path)

    def test_no_command(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out
