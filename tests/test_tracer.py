"""Tests for the tracer module."""

import json

import numpy as np
import pytest


class TestSummarize:
    """Tests for object summarization."""

    def test_numpy_array_summary(self):
        """Test that numpy arrays are summarized with shape and type."""
        from slabgeom.tracer import summarize

        arr = np.zeros((25, 2), dtype=np.float64)
        summary = summarize(arr)

        assert "ndarray" in summary
        assert "25x2" in summary
        assert "float64" in summary

    def test_summary_capped_length(self):
        """Test that summary never exceeds max length."""
        from slabgeom.tracer import summarize

        large_dict = {f"key_{i}": f"value_{i}" for i in range(100)}
        summary = summarize(large_dict, max_len=20)

        assert len(summary) <= 20

    def test_point_list_summary(self):
        """Point lists collapse to their count and bounds."""
        from slabgeom.tracer import summarize

        summary = summarize([(0, 0), (18, 0), (18, 24), (0, 24)])

        assert summary == "points(n=4,bounds=[0.00,0.00,18.00,24.00])"

    def test_single_point_summary(self):
        from slabgeom.tracer import summarize

        assert summarize((1.5, 2)) == "(1.500,2.000)"

    def test_list_summary(self):
        """Test list summarization."""
        from slabgeom.tracer import summarize

        summary = summarize([1, 2, 3, 4, 5])

        assert "list" in summary
        assert "len=5" in summary

    def test_string_summary(self):
        """Test long string summarization."""
        from slabgeom.tracer import summarize

        long_string = "a" * 1000
        summary = summarize(long_string)

        assert "str" in summary
        assert "len=1000" in summary
        assert len(summary) <= 200

    def test_none_summary(self):
        """Test None summarization."""
        from slabgeom.tracer import summarize

        assert summarize(None) == "None"

    def test_enum_summary(self):
        from slabgeom.models import EdgePosition
        from slabgeom.tracer import summarize

        assert summarize(EdgePosition.HYPOTENUSE) == "hypotenuse"

    def test_pydantic_model_summary(self):
        """Models with an id are summarized by it."""
        from slabgeom.models import Piece
        from slabgeom.tracer import summarize

        assert summarize(Piece(id="p1")) == "Piece(id=p1)"

    def test_shapely_summary(self):
        from shapely.geometry import box

        from slabgeom.tracer import summarize

        assert summarize(box(0, 0, 2, 3)) == "Polygon(bounds=[0.00,0.00,2.00,3.00])"


class TestTracerSpan:
    """Tests for tracer span functionality."""

    def test_span_nesting(self, capsys):
        """Test that spans produce proper indentation."""
        from slabgeom.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        tracer = get_tracer()

        with tracer.span("outer", module="test"):
            with tracer.span("inner", module="test"):
                tracer.event("inside")

        captured = capsys.readouterr()
        lines = captured.err.strip().split("\n")

        assert len(lines) == 5
        assert "      test:inner  inside" in lines[2]

    def test_tracer_disabled_no_output(self, capsys):
        """Test that disabled tracer produces no output."""
        from slabgeom.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=False)
        tracer = get_tracer()

        with tracer.span("test", module="test"):
            tracer.event("should not appear")

        captured = capsys.readouterr()
        assert captured.err == ""

    def test_level_filter(self, capsys):
        """DEBUG events stay silent at INFO level while WARN events show."""
        from slabgeom.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        tracer = get_tracer()
        tracer.event("hidden", level="DEBUG")
        tracer.event("shown", level="WARN")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "WARN" in err and "shown" in err

    def test_json_output(self, capsys):
        from slabgeom.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, json_output=True)
        get_tracer().event("Corners", count=4)

        lines = capsys.readouterr().err.strip().split("\n")
        record = json.loads(lines[1])
        assert record["message"] == "Corners count=4"
        assert record["meta"] == {"count": "4"}

    def test_trace_file(self, temp_dir):
        import os

        from slabgeom.tracer import configure_tracer, get_tracer

        path = os.path.join(temp_dir, "trace.log")
        configure_tracer(enabled=True, file_path=path)
        get_tracer().event("written")
        configure_tracer(enabled=False)

        with open(path, encoding="utf-8") as f:
            assert "written" in f.read()


class TestTraceDecorator:
    """Tests for the @trace decorator."""

    def test_decorator_runs_function(self):
        """Test that decorated function executes normally."""
        from slabgeom.tracer import configure_tracer, trace

        configure_tracer(enabled=False)

        @trace(label="test_func")
        def my_func(x):
            return x * 2

        assert my_func(5) == 10

    def test_decorator_with_exception(self, capsys):
        """Failures are logged at ERROR and re-raised."""
        from slabgeom.tracer import configure_tracer, trace

        configure_tracer(enabled=True)

        @trace(label="failing_func")
        def failing_func():
            raise ValueError("test error")

        with pytest.raises(ValueError):
            failing_func()

        assert "ValueError: test error" in capsys.readouterr().err
