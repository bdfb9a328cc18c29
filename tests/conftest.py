"""Pytest fixtures for slabgeom tests."""

import tempfile

import pytest

from slabgeom.models import Cutout, CutoutKind, Piece, ShapeKind
from slabgeom.tracer import configure_tracer


@pytest.fixture(autouse=True)
def tracer_off():
    """Keep the global tracer disabled between tests."""
    configure_tracer(enabled=False)
    yield
    configure_tracer(enabled=False)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def rectangle_piece():
    """Plain 24 x 18 rectangle; displayed 18 wide and 24 tall."""
    return Piece(name="Rect", shape=ShapeKind.RECTANGLE, width=24, height=18)


@pytest.fixture
def triangle_piece():
    """Right triangle with legs 24 and 18."""
    return Piece(name="Tri", shape=ShapeKind.RIGHT_TRIANGLE, width=24, height=18)


@pytest.fixture
def notched_piece():
    """Rectangle with a single-edge notch on the raw top edge."""
    notch = Cutout(id="n1", kind=CutoutKind.RECTANGLE, width=4, height=2, center_x=12, center_y=1, is_notch=True)
    return Piece(name="Notched", width=24, height=18, cutouts=[notch])


@pytest.fixture
def default_config():
    """Create default configuration."""
    from slabgeom.config import GeometryConfig
    return GeometryConfig()
