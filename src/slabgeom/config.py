"""
Configuration management for slabgeom.

Loads YAML configuration with defaults for piece parsing, hit testing,
rendering and tracing. Geometric tolerances of the outline engine are
fixed constants of their modules, not configuration.
"""

import os
from dataclasses import asdict, dataclass, field, fields

import yaml


@dataclass
class PieceDefaultsConfig:
    """Fallback dimensions for pieces whose size text cannot be parsed."""
    default_width: float = 24.0
    default_height: float = 18.0


@dataclass
class HitTestConfig:
    """Configuration for point queries against an outline."""
    tolerance: float = 0.5  # inches
    curve_samples: int = 24


@dataclass
class RenderConfig:
    """Configuration for SVG export."""
    scale: float = 20.0  # px per inch
    margin: float = 1.5  # inches
    stroke_width: float = 1.5
    stroke_color: str = "black"
    cutout_color: str = "#1f6feb"
    angle_color: str = "#d29922"
    show_corner_labels: bool = True
    show_segment_labels: bool = False
    show_notch_labels: bool = True
    label_font_size: float = 10.0


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class GeometryConfig:
    """Complete configuration."""
    piece: PieceDefaultsConfig = field(default_factory=PieceDefaultsConfig)
    hit_test: HitTestConfig = field(default_factory=HitTestConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values.
    """
    config = GeometryConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    return config


def _merge_config(config, yaml_data):
    """Merge YAML sections into the config dataclasses, ignoring unknown keys."""
    for section in fields(config):
        values = yaml_data.get(section.name)
        if not isinstance(values, dict):
            continue
        target = getattr(config, section.name)
        for key, value in values.items():
            if hasattr(target, key):
                setattr(target, key, value)
    return config


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    yaml_data = asdict(GeometryConfig())
    yaml_data["tracing"].pop("file_path", None)

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)
