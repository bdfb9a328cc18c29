"""
Command-line interface for slabgeom.

Provides commands for rendering and validating piece descriptions and for
working with inch measurements.
"""

import argparse
import os
import sys

from slabgeom.config import load_config, save_default_config
from slabgeom.tracer import configure_tracer, get_tracer


def _add_trace_arguments(parser):
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable runtime tracing",
    )
    parser.add_argument(
        "--trace-level",
        default=None,
        choices=["ERROR", "WARN", "INFO", "DEBUG"],
        help="Trace log level",
    )
    parser.add_argument(
        "--trace-file",
        default=None,
        help="Path to write trace logs",
    )
    parser.add_argument(
        "--trace-json",
        action="store_true",
        help="Enable JSON trace output",
    )


def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="slabgeom",
        description="slabgeom: Compute slab piece outlines, boundary segments and validation reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Render command
    render_parser = subparsers.add_parser("render", help="Compute geometry and write SVG, JSON and report")
    render_parser.add_argument(
        "piece",
        help="Piece description JSON file",
    )
    render_parser.add_argument(
        "--out", "-o",
        required=True,
        help="Output directory",
    )
    render_parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    _add_trace_arguments(render_parser)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a piece description")
    validate_parser.add_argument(
        "piece",
        help="Piece description JSON file",
    )
    validate_parser.add_argument(
        "--out", "-o",
        default=None,
        help="Directory for validation_report.json and validation_summary.txt",
    )
    validate_parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    _add_trace_arguments(validate_parser)

    # Hit command
    hit_parser = subparsers.add_parser("hit", help="Find the boundary segment nearest a display point")
    hit_parser.add_argument(
        "piece",
        help="Piece description JSON file",
    )
    hit_parser.add_argument("x", type=float, help="Display x in inches")
    hit_parser.add_argument("y", type=float, help="Display y in inches")
    hit_parser.add_argument(
        "--tolerance",
        type=float,
        default=None,
        help="Search distance in inches (default from config)",
    )
    hit_parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    _add_trace_arguments(hit_parser)

    # Measure command
    measure_parser = subparsers.add_parser("measure", help="Parse inch measurements and format to 1/16")
    measure_parser.add_argument(
        "values",
        nargs="+",
        help='Measurements such as "12.5", "12 1/2" or "3/8"',
    )

    # Init config command
    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument(
        "--out", "-o",
        default="slabgeom_config.yaml",
        help="Output path for config file",
    )

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "render":
        return handle_render(args)
    elif args.command == "validate":
        return handle_validate(args)
    elif args.command == "hit":
        return handle_hit(args)
    elif args.command == "measure":
        return handle_measure(args)
    elif args.command == "init-config":
        return handle_init_config(args)

    return 0


def _configure_tracing(args, config):
    configure_tracer(
        enabled=args.trace or config.tracing.enabled,
        level=args.trace_level or config.tracing.level,
        file_path=args.trace_file or config.tracing.file_path,
        json_output=args.trace_json or config.tracing.json_output,
    )


def handle_render(args):
    """Handle the render command."""
    config = load_config(args.config)
    _configure_tracing(args, config)

    tracer = get_tracer()

    try:
        from slabgeom.export.svg_emit import emit_piece_svg
        from slabgeom.io.save_artifacts import ensure_dir, load_piece, save_json, save_svg
        from slabgeom.pipeline import build_geometry
        from slabgeom.validate.report import generate_report
        from slabgeom.validate.rules import validate_piece

        with tracer.span("cli_render", module="cli"):
            piece = load_piece(args.piece, config.piece)
            geometry = build_geometry(piece)
            report = validate_piece(piece)

            ensure_dir(args.out)
            save_svg(emit_piece_svg(geometry, config.render), os.path.join(args.out, "outline.svg"))
            save_json(geometry, os.path.join(args.out, "geometry.json"))
            generate_report(report, args.out, piece_name=piece.name)

        print(f"\nRendered piece: {piece.name}")
        print(f"  Corners: {geometry.corner_count}")
        print(f"  Boundary segments: {len(geometry.boundary_segments)}")
        print(f"  Angle cuts applied: {len(geometry.angle_segments)}")
        print(f"  Validation errors: {report.error_count}")
        print(f"  Validation warnings: {report.warning_count}")
        print(f"\nOutputs saved to: {args.out}/")
        print("  - outline.svg")
        print("  - geometry.json")
        print("  - validation_report.json")

        if report.has_errors:
            print("\n[!] Validation errors detected. Review validation_report.json")
            return 1

        return 0

    except Exception as e:
        tracer.event(f"Render failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1


def handle_validate(args):
    """Handle the validate command."""
    config = load_config(args.config)
    _configure_tracing(args, config)

    tracer = get_tracer()

    try:
        from slabgeom.io.save_artifacts import load_piece
        from slabgeom.validate.report import format_check_result, generate_report
        from slabgeom.validate.rules import validate_piece

        with tracer.span("cli_validate", module="cli"):
            piece = load_piece(args.piece, config.piece)
            report = validate_piece(piece)
            if args.out:
                generate_report(report, args.out, piece_name=piece.name)

        for check in report.checks:
            print(format_check_result(check))
        print(f"\n{report.error_count} errors, {report.warning_count} warnings")

        return 1 if report.has_errors else 0

    except Exception as e:
        tracer.event(f"Validation failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1


def handle_hit(args):
    """Handle the hit command."""
    config = load_config(args.config)
    _configure_tracing(args, config)

    tracer = get_tracer()
    tolerance = args.tolerance if args.tolerance is not None else config.hit_test.tolerance
    samples = config.hit_test.curve_samples
    point = (args.x, args.y)

    try:
        from slabgeom.io.save_artifacts import load_piece
        from slabgeom.outline.hit_test import nearest_angle_segment, nearest_boundary_segment, point_in_outline
        from slabgeom.pipeline import build_geometry

        with tracer.span("cli_hit", module="cli", point=point, tolerance=tolerance):
            piece = load_piece(args.piece, config.piece)
            geometry = build_geometry(piece)
            segment = nearest_boundary_segment(geometry, point, tolerance, samples)
            angle = nearest_angle_segment(geometry, point, tolerance)
            inside = point_in_outline(point, geometry.outline, samples)

        print(f"Point ({args.x:g}, {args.y:g}) is {'inside' if inside else 'outside'} the piece")
        if segment is not None:
            print(f"  Boundary segment: {segment.edge.value}{segment.index} ({segment.length:.3f} in)")
        if angle is not None:
            print(f"  Angle cut: {angle.id}")
        if segment is None and angle is None:
            print(f"  No segment within {tolerance:g} in")
        return 0

    except Exception as e:
        tracer.event(f"Hit test failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1


def handle_measure(args):
    """Handle the measure command."""
    from slabgeom.measurement import format_inches, parse_inches

    status = 0
    for raw in args.values:
        value = parse_inches(raw)
        if value is None:
            print(f"{raw}: not a measurement", file=sys.stderr)
            status = 1
            continue
        print(f"{raw} = {value:g} in ({format_inches(value)})")
    return status


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
