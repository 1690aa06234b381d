"""
Command-line crease pattern generation.

Usage:
    boxpleat <input.json> [options]

Options:
    -o, --output     Write the pattern JSON here (default: stdout)
    --pitch          Grid pitch (default: from config, else 20)
    --plot           Render the pattern (.svg, .png, .pdf)
    --overview       Render decomposition and pattern side by side
    --config         Configuration JSON (default: <input>.pleat_config.json)
    --validate-only  Check the outline and stop

Example:
    boxpleat footprint.json -o pattern.json --plot pattern.svg
"""

import argparse
import json
import logging
from pathlib import Path
import sys

from .config import PleatConfig
from .errors import CreasePatternError
from .pipeline import run_pipeline
from .validation import validate_polygon


def load_input(filepath: Path | str) -> tuple[list, dict]:
    """
    Read an outline file.

    Accepts either a bare list of [x, y] points or an object with a "points"
    list and optional settings (e.g. "pitch").

    Returns:
        (points, settings)
    """
    with open(filepath, 'r') as f:
        data = json.load(f)

    if isinstance(data, list):
        return data, {}
    if isinstance(data, dict) and isinstance(data.get("points"), list):
        settings = {k: v for k, v in data.items() if k != "points"}
        return data["points"], settings
    raise ValueError("input must be a list of points or an object with a 'points' list")


def build_config(args, settings: dict) -> PleatConfig:
    """Config file, then input file settings, then command line."""
    if args.config:
        config = PleatConfig.load(args.config)
    else:
        config = PleatConfig.load_for_polygon(args.input)

    if "pitch" in settings:
        config = config.with_pitch(int(settings["pitch"]))
    if args.pitch is not None:
        config = config.with_pitch(args.pitch)

    errors = config.validate()
    if errors:
        raise ValueError("; ".join(errors))
    return config


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog='boxpleat',
        description='Generate a box-pleating crease pattern from a rectilinear outline',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s footprint.json
  %(prog)s footprint.json -o pattern.json --pitch 10
  %(prog)s footprint.json -o pattern.json --plot pattern.svg
  %(prog)s footprint.json -o pattern.json --overview overview.png
  %(prog)s footprint.json --validate-only
        """
    )
    parser.add_argument('input', help='Input outline file (.json)')
    parser.add_argument('-o', '--output', help='Output pattern file (.json)')
    parser.add_argument('--pitch', type=int, default=None,
                        help='Grid pitch (default: from config, else 20)')
    parser.add_argument('--plot', help='Render the pattern to an image (.svg, .png, .pdf)')
    parser.add_argument('--overview',
                        help='Render decomposition and pattern side by side')
    parser.add_argument('--config', help='Configuration file (.json)')
    parser.add_argument('--validate-only', action='store_true',
                        help='Validate the outline and exit')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Show debug output from the pipeline')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    if not Path(args.input).exists():
        print(f"ERROR: Input file not found: {args.input}", file=sys.stderr)
        return 1

    try:
        points, settings = load_input(args.input)
        config = build_config(args, settings)
    except (OSError, ValueError, TypeError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(f"Loaded outline: {args.input} ({len(points)} points, pitch {config.pitch})",
          file=sys.stderr)

    validation = validate_polygon(points, config)
    for warning in validation.warnings:
        print(f"  [{warning.severity}] {warning.category}: {warning.message}", file=sys.stderr)
    if validation.has_errors:
        print(f"ERROR: outline has {validation.error_count} error(s)", file=sys.stderr)
        return 1
    if args.validate_only:
        print("Outline is valid", file=sys.stderr)
        return 0

    try:
        result = run_pipeline(points, config)
    except CreasePatternError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    summary = result.summary()
    print(f"Concave parts: {summary['concave_parts']}, nodes: {summary['nodes']}, "
          f"collisions: {summary['collisions']}", file=sys.stderr)
    print(f"Folds: {summary['mountain_folds']} mountain, {summary['valley_folds']} valley",
          file=sys.stderr)
    width, height = result.pattern.paper_size
    print(f"Paper: {width} x {height}", file=sys.stderr)

    output = json.dumps(result.pattern.to_dict(), indent=2)
    if args.output:
        Path(args.output).write_text(output)
        print(f"Wrote pattern: {args.output}", file=sys.stderr)
    else:
        print(output)

    if args.plot or args.overview:
        # Imported here so matplotlib is only loaded when a plot is requested
        from .preview import save_overview, save_pattern
        if args.plot:
            save_pattern(result.pattern, args.plot, footprint=points)
            print(f"Wrote plot: {args.plot}", file=sys.stderr)
        if args.overview:
            save_overview(result, args.overview)
            print(f"Wrote overview: {args.overview}", file=sys.stderr)

    return 0


if __name__ == '__main__':
    sys.exit(main())
