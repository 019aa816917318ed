"""CLI entry point for mesh print-readiness analysis.

Usage:
    python main.py model.glb                           # Stats + readiness summary
    python main.py model.glb --scale 1.5 --bed bambu-a1-mini
    python main.py model.glb --material PETG --quantity 4
    python main.py model.glb --report output/report.txt  # Also write a text report
    python main.py model.glb --strict                  # Fail on malformed submeshes
    python main.py --config custom.yaml model.obj      # Use custom config
"""

import argparse
import logging
import os
import sys

from meshstats.config import load_config, ConfigError
from meshstats.decode import load_scene
from meshstats.engine import MeshAnalyzer
from meshstats.errors import MeshAnalysisError
from meshstats.pricing import format_price
from printcheck.readiness import PrintReadinessChecker
from printcheck.report_generator import ReportGenerator


def build_parser():
    parser = argparse.ArgumentParser(
        description="Mesh statistics and 3D print readiness analysis"
    )
    parser.add_argument("model", help="Path to a mesh file (GLB, glTF, OBJ, STL, ...)")
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to YAML configuration file (default: config/default.yaml)"
    )
    parser.add_argument(
        "--scale", type=float, default=1.0,
        help="Uniform print scale factor (default: 1.0)"
    )
    parser.add_argument(
        "--bed", type=str, default=None,
        help="Print bed preset (default: print.default_bed from config)"
    )
    parser.add_argument(
        "--material", type=str, default=None,
        help="Material for the cost estimate (default: print.default_material)"
    )
    parser.add_argument(
        "--quantity", type=int, default=1,
        help="Number of units for the cost estimate"
    )
    parser.add_argument(
        "--report", type=str, default=None,
        help="Write a text report to this path"
    )
    parser.add_argument(
        "--strict", action="store_true",
        help="Abort on malformed submeshes instead of skipping them"
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Log analysis details"
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Configuration error:\n{e}", file=sys.stderr)
        sys.exit(1)
    if args.strict:
        config["analysis"]["structural_policy"] = "fail"

    print(f"Loading {args.model}...")
    try:
        scene = load_scene(args.model)
    except (OSError, ValueError) as e:
        print(f"Could not load model: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        stats = MeshAnalyzer(config).analyze(scene)
    except MeshAnalysisError as e:
        print(f"Analysis failed: {e}", file=sys.stderr)
        sys.exit(1)

    model_name = os.path.splitext(os.path.basename(args.model))[0]
    try:
        readiness = PrintReadinessChecker(config).check(
            stats, model_name=model_name, scale=args.scale,
            bed=args.bed, material=args.material, quantity=args.quantity,
        )
    except ValueError as e:
        print(f"Invalid print options: {e}", file=sys.stderr)
        sys.exit(1)

    print_summary(config, stats, readiness)

    if args.report:
        ReportGenerator(config).generate_report(stats, readiness, args.report)
        print(f"\nReport saved to: {args.report}")

    return 0 if readiness.passed else 2


def print_summary(config, stats, readiness):
    unit = config["units"]["scene_unit"]
    d = stats.dimensions
    print(f"  Triangles:  {stats.triangle_count:,}")
    print(f"  Vertices:   {stats.vertex_count:,}")
    print(f"  Meshes:     {stats.mesh_count}")
    print(f"  Dimensions: {d.x:.2f} x {d.y:.2f} x {d.z:.2f} {unit}")
    print(f"  Volume:     {stats.volume:.3f} {unit}³")
    print(f"  Surface:    {stats.surface_area:.2f} {unit}²")
    print(f"  File size:  {stats.file_size:,} bytes")

    x, y, z = readiness.scaled_dimensions_mm
    print(f"\nPrint size at {readiness.scale:.2f}x: {x:.1f} x {y:.1f} x {z:.1f} mm "
          f"({'fits' if readiness.fits_bed else 'too large for'} {readiness.bed_name})")
    if readiness.cost is not None:
        print(f"Est. print cost ({readiness.cost.material}): "
              f"{format_price(readiness.cost.total_per_unit)} per unit")

    if readiness.passed:
        print("\n*** PRINT READY ***")
    elif readiness.needs_repair:
        print("\n*** NEEDS REPAIR: mesh is not watertight ***")
    else:
        print("\n*** NOT READY ***")
    for detail in readiness.details:
        print(f"  - {detail}")


if __name__ == "__main__":
    sys.exit(main())
