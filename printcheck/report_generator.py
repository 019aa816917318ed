"""Consolidated print preparation report output.

Generates human-readable text reports from model statistics and readiness
results.
"""

import os
from datetime import datetime
from typing import List

from meshstats.pricing import format_price
from meshstats.stats import ModelStats
from printcheck.readiness import ReadinessResult


class ReportGenerator:
    """Generates print preparation reports."""

    def __init__(self, config: dict):
        self.config = config
        self.unit = config["units"]["scene_unit"]

    def stats_lines(self, stats: ModelStats) -> List[str]:
        """Report lines describing the mesh statistics."""
        u = self.unit
        d = stats.dimensions
        lines = []
        lines.append("-" * 70)
        lines.append("MESH STATISTICS")
        lines.append("-" * 70)
        lines.append(f"  Triangles:    {stats.triangle_count:,}")
        lines.append(f"  Vertices:     {stats.vertex_count:,}")
        lines.append(f"  Meshes:       {stats.mesh_count}")
        lines.append(f"  Dimensions:   {d.x:.2f} x {d.y:.2f} x {d.z:.2f} {u}")
        lines.append(f"  Volume:       {stats.volume:.3f} {u}³")
        lines.append(f"  Surface area: {stats.surface_area:.2f} {u}²")
        lines.append(f"  File size:    {stats.file_size:,} bytes")
        lines.append(f"  Watertight:   {'yes' if stats.is_watertight else 'NO'}")
        if stats.boundary_edges or stats.non_manifold_edges:
            lines.append(
                f"  Open edges:   {stats.boundary_edges}, "
                f"non-manifold edges: {stats.non_manifold_edges}"
            )
        for issue in stats.issues:
            where = "" if issue.submesh_index is None else f" (submesh {issue.submesh_index})"
            lines.append(f"  NOTE [{issue.kind}]{where}: {issue.detail}")
        lines.append("")
        return lines

    def readiness_lines(self, result: ReadinessResult) -> List[str]:
        """Report lines describing print readiness."""
        x, y, z = result.scaled_dimensions_mm
        lines = []
        lines.append("-" * 70)
        lines.append("PRINT READINESS")
        lines.append("-" * 70)
        lines.append(f"  Scale:        {result.scale:.2f}x")
        lines.append(f"  Print size:   {x:.1f} x {y:.1f} x {z:.1f} mm")
        status = "fits" if result.fits_bed else "does NOT fit"
        lines.append(f"  Printer:      {result.bed_name} ({status})")
        lines.append(f"  Volume:       {result.scaled_volume_cm3:.1f} cm³")
        if result.cost is not None:
            c = result.cost
            lines.append(
                f"  Est. cost ({c.material}): {format_price(c.total_per_unit)} per unit "
                f"({c.size_tier} tier, material {format_price(c.material_cost)} "
                f"+ fee {format_price(c.base_fee)})"
            )
            if c.total != c.total_per_unit:
                lines.append(f"  Est. total:   {format_price(c.total)}")
        for detail in result.details:
            lines.append(f"  - {detail}")
        lines.append("")
        return lines

    def generate_report(self, stats: ModelStats, readiness: ReadinessResult,
                        filepath: str = None) -> str:
        """Generate the full report text.

        Args:
            stats: Analysed model statistics
            readiness: Readiness result for the same model
            filepath: Optional output file path

        Returns:
            Report text
        """
        lines = []
        lines.append("=" * 70)
        lines.append(f"PRINT PREPARATION REPORT: {readiness.model_name}")
        lines.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        lines.append("=" * 70)
        lines.append("")

        if readiness.passed:
            lines.append("OVERALL STATUS: *** PRINT READY ***")
        elif readiness.needs_repair:
            lines.append("OVERALL STATUS: *** NEEDS REPAIR ***")
        else:
            lines.append("OVERALL STATUS: *** NOT READY ***")
        lines.append("")

        lines.extend(self.stats_lines(stats))
        lines.extend(self.readiness_lines(readiness))

        text = "\n".join(lines)
        if filepath:
            directory = os.path.dirname(filepath)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(filepath, "w", encoding="utf-8") as f:
                f.write(text)
        return text
