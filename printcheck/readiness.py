"""Print readiness checks on analysed model statistics.

Decides whether a model needs repair, whether it fits the selected printer's
build volume at a given scale, and what it would cost to print.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from meshstats.config import get_bed
from meshstats.pricing import PrintCostEstimate, estimate_print_cost
from meshstats.stats import ModelStats


@dataclass
class ReadinessResult:
    """Result of print readiness checks for one model."""
    model_name: str
    scale: float
    bed_name: str
    scaled_dimensions_mm: tuple  # (x, y, z)
    scaled_volume_cm3: float
    fits_bed: bool
    needs_repair: bool
    cost: Optional[PrintCostEstimate]
    passed: bool
    details: List[str]


class PrintReadinessChecker:
    """Checks ModelStats against print bed and repair requirements."""

    def __init__(self, config: dict):
        self.config = config
        self.print_cfg = config["print"]
        self.mm_per_unit = config["derived"]["mm_per_unit"]
        self.cm3_per_unit3 = config["derived"]["cm3_per_unit3"]

    def scaled_dimensions(self, stats: ModelStats, scale: float = 1.0) -> Tuple[float, float, float]:
        """Model dimensions in mm after scaling."""
        # Scales the 2-place presentation dimensions, as the scale preview shows
        # them, so the bed-fit error grows with `scale`
        return tuple(d * scale * self.mm_per_unit for d in stats.dimensions)

    def scaled_volume(self, stats: ModelStats, scale: float = 1.0) -> float:
        """Model volume in cm^3 after scaling."""
        return stats.volume * scale ** 3 * self.cm3_per_unit3

    def check(self, stats: ModelStats, model_name: str = "model", scale: float = 1.0,
              bed: str = None, material: str = None, quantity: int = 1) -> ReadinessResult:
        """Run all readiness checks.

        Args:
            stats: Analysed model statistics
            model_name: Name used in details and reports
            scale: Uniform print scale factor
            bed: Bed preset key (default: print.default_bed)
            material: Material key for the cost estimate (default: print.default_material)
            quantity: Number of units for the cost estimate

        Returns:
            ReadinessResult
        """
        if scale <= 0:
            raise ValueError(f"scale must be positive, got {scale}")
        if bed is None:
            bed = self.print_cfg["default_bed"]
        if material is None:
            material = self.print_cfg["default_material"]
        bed_cfg = get_bed(self.config, bed)

        details = []

        if not stats.has_geometry:
            details.append("Model has no geometry")

        needs_repair = stats.needs_repair
        if needs_repair:
            if stats.boundary_edges or stats.non_manifold_edges:
                details.append(
                    f"Mesh is NOT watertight: {stats.boundary_edges} open edges, "
                    f"{stats.non_manifold_edges} non-manifold edges; repair recommended"
                )
            else:
                details.append("Mesh watertightness could not be verified; repair recommended")
        if stats.skipped_submeshes:
            details.append(
                f"Skipped malformed submeshes: {', '.join(str(i) for i in stats.skipped_submeshes)}"
            )
        if stats.degenerate_triangles:
            details.append(f"Found {stats.degenerate_triangles} degenerate (zero-area) triangles")

        dims = self.scaled_dimensions(stats, scale)
        limits = (bed_cfg["x"], bed_cfg["y"], bed_cfg["z"])
        fits = all(dims[i] <= limits[i] for i in range(3))
        if not fits:
            details.append(
                f"Too large for {bed_cfg['name']}: {dims[0]:.1f}x{dims[1]:.1f}x{dims[2]:.1f}mm "
                f"> {limits[0]}x{limits[1]}x{limits[2]}mm"
            )

        volume_cm3 = self.scaled_volume(stats, scale)
        cost = None
        if volume_cm3 > 0:
            cost = estimate_print_cost(volume_cm3, material, self.config, quantity)

        passed = stats.has_geometry and not needs_repair and fits
        if passed:
            details.append("All print readiness checks passed")

        return ReadinessResult(
            model_name=model_name,
            scale=scale,
            bed_name=bed_cfg["name"],
            scaled_dimensions_mm=dims,
            scaled_volume_cm3=volume_cm3,
            fits_bed=fits,
            needs_repair=needs_repair,
            cost=cost,
            passed=passed,
            details=details,
        )

