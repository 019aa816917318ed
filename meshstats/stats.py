"""The ModelStats result record and presentation rounding."""

import math
from dataclasses import dataclass, asdict, field
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Dict, Optional, Tuple

from meshstats.bounds import BoundingBox
from meshstats.errors import AnalysisIssue
from meshstats.manifold import EdgeReport
from meshstats.topology import TopologyCounts
from meshstats.volumetric import VolumeArea

DIMENSION_PLACES = 2
AREA_PLACES = 2
VOLUME_PLACES = 3


def round_half_away(value: float, places: int) -> float:
    """Round to `places` decimals with ties going away from zero.

    Goes through the shortest decimal repr of the float, so 2.675 rounds to
    2.68 rather than the binary-exact 2.67. Non-finite values are returned
    unchanged.
    """
    value = float(value)
    if not math.isfinite(value):
        return value
    d = Decimal(repr(value))
    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        # quantize needs every integer digit plus `places` within the precision
        ctx.prec = max(28, d.adjusted() + places + 2)
        # ROUND_HALF_UP in decimal rounds ties away from zero for negatives too
        rounded = float(d.quantize(quantum, rounding=ROUND_HALF_UP))
    return rounded + 0.0  # normalise -0.0


@dataclass(frozen=True)
class Dimensions:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self):
        return iter((self.x, self.y, self.z))


@dataclass(frozen=True)
class ModelStats:
    """Print-readiness statistics for one analysed scene.

    Lengths are in the scene's own unit; volume and area in its cube and
    square. Created once per analysis and never modified.
    """
    triangle_count: int = 0
    vertex_count: int = 0
    mesh_count: int = 0
    dimensions: Dimensions = Dimensions()
    volume: float = 0.0
    surface_area: float = 0.0
    file_size: int = 0
    is_watertight: bool = False
    bounding_box: BoundingBox = BoundingBox.empty()

    # Diagnostics
    boundary_edges: int = 0
    non_manifold_edges: int = 0
    degenerate_triangles: int = 0
    skipped_submeshes: Tuple[int, ...] = ()
    issues: Tuple[AnalysisIssue, ...] = field(default=())

    @property
    def needs_repair(self) -> bool:
        return not self.is_watertight

    @property
    def has_geometry(self) -> bool:
        return self.vertex_count > 0

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def assemble_stats(topology: TopologyCounts,
                   bbox: Optional[BoundingBox],
                   volume_area: VolumeArea,
                   edges: EdgeReport,
                   file_size: int,
                   skipped_submeshes: Tuple[int, ...] = (),
                   issues: Tuple[AnalysisIssue, ...] = ()) -> ModelStats:
    """Merge the per-stage results into one rounded ModelStats record."""
    if bbox is None:
        bbox = BoundingBox.empty()
    size = bbox.size
    return ModelStats(
        triangle_count=topology.triangles,
        vertex_count=topology.vertices,
        mesh_count=topology.meshes,
        dimensions=Dimensions(*(round_half_away(v, DIMENSION_PLACES) for v in size)),
        volume=round_half_away(volume_area.volume, VOLUME_PLACES),
        surface_area=round_half_away(volume_area.surface_area, AREA_PLACES),
        file_size=int(file_size),
        is_watertight=edges.watertight is True and not skipped_submeshes,
        bounding_box=BoundingBox(
            tuple(round_half_away(v, DIMENSION_PLACES) for v in bbox.min_corner),
            tuple(round_half_away(v, DIMENSION_PLACES) for v in bbox.max_corner),
        ),
        boundary_edges=edges.boundary_edges,
        non_manifold_edges=edges.non_manifold_edges,
        degenerate_triangles=volume_area.degenerate_triangles,
        skipped_submeshes=tuple(skipped_submeshes),
        issues=tuple(issues),
    )
