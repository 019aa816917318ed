"""Mesh analysis engine: Scene -> ModelStats.

Each submesh is visited once (`analyze_submesh`), producing a SubmeshReport
with its counts, bounds, volume/area and edge report. Reports are combined
with an associative reduction, so the per-submesh map can run on any
`concurrent.futures` executor and give the same result as the serial path.
"""

import logging
from dataclasses import dataclass
from functools import reduce
from typing import Optional, Tuple

from meshstats import errors
from meshstats.bounds import BoundingBox, merge_bounds, submesh_bounds, world_vertices
from meshstats.config import load_config
from meshstats.errors import AnalysisIssue, EmptyInputError, StructuralError
from meshstats.manifold import EdgeReport, check_submesh
from meshstats.scene import Scene, Submesh
from meshstats.stats import ModelStats, assemble_stats
from meshstats.topology import TopologyCounts, check_structure, submesh_topology
from meshstats.volumetric import VolumeArea, submesh_volume_area

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmeshReport:
    """Partial results for one or more submeshes."""
    topology: TopologyCounts = TopologyCounts()
    bounds: Optional[BoundingBox] = None
    volume_area: VolumeArea = VolumeArea()
    edges: EdgeReport = EdgeReport()
    skipped: Tuple[int, ...] = ()
    issues: Tuple[AnalysisIssue, ...] = ()

    def combine(self, other: "SubmeshReport") -> "SubmeshReport":
        return SubmeshReport(
            topology=self.topology + other.topology,
            bounds=merge_bounds(self.bounds, other.bounds),
            volume_area=self.volume_area + other.volume_area,
            edges=self.edges.combine(other.edges),
            skipped=self.skipped + other.skipped,
            issues=self.issues + other.issues,
        )


class MeshAnalyzer:
    """Computes print-readiness statistics for decoded scenes."""

    def __init__(self, config: dict = None):
        if config is None:
            config = load_config()
        self.config = config
        analysis = config["analysis"]
        self.structural_policy = analysis["structural_policy"]
        self.empty_policy = analysis["empty_policy"]
        self.include_soup = analysis["include_soup_geometry"]
        self.eps = float(analysis["degenerate_area_epsilon"])

    def analyze_submesh(self, submesh: Submesh, index: int) -> SubmeshReport:
        """Visit one submesh and compute every stage's partial result.

        Raises:
            StructuralError: if the submesh is malformed and the policy is 'fail'
        """
        try:
            check_structure(submesh, index)
        except StructuralError as e:
            if self.structural_policy == "fail":
                raise
            logger.warning("Skipping %s", e)
            # Still counted as a submesh, contributes nothing else
            return SubmeshReport(
                topology=TopologyCounts(meshes=1),
                skipped=(index,),
                issues=(AnalysisIssue(errors.STRUCTURAL, str(e), index),),
            )

        points = world_vertices(submesh)
        volume_area = submesh_volume_area(submesh, self.include_soup, self.eps, points)

        issues = ()
        if volume_area.degenerate_triangles:
            issues = (AnalysisIssue(
                errors.NUMERIC_DEGENERACY,
                f"{volume_area.degenerate_triangles} degenerate triangles contributed nothing",
                index,
            ),)

        return SubmeshReport(
            topology=submesh_topology(submesh),
            bounds=submesh_bounds(submesh, points),
            volume_area=volume_area,
            edges=check_submesh(submesh),
            issues=issues,
        )

    def analyze(self, scene: Scene, executor=None) -> ModelStats:
        """Analyse a scene.

        Args:
            scene: Decoded scene (never modified)
            executor: Optional concurrent.futures executor to visit
                submeshes in parallel

        Returns:
            A new ModelStats record

        Raises:
            StructuralError: malformed submesh under the 'fail' policy
            EmptyInputError: empty scene under the 'raise' policy
        """
        if scene.is_empty:
            return self._empty_stats(scene)

        indices = range(len(scene))
        if executor is None:
            reports = map(self.analyze_submesh, scene.submeshes, indices)
        else:
            reports = executor.map(self.analyze_submesh, scene.submeshes, indices)
        total = reduce(SubmeshReport.combine, reports, SubmeshReport())

        stats = assemble_stats(
            topology=total.topology,
            bbox=total.bounds,
            volume_area=total.volume_area,
            edges=total.edges,
            file_size=scene.file_size,
            skipped_submeshes=total.skipped,
            issues=total.issues,
        )
        logger.debug(
            "Analysed %d submeshes: %d triangles, volume=%s, watertight=%s",
            stats.mesh_count, stats.triangle_count, stats.volume, stats.is_watertight,
        )
        return stats

    def _empty_stats(self, scene: Scene) -> ModelStats:
        detail = "scene has no submeshes" if not len(scene) else "scene has no vertices"
        if self.empty_policy == "raise":
            raise EmptyInputError(detail)
        logger.info("No geometry to analyse: %s", detail)
        return ModelStats(
            mesh_count=len(scene),
            file_size=scene.file_size,
            issues=(AnalysisIssue(errors.EMPTY_INPUT, detail),),
        )


def analyze_scene(scene: Scene, config: dict = None, executor=None) -> ModelStats:
    """Analyse a scene with the given (or default) configuration."""
    return MeshAnalyzer(config).analyze(scene, executor=executor)
