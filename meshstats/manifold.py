"""Watertightness from edge incidence counts.

A closed 2-manifold surface uses every undirected edge in exactly two
triangles. An edge seen once lies on a hole or open rim; an edge seen three
or more times is non-manifold. Only indexed submeshes can be checked: a
triangle soup has no shared vertices, so its verdict is unknown.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import numpy as np

from meshstats.scene import Scene, Submesh


@dataclass(frozen=True)
class EdgeReport:
    """Edge incidence summary for one submesh or a whole scene.

    Attributes:
        watertight: True/False for checked geometry, None if nothing
            could be checked (triangle soups only)
        boundary_edges: Edges used by exactly one triangle
        non_manifold_edges: Edges used by three or more triangles
    """
    watertight: Optional[bool] = None
    boundary_edges: int = 0
    non_manifold_edges: int = 0

    def combine(self, other: "EdgeReport") -> "EdgeReport":
        """AND the verdicts, ignoring unknowns, and sum the edge counts."""
        if self.watertight is None:
            verdict = other.watertight
        elif other.watertight is None:
            verdict = self.watertight
        else:
            verdict = self.watertight and other.watertight
        return EdgeReport(
            watertight=verdict,
            boundary_edges=self.boundary_edges + other.boundary_edges,
            non_manifold_edges=self.non_manifold_edges + other.non_manifold_edges,
        )


def edge_incidence(indices: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Unique undirected edges of a triangle index buffer and their use counts.

    Args:
        indices: Flat or (T, 3) vertex index buffer

    Returns:
        (edges, counts): (E, 2) edges with the smaller index first, and (E,)
        number of triangles using each edge
    """
    faces = np.asarray(indices, dtype=np.int64).reshape(-1, 3)
    if len(faces) == 0:
        return np.empty((0, 2), dtype=np.int64), np.empty(0, dtype=np.int64)

    # (a, b), (b, c), (c, a) for every triangle
    edges = np.vstack([faces[:, [0, 1]], faces[:, [1, 2]], faces[:, [2, 0]]])
    edges = np.sort(edges, axis=1)
    return np.unique(edges, axis=0, return_counts=True)


def check_submesh(submesh: Submesh) -> EdgeReport:
    """Edge report for one submesh (verdict None for triangle soups)."""
    if not submesh.is_indexed:
        return EdgeReport()

    _, counts = edge_incidence(submesh.indices)
    if len(counts) == 0:
        # No triangles, nothing to verify
        return EdgeReport()
    boundary = int(np.count_nonzero(counts == 1))
    non_manifold = int(np.count_nonzero(counts >= 3))
    return EdgeReport(
        watertight=boundary == 0 and non_manifold == 0,
        boundary_edges=boundary,
        non_manifold_edges=non_manifold,
    )


def combine_reports(reports: Iterable[EdgeReport]) -> EdgeReport:
    total = EdgeReport()
    for report in reports:
        total = total.combine(report)
    return total


def is_watertight(scene: Scene) -> bool:
    """True iff at least one submesh is indexed and every indexed submesh is closed."""
    return combine_reports(check_submesh(s) for s in scene).watertight is True
