"""Enclosed volume and surface area via per-triangle divergence sums.

Each triangle (v0, v1, v2) contributes the signed volume of the tetrahedron
it forms with the origin, v0 . (v1 x v2) / 6, and its area
|(v1 - v0) x (v2 - v0)| / 2. Signed volumes are summed per submesh and the
absolute value of each submesh's sum is added to the total, so a closed,
consistently wound submesh gives its exact volume whatever its winding
direction. Self-intersecting or inconsistently wound submeshes get an
approximate volume; this is a known limitation, not something corrected here.
"""

import logging
import math
from dataclasses import dataclass

import numpy as np

from meshstats.bounds import world_vertices
from meshstats.scene import Scene, Submesh

logger = logging.getLogger(__name__)

DEFAULT_DEGENERATE_EPSILON = 1e-12
_FLOAT_MAX = np.finfo(np.float64).max


@dataclass(frozen=True)
class VolumeArea:
    """Volume / area totals plus the number of triangles that were dropped."""
    volume: float = 0.0
    surface_area: float = 0.0
    degenerate_triangles: int = 0

    def __add__(self, other: "VolumeArea") -> "VolumeArea":
        return VolumeArea(
            volume=finite_sum((self.volume, other.volume)),
            surface_area=finite_sum((self.surface_area, other.surface_area)),
            degenerate_triangles=self.degenerate_triangles + other.degenerate_triangles,
        )


def world_triangles(submesh: Submesh, points: np.ndarray = None) -> np.ndarray:
    """(T, 3, 3) world-space triangle corners for a submesh."""
    if points is None:
        points = world_vertices(submesh)
    if submesh.is_indexed:
        return points[submesh.indices.reshape(-1, 3)]
    return points.reshape(-1, 3, 3)


def triangle_contributions(triangles: np.ndarray, eps: float = DEFAULT_DEGENERATE_EPSILON):
    """Per-triangle signed volumes and areas.

    Triangles with non-finite corners or doubled area at or below `eps`
    contribute zero to both.

    Args:
        triangles: (T, 3, 3) array of triangle corners
        eps: Doubled-area threshold below which a triangle is degenerate

    Returns:
        (signed_volumes, areas, degenerate_mask), each of length T
    """
    tris = np.asarray(triangles, dtype=np.float64)
    v0 = tris[:, 0, :]
    v1 = tris[:, 1, :]
    v2 = tris[:, 2, :]

    finite = np.isfinite(tris).all(axis=(1, 2))
    # Zero out non-finite rows so the cross products below stay finite
    v0 = np.where(finite[:, None], v0, 0.0)
    v1 = np.where(finite[:, None], v1, 0.0)
    v2 = np.where(finite[:, None], v2, 0.0)

    with np.errstate(over="ignore", invalid="ignore"):
        cross = np.cross(v1 - v0, v2 - v0)
        area2 = np.linalg.norm(cross, axis=1)
        signed = np.einsum("ij,ij->i", v0, np.cross(v1, v2)) / 6.0
    area = area2 / 2.0

    usable = finite & np.isfinite(area2) & np.isfinite(signed) & (area2 > eps)
    return (
        np.where(usable, signed, 0.0),
        np.where(usable, area, 0.0),
        ~usable,
    )


def submesh_volume_area(submesh: Submesh, include_soup: bool = False,
                        eps: float = DEFAULT_DEGENERATE_EPSILON,
                        points: np.ndarray = None) -> VolumeArea:
    """Absolute enclosed volume and surface area of one submesh.

    Args:
        submesh: Submesh to measure (indices assumed valid)
        include_soup: Treat an un-indexed submesh as a triangle list instead
            of skipping it
        eps: Degenerate-triangle threshold on doubled area
        points: Already transformed vertices, to avoid transforming twice

    Returns:
        VolumeArea for this submesh
    """
    if not submesh.is_indexed and not include_soup:
        return VolumeArea()

    triangles = world_triangles(submesh, points)
    if len(triangles) == 0:
        return VolumeArea()

    signed, area, degenerate = triangle_contributions(triangles, eps)
    n_degenerate = int(np.count_nonzero(degenerate))
    if n_degenerate:
        logger.debug("%s: %d degenerate triangles ignored", submesh.name or "submesh", n_degenerate)

    # fsum: signed terms over large meshes cancel heavily
    volume = abs(finite_sum(signed))
    surface_area = finite_sum(area)
    return VolumeArea(volume=volume, surface_area=surface_area,
                      degenerate_triangles=n_degenerate)


def compute_volume_area(scene: Scene, include_soup: bool = False,
                        eps: float = DEFAULT_DEGENERATE_EPSILON) -> VolumeArea:
    """Total volume and surface area over all submeshes of a scene."""
    total = VolumeArea()
    for submesh in scene:
        total = total + submesh_volume_area(submesh, include_soup, eps)
    return total


def finite_sum(values) -> float:
    """Exactly rounded float sum, clamped to the float range on overflow."""
    values = np.asarray(values, dtype=np.float64)
    try:
        return float(math.fsum(values.tolist()))
    except OverflowError:
        logger.warning("Sum of %d terms overflows float64; clamping to the largest finite value",
                       len(values))
        with np.errstate(over="ignore", invalid="ignore"):
            total = np.sum(values)
        return float(np.nan_to_num(total, nan=0.0, posinf=_FLOAT_MAX, neginf=-_FLOAT_MAX))
