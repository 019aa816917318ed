"""World-space axis-aligned bounding boxes."""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from trimesh.transformations import transform_points

from meshstats.scene import Scene, Submesh


Vec3 = Tuple[float, float, float]


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box given by its min and max corners."""
    min_corner: Vec3
    max_corner: Vec3

    @classmethod
    def empty(cls) -> "BoundingBox":
        """Zero-size box at the origin, used when there is no geometry."""
        return cls((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))

    @property
    def size(self) -> Vec3:
        return tuple(hi - lo for lo, hi in zip(self.min_corner, self.max_corner))

    def merge(self, other: "BoundingBox") -> "BoundingBox":
        return BoundingBox(
            tuple(min(a, b) for a, b in zip(self.min_corner, other.min_corner)),
            tuple(max(a, b) for a, b in zip(self.max_corner, other.max_corner)),
        )


def merge_bounds(a: Optional[BoundingBox], b: Optional[BoundingBox]) -> Optional[BoundingBox]:
    """Combine two optional boxes; None means 'no vertices seen yet'."""
    if a is None:
        return b
    if b is None:
        return a
    return a.merge(b)


def world_vertices(submesh: Submesh) -> np.ndarray:
    """Submesh vertices transformed to world space as a new float64 array."""
    return np.asarray(transform_points(submesh.vertices, submesh.transform), dtype=np.float64)


def submesh_bounds(submesh: Submesh, points: np.ndarray = None) -> Optional[BoundingBox]:
    """World-space bounds of one submesh, or None if it has no finite vertices.

    Args:
        submesh: Submesh to measure
        points: Already transformed vertices, to avoid transforming twice
    """
    if points is None:
        points = world_vertices(submesh)
    points = points[np.isfinite(points).all(axis=1)]
    if len(points) == 0:
        return None
    lo = points.min(axis=0)
    hi = points.max(axis=0)
    return BoundingBox(tuple(float(v) for v in lo), tuple(float(v) for v in hi))


def compute_bounds(scene: Scene) -> BoundingBox:
    """World-space bounding box of the whole scene (zero box if empty)."""
    box = None
    for submesh in scene:
        box = merge_bounds(box, submesh_bounds(submesh))
    return box if box is not None else BoundingBox.empty()
