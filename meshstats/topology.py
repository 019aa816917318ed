"""Triangle, vertex and submesh counts.

Counting only looks at buffer lengths. `check_structure` is the one place
that inspects index values, so the engine can reject a malformed submesh
before any of the other stages index into it.
"""

from dataclasses import dataclass

from meshstats.errors import StructuralError
from meshstats.scene import Scene, Submesh


@dataclass(frozen=True)
class TopologyCounts:
    """Triangle / vertex / submesh totals."""
    triangles: int = 0
    vertices: int = 0
    meshes: int = 0

    def __add__(self, other: "TopologyCounts") -> "TopologyCounts":
        return TopologyCounts(
            triangles=self.triangles + other.triangles,
            vertices=self.vertices + other.vertices,
            meshes=self.meshes + other.meshes,
        )


def check_structure(submesh: Submesh, index: int = None, check_range: bool = True) -> None:
    """Raise StructuralError if the submesh cannot be split into whole triangles.

    Args:
        submesh: Submesh to check
        index: Position of the submesh in its scene, for the error message
        check_range: Also verify every index points at an existing vertex.
            The length checks alone never touch the buffers.
    """
    n_vertices = submesh.vertex_count
    if submesh.is_indexed:
        n_indices = len(submesh.indices)
        if n_indices % 3 != 0:
            raise StructuralError(
                f"index buffer length {n_indices} is not a multiple of 3", index
            )
        if check_range and n_indices:
            lo = int(submesh.indices.min())
            hi = int(submesh.indices.max())
            if lo < 0 or hi >= n_vertices:
                raise StructuralError(
                    f"index buffer references vertex {lo if lo < 0 else hi} "
                    f"outside 0..{n_vertices - 1}", index
                )
    elif n_vertices % 3 != 0:
        raise StructuralError(
            f"triangle soup has {n_vertices} vertices, not a multiple of 3", index
        )


def submesh_topology(submesh: Submesh) -> TopologyCounts:
    """Counts for one submesh (assumes check_structure passed)."""
    if submesh.is_indexed:
        triangles = len(submesh.indices) // 3
    else:
        triangles = submesh.vertex_count // 3
    return TopologyCounts(triangles=triangles, vertices=submesh.vertex_count, meshes=1)


def count_topology(scene: Scene) -> TopologyCounts:
    """Total triangle, vertex and submesh counts for a scene.

    Raises:
        StructuralError: if any submesh has a malformed index buffer or soup
    """
    total = TopologyCounts()
    for i, submesh in enumerate(scene):
        check_structure(submesh, i, check_range=False)
        total = total + submesh_topology(submesh)
    return total
