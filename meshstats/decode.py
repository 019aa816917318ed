"""Adapters from trimesh's decoded objects to the immutable Scene type.

trimesh does the actual file decoding (GLB, OBJ, STL, ...). These helpers
only copy its buffers and node transforms into Scene/Submesh values.
"""

import logging
import os

import numpy as np
import trimesh

from meshstats.scene import Scene, Submesh

logger = logging.getLogger(__name__)


def submesh_from_trimesh(mesh: trimesh.Trimesh, transform: np.ndarray = None,
                         name: str = "") -> Submesh:
    """Wrap one trimesh.Trimesh (always indexed) as a Submesh."""
    if transform is None:
        transform = np.eye(4)
    return Submesh(
        vertices=np.asarray(mesh.vertices, dtype=np.float64),
        indices=np.asarray(mesh.faces, dtype=np.int64).ravel(),
        transform=transform,
        name=name,
    )


def scene_from_trimesh(obj, file_size: int = 0) -> Scene:
    """Convert a trimesh.Scene or trimesh.Trimesh into a Scene.

    Each scene-graph node that instances a triangle mesh becomes one Submesh
    carrying that node's world transform. Non-mesh geometry (paths, point
    clouds) is ignored.
    """
    if isinstance(obj, trimesh.Trimesh):
        return Scene((submesh_from_trimesh(obj, name=obj.metadata.get("name", "")),), file_size)

    if not isinstance(obj, trimesh.Scene):
        raise TypeError(f"Expected trimesh.Scene or trimesh.Trimesh, got {type(obj).__name__}")

    submeshes = []
    for node in obj.graph.nodes_geometry:
        transform, geometry_name = obj.graph[node]
        geometry = obj.geometry.get(geometry_name)
        if not isinstance(geometry, trimesh.Trimesh):
            logger.debug("Ignoring non-mesh node %s (%s)", node, type(geometry).__name__)
            continue
        submeshes.append(submesh_from_trimesh(geometry, transform, name=str(node)))
    return Scene(tuple(submeshes), file_size)


def load_scene(path: str) -> Scene:
    """Decode a mesh file with trimesh and convert it to a Scene.

    Buffers are loaded unprocessed so vertex and triangle counts match the file.
    """
    loaded = trimesh.load(path, force="scene", process=False)
    return scene_from_trimesh(loaded, file_size=os.path.getsize(path))
