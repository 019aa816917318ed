"""Immutable scene value types handed to the analysis engine.

A Scene is plain data: an ordered tuple of Submeshes and the byte size of
the file it was decoded from. Buffers are copied into read-only float64 /
int64 numpy arrays on construction so nothing downstream can modify them.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple

import numpy as np

from meshstats.errors import StructuralError


def _readonly(array: np.ndarray) -> np.ndarray:
    array = np.array(array, copy=True)
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class Submesh:
    """One triangle mesh with its local-to-world transform.

    Attributes:
        vertices: (N, 3) vertex positions in local space
        indices: flat triangle index buffer, or None for a triangle soup
        transform: 4x4 affine local-to-world matrix
        name: Optional identifier carried through from the decoder
    """
    vertices: np.ndarray
    indices: Optional[np.ndarray] = None
    transform: np.ndarray = field(default_factory=lambda: np.eye(4))
    name: str = ""

    def __post_init__(self):
        vertices = np.asarray(self.vertices, dtype=np.float64)
        if vertices.size == 0:
            vertices = vertices.reshape(0, 3)
        if vertices.ndim != 2 or vertices.shape[1] != 3:
            raise StructuralError(
                f"vertex buffer must have shape (N, 3), got {vertices.shape}"
            )
        object.__setattr__(self, "vertices", _readonly(vertices))

        if self.indices is not None:
            indices = np.asarray(self.indices)
            if indices.size and not np.issubdtype(indices.dtype, np.integer):
                raise StructuralError(f"index buffer must be integer, got {indices.dtype}")
            object.__setattr__(self, "indices", _readonly(indices.astype(np.int64).ravel()))

        transform = np.asarray(self.transform, dtype=np.float64)
        if transform.shape != (4, 4):
            raise ValueError(f"transform must be a 4x4 matrix, got {transform.shape}")
        object.__setattr__(self, "transform", _readonly(transform))

    @property
    def is_indexed(self) -> bool:
        return self.indices is not None

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    def with_transform(self, matrix: np.ndarray) -> "Submesh":
        """Return a copy placed under an extra world transform (applied last)."""
        return Submesh(
            vertices=self.vertices,
            indices=self.indices,
            transform=np.asarray(matrix, dtype=np.float64) @ self.transform,
            name=self.name,
        )


@dataclass(frozen=True)
class Scene:
    """An ordered collection of submeshes plus the source file size in bytes."""
    submeshes: Tuple[Submesh, ...] = ()
    file_size: int = 0

    def __post_init__(self):
        object.__setattr__(self, "submeshes", tuple(self.submeshes))
        if self.file_size < 0:
            raise ValueError(f"file_size must be non-negative, got {self.file_size}")

    def __iter__(self) -> Iterator[Submesh]:
        return iter(self.submeshes)

    def __len__(self) -> int:
        return len(self.submeshes)

    @property
    def is_empty(self) -> bool:
        return not self.submeshes or all(s.vertex_count == 0 for s in self.submeshes)

    def with_transform(self, matrix: np.ndarray) -> "Scene":
        """Return a new scene with every submesh placed under `matrix`."""
        return Scene(
            submeshes=tuple(s.with_transform(matrix) for s in self.submeshes),
            file_size=self.file_size,
        )

