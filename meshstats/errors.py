"""Errors and issue records produced while analysing a scene."""

from dataclasses import dataclass
from typing import Optional


# Issue kinds recorded on ModelStats.issues
STRUCTURAL = "structural"
EMPTY_INPUT = "empty_input"
NUMERIC_DEGENERACY = "numeric_degeneracy"


class MeshAnalysisError(Exception):
    """Base class for analysis failures."""
    pass


class StructuralError(MeshAnalysisError):
    """A submesh's index buffer or triangle soup cannot form whole triangles."""

    def __init__(self, message: str, submesh_index: Optional[int] = None):
        super().__init__(message)
        self.submesh_index = submesh_index

    def __str__(self):
        msg = super().__str__()
        if self.submesh_index is None:
            return msg
        return f"submesh {self.submesh_index}: {msg}"


class EmptyInputError(MeshAnalysisError):
    """The scene has no submeshes or no vertices."""
    pass


@dataclass(frozen=True)
class AnalysisIssue:
    """A recoverable problem noticed during analysis."""
    kind: str
    detail: str
    submesh_index: Optional[int] = None
