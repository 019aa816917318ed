"""Shared test fixtures, geometry builders, and tolerance helpers."""

from copy import deepcopy

import numpy as np
import pytest
import trimesh

from meshstats.config import load_config, DEFAULT_CONFIG_PATH
from meshstats.scene import Scene, Submesh


# ---------------------------------------------------------------------------
# Tolerance helpers
# ---------------------------------------------------------------------------

def assert_close(actual: float, expected: float, rel: float = 1e-9, abs_tol: float = 1e-9,
                 what: str = "value"):
    """Assert that two floats agree within a relative / absolute tolerance."""
    assert abs(actual - expected) <= max(rel * abs(expected), abs_tol), (
        f"{what}: {actual!r} differs from expected {expected!r}"
    )


def assert_finite_stats(stats):
    """Assert that no numeric field of a ModelStats is NaN or infinite."""
    values = [stats.volume, stats.surface_area, *stats.dimensions,
              *stats.bounding_box.min_corner, *stats.bounding_box.max_corner]
    assert all(np.isfinite(v) for v in values), f"Non-finite value in {stats}"


# ---------------------------------------------------------------------------
# Geometry builders
# ---------------------------------------------------------------------------

CUBE_VERTICES = np.array([
    [0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0],
    [0, 0, 1], [1, 0, 1], [1, 1, 1], [0, 1, 1],
], dtype=float)

# Outward winding; the last two triangles are the top face
CUBE_FACES = np.array([
    [0, 2, 1], [0, 3, 2],   # bottom (-z)
    [0, 1, 5], [0, 5, 4],   # front  (-y)
    [3, 7, 6], [3, 6, 2],   # back   (+y)
    [0, 4, 7], [0, 7, 3],   # left   (-x)
    [1, 2, 6], [1, 6, 5],   # right  (+x)
    [4, 5, 6], [4, 6, 7],   # top    (+z)
])


def cube_submesh(transform=None, name="cube") -> Submesh:
    """Indexed unit cube spanning [0, 1]^3."""
    return Submesh(CUBE_VERTICES, CUBE_FACES.ravel(),
                   np.eye(4) if transform is None else transform, name=name)


def open_box_submesh() -> Submesh:
    """The unit cube with its top face removed (10 triangles)."""
    return Submesh(CUBE_VERTICES, CUBE_FACES[:10].ravel(), name="open_box")


def soup_submesh(faces=CUBE_FACES, vertices=CUBE_VERTICES, name="soup") -> Submesh:
    """Un-indexed triangle soup with one vertex triple per triangle."""
    return Submesh(vertices[np.asarray(faces)].reshape(-1, 3), None, name=name)


def plane_submesh(size: float = 2.0) -> Submesh:
    """Open square in the z=0 plane made of two triangles."""
    vertices = np.array([[0, 0, 0], [size, 0, 0], [size, size, 0], [0, size, 0]], dtype=float)
    return Submesh(vertices, [0, 1, 2, 0, 2, 3], name="plane")


def trimesh_submesh(mesh: trimesh.Trimesh, name: str = "") -> Submesh:
    return Submesh(mesh.vertices, mesh.faces.ravel(), name=name)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def default_config():
    """Load the default configuration (session-scoped, loaded once)."""
    return load_config(DEFAULT_CONFIG_PATH)


@pytest.fixture
def config(default_config):
    """Per-test copy of the default configuration that tests may modify."""
    return deepcopy(default_config)


@pytest.fixture
def cube_scene():
    """One indexed, outward-wound unit cube."""
    return Scene((cube_submesh(),), file_size=1024)


@pytest.fixture
def open_box_scene():
    """Unit cube missing its top face."""
    return Scene((open_box_submesh(),), file_size=512)


@pytest.fixture
def sphere_submesh():
    """Closed icosphere of radius 1."""
    return trimesh_submesh(trimesh.creation.icosphere(subdivisions=2, radius=1.0), "sphere")
