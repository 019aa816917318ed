"""Tests for edge incidence and watertightness."""

import numpy as np
import trimesh

from meshstats.manifold import EdgeReport, check_submesh, combine_reports, edge_incidence, is_watertight
from meshstats.scene import Scene, Submesh
from tests.conftest import (CUBE_FACES, CUBE_VERTICES, cube_submesh, open_box_submesh,
                            plane_submesh, soup_submesh, trimesh_submesh)


class TestEdgeIncidence:
    """Test undirected edge counting."""

    def test_cube_edges_used_twice(self):
        """A closed cube has 18 edges, each used by exactly two triangles."""
        edges, counts = edge_incidence(CUBE_FACES)
        assert len(edges) == 18
        assert np.all(counts == 2)

    def test_edges_normalised(self):
        """(a, b) and (b, a) are the same edge, smaller index first."""
        edges, counts = edge_incidence([0, 1, 2, 1, 0, 3])
        assert [0, 1] in edges.tolist()
        assert [1, 0] not in edges.tolist()
        assert counts[edges.tolist().index([0, 1])] == 2

    def test_empty_index_buffer(self):
        """No triangles, no edges."""
        edges, counts = edge_incidence(np.array([], dtype=np.int64))
        assert edges.shape == (0, 2)
        assert counts.shape == (0,)


class TestSubmeshCheck:
    """Test per-submesh verdicts."""

    def test_cube_is_watertight(self):
        """Closed cube passes."""
        report = check_submesh(cube_submesh())
        assert report == EdgeReport(watertight=True, boundary_edges=0, non_manifold_edges=0)

    def test_open_box_has_boundary(self):
        """Missing top face leaves four boundary edges."""
        report = check_submesh(open_box_submesh())
        assert report.watertight is False
        assert report.boundary_edges == 4
        assert report.non_manifold_edges == 0

    def test_non_manifold_edge(self):
        """An edge shared by three triangles is non-manifold."""
        vertices = np.random.default_rng(0).random((5, 3))
        sub = Submesh(vertices, [0, 1, 2, 1, 0, 3, 0, 1, 4])
        report = check_submesh(sub)
        assert report.watertight is False
        assert report.non_manifold_edges == 1

    def test_soup_is_unknown(self):
        """Triangle soups cannot be checked."""
        assert check_submesh(soup_submesh()).watertight is None

    def test_indexed_without_triangles_is_unknown(self):
        """An indexed submesh with no triangles has nothing to verify."""
        sub = Submesh(CUBE_VERTICES, np.array([], dtype=np.int64))
        assert check_submesh(sub).watertight is None

    def test_winding_does_not_matter(self):
        """Flipped winding is still watertight."""
        sub = Submesh(CUBE_VERTICES, CUBE_FACES[:, ::-1].ravel())
        assert check_submesh(sub).watertight is True

    def test_icosphere(self):
        """trimesh's icosphere is closed."""
        sub = trimesh_submesh(trimesh.creation.icosphere(subdivisions=2))
        assert check_submesh(sub).watertight is True


class TestSceneVerdict:
    """Test scene-level watertightness."""

    def test_single_cube(self):
        assert is_watertight(Scene((cube_submesh(),)))

    def test_one_open_submesh_fails_scene(self):
        """Any open indexed submesh makes the scene not watertight."""
        assert not is_watertight(Scene((cube_submesh(), plane_submesh())))

    def test_soup_beside_indexed_does_not_invalidate(self):
        """Soups next to closed indexed submeshes are ignored."""
        assert is_watertight(Scene((cube_submesh(), soup_submesh())))

    def test_all_soup_is_not_watertight(self):
        """Scenes with no indexed submesh are reported not watertight."""
        assert not is_watertight(Scene((soup_submesh(), soup_submesh())))

    def test_empty_scene_is_not_watertight(self):
        assert not is_watertight(Scene())

    def test_combine_sums_edges(self):
        """Combining reports ANDs verdicts and sums edge counts."""
        total = combine_reports([
            EdgeReport(True),
            EdgeReport(None),
            EdgeReport(False, boundary_edges=4, non_manifold_edges=1),
        ])
        assert total == EdgeReport(False, 4, 1)
