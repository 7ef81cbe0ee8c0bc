"""Tests for triangulation finalization (outer-triangle removal)."""

import numpy as np

from pydelaunay.bbox import BoundingRect
from pydelaunay.build import finalize_triangulation, triangulate
from pydelaunay.geometry import Point


BBOX = BoundingRect(Point(0.0, 0.0), Point(4.0, 4.0))


def grid_points(seed: int = 1) -> np.ndarray:
    # jittered so that no four points are cocircular
    x = np.linspace(0.5, 3.5, 4)
    xx, yy = np.meshgrid(x, x)
    rng = np.random.default_rng(seed)
    return np.column_stack([xx.ravel(), yy.ravel()]) + rng.uniform(-0.2, 0.2, size=(16, 2))


class TestFinalization:
    """Tests for finalization process."""

    def test_no_outer_vertices_in_finalized(self):
        """Test that outer-triangle vertices are completely removed after finalization."""
        tri = triangulate(grid_points(), BBOX)

        assert tri.finalized
        for t in tri.triangles():
            for outer_vertex in tri.outer_triangle.vertices:
                assert not t.has_point(outer_vertex)

    def test_pruned_triangles_touch_outer_triangle(self):
        tri = triangulate(grid_points(), BBOX)

        assert len(tri.pruned) > 0
        for t in tri.pruned:
            assert any(t.has_point(v) for v in tri.outer_triangle.vertices)

    def test_finalize_later(self):
        """Finalizing a kept triangulation gives the same mesh as finalizing right away."""
        points = grid_points()
        direct = triangulate(points, BBOX)
        deferred = triangulate(points, BBOX, finalize=False)

        assert not deferred.finalized
        n_before = len(deferred.triangles())
        finalize_triangulation(deferred)

        assert len(deferred.triangles()) + len(deferred.pruned) == n_before
        assert len(deferred.triangles()) == len(direct.triangles())

    def test_triangle_count_without_finalization(self):
        """With the outer triangle kept, n inserted vertices give 2n + 1 triangles."""
        points = grid_points()
        tri = triangulate(points, BBOX, finalize=False)
        assert len(tri.triangles()) == 2 * len(points) + 1

    def test_as_arrays_after_finalization(self):
        points = grid_points()
        tri = triangulate(points, BBOX)
        all_points, triangle_vertices = tri.as_arrays()

        np.testing.assert_array_equal(all_points, points)
        assert triangle_vertices.shape == (len(tri.triangles()), 3)
        assert triangle_vertices.min() >= 0
        assert triangle_vertices.max() < len(points)

    def test_as_arrays_before_finalization(self):
        points = grid_points()
        tri = triangulate(points, BBOX, finalize=False)
        all_points, triangle_vertices = tri.as_arrays()

        # outer-triangle vertices are appended after the input points
        assert all_points.shape == (len(points) + 3, 2)
        assert triangle_vertices.max() == len(points) + 2
        np.testing.assert_array_equal(all_points[: len(points)], points)
