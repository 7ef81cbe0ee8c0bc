"""Tests for the Voronoi cells (pydelaunay/voronoi.py)."""

import math

import numpy as np
import pytest

from pydelaunay.bbox import BoundingRect
from pydelaunay.build import triangulate
from pydelaunay.geometry import Point
from pydelaunay.voronoi import X_AXIS, Polygon

BBOX = BoundingRect(Point(0.0, 0.0), Point(100.0, 100.0))


def hexagon_with_center() -> list[Point]:
    ring = [
        Point(50.0 + 10.0 * math.cos(k * math.pi / 3), 50.0 + 10.0 * math.sin(k * math.pi / 3))
        for k in range(6)
    ]
    return [Point(50.0, 50.0), *ring]


def angles_around_centroid(polygon: Polygon) -> list[float]:
    centroid = polygon.ensure_centroid()
    return [X_AXIS.signed_angle_to(p - centroid) for p in polygon.points]


class TestPolygon:
    def test_sort_points_clockwise(self):
        polygon = Polygon([Point(-1, 0), Point(0, 1), Point(1, 0), Point(0, -1)])
        polygon.sort_points_clockwise()
        assert polygon.points == [Point(0, -1), Point(1, 0), Point(0, 1), Point(-1, 0)]

    def test_centroid_is_cached(self):
        polygon = Polygon([Point(0, 0), Point(2, 0), Point(2, 2), Point(0, 2)])
        centroid = polygon.ensure_centroid()
        assert centroid == Point(1.0, 1.0)
        polygon.points.append(Point(10, 10))
        assert polygon.ensure_centroid() is centroid

    def test_empty_polygon(self):
        polygon = Polygon()
        assert polygon.ensure_centroid() is None
        assert polygon.sort_points_clockwise().points == []
        assert polygon.as_array().shape == (0, 2)

    def test_array_views(self):
        polygon = Polygon([Point(1, 2), Point(3, 4)])
        np.testing.assert_array_equal(polygon.as_array(), [[1.0, 2.0], [3.0, 4.0]])
        assert polygon.as_flat_list() == [1, 2, 3, 4]


class TestVoronoiCells:
    def test_one_cell_per_input_point_in_input_order(self):
        points = hexagon_with_center()[::-1]
        tri = triangulate(points, BBOX)
        cells = tri.voronoi_cells()
        assert len(cells) == len(points)
        # the center is now the last input point and has the full cell
        assert len(cells[-1].points) == 6

    def test_center_cell_uses_incident_triangle_centroids(self):
        points = hexagon_with_center()
        tri = triangulate(points, BBOX)
        center_cell = tri.voronoi_cells()[0]

        expected = {t.ensure_centroid() for t in tri.triangles() if t.has_point(points[0])}
        assert set(center_cell.points) == expected

    def test_cells_are_sorted_by_angle(self):
        tri = triangulate(hexagon_with_center(), BBOX)
        for cell in tri.voronoi_cells():
            angles = angles_around_centroid(cell)
            assert angles == sorted(angles)

    def test_center_cell_is_regular_hexagon(self):
        tri = triangulate(hexagon_with_center(), BBOX)
        center_cell = tri.voronoi_cells()[0]
        assert center_cell.ensure_centroid().x == pytest.approx(50.0)
        assert center_cell.ensure_centroid().y == pytest.approx(50.0)
        for p in center_cell.points:
            # centroid of an equilateral triangle of side 10 seen from a vertex
            assert p.distance_to(Point(50.0, 50.0)) == pytest.approx(10.0 / math.sqrt(3))

    def test_cell_size_matches_incident_triangles(self):
        """Each cell has one point per mesh triangle around its generator."""
        rng = np.random.default_rng(17)
        points = rng.uniform(30.0, 70.0, size=(30, 2))
        tri = triangulate(points, BBOX)

        for vertex, cell in zip(tri.points, tri.voronoi_cells()):
            incident = [t for t in tri.triangles() if t.has_point(vertex)]
            if incident:
                assert len(cell.points) == len(incident)
                assert set(cell.points) == {t.ensure_centroid() for t in incident}

    def test_single_point_cell_comes_from_pruned_triangles(self):
        tri = triangulate([Point(5, 5)], BoundingRect(Point(0, 0), Point(10, 10)))
        (cell,) = tri.voronoi_cells()
        assert len(cell.points) == 3
        assert set(cell.points) == {t.ensure_centroid() for t in tri.pruned}
