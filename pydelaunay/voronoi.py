"""Voronoi cells built from the centroids of the Delaunay triangles."""

import typing
from dataclasses import dataclass, field

import numpy as np
from loguru import logger
from numpy.typing import NDArray

from pydelaunay.geometry import Point, mean_point
from pydelaunay.topology import Triangle

if typing.TYPE_CHECKING:
    from pydelaunay.delaunay import Triangulation

X_AXIS = Point(1.0, 0.0)


@dataclass
class Polygon:
    """Ordered points of one Voronoi cell."""

    points: list[Point] = field(default_factory=list)
    centroid: Point | None = None

    def ensure_centroid(self) -> Point | None:
        if self.centroid is None and self.points:
            self.centroid = mean_point(self.points)
        return self.centroid

    def sort_points_clockwise(self) -> "Polygon":
        """
        Sort the points by their angle around the centroid.

        The key is the signed angle from the x axis to ``point - centroid``, in
        ascending order: clockwise on a screen whose y axis points down.
        Points with equal angles keep their relative order.
        """
        centroid = self.ensure_centroid()
        if centroid is None:
            return self
        self.points.sort(key=lambda p: X_AXIS.signed_angle_to(p - centroid))
        return self

    def as_array(self) -> NDArray[np.floating]:
        return np.array([p.as_tuple() for p in self.points], dtype=float).reshape(-1, 2)

    def as_flat_list(self) -> list[float]:
        return [coord for p in self.points for coord in p]


def _cell_for(vertex: Point, triangles: list[Triangle]) -> Polygon:
    polygon = Polygon(
        [t.ensure_centroid() for t in triangles if t.has_point(vertex)]
    )
    return polygon.sort_points_clockwise()


def voronoi_cells(triangulation: "Triangulation") -> list[Polygon]:
    """
    One polygon per input point, in input order.

    Each cell is made of the centroids of the mesh triangles incident to the
    point. A point without any incident mesh triangle (one or two input points,
    collinear input) gets its cell from the triangles removed during
    finalization instead. Cells of hull points are open in a real Voronoi
    diagram and are built from whatever centroids exist.

    :param triangulation: a triangulation returned by ``triangulate``
    :return: list of polygons, one for each of ``triangulation.points``
    """
    mesh = triangulation.triangles()
    polygons = []
    for vertex in triangulation.points:
        polygon = _cell_for(vertex, mesh)
        if not polygon.points and triangulation.pruned:
            logger.debug(
                f"Point {vertex.as_tuple()} has no mesh triangle, using the pruned ones"
            )
            polygon = _cell_for(vertex, triangulation.pruned)
        polygons.append(polygon)
    return polygons
