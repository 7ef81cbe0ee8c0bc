from collections.abc import Sequence
from dataclasses import replace

import numpy as np
from loguru import logger
from numpy.typing import NDArray

from pydelaunay.bbox import BoundingRect
from pydelaunay.delaunay import Triangulation
from pydelaunay.errors import (
    DegenerateTriangleError,
    InsufficientPointsError,
    PointOutsideBoundsError,
)
from pydelaunay.geometry import Point, PointInTriangle, as_points, point_inside_triangle
from pydelaunay.topology import Triangle, collapse_duplicate_triangles, unique_edges
from pydelaunay.utils import Vec2d

PointsInput = Sequence[Point] | Sequence[Vec2d] | NDArray[np.floating]


def get_sorted_points(points: Sequence[Point]) -> list[Point]:
    """
    Order points by x coordinate for insertion.

    Only the running time depends on this order, not the resulting mesh.
    The sort is stable, so points sharing an x coordinate keep their input order.
    """
    return sorted(points, key=lambda p: p.x)


def _check_inside_outer_triangle(points: Sequence[Point], outer: Triangle) -> None:
    for p in points:
        if point_inside_triangle(outer.vertices, p) != PointInTriangle.inside:
            raise PointOutsideBoundsError(
                f"Point {p.as_tuple()} is not strictly inside the outer triangle "
                f"{outer}; enlarge the bounding rect"
            )


def _check_point_count(points: Sequence[Point], strict: bool) -> None:
    if not points:
        raise InsufficientPointsError("Cannot triangulate an empty point set")

    n_distinct = len(set(points))
    if n_distinct < 3:
        if strict:
            raise InsufficientPointsError(
                f"At least 3 distinct points are needed, got {n_distinct}"
            )
        logger.warning(
            f"Only {n_distinct} distinct point(s): the mesh will have no triangles"
        )


def initialize_triangulation(points: Sequence[Point], bbox: BoundingRect) -> Triangulation:
    """
    Initialize the triangulation with the outer triangle of ``bbox``.

    :param points: input points, in caller order
    :param bbox: rectangle whose circumscribed triangle must strictly contain every point
    :return: triangulation whose only triangle is the outer one
    :raises PointOutsideBoundsError: if a point is not strictly inside the outer triangle
    """
    outer_triangle = bbox.circumscribed_triangle()
    _check_inside_outer_triangle(points, outer_triangle)

    # a fresh triangle so the cached one on bbox is never part of a mesh
    first = Triangle(*outer_triangle.vertices)
    return Triangulation(
        points=list(points),
        vertices=[],
        outer_triangle=outer_triangle,
        working_set=[first],
    )


def find_illegal_triangles(triangles: Sequence[Triangle], vertex: Point) -> list[Triangle]:
    """Triangles whose circumcircle contains ``vertex``, boundary included (exact predicate)."""
    return [t for t in triangles if t.circumcircle_contains(vertex)]


def insert_vertex(triangles: Sequence[Triangle], vertex: Point) -> list[Triangle]:
    """
    Insert one vertex, Bowyer-Watson style.

    Every illegal triangle (a, b, c) is replaced by the fan (a, b, v),
    (b, c, v), (c, a, v). Edges inside the cavity then carry two copies of the
    same fan triangle, which ``collapse_duplicate_triangles`` removes, leaving
    the cavity boundary connected to the new vertex.

    :param triangles: current working set
    :param vertex: vertex to insert
    :return: the new working set
    """
    illegal = find_illegal_triangles(triangles, vertex)
    illegal_ids = {id(t) for t in illegal}
    logger.debug(f"Vertex {vertex.as_tuple()}: {len(illegal)} illegal triangle(s)")

    next_triangles = [t for t in triangles if id(t) not in illegal_ids]
    illegal_edges = []
    for t in illegal:
        illegal_edges.extend(t.edges)
        next_triangles.extend(
            (
                Triangle(t.a, t.b, vertex),
                Triangle(t.b, t.c, vertex),
                Triangle(t.c, t.a, vertex),
            )
        )

    return collapse_duplicate_triangles(next_triangles, unique_edges(illegal_edges))


def insert_point(
    triangulation: Triangulation,
    point: Point,
    inserted: set[Point],
    debug: bool = False,
) -> Triangulation:
    """
    Insert a point into the triangulation.

    :param triangulation: triangulation to update in place
    :param point: point to insert
    :param inserted: points already inserted, updated in place
    :param debug: store a plot of the triangulation after the insertion
    """
    if point in inserted:
        # Point coincides with an existing vertex -> nothing to do
        logger.debug(f"Point {point.as_tuple()} is already a vertex, not adding it again")
        return triangulation

    triangulation.working_set = insert_vertex(triangulation.working_set, point)
    triangulation.vertices.append(point)
    inserted.add(point)

    if debug:
        triangulation.plot(
            exclude_super_t=True,
            title=f"After inserting {point.as_tuple()}",
        )
    return triangulation


def finalize_triangulation(triangulation: Triangulation, strict: bool = False) -> Triangulation:
    """
    Remove the triangles that still use a vertex of the outer triangle.

    The removed triangles are kept in ``triangulation.pruned``.

    :param triangulation: triangulation to modify in place
    :param strict: raise instead of warning when nothing is left
    :raises DegenerateTriangleError: in strict mode, if no triangle survives
    """
    triangles = triangulation.working_set
    pruned = []
    for outer_vertex in triangulation.outer_triangle.vertices:
        pruned.extend(t for t in triangles if t.has_point(outer_vertex))
        triangles = [t for t in triangles if not t.has_point(outer_vertex)]

    logger.debug(f"Removed {len(pruned)} triangle(s) touching the outer triangle")
    triangulation.working_set = triangles
    triangulation.pruned = pruned
    triangulation.finalized = True

    if not triangles:
        message = "No triangle left after removing the outer triangle: the input points are collinear or too few"
        if strict:
            raise DegenerateTriangleError(message)
        logger.warning(message)

    return triangulation


def _insert_all(
    triangulation: Triangulation,
    points: list[Point],
    sort_vertices: bool,
    debug: bool,
) -> None:
    ordered = get_sorted_points(points) if sort_vertices else points
    inserted = set(triangulation.vertices)
    for point in ordered:
        insert_point(triangulation, point, inserted, debug=debug)


def triangulate(
    points: PointsInput,
    bbox: BoundingRect,
    *,
    sort_vertices: bool = True,
    finalize: bool = True,
    strict: bool = False,
    debug: bool = False,
) -> Triangulation:
    """
    Delaunay triangulation of ``points`` by incremental insertion.

    :param points: input points (``Point`` objects, ``(x, y)`` pairs or an (N, 2) array)
    :param bbox: rectangle whose circumscribed triangle strictly contains every point
    :param sort_vertices: insert the points by increasing x
    :param finalize: remove the triangles touching the outer triangle
    :param strict: fail on fewer than 3 distinct points or an empty mesh
    :param debug: record one plot per inserted point in ``debug_plots``
    :return: the triangulation
    """
    points = as_points(points)
    _check_point_count(points, strict)

    triangulation = initialize_triangulation(points, bbox)
    _insert_all(triangulation, points, sort_vertices, debug)

    if finalize:
        finalize_triangulation(triangulation, strict=strict)

    logger.info(
        f"Triangulated {len(triangulation.vertices)} vertices into {len(triangulation.working_set)} triangles"
    )
    return triangulation


def update_triangulation(
    triangulation: Triangulation,
    points: PointsInput,
    *,
    sort_vertices: bool = True,
    finalize: bool = True,
    strict: bool = False,
    debug: bool = False,
) -> Triangulation:
    """
    Add points to a triangulation created with ``finalize=False``.

    The new points must lie inside the same outer triangle. The points are
    inserted into a copy of the mesh, which replaces the state of
    ``triangulation`` only once every step has succeeded: a failing call leaves
    ``triangulation`` as it was.

    :param triangulation: non-finalized triangulation, modified in place
    :param points: points to add
    :param sort_vertices: insert the new points by increasing x
    :param finalize: remove the triangles touching the outer triangle afterwards
    :param strict: see ``triangulate``
    :param debug: record one plot per inserted point
    :return: the updated triangulation
    """
    if triangulation.finalized:
        raise ValueError("Cannot add points to a finalized triangulation")

    points = as_points(points)
    _check_inside_outer_triangle(points, triangulation.outer_triangle)
    all_points = [*triangulation.points, *points]
    _check_point_count(all_points, strict)
    staged = replace(
        triangulation,
        points=all_points,
        vertices=list(triangulation.vertices),
        working_set=list(triangulation.working_set),
        pruned=list(triangulation.pruned),
        debug_plots=list(triangulation.debug_plots),
    )
    _insert_all(staged, points, sort_vertices, debug)
    if finalize:
        finalize_triangulation(staged, strict=strict)

    triangulation.points = staged.points
    triangulation.vertices = staged.vertices
    triangulation.working_set = staged.working_set
    triangulation.pruned = staged.pruned
    triangulation.finalized = staged.finalized
    triangulation.debug_plots = staged.debug_plots

    logger.info(
        f"Triangulation now has {len(triangulation.vertices)} vertices and {len(triangulation.working_set)} triangles"
    )
    return triangulation
