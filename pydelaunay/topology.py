from collections.abc import Iterable
from dataclasses import dataclass, field
from loguru import logger

from pydelaunay.errors import SharedEdgeError
from pydelaunay.geometry import Circle, Point, circumcircle, in_circumcircle, mean_point


@dataclass(frozen=True)
class Edge:
    """Segment between two triangle vertices. Direction is ignored by ``geometric_equals``."""

    start: Point
    end: Point

    def has_point(self, point: Point) -> bool:
        return self.start == point or self.end == point

    def reversed(self) -> "Edge":
        return Edge(self.end, self.start)

    def geometric_equals(self, other: "Edge") -> bool:
        return (self.start == other.start and self.end == other.end) or (
            self.start == other.end and self.end == other.start
        )

    def key(self) -> frozenset[Point]:
        """Unordered endpoint pair, equal for an edge and its reverse."""
        return frozenset((self.start, self.end))


@dataclass(eq=False)
class Triangle:
    """
    Triangle with vertices ``a``, ``b``, ``c`` in construction order.

    Triangles compare by identity so that two coincident triangles can live in
    the same working set; use ``geometric_equals`` to compare vertex sets.
    The circumcircle and the centroid are filled in on demand by
    ``ensure_circumcircle`` and ``ensure_centroid`` and never recomputed, so the
    vertices must not change after construction.
    """

    a: Point
    b: Point
    c: Point
    edges: tuple[Edge, Edge, Edge] = field(init=False)
    circumcircle: Circle | None = field(default=None, init=False)
    centroid: Point | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.edges = (Edge(self.a, self.b), Edge(self.b, self.c), Edge(self.c, self.a))

    def __repr__(self) -> str:
        return f"Triangle({self.a.as_tuple()}, {self.b.as_tuple()}, {self.c.as_tuple()})"

    @property
    def vertices(self) -> tuple[Point, Point, Point]:
        return self.a, self.b, self.c

    def ensure_circumcircle(self) -> Circle:
        if self.circumcircle is None:
            self.circumcircle = circumcircle(self.a, self.b, self.c)
        return self.circumcircle

    def ensure_centroid(self) -> Point:
        if self.centroid is None:
            self.centroid = mean_point(self.vertices)
        return self.centroid

    def circumcircle_contains(self, point: Point) -> bool:
        """Exact inclusive in-circle test, independent of the cached circle."""
        return in_circumcircle(self.a, self.b, self.c, point)

    def has_point(self, point: Point) -> bool:
        return self.a == point or self.b == point or self.c == point

    def has_edge(self, edge: Edge) -> bool:
        return any(e.geometric_equals(edge) for e in self.edges)

    def geometric_equals(self, other: "Triangle") -> bool:
        return self.has_point(other.a) and self.has_point(other.b) and self.has_point(other.c)

    def other_vertices(self, *points: Point) -> list[Point]:
        """Vertices of this triangle that are not among ``points``."""
        return [v for v in self.vertices if v not in points]


def unique_edges(edges: Iterable[Edge]) -> list[Edge]:
    """Keep the first instance of every undirected edge, preserving order."""
    seen: dict[frozenset[Point], Edge] = {}
    for edge in edges:
        seen.setdefault(edge.key(), edge)
    return list(seen.values())


def triangles_sharing_edge(triangles: Iterable[Triangle], edge: Edge) -> list[Triangle]:
    return [t for t in triangles if t.has_edge(edge)]


def collapse_duplicate_triangles(
    triangles: list[Triangle],
    edges: Iterable[Edge],
) -> list[Triangle]:
    """
    Remove pairs of coincident triangles that straddle the given edges.

    Fanning every illegal triangle around the new vertex creates the same
    triangle twice across each edge inside the cavity. For every edge, the
    triangles sharing it are looked up in the current list: when exactly two
    share it and they have the same vertices, both are dropped.

    :param triangles: working set after the cavity has been fanned
    :param edges: de-duplicated edges of the removed (illegal) triangles
    :return: a new list without the coincident pairs
    :raises SharedEdgeError: if more than two triangles share one edge
    """
    remaining = list(triangles)
    for edge in edges:
        sharing = triangles_sharing_edge(remaining, edge)
        if len(sharing) <= 1:
            continue
        if len(sharing) > 2:
            raise SharedEdgeError(
                f"Edge {edge.start.as_tuple()}-{edge.end.as_tuple()} is shared by {len(sharing)} triangles"
            )

        first, second = sharing
        if first.geometric_equals(second):
            logger.trace(f"Dropping duplicate triangle {first} across edge {edge.key()}")
            remaining = [t for t in remaining if t is not first and t is not second]

    return remaining
