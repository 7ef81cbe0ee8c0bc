import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum, auto

import numpy as np
from numpy.typing import NDArray
from shewchuk import incircle_test, orientation

from pydelaunay.errors import DegenerateTriangleError
from pydelaunay.utils import DEGENERACY_EPS, Vec2d


@dataclass(frozen=True)
class Point:
    """
    Immutable 2D coordinate.

    Equality is exact coordinate equality. Iterating a point yields ``x`` and
    ``y`` so it can be unpacked straight into the predicates of ``shewchuk``.
    """

    x: float
    y: float

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: "Point") -> "Point":
        return self.add(other)

    def __sub__(self, other: "Point") -> "Point":
        return self.subtract(other)

    def as_tuple(self) -> tuple[float, float]:
        return self.x, self.y

    def add(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def subtract(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def dot(self, other: "Point") -> float:
        return self.x * other.x + self.y * other.y

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def distance_to(self, other: "Point") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return math.sqrt(dx * dx + dy * dy)

    def normalize(self) -> "Point":
        """Unit vector with the same direction; the zero vector stays zero."""
        length = self.length()
        if length == 0:
            return Point(0.0, 0.0)
        return Point(self.x / length, self.y / length)

    def signed_angle_to(self, other: "Point") -> float:
        """
        Signed angle in (-pi, pi] rotating this vector onto ``other``.

        Positive values are counterclockwise in a y-up frame.
        """
        v1 = self.normalize()
        v2 = other.normalize()
        return math.atan2(v1.x * v2.y - v1.y * v2.x, v1.x * v2.x + v1.y * v2.y)


def as_points(points: Sequence[Point] | Sequence[Vec2d] | NDArray[np.floating]) -> list[Point]:
    """
    Convert the accepted point inputs into a list of ``Point``.

    :param points: sequence of ``Point``, sequence of ``(x, y)`` pairs or an array of shape (N, 2)
    :return: list of points, same order as the input
    """
    if isinstance(points, np.ndarray):
        if points.ndim != 2 or points.shape[1] != 2:
            raise ValueError(f"Expected an array of shape (N, 2), got {points.shape}")
        return [Point(float(x), float(y)) for x, y in points]

    converted = []
    for p in points:
        if isinstance(p, Point):
            converted.append(p)
        else:
            x, y = p
            converted.append(Point(float(x), float(y)))
    return converted


@dataclass(frozen=True)
class Circle:
    center: Point
    radius: float

    def contains_point(self, point: Point) -> bool:
        # boundary counts as inside
        return self.center.distance_to(point) <= self.radius


class PointInTriangle(Enum):
    vertex = auto()
    edge = auto()
    inside = auto()
    outside = auto()


def is_point_in_box(a: Point, b: Point, p: Point) -> bool:
    # check if p is within the bounding box of [a, b]
    return min(a.x, b.x) <= p.x <= max(a.x, b.x) and min(a.y, b.y) <= p.y <= max(a.y, b.y)


def point_inside_triangle(
    triangle: Sequence[Point],
    point: Point,
) -> PointInTriangle:
    """
    Classify a point relative to a triangle using Shewchuk's exact orientation predicate.

    Parameters
    ----------
    triangle : Sequence[Point]
        The three triangle vertices [A, B, C].
    point : Point
        The query point.

    Returns
    -------
    PointInTriangle
        Classification (inside, edge, vertex, outside)
    """
    a, b, c = triangle

    if point in (a, b, c):
        return PointInTriangle.vertex

    # Exact orientation results: -1, 0 (collinear), +1
    o1 = orientation(*a, *b, *point)
    o2 = orientation(*b, *c, *point)
    o3 = orientation(*c, *a, *point)

    # On an edge: collinear with it and inside its bounding box
    if o1 == 0 and is_point_in_box(a, b, point):
        return PointInTriangle.edge
    if o2 == 0 and is_point_in_box(b, c, point):
        return PointInTriangle.edge
    if o3 == 0 and is_point_in_box(c, a, point):
        return PointInTriangle.edge

    # Same sign on all three edges, whatever the winding of the triangle
    if (o1 > 0 and o2 > 0 and o3 > 0) or (o1 < 0 and o2 < 0 and o3 < 0):
        return PointInTriangle.inside

    return PointInTriangle.outside


def orient2d(pa: Point, pb: Point, pc: Point) -> float:
    """
    Twice the signed area of the triangle (pa, pb, pc).
    Returns > 0 if points are in counterclockwise order
    Returns < 0 if points are in clockwise order
    Returns = 0 if points are collinear
    """
    detleft = (pa.x - pc.x) * (pb.y - pc.y)
    detright = (pa.y - pc.y) * (pb.x - pc.x)
    return detleft - detright


def ensure_ccw(a: Point, b: Point, c: Point) -> tuple[Point, Point, Point]:
    """Triangle vertices in counterclockwise order"""
    if orient2d(a, b, c) < 0:
        return a, c, b
    return a, b, c


def in_circumcircle(a: Point, b: Point, c: Point, point: Point) -> bool:
    """
    Exact test for ``point`` lying inside or on the circle through a, b, c.

    The vertices may come in either winding; they are put in counterclockwise
    order so that shewchuk's ``incircle_test`` is positive inside the circle.
    """
    a, b, c = ensure_ccw(a, b, c)
    return incircle_test(*point, *a, *b, *c) >= 0


def circumcircle(a: Point, b: Point, c: Point) -> Circle:
    """
    Circle through the three points.

    The center is the intersection of the perpendicular bisectors of ab and
    ac; the radius is measured to ``a``.

    :raises DegenerateTriangleError: if the points are collinear or repeated
    """
    a1 = 2 * (b.x - a.x)
    b1 = 2 * (b.y - a.y)
    c1 = a.x * a.x - b.x * b.x + a.y * a.y - b.y * b.y
    a2 = 2 * (c.x - a.x)
    b2 = 2 * (c.y - a.y)
    c2 = a.x * a.x - c.x * c.x + a.y * a.y - c.y * c.y

    d = a1 * b2 - a2 * b1
    # d is 4 * |ab| * |ac| * sin(angle at a)
    scale = 4 * a.distance_to(b) * a.distance_to(c)
    if scale == 0 or abs(d) <= DEGENERACY_EPS * scale:
        raise DegenerateTriangleError(
            f"Cannot compute the circumcircle of collinear points {a}, {b}, {c}"
        )

    center = Point((b1 * c2 - b2 * c1) / d, (c1 * a2 - c2 * a1) / d)
    return Circle(center, center.distance_to(a))


def mean_point(points: Sequence[Point]) -> Point:
    n = len(points)
    return Point(sum(p.x for p in points) / n, sum(p.y for p in points) / n)
