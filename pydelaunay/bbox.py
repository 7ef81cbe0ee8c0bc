import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Self

import numpy as np
from numpy.typing import NDArray

from pydelaunay.geometry import Circle, Point, as_points
from pydelaunay.topology import Triangle
from pydelaunay.utils import Vec2d


@dataclass(frozen=True)
class BoundingRect:
    """Axis-aligned rectangle used to size the outer triangle. Frozen, the outer triangle is cached."""

    min: Point
    max: Point
    _outer_triangle: Triangle | None = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.max.x < self.min.x or self.max.y < self.min.y:
            raise ValueError(f"Invalid bounding rect: min={self.min} max={self.max}")

    def width(self) -> float:
        return self.max.x - self.min.x

    def height(self) -> float:
        return self.max.y - self.min.y

    def center(self) -> Point:
        return Point(self.min.x + self.width() * 0.5, self.min.y + self.height() * 0.5)

    def contains_point(self, point: Point) -> bool:
        return self.min.x <= point.x <= self.max.x and self.min.y <= point.y <= self.max.y

    def circumscribed_circle(self) -> Circle:
        center = self.center()
        return Circle(center, center.distance_to(self.min))

    def circumscribed_triangle(self) -> Triangle:
        """
        Triangle circumscribing the circle around the rectangle.

        With the circle (cx, cy, r) the base vertices are (cx -/+ sqrt(3) r, cy - r)
        and the apex is (cx, cy + 2r). The same triangle instance is returned on
        every call.
        """
        if self._outer_triangle is None:
            circle = self.circumscribed_circle()
            cx, cy = circle.center
            r = circle.radius
            root3_r = math.sqrt(3) * r

            outer = Triangle(
                Point(cx - root3_r, cy - r),
                Point(cx + root3_r, cy - r),
                Point(cx, cy + 2 * r),
            )
            object.__setattr__(self, "_outer_triangle", outer)
        return self._outer_triangle

    @classmethod
    def from_points(
        cls,
        points: Sequence[Point] | Sequence[Vec2d] | NDArray[np.floating],
        padding: float = 0.0,
    ) -> Self:
        """
        Tight rectangle around ``points``, grown by ``padding`` on every side.

        :param points: at least one point, in any form accepted by ``as_points``
        :param padding: margin added around the points
        """
        points = as_points(points)
        if not points:
            raise ValueError("Cannot build a bounding rect from no points")
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return cls(
            Point(min(xs) - padding, min(ys) - padding),
            Point(max(xs) + padding, max(ys) + padding),
        )
