"""Example: Delaunay mesh and Voronoi cells of random points.

Triangulates uniformly distributed points, prints a short summary and shows
the mesh with the Voronoi cells on top.
"""

import numpy as np

from pydelaunay.bbox import BoundingRect
from pydelaunay.build import triangulate
from pydelaunay.geometry import Point


def main():
    rng = np.random.default_rng(42)
    points = rng.uniform(10.0, 90.0, size=(60, 2))
    bbox = BoundingRect(Point(0.0, 0.0), Point(100.0, 100.0))

    tri = triangulate(points, bbox)
    print(f"Number of points: {len(tri.points)}")
    print(f"Number of triangles: {len(tri.triangles())}")

    cells = tri.voronoi_cells()
    sizes = [len(cell.points) for cell in cells]
    print(f"Voronoi cell sizes: min={min(sizes)} max={max(sizes)}")

    tri.plot(show=True, title="Delaunay mesh and Voronoi cells", voronoi=True)


if __name__ == "__main__":
    main()
