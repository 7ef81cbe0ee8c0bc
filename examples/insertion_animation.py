"""Example: Record the incremental insertion and export it as a gif."""

import numpy as np

from pydelaunay.bbox import BoundingRect
from pydelaunay.build import triangulate


if __name__ == "__main__":
    rng = np.random.default_rng(0)
    points = rng.uniform(0.0, 1.0, size=(25, 2))
    bbox = BoundingRect.from_points(points, padding=0.05)

    tri = triangulate(points, bbox, debug=True)
    tri.export_animation_matplotlib("insertion.gif", fps=3)
    print(f"Wrote {len(tri.debug_plots)} frames to insertion.gif")
