from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
from loguru import logger
from numpy.typing import NDArray

from pydelaunay.geometry import Point
from pydelaunay.topology import Triangle
from pydelaunay.voronoi import Polygon, voronoi_cells

ANIMATION_WRITERS = {".gif": "pillow", ".mp4": "ffmpeg"}


@dataclass
class Triangulation:
    points: list[Point]
    vertices: list[Point]
    outer_triangle: Triangle
    working_set: list[Triangle]
    pruned: list[Triangle] = field(default_factory=list)
    finalized: bool = False
    debug_plots: list[NDArray[np.floating]] = field(default_factory=list)

    def triangles(self) -> list[Triangle]:
        """The triangles of the mesh (still including the outer ones if not finalized)."""
        return list(self.working_set)

    def voronoi_cells(self) -> list[Polygon]:
        return voronoi_cells(self)

    def as_arrays(self) -> tuple[NDArray[np.floating], NDArray[np.integer]]:
        """
        Array form of the mesh.

        :return: distinct points of shape (N, 2) in input order and triangle
            vertex indices of shape (M, 3) into that array. Outer-triangle
            vertices of a non-finalized triangulation are appended after the
            input points.
        """
        sources = list(self.points)
        if not self.finalized:
            sources.extend(self.outer_triangle.vertices)

        index: dict[Point, int] = {}
        all_points = []
        for p in sources:
            if p not in index:
                index[p] = len(all_points)
                all_points.append(p.as_tuple())

        triangle_vertices = np.array(
            [[index[v] for v in t.vertices] for t in self.working_set], dtype=int
        ).reshape(-1, 3)
        return np.array(all_points, dtype=float).reshape(-1, 2), triangle_vertices

    def plot(
        self,
        show: bool = False,
        title: str = "Triangulation",
        point_labels: bool = False,
        exclude_super_t: bool = False,
        voronoi: bool = False,
        circumcircles: bool = False,
        fontsize: int = 7,
    ) -> None:
        """
        Plot the triangulation using matplotlib.

        :param show: Whether to call plt.show() after plotting
        :param title: Title of the plot
        :param point_labels: Whether to label points with their indices
        :param exclude_super_t: Whether to skip triangles touching the outer triangle
        :param voronoi: Whether to draw the Voronoi cells on top of the mesh
        :param circumcircles: Whether to draw the circumcircle of every drawn triangle
        :param fontsize: Font size for labels
        """
        import matplotlib.pyplot as plt
        from matplotlib.patches import Circle as CirclePatch

        fig, ax = plt.subplots()

        offset = 0.01  # Adjust as needed depending on your scale

        outer = self.outer_triangle.vertices
        for t in self.working_set:
            if exclude_super_t and any(t.has_point(v) for v in outer):
                continue
            pts = np.array([v.as_tuple() for v in t.vertices])
            tri_closed = np.vstack([pts, pts[0]])  # Close the triangle
            ax.plot(tri_closed[:, 0], tri_closed[:, 1], "b-", linewidth=1.0, alpha=0.6)
            if circumcircles:
                circle = t.ensure_circumcircle()
                ax.add_patch(
                    CirclePatch(circle.center.as_tuple(), circle.radius, fill=False, color="gray", linewidth=0.5)
                )

        if voronoi:
            for cell in self.voronoi_cells():
                if len(cell.points) < 2:
                    continue
                pts = cell.as_array()
                cell_closed = np.vstack([pts, pts[0]])
                ax.plot(cell_closed[:, 0], cell_closed[:, 1], "r-", linewidth=1.0)

        # Draw points
        if self.points:
            all_points = np.array([p.as_tuple() for p in self.points])
            ax.plot(all_points[:, 0], all_points[:, 1], "ko", markersize=5, zorder=11)

            if point_labels:
                for idx, (x, y) in enumerate(all_points):
                    ax.text(
                        x + offset,
                        y + offset,
                        str(idx),
                        fontsize=fontsize,
                        ha="left",
                        va="bottom",
                        color="darkgreen",
                    )

        ax.set_aspect("equal")
        ax.set_title(title)

        if show:
            plt.show()

        # Convert figure to RGB image in memory
        fig.canvas.draw()
        buf = fig.canvas.buffer_rgba()  # type: ignore[reportAttributeAccessIssue]
        img = np.asarray(buf)[:, :, :3]  # Convert to RGB by discarding alpha
        plt.close(fig)
        self.debug_plots.append(img)

    def export_animation_matplotlib(self, filepath: str | Path, fps: int = 2) -> None:
        """
        Write the frames stored in ``debug_plots`` as an animation, one frame
        per ``plot`` call, with a step counter in the corner.

        :param filepath: output file, ``.gif`` (pillow) or ``.mp4`` (ffmpeg)
        :param fps: frames per second
        """
        filepath = Path(filepath)
        writer = ANIMATION_WRITERS.get(filepath.suffix)
        if writer is None:
            raise ValueError(
                f"Unsupported animation format {filepath.suffix!r}, use one of {sorted(ANIMATION_WRITERS)}"
            )
        if not self.debug_plots:
            raise ValueError("No frames recorded: call plot() or triangulate with debug=True first")

        import matplotlib.pyplot as plt
        from matplotlib.animation import ArtistAnimation

        fig, ax = plt.subplots()
        ax.axis("off")
        n_frames = len(self.debug_plots)
        frames = [
            [
                ax.imshow(frame, animated=True),
                ax.text(0.01, 0.01, f"{step}/{n_frames}", transform=ax.transAxes, fontsize=8),
            ]
            for step, frame in enumerate(self.debug_plots, start=1)
        ]

        anim = ArtistAnimation(fig, frames, interval=1000 / fps, blit=True)
        anim.save(filepath, fps=fps, writer=writer)
        plt.close(fig)
        logger.debug(f"Wrote {n_frames} frame(s) to {filepath}")
