"""Tests for plotting and animation export (pydelaunay/delaunay.py)."""

import pytest

matplotlib = pytest.importorskip("matplotlib")
matplotlib.use("Agg")

from pydelaunay.bbox import BoundingRect  # noqa: E402
from pydelaunay.build import triangulate  # noqa: E402
from pydelaunay.geometry import Point  # noqa: E402

BBOX = BoundingRect(Point(0.0, 0.0), Point(10.0, 10.0))
POINTS = [Point(1.0, 1.0), Point(9.0, 2.0), Point(5.0, 8.0), Point(4.0, 4.0)]


def test_plot_stores_a_frame():
    tri = triangulate(POINTS, BBOX)
    tri.plot(point_labels=True, voronoi=True)

    assert len(tri.debug_plots) == 1
    frame = tri.debug_plots[0]
    assert frame.ndim == 3
    assert frame.shape[2] == 3


def test_debug_records_one_frame_per_vertex():
    tri = triangulate(POINTS, BBOX, debug=True)
    assert len(tri.debug_plots) == len(POINTS)


def test_plot_with_outer_triangles():
    tri = triangulate(POINTS, BBOX, finalize=False)
    tri.plot(exclude_super_t=False)
    tri.plot(exclude_super_t=True, circumcircles=True)
    assert len(tri.debug_plots) == 2
    # circles drawn while plotting are cached on the triangles
    outer = tri.outer_triangle.vertices
    inner = [t for t in tri.triangles() if not any(t.has_point(v) for v in outer)]
    assert inner
    assert all(t.circumcircle is not None for t in inner)


def test_export_gif(tmp_path):
    tri = triangulate(POINTS, BBOX, debug=True)
    target = tmp_path / "insertion.gif"
    tri.export_animation_matplotlib(target, fps=4)
    assert target.exists()
    assert target.stat().st_size > 0


def test_export_without_frames():
    tri = triangulate(POINTS, BBOX)
    with pytest.raises(ValueError):
        tri.export_animation_matplotlib("out.gif")


def test_export_unsupported_format(tmp_path):
    tri = triangulate(POINTS, BBOX)
    tri.plot()
    with pytest.raises(ValueError):
        tri.export_animation_matplotlib(tmp_path / "out.avi")


def test_export_keeps_frames(tmp_path):
    tri = triangulate(POINTS, BBOX, debug=True)
    frames = list(tri.debug_plots)
    tri.export_animation_matplotlib(tmp_path / "insertion.gif")
    assert len(tri.debug_plots) == len(frames)
    assert all(a is b for a, b in zip(tri.debug_plots, frames))
