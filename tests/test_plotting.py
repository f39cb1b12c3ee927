import os
import sys

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from geometry.entities import TriangleMesh  # noqa: E402
from visualization.plotting import plot_mesh  # noqa: E402
from sample_meshes import CUBE_FACES, CUBE_VERTICES  # noqa: E402


def test_plot_mesh_draws_facets_edges_and_points():
    mesh = TriangleMesh(CUBE_VERTICES, CUBE_FACES)

    ax = plot_mesh(
        mesh, draw_edges=True, scatter=True, show_indices=True, show=False
    )
    try:
        # facets, edges and the scatter collection
        assert len(ax.collections) == 3
        assert len(ax.texts) == 8
        assert ax.get_title() == "Mesh Layout"
    finally:
        plt.close("all")


def test_plot_mesh_on_existing_axis():
    mesh = TriangleMesh(CUBE_VERTICES, CUBE_FACES)
    fig = plt.figure()
    ax = fig.add_subplot(111, projection="3d")

    try:
        out = plot_mesh(mesh, ax=ax, title="cube", no_axes=True, show=False)
        assert out is ax
        assert ax.get_title() == "cube"
    finally:
        plt.close(fig)


def test_plot_empty_mesh_returns_none(caplog):
    mesh = TriangleMesh([], [])

    assert plot_mesh(mesh, show=False) is None
    assert "no vertices" in caplog.text
