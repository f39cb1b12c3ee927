import logging
from typing import Any, Optional

import matplotlib.pyplot as plt
import numpy as np
from mpl_toolkits.mplot3d.art3d import Line3DCollection, Poly3DCollection

from geometry.entities import TriangleMesh

logger = logging.getLogger("mesh_layout")


def plot_mesh(
    mesh: TriangleMesh,
    show_indices: bool = False,
    scatter: bool = False,
    ax=None,
    transparent: bool = False,
    draw_facets: bool = True,
    draw_edges: bool = False,
    facet_color: Any = None,
    edge_color: str = "k",
    title: Optional[str] = None,
    no_axes: bool = False,
    show: bool = True,
):
    """
    Visualize a triangle mesh in 3D using Matplotlib.

    Parameters
    ----------
    mesh :
        The :class:`~geometry.entities.TriangleMesh` to visualize.
    show_indices : bool, optional
        If ``True``, draw vertex indices next to each vertex.
    scatter : bool, optional
        If ``True``, draw vertices as red scatter points.
    ax : mpl_toolkits.mplot3d.Axes3D, optional
        Optional Matplotlib 3D axis. If omitted, a new figure and axis
        are created.
    transparent : bool, optional
        If ``True``, draw facets semi‑transparent.
    draw_facets : bool, optional
        If ``True`` (default), draw triangles as filled surfaces.
    draw_edges : bool, optional
        If ``True``, draw the unique mesh edges as line segments.
    facet_color :
        Facet color. If ``None``, a light blue color is used.
    edge_color : str, optional
        Edge color, ``"k"`` (black) by default.
    title : str, optional
        Axis title; defaults to ``"Mesh Layout"``.
    show : bool, optional
        If ``True`` (default), call :func:`matplotlib.pyplot.show` after
        drawing. Set to ``False`` when using non‑interactive backends
        or when the caller is responsible for displaying or saving the
        figure.

    Returns
    -------
    The axis that was drawn on, or ``None`` for an empty mesh.
    """
    if mesh.n_vertices == 0:
        logger.warning("Mesh has no vertices to visualize.")
        return None

    if ax is None:
        fig = plt.figure()
        ax = fig.add_subplot(111, projection="3d")

    positions = mesh.vertices
    X, Y, Z = positions[:, 0], positions[:, 1], positions[:, 2]

    if draw_facets and mesh.n_faces:
        # (F, 3, 3) array of triangle corners
        triangles = positions[mesh.faces]
        alpha = 0.4 if transparent else 1.0
        tri_collection = Poly3DCollection(
            list(triangles),
            alpha=alpha,
            edgecolor=edge_color if not draw_edges else "k",
            linewidths=0.5 if draw_edges else 0.0,
        )
        tri_collection.set_facecolor(
            facet_color if facet_color is not None else (0.6, 0.8, 1.0)
        )
        ax.add_collection3d(tri_collection)

    if draw_edges and mesh.n_faces:
        segments = positions[mesh.edges()]
        line_collection = Line3DCollection(
            list(segments), colors=edge_color, linewidths=0.5
        )
        ax.add_collection3d(line_collection)

    if scatter:
        ax.scatter(X, Y, Z, color="r", s=20)

    if show_indices:
        for i, pos in enumerate(positions):
            ax.text(*pos, f"{i}", color="k", fontsize=8)

    ax.set_xlabel("X")
    ax.set_ylabel("Y")
    ax.set_zlabel("Z")
    ax.set_title(title or "Mesh Layout")

    # Equal aspect ratio
    max_range = np.array(
        [X.max() - X.min(), Y.max() - Y.min(), Z.max() - Z.min()]
    ).max()
    if max_range == 0:
        max_range = 1.0
    mid_x = (X.max() + X.min()) * 0.5
    mid_y = (Y.max() + Y.min()) * 0.5
    mid_z = (Z.max() + Z.min()) * 0.5

    ax.set_xlim(mid_x - max_range / 2, mid_x + max_range / 2)
    ax.set_ylim(mid_y - max_range / 2, mid_y + max_range / 2)
    ax.set_zlim(mid_z - max_range / 2, mid_z + max_range / 2)

    if no_axes:
        ax.set_axis_off()

    plt.tight_layout()

    if show:
        plt.show()

    return ax
