"""Force-directed layout of closed triangle meshes in 3D.

Fruchterman, T. M., & Reingold, E. M. (1991). Graph drawing by force-directed
placement. Software: Practice and Experience, 21(11), 1129-1164.

Connected vertices attract with ``fa(x) = x**2 / k`` and every vertex pair
repels with ``fr(x) = k**2 / x``. Each iteration accumulates the forces into
a fresh displacement buffer, moves every vertex by at most ``temp`` per axis,
and lowers ``temp`` linearly towards zero.
"""

from __future__ import annotations

import logging
import math
import numbers
from typing import Callable, Optional

import numpy as np

from core.exceptions import DegenerateTopologyError, InvalidParameterError
from geometry.entities import TriangleMesh, as_face_array, as_vertex_array
from parameters.global_parameters import LayoutParameters
from runtime.forces import attractive_force, repulsive_force
from runtime.topology import check_closed_genus0, extract_edges

logger = logging.getLogger("mesh_layout")

IterationCallback = Callable[[int, float, np.ndarray], None]


def _validate_parameters(dist_opt, temp_start, n_iter) -> None:
    if (
        not isinstance(dist_opt, numbers.Real)
        or not math.isfinite(dist_opt)
        or not dist_opt > 0
    ):
        raise InvalidParameterError(
            "dist_opt", dist_opt, f"dist_opt must be a finite value > 0; got {dist_opt!r}"
        )
    if (
        not isinstance(temp_start, numbers.Real)
        or not math.isfinite(temp_start)
        or temp_start < 0
    ):
        raise InvalidParameterError(
            "temp_start",
            temp_start,
            f"temp_start must be a finite value >= 0; got {temp_start!r}",
        )
    if isinstance(n_iter, bool) or not isinstance(n_iter, numbers.Integral) or n_iter < 0:
        raise InvalidParameterError(
            "n_iter", n_iter, f"n_iter must be an integer >= 0; got {n_iter!r}"
        )


def temperature(i: int, temp_start: float, n_iter: int) -> float:
    """Temperature after iteration ``i``: ``temp_start - i * temp_start / n_iter``.

    Evaluated as ``temp_start * (1 - i / n_iter)`` so that ``i == 0`` gives
    exactly ``temp_start`` and ``i == n_iter`` gives exactly ``0``.
    """
    if n_iter <= 0:
        raise InvalidParameterError("n_iter", n_iter, "cooling requires n_iter > 0")
    return float(temp_start) * (1.0 - i / n_iter)


def cooling_schedule(temp_start: float, n_iter: int) -> np.ndarray:
    """Return the temperature each of the ``n_iter`` iterations runs at.

    Iteration 0 runs at ``temp_start``; iteration ``i > 0`` runs at the
    temperature set after iteration ``i - 1``.
    """
    temps = np.empty(n_iter, dtype=float)
    temp = float(temp_start)
    for i in range(n_iter):
        temps[i] = temp
        temp = temperature(i, temp_start, n_iter)
    return temps


def repulsive_displacement(
    positions: np.ndarray, dist_opt: float, out: Optional[np.ndarray] = None
) -> np.ndarray:
    """Accumulate the pairwise repulsion of all vertices.

    Every unordered pair ``(v, u)`` with ``v < u`` is visited once: ``v`` is
    pushed along ``pos[v] - pos[u]`` by ``fr(D, k)`` and ``u`` receives the
    exact negation. Coincident pairs (``D == 0``) contribute nothing.
    """
    n = len(positions)
    disp = np.zeros((n, 3), dtype=float) if out is None else out

    for vi in range(n - 1):
        delta = positions[vi] - positions[vi + 1 :]
        dist = np.linalg.norm(delta, axis=1)
        nonzero = dist != 0
        if not np.any(nonzero):
            continue
        d = dist[nonzero]
        push = delta[nonzero] / d[:, None] * repulsive_force(d, dist_opt)[:, None]
        disp[vi] += push.sum(axis=0)
        tail = disp[vi + 1 :]
        tail[nonzero] -= push

    return disp


def attractive_displacement(
    positions: np.ndarray,
    edges: np.ndarray,
    dist_opt: float,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Accumulate the attraction along every edge.

    For edge ``(v, u)`` the vertex ``v`` is pulled towards ``u`` by
    ``fa(D, k)`` and ``u`` towards ``v`` by the same amount. Zero-length
    edges contribute nothing.
    """
    disp = np.zeros((len(positions), 3), dtype=float) if out is None else out
    if len(edges) == 0:
        return disp

    vi = edges[:, 0]
    ui = edges[:, 1]
    delta = positions[vi] - positions[ui]
    dist = np.linalg.norm(delta, axis=1)
    nonzero = dist != 0
    if not np.any(nonzero):
        return disp

    d = dist[nonzero]
    pull = delta[nonzero] / d[:, None] * attractive_force(d, dist_opt)[:, None]
    # ufunc.at accumulates repeated indices in edge order
    np.subtract.at(disp, vi[nonzero], pull)
    np.add.at(disp, ui[nonzero], pull)
    return disp


def apply_displacement(
    positions: np.ndarray, disp: np.ndarray, temp: float
) -> np.ndarray:
    """Return ``positions`` moved along ``disp`` with each axis capped at ``temp``.

    Each axis moves by ``disp_axis / |disp| * min(temp, |disp_axis|)``; the
    cap applies per axis, not to the vector length. Vertices with zero
    displacement stay put.
    """
    new_positions = np.array(positions, dtype=float)
    norms = np.linalg.norm(disp, axis=1)
    moving = norms != 0
    if not np.any(moving):
        return new_positions

    d = disp[moving]
    step = d / norms[moving][:, None] * np.minimum(temp, np.abs(d))
    new_positions[moving] += step
    return new_positions


def layout_step(
    positions: np.ndarray, edges: np.ndarray, dist_opt: float, temp: float
) -> tuple[np.ndarray, np.ndarray]:
    """Run one iteration: repulsion, attraction and the capped move.

    Returns
    -------
    tuple[np.ndarray, np.ndarray]
        The moved positions and the displacement buffer that produced them.
    """
    disp = np.zeros((len(positions), 3), dtype=float)
    repulsive_displacement(positions, dist_opt, out=disp)
    attractive_displacement(positions, edges, dist_opt, out=disp)
    return apply_displacement(positions, disp, temp), disp


def layout_with_fr_3d(
    vertices,
    faces,
    dist_opt: float,
    temp_start: float,
    n_iter: int,
    callback: Optional[IterationCallback] = None,
) -> np.ndarray:
    """Lay out the vertices of a closed genus-0 triangle mesh.

    Parameters
    ----------
    vertices : array-like, shape (N, 3)
        Initial vertex positions, ``N >= 3``. Not modified.
    faces : array-like, shape (F, 3)
        0-based vertex indices of each triangle. Together the faces must
        form a closed genus-0 2-manifold.
    dist_opt : float
        Optimal distance between vertices (``k`` in the paper), ``> 0``.
    temp_start : float
        Upper limit of the per-axis displacement in the first iteration;
        decreases linearly for each step.
    n_iter : int
        Number of iterations, ``>= 0``. ``0`` returns a copy of ``vertices``.
    callback : callable, optional
        Called as ``callback(i, temp, positions)`` after each iteration with
        the temperature that iteration ran at and a copy of the positions.

    Returns
    -------
    np.ndarray
        New ``(N, 3)`` array of positions in the input row order.

    Raises
    ------
    InvalidParameterError
        For out-of-range ``dist_opt``, ``temp_start`` or ``n_iter``.
    VertexIndexError
        If a face references a vertex outside ``[0, N)``.
    DegenerateTopologyError
        If the mesh is empty or not a closed genus-0 triangulation.
    """
    _validate_parameters(dist_opt, temp_start, n_iter)

    positions = as_vertex_array(vertices)
    n_vertices = len(positions)
    if n_vertices < 3:
        raise DegenerateTopologyError(
            f"A closed triangle mesh needs at least 3 vertices; got {n_vertices}",
            n_vertices=n_vertices,
        )
    tri = as_face_array(faces, n_vertices)
    if len(tri) == 0:
        raise DegenerateTopologyError(
            "Mesh has no faces", n_vertices=n_vertices, n_edges=0, n_faces=0
        )

    edges = extract_edges(tri)
    check_closed_genus0(n_vertices, len(edges), len(tri))

    logger.info(
        "Fruchterman-Reingold layout: %d vertices, %d edges, %d faces "
        "(dist_opt=%g, temp_start=%g, n_iter=%d)",
        n_vertices,
        len(edges),
        len(tri),
        dist_opt,
        temp_start,
        n_iter,
    )

    temp = float(temp_start)
    for i in range(n_iter):
        positions, disp = layout_step(positions, edges, dist_opt, temp)
        logger.debug(
            "Iteration %d/%d: temp=%.6g, max |disp|=%.6g",
            i + 1,
            n_iter,
            temp,
            float(np.max(np.linalg.norm(disp, axis=1))),
            extra={"iteration": i + 1},
        )
        if callback is not None:
            callback(i, temp, positions.copy())
        temp = temperature(i, temp_start, n_iter)

    logger.info("Layout complete after %d iterations.", n_iter)
    return positions


def layout_mesh(
    mesh: TriangleMesh,
    params: Optional[LayoutParameters] = None,
    callback: Optional[IterationCallback] = None,
) -> TriangleMesh:
    """Apply :func:`layout_with_fr_3d` to ``mesh`` and return a new mesh.

    When ``params`` is omitted the mesh's own ``global_parameters`` are laid
    over the defaults.
    """
    if params is None:
        params = LayoutParameters(mesh.global_parameters)
    params.validate()

    new_vertices = layout_with_fr_3d(
        mesh.vertices,
        mesh.faces,
        params.dist_opt,
        params.temp_start,
        params.n_iter,
        callback=callback,
    )
    return mesh.with_vertices(new_vertices)


__all__ = [
    "temperature",
    "cooling_schedule",
    "repulsive_displacement",
    "attractive_displacement",
    "apply_displacement",
    "layout_step",
    "layout_with_fr_3d",
    "layout_mesh",
]
