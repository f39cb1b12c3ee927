"""Topology checking and mesh consistency functions."""

import logging

import numpy as np

from core.exceptions import DegenerateTopologyError

logger = logging.getLogger("mesh_layout")


def extract_edges(faces) -> np.ndarray:
    """Return the unique undirected edges bounding the triangles in ``faces``.

    Each face ``(a, b, c)`` contributes ``(a, b)``, ``(b, c)`` and ``(c, a)``,
    normalized to ``(min, max)`` so edges shared by adjacent faces collapse
    to one entry.

    Returns
    -------
    np.ndarray
        ``(E, 2)`` integer array sorted lexicographically by ``(min, max)``.
        The fixed order keeps the attraction pass summation reproducible.
    """
    tri = np.asarray(faces, dtype=np.int64).reshape(-1, 3)
    if len(tri) == 0:
        return np.empty((0, 2), dtype=np.int64)

    # (3F, 2): rows a-b, b-c, c-a for every face
    pairs = np.concatenate(
        [tri[:, [0, 1]], tri[:, [1, 2]], tri[:, [2, 0]]],
        axis=0,
    )
    pairs.sort(axis=1)
    return np.unique(pairs, axis=0)


def euler_characteristic(n_vertices: int, n_edges: int, n_faces: int) -> int:
    """Return ``V - E + F``."""
    return int(n_vertices) - int(n_edges) + int(n_faces)


def genus(n_vertices: int, n_edges: int, n_faces: int) -> float:
    """Genus of a closed orientable surface, ``g = 1 - (V - E + F) / 2``."""
    return 1 - 0.5 * euler_characteristic(n_vertices, n_edges, n_faces)


def check_closed_genus0(n_vertices: int, n_edges: int, n_faces: int) -> None:
    """Raise :class:`DegenerateTopologyError` unless counts fit a closed sphere.

    A closed triangulated 2-manifold has every edge shared by exactly two
    triangles, so ``2E == 3F``; genus 0 additionally requires
    ``V - E + F == 2``.
    """
    counts = dict(n_vertices=n_vertices, n_edges=n_edges, n_faces=n_faces)
    summary = (
        f"nV: {n_vertices}, nE: {n_edges}, nF: {n_faces}, "
        f"g = 1 - 0.5 * (nV - nE + nF) = {genus(n_vertices, n_edges, n_faces):g}"
    )

    if 2 * n_edges != 3 * n_faces:
        raise DegenerateTopologyError(
            "Mesh is not a closed triangulated 2-manifold "
            f"(expected nE == 3 * nF / 2). {summary}",
            **counts,
        )
    if euler_characteristic(n_vertices, n_edges, n_faces) != 2:
        raise DegenerateTopologyError(
            f"Mesh is not a 2-manifold with genus 0. {summary}",
            **counts,
        )
    logger.debug("Topology check passed: %s", summary)


__all__ = [
    "extract_edges",
    "euler_characteristic",
    "genus",
    "check_closed_genus0",
]
